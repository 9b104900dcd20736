"""Shared helpers for reading uploaded files."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path, PurePath
import hashlib

from loan_recon.config import SETTINGS
from loan_recon.domain.errors import UnsupportedFormatError


def ensure_bytes(source: BytesIO | Path | bytes) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, BytesIO):
        return source.getvalue()
    if isinstance(source, Path):
        return source.read_bytes()
    raise TypeError(f"Unsupported source type: {type(source)!r}")


def compute_file_hash(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def resolve_extension(format_hint: str) -> str:
    """Return the lower-case format key for a file name or bare extension.

    ``"Lendings.CSV"``, ``".csv"`` and ``"csv"`` all resolve to ``"csv"``.
    """
    hint = (format_hint or "").strip()
    suffix = PurePath(hint).suffix
    extension = (suffix or hint).lstrip(".").lower()
    if extension not in SETTINGS.supported_extensions:
        raise UnsupportedFormatError(extension, SETTINGS.supported_extensions)
    return extension
