"""Content hashing for Sandman.

This module provides:
- SHA-256 digests of files and byte strings, hex-lowercase encoded
"""

import hashlib
from pathlib import Path

HASH_BLOCK_SIZE = 64 * 1024  # 64 KiB
DIGEST_HEX_LENGTH = 64


def compute_bytes_hash(data: bytes) -> str:
    """Compute SHA-256 hash of a byte string.

    Args:
        data: Bytes to hash.

    Returns:
        Hexadecimal SHA-256 hash string.
    """
    return hashlib.sha256(data).hexdigest()


def compute_file_hash(path: Path | str) -> str:
    """Compute SHA-256 hash of a file.

    Reads the file in blocks so large files are never held in memory.

    Args:
        path: Path to the file to hash.

    Returns:
        Hexadecimal SHA-256 hash string.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    hasher = hashlib.sha256()
    with open(path, "rb") as f:
        for block in iter(lambda: f.read(HASH_BLOCK_SIZE), b""):
            hasher.update(block)
    return hasher.hexdigest()


def is_valid_digest(value: object) -> bool:
    """Check that a value looks like a hex-lowercase SHA-256 digest."""
    if not isinstance(value, str) or len(value) != DIGEST_HEX_LENGTH:
        return False
    return all(c in "0123456789abcdef" for c in value)
