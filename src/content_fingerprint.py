"""
Content fingerprints for optimistic locking and trace ranges.

Digests are SHA-256 over the UTF-8 encoding of the content, hex encoded.
A file that does not exist has no fingerprint (None), which is a valid
precondition for a first write rather than an error.
"""

import hashlib
from pathlib import Path
from typing import Optional, Union

DIGEST_PREFIX = "sha256:"


def sha256_hex(content: str) -> str:
    """Stable hex digest of a string."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def prefixed_digest(content: str) -> str:
    """Digest in the trace's `sha256:<hex>` form."""
    return DIGEST_PREFIX + sha256_hex(content)


def hash_of_file(path: Union[str, Path]) -> Optional[str]:
    """
    Hex digest of a file's raw bytes, or None if there is no readable file.

    Bytes are hashed as stored, so undecodable content still has a
    fingerprint. For UTF-8 text this equals sha256_hex of that text.
    """
    try:
        with open(path, "rb") as f:
            return hashlib.sha256(f.read()).hexdigest()
    except OSError:
        return None
    except ValueError:
        # Embedded NUL in the path
        return None


def normalize_digest(value: str) -> str:
    """Accept both bare hex and `sha256:`-prefixed digests from callers."""
    value = value.strip().lower()
    if value.startswith(DIGEST_PREFIX):
        return value[len(DIGEST_PREFIX):]
    return value
