"""Pay metadata construction, parsing and hashing.

The metadata string is built once, stored, sent, and later hashed exactly as
built. Nothing here re-serializes a metadata string that came off the wire.
"""

from __future__ import annotations

import hashlib
import json
from typing import Optional

from ...domain.errors import MissingMetadataError

TEXT_PLAIN = "text/plain"
TEXT_IDENTIFIER = "text/identifier"


def build_metadata_text(nonce: str, identifier: Optional[str] = None) -> str:
    """Compact JSON array of (content type, value) pairs.

    >>> build_metadata_text("abc123")
    '[["text/plain","abc123"]]'
    """
    pairs = [[TEXT_PLAIN, nonce]]
    if identifier is not None:
        pairs.append([TEXT_IDENTIFIER, identifier])
    return json.dumps(pairs, separators=(",", ":"), ensure_ascii=False)


def description_hash(metadata_text: str) -> bytes:
    """SHA-256 over the UTF-8 bytes of the metadata string."""
    return hashlib.sha256(metadata_text.encode("utf-8")).digest()


def parse_metadata(metadata_text: str) -> list[tuple[str, str]]:
    """Parse metadata text into (content type, value) pairs.

    Raises:
        MissingMetadataError: if the text is not a JSON array of string pairs.
    """
    try:
        raw = json.loads(metadata_text)
    except ValueError as e:
        raise MissingMetadataError(f"metadata is not valid JSON: {e}") from e
    if not isinstance(raw, list):
        raise MissingMetadataError("metadata must be a JSON array")
    pairs: list[tuple[str, str]] = []
    for entry in raw:
        if (
            not isinstance(entry, list)
            or len(entry) != 2
            or not isinstance(entry[0], str)
        ):
            raise MissingMetadataError(f"malformed metadata entry: {entry!r}")
        pairs.append((entry[0], entry[1]))
    return pairs


def plain_text_entry(metadata_text: str) -> str:
    """Return the value of the required text/plain entry."""
    for content_type, value in parse_metadata(metadata_text):
        if content_type == TEXT_PLAIN and isinstance(value, str) and value:
            return value
    raise MissingMetadataError(
        "response metadata does not contain the required 'text/plain' field"
    )
