"""Bech32 text codec for LNURL tokens.

LNURLs are plain bech32 strings (BIP-173 checksum, constant 1) whose payload is
an arbitrary byte string, usually a URL. The checksum and bit-repacking
primitives come from the `bech32` package; token assembly and parsing live here
because that package refuses anything longer than 90 characters, and a typical
LNURL is well over that.
"""

from __future__ import annotations

from typing import Final

from bech32 import CHARSET, bech32_hrp_expand, bech32_polymod, convertbits

from ..domain.errors import LnurlEncodingError


LNURL_HRP: Final[str] = "lnurl"
SEPARATOR: Final[str] = "1"
CHECKSUM_LENGTH: Final[int] = 6
MAX_TOKEN_LENGTH: Final[int] = 8192


def _create_checksum(hrp: str, data: list[int]) -> list[int]:
    values = bech32_hrp_expand(hrp) + data
    polymod = bech32_polymod(values + [0] * CHECKSUM_LENGTH) ^ 1
    return [(polymod >> 5 * (5 - i)) & 31 for i in range(CHECKSUM_LENGTH)]


def _verify_checksum(hrp: str, data: list[int]) -> bool:
    return bech32_polymod(bech32_hrp_expand(hrp) + data) == 1


def encode(payload: bytes, hrp: str = LNURL_HRP) -> str:
    """Encode raw bytes as an upper-case bech32 token."""
    data = convertbits(payload, 8, 5, True)
    if data is None:
        raise LnurlEncodingError("payload could not be converted to 5-bit groups")
    combined = data + _create_checksum(hrp, data)
    token = hrp + SEPARATOR + "".join(CHARSET[d] for d in combined)
    return token.upper()


def decode(token: str) -> tuple[str, bytes]:
    """Decode a bech32 token into its human-readable part and payload bytes.

    Raises:
        LnurlEncodingError: on mixed case, excessive length, characters outside
            the alphabet, a misplaced separator, a bad checksum, or inconsistent
            bit padding.
    """
    if len(token) > MAX_TOKEN_LENGTH:
        raise LnurlEncodingError(
            f"token length {len(token)} exceeds maximum of {MAX_TOKEN_LENGTH}"
        )
    if any(ord(c) < 33 or ord(c) > 126 for c in token):
        raise LnurlEncodingError("token contains non-printable characters")
    if token.lower() != token and token.upper() != token:
        raise LnurlEncodingError("token mixes upper and lower case")

    token = token.lower()
    pos = token.rfind(SEPARATOR)
    if pos < 1 or pos + CHECKSUM_LENGTH + 1 > len(token):
        raise LnurlEncodingError("invalid separator position")

    hrp = token[:pos]
    data: list[int] = []
    for c in token[pos + 1 :]:
        index = CHARSET.find(c)
        if index == -1:
            raise LnurlEncodingError(f"invalid character {c!r} in data part")
        data.append(index)

    if not _verify_checksum(hrp, data):
        raise LnurlEncodingError("invalid checksum")

    payload = convertbits(data[:-CHECKSUM_LENGTH], 5, 8, False)
    if payload is None:
        raise LnurlEncodingError("invalid padding in data part")
    return hrp, bytes(payload)


def encode_url(url: str) -> str:
    """Encode a URL as an LNURL token (upper case)."""
    return encode(url.encode("utf-8"))


def decode_url(token: str) -> str:
    """Decode an LNURL token back to the URL it carries."""
    hrp, payload = decode(token)
    if hrp != LNURL_HRP:
        raise LnurlEncodingError(
            f"incorrect hrp for LNURL: expected '{LNURL_HRP}', got '{hrp}'"
        )
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError as e:
        raise LnurlEncodingError(f"LNURL payload is not valid UTF-8: {e}") from e
