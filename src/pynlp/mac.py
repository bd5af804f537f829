"""Hardware (MAC) address normalization."""

from __future__ import annotations

from pynlp.exceptions import MalformedAddress

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _parse_byte(text: str, raw: str) -> int:
    if not text or len(text) > 2 or not set(text) <= _HEX_DIGITS:
        raise MalformedAddress(f"Can't read {raw!r} as mac address", address=raw)
    return int(text, 16)


def _split_bytes(raw: str) -> list[str]:
    by_colon = raw.split(":")
    if len(by_colon) == 6:
        return by_colon
    by_hyphen = raw.split("-")
    if len(by_hyphen) == 6:
        return by_hyphen
    if len(raw) == 12:
        return [raw[i * 2 : i * 2 + 2] for i in range(6)]
    if len(raw) == 17:
        return [raw[i * 3 : i * 3 + 2] for i in range(6)]
    raise MalformedAddress(f"Can't read {raw!r} as mac address", address=raw)


def normalize_mac(raw: str) -> str:
    """Bring a mac address to the form ``01:23:45:ab:cd:ef``.

    Accepted encodings:

    * colon separated hex (``AA:BB:CC:DD:EE:FF``, single digit bytes allowed)
    * hyphen separated hex (``AA-BB-CC-DD-EE-FF``)
    * 12 hex digits without separators (``AABBCCDDEEFF``)
    * 17 characters with arbitrary separators (``AA.BB.CC.DD.EE.FF``)

    Raises
    ------
    MalformedAddress
        If none of the encodings match or a byte is not valid hex.
    """
    if not isinstance(raw, str):
        raise MalformedAddress(f"Can't read {raw!r} as mac address", address=repr(raw))
    parts = _split_bytes(raw)
    return ":".join(f"{_parse_byte(part, raw):02x}" for part in parts)


def is_valid_mac(raw: str) -> bool:
    """Return ``True`` when *raw* can be normalized."""
    try:
        normalize_mac(raw)
    except MalformedAddress:
        return False
    return True
