# MIT License
# Copyright (c) 2025 Hashborn

import bech32 # type: ignore
from .hash import sha256
from typing import Optional, Tuple
from ..config.params import ADDRESS_PREFIX

def _encode(h20: bytes, prefix: str) -> str:
    five_bit_r = bech32.convertbits(h20, 8, 5)
    if five_bit_r is None:
        raise ValueError("Error converting to bech32 words")
    return bech32.bech32_encode(prefix, five_bit_r)

def address_from_label(label: str, prefix: str = ADDRESS_PREFIX) -> str:
    """Derives a deterministic Bech32 address from a human-readable label."""
    return _encode(sha256(label.encode("utf-8"))[:20], prefix)

def decode_address(addr: str) -> Tuple[str, bytes]:
    """Decodes Bech32 address to (prefix, h20_bytes)."""
    hrp, data = bech32.bech32_decode(addr)
    if hrp is None or data is None:
        raise ValueError("Invalid bech32 address")

    decoded = bech32.convertbits(data, 5, 8, False)
    if decoded is None:
        raise ValueError("Error converting from bech32 words")

    return hrp, bytes(decoded)

def is_valid_address(addr: str, expected_prefix: Optional[str] = None) -> bool:
    try:
        hrp, _ = decode_address(addr)
        if expected_prefix and hrp != expected_prefix:
            return False
        return True
    except ValueError:
        return False

# Null identity: twenty zero bytes
ZERO_ADDRESS = _encode(b"\x00" * 20, ADDRESS_PREFIX)

def is_null_address(addr: Optional[str]) -> bool:
    """True for None, the empty string, or an all-zero Bech32 address of any prefix."""
    if not addr:
        return True
    try:
        _, h20 = decode_address(addr)
    except ValueError:
        return False
    return not any(h20)
