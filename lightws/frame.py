"""WebSocket frame encoding and header parsing."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import IntEnum

_MAX_PAYLOAD = 0xFFFF_FFFF_FFFF_FFFF


class FrameError(ValueError):
    """Raised when a frame cannot be built."""


class Opcode(IntEnum):
    """WebSocket frame opcodes."""

    CONTINUATION = 0x00
    TEXT = 0x01
    BINARY = 0x02
    CLOSE = 0x08
    PING = 0x09
    PONG = 0x0A


@dataclass(frozen=True)
class FrameHeader:
    """Decoded header of a single frame."""

    fin: bool
    masked: bool
    opcode: int
    payload_length: int
    header_length: int
    mask_key: bytes | None = None


def generate_mask_key() -> bytes:
    """Return four random bytes for masking a client frame."""
    return os.urandom(4)


def apply_mask(data: bytes, mask_key: bytes) -> bytes:
    """XOR ``data`` with the repeating four-byte ``mask_key``."""
    key = bytes(mask_key)
    if len(key) != 4:
        raise FrameError("Mask key must be exactly 4 bytes.")
    size = len(data)
    if size == 0:
        return b""
    repeated = (key * (size // 4 + 1))[:size]
    value = int.from_bytes(data, "big") ^ int.from_bytes(repeated, "big")
    return value.to_bytes(size, "big")


def encode_frame(opcode: int, payload: bytes, mask_key: bytes | None = None) -> bytes:
    """Build a final, masked frame carrying ``payload``."""
    payload = bytes(payload)
    length = len(payload)
    header = bytearray([0x80 | int(opcode)])
    if length <= 125:
        header.append(0x80 | length)
    elif length <= 0xFFFF:
        header.append(0xFE)
        header += length.to_bytes(2, "big")
    elif length <= _MAX_PAYLOAD:
        header.append(0xFF)
        header += length.to_bytes(8, "big")
    else:
        raise FrameError("Data is too large. Does not support fragmentation.")

    key = generate_mask_key() if mask_key is None else bytes(mask_key)
    return bytes(header) + key + apply_mask(payload, key)


def encode_empty_frame(opcode: int) -> bytes:
    """Build a final, masked frame with no payload and an all-zero mask key."""
    return bytes([0x80 | int(opcode), 0x80, 0x00, 0x00, 0x00, 0x00])


def parse_frame_header(data: bytes) -> FrameHeader | None:
    """Decode the header at the start of ``data``; None if it is incomplete."""
    size = len(data)
    if size < 2:
        return None
    first, second = data[0], data[1]
    fin = (first & 0x80) == 0x80
    masked = (second & 0x80) == 0x80
    opcode = first & 0x0F
    length = second & 0x7F
    offset = 2
    if length == 126:
        if size < 4:
            return None
        length = int.from_bytes(data[2:4], "big")
        offset = 4
    elif length == 127:
        if size < 10:
            return None
        length = int.from_bytes(data[2:10], "big")
        offset = 10

    mask_key = None
    if masked:
        if size < offset + 4:
            return None
        mask_key = bytes(data[offset:offset + 4])
        offset += 4

    return FrameHeader(
        fin=fin,
        masked=masked,
        opcode=opcode,
        payload_length=length,
        header_length=offset,
        mask_key=mask_key,
    )