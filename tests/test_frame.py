import pytest

from lightws.frame import (
    FrameError,
    FrameHeader,
    Opcode,
    apply_mask,
    encode_empty_frame,
    encode_frame,
    generate_mask_key,
    parse_frame_header,
)


@pytest.mark.parametrize(
    ("opcode", "value"),
    [
        (Opcode.CONTINUATION, 0x00),
        (Opcode.TEXT, 0x01),
        (Opcode.BINARY, 0x02),
        (Opcode.CLOSE, 0x08),
        (Opcode.PING, 0x09),
        (Opcode.PONG, 0x0A),
    ],
)
def test_opcode_values_follow_protocol(opcode, value):
    frame = encode_empty_frame(opcode)
    assert frame[0] == 0x80 | value
    header = parse_frame_header(frame)
    assert header is not None
    assert header.opcode == Opcode(value)


def test_empty_ping_frame_bytes():
    assert encode_empty_frame(Opcode.PING) == b"\x89\x80\x00\x00\x00\x00"


def test_empty_close_frame_bytes():
    assert encode_empty_frame(Opcode.CLOSE) == b"\x88\x80\x00\x00\x00\x00"


def test_zero_mask_leaves_payload_readable():
    frame = encode_frame(Opcode.TEXT, b"abc", b"\x00\x00\x00\x00")
    assert frame == b"\x81\x83\x00\x00\x00\x00abc"


def test_generate_mask_key_is_four_bytes():
    keys = {generate_mask_key() for _ in range(20)}
    assert all(len(key) == 4 for key in keys)
    assert len(keys) > 1


def test_apply_mask_is_an_involution():
    key = b"\x12\x34\x56\x78"
    data = bytes(range(37))
    masked = apply_mask(data, key)
    assert masked != data
    assert apply_mask(masked, key) == data


def test_apply_mask_empty():
    assert apply_mask(b"", b"\x01\x02\x03\x04") == b""


def test_apply_mask_rejects_bad_key():
    with pytest.raises(FrameError):
        apply_mask(b"abc", b"\x01\x02")


@pytest.mark.parametrize("length", [0, 1, 125, 126, 65535, 65536])
def test_round_trip(length):
    payload = bytes(i % 251 for i in range(length))
    frame = encode_frame(Opcode.BINARY, payload)
    header = parse_frame_header(frame)
    assert header is not None
    assert header.fin is True
    assert header.masked is True
    assert header.opcode == Opcode.BINARY
    assert header.payload_length == length
    assert len(frame) == header.header_length + length
    body = frame[header.header_length:]
    assert apply_mask(body, header.mask_key) == payload


@pytest.mark.parametrize(
    ("length", "marker"),
    [(125, 0x80 | 125), (126, 0xFE), (65535, 0xFE), (65536, 0xFF)],
)
def test_length_marker(length, marker):
    frame = encode_frame(Opcode.TEXT, b"x" * length)
    assert frame[1] == marker


def test_parse_unmasked_header():
    header = parse_frame_header(b"\x82\x03\x01\x02\x03")
    assert header == FrameHeader(
        fin=True,
        masked=False,
        opcode=Opcode.BINARY,
        payload_length=3,
        header_length=2,
        mask_key=None,
    )


def test_parse_reports_non_final_and_unknown_opcode():
    header = parse_frame_header(b"\x03\x00")
    assert header.fin is False
    assert header.opcode == 3


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"\x81",
        b"\x81\xfe\x00",
        b"\x81\xff" + b"\x00" * 7,
        b"\x81\x85\x01\x02",
        b"\x81\xfe\x01\x00\x01\x02\x03",
    ],
)
def test_parse_incomplete_returns_none(data):
    assert parse_frame_header(data) is None