"""Wire format of the telemetry link: command frames and their encoding."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Union

HEADER_BYTE = 0xFF
MAX_COMMANDS = 30

TextLike = Union[str, bytes, bytearray]


class Command(IntEnum):
    """Command byte that follows the header byte."""

    SET_NODE_NAME = 0x51
    SET_ID_ASSIGN = 0x52
    SET_DATA_FIELD = 0x53
    PUBLISH_DATA = 0x54


_COMMAND_BYTES = frozenset(int(command) for command in Command)


@dataclass(frozen=True)
class Frame:
    """One command found in a received chunk.

    ``payload`` holds the bytes after the command byte up to the next
    header (or the end of the chunk); ``offset`` is where the header byte
    sits in the chunk.
    """

    command: Command
    payload: bytes
    offset: int


def _as_bytes(text: TextLike) -> bytes:
    if isinstance(text, str):
        return text.encode("utf-8")
    return bytes(text)


def _check_id(value_id: int) -> int:
    if not 0 <= value_id <= 0xFF:
        raise ValueError(f"value id must fit in one byte, got {value_id}")
    return value_id


def encode_node_name(name: TextLike) -> bytes:
    """Frame that sets the node name: header, 0x51, name."""
    return bytes((HEADER_BYTE, Command.SET_NODE_NAME)) + _as_bytes(name)


def encode_id_assign(value_id: int, name: TextLike) -> bytes:
    """Frame that maps a value id to a name: header, 0x52, id, name."""
    return bytes((HEADER_BYTE, Command.SET_ID_ASSIGN, _check_id(value_id))) + _as_bytes(name)


def encode_data_field(value_id: int, value: float) -> bytes:
    """Frame that sets a value: header, 0x53, id, little-endian double."""
    header = bytes((HEADER_BYTE, Command.SET_DATA_FIELD, _check_id(value_id)))
    return header + struct.pack("<d", value)


def encode_publish() -> bytes:
    """Frame that asks the node to publish its data."""
    return bytes((HEADER_BYTE, Command.PUBLISH_DATA))


def split_frames(data: bytes | bytearray) -> list[Frame]:
    """Split a received chunk into frames.

    A frame starts wherever the header byte is followed by a known command
    byte. At most ``MAX_COMMANDS`` frames are recognised; anything after the
    last recognised header belongs to the last frame.
    """
    buf = bytes(data)
    starts: list[int] = []
    for index, (first, second) in enumerate(zip(buf, buf[1:])):
        if len(starts) >= MAX_COMMANDS:
            break
        if first == HEADER_BYTE and second in _COMMAND_BYTES:
            starts.append(index)
    ends = starts[1:] + [len(buf)]
    return [
        Frame(Command(buf[start + 1]), buf[start + 2:end], start)
        for start, end in zip(starts, ends)
    ]