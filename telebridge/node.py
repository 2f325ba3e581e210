"""Receiving side of the telemetry link: turns command frames into MQTT messages."""

from __future__ import annotations

import json
import struct
from typing import Callable

from telebridge.protocol import Command, split_frames

DEFAULT_NAME = "robot"

_DOUBLE = struct.Struct("<d")


def _to_json(document: object) -> str:
    return json.dumps(document, separators=(",", ":"))


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


class Node:
    """Keeps the id-to-name map and the latest values of one telemetry node.

    ``publish`` is called with a topic and a JSON payload whenever the node
    has something to report.
    """

    def __init__(self, publish: Callable[[str, str], object], name: str = DEFAULT_NAME) -> None:
        self._publish = publish
        self.name = name
        self._data: dict[str, float] = {}
        self._id_assign: list[dict[str, object]] = []

    @property
    def data(self) -> dict[str, float]:
        """Current values keyed by their assigned names."""
        return dict(self._data)

    @property
    def id_assign(self) -> list[dict[str, object]]:
        """The id assignments, in the order they were first made."""
        return [dict(entry) for entry in self._id_assign]

    def set_node_name(self, name: str) -> None:
        """Change the name used as the topic prefix."""
        self.name = name

    def set_id_assign(self, value_id: int, value: str) -> None:
        """Map ``value_id`` to ``value`` and reset that data field to zero."""
        for entry in self._id_assign:
            if entry["id"] == value_id:
                entry["value"] = value
                break
        else:
            self._id_assign.append({"id": value_id, "value": value})
        self._data[value] = 0

    def get_name_assign(self, value_id: int) -> str:
        """Name assigned to ``value_id``, or an empty string if there is none."""
        for entry in self._id_assign:
            if entry["id"] == value_id:
                return str(entry["value"])
        return ""

    def set_data_field(self, value_id: int, value: float) -> bool:
        """Store a value under the name of ``value_id``; False if the id is unassigned."""
        name = self.get_name_assign(value_id)
        if name == "":
            return False
        self._data[name] = value
        return True

    def publish_data(self) -> None:
        """Publish all current values to ``<name>/data``."""
        self._publish(f"{self.name}/data", _to_json(self._data))

    def publish_id_assign(self) -> None:
        """Publish the id assignments to ``<name>/id_assign``."""
        self._publish(f"{self.name}/id_assign", _to_json(self._id_assign))

    def handle(self, data: bytes | bytearray) -> None:
        """Act on every command frame found in a received chunk."""
        buf = bytes(data)
        for frame in split_frames(buf):
            id_index = frame.offset + 2
            if frame.command is Command.SET_NODE_NAME:
                self.set_node_name(_decode(frame.payload))
                self.publish_data()
            elif frame.command is Command.SET_ID_ASSIGN:
                if id_index < len(buf):
                    self.set_id_assign(buf[id_index], _decode(frame.payload[1:]))
                    self.publish_id_assign()
            elif frame.command is Command.SET_DATA_FIELD:
                if id_index < len(buf):
                    raw = buf[id_index + 1:id_index + 1 + _DOUBLE.size]
                    if len(raw) == _DOUBLE.size:
                        (value,) = _DOUBLE.unpack(raw)
                        self.set_data_field(buf[id_index], value)
            elif frame.command is Command.PUBLISH_DATA:
                self.publish_data()