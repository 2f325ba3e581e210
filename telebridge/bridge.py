"""Bridge between a serial telemetry link and an MQTT broker."""

from __future__ import annotations

import argparse
from typing import Protocol, Sequence

from telebridge.node import DEFAULT_NAME, Node

DEFAULT_BAUDRATE = 230400
DEFAULT_BROKER = "192.168.5.1"
DEFAULT_MQTT_PORT = 1883
DEFAULT_CHUNK_SIZE = 1000


class _Port(Protocol):
    is_open: bool

    @property
    def in_waiting(self) -> int: ...

    def read(self, size: int = 1) -> bytes: ...


def run(port: _Port, node: Node, client: object = None, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
    """Feed chunks read from ``port`` to ``node`` until the port closes.

    ``client`` is serviced with ``loop(timeout=0.0)`` on every pass when given.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk size must be positive, got {chunk_size}")
    while port.is_open:
        if client is not None:
            client.loop(timeout=0.0)
        data = port.read(1)
        if not data:
            continue
        waiting = port.in_waiting
        if waiting and chunk_size > 1:
            data += port.read(min(waiting, chunk_size - 1))
        node.handle(data)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="telebridge",
        description="Forward telemetry frames from a serial port to MQTT.",
    )
    parser.add_argument("serial_port", help="serial device the telemetry arrives on")
    parser.add_argument("--baudrate", type=int, default=DEFAULT_BAUDRATE)
    parser.add_argument("--broker", default=DEFAULT_BROKER, help="MQTT broker host")
    parser.add_argument("--mqtt-port", type=int, default=DEFAULT_MQTT_PORT)
    parser.add_argument("--client-id", default=DEFAULT_NAME)
    parser.add_argument("--name", default=DEFAULT_NAME, help="initial node name")
    parser.add_argument("--chunk-size", type=int, default=DEFAULT_CHUNK_SIZE)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Command-line entry point."""
    args = _parser().parse_args(argv)

    import serial
    import paho.mqtt.client as mqtt

    if hasattr(mqtt, "CallbackAPIVersion"):
        client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, client_id=args.client_id)
    else:
        client = mqtt.Client(client_id=args.client_id)
    client.connect(args.broker, args.mqtt_port)

    node = Node(lambda topic, payload: client.publish(topic, payload), args.name)
    port = serial.Serial(args.serial_port, args.baudrate, timeout=0.1)
    try:
        run(port, node, client, args.chunk_size)
    except KeyboardInterrupt:
        pass
    finally:
        port.close()
        client.disconnect()
    return 0