"""Byte-framed telemetry protocol, buffered sender, and serial-to-MQTT bridge node."""

__version__ = "0.1.0"
__all__ = ["protocol", "device", "node", "bridge"]