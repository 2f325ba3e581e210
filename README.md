# telebridge

A small telemetry protocol for sending named values from a microcontroller
over a serial link, and a bridge node that turns that byte stream into MQTT
messages.

## The wire format

Every frame starts with the header byte `0xFF`, followed by a command byte:

| Command       | Byte   | Payload                                        |
|---------------|--------|------------------------------------------------|
| Node name     | `0x51` | the node name as raw bytes                     |
| ID assignment | `0x52` | one id byte, then the value name               |
| Data field    | `0x53` | one id byte, then an 8-byte little-endian double |
| Publish       | `0x54` | none                                           |

Frames carry no length field: a frame runs until the next header byte that
is followed by a valid command byte, or until the end of the data received.
At most 30 frames are recognised in one chunk; anything after the last
recognised header belongs to the last frame.

## Installing

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## Encoding frames

`telebridge.protocol` builds and splits frames:

```python
from telebridge.protocol import (
    encode_node_name, encode_id_assign, encode_data_field, encode_publish, split_frames,
)

stream = (
    encode_node_name("Swerve_Robot")
    + encode_id_assign(0, "imu")
    + encode_data_field(0, 1.57)
    + encode_publish()
)

for frame in split_frames(stream):
    print(frame.command, frame.payload, frame.offset)
```

Names may be given as `str` (encoded as UTF-8) or as bytes. Value ids must
fit in one byte; anything else raises `ValueError`.

`Command` names the four command bytes. `split_frames` returns a list of
`Frame` objects, each holding the `command`, the `payload` (the bytes after
the command byte up to the next frame) and the `offset` of its header byte
in the chunk.

## The sending side

`telebridge.device.Telemetry` keeps a fixed-size transmit ring buffer of
1024 bytes (so at most 1023 bytes can be pending at once). You give it a
function that sends bytes; `process()` hands it the next contiguous run of
pending bytes, and `transmit_complete()` releases them once the transfer has
finished.

```python
from telebridge.device import Telemetry, BufferFullError

sent = []
tm = Telemetry(sent.append)
tm.set_node_name("Swerve_Robot")
tm.set_id_assign(0, "imu")
tm.set_data_field(0, 1.57)
tm.publish_data()

print(tm.pending())   # bytes queued and not yet released
tm.process()          # calls sent.append(...) with one contiguous run
print(tm.busy)        # True until the transfer is marked complete
tm.transmit_complete()
```

`process()` does nothing while a transmission is in progress. When the
pending bytes wrap around the end of the ring, one call sends only the part
up to the end; call `process()` again after `transmit_complete()` for the
rest.

Enqueueing more than the buffer can hold raises `BufferFullError`; the bytes
queued before the buffer filled stay queued.

Received bytes are fed in one at a time with `receive()` and read back with
`received()`. The receive index wraps to the start when the buffer is full.

## The bridge node

`telebridge.node.Node` keeps the id-to-name table and the current values,
and calls your publish function with a topic and a compact JSON payload:

- `<node name>/data`: a JSON object of value names to their latest values,
  sent on a publish command and when the node name is set;
- `<node name>/id_assign`: a JSON array of `{"id": ..., "value": ...}`
  objects, sent whenever an id is assigned.

```python
from telebridge.node import Node

node = Node(lambda topic, payload: print(topic, payload), "robot")
node.handle(stream)
print(node.name, node.data, node.id_assign)
```

Assigning a name to an id resets that value to 0. A data field for an id
that has no name is ignored (`set_data_field` returns `False`), as is a data
field frame with fewer than eight value bytes. `get_name_assign` returns an
empty string for an unassigned id.

## Running the bridge

The `telebridge` command reads frames from a serial port and publishes them
to an MQTT broker:

```
telebridge /dev/ttyUSB0 --broker localhost
```

Options:

- `--baudrate` (default 230400)
- `--broker` MQTT broker host (default `192.168.5.1`)
- `--mqtt-port` (default 1883)
- `--client-id` MQTT client id (default `robot`)
- `--name` initial node name (default `robot`)
- `--chunk-size` most bytes handed to the node at once (default 1000)

The same loop is available from Python as `telebridge.bridge.run(port, node,
client, chunk_size)`; it runs until the port's `is_open` turns false, and
services the MQTT client with `loop(timeout=0.0)` on each pass when one is
given.

## What it does not do

The bridge only publishes: it subscribes to no topics and sends nothing back
over the serial link. It has no options for broker authentication or TLS,
and it does not reconnect if the broker connection drops. Frames that are
split across two reads of the serial port are handled as two separate
chunks.