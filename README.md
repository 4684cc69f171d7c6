# lightws

A lightweight WebSocket client built on the standard library alone. It
connects over plain `ws://`, sends text, binary, ping and pong frames, and
runs a background receive thread that hands incoming messages to your
callbacks.

## Installing

```
pip install .
```

## Using the client

```python
from lightws.client import WebSocketClient, Status, WebSocketError

client = WebSocketClient()
client.connect("ws://localhost:5539/chat")

client.on_text_received(lambda c, text: print("received:", text))
client.on_binary_received(lambda c, data: print("binary:", len(data), "bytes"))
client.on_error(lambda c, message: print("error:", message))
client.on_lost_connection(lambda c, code: print("lost connection:", code))

client.send_text("hello")
client.send_binary(b"\x00\x01\x02")
client.ping()

client.close()      # sends a close frame; the socket closes when the server answers
client.shutdown()   # aborts the connection and stops the receive thread
```

You can also connect by host, port and path:

```python
client.connect_to("localhost", 5539, "/chat")
```

URIs take the form `ws://hostname[:port][/path][?query]`; the port defaults
to 80 and the path to `/`. `lightws.client.parse_ws_uri` performs that split
and returns a `(host, port, path)` tuple.

`WebSocketError` is raised when a URI cannot be parsed, a host name cannot be
resolved or reached, the handshake request cannot be sent or gets no answer,
or text or binary data is sent while the connection is not open.
`ping()` and `pong()` do nothing when the connection is not open; `close()`
does nothing unless it is open.

The client is a context manager and shuts the connection down on exit:

```python
with WebSocketClient() as client:
    client.connect("ws://localhost:5539/")
    client.send_text("hi")
```

### Callbacks

Each callback receives the client first, then its value:

| Registration           | Called with                                             |
|------------------------|---------------------------------------------------------|
| `on_text_received`     | the text of a text frame (invalid UTF-8 is replaced)     |
| `on_binary_received`   | the bytes of a binary frame                             |
| `on_error`             | a message about an unsupported opcode or a failed pong  |
| `on_lost_connection`   | `1006` if the TCP connection drops, `1000` after a close frame from the server |

Passing `None` removes a callback. Ping frames from the server are answered
with a pong carrying the same payload. When the server sends a close frame
first, a close frame is sent back before the socket is closed.

Callbacks run on the receive thread. Calling `connect` from inside
`on_lost_connection` to reconnect is supported.

`client.status` reports one of `Status.OPEN`, `Status.CLOSING` or
`Status.CLOSED`.

### Frames

`lightws.frame` holds the framing helpers the client uses:

- `Opcode` — the frame opcodes (`TEXT`, `BINARY`, `CLOSE`, `PING`, `PONG`, `CONTINUATION`).
- `encode_frame(opcode, payload, mask_key=None)` — a final, masked frame; a
  random key from `generate_mask_key()` is used when none is given. Payloads
  longer than 2⁶⁴−1 bytes raise `FrameError`.
- `encode_empty_frame(opcode)` — a final, masked frame with no payload and an
  all-zero mask key.
- `apply_mask(data, mask_key)` — XOR with a four-byte key; any other key
  length raises `FrameError`.
- `parse_frame_header(data)` — a `FrameHeader` (`fin`, `masked`, `opcode`,
  `payload_length`, `header_length`, `mask_key`), or `None` when more bytes
  are needed.

## Command line

```
lightws ws://localhost:5539/chat
```

The URI defaults to `ws://localhost:5539/command`. The command prints
`working...` once connected, prints every text message the server sends as
`received: <text>`, and reconnects repeatedly if the connection is lost. Each
line typed on standard input is sent as a text message, except `ping`, which
sends a ping frame, and `quit`, which sends a close frame and exits. If the
first connection fails, the error is printed and the exit status is 1.

## What it does not do

- Only plain `ws://` is supported; there is no TLS (`wss://`).
- The server's handshake response is not checked: any non-empty reply is
  taken as success, and the `Sec-WebSocket-Key` sent is always the same.
- Messages are never fragmented when sent, and received continuation frames
  are reported through `on_error` as unsupported rather than reassembled.
- Close frames sent by the client carry no status code or reason.
- There is no server side.