"""A small threaded WebSocket client."""

from __future__ import annotations

import re
import select
import socket
import threading
from enum import Enum
from typing import Callable

from .frame import (
    Opcode,
    apply_mask,
    encode_empty_frame,
    encode_frame,
    parse_frame_header,
)

_URI_PATTERN = re.compile(r"ws://([^:/]+):?(\d+)?(/\S*)?")
_HANDSHAKE_KEY = "O7Tk4xI04v+X91cuvefLSQ=="
_POLL_INTERVAL = 0.2
_RECV_SIZE = 4096

TextCallback = Callable[["WebSocketClient", str], None]
BinaryCallback = Callable[["WebSocketClient", bytes], None]
ErrorCallback = Callable[["WebSocketClient", str], None]
LostConnectionCallback = Callable[["WebSocketClient", int], None]


class Status(Enum):
    """Connection state of a client."""

    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


class WebSocketError(RuntimeError):
    """Raised when connecting or sending fails."""


def parse_ws_uri(uri: str) -> tuple[str, int, str]:
    """Split ``ws://host[:port][/path]`` into host, port and path."""
    match = _URI_PATTERN.search(uri)
    if match is None:
        raise WebSocketError("Unable to parse websocket uri.")
    host, port, path = match.groups()
    return host, int(port) if port else 80, path or "/"


def _open_socket(hostname: str, port: int) -> socket.socket | None:
    try:
        candidates = socket.getaddrinfo(hostname, str(port), 0, socket.SOCK_STREAM)
    except socket.gaierror as exc:
        raise WebSocketError("getaddrinfo failed.") from exc
    for family, socktype, proto, _, address in candidates:
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError:
            continue
        try:
            sock.connect(address)
        except OSError:
            sock.close()
            continue
        return sock
    return None


class WebSocketClient:
    """WebSocket client whose received messages are delivered to callbacks."""

    def __init__(self) -> None:
        self._status = Status.CLOSED
        self._status_lock = threading.Lock()
        self._send_lock = threading.Lock()
        self._sock: socket.socket | None = None
        self._thread: threading.Thread | None = None
        self._text_callback: TextCallback | None = None
        self._binary_callback: BinaryCallback | None = None
        self._error_callback: ErrorCallback | None = None
        self._lost_callback: LostConnectionCallback | None = None

    @property
    def status(self) -> Status:
        return self._status

    def __enter__(self) -> WebSocketClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def _exchange_status(self, new: Status) -> Status:
        with self._status_lock:
            previous, self._status = self._status, new
            return previous

    def _replace_status(self, expected: Status, new: Status) -> bool:
        with self._status_lock:
            if self._status is not expected:
                return False
            self._status = new
            return True

    def _close_socket(self, sock: socket.socket | None = None) -> None:
        with self._status_lock:
            if sock is None:
                sock = self._sock
            if sock is None:
                return
            if self._sock is sock:
                self._sock = None
        sock.close()

    def connect(self, ws_uri: str) -> None:
        """Connect using a ``ws://`` URI."""
        hostname, port, path = parse_ws_uri(ws_uri)
        self.connect_to(hostname, port, path)

    def connect_to(self, hostname: str, port: int, path: str = "/") -> None:
        """Connect to ``hostname:port`` and request ``path``."""
        self.shutdown()
        sock = _open_socket(hostname, port)
        if sock is None:
            raise WebSocketError(f"Unable to connect to {hostname}")

        request = (
            f"GET {path} HTTP/1.1\r\n"
            f"Host: {hostname}:{port}\r\n"
            "Connection: Upgrade\r\n"
            "Upgrade: websocket\r\n"
            "Sec-WebSocket-Version: 13\r\n"
            f"Sec-WebSocket-Key: {_HANDSHAKE_KEY}\r\n"
            "\r\n"
        )
        try:
            sock.sendall(request.encode())
        except OSError as exc:
            sock.close()
            raise WebSocketError("An error occurred during the handshake.") from exc

        try:
            response = sock.recv(_RECV_SIZE)
        except OSError:
            response = b""
        if not response:
            sock.close()
            raise WebSocketError("No handshake response from server.")

        with self._status_lock:
            self._sock = sock
            self._status = Status.OPEN
        self._thread = threading.Thread(
            target=self._receive_loop, args=(sock,), daemon=True
        )
        self._thread.start()

    def shutdown(self) -> None:
        """Abort the connection and close the socket."""
        if self._exchange_status(Status.CLOSED) is not Status.CLOSED:
            self._close_socket()
        thread, self._thread = self._thread, None
        # Called from a callback on the receiving thread: that thread ends on its own.
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def on_text_received(self, callback: TextCallback | None) -> None:
        self._text_callback = callback

    def on_binary_received(self, callback: BinaryCallback | None) -> None:
        self._binary_callback = callback

    def on_error(self, callback: ErrorCallback | None) -> None:
        self._error_callback = callback

    def on_lost_connection(self, callback: LostConnectionCallback | None) -> None:
        self._lost_callback = callback

    def _send(self, frame: bytes) -> None:
        with self._send_lock:
            sock = self._sock
            if sock is None:
                raise WebSocketError("socket error (send).")
            try:
                sock.sendall(frame)
            except OSError as exc:
                raise WebSocketError("socket error (send).") from exc

    def _require_open(self) -> None:
        if self._status is not Status.OPEN:
            raise WebSocketError("WebSocket is not open.")

    def send_text(self, text: str) -> None:
        """Send a text message."""
        self._require_open()
        self._send(encode_frame(Opcode.TEXT, text.encode("utf-8")))

    def send_binary(self, data: bytes) -> None:
        """Send a binary message."""
        self._require_open()
        self._send(encode_frame(Opcode.BINARY, bytes(data)))

    def ping(self) -> None:
        """Send a ping frame; does nothing unless the connection is open."""
        if self._status is not Status.OPEN:
            return
        self._send(encode_empty_frame(Opcode.PING))

    def pong(self, data: bytes | None = None) -> None:
        """Send a pong frame; does nothing unless the connection is open."""
        if self._status is not Status.OPEN:
            return
        if data is None:
            self._send(encode_empty_frame(Opcode.PONG))
        else:
            self._send(encode_frame(Opcode.PONG, bytes(data)))

    def close(self) -> None:
        """Send a close frame; the socket closes once the server answers."""
        if not self._replace_status(Status.OPEN, Status.CLOSING):
            return
        try:
            self._send(encode_empty_frame(Opcode.CLOSE))
        except WebSocketError:
            pass

    def _report_error(self, message: str) -> None:
        if self._error_callback is not None:
            self._error_callback(self, message)

    def _receive_loop(self, sock: socket.socket) -> None:
        buffer = bytearray()
        while self._status in (Status.OPEN, Status.CLOSING):
            try:
                readable, _, _ = select.select([sock], [], [], _POLL_INTERVAL)
            except (OSError, ValueError):
                break
            if not readable:
                continue

            try:
                chunk = sock.recv(_RECV_SIZE)
            except OSError:
                chunk = b""
            if not chunk:
                if self._exchange_status(Status.CLOSED) is Status.OPEN:
                    self._close_socket(sock)
                    if self._lost_callback is not None:
                        self._lost_callback(self, 1006)
                return
            buffer += chunk

            while buffer:
                header = parse_frame_header(buffer)
                if header is None:
                    break
                end = header.header_length + header.payload_length
                if len(buffer) < end:
                    break
                payload = bytes(buffer[header.header_length:end])
                if header.masked:
                    payload = apply_mask(payload, header.mask_key)
                if not self._dispatch(header.opcode, payload, sock):
                    return
                del buffer[:end]

    def _dispatch(self, opcode: int, payload: bytes, sock: socket.socket) -> bool:
        """Handle one frame; False once the connection is finished."""
        if opcode == Opcode.TEXT:
            if self._text_callback is not None:
                self._text_callback(self, payload.decode("utf-8", errors="replace"))
        elif opcode == Opcode.BINARY:
            if self._binary_callback is not None:
                self._binary_callback(self, payload)
        elif opcode == Opcode.PING:
            try:
                self.pong(payload)
            except WebSocketError as exc:
                self._report_error(
                    f"An error occurs on sending pong frame. error: {exc}"
                )
        elif opcode == Opcode.CLOSE:
            previous = self._exchange_status(Status.CLOSED)
            if previous is not Status.CLOSED:
                if previous is Status.OPEN:
                    try:
                        self._send(encode_empty_frame(Opcode.CLOSE))
                    except WebSocketError:
                        pass
                self._close_socket(sock)
                if previous is Status.OPEN and self._lost_callback is not None:
                    self._lost_callback(self, 1000)
            return False
        else:
            self._report_error(f"The opcode #{opcode} is not supported.")
        return True