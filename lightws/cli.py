"""Interactive command line WebSocket client."""

from __future__ import annotations

import argparse
import sys

from .client import WebSocketClient, WebSocketError

DEFAULT_URI = "ws://localhost:5539/command"


def _print_text(client: WebSocketClient, text: str) -> None:
    print(f"received: {text}", flush=True)


def _reconnecting(uri: str):
    def handler(client: WebSocketClient, code: int) -> None:
        print(f"Lost connection: {code}", flush=True)
        while True:
            try:
                client.connect(uri)
            except WebSocketError as exc:
                print(exc, flush=True)
            else:
                print("Reconnected.", flush=True)
                return

    return handler


def main(argv: list[str] | None = None) -> int:
    """Send each input line as text; "ping" sends a ping, "quit" closes."""
    parser = argparse.ArgumentParser(
        prog="lightws", description="Send lines from standard input over a WebSocket."
    )
    parser.add_argument("uri", nargs="?", default=DEFAULT_URI, help="ws:// URI")
    args = parser.parse_args(argv)

    with WebSocketClient() as client:
        client.on_text_received(_print_text)
        try:
            client.connect(args.uri)
        except WebSocketError as exc:
            print(exc, file=sys.stderr)
            return 1
        print("working...", flush=True)
        client.on_lost_connection(_reconnecting(args.uri))

        for line in sys.stdin:
            command = line.rstrip("\n")
            if command == "ping":
                client.ping()
            elif command == "quit":
                client.close()
                break
            else:
                client.send_text(command)
        client.on_lost_connection(None)
    return 0