from __future__ import annotations

import argparse
from typing import Optional, Sequence, Tuple

from relay.session import DEFAULT_NAME

DEFAULT_PORT = 5000


def port_number(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}")
    if not 0 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"port out of range: {port}")
    return port


class Configs:
    def __init__(self, port: int = DEFAULT_PORT, host: str = "") -> None:
        self.host = host
        self.port = port
        self.default_name = DEFAULT_NAME
        self.encoding = "utf-8"
        self.log_level = "INFO"

    @property
    def address(self) -> Tuple[str, int]:
        return (self.host, self.port)

    @classmethod
    def from_args(cls, argv: Optional[Sequence[str]] = None) -> "Configs":
        parser = argparse.ArgumentParser(prog="chat-relay", description="Start the line chat relay server")
        parser.add_argument(
            "port",
            nargs="?",
            type=port_number,
            default=DEFAULT_PORT,
            help=f"Port to listen on (default {DEFAULT_PORT})",
        )
        args = parser.parse_args(argv)
        return cls(port=args.port)
