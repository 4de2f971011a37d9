"""A non-blocking listening socket with its greeting message."""

from __future__ import annotations

import socket

GREETING_SIZE = 1024
BACKLOG = 5


class Server:
    """Listens on all IPv4 interfaces on one port.

    Raises RuntimeError when the socket cannot be created, bound or put
    into listening state.
    """

    def __init__(self, port):
        self.port = port
        greeting = f"Hello from server on port {port}.\n".encode()
        self.greeting = greeting[: GREETING_SIZE - 1]
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as exc:
            raise RuntimeError("Error creating socket") from exc
        sock.setblocking(False)
        try:
            sock.bind(("", port & 0xFFFF))
        except OSError as exc:
            sock.close()
            raise RuntimeError("Error binding socket") from exc
        try:
            sock.listen(BACKLOG)
        except OSError as exc:
            sock.close()
            raise RuntimeError("Error listening on socket") from exc
        self.sock = sock
        self.address = sock.getsockname()
        print(f"Server listening on port: {port}")

    def fileno(self):
        """Descriptor of the listening socket, -1 once closed."""
        return self.sock.fileno()

    def close(self):
        """Close the listening socket."""
        self.sock.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()