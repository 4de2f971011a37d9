"""Single-port server that echoes one message per connection, then closes it."""

from __future__ import annotations

import select
import sys

import socket

DEFAULT_PORT = 8080
BACKLOG = 5
RECV_SIZE = 1024
STEP_TIMEOUT = 10

_ERR_CREATE = "Error creating socket"
_ERR_BIND = "Error binding socket"
_ERR_LISTEN = "Error listening"
_ERR_ACCEPT = "Error accepting request"

_EXIT_CODES = {_ERR_CREATE: 1, _ERR_BIND: 2, _ERR_LISTEN: 3, _ERR_ACCEPT: 4}


class SingleEchoServer:
    """Accepts clients on one port and answers each with its own message."""

    def __init__(self, port=DEFAULT_PORT):
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as exc:
            raise RuntimeError(_ERR_CREATE) from exc
        try:
            sock.bind(("", port))
        except (OSError, OverflowError) as exc:
            sock.close()
            raise RuntimeError(_ERR_BIND) from exc
        try:
            sock.listen(BACKLOG)
        except OSError as exc:
            sock.close()
            raise RuntimeError(_ERR_LISTEN) from exc
        self.sock = sock
        self.address = sock.getsockname()
        self.clients = {}
        print(f"Server listening on port {port}")

    def close(self):
        """Close all clients and the listening socket."""
        for conn in self.clients.values():
            conn.close()
        self.clients.clear()
        self.sock.close()

    def _accept(self):
        try:
            conn, (ip, port) = self.sock.accept()
        except OSError as exc:
            print(_ERR_ACCEPT, file=sys.stderr)
            self.close()
            raise RuntimeError(_ERR_ACCEPT) from exc
        self.clients[conn.fileno()] = conn
        print(f"Accepted connection from {ip}:{port}")

    def _echo(self, fd):
        conn = self.clients.pop(fd)
        try:
            data = conn.recv(RECV_SIZE)
        except OSError:
            data = b""
        if data:
            print(f"recv_buffer: {data.decode(errors='replace')}")
            print(f"Received {len(data)} bytes.")
            try:
                sent = conn.send(data)
            except OSError:
                sent = -1
            print(f"Sent {sent} bytes.")
        conn.close()

    def step(self, timeout):
        """Run one select round; return whether anything was ready."""
        server_fd = self.sock.fileno()
        fds = [server_fd, *sorted(self.clients)]
        readable, _, _ = select.select(fds, [], [], timeout)
        ready = set(readable)
        if server_fd in ready:
            self._accept()
        for fd in sorted(self.clients):
            if fd in ready:
                self._echo(fd)
        return bool(ready)

    def run(self):
        """Serve forever, closing everything on the way out."""
        try:
            while True:
                self.step(STEP_TIMEOUT)
        finally:
            self.close()


def main(argv=None):
    try:
        server = SingleEchoServer(DEFAULT_PORT)
    except RuntimeError as exc:
        print(exc, file=sys.stderr)
        return _EXIT_CODES.get(str(exc), 1)
    try:
        server.run()
    except KeyboardInterrupt:
        return 0
    except RuntimeError as exc:
        return _EXIT_CODES.get(str(exc), 1)
    return 0


if __name__ == "__main__":
    sys.exit(main())