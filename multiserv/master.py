"""Multi-port server loop: greets new clients and echoes what they send."""

from __future__ import annotations

import re
import select
import sys

from multiserv.request import Request
from multiserv.server import Server

RECV_SIZE = 1024
POLL_TIMEOUT = 10

_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")


def _atoi(text):
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def parse_ports(args):
    """Read port numbers from arguments; unparsable text counts as 0.

    Returns the distinct ports in ascending order.
    """
    return sorted({_atoi(arg) for arg in args})


class Master:
    """Owns the listening servers and every connected client."""

    def __init__(self, ports):
        self.ports = sorted(set(ports))
        self.servers = []
        self.clients = {}
        self.requests = {}
        self.client_servers = {}
        self.sent = 0
        self.recved = 0

    def start_servers(self):
        """Open a server on each port; raise RuntimeError if none could start."""
        for port in self.ports:
            try:
                self.servers.append(Server(port))
            except RuntimeError as exc:
                print(f"Failed to create server on port {port}: {exc}", file=sys.stderr)
        if not self.servers:
            raise RuntimeError("No servers could be started. Exiting.")
        print(f"Successfully created {len(self.servers)} server(s).")

    def close(self):
        """Close every client connection and every listening socket."""
        for fd in list(self.clients):
            self._drop(fd)
        for server in self.servers:
            server.close()

    def read_fds(self):
        """Descriptors to watch for reading: servers first, then clients."""
        return [server.fileno() for server in self.servers] + sorted(self.clients)

    def nfds(self):
        """One more than the highest watched descriptor."""
        fds = self.read_fds()
        if any(fd < 0 for fd in fds):
            raise ValueError("Negative fd detected.")
        return max(fds, default=0) + 1

    def _drop(self, fd):
        conn = self.clients.pop(fd)
        self.requests.pop(fd, None)
        self.client_servers.pop(fd, None)
        conn.close()

    def accept_requests(self, readable):
        """Accept all pending connections on readable servers and greet them."""
        for server in self.servers:
            if server.fileno() not in readable:
                continue
            while True:
                try:
                    conn, (ip, port) = server.sock.accept()
                except BlockingIOError:
                    print("No more pending connections.")
                    break
                except OSError as exc:
                    print(f"accept() failed: {exc}", file=sys.stderr)
                    break
                conn.setblocking(True)
                fd = conn.fileno()
                print(f"Client accepted with socket: {fd}", file=sys.stderr)
                self.clients[fd] = conn
                self.client_servers[fd] = server
                self.requests[fd] = Request(
                    client_socket=fd,
                    client_ip=ip,
                    client_port=port,
                    serv_socket=server.fileno(),
                )
                print(f"Accepted connection from {ip}:{port}")
                try:
                    self.sent = conn.send(server.greeting)
                except OSError:
                    self.sent = -1

    def receive_requests(self, readable):
        """Read from readable clients, dropping those that disconnected."""
        if not self.clients:
            print("No more clients connected.")
        for fd in sorted(self.clients):
            if fd not in readable:
                continue
            request = self.requests[fd]
            request.req_buffer = b""
            print("------>recv")
            error = None
            try:
                data = self.clients[fd].recv(RECV_SIZE)
            except OSError as exc:
                data = b""
                error = exc
            self.recved = -1 if error else len(data)
            if not data:
                print("Client disconnected", file=sys.stderr)
                if error is not None:
                    print(f"recv failed: {error}", file=sys.stderr)
                self._drop(fd)
                continue
            request.req_buffer = data
            print(f"req_buffer: {data.decode(errors='replace')}")
            print(f"Received {len(data)} bytes.")

    def respond_requests(self, readable):
        """Send each readable client's buffer back to it."""
        for fd in sorted(self.clients):
            if fd not in readable:
                continue
            buffer = self.requests[fd].req_buffer
            print(f"serv_buffer: {buffer.decode(errors='replace')}")
            error = None
            try:
                self.sent = self.clients[fd].send(buffer)
            except OSError as exc:
                self.sent = -1
                error = exc
            if self.sent <= 0:
                print("Message not sent.", file=sys.stderr)
                if error is not None:
                    print(f"sent failed: {error}", file=sys.stderr)
                self._drop(fd)
                continue
            print(f"Sent {self.sent} bytes.")

    def poll(self, timeout):
        """Wait for readable descriptors; an empty set means timeout."""
        print(f"getNfds: {self.nfds()}", file=sys.stderr)
        readable, _, _ = select.select(self.read_fds(), [], [], timeout)
        return set(readable)

    def run(self):
        """Serve forever, closing everything on the way out."""
        try:
            while True:
                readable = self.poll(POLL_TIMEOUT)
                if not readable:
                    continue
                self.accept_requests(readable)
                self.receive_requests(readable)
                self.respond_requests(readable)
        finally:
            self.close()


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        return 1
    master = Master(parse_ports(args))
    try:
        master.start_servers()
    except RuntimeError as exc:
        print(exc, file=sys.stderr)
        return 1
    try:
        master.run()
    except KeyboardInterrupt:
        return 0
    except OSError as exc:
        print(f"select() failed: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())