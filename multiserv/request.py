"""Per-connection client state kept by the multi-port server."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Request:
    """State kept for one accepted client connection.

    Requests order by their client socket descriptor, so a collection of
    them sorts the same way the server walks its clients.
    """

    client_socket: int = -1
    client_ip: str = ""
    client_port: int = 0
    serv_socket: int = -1
    req_buffer: bytes = b""

    def __lt__(self, other):
        if not isinstance(other, Request):
            return NotImplemented
        return self.client_socket < other.client_socket