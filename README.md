# multiserv

A small TCP server built on `select()`. It listens on one or more ports.
Each new client gets a greeting line that names the port it connected to.
After that, every chunk of data the client sends is echoed back to it.

## Installation

```
pip install .
```

## Running

Start a server on one or more ports:

```
multiserv 8080 8081 8082
```

Each argument is read as an integer from its leading digits, so `8080abc` is
read as `8080`. An argument with no leading number is read as `0`, which
binds a port chosen by the system. Each distinct port is listened on once,
in ascending order. If a port cannot be bound, the failure is reported on
standard error and that port is skipped.

The exit status is `1` in each of these cases:

- no arguments are given;
- no port can be bound;
- `select()` fails.

Interrupting the server with Ctrl-C closes every socket and exits with
status `0`.

When a client connects, the server sends:

```
Hello from server on port 8080.
```

After that, each chunk of up to 1024 bytes that the client sends is sent
back unchanged. A client that closes its connection is dropped. So is a
client that cannot be written to. The server logs its activity to standard
output and standard error as it runs.

### Single-port variant

```
multiserv-single
```

This variant listens on port 8080 only and does not send a greeting. Each
client connection is allowed one message. The server reads up to 1024 bytes,
sends them back, and closes the connection.

If it cannot start, it exits with one of these statuses:

| Status | Cause |
|--------|-------|
| 1 | the socket cannot be created |
| 2 | the socket cannot be bound |
| 3 | the socket cannot listen |
| 4 | a connection cannot be accepted |

## Using it from Python

```python
from multiserv.master import Master, parse_ports

master = Master(parse_ports(["8080", "8081"]))
master.start_servers()   # RuntimeError if no port could be bound
master.run()             # serves until interrupted, then closes everything
```

You can also run a `Master` one round at a time, which suits tests or
another loop:

```python
readable = master.poll(1.0)      # set of ready descriptors; empty on timeout
if readable:
    master.accept_requests(readable)
    master.receive_requests(readable)
    master.respond_requests(readable)
```

`Master.read_fds()` returns the watched descriptors, and `Master.nfds()`
returns one more than the highest of them. `Master.close()` closes every
client and every listening socket.

The other pieces:

- `multiserv.server.Server(port)` wraps one non-blocking listening socket on
  all IPv4 interfaces. It holds the greeting it sends, has `fileno()` and
  `close()`, and can be used as a context manager. If the socket cannot be
  created, bound or made to listen, the constructor raises `RuntimeError`.
- `multiserv.request.Request` is a dataclass with what is known about one
  accepted client: its socket descriptor, IP address and port, the
  descriptor of the server that accepted it, and the last data received.
  Requests sort by client socket descriptor.
- `multiserv.single.SingleEchoServer(port)` is the single-port variant.
  `step(timeout)` runs one `select()` round, `run()` serves until
  interrupted, and `close()` shuts it down.

## What it does not do

The data a client sends is not parsed or interpreted in any way; it is only
echoed back. The server does not speak HTTP or any other protocol. It does
not buffer outgoing data: each chunk is sent with a single `send()` call. It
does not handle IPv6, and it has no configuration beyond the port numbers.

## Tests

```
pip install .[test]
pytest
```