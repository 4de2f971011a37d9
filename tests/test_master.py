import socket

import pytest

from multiserv.master import Master, main, parse_ports


@pytest.fixture
def master():
    m = Master([0])
    m.start_servers()
    yield m
    m.close()


def _connect(m):
    port = m.servers[0].address[1]
    return socket.create_connection(("127.0.0.1", port), timeout=2)


def _accept(m):
    client = _connect(m)
    readable = m.poll(2)
    m.accept_requests(readable)
    return client


def test_parse_ports_dedupes_and_sorts():
    assert parse_ports(["8080", "80", "8080"]) == [80, 8080]


def test_parse_ports_follows_atoi():
    assert parse_ports(["abc"]) == [0]
    assert parse_ports(["12abc"]) == [12]
    assert parse_ports(["  42"]) == [42]
    assert parse_ports(["-5"]) == [-5]


def test_no_fds_gives_one():
    m = Master([])
    assert m.read_fds() == []
    assert m.nfds() == 1


def test_start_without_ports_raises():
    with pytest.raises(RuntimeError, match="No servers could be started"):
        Master([]).start_servers()


def test_start_skips_failing_port():
    blocker = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    blocker.bind(("", 0))
    blocker.listen(1)
    try:
        m = Master([0, blocker.getsockname()[1]])
        m.start_servers()
        try:
            assert len(m.servers) == 1
        finally:
            m.close()
    finally:
        blocker.close()


def test_nfds_exceeds_every_fd(master):
    fds = master.read_fds()
    assert fds
    assert all(fd < master.nfds() for fd in fds)


def test_new_client_is_greeted(master):
    with _accept(master) as client:
        assert client.recv(1024) == master.servers[0].greeting
        assert len(master.clients) == 1
        fd = next(iter(master.clients))
        req = master.requests[fd]
        assert req.client_ip == "127.0.0.1"
        assert req.client_port == client.getsockname()[1]
        assert req.serv_socket == master.servers[0].fileno()
        assert master.client_servers[fd] is master.servers[0]


def test_echoes_what_client_sends(master):
    with _accept(master) as client:
        client.recv(1024)
        client.sendall(b"ping")
        readable = master.poll(2)
        master.receive_requests(readable)
        fd = next(iter(master.clients))
        assert master.requests[fd].req_buffer == b"ping"
        master.respond_requests(readable)
        assert client.recv(1024) == b"ping"


def test_disconnect_removes_client(master):
    client = _accept(master)
    client.recv(1024)
    client.close()
    readable = master.poll(2)
    master.receive_requests(readable)
    assert master.clients == {}
    assert master.requests == {}


def test_empty_buffer_response_drops_client(master):
    with _accept(master) as client:
        client.recv(1024)
        fd = next(iter(master.clients))
        master.respond_requests({fd})
        assert master.clients == {}
        assert client.recv(1024) == b""


def test_poll_times_out_empty(master):
    assert master.poll(0) == set()


def test_close_closes_servers(master):
    _accept(master).close()
    master.close()
    assert master.clients == {}
    assert master.servers[0].fileno() == -1


def test_main_without_arguments():
    assert main([]) == 1


def test_main_fails_when_port_taken():
    blocker = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    blocker.bind(("", 0))
    blocker.listen(1)
    try:
        assert main([str(blocker.getsockname()[1])]) == 1
    finally:
        blocker.close()