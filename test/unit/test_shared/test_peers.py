"""
Tests for Endpoint and PeerDirectory.
"""

import pytest

from whiteboard.shared.peers import Endpoint, PeerDirectory

P1 = Endpoint("10.0.0.1", 6000)
P2 = Endpoint("10.0.0.2", 6000)
ME = Endpoint("10.0.0.9", 6000)


def test_endpoint_equality_is_by_value():
    assert Endpoint("10.0.0.2", 6000) == Endpoint("10.0.0.2", 6000)
    assert Endpoint("10.0.0.2", 6000) != Endpoint("10.0.0.2", 6001)
    # no DNS normalization
    assert Endpoint("localhost", 6000) != Endpoint("127.0.0.1", 6000)
    assert len({Endpoint("a", 1), Endpoint("a", 1)}) == 1


@pytest.mark.parametrize("host,port", [("", 1), ("h", -1), ("h", 65536), ("h", "80"), ("h", True)])
def test_endpoint_rejects_malformed(host, port):
    with pytest.raises(ValueError):
        Endpoint(host, port)


def test_endpoint_parse():
    assert Endpoint.parse("192.168.0.69:55551") == Endpoint("192.168.0.69", 55551)
    assert Endpoint.parse(" example.com:80 ") == Endpoint("example.com", 80)
    assert str(Endpoint("h", 5)) == "h:5"


@pytest.mark.parametrize("text", ["nohost", ":80", "host:", "host:abc", "host:70000"])
def test_endpoint_parse_rejects_malformed(text):
    with pytest.raises(ValueError):
        Endpoint.parse(text)


@pytest.mark.parametrize(
    "configured",
    [
        [P1, P2, ME],
        [ME, P1, P2],
        [P1, ME, P2, ME],
        [ME, ME, P1, ME, P2],
    ],
)
def test_peers_excluding_self(configured):
    directory = PeerDirectory()
    directory.configure(configured)
    directory.set_self(ME)
    assert directory.peers_excluding_self() == [P1, P2]


def test_duplicates_of_other_peers_are_kept():
    directory = PeerDirectory([P1, P1, P2])
    directory.set_self(ME)
    assert directory.peers_excluding_self() == [P1, P1, P2]


def test_without_self_every_peer_is_returned():
    directory = PeerDirectory([P1, P2])
    assert directory.self_endpoint is None
    assert directory.peers_excluding_self() == [P1, P2]


def test_empty_directory():
    directory = PeerDirectory()
    directory.set_self(ME)
    assert directory.peers_excluding_self() == []
    assert len(directory) == 0


def test_configure_replaces_peers():
    directory = PeerDirectory([P1])
    directory.configure([P2])
    assert directory.peers == (P2,)


def test_concrete_scenario():
    directory = PeerDirectory([Endpoint("10.0.0.2", 6000), Endpoint("10.0.0.3", 6000)])
    directory.set_self(Endpoint("10.0.0.2", 6000))
    assert directory.peers_excluding_self() == [Endpoint("10.0.0.3", 6000)]
