"""
Tests for WhiteboardSession: local apply + broadcast + listen, end to end on loopback.
"""

import pytest

from whiteboard.client.game import WhiteboardSession
from whiteboard.shared.config import Settings
from whiteboard.shared.errors import BindError
from whiteboard.shared.peers import Endpoint, PeerDirectory
from whiteboard.shared.protocols import DrawAction, DrawMode


@pytest.fixture
def pair(make_surface):
    surfaces = (make_surface(), make_surface())
    sessions = []
    for surface in surfaces:
        settings = Settings(host="127.0.0.1", bind_host="127.0.0.1", peers=[])
        session = WhiteboardSession.from_settings(surface, settings)
        session.start(0, "127.0.0.1")
        sessions.append(session)
    endpoints = [s.directory.self_endpoint for s in sessions]
    for session in sessions:
        session.directory.configure(endpoints)
    yield sessions, surfaces
    for session in sessions:
        session.stop()


def test_local_action_is_applied_immediately_and_reaches_the_peer(pair, wait_for):
    (a, b), (surface_a, surface_b) = pair
    action = DrawAction.line((1, 1), (2, 2), (0, 0, 255), 2)
    a.draw(action)
    # applied locally before any network activity
    assert surface_a.actions == [action]
    assert wait_for(lambda: len(surface_b) == 1)
    assert surface_b.actions == [action]


def test_no_self_delivery(pair, wait_for):
    (a, b), (surface_a, surface_b) = pair
    for i in range(5):
        a.draw(DrawAction.freeform([(i, i)], (0, 0, 0), 1))
    b.draw(DrawAction.clear((255, 255, 255)))
    assert wait_for(lambda: len(surface_b) == 6 and len(surface_a) == 6)
    assert b.listener.applied == 5
    assert a.listener.applied == 1
    assert [x.mode for x in surface_a.actions].count(DrawMode.CLEAR) == 1


def test_draw_before_start_is_local_only(make_surface):
    surface = make_surface()
    session = WhiteboardSession(surface, PeerDirectory([Endpoint("127.0.0.1", 9)]))
    action = DrawAction.clear((0, 0, 0))
    session.draw(action)
    assert surface.actions == [action]
    session.stop()


def test_bind_error_is_surfaced(pair, make_surface):
    (a, _), _ = pair
    surface = make_surface()
    settings = Settings(host="127.0.0.1", bind_host="127.0.0.1")
    session = WhiteboardSession.from_settings(surface, settings)
    with pytest.raises(BindError):
        session.start(a.listener.port)
    session.stop()
