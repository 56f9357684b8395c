"""
Pytest configuration and shared fixtures for the distributed whiteboard.
"""

import os
import sys
import threading
import time

import pytest

# Add src to path for testing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

# Run pygame without a display or audio device
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from whiteboard.shared.protocols import DrawAction, DrawMode  # noqa: E402


class RecordingSurface:
    """RenderSurface that records every applied action."""

    def __init__(self):
        self.actions = []
        self._lock = threading.Lock()

    def apply_action(self, action):
        with self._lock:
            self.actions.append(action)

    def __len__(self):
        with self._lock:
            return len(self.actions)


def wait_for(predicate, timeout=5.0, interval=0.01):
    """Poll until predicate() is true or the timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def sample_actions():
    """One valid action for every draw mode."""
    return {
        DrawMode.LINE: DrawAction.line((10, 20), (300, 400), (255, 0, 0), 5),
        DrawMode.FREEFORM: DrawAction.freeform([(1, 1), (2, 3), (5, 8), (-13, 21)], (0, 128, 0), 3),
        DrawMode.RECTANGLE: DrawAction.box(DrawMode.RECTANGLE, (50, 60), (10, 20), (0, 0, 255), 2),
        DrawMode.FILLED_RECTANGLE: DrawAction.box(DrawMode.FILLED_RECTANGLE, (0, 0), (99, 99), (1, 2, 3), 1),
        DrawMode.ELLIPSE: DrawAction.box(DrawMode.ELLIPSE, (100, 100), (200, 150), (10, 20, 30), 64),
        DrawMode.FILLED_ELLIPSE: DrawAction.box(DrawMode.FILLED_ELLIPSE, (5, 5), (25, 45), (200, 100, 0), 4),
        DrawMode.CLEAR: DrawAction.clear((255, 255, 255)),
    }


@pytest.fixture
def line_action():
    return DrawAction.line((0, 0), (100, 100), (255, 0, 0), 5)


@pytest.fixture(name="wait_for")
def wait_for_fixture():
    return wait_for


@pytest.fixture
def make_surface():
    return RecordingSurface
