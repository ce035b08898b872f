import sys, os
import random

import pytest

# Ensure src and the repository root are on path for test imports
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SRC = os.path.join(ROOT, 'src')
for path in (SRC, ROOT):
    if path not in sys.path:
        sys.path.insert(0, path)

from lines.events.bus import EventBus
from lines.world import create_world
from tests.helpers import board_from_rows, capture, patterned_board

__all__ = [
    "board_from_rows",
    "capture",
    "patterned_board",
]


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def world(rng):
    return create_world(rng=rng)
