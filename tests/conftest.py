import sys
import os

# Add project root to sys.path so tests can import from all modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest  # noqa: E402
from hypothesis import settings  # noqa: E402

from models.data_models import LandmarkFrame  # noqa: E402

# CI profile: more examples for thorough testing
settings.register_profile("ci", max_examples=200)
# Dev profile: fewer examples for faster iteration
settings.register_profile("dev", max_examples=100)
# Default to dev profile
settings.load_profile("dev")

NUM_LANDMARKS = 478


def build_landmarks(ear=0.3, mar=0.1, num_points=NUM_LANDMARKS):
    """构造一帧关键点，使双眼 EAR 和嘴巴 MAR 恰好为给定值。"""
    points = [(0.0, 0.0)] * num_points

    def place_eye(indices, x0, y0):
        # 眼角相距 10，上下眼睑各偏离中线 h，EAR = 4h / 20
        h = ear * 5.0
        p1, p2, p3, p4, p5, p6 = indices
        points[p1] = (x0, y0)
        points[p4] = (x0 + 10.0, y0)
        points[p2] = (x0 + 3.0, y0 - h)
        points[p6] = (x0 + 3.0, y0 + h)
        points[p3] = (x0 + 7.0, y0 - h)
        points[p5] = (x0 + 7.0, y0 + h)

    place_eye([33, 160, 158, 133, 153, 144], 100.0, 100.0)
    place_eye([362, 385, 387, 263, 373, 380], 200.0, 100.0)

    # 嘴角相距 10，上下唇距离 10 * mar
    points[61] = (150.0, 200.0)
    points[291] = (160.0, 200.0)
    points[13] = (155.0, 200.0 - mar * 5.0)
    points[14] = (155.0, 200.0 + mar * 5.0)

    return LandmarkFrame(points=points)


@pytest.fixture
def landmarks():
    """关键点帧工厂：landmarks(ear=..., mar=...)"""
    return build_landmarks


class FakeClock:
    """可手动推进的毫秒时钟"""

    def __init__(self, start=1_000_000):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms
        return self.now


@pytest.fixture
def clock():
    return FakeClock()
