"""嘴巴开合度分析模块，负责计算 MAR 值"""

import math
from typing import Mapping, Sequence

from models.data_models import LandmarkFrame, MouthResult, Point

# FaceMesh 嘴巴关键点索引：上唇、下唇、左右嘴角
MOUTH_INDICES = {
    "top": 13,
    "bottom": 14,
    "left": 61,
    "right": 291,
}


def calculate_mar(landmarks: Sequence[Point], indices: Mapping[str, int] = MOUTH_INDICES) -> float:
    """
    计算 MAR 值。

    公式: MAR = |top-bottom| / |left-right|

    Returns:
        MAR 值；关键点为空、索引越界或分母为零时返回 0.0
    """
    if not landmarks or max(indices.values()) >= len(landmarks):
        return 0.0

    horizontal = math.dist(landmarks[indices["left"]], landmarks[indices["right"]])
    if horizontal == 0.0:
        return 0.0

    vertical = math.dist(landmarks[indices["top"]], landmarks[indices["bottom"]])
    return vertical / horizontal


class MouthAnalyzer:
    """计算嘴巴 MAR 值，无内部状态"""

    def __init__(self, indices=None):
        self.indices = dict(indices or MOUTH_INDICES)

    def analyze(self, frame: LandmarkFrame) -> MouthResult:
        return MouthResult(mar=calculate_mar(frame.points, self.indices))
