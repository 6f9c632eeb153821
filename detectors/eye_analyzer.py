"""眼睛开合度分析模块，负责计算双眼 EAR 值"""

import math
from typing import Sequence

from models.data_models import EyeResult, LandmarkFrame, Point

# FaceMesh 眼睛关键点索引: [左角, 上1, 上2, 右角, 下2, 下1]
LEFT_EYE_INDICES = [33, 160, 158, 133, 153, 144]
RIGHT_EYE_INDICES = [362, 385, 387, 263, 373, 380]


def calculate_ear(landmarks: Sequence[Point], indices: Sequence[int]) -> float:
    """
    计算单只眼睛的 EAR 值。

    公式: EAR = (|p2-p6| + |p3-p5|) / (2 * |p1-p4|)

    Args:
        landmarks: 整帧关键点 [(x,y), ...]
        indices: 6 个眼睛轮廓关键点索引

    Returns:
        EAR 值；关键点为空、索引越界或分母为零时返回 0.0
    """
    if not landmarks or max(indices) >= len(landmarks):
        return 0.0

    p1, p2, p3, p4, p5, p6 = (landmarks[i] for i in indices)

    horizontal = math.dist(p1, p4)
    if horizontal == 0.0:
        return 0.0

    vertical_1 = math.dist(p2, p6)
    vertical_2 = math.dist(p3, p5)

    return (vertical_1 + vertical_2) / (2.0 * horizontal)


class EyeAnalyzer:
    """计算左右眼 EAR 并取平均，无内部状态"""

    def __init__(self, left_indices=None, right_indices=None):
        self.left_indices = list(left_indices or LEFT_EYE_INDICES)
        self.right_indices = list(right_indices or RIGHT_EYE_INDICES)

    def analyze(self, frame: LandmarkFrame) -> EyeResult:
        """
        分析双眼开合度。

        Args:
            frame: 单帧人脸关键点

        Returns:
            EyeResult(ear, left_ear, right_ear)，ear 为左右眼平均值
        """
        left_ear = calculate_ear(frame.points, self.left_indices)
        right_ear = calculate_ear(frame.points, self.right_indices)

        return EyeResult(
            ear=(left_ear + right_ear) / 2.0,
            left_ear=left_ear,
            right_ear=right_ear,
        )
