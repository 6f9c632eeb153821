"""疲劳分数累积模块：按帧积分/衰减，输出 0-100 的疲劳分数"""

from typing import Optional

from models.data_models import MonitorConfig

SCORE_MIN = 0.0
SCORE_MAX = 100.0

# 每帧增量。闭眼上升快，睁眼衰减比困倦上升更快，用于抑制误报。
EYES_CLOSED_DELTA = 5.0
EYES_DROWSY_DELTA = 0.5
EYES_OPEN_DELTA = -4.0
YAWN_DELTA = 1.0


def compute_fatigue_score(
    score: float,
    ear: float,
    mar: float,
    ear_closed: float = 0.16,
    ear_drowsy: float = 0.22,
    mar_yawn: float = 0.5,
) -> float:
    """
    根据当前帧的 EAR/MAR 更新疲劳分数。

    眼睛状态按优先级互斥取值（闭眼 > 困倦 > 睁眼），哈欠增量独立叠加。

    Args:
        score: 上一帧的疲劳分数
        ear: 双眼平均 EAR
        mar: 嘴巴 MAR

    Returns:
        新分数，限制在 [0, 100] 并保留一位小数
    """
    if ear < ear_closed:
        delta = EYES_CLOSED_DELTA
    elif ear < ear_drowsy:
        delta = EYES_DROWSY_DELTA
    else:
        delta = EYES_OPEN_DELTA

    if mar > mar_yawn:
        delta += YAWN_DELTA

    new_score = min(SCORE_MAX, max(SCORE_MIN, score + delta))
    return round(new_score, 1)


class FatigueAccumulator:
    """持有一个监测会话的疲劳分数"""

    def __init__(self, config: Optional[MonitorConfig] = None):
        self.config = config or MonitorConfig()
        self.score = SCORE_MIN

    def update(self, ear: float, mar: float) -> float:
        self.score = compute_fatigue_score(
            self.score, ear, mar,
            ear_closed=self.config.ear_closed,
            ear_drowsy=self.config.ear_drowsy,
            mar_yawn=self.config.mar_yawn,
        )
        return self.score

    def reset(self):
        """分数归零（停止会话或解除警报时调用）"""
        self.score = SCORE_MIN
