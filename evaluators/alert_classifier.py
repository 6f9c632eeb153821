"""警报等级判定模块"""

from typing import Optional

from models.data_models import AlertLevel, MonitorConfig


def classify(score: float, trigger: float = 80.0, warning_margin: float = 20.0) -> AlertLevel:
    """
    将疲劳分数映射为警报等级。

    score > trigger 为 CRITICAL；trigger - warning_margin < score <= trigger 为 WARNING；
    其余为 NORMAL。
    """
    if score > trigger:
        return AlertLevel.CRITICAL
    if score > trigger - warning_margin:
        return AlertLevel.WARNING
    return AlertLevel.NORMAL


class AlertClassifier:
    """按配置阈值判定警报等级，并给出与等级无关的 EAR/MAR 诊断标志。"""

    def __init__(self, config: Optional[MonitorConfig] = None):
        self.config = config or MonitorConfig()

    def classify(self, score: float) -> AlertLevel:
        return classify(score, self.config.fatigue_trigger, self.config.warning_margin)

    def is_drowsy(self, ear: float) -> bool:
        # 包含闭眼
        return ear < self.config.ear_drowsy

    def is_eye_closed(self, ear: float) -> bool:
        return ear < self.config.ear_closed

    def is_yawning(self, mar: float) -> bool:
        return mar > self.config.mar_yawn
