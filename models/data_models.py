"""核心数据模型定义"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import List, Tuple

Point = Tuple[float, float]


@dataclass(frozen=True)
class LandmarkFrame:
    """单帧人脸关键点（FaceMesh 拓扑顺序的像素坐标）"""
    points: List[Point]

    @property
    def is_empty(self) -> bool:
        return len(self.points) == 0


@dataclass(frozen=True)
class EyeResult:
    """眼睛开合度结果"""
    ear: float
    left_ear: float
    right_ear: float


@dataclass(frozen=True)
class MouthResult:
    """嘴巴开合度结果"""
    mar: float


@dataclass(frozen=True)
class Tilt:
    """头部姿态占位字段，本系统不计算，恒为 0"""
    pitch: float = 0.0
    yaw: float = 0.0
    roll: float = 0.0


class AlertLevel(Enum):
    NORMAL = "NORMAL"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class EventType(Enum):
    DROWSINESS = "DROWSINESS"
    YAWN = "YAWN"
    DISTRACTION = "DISTRACTION"


@dataclass(frozen=True)
class DetectionStats:
    """一次通知周期输出的检测快照"""
    ear: float
    mar: float
    fatigue_score: float
    is_drowsy: bool
    is_yawning: bool
    alert_level: AlertLevel = AlertLevel.NORMAL
    tilt: Tilt = field(default_factory=Tilt)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["alert_level"] = self.alert_level.value
        return data


@dataclass(frozen=True)
class FatigueEvent:
    """持久化的疲劳事件，创建后不可修改"""
    id: str
    timestamp: int
    type: EventType
    severity: float

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "type": self.type.value,
            "severity": self.severity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FatigueEvent":
        return cls(
            id=str(data["id"]),
            timestamp=int(data["timestamp"]),
            type=EventType(data["type"]),
            severity=float(data["severity"]),
        )


@dataclass(frozen=True)
class MonitorConfig:
    """可调阈值与节流参数"""
    ear_drowsy: float = 0.22
    ear_closed: float = 0.16
    mar_yawn: float = 0.5
    fatigue_trigger: float = 80.0
    warning_margin: float = 20.0
    inference_throttle_ms: int = 100
    notification_throttle_ms: int = 100
    persistence_throttle_ms: int = 5000
    event_log_capacity: int = 50
    poll_interval_ms: int = 16
