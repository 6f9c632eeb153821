"""警报副作用分发：根据警报等级控制警报声并节流保存疲劳事件"""

import logging
import time
from typing import Callable, Optional

from models.data_models import AlertLevel, DetectionStats, EventType, FatigueEvent, MonitorConfig
from scheduling.frame_scheduler import Throttle

logger = logging.getLogger(__name__)


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


class EffectDispatcher:
    """每个检测快照调用一次 dispatch()；告警声和存储的异常在此处截获。"""

    def __init__(
        self,
        alarm,
        event_store,
        config: Optional[MonitorConfig] = None,
        clock: Callable[[], int] = wall_clock_ms,
    ):
        self.alarm = alarm
        self.event_store = event_store
        self.config = config or MonitorConfig()
        self._clock = clock
        self._event_throttle = Throttle(self.config.persistence_throttle_ms, inclusive=False)
        self.level = AlertLevel.NORMAL

    def dispatch(self, stats: DetectionStats):
        level = stats.alert_level
        if level is not self.level:
            logger.info("警报等级 %s -> %s (分数 %.1f)", self.level.value, level.value, stats.fatigue_score)
        self.level = level

        if level is AlertLevel.CRITICAL:
            self._call_alarm(self.alarm.start)
            now = self._clock()
            if self._event_throttle.ready(now):
                self._event_throttle.mark(now)
                self._persist(FatigueEvent(
                    id=str(now),
                    timestamp=now,
                    type=EventType.DROWSINESS,
                    severity=stats.fatigue_score,
                ))
        else:
            self._call_alarm(self.alarm.stop)

    def dismiss(self):
        """手动解除：停止警报并回到 NORMAL。"""
        self._call_alarm(self.alarm.stop)
        if self.level is not AlertLevel.NORMAL:
            logger.info("警报已手动解除")
        self.level = AlertLevel.NORMAL

    def reset(self):
        self.dismiss()
        self._event_throttle.reset()

    def _call_alarm(self, command):
        try:
            command()
        except Exception:
            logger.exception("警报设备命令失败")

    def _persist(self, event: FatigueEvent):
        try:
            self.event_store.append_event(event)
        except Exception:
            logger.exception("保存疲劳事件失败: %s", event.id)
