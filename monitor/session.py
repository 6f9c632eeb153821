"""监测会话：持有疲劳分数和所有节流计时，串行执行单帧检测流水线"""

import dataclasses
import logging
import threading
from typing import Optional

from alerts.dispatcher import EffectDispatcher, wall_clock_ms
from detectors.eye_analyzer import EyeAnalyzer
from detectors.mouth_analyzer import MouthAnalyzer
from evaluators.alert_classifier import AlertClassifier
from evaluators.fatigue_accumulator import FatigueAccumulator
from models.data_models import AlertLevel, DetectionStats, LandmarkFrame, MonitorConfig
from monitor.channel import StatsChannel
from scheduling.frame_scheduler import Throttle

logger = logging.getLogger(__name__)


class MonitoringSession:
    """
    一次开始/停止之间的检测状态。

    process_frame()、dismiss() 和 close() 共用一把锁，
    保证分数更新不会并发重入。
    """

    def __init__(self, config: MonitorConfig, alarm, event_store, clock=wall_clock_ms):
        self.config = config
        self.alarm = alarm
        self.eye_analyzer = EyeAnalyzer()
        self.mouth_analyzer = MouthAnalyzer()
        self.accumulator = FatigueAccumulator(config)
        self.classifier = AlertClassifier(config)
        self.dispatcher = EffectDispatcher(alarm, event_store, config, clock=clock)
        self.inference_throttle = Throttle(config.inference_throttle_ms, inclusive=True)
        self.notification_throttle = Throttle(config.notification_throttle_ms, inclusive=False)
        self.channel = StatsChannel()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def fatigue_score(self) -> float:
        return self.accumulator.score

    @property
    def alert_level(self) -> AlertLevel:
        return self.dispatcher.level

    def process_frame(self, frame: LandmarkFrame, now_ms: float) -> Optional[DetectionStats]:
        """
        处理一帧关键点：计算 EAR/MAR，更新分数，按通知节流发出快照并分发副作用。

        Args:
            frame: 关键点帧（空帧按 EAR=MAR=0 处理）
            now_ms: 本帧推理开始时刻（单调时钟毫秒）

        Returns:
            发出的 DetectionStats；被通知节流拦下或会话已关闭时返回 None
        """
        with self._lock:
            if self._closed:
                return None
            eye = self.eye_analyzer.analyze(frame)
            mouth = self.mouth_analyzer.analyze(frame)
            score = self.accumulator.update(eye.ear, mouth.mar)

            urgent = score > self.config.fatigue_trigger
            if not (urgent or self.notification_throttle.ready(now_ms)):
                return None
            self.notification_throttle.mark(now_ms)

            stats = DetectionStats(
                ear=eye.ear,
                mar=mouth.mar,
                fatigue_score=score,
                is_drowsy=self.classifier.is_drowsy(eye.ear),
                is_yawning=self.classifier.is_yawning(mouth.mar),
                alert_level=self.classifier.classify(score),
            )
            self.dispatcher.dispatch(stats)
            self.channel.publish(stats)
            return stats

    def report_no_face(self):
        """未检测到人脸：不更新分数，只通知界面无信号。"""
        self.channel.mark_no_signal()

    def dismiss(self):
        """停止警报、回到 NORMAL 并将疲劳分数强制归零。"""
        with self._lock:
            self.dispatcher.dismiss()
            self.accumulator.reset()
            latest = self.channel.latest()
            if latest is not None:
                self.channel.replace_latest(dataclasses.replace(
                    latest, fatigue_score=0.0, alert_level=AlertLevel.NORMAL,
                ))

    def close(self):
        """会话结束：静音并清空分数和全部节流计时，之后到达的帧一律丢弃。"""
        with self._lock:
            self._closed = True
            self.dispatcher.reset()
            self.accumulator.reset()
            self.inference_throttle.reset()
            self.notification_throttle.reset()
