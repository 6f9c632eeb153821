"""检测快照通道：最新值槽位 + 分数历史，供界面轮询"""

import datetime
import threading
from collections import deque
from typing import List, Optional

from models.data_models import DetectionStats

HISTORY_SIZE = 50


class StatsChannel:
    """保存最近一次检测快照；人脸丢失时只更新 face_detected，不覆盖快照。"""

    def __init__(self, history_size: int = HISTORY_SIZE):
        self._lock = threading.Lock()
        self._latest: Optional[DetectionStats] = None
        self._face_detected = False
        self._version = 0
        self._history = deque(maxlen=history_size)

    def publish(self, stats: DetectionStats):
        with self._lock:
            self._latest = stats
            self._face_detected = True
            self._version += 1
            self._history.append({
                "time": datetime.datetime.now().strftime("%H:%M:%S"),
                "score": stats.fatigue_score,
            })

    def replace_latest(self, stats: DetectionStats):
        """替换当前快照但不记入历史（用于解除警报后的界面刷新）。"""
        with self._lock:
            self._latest = stats
            self._version += 1

    def mark_no_signal(self):
        with self._lock:
            if self._face_detected:
                self._face_detected = False
                self._version += 1

    def latest(self) -> Optional[DetectionStats]:
        with self._lock:
            return self._latest

    @property
    def face_detected(self) -> bool:
        with self._lock:
            return self._face_detected

    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    def history(self) -> List[dict]:
        with self._lock:
            return list(self._history)
