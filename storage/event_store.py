"""疲劳事件日志：最新在前、容量有限、可选 JSON 文件持久化"""

import json
import logging
import os
import tempfile
import threading
from typing import List, Optional, Tuple

from models.data_models import FatigueEvent

logger = logging.getLogger(__name__)


class EventStore:
    """
    追加式疲劳事件日志。

    写入串行化；读取直接返回当前不可变快照，不加锁。
    写文件失败时记录日志并丢弃该事件，不影响调用方。
    """

    def __init__(self, path: Optional[str] = None, capacity: int = 50):
        self.path = path
        self.capacity = capacity
        self._write_lock = threading.Lock()
        self._events: Tuple[FatigueEvent, ...] = tuple(self._load()[:capacity])

    def _load(self) -> List[FatigueEvent]:
        if self.path is None or not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            return [FatigueEvent.from_dict(item) for item in raw]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("无法读取事件日志 %s: %s", self.path, e)
            return []

    def _save(self, events: Tuple[FatigueEvent, ...]):
        if self.path is None:
            return
        directory = os.path.dirname(os.path.abspath(self.path))
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump([e.to_dict() for e in events], f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def append_event(self, event: FatigueEvent) -> bool:
        """追加事件（最新在前，超出容量时淘汰最旧的），返回是否写入成功。"""
        with self._write_lock:
            events = ((event,) + self._events)[:self.capacity]
            try:
                self._save(events)
            except (OSError, TypeError, ValueError) as e:
                logger.error("保存疲劳事件失败，事件已丢弃: %s", e)
                return False
            self._events = events
        return True

    def set_capacity(self, capacity: int):
        """修改容量；缩小时立即淘汰多出的最旧事件。"""
        with self._write_lock:
            if capacity == self.capacity:
                return
            self.capacity = capacity
            if len(self._events) <= capacity:
                return
            events = self._events[:capacity]
            try:
                self._save(events)
            except (OSError, TypeError, ValueError) as e:
                logger.error("保存疲劳事件失败: %s", e)
            self._events = events

    def list_events(self) -> List[FatigueEvent]:
        """返回事件列表，最新在前。"""
        return list(self._events)

    def clear_events(self):
        with self._write_lock:
            self._events = ()
            if self.path is not None and os.path.exists(self.path):
                try:
                    os.remove(self.path)
                except OSError as e:
                    logger.error("删除事件日志失败: %s", e)
