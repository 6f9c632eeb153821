"""帧调度模块：按显示刷新频率轮询，推理节流后驱动检测流水线"""

import logging
import threading
import time
from typing import Callable, Optional

from models.data_models import DetectionStats

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class Throttle:
    """
    最小间隔门限。

    inclusive=True 时间隔 >= interval_ms 即放行，否则需严格大于。
    从未触发过的门限总是放行。
    """

    def __init__(self, interval_ms: float, inclusive: bool = True):
        self.interval_ms = interval_ms
        self.inclusive = inclusive
        self.last_ms: Optional[float] = None

    def ready(self, now_ms: float) -> bool:
        if self.last_ms is None:
            return True
        elapsed = now_ms - self.last_ms
        if self.inclusive:
            return elapsed >= self.interval_ms
        return elapsed > self.interval_ms

    def mark(self, now_ms: float):
        self.last_ms = now_ms

    def reset(self):
        self.last_ms = None


class FrameScheduler:
    """
    在后台线程中持续轮询关键点来源。

    每次轮询先检查会话的推理节流，未到间隔则直接返回；
    到达间隔时阻塞等待 provider.estimate() 完成，再把结果交给会话处理。
    推理耗时超过间隔时不补帧、不排队，下一帧从推理开始时刻重新计时。
    """

    def __init__(
        self,
        provider,
        session,
        poll_interval_ms: float = 16,
        clock: Callable[[], float] = monotonic_ms,
    ):
        self.provider = provider
        self.session = session
        self.poll_interval_ms = poll_interval_ms
        self._clock = clock
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="frame-scheduler", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = 2.0):
        """停止轮询并等待线程退出；仍在进行的推理结果会被丢弃。"""
        self._stop_event.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("调度线程未在 %.1f 秒内退出，等待中的推理结果将被丢弃", timeout)
        self._thread = None

    def poll(self) -> Optional[DetectionStats]:
        """执行一次轮询，返回本次发出的检测快照（没有则为 None）。"""
        now = self._clock()
        throttle = self.session.inference_throttle
        if not throttle.ready(now):
            return None
        throttle.mark(now)

        try:
            landmarks = self.provider.estimate()
        except Exception:
            logger.exception("关键点检测失败")
            landmarks = None

        if self._stop_event.is_set():
            return None

        if landmarks is None:
            self.session.report_no_face()
            return None

        return self.session.process_frame(landmarks, now)

    def _run(self):
        interval = self.poll_interval_ms / 1000.0
        while not self._stop_event.is_set():
            try:
                self.poll()
            except Exception:
                logger.exception("检测循环出错")
            self._stop_event.wait(interval)
