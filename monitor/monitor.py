"""疲劳监测系统：管理会话的启动、停止和对外查询接口"""

import logging
import threading
from typing import Callable, Optional

from config import merge_config
from models.data_models import MonitorConfig
from monitor.session import MonitoringSession
from scheduling.frame_scheduler import FrameScheduler

logger = logging.getLogger(__name__)


class DrowsinessMonitor:
    """
    CLI 和 Web 接口共用的监测系统。

    每次 start() 新建关键点来源、会话和调度器；stop() 取消调度、
    静音并丢弃会话，分数和节流计时不会跨越一次停止/启动。
    """

    def __init__(
        self,
        provider_factory: Callable,
        alarm,
        event_store,
        config: Optional[MonitorConfig] = None,
    ):
        self.config = config or MonitorConfig()
        self._provider_factory = provider_factory
        self.alarm = alarm
        self.event_store = event_store
        self._lifecycle_lock = threading.Lock()
        self._provider = None
        self._scheduler: Optional[FrameScheduler] = None
        self.session: Optional[MonitoringSession] = None

    @property
    def is_running(self) -> bool:
        return self.session is not None

    def start(self) -> bool:
        """启动检测；关键点来源无法打开时抛出其异常（如 CameraError）。"""
        with self._lifecycle_lock:
            if self.session is not None:
                return True

            provider = self._provider_factory()
            provider.open()
            try:
                self.event_store.set_capacity(self.config.event_log_capacity)
                session = MonitoringSession(self.config, self.alarm, self.event_store)
                scheduler = FrameScheduler(provider, session, poll_interval_ms=self.config.poll_interval_ms)
                scheduler.start()
            except Exception:
                provider.close()
                raise

            self._provider = provider
            self.session = session
            self._scheduler = scheduler
            self.alarm.ping()
            logger.info("监测已启动")
            return True

    def stop(self):
        with self._lifecycle_lock:
            if self.session is None:
                return
            self._scheduler.stop()
            self.session.close()
            try:
                self._provider.close()
            except Exception:
                logger.exception("关闭关键点来源失败")
            self._scheduler = None
            self._provider = None
            self.session = None
            logger.info("监测已停止")

    def dismiss(self):
        session = self.session
        if session is not None:
            session.dismiss()
        else:
            self.alarm.stop()

    def get_data(self) -> dict:
        """当前检测快照（供界面轮询）。"""
        session = self.session
        data = {
            "running": session is not None,
            "face_detected": False,
            "alert_level": "NORMAL",
            "alarm_playing": self.alarm.is_playing,
            "stats": None,
        }
        if session is None:
            return data

        latest = session.channel.latest()
        data["face_detected"] = session.channel.face_detected
        data["alert_level"] = session.alert_level.value
        data["stats"] = latest.to_dict() if latest is not None else None
        return data

    def get_history(self) -> list:
        session = self.session
        return session.channel.history() if session is not None else []

    def list_events(self) -> list:
        return [e.to_dict() for e in self.event_store.list_events()]

    def clear_events(self):
        self.event_store.clear_events()

    def update_config(self, overrides: dict) -> MonitorConfig:
        """更新配置（含事件日志容量），下一次 start() 时生效。"""
        self.config = merge_config(self.config, overrides)
        logger.info("配置已更新，将在下次启动时生效")
        return self.config
