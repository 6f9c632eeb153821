"""警报声音模块：两态（播放/停止）警报资源 + pygame 警笛后端"""

import logging
import os
from enum import Enum

import numpy as np

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import pygame  # noqa: E402

logger = logging.getLogger(__name__)

SAMPLE_RATE = 22050


def build_siren_samples(sample_rate: int = SAMPLE_RATE, duration: float = 1.0) -> np.ndarray:
    """
    生成一个周期的锯齿波警笛（可循环播放）。

    基频 0.5 秒内由 440Hz 指数升至 880Hz，再线性回落到 440Hz；
    叠加 4Hz 方波调制（±200Hz），增益 0.5。

    Returns:
        int16 单声道采样
    """
    t = np.arange(int(sample_rate * duration)) / sample_rate
    half = duration / 2.0

    freq = np.where(
        t < half,
        440.0 * np.power(2.0, t / half),
        880.0 - 440.0 * (t - half) / half,
    )
    lfo = np.where(np.sin(2 * np.pi * 4.0 * t) >= 0, 200.0, -200.0)
    freq = freq + lfo

    cycles = np.cumsum(freq) / sample_rate
    wave = 2.0 * (cycles % 1.0) - 1.0
    return (wave * 0.5 * 32767).astype(np.int16)


def build_ping_samples(sample_rate: int = SAMPLE_RATE, duration: float = 0.2) -> np.ndarray:
    """生成启动提示音：正弦波 880Hz -> 440Hz，音量 0.2 指数衰减到 0.01。"""
    t = np.arange(int(sample_rate * duration)) / sample_rate
    freq = 880.0 * np.power(0.5, t / duration)
    gain = 0.2 * np.power(0.01 / 0.2, t / duration)

    cycles = np.cumsum(freq) / sample_rate
    wave = np.sin(2 * np.pi * cycles) * gain
    return (wave * 32767).astype(np.int16)


class PygameSiren:
    """pygame.mixer 播放后端，mixer 初始化失败时抛出 pygame.error"""

    def __init__(self, sample_rate: int = SAMPLE_RATE):
        pygame.mixer.init(frequency=sample_rate, size=-16, channels=1, allowedchanges=0)
        self._siren = pygame.mixer.Sound(buffer=build_siren_samples(sample_rate).tobytes())
        self._ping = pygame.mixer.Sound(buffer=build_ping_samples(sample_rate).tobytes())

    def play(self):
        self._siren.play(loops=-1)

    def stop(self):
        self._siren.stop()

    def ping(self):
        self._ping.play()

    def close(self):
        self._siren.stop()
        pygame.mixer.quit()


class AlarmState(Enum):
    PLAYING = "PLAYING"
    STOPPED = "STOPPED"


class AlarmPlayer:
    """
    会话内共享的警报资源。

    start() 在播放中调用无效果，stop() 在已停止时调用也安全。
    没有后端（音频不可用）时命令为空操作，但状态照常切换，
    视觉警报等级不受影响。
    """

    def __init__(self, backend=None):
        self._backend = backend
        self.state = AlarmState.STOPPED

    @property
    def is_playing(self) -> bool:
        return self.state is AlarmState.PLAYING

    @property
    def audio_available(self) -> bool:
        return self._backend is not None

    def start(self):
        if self.state is AlarmState.PLAYING:
            return
        if self._backend is not None:
            try:
                self._backend.play()
            except Exception:
                # 保持 STOPPED，下一次 start() 重试
                logger.exception("警报播放失败")
                return
        self.state = AlarmState.PLAYING

    def stop(self):
        if self.state is AlarmState.STOPPED:
            return
        self.state = AlarmState.STOPPED
        if self._backend is not None:
            try:
                self._backend.stop()
            except Exception:
                logger.exception("警报停止失败")

    def ping(self):
        if self._backend is None:
            return
        try:
            self._backend.ping()
        except Exception:
            logger.exception("提示音播放失败")

    def close(self):
        """程序退出时停止警报并释放音频设备。"""
        self.stop()
        if self._backend is None:
            return
        try:
            self._backend.close()
        except Exception:
            logger.exception("释放音频设备失败")
        self._backend = None


def create_alarm(enabled: bool = True) -> AlarmPlayer:
    """创建警报播放器；禁用音频或 mixer 不可用时返回无后端的播放器。"""
    if not enabled:
        return AlarmPlayer()
    try:
        return AlarmPlayer(PygameSiren())
    except pygame.error as e:
        logger.warning("音频设备不可用，警报声音已禁用: %s", e)
        return AlarmPlayer()
