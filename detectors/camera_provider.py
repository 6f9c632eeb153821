"""摄像头关键点来源：OpenCV 采集 + FaceDetector 推理"""

import logging
from typing import Optional

import cv2

from detectors.face_detector import FaceDetector
from models.data_models import LandmarkFrame

logger = logging.getLogger(__name__)


class CameraError(RuntimeError):
    """摄像头无法打开"""


class CameraLandmarkProvider:
    """每次 estimate() 读取一帧并返回关键点，供 FrameScheduler 调用。"""

    def __init__(self, camera_index: int = 0, detector: Optional[FaceDetector] = None):
        self.camera_index = camera_index
        self._detector = detector
        self._cap = None

    def open(self):
        """打开摄像头并初始化检测器，失败时抛出 CameraError。"""
        self._cap = cv2.VideoCapture(self.camera_index)
        if not self._cap.isOpened():
            self._cap.release()
            self._cap = None
            raise CameraError(f"无法打开摄像头 {self.camera_index}")
        if self._detector is None:
            try:
                self._detector = FaceDetector()
            except Exception:
                self._cap.release()
                self._cap = None
                raise
        logger.info("摄像头 %s 已打开", self.camera_index)

    def estimate(self) -> Optional[LandmarkFrame]:
        """读取一帧并检测关键点；读帧失败或未检测到人脸时返回 None。"""
        if self._cap is None:
            return None
        ret, frame = self._cap.read()
        if not ret:
            return None
        return self._detector.detect(frame)

    def close(self):
        """释放摄像头和检测器。"""
        if self._cap is not None and self._cap.isOpened():
            self._cap.release()
        self._cap = None
        if self._detector is not None:
            self._detector.close()
            self._detector = None
