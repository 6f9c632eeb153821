"""人脸关键点检测模块，基于 MediaPipe FaceMesh"""

from typing import Optional

import cv2
import mediapipe as mp
import numpy as np

from models.data_models import LandmarkFrame


class FaceDetector:
    """使用 MediaPipe FaceMesh 检测单张人脸的关键点"""

    def __init__(
        self,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        refine_landmarks: bool = True,
    ):
        """初始化 MediaPipe FaceMesh（只跟踪一张人脸）"""
        self._face_mesh = mp.solutions.face_mesh.FaceMesh(
            max_num_faces=1,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
            refine_landmarks=refine_landmarks,
        )

    def detect(self, frame: np.ndarray) -> Optional[LandmarkFrame]:
        """
        检测单帧图像中的人脸关键点。

        Args:
            frame: BGR 格式的 OpenCV 图像帧

        Returns:
            LandmarkFrame（像素坐标）；未检测到人脸时返回 None
        """
        h, w = frame.shape[:2]

        # BGR -> RGB
        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        rgb_frame.flags.writeable = False

        results = self._face_mesh.process(rgb_frame)

        if not results.multi_face_landmarks:
            return None

        face = results.multi_face_landmarks[0]

        # 将归一化坐标转换为像素坐标
        return LandmarkFrame(points=[(lm.x * w, lm.y * h) for lm in face.landmark])

    def close(self):
        """释放 MediaPipe 资源"""
        self._face_mesh.close()
