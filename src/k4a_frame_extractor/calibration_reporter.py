"""
Calibration Reporter Module
Recording calibration 정보를 콘솔에 출력하고 JSON으로 저장하는 모듈
"""

import json
import logging
from pathlib import Path
from typing import List
import numpy as np

from .models import CalibrationProfile, CameraCalibration


class CalibrationReporter:
    """Calibration dump for operator inspection"""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    def format_calibration(self, profile: CalibrationProfile) -> List[str]:
        """
        Calibration을 출력용 line 리스트로 변환

        Extrinsic rows are row-major rotation values, each row followed by
        its translation component.
        """
        lines = []
        for label, camera in (('RGB', profile.color), ('Depth', profile.depth)):
            lines.extend(self._format_camera(label, camera))
        return lines

    @staticmethod
    def _format_camera(label: str, camera: CameraCalibration) -> List[str]:
        rotation = np.asarray(camera.rotation, dtype=float).reshape(3, 3)
        translation = np.asarray(camera.translation, dtype=float).reshape(3)

        lines = [
            f"{label} Camera Intrinsics:",
            " ".join(f"{v:f}" for v in np.asarray(camera.intrinsics, dtype=float)),
            f"{label} Camera Extrinsics:",
        ]
        for row, t in zip(rotation, translation):
            lines.append(" ".join(f"{v:10f}" for v in row) + f" {t:10f}")
        return lines

    def print_calibration(self, profile: CalibrationProfile) -> None:
        """
        Calibration 정보를 보기 좋게 출력
        Print color/depth intrinsics and extrinsics to the console
        """
        for line in self.format_calibration(profile):
            print(line)

    def save_calibration(self, profile: CalibrationProfile, path: Path) -> None:
        """Save camera_calibration.json"""
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(profile.to_dict(), f, indent=2)
        self.logger.info(f"  Saved camera calibration: {path}")
