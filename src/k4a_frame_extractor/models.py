"""
Recording Data Model
Recording에서 읽은 capture, IMU sample, calibration 데이터 클래스
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np


@dataclass
class Capture:
    """One synchronized color + depth capture"""
    color: Optional[np.ndarray]  # MJPG buffer (1-D uint8) or BGRA grid (H x W x 4)
    color_timestamp_usec: int  # device timestamp, 0 = missing
    depth: Optional[np.ndarray]  # uint16, native depth resolution
    depth_timestamp_usec: int

    @property
    def has_color(self) -> bool:
        return self.color is not None and self.color.size > 0

    @property
    def has_depth(self) -> bool:
        return self.depth is not None and self.depth.size > 0


@dataclass
class InertialSample:
    """Accelerometer + gyroscope reading pair"""
    acc_timestamp_usec: int
    acc: Tuple[float, float, float]  # [x, y, z] m/s^2
    gyro_timestamp_usec: int
    gyro: Tuple[float, float, float]  # [x, y, z] rad/s
    temperature: Optional[float] = None  # degrees C

    def to_fields(self) -> list:
        """Values in imu.txt column order"""
        return [
            self.acc_timestamp_usec,
            *self.acc,
            self.gyro_timestamp_usec,
            *self.gyro,
        ]


@dataclass
class CameraCalibration:
    """Intrinsics and extrinsics of a single sensor"""
    intrinsics: np.ndarray  # parameter vector
    rotation: np.ndarray  # 3x3, relative to the depth sensor
    translation: np.ndarray  # 3, millimeters
    resolution: Tuple[int, int] = (0, 0)  # (width, height), (0, 0) = sensor off

    def to_dict(self) -> dict:
        return {
            'resolution': [int(v) for v in self.resolution],
            'intrinsics': np.asarray(self.intrinsics, dtype=float).tolist(),
            'rotation': np.asarray(self.rotation, dtype=float).reshape(3, 3).tolist(),
            'translation': np.asarray(self.translation, dtype=float).reshape(3).tolist(),
        }


@dataclass
class CalibrationProfile:
    """Calibration of the whole recording (fixed per file)"""
    color: CameraCalibration
    depth: CameraCalibration

    def to_dict(self) -> dict:
        return {
            'color': self.color.to_dict(),
            'depth': self.depth.to_dict(),
        }
