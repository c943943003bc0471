"""Shared fixtures: an in-memory recording reader standing in for the SDK playback"""

import logging
from typing import List, Optional

import cv2
import numpy as np
import pytest

from k4a_frame_extractor.errors import SeekError, StreamError, TransformError
from k4a_frame_extractor.models import CalibrationProfile, CameraCalibration, Capture, InertialSample

COLOR_WIDTH = 64
COLOR_HEIGHT = 48
DEPTH_WIDTH = 32
DEPTH_HEIGHT = 24


def encode_color(width: int = COLOR_WIDTH, height: int = COLOR_HEIGHT, seed: int = 0) -> np.ndarray:
    """Compressed color buffer (1-D uint8), the way MJPG recordings deliver it"""
    rng = np.random.default_rng(seed)
    image = rng.integers(0, 255, size=(height, width, 3), dtype=np.uint8)
    ok, buffer = cv2.imencode('.png', image)
    assert ok
    return buffer.ravel()


def make_depth(width: int = DEPTH_WIDTH, height: int = DEPTH_HEIGHT, value: int = 1500) -> np.ndarray:
    depth = np.full((height, width), value, dtype=np.uint16)
    depth[0, 0] = 4000
    return depth


def make_capture(
    timestamp: int,
    color: bool = True,
    depth: bool = True,
    width: int = COLOR_WIDTH,
    height: int = COLOR_HEIGHT
) -> Capture:
    return Capture(
        color=encode_color(width, height, seed=timestamp % 1000) if color else None,
        color_timestamp_usec=timestamp if color else 0,
        depth=make_depth() if depth else None,
        depth_timestamp_usec=timestamp if depth else 0
    )


def make_sample(timestamp: int, scale: float = 1.0) -> InertialSample:
    return InertialSample(
        acc_timestamp_usec=timestamp,
        acc=(0.125 * scale, -9.80665 * scale, 0.5),
        gyro_timestamp_usec=timestamp + 10,
        gyro=(0.001, -0.002, 0.25 * scale),
        temperature=31.5
    )


def make_calibration() -> CalibrationProfile:
    color = CameraCalibration(
        intrinsics=np.array([31.5, 23.5, 50.0, 50.0, 0.1, -0.2, 0.01, 0.0, 0.0, 0.0, 0.001, 0.002]),
        rotation=np.array([[0.99, 0.01, 0.0], [-0.01, 0.99, 0.1], [0.0, -0.1, 0.99]]),
        translation=np.array([-32.0, -2.0, 4.0]),
        resolution=(1280, 720)
    )
    depth = CameraCalibration(
        intrinsics=np.array([15.5, 11.5, 25.0, 25.0, 0.3, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0]),
        rotation=np.eye(3),
        translation=np.zeros(3),
        resolution=(640, 576)
    )
    return CalibrationProfile(color=color, depth=depth)


class FakeRecordingReader:
    """
    Context-managed reader over in-memory captures and IMU samples

    seek(offset) positions both streams at the first item whose timestamp
    is >= offset, like the SDK does.
    """

    def __init__(
        self,
        captures: Optional[List[Capture]] = None,
        imu_samples: Optional[List[InertialSample]] = None,
        length_usec: int = 10_000_000,
        fail_seek_at: Optional[int] = None,
        capture_error_at: Optional[int] = None,
        imu_error_at: Optional[int] = None,
        transform_fails: bool = False
    ):
        self.captures = list(captures or [])
        self.imu_samples = list(imu_samples or [])
        self.length_usec = length_usec
        self.fail_seek_at = fail_seek_at
        self.capture_error_at = capture_error_at
        self.imu_error_at = imu_error_at
        self.transform_fails = transform_fails
        self.offset = 0
        self.seeks: List[int] = []
        self.open_count = 0
        self.close_count = 0

    def __enter__(self):
        self.open_count += 1
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close_count += 1

    def get_recording_length_usec(self) -> int:
        return self.length_usec

    def get_calibration(self) -> CalibrationProfile:
        return make_calibration()

    def seek(self, offset_usec: int) -> None:
        self.seeks.append(offset_usec)
        if self.fail_seek_at is not None and len(self.seeks) == self.fail_seek_at:
            raise SeekError(f"Cannot seek to {offset_usec} usec")
        self.offset = offset_usec

    def read_captures(self):
        remaining = [
            c for c in self.captures
            if max(c.color_timestamp_usec, c.depth_timestamp_usec) >= self.offset
        ]
        for idx, capture in enumerate(remaining):
            if self.capture_error_at is not None and idx == self.capture_error_at:
                raise StreamError("Reading next capture failed")
            yield capture

    def read_imu_samples(self):
        for idx, sample in enumerate(s for s in self.imu_samples if s.acc_timestamp_usec >= self.offset):
            if self.imu_error_at is not None and idx == self.imu_error_at:
                raise StreamError("Reading next IMU sample failed")
            yield sample

    def transform_depth_to_color(self, depth: np.ndarray, width: int, height: int) -> np.ndarray:
        if self.transform_fails:
            raise TransformError("Transform failed")
        return cv2.resize(depth, (width, height), interpolation=cv2.INTER_NEAREST)


@pytest.fixture
def logger():
    return logging.getLogger('test')


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / 'out'


@pytest.fixture
def captures():
    return [make_capture(ts) for ts in (1_000_000, 1_033_333, 1_066_666)]


@pytest.fixture
def imu_samples():
    return [make_sample(ts) for ts in (1_000_100, 1_005_100, 1_010_100, 1_015_100)]
