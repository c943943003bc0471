"""
Azure Kinect Recording Reader Module
Azure Kinect recording (.mkv) 파일을 읽고 capture, IMU sample, calibration을 추출하는 모듈
"""

from pathlib import Path
from typing import Iterator, Optional
import numpy as np
from pyk4a import CalibrationType, ColorResolution, DepthMode, K4AException, PyK4APlayback, SeekOrigin
from pyk4a.transformation import depth_image_to_color_camera

from .errors import OpenError, SeekError, StreamError, TransformError
from .models import CalibrationProfile, CameraCalibration, Capture, InertialSample

# Sensor resolution (width, height) per SDK mode
COLOR_RESOLUTIONS = {
    ColorResolution.OFF: (0, 0),
    ColorResolution.RES_720P: (1280, 720),
    ColorResolution.RES_1080P: (1920, 1080),
    ColorResolution.RES_1440P: (2560, 1440),
    ColorResolution.RES_1536P: (2048, 1536),
    ColorResolution.RES_2160P: (3840, 2160),
    ColorResolution.RES_3072P: (4096, 3072),
}

DEPTH_RESOLUTIONS = {
    DepthMode.OFF: (0, 0),
    DepthMode.NFOV_2X2BINNED: (320, 288),
    DepthMode.NFOV_UNBINNED: (640, 576),
    DepthMode.WFOV_2X2BINNED: (512, 512),
    DepthMode.WFOV_UNBINNED: (1024, 1024),
    DepthMode.PASSIVE_IR: (1024, 1024),
}


class RecordingReader:
    """Azure Kinect recording을 읽는 클래스 (pyk4a playback wrapper)"""

    def __init__(self, recording_path: str):
        """
        초기화

        Args:
            recording_path: recording 파일 경로 (.mkv)
        """
        self.recording_path = Path(recording_path)
        if not self.recording_path.exists():
            raise OpenError(f"Recording not found: {recording_path}")

        self.playback: Optional[PyK4APlayback] = None

    def __enter__(self):
        """Context manager entry"""
        playback = PyK4APlayback(str(self.recording_path))
        try:
            playback.open()
        except K4AException as e:
            raise OpenError(f"Recording open failed: {self.recording_path}", {'cause': str(e)}) from e
        self.playback = playback
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        if self.playback:
            self.playback.close()
            self.playback = None

    def _require_open(self) -> PyK4APlayback:
        if not self.playback:
            raise RuntimeError("Reader not opened. Use 'with' statement.")
        return self.playback

    def get_recording_length_usec(self) -> int:
        """Recording 전체 길이 (microseconds)"""
        return int(self._require_open().length)

    def get_calibration(self) -> CalibrationProfile:
        """
        Recording calibration 정보 반환

        Intrinsics vector order: cx, cy, fx, fy, k1, k2, k3, k4, k5, k6, p2, p1.
        pyk4a does not expose codx, cody and metric_radius, so the vector has
        12 values where the SDK parameter array has 15.
        Extrinsics are depth sensor -> sensor, so the depth sensor gets identity.

        Returns:
            CalibrationProfile
        """
        playback = self._require_open()
        try:
            calibration = playback.calibration
            color = self._camera_calibration(calibration, CalibrationType.COLOR)
            depth = self._camera_calibration(calibration, CalibrationType.DEPTH)
        except K4AException as e:
            raise OpenError("Cannot load calibration info", {'cause': str(e)}) from e

        return CalibrationProfile(color=color, depth=depth)

    @staticmethod
    def _camera_calibration(calibration, camera: CalibrationType) -> CameraCalibration:
        """Build a CameraCalibration for one sensor"""
        matrix = calibration.get_camera_matrix(camera)
        k1, k2, p1, p2, k3, k4, k5, k6 = calibration.get_distortion_coefficients(camera)
        rotation, translation = calibration.get_extrinsic_parameters(CalibrationType.DEPTH, camera)
        if camera == CalibrationType.COLOR:
            resolution = COLOR_RESOLUTIONS.get(calibration.color_resolution, (0, 0))
        else:
            resolution = DEPTH_RESOLUTIONS.get(calibration.depth_mode, (0, 0))

        intrinsics = np.array([
            matrix[0, 2], matrix[1, 2],  # cx, cy
            matrix[0, 0], matrix[1, 1],  # fx, fy
            k1, k2, k3, k4, k5, k6,
            p2, p1
        ], dtype=float)

        return CameraCalibration(
            intrinsics=intrinsics,
            rotation=np.asarray(rotation, dtype=float).reshape(3, 3),
            translation=np.asarray(translation, dtype=float).reshape(3),
            resolution=resolution
        )

    def seek(self, offset_usec: int) -> None:
        """
        Recording 시작 기준 offset 위치로 이동 (capture와 IMU stream 모두)

        Args:
            offset_usec: 시작으로부터의 offset (microseconds)
        """
        playback = self._require_open()
        try:
            playback.seek(offset_usec, origin=SeekOrigin.BEGIN)
        except K4AException as e:
            raise SeekError(
                f"Cannot seek to {offset_usec} usec",
                {'offset_usec': offset_usec, 'cause': str(e)}
            ) from e

    def read_captures(self) -> Iterator[Capture]:
        """
        Capture를 순차적으로 읽기 (end of stream에서 종료)

        Yields:
            Capture 객체
        """
        playback = self._require_open()
        while True:
            try:
                k4a_capture = playback.get_next_capture()
            except EOFError:
                return
            except K4AException as e:
                raise StreamError("Reading next capture failed", {'cause': str(e)}) from e

            color = k4a_capture.color
            depth = k4a_capture.depth
            yield Capture(
                color=color,
                color_timestamp_usec=int(k4a_capture.color_timestamp_usec) if color is not None else 0,
                depth=depth,
                depth_timestamp_usec=int(k4a_capture.depth_timestamp_usec) if depth is not None else 0
            )

    def read_imu_samples(self) -> Iterator[InertialSample]:
        """
        IMU sample을 순차적으로 읽기 (end of stream에서 종료)

        Yields:
            InertialSample 객체
        """
        playback = self._require_open()
        while True:
            try:
                sample = playback.get_next_imu_sample()
            except EOFError:
                return
            except K4AException as e:
                raise StreamError("Reading next IMU sample failed", {'cause': str(e)}) from e

            if sample is None:
                raise StreamError("Reading next IMU sample returned no data")

            yield InertialSample(
                acc_timestamp_usec=int(sample['acc_timestamp']),
                acc=tuple(float(v) for v in sample['acc_sample']),
                gyro_timestamp_usec=int(sample['gyro_timestamp']),
                gyro=tuple(float(v) for v in sample['gyro_sample']),
                temperature=float(sample['temperature']) if 'temperature' in sample else None
            )

    def transform_depth_to_color(self, depth: np.ndarray, width: int, height: int) -> np.ndarray:
        """
        Depth 이미지를 color camera 시점으로 변환

        The SDK allocates the output at the color resolution of the
        calibration; width/height are the decoded color size the caller
        expects back.

        Args:
            depth: native depth image (uint16)
            width: color image width
            height: color image height

        Returns:
            color camera 기준 depth 이미지 (uint16, height x width)
        """
        playback = self._require_open()
        try:
            aligned = depth_image_to_color_camera(depth, playback.calibration, playback.thread_safe)
        except K4AException as e:
            raise TransformError("Transform failed", {'cause': str(e)}) from e

        if aligned is None:
            raise TransformError(
                "Create transformed depth failed",
                {'width': width, 'height': height}
            )
        return aligned
