"""
Azure Kinect Frame Extractor
Azure Kinect recording에서 cropped RGB-Depth frame과 IMU log를 추출하는 패키지
"""

__version__ = '1.0.0'
__author__ = 'Frame Extractor Team'

from .models import Capture, InertialSample, CameraCalibration, CalibrationProfile
from .errors import (
    ExportError,
    UsageError,
    OpenError,
    SeekError,
    StreamError,
    DirectoryCreateError,
    FileOpenError,
    MissingImage,
    DecodeError,
    TransformError,
    CropError,
    ImageWriteError,
)
from .frame_extractor import FrameExtractor, load_depth_image
from .imu_log_writer import MotionLogWriter
from .calibration_reporter import CalibrationReporter
from .metadata_writer import MetadataWriter

__all__ = [
    'Capture',
    'InertialSample',
    'CameraCalibration',
    'CalibrationProfile',
    'ExportError',
    'UsageError',
    'OpenError',
    'SeekError',
    'StreamError',
    'DirectoryCreateError',
    'FileOpenError',
    'MissingImage',
    'DecodeError',
    'TransformError',
    'CropError',
    'ImageWriteError',
    'FrameExtractor',
    'load_depth_image',
    'MotionLogWriter',
    'CalibrationReporter',
    'MetadataWriter',
]
