"""Exceptions raised by the recording export pipeline."""

from typing import Any, Dict, Optional


class ExportError(Exception):
    """Base exception for the export pipeline."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class UsageError(ExportError):
    """Invalid invocation or configuration."""

    pass


class OpenError(ExportError):
    """Recording cannot be opened or its calibration cannot be read."""

    pass


class SeekError(ExportError):
    """Recording cannot be positioned at the requested offset."""

    pass


class StreamError(ExportError):
    """Stream reported neither a sample nor end of file."""

    pass


class DirectoryCreateError(ExportError):
    """Output subdirectory cannot be created."""

    pass


class FileOpenError(ExportError):
    """Output file cannot be created."""

    pass


class FrameError(ExportError):
    """Base exception for per-capture failures."""

    pass


class MissingImage(FrameError):
    """Capture lacks a color or depth image, or has a zero color timestamp."""

    pass


class DecodeError(FrameError):
    """Color buffer cannot be decoded."""

    pass


class TransformError(FrameError):
    """Depth image cannot be aligned to the color camera."""

    pass


class CropError(FrameError):
    """Crop rectangle does not fit inside the frame."""

    pass


class ImageWriteError(FrameError):
    """Cropped image cannot be written."""

    pass
