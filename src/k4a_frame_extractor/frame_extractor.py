"""
Frame Extractor Module
Decode, align, crop and save RGB-Depth frames from recording captures
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
import cv2
import numpy as np
from tqdm import tqdm

from .errors import (
    CropError,
    DecodeError,
    DirectoryCreateError,
    ImageWriteError,
    MissingImage,
    TransformError,
)
from .models import Capture
from .utils import CropRect, compute_center_crop


class FrameExtractor:
    """
    Class to save cropped color/depth frame pairs to filesystem

    Directory structure:
    output_dir/
      ├── rgb/
      │   ├── <timestamp_usec>.png
      │   └── ...
      └── depth/
          ├── <timestamp_usec>.png  (16-bit, aligned to color)
          └── ...
    """

    USEC_TO_S = 1_000_000

    def __init__(
        self,
        output_dir: str,
        crop_width: int,
        crop_height: int,
        rgb_dir: str = 'rgb',
        depth_dir: str = 'depth',
        progress: str = 'lines'
    ):
        """
        Initialize

        Args:
            output_dir: Output directory path
            crop_width: Crop rectangle width (pixels)
            crop_height: Crop rectangle height (pixels)
            rgb_dir: Color subdirectory name
            depth_dir: Depth subdirectory name
            progress: 'lines' or 'bar'
        """
        self.output_dir = Path(output_dir)
        self.crop_width = crop_width
        self.crop_height = crop_height
        self.rgb_dir = self.output_dir / rgb_dir
        self.depth_dir = self.output_dir / depth_dir
        self.progress = progress
        self.logger = logging.getLogger(self.__class__.__name__)

    def prepare_directories(self) -> None:
        """Create rgb/ and depth/ if they do not exist yet"""
        for directory in (self.rgb_dir, self.depth_dir):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise DirectoryCreateError(
                    f"Cannot create output dir: {directory}",
                    {'path': str(directory), 'cause': str(e)}
                ) from e

    def run(
        self,
        reader,
        recording_length_usec: Optional[int] = None,
        start_usec: int = 0
    ) -> Dict[str, Any]:
        """
        Extraction pass: process captures until end of stream

        Any failure aborts the pass; frames written before it stay on disk.

        Args:
            reader: Opened recording reader (read_captures, transform_depth_to_color)
            recording_length_usec: Recording length, total of the progress bar
            start_usec: Seek position the pass starts from

        Returns:
            Extraction statistics with per-frame records
        """
        records: List[Dict[str, Any]] = []
        frame_idx = 0

        # Bar advances in recording seconds, by color timestamp
        bar = None
        if self.progress == 'bar':
            total = None
            if recording_length_usec is not None:
                total = max(recording_length_usec - start_usec, 0) / self.USEC_TO_S
            bar = tqdm(total=total, desc="  Extracting frames", unit='s')
        position = start_usec

        try:
            for capture in reader.read_captures():
                record = self.process_capture(reader, capture, frame_idx)
                if record is not None:
                    records.append(record)
                frame_idx += 1

                if bar is not None:
                    timestamp = capture.color_timestamp_usec
                    bar.update(max(timestamp - position, 0) / self.USEC_TO_S)
                    position = max(position, timestamp)
        finally:
            if bar is not None:
                bar.close()

        return {
            'total_frames': frame_idx,
            'written_frames': len(records),
            'records': records
        }

    def process_capture(self, reader, capture: Capture, frame_idx: int) -> Optional[Dict[str, Any]]:
        """
        Decode, align, crop and save one capture

        Returns:
            Frame record, or None if the crop is empty and nothing was written
        """
        if not capture.has_color:
            raise MissingImage("No RGB", {'frame_index': frame_idx})
        timestamp = capture.color_timestamp_usec
        if timestamp == 0:
            raise MissingImage("RGB timestamp is zero", {'frame_index': frame_idx})

        rgb = self.decode_color(capture.color)
        height, width = rgb.shape[:2]

        if not capture.has_depth:
            raise MissingImage("No Depth", {'frame_index': frame_idx, 'timestamp_usec': timestamp})

        depth = self.align_depth(reader, capture.depth, width, height)

        if self.progress != 'bar':
            self.logger.info(f"Frame: {frame_idx}; Timestamp: {timestamp}")

        roi = compute_center_crop(width, height, self.crop_width, self.crop_height)
        if not roi.fits(width, height):
            raise CropError(
                f"Crop {roi.width}x{roi.height} at ({roi.left}, {roi.top}) does not fit {width}x{height} frame",
                {'frame_index': frame_idx, 'timestamp_usec': timestamp}
            )
        if roi.is_empty:
            self.logger.warning(f"  Empty crop ({roi.width}x{roi.height}), frame {timestamp} not written")
            return None

        rgb_path = self.rgb_dir / f"{timestamp}.png"
        depth_path = self.depth_dir / f"{timestamp}.png"
        self._save_rgb_image(crop_image(rgb, roi), rgb_path)
        self._save_depth_image_png(crop_image(depth, roi), depth_path)

        return {
            'frame_index': frame_idx,
            'timestamp_usec': timestamp,
            'rgb_path': str(rgb_path.relative_to(self.output_dir)),
            'depth_path': str(depth_path.relative_to(self.output_dir)),
            'width': roi.width,
            'height': roi.height
        }

    def decode_color(self, color: np.ndarray) -> np.ndarray:
        """
        Color buffer → BGR pixel grid

        MJPG recordings carry a 1-D compressed buffer, BGRA32 recordings an
        H x W x 4 grid.
        """
        if color.ndim == 1:
            image = cv2.imdecode(color, cv2.IMREAD_ANYCOLOR)
            if image is None:
                raise DecodeError("Failed to decode color image", {'buffer_size': int(color.size)})
            return image

        if color.ndim == 3 and color.shape[2] == 4:
            return cv2.cvtColor(color, cv2.COLOR_BGRA2BGR)

        raise DecodeError("Unsupported color layout", {'shape': list(color.shape)})

    def align_depth(self, reader, depth: np.ndarray, width: int, height: int) -> np.ndarray:
        """Reproject native depth into the color camera grid (height x width)"""
        aligned = reader.transform_depth_to_color(depth, width, height)
        if aligned is None or aligned.shape[:2] != (height, width):
            raise TransformError(
                "Transformed depth does not match color size",
                {
                    'expected': [height, width],
                    'actual': None if aligned is None else list(aligned.shape[:2])
                }
            )
        return aligned

    def _save_rgb_image(self, rgb_data: np.ndarray, path: Path):
        """RGB 이미지 저장 (BGR, OpenCV 순서)"""
        self._write(path, rgb_data)

    def _save_depth_image_png(self, depth_data: np.ndarray, path: Path):
        """
        Depth 이미지를 16-bit PNG로 저장

        Azure Kinect depth는 millimeter 단위
        """
        if depth_data.dtype != np.uint16:
            depth_data = depth_data.astype(np.uint16)
        self._write(path, depth_data)

    def _write(self, path: Path, image: np.ndarray):
        try:
            ok = cv2.imwrite(str(path), image)
        except cv2.error as e:
            raise ImageWriteError(f"Cannot write image: {path}", {'cause': str(e)}) from e
        if not ok:
            raise ImageWriteError(f"Cannot write image: {path}")


def crop_image(image: np.ndarray, roi: CropRect) -> np.ndarray:
    """Return a contiguous copy of the region of interest"""
    return np.ascontiguousarray(
        image[roi.top:roi.top + roi.height, roi.left:roi.left + roi.width]
    )


def load_depth_image(path: Path) -> np.ndarray:
    """
    Load saved depth image

    Args:
        path: Depth PNG path

    Returns:
        Depth data (uint16 numpy array)
    """
    return cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
