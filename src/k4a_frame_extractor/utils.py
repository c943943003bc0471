"""
Utility Functions (유틸리티 함수 모듈)

Argument parsing, crop geometry and text formatting helpers
"""

import numbers
import re
from dataclasses import dataclass
from typing import Union

_LEADING_INT = re.compile(r'\s*([+-]?\d+)')


@dataclass(frozen=True)
class CropRect:
    """Crop rectangle in pixel coordinates"""
    left: int
    top: int
    width: int
    height: int

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def fits(self, frame_width: int, frame_height: int) -> bool:
        """Whether the rectangle lies inside a frame of the given size"""
        return (
            self.width >= 0 and self.height >= 0
            and self.left >= 0 and self.top >= 0
            and self.left + self.width <= frame_width
            and self.top + self.height <= frame_height
        )


def parse_c_int(text: str) -> int:
    """
    Parse an integer the way C atoi does

    Leading whitespace and an optional sign are accepted, parsing stops at
    the first non-digit, and text without leading digits parses to 0.

    Args:
        text: Command-line argument

    Returns:
        Parsed integer (0 if no digits)
    """
    match = _LEADING_INT.match(text)
    if not match:
        return 0
    return int(match.group(1))


def compute_center_crop(
    frame_width: int,
    frame_height: int,
    crop_width: int,
    crop_height: int
) -> CropRect:
    """
    Compute the centered crop rectangle

    left = (frame_width - crop_width) / 2, top = (frame_height - crop_height) / 2,
    both truncated toward zero. The result is not validated; use CropRect.fits.
    """
    left = int((frame_width - crop_width) / 2)
    top = int((frame_height - crop_height) / 2)
    return CropRect(left=left, top=top, width=crop_width, height=crop_height)


def format_imu_value(value: Union[int, float]) -> str:
    """Format an IMU field: integers as decimal, floats with 6 significant digits"""
    if isinstance(value, numbers.Integral):
        return str(value)
    return f"{float(value):g}"
