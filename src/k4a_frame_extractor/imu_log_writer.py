"""
Motion Log Writer Module (IMU 로그 저장 모듈)

Writes accelerometer/gyroscope samples to a plain-text log, one line per sample
"""

from pathlib import Path
from typing import Iterable
from tqdm import tqdm

from .errors import FileOpenError
from .models import InertialSample
from .utils import format_imu_value


def format_sample_line(sample: InertialSample) -> str:
    """accTs ax ay az gyroTs gx gy gz"""
    return " ".join(format_imu_value(v) for v in sample.to_fields())


class MotionLogWriter:
    """Write IMU samples to imu.txt"""

    def __init__(self, logger, output_dir: str, filename: str = 'imu.txt', progress: str = 'lines'):
        """
        Initialize motion log writer

        Args:
            logger: Logger instance
            output_dir: Output directory path
            filename: Log file name
            progress: 'lines' or 'bar'
        """
        self.logger = logger
        self.log_path = Path(output_dir) / filename
        self.progress = progress

    def run(self, reader) -> int:
        """
        Motion log pass: append one line per IMU sample until end of stream

        The reader must already be positioned at the warm-up offset. On a
        stream failure the exception propagates; lines written so far stay
        in the file.

        Args:
            reader: Opened recording reader (read_imu_samples)

        Returns:
            Number of samples written
        """
        return self.write_samples(reader.read_imu_samples())

    def write_samples(self, samples: Iterable[InertialSample]) -> int:
        try:
            log_file = open(self.log_path, 'w', encoding='utf-8')
        except OSError as e:
            raise FileOpenError(
                f"Cannot open imu file: {self.log_path}",
                {'path': str(self.log_path), 'cause': str(e)}
            ) from e

        if self.progress == 'bar':
            samples = tqdm(samples, desc="  Writing IMU", unit='sample')

        sample_idx = 0
        with log_file:
            for sample in samples:
                log_file.write(format_sample_line(sample) + "\n")
                if self.progress != 'bar':
                    self.logger.info(f"Sample Idx: {sample_idx}; Timestamp: {sample.acc_timestamp_usec}")
                sample_idx += 1

        self.logger.info(f"  Wrote {sample_idx} IMU samples: {self.log_path}")
        return sample_idx
