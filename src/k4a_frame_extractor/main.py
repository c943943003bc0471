"""
Main Execution Script (메인 실행 스크립트)
Azure Kinect recording에서 cropped RGB-Depth frame과 IMU log 추출

주요 기능:
- Recording calibration 출력 (intrinsics, extrinsics)
- 모든 capture의 RGB / color-aligned Depth frame 추출 및 center crop
- IMU (accelerometer, gyroscope) sample을 imu.txt로 저장
- 선택적 출력: camera_calibration.json, frames.csv, extraction_summary.json
"""

import argparse
import sys
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .calibration_reporter import CalibrationReporter
from .config import DEFAULT_CONFIG, PROGRESS_STYLES, build_config
from .errors import ExportError
from .frame_extractor import FrameExtractor
from .imu_log_writer import MotionLogWriter
from .metadata_writer import MetadataWriter
from .utils import parse_c_int

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


def open_recording(input_path: str):
    """Default reader factory (Azure Kinect SDK via pyk4a)"""
    from .recording_reader import RecordingReader

    return RecordingReader(input_path)


class ExportPipeline:
    """
    Recording Export Pipeline

    처리 단계 (Processing Steps):
    1. Recording open, calibration 읽기
    2. Warm-up offset으로 seek
    3. Calibration 출력
    4. rgb/, depth/ 디렉토리 생성
    5. Frame 추출 (end of stream까지)
    6. Warm-up offset으로 다시 seek
    7. IMU log 저장 (end of stream까지)
    8. 선택적 metadata 저장 및 summary 출력
    """

    # 디스플레이 상수 (Display Constants)
    HEADER_WIDTH = 60

    # 시간 변환 상수 (Time Conversion Constants)
    USEC_TO_S = 1_000_000

    def __init__(
        self,
        input_path: str,
        output_dir: str,
        crop_width: int,
        crop_height: int,
        config: Optional[Dict[str, Any]] = None,
        reader_factory: Callable[[str], Any] = open_recording
    ) -> None:
        """
        Pipeline 초기화

        Args:
            input_path: Recording 파일 경로 (.mkv)
            output_dir: 출력 디렉토리 경로
            crop_width: Crop 너비 (pixels)
            crop_height: Crop 높이 (pixels)
            config: 설정 dictionary (DEFAULT_CONFIG 위에 merge)
            reader_factory: path → context manager reader
        """
        self.input_path = input_path
        self.output_dir = output_dir
        self.crop_width = crop_width
        self.crop_height = crop_height
        self.config = {**DEFAULT_CONFIG, **(config or {})}
        self.reader_factory = reader_factory
        self.logger = logging.getLogger(self.__class__.__name__)

        self.reporter = CalibrationReporter()
        self.extractor = FrameExtractor(
            output_dir=output_dir,
            crop_width=crop_width,
            crop_height=crop_height,
            rgb_dir=self.config['rgb_dir'],
            depth_dir=self.config['depth_dir'],
            progress=self.config['progress']
        )
        self.motion_writer = MotionLogWriter(
            self.logger,
            output_dir,
            filename=self.config['imu_filename'],
            progress=self.config['progress']
        )
        self.metadata_writer = MetadataWriter(self.logger, output_dir)

    def _print_pipeline_header(self) -> None:
        """Print pipeline header information"""
        self.logger.info("=" * self.HEADER_WIDTH)
        self.logger.info("Azure Kinect Recording Frame Extractor")
        self.logger.info("=" * self.HEADER_WIDTH)
        self.logger.info(f"Recording path: {self.input_path}")
        self.logger.info(f"Output path: {self.output_dir}")
        self.logger.info(f"Crop size: {self.crop_width}x{self.crop_height}")
        self.logger.info(f"Warm-up offset: {self.config['seek_offset_usec']} usec")
        self.logger.info("=" * self.HEADER_WIDTH)

    def _print_pipeline_summary(self, result: Dict[str, Any]) -> None:
        """Print pipeline completion summary"""
        self.logger.info("=" * self.HEADER_WIDTH)
        self.logger.info("Extraction completed!")
        self.logger.info(f"  Total frames: {result['total_frames']}")
        self.logger.info(f"  Written frame pairs: {result['written_frames']}")
        self.logger.info(f"  IMU samples: {result['imu_samples']}")
        self.logger.info(f"  Output path: {self.output_dir}")
        self.logger.info("=" * self.HEADER_WIDTH)

    def run(self) -> Dict[str, Any]:
        """
        전체 pipeline 실행
        Execute both passes; the reader is closed on every exit path

        Returns:
            Result dictionary (frame counts, IMU sample count, recording length)
        """
        self._print_pipeline_header()
        offset = self.config['seek_offset_usec']

        with self.reader_factory(self.input_path) as reader:
            # 1. Recording 정보 (Recording information)
            recording_length = reader.get_recording_length_usec()
            self.logger.info(f"Recording Length : {recording_length // self.USEC_TO_S} s")
            calibration = reader.get_calibration()

            # 2. Warm-up skip
            reader.seek(offset)

            # 3. Calibration 출력 (Print calibration)
            self.reporter.print_calibration(calibration)

            # 4. 출력 디렉토리 생성 (Create output directories)
            self.extractor.prepare_directories()

            # 5. Frame 추출 (Extraction pass)
            self.logger.info("[1/2] Extracting frames...")
            frame_stats = self.extractor.run(reader, recording_length, offset)

            # 6. IMU stream을 warm-up offset으로 되돌림 (Rewind for the motion log pass)
            reader.seek(offset)

            # 7. IMU log 저장 (Motion log pass)
            self.logger.info("[2/2] Writing IMU log...")
            imu_samples = self.motion_writer.run(reader)

        result = {
            'recording_length_usec': recording_length,
            'total_frames': frame_stats['total_frames'],
            'written_frames': frame_stats['written_frames'],
            'imu_samples': imu_samples
        }

        # 8. 선택적 출력 (Optional artifacts)
        self._save_optional_outputs(calibration, frame_stats['records'], result)

        self._print_pipeline_summary(result)
        return result

    def _save_optional_outputs(self, calibration, records: List[Dict[str, Any]], result: Dict[str, Any]) -> None:
        if self.config['save_calibration']:
            self.reporter.save_calibration(calibration, Path(self.output_dir) / 'camera_calibration.json')

        if self.config['save_frame_index']:
            self.metadata_writer.save_frame_index(records)

        if self.config['save_summary']:
            self.metadata_writer.save_extraction_summary({
                'input_path': str(self.input_path),
                'crop_width': self.crop_width,
                'crop_height': self.crop_height,
                'seek_offset_usec': self.config['seek_offset_usec'],
                **result,
                'config': self.config
            })


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='k4a-export',
        description='Extract cropped RGB / aligned depth frames and IMU samples from an Azure Kinect recording'
    )

    parser.add_argument('input_path', type=str, help='Recording file path (.mkv)')
    parser.add_argument('output_dir', type=str, help='Output directory path')
    parser.add_argument('crop_width', type=parse_c_int, help='Crop width in pixels')
    parser.add_argument('crop_height', type=parse_c_int, help='Crop height in pixels')

    parser.add_argument('--config', type=str, default=None, help='YAML config file')
    parser.add_argument('--log-level', type=str, default=None,
                        help='Logging level: DEBUG, INFO, WARNING, ERROR or CRITICAL (default: INFO)')
    parser.add_argument('--progress', choices=PROGRESS_STYLES, default=None,
                        help="Progress display: per-item log lines or a tqdm bar")
    parser.add_argument('--save-calibration', action='store_true', default=None,
                        help='Write camera_calibration.json')
    parser.add_argument('--save-frame-index', action='store_true', default=None,
                        help='Write frames.csv')
    parser.add_argument('--save-summary', action='store_true', default=None,
                        help='Write extraction_summary.json')
    return parser


def main(argv: Optional[List[str]] = None, reader_factory: Callable[[str], Any] = open_recording) -> None:
    """Command-line interface"""
    args = build_parser().parse_args(argv)

    try:
        config = build_config(args.config, {
            'log_level': args.log_level,
            'progress': args.progress,
            'save_calibration': args.save_calibration,
            'save_frame_index': args.save_frame_index,
            'save_summary': args.save_summary,
        })
        logging.getLogger().setLevel(getattr(logging, config['log_level'].upper()))

        pipeline = ExportPipeline(
            input_path=args.input_path,
            output_dir=args.output_dir,
            crop_width=args.crop_width,
            crop_height=args.crop_height,
            config=config,
            reader_factory=reader_factory
        )
        pipeline.run()
    except ExportError as e:
        logger.error(f"Error occurred: {e.message}")
        if e.details:
            logger.error(f"  Details: {e.details}")
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
