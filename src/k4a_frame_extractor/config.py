"""
Configuration Module (설정 모듈)

Default export settings merged with an optional YAML file and CLI overrides
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import UsageError

logger = logging.getLogger(__name__)

# 기본 설정 (Default configuration)
DEFAULT_CONFIG: Dict[str, Any] = {
    # Warm-up skip applied before both passes (microseconds from the beginning)
    'seek_offset_usec': 1_000_000,

    # 출력 구조 (Output layout)
    'rgb_dir': 'rgb',
    'depth_dir': 'depth',
    'imu_filename': 'imu.txt',

    # Progress display: 'lines' (one log line per frame/sample) or 'bar' (tqdm)
    'progress': 'lines',

    # 선택적 출력 (Optional artifacts)
    'save_calibration': False,  # camera_calibration.json
    'save_frame_index': False,  # frames.csv
    'save_summary': False,  # extraction_summary.json

    'log_level': 'INFO',
}

PROGRESS_STYLES = ('lines', 'bar')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def load_config_file(path: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file

    Args:
        path: YAML file path

    Returns:
        Configuration dictionary (empty if the file is empty)
    """
    config_path = Path(path)
    if not config_path.exists():
        raise UsageError(f"Config file not found: {path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise UsageError(f"Invalid config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise UsageError(f"Config file must contain a mapping: {path}")
    return data


def build_config(
    file_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Merge defaults, YAML file values and CLI overrides (later wins)

    None values in overrides are ignored so unset CLI flags keep the
    file/default value.
    """
    file_config = load_config_file(file_path) if file_path else {}
    cli_config = {k: v for k, v in (overrides or {}).items() if v is not None}

    config = {**DEFAULT_CONFIG, **file_config, **cli_config}
    validate_config(config)

    if file_path:
        logger.info(f"Loaded config: {file_path}")
    return config


def validate_config(config: Dict[str, Any]) -> None:
    """Reject unknown keys and values the pipeline cannot use"""
    unknown = sorted(set(config) - set(DEFAULT_CONFIG))
    if unknown:
        raise UsageError(f"Unknown config keys: {', '.join(unknown)}", {'keys': unknown})

    if config['progress'] not in PROGRESS_STYLES:
        raise UsageError(
            f"Invalid progress style: {config['progress']} (expected one of {', '.join(PROGRESS_STYLES)})"
        )

    level = config['log_level']
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        raise UsageError(
            f"Invalid log level: {level!r} (expected one of {', '.join(LOG_LEVELS)})"
        )

    offset = config['seek_offset_usec']
    if not isinstance(offset, int) or isinstance(offset, bool) or offset < 0:
        raise UsageError(f"seek_offset_usec must be a non-negative integer: {offset!r}")

    for key in ('rgb_dir', 'depth_dir', 'imu_filename'):
        if not isinstance(config[key], str) or not config[key]:
            raise UsageError(f"{key} must be a non-empty string")
