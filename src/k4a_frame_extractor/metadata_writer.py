"""
Metadata Writing Module (메타데이터 저장 모듈)

Handles saving the frame index and the extraction summary
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List
import numpy as np
import pandas as pd

FRAME_INDEX_COLUMNS = ['frame_index', 'timestamp_usec', 'rgb_path', 'depth_path', 'width', 'height']


class MetadataWriter:
    """Writer for frame index and summaries"""

    # Time conversion constants
    USEC_TO_S = 1e6  # microseconds → seconds

    def __init__(self, logger, output_dir: str):
        """
        Initialize metadata writer

        Args:
            logger: Logger instance
            output_dir: Output directory path
        """
        self.logger = logger
        self.output_dir = Path(output_dir)

    def save_frame_index(self, records: List[Dict[str, Any]], filename: str = 'frames.csv') -> Path:
        """Save frames.csv (one row per written frame pair)"""
        metadata_df = pd.DataFrame(records, columns=FRAME_INDEX_COLUMNS)
        metadata_path = self.output_dir / filename
        metadata_df.to_csv(metadata_path, index=False)
        self.logger.info(f"  Saved frame index: {metadata_path} ({len(metadata_df)} frames)")
        return metadata_path

    def save_extraction_summary(
        self,
        summary_data: Dict[str, Any],
        filename: str = 'extraction_summary.json'
    ) -> Path:
        """
        Save overall extraction summary

        Args:
            summary_data: Summary information dictionary
            filename: Filename to save

        Returns:
            Summary file path
        """
        summary_path = self.output_dir / filename

        summary = dict(summary_data)
        summary['extraction_time'] = datetime.now().isoformat()
        if 'recording_length_usec' in summary:
            summary['recording_length_s'] = summary['recording_length_usec'] / self.USEC_TO_S

        summary = self._convert_numpy_types(summary)

        with open(summary_path, 'w', encoding='utf-8') as f:
            json.dump(summary, f, indent=2, ensure_ascii=False)

        self.logger.info(f"  Saved extraction summary: {summary_path}")
        return summary_path

    def _convert_numpy_types(self, obj: Any) -> Any:
        """
        Recursively convert NumPy types to Python native types for JSON serialization

        Args:
            obj: Object to convert (dict, list, numpy type, or primitive)

        Returns:
            Converted object with Python native types
        """
        if isinstance(obj, dict):
            return {key: self._convert_numpy_types(value) for key, value in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [self._convert_numpy_types(item) for item in obj]
        elif isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        elif isinstance(obj, Path):
            return str(obj)
        else:
            return obj
