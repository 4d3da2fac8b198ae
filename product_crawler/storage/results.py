"""
JSON persistence for crawl results.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Union


class ResultsError(Exception):
    """Raised when crawl results cannot be written or read."""
    pass


class ResultsWriter:
    """Writes the domain -> product URLs mapping as indented JSON."""

    def __init__(self, indent: int = 2):
        self.indent = indent
        self.logger = logging.getLogger(__name__)

    def save(self, results: Dict[str, List[str]], filename: Union[str, Path]) -> Path:
        """Write results to filename, creating parent directories."""
        file_path = Path(filename)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'w', encoding='utf-8') as f:
                json.dump(results, f, ensure_ascii=False, indent=self.indent)
        except (OSError, TypeError) as e:
            raise ResultsError(f"Error writing results to {file_path}: {e}") from e

        self.logger.info(f"Results saved to {file_path}")
        return file_path

    def load(self, filename: Union[str, Path]) -> Dict[str, List[str]]:
        """Read a results file written by save()."""
        file_path = Path(filename)
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ResultsError(f"Error reading results from {file_path}: {e}") from e

        if not isinstance(data, dict):
            raise ResultsError(f"Results file {file_path} does not hold a mapping")
        return data


def save_results(results: Dict[str, List[str]], filename: Union[str, Path]) -> Path:
    """Save results with the default writer."""
    return ResultsWriter().save(results, filename)
