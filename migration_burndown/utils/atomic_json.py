#!/usr/bin/env python3
"""
Utility functions for JSON file input and atomic JSON output.

Reports are written through a temporary file and renamed into place so a
dashboard polling the output never reads a half-written document.
"""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any

from migration_burndown.core import get_logger
from migration_burndown.exceptions import BurndownDataError

logger = get_logger(__name__)


def atomic_json_save(data: dict[str, Any], output_file: str | Path) -> bool:
    """
    Save JSON data to file using atomic write operations.

    1. Write to a temporary file in the target directory
    2. Validate the temp file parses as JSON
    3. Atomically move the temp file to the final location

    Args:
        data: Dictionary to save as JSON
        output_file: Target file path

    Returns:
        True if save succeeded

    Raises:
        OSError / TypeError: If the data cannot be written or serialized
    """
    output_dir = os.path.dirname(os.path.abspath(output_file))
    os.makedirs(output_dir, exist_ok=True)

    temp_fd, temp_path = tempfile.mkstemp(suffix=".json", dir=output_dir, text=True)

    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        with open(temp_path, encoding="utf-8") as f:
            json.load(f)

        shutil.move(temp_path, output_file)
        logger.info("Saved JSON output", extra={"output_file": str(output_file)})
        return True

    except Exception:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise


def load_json_document(file_path: str | Path) -> dict[str, Any]:
    """
    Load a raw burndown document from disk.

    Args:
        file_path: Path to the JSON document

    Returns:
        Parsed JSON object (an empty file yields an empty dict)

    Raises:
        BurndownDataError: If the file is missing, unreadable, not valid JSON,
            or does not contain a JSON object
    """
    path = Path(file_path)

    if not path.exists():
        raise BurndownDataError(f"Burndown data not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise BurndownDataError(f"Cannot read burndown data {path}: {e}") from e

    if not text.strip():
        logger.warning("Burndown data file is empty", extra={"file_path": str(path)})
        return {}

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise BurndownDataError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise BurndownDataError(f"Burndown data must be a JSON object, got {type(data).__name__}")

    logger.info("Loaded burndown data", extra={"file_path": str(path), "size_bytes": len(text)})
    return data
