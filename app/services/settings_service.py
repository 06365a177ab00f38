# /app/services/settings_service.py

"""
System-wide settings, kept as a flat key-value JSON document on disk.
"""

import json
import os
from typing import Any, Dict, Optional

from ..core.app_logger import get_logger
from ..core.config import settings

logger = get_logger(__name__)


def _settings_path(path: Optional[str]) -> str:
    return path or settings.SETTINGS_FILE


def read_settings(path: Optional[str] = None) -> Dict[str, Any]:
    """Returns the stored settings; a missing file reads as empty."""
    settings_file = _settings_path(path)
    if not os.path.exists(settings_file):
        return {}
    with open(settings_file, "r", encoding="utf-8") as f:
        return json.load(f)


def update_settings(updates: Dict[str, Any], path: Optional[str] = None) -> Dict[str, Any]:
    """Shallow-merges `updates` over the stored settings and writes the result back."""
    settings_file = _settings_path(path)
    merged = {**read_settings(settings_file), **updates}
    directory = os.path.dirname(settings_file)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(settings_file, "w", encoding="utf-8") as f:
        json.dump(merged, f, indent=2)
    logger.info("System settings updated: %s", ", ".join(sorted(updates)) or "no keys")
    return merged
