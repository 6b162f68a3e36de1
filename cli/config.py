"""Configuration management for the FileSplitter CLI."""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from common.constants import BUFFER_SIZE_BYTES, MIN_PART_COUNT
from common.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / '.filesplitter' / 'config.json'


class Config:
    """Manages CLI configuration stored in JSON file."""

    DEFAULT_CONFIG = {
        "buffer_size": int(os.environ.get("FILESPLITTER_BUFFER_SIZE", str(BUFFER_SIZE_BYTES))),
        "default_parts": int(os.environ.get("FILESPLITTER_DEFAULT_PARTS", str(MIN_PART_COUNT))),
        "output_dir": None,
        "show_progress": True,
        "log_level": "WARNING",
    }

    def __init__(self, config_path: Path = DEFAULT_CONFIG_PATH):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.filesplitter/config.json)
        """
        self.config_path = Path(config_path)
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            self.config_path = Path(tempfile.gettempdir()) / '.filesplitter' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError("config root must be an object")
                config = self.DEFAULT_CONFIG.copy()
                config.update(data)
                return config
            except (ValueError, OSError) as e:
                logger.warning(f"Unreadable config {self.config_path}, using defaults: {e}")
                backup_path = self.config_path.with_suffix('.json.bak')
                try:
                    shutil.copy(self.config_path, backup_path)
                except OSError as copy_error:
                    logger.warning(f"Could not back up config to {backup_path}: {copy_error}")
                return self.DEFAULT_CONFIG.copy()
        else:
            config = self.DEFAULT_CONFIG.copy()
            try:
                with open(self.config_path, 'w') as f:
                    json.dump(config, f, indent=2)
            except OSError as e:
                logger.warning(f"Could not write default config {self.config_path}: {e}")
            return config

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except OSError as e:
            logger.warning(f"Could not save config {self.config_path}: {e}")

    def get_buffer_size(self) -> int:
        """
        Get read/write buffer size in bytes.

        Returns:
            Buffer size, falling back to the default for non-positive values
        """
        value = self.data.get('buffer_size', BUFFER_SIZE_BYTES)
        if not isinstance(value, int) or value <= 0:
            return BUFFER_SIZE_BYTES
        return value

    def get_default_parts(self) -> int:
        """
        Get part count used when split is given neither a count nor a size.

        Returns:
            Part count (never below 2)
        """
        value = self.data.get('default_parts', MIN_PART_COUNT)
        if not isinstance(value, int) or value < MIN_PART_COUNT:
            return MIN_PART_COUNT
        return value

    def get_output_dir(self) -> Optional[Path]:
        """
        Get directory for split parts and merged files.

        Returns:
            Path, or None to write next to the input
        """
        value = self.data.get('output_dir')
        return Path(value).expanduser() if value else None

    def set_output_dir(self, directory: Optional[str]) -> None:
        """
        Set output directory and save to file.

        Args:
            directory: Directory path, or None to write next to the input
        """
        self.data['output_dir'] = directory
        self.save()

    def get_show_progress(self) -> bool:
        return bool(self.data.get('show_progress', True))

    def get_log_level(self) -> str:
        return str(self.data.get('log_level', 'WARNING')).upper()
