# src/floatchat/config.py
import os
import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging
from dotenv import load_dotenv

load_dotenv()

ENV_PREFIX = "FLOATCHAT"

DEFAULT_SETTINGS: Dict[str, Any] = {
    'app': {
        'title': 'FloatChat',
        'region_label': 'Indian Ocean ARGO Data',
        'version': 'PoC v1.0'
    },
    'chat': {
        'reply_delay_ms': 1200,
        'cancel_superseded': False
    },
    'export': {
        'prefix': 'argo-export',
        'directory': 'data/exports'
    },
    'map': {
        'tiles': 'OpenStreetMap',
        'zoom_start': 4,
        'padding_degrees': 5
    },
    'visualization': {
        'template': 'plotly_white',
        'chart_height': 300
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'file': 'logs/floatchat.log'
    }
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """Configuration manager for FloatChat"""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or os.getenv(f'{ENV_PREFIX}_CONFIG') or self._find_config_file()
        self.settings = self._load_settings()
        self._setup_logging()

    def _find_config_file(self) -> Optional[Path]:
        """Find the configuration file in various locations"""
        possible_paths = [
            Path('config/settings.yaml'),
            Path('../config/settings.yaml'),
            Path('./settings.yaml')
        ]

        for path in possible_paths:
            if path.exists():
                return path

        return None

    def _load_settings(self) -> Dict[str, Any]:
        """Load settings from YAML file on top of the built-in defaults"""
        if not self.config_path:
            return copy.deepcopy(DEFAULT_SETTINGS)

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logging.error(f"Error loading config from {self.config_path}: {e}")
            loaded = {}

        return _merge(DEFAULT_SETTINGS, loaded)

    def _setup_logging(self):
        """Setup logging configuration"""
        log_level = getattr(logging, str(self.get('logging.level', 'INFO')).upper(), logging.INFO)
        log_format = self.get('logging.format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        handlers = [logging.StreamHandler()]

        log_file = self.get('logging.file')
        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

        logging.basicConfig(
            level=log_level,
            format=log_format,
            handlers=handlers
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation"""
        value = self.settings
        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                value = default
                break

        # Environment variable override, e.g. FLOATCHAT_CHAT_REPLY_DELAY_MS
        env_key = f"{ENV_PREFIX}_{key.replace('.', '_').upper()}"
        env_value = os.getenv(env_key)
        if env_value is not None:
            # String settings stay strings; others are parsed as YAML scalars
            if isinstance(value, str):
                return env_value
            return yaml.safe_load(env_value)

        return value

    def set(self, key: str, value: Any):
        """Set configuration value using dot notation"""
        keys = key.split('.')
        target = self.settings
        for k in keys[:-1]:
            target = target.setdefault(k, {})
        target[keys[-1]] = value

    def load_config(self, config_path: str):
        """Reload settings from another YAML file"""
        self.config_path = config_path
        self.settings = self._load_settings()

    def get_reply_delay(self) -> float:
        """Artificial assistant delay in seconds"""
        return float(self.get('chat.reply_delay_ms', 1200)) / 1000.0

    def get_export_dir(self) -> Path:
        """Get export directory path"""
        dir_path = Path(self.get('export.directory', 'data/exports'))
        dir_path.mkdir(parents=True, exist_ok=True)
        return dir_path

# Global configuration instance
config = Config()
