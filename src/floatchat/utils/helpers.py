# src/floatchat/utils/helpers.py
import numpy as np
import json
import dataclasses
import enum
from collections import deque
from datetime import date, datetime
from typing import Any, List, Optional
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class FileHandler:
    """File handling utilities"""

    @staticmethod
    def safe_json_serialize(data: Any, indent: Optional[int] = 2) -> str:
        """Safely serialize data to JSON handling numpy types, dataclasses and dates"""
        def default_serializer(obj):
            if isinstance(obj, (np.integer, np.floating)):
                return float(obj)
            elif isinstance(obj, np.ndarray):
                return obj.tolist()
            elif dataclasses.is_dataclass(obj) and not isinstance(obj, type):
                return dataclasses.asdict(obj)
            elif isinstance(obj, (datetime, date)):
                return obj.isoformat()
            elif isinstance(obj, enum.Enum):
                return obj.value
            elif isinstance(obj, Path):
                return str(obj)
            elif isinstance(obj, bytes):
                return obj.decode('utf-8', errors='replace')
            raise TypeError(f"Object of type {type(obj)} is not JSON serializable")

        return json.dumps(data, default=default_serializer, indent=indent, ensure_ascii=False)

    @staticmethod
    def write_bytes(data: bytes, directory: Path, filename: str) -> Path:
        """Write an in-memory artifact to disk and return its path"""
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / filename
        with open(path, 'wb') as f:
            f.write(data)
        logger.info(f"Wrote {len(data)} bytes to {path}")
        return path


class ActivityLog:
    """Newest-first log of dashboard actions, capped like a UI feed"""

    def __init__(self, max_entries: int = 50):
        self._entries = deque(maxlen=max_entries)

    def record(self, message: str) -> str:
        self._entries.appendleft(message)
        logger.debug(message)
        return message

    @property
    def entries(self) -> List[str]:
        return list(self._entries)

    def clear(self):
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
