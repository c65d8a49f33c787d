# src/floatchat/data/exporter.py
import io
import zipfile
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

import pandas as pd

from floatchat.data.mock_data import FloatRecord, ParameterProfile
from floatchat.utils.helpers import FileHandler

logger = logging.getLogger(__name__)

JSON_MIME = 'application/json'
ZIP_MIME = 'application/zip'


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    mime: str
    data: bytes
    fallback: bool = False


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def export_filename(prefix: str, extension: str, now: Optional[datetime] = None) -> str:
    """``<prefix>-<ISO8601 to the second>.<ext>``, e.g. argo-export-2024-01-08T10:15:30.json"""
    now = now or _utc_now()
    return f"{prefix}-{now.strftime('%Y-%m-%dT%H:%M:%S')}.{extension}"


def _floats_frame(floats: Sequence[FloatRecord]) -> pd.DataFrame:
    records = []
    for record in floats:
        records.append({
            'float_id': record.id,
            'name': record.display_name,
            'latitude': record.latitude,
            'longitude': record.longitude,
            'temperature': record.last_values.temperature,
            'salinity': record.last_values.salinity,
            'depth': record.last_values.depth,
            'last_update': record.last_update.isoformat(),
        })
    return pd.DataFrame(records, columns=['float_id', 'name', 'latitude', 'longitude',
                                          'temperature', 'salinity', 'depth', 'last_update'])


def _profiles_frame(profiles: Mapping[str, ParameterProfile]) -> pd.DataFrame:
    records = [
        {'parameter': name, 'depth': point.depth, 'value': point.value, 'unit': profile.unit}
        for name, profile in profiles.items()
        for point in profile.chart_points
    ]
    return pd.DataFrame(records, columns=['parameter', 'depth', 'value', 'unit'])


class DataExporter:
    """Builds in-memory JSON and ZIP exports of the mock float and profile data"""

    def __init__(self, prefix: str = 'argo-export'):
        self.prefix = prefix

    def build_payload(self, floats: Sequence[FloatRecord], profiles: Mapping[str, ParameterProfile],
                      now: Optional[datetime] = None) -> Dict[str, Any]:
        return {
            'exportedAt': (now or _utc_now()).isoformat(),
            'floats': list(floats),
            'vizData': dict(profiles),
        }

    def export_json(self, floats: Sequence[FloatRecord], profiles: Mapping[str, ParameterProfile],
                    now: Optional[datetime] = None) -> ExportArtifact:
        now = now or _utc_now()
        payload = self.build_payload(floats, profiles, now)
        data = FileHandler.safe_json_serialize(payload).encode('utf-8')
        logger.info(f"Exported JSON ({len(data)} bytes)")
        return ExportArtifact(export_filename(self.prefix, 'json', now), JSON_MIME, data)

    def build_zip(self, floats: Sequence[FloatRecord], profiles: Mapping[str, ParameterProfile],
                  now: datetime) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED) as zf:
            zf.writestr('floats.json', FileHandler.safe_json_serialize(list(floats)))
            zf.writestr('viz.json', FileHandler.safe_json_serialize(dict(profiles)))
            zf.writestr('floats.csv', _floats_frame(floats).to_csv(index=False))
            zf.writestr('profiles.csv', _profiles_frame(profiles).to_csv(index=False))
            zf.writestr('README.txt', f"ARGO export generated at {now.isoformat()}")
        return buffer.getvalue()

    def export_zip(self, floats: Sequence[FloatRecord], profiles: Mapping[str, ParameterProfile],
                   now: Optional[datetime] = None) -> ExportArtifact:
        """ZIP export; degrades to the single-file JSON export if the archive cannot be built"""
        now = now or _utc_now()
        try:
            data = self.build_zip(floats, profiles, now)
        except Exception as e:
            logger.warning(f"ZIP export failed ({e}), falling back to JSON")
            artifact = self.export_json(floats, profiles, now)
            return ExportArtifact(artifact.filename, artifact.mime, artifact.data, fallback=True)

        logger.info(f"Exported ZIP ({len(data)} bytes)")
        return ExportArtifact(export_filename(self.prefix, 'zip', now), ZIP_MIME, data)

    def export(self, floats: Sequence[FloatRecord], profiles: Mapping[str, ParameterProfile],
               output_format: str = 'json', now: Optional[datetime] = None) -> ExportArtifact:
        if output_format == 'json':
            return self.export_json(floats, profiles, now)
        if output_format == 'zip':
            return self.export_zip(floats, profiles, now)
        raise ValueError(f"Unknown export format: {output_format}")

    def save(self, artifact: ExportArtifact, directory: Path) -> Path:
        return FileHandler.write_bytes(artifact.data, directory, artifact.filename)
