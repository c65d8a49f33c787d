# src/floatchat/data/mock_data.py
"""Static mock datasets shared by the chat, analytics and map views.

Everything here is read-only configuration: components receive these objects
and copy them into messages or panels, they never modify them.
"""
import re
from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

PARAMETER_ORDER: Tuple[str, ...] = ('temperature', 'salinity', 'oxygen')

_DEPTH_LABEL = re.compile(r'^\s*(\d+)\s*m\s*$', re.IGNORECASE)


@dataclass(frozen=True)
class TableRow:
    depth: str
    value: str


@dataclass(frozen=True)
class ChartPoint:
    depth: float
    value: float


@dataclass(frozen=True)
class ParameterProfile:
    name: str
    display_label: str
    unit: str
    table_rows: Tuple[TableRow, ...]
    chart_points: Tuple[ChartPoint, ...]
    color: str

    @property
    def axis_label(self) -> str:
        return f"{self.display_label} ({self.unit})"

    def value_at(self, depth: int) -> Optional[str]:
        """Return the table value recorded at exactly ``depth`` meters"""
        for row in self.table_rows:
            if parse_depth_label(row.depth) == depth:
                return row.value
        return None


@dataclass(frozen=True)
class FloatReading:
    temperature: float
    salinity: float
    depth: float


@dataclass(frozen=True)
class FloatRecord:
    id: str
    display_name: str
    latitude: float
    longitude: float
    last_values: FloatReading
    last_update: date


def parse_depth_label(label: str) -> Optional[int]:
    """'500m' -> 500"""
    match = _DEPTH_LABEL.match(label)
    return int(match.group(1)) if match else None


def _profile(name, label, unit, color, points: List[Tuple[int, float]]) -> ParameterProfile:
    return ParameterProfile(
        name=name,
        display_label=label,
        unit=unit,
        table_rows=tuple(TableRow(depth=f"{depth}m", value=f"{value} {unit}") for depth, value in points),
        chart_points=tuple(ChartPoint(depth=depth, value=value) for depth, value in points),
        color=color,
    )


PROFILES: Mapping[str, ParameterProfile] = MappingProxyType({
    'temperature': _profile('temperature', 'Temperature', '°C', '#ff7f50',
                            [(0, 28.5), (50, 22.1), (200, 12.3), (1000, 3.8)]),
    'salinity': _profile('salinity', 'Salinity', 'PSU', '#1e90ff',
                         [(0, 34.5), (100, 34.8), (500, 35.2), (1000, 34.9)]),
    'oxygen': _profile('oxygen', 'Dissolved O₂', 'ml/L', '#7b68ee',
                       [(0, 5.0), (100, 3.1), (500, 0.3), (1000, 2.5)]),
})

SEED_FLOATS: Tuple[FloatRecord, ...] = (
    FloatRecord('ARGO-3901234', 'Chagos Basin', -10.5, 75.2, FloatReading(28.5, 35.1, 0), date(2024, 1, 8)),
    FloatRecord('ARGO-3901235', 'Mascarene Plateau', -15.8, 68.4, FloatReading(26.2, 35.3, 50), date(2024, 1, 8)),
    FloatRecord('ARGO-3901236', 'Central Indian Ridge', -5.2, 82.1, FloatReading(29.1, 34.8, 0), date(2024, 1, 8)),
    FloatRecord('ARGO-3901237', 'Rodrigues Gyre', -20.1, 72.6, FloatReading(24.8, 35.5, 100), date(2024, 1, 7)),
    FloatRecord('ARGO-3901238', 'Ninety East Ridge', -8.7, 88.3, FloatReading(28.9, 34.9, 25), date(2024, 1, 8)),
)


def validate_profile(profile: ParameterProfile) -> None:
    """Raise ValueError unless the table and chart cover the same depths"""
    table_depths = [parse_depth_label(row.depth) for row in profile.table_rows]
    if None in table_depths:
        raise ValueError(f"{profile.name}: unparseable table depth label")

    chart_depths = [int(point.depth) for point in profile.chart_points]
    if sorted(table_depths) != sorted(chart_depths):
        raise ValueError(
            f"{profile.name}: table depths {table_depths} do not match chart depths {chart_depths}"
        )


def validate_profiles(profiles: Mapping[str, ParameterProfile] = PROFILES) -> Dict[str, bool]:
    results = {}
    for name, profile in profiles.items():
        if name != profile.name:
            raise ValueError(f"Profile registered as '{name}' is named '{profile.name}'")
        validate_profile(profile)
        results[name] = True
    return results
