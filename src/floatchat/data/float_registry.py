# src/floatchat/data/float_registry.py
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from floatchat.data.mock_data import SEED_FLOATS, FloatReading, FloatRecord

logger = logging.getLogger(__name__)

LatLon = Tuple[float, float]


@dataclass(frozen=True)
class RegionBounds:
    south_west: LatLon
    north_east: LatLon

    def as_list(self) -> List[List[float]]:
        return [list(self.south_west), list(self.north_east)]


class FloatRegistry:
    """In-memory list of ARGO floats shown on the map.

    Selection and region callbacks mirror the events a map widget emits;
    a selected region is reported upward but does not filter the floats.
    """

    def __init__(self, seed: Sequence[FloatRecord] = SEED_FLOATS,
                 on_select: Optional[Callable[[Optional[str]], None]] = None,
                 on_region: Optional[Callable[[RegionBounds], None]] = None,
                 rng: Optional[np.random.Generator] = None):
        self._seed = tuple(seed)
        self._floats: List[FloatRecord] = list(self._seed)
        self.on_select = on_select
        self.on_region = on_region
        self.rng = rng or np.random.default_rng()
        self.selected_float: Optional[str] = None
        self.last_region: Optional[RegionBounds] = None

    @property
    def floats(self) -> Tuple[FloatRecord, ...]:
        return tuple(self._floats)

    def __len__(self) -> int:
        return len(self._floats)

    def get_float(self, float_id: str) -> Optional[FloatRecord]:
        for record in self._floats:
            if record.id == float_id:
                return record
        return None

    @property
    def selected_record(self) -> Optional[FloatRecord]:
        return self.get_float(self.selected_float) if self.selected_float else None

    def select_float(self, float_id: str) -> Optional[str]:
        """Toggle selection; selecting the selected float clears it"""
        if self.get_float(float_id) is None:
            raise ValueError(f"Unknown float id: {float_id}")

        self.selected_float = None if float_id == self.selected_float else float_id
        logger.info(f"Float selection changed to {self.selected_float}")
        if self.on_select is not None:
            self.on_select(self.selected_float)
        return self.selected_float

    def select_region(self, corner_a: LatLon, corner_b: LatLon) -> RegionBounds:
        lats = (corner_a[0], corner_b[0])
        lons = (corner_a[1], corner_b[1])
        bounds = RegionBounds(
            south_west=(float(min(lats)), float(min(lons))),
            north_east=(float(max(lats)), float(max(lons))),
        )
        self.last_region = bounds
        logger.info(f"Region selected: SW={bounds.south_west} NE={bounds.north_east}")
        if self.on_region is not None:
            self.on_region(bounds)
        return bounds

    def region_from_drawing(self, feature: Optional[Dict[str, Any]]) -> Optional[RegionBounds]:
        """Handle a GeoJSON rectangle/polygon drawn on the map (lon/lat ordered)"""
        if not feature:
            return None

        geometry = feature.get('geometry') or {}
        if geometry.get('type') != 'Polygon' or not geometry.get('coordinates'):
            logger.debug(f"Ignoring drawing of type {geometry.get('type')}")
            return None

        ring = geometry['coordinates'][0]
        lons = [point[0] for point in ring]
        lats = [point[1] for point in ring]
        return self.select_region((min(lats), min(lons)), (max(lats), max(lons)))

    def search(self, text: str) -> List[FloatRecord]:
        if not text:
            return list(self._floats)
        needle = text.lower()
        return [
            record for record in self._floats
            if text in record.id or needle in record.display_name.lower()
        ]

    def add_random_float(self) -> FloatRecord:
        existing = {record.id for record in self._floats}
        number = int(self.rng.integers(3901000, 3910000))
        while f"ARGO-{number}" in existing:
            number += 1

        record = FloatRecord(
            id=f"ARGO-{number}",
            display_name=f"Prototype float {number}",
            latitude=round(float(self.rng.uniform(-30, 10)), 3),
            longitude=round(float(self.rng.uniform(50, 100)), 3),
            last_values=FloatReading(
                temperature=round(float(self.rng.uniform(18, 30)), 1),
                salinity=round(float(self.rng.uniform(34, 36)), 1),
                depth=float(self.rng.choice([0, 25, 50, 100])),
            ),
            last_update=date.today(),
        )
        self._floats.append(record)
        logger.info(f"Added random float {record.id}")
        return record

    def reset(self):
        self._floats = list(self._seed)
        if self.selected_float is not None and self.get_float(self.selected_float) is None:
            self.selected_float = None
        logger.info("Float registry reset")

    def map_bounds(self, padding: float = 5) -> List[List[float]]:
        """South-west / north-east box enclosing every float"""
        if not self._floats:
            return [[-90.0, -180.0], [90.0, 180.0]]
        lats = [record.latitude for record in self._floats]
        lons = [record.longitude for record in self._floats]
        return [[min(lats) - padding, min(lons) - padding], [max(lats) + padding, max(lons) + padding]]

    def to_dataframe(self, records: Optional[Sequence[FloatRecord]] = None) -> pd.DataFrame:
        rows = []
        for record in (self._floats if records is None else records):
            rows.append({
                'float_id': record.id,
                'name': record.display_name,
                'latitude': record.latitude,
                'longitude': record.longitude,
                'temperature': record.last_values.temperature,
                'salinity': record.last_values.salinity,
                'depth': record.last_values.depth,
                'last_update': record.last_update,
                'selected': record.id == self.selected_float,
            })
        return pd.DataFrame(rows, columns=['float_id', 'name', 'latitude', 'longitude', 'temperature',
                                           'salinity', 'depth', 'last_update', 'selected'])
