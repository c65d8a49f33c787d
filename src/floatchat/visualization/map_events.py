# src/floatchat/visualization/map_events.py
import logging
from typing import Any, Dict, Optional, Tuple

from floatchat.data.float_registry import FloatRegistry
from floatchat.data.mock_data import FloatRecord

logger = logging.getLogger(__name__)


class MapEventHandler:
    """Turns st_folium return values into registry actions.

    The widget reports the same ``last_object_clicked`` on every rerun, so
    only a click that differs from the previous one is acted on. A map
    value without a click clears the memory, which lets the shell remount
    the map after each handled click so the next click on the same float
    (to deselect it) arrives as a new event.
    """

    def __init__(self, registry: FloatRegistry):
        self.registry = registry
        self._last_click: Optional[Tuple[float, float]] = None
        self._last_drawing: Optional[str] = None

    def nearest_float(self, lat: float, lng: float) -> Optional[FloatRecord]:
        floats = self.registry.floats
        if not floats:
            return None
        return min(floats, key=lambda r: (r.latitude - lat) ** 2 + (r.longitude - lng) ** 2)

    def handle(self, map_data: Optional[Dict[str, Any]]) -> bool:
        """Apply new click or drawing events; True when the float selection changed"""
        map_data = map_data or {}
        changed = False

        clicked = map_data.get('last_object_clicked')
        if not clicked:
            self._last_click = None
        else:
            click = (clicked.get('lat'), clicked.get('lng'))
            if click != self._last_click:
                self._last_click = click
                record = self.nearest_float(*click) if None not in click else None
                if record is not None:
                    self.registry.select_float(record.id)
                    changed = True

        drawing = map_data.get('last_active_drawing')
        if not drawing:
            self._last_drawing = None
        else:
            signature = str(drawing.get('geometry'))
            if signature != self._last_drawing:
                self._last_drawing = signature
                self.registry.region_from_drawing(drawing)

        return changed
