# tests/test_map_events.py

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).parent.parent / 'src'))

from floatchat.data.float_registry import FloatRegistry
from floatchat.visualization.map_events import MapEventHandler


def click_at(record):
    return {'last_object_clicked': {'lat': record.latitude, 'lng': record.longitude},
            'last_active_drawing': None}


RECTANGLE = {
    'type': 'Feature',
    'geometry': {
        'type': 'Polygon',
        'coordinates': [[[60, -20], [60, -5], [90, -5], [90, -20], [60, -20]]]
    }
}


class TestMapEventHandler:
    """Test cases for map click and drawing events"""

    @pytest.fixture(autouse=True)
    def setup_handler(self):
        self.regions = []
        self.registry = FloatRegistry(on_region=self.regions.append)
        self.handler = MapEventHandler(self.registry)
        self.float_a = self.registry.get_float('ARGO-3901234')
        self.float_b = self.registry.get_float('ARGO-3901235')

    def test_nearest_float(self):
        assert self.handler.nearest_float(-10.4, 75.3) is self.float_a
        assert self.handler.nearest_float(-15.0, 68.0) is self.float_b

    def test_nearest_float_without_floats(self):
        handler = MapEventHandler(FloatRegistry(seed=()))
        assert handler.nearest_float(0, 0) is None

    def test_click_selects(self):
        assert self.handler.handle(click_at(self.float_a))
        assert self.registry.selected_float == 'ARGO-3901234'

    def test_reselect_previous_float(self):
        self.handler.handle(click_at(self.float_a))
        self.handler.handle(click_at(self.float_b))
        assert self.registry.selected_float == 'ARGO-3901235'

        assert self.handler.handle(click_at(self.float_a))
        assert self.registry.selected_float == 'ARGO-3901234'

    def test_repeated_value_on_rerun_is_ignored(self):
        self.handler.handle(click_at(self.float_a))
        assert not self.handler.handle(click_at(self.float_a))
        assert self.registry.selected_float == 'ARGO-3901234'

    def test_click_again_after_remount_deselects(self):
        self.handler.handle(click_at(self.float_a))
        # remounted map reports no click yet
        assert not self.handler.handle({'last_object_clicked': None})

        assert self.handler.handle(click_at(self.float_a))
        assert self.registry.selected_float is None

    def test_empty_map_data(self):
        assert not self.handler.handle(None)
        assert not self.handler.handle({})
        assert self.registry.selected_float is None

    def test_click_without_coordinates(self):
        assert not self.handler.handle({'last_object_clicked': {'lat': None, 'lng': None}})

    def test_drawing_selects_region_once(self):
        self.handler.handle({'last_active_drawing': RECTANGLE})
        self.handler.handle({'last_active_drawing': RECTANGLE})
        assert len(self.regions) == 1
        assert self.registry.last_region.south_west == (-20.0, 60.0)

        self.handler.handle({'last_active_drawing': None})
        self.handler.handle({'last_active_drawing': RECTANGLE})
        assert len(self.regions) == 2
