# tests/test_registry.py

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.append(str(Path(__file__).parent.parent / 'src'))

from floatchat.data.float_registry import FloatRegistry, RegionBounds
from floatchat.data.mock_data import SEED_FLOATS


class TestFloatRegistry:
    """Test cases for the in-memory float list"""

    @pytest.fixture(autouse=True)
    def setup_registry(self):
        self.selections = []
        self.regions = []
        self.registry = FloatRegistry(
            on_select=self.selections.append,
            on_region=self.regions.append,
            rng=np.random.default_rng(42)
        )

    def test_seed_floats(self):
        assert len(self.registry) == 5
        assert self.registry.get_float('ARGO-3901237').display_name == 'Rodrigues Gyre'
        assert self.registry.get_float('ARGO-0000000') is None

    def test_select_toggles(self):
        assert self.registry.select_float('ARGO-3901234') == 'ARGO-3901234'
        assert self.registry.selected_record is SEED_FLOATS[0]

        assert self.registry.select_float('ARGO-3901234') is None
        assert self.registry.selected_record is None
        assert self.selections == ['ARGO-3901234', None]

    def test_select_unknown_float(self):
        with pytest.raises(ValueError):
            self.registry.select_float('ARGO-1')

    def test_select_region_normalizes_corners(self):
        bounds = self.registry.select_region((-5, 90), (-20, 60))
        assert bounds == RegionBounds(south_west=(-20.0, 60.0), north_east=(-5.0, 90.0))
        assert bounds.as_list() == [[-20.0, 60.0], [-5.0, 90.0]]
        assert self.regions == [bounds]
        assert len(self.registry) == 5

    def test_region_from_drawing(self):
        feature = {
            'type': 'Feature',
            'geometry': {
                'type': 'Polygon',
                'coordinates': [[[60, -20], [60, -5], [90, -5], [90, -20], [60, -20]]]
            }
        }
        bounds = self.registry.region_from_drawing(feature)
        assert bounds.south_west == (-20.0, 60.0)
        assert bounds.north_east == (-5.0, 90.0)
        assert self.registry.last_region == bounds

    def test_region_from_other_drawings(self):
        assert self.registry.region_from_drawing(None) is None
        point = {'geometry': {'type': 'Point', 'coordinates': [70, -10]}}
        assert self.registry.region_from_drawing(point) is None
        assert self.regions == []

    def test_search(self):
        assert [r.id for r in self.registry.search('3901236')] == ['ARGO-3901236']
        assert [r.id for r in self.registry.search('ridge')] == ['ARGO-3901236', 'ARGO-3901238']
        assert len(self.registry.search('')) == 5
        assert self.registry.search('pacific') == []

    def test_add_random_and_reset(self):
        record = self.registry.add_random_float()
        assert len(self.registry) == 6
        assert record.id.startswith('ARGO-39')
        assert -30 <= record.latitude <= 10
        assert 50 <= record.longitude <= 100

        self.registry.select_float(record.id)
        self.registry.reset()
        assert len(self.registry) == 5
        assert self.registry.selected_float is None

    def test_random_ids_are_unique(self):
        ids = {self.registry.add_random_float().id for _ in range(20)}
        assert len(ids) == 20

    def test_map_bounds(self):
        assert np.allclose(self.registry.map_bounds(padding=5), [[-25.1, 63.4], [-0.2, 93.3]])

    def test_dataframe(self):
        self.registry.select_float('ARGO-3901238')
        df = self.registry.to_dataframe()
        assert len(df) == 5
        assert df.loc[df['float_id'] == 'ARGO-3901238', 'selected'].item()
        assert df['selected'].sum() == 1
