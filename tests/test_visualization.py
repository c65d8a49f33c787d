# tests/test_visualization.py

import sys
from pathlib import Path

import folium
import pandas as pd
import plotly.graph_objects as go
import pytest

sys.path.append(str(Path(__file__).parent.parent / 'src'))

from floatchat.data.mock_data import PROFILES, SEED_FLOATS, ChartPoint, ParameterProfile
from floatchat.visualization.panel import (
    EMPTY_STATE_MESSAGE, ProfileSummary, VisualizationPanel, detect_active_tab,
    generate_insight, summarize_points
)
from floatchat.visualization.plot_generator import FloatChatPlotGenerator, generate_surface_series


class TestSummaries:
    def test_temperature_summary(self):
        summary = summarize_points(PROFILES['temperature'].chart_points)
        assert summary.minimum == 3.8
        assert summary.maximum == 28.5
        assert summary.average == pytest.approx(16.675)
        assert summary.count == 4

    def test_single_point(self):
        summary = summarize_points((ChartPoint(depth=0, value=7.5),))
        assert summary.minimum == summary.maximum == summary.average == 7.5

    def test_no_points(self):
        assert summarize_points(()) is None

    def test_insights(self):
        warm = ProfileSummary(minimum=3.8, maximum=28.5, average=21.0, count=4)
        assert "warm" in generate_insight('temperature', warm)

        low_oxygen = ProfileSummary(minimum=0.3, maximum=5.0, average=1.5, count=4)
        assert "Low oxygen" in generate_insight('oxygen', low_oxygen)

        salty = ProfileSummary(minimum=34.5, maximum=36.4, average=35.4, count=4)
        assert "High salinity" in generate_insight('salinity', salty)

        assert generate_insight('chlorophyll', warm) == ""

    def test_active_tab(self):
        assert detect_active_tab("temperature changes over time") == 'timeseries'
        assert detect_active_tab("Compare the Indian Ocean") == 'regional'
        assert detect_active_tab("salinity at 500m") == 'profiles'


class TestVisualizationPanel:
    """Test cases for the analytics panel"""

    @pytest.fixture(autouse=True)
    def setup_panel(self):
        self.panel = VisualizationPanel()

    def test_empty_state(self):
        content = self.panel.build({})
        assert content.is_empty
        assert content.sections == []
        assert content.empty_message == EMPTY_STATE_MESSAGE

    def test_sections_follow_profiles(self):
        content = self.panel.build(dict(PROFILES), "show everything", selected_float='ARGO-3901234')

        assert [s.parameter for s in content.sections] == ['temperature', 'salinity', 'oxygen']
        assert content.selected_float == 'ARGO-3901234'
        assert content.empty_message is None

        oxygen = content.sections[2]
        assert isinstance(oxygen.table, pd.DataFrame)
        assert list(oxygen.table.columns) == ['Depth', 'Dissolved O₂']
        assert isinstance(oxygen.figure, go.Figure)
        assert oxygen.summary.minimum == 0.3

    def test_profile_without_points_is_skipped(self):
        empty = ParameterProfile(name='oxygen', display_label='Dissolved O₂', unit='ml/L',
                                 table_rows=(), chart_points=(), color='#7b68ee')
        content = self.panel.build({'oxygen': empty})
        assert content.is_empty


class TestPlotGenerator:
    @pytest.fixture(autouse=True)
    def setup_generator(self):
        self.generator = FloatChatPlotGenerator(chart_height=250)

    def test_profile_chart(self):
        fig = self.generator.create_parameter_chart(PROFILES['salinity'])
        assert list(fig.data[0].x) == [0, 100, 500, 1000]
        assert fig.layout.height == 250
        assert fig.layout.yaxis.title.text == 'Salinity (PSU)'

    def test_empty_chart(self):
        fig = self.generator.create_profile_chart((), 'Temperature', '#ff7f50')
        assert len(fig.data) == 0
        assert fig.layout.annotations[0].text == "No temperature data available"

    def test_comparison_bar(self):
        fig = self.generator.create_comparison_bar(PROFILES)
        assert len(fig.data) == 3

    def test_surface_timeseries(self):
        series = generate_surface_series(steps=12, seed=1)
        assert len(series) == 12
        fig = self.generator.create_surface_timeseries(series)
        assert isinstance(fig, go.Figure)

    def test_float_map(self):
        m = self.generator.create_float_map(SEED_FLOATS, selected_id='ARGO-3901235')
        assert isinstance(m, folium.Map)
        markers = [child for child in m._children.values() if isinstance(child, folium.CircleMarker)]
        assert len(markers) == len(SEED_FLOATS)

    def test_empty_map(self):
        assert isinstance(self.generator.create_float_map([]), folium.Map)
