# src/floatchat/visualization/plot_generator.py
import plotly.express as px
import plotly.graph_objects as go
import folium
from folium.plugins import Draw
import pandas as pd
import numpy as np
from typing import List, Mapping, Optional, Sequence, Tuple
import logging

from floatchat.data.mock_data import ChartPoint, FloatRecord, ParameterProfile

logger = logging.getLogger(__name__)

SELECTED_COLOR = '#2563eb'
FLOAT_COLOR = '#0ea5e9'


class FloatChatPlotGenerator:
    def __init__(self, template: str = 'plotly_white', chart_height: int = 300,
                 tiles: str = 'OpenStreetMap', zoom_start: int = 4):
        self.template = template
        self.chart_height = chart_height
        self.tiles = tiles
        self.zoom_start = zoom_start

    def create_profile_chart(self, points: Sequence[ChartPoint], label: str, color: str,
                             title: Optional[str] = None, height: Optional[int] = None) -> go.Figure:
        """Depth vs value line chart for a single parameter profile"""
        if not points:
            return self._create_empty_plot(f"No {label.lower()} data available")

        fig = go.Figure()
        fig.add_trace(go.Scatter(
            x=[point.depth for point in points],
            y=[point.value for point in points],
            mode='lines+markers',
            name=label,
            line=dict(color=color, width=3, shape='spline'),
            marker=dict(color=color, size=8)
        ))
        fig.update_layout(
            title=title or f"{label} Profile",
            xaxis_title='Depth (m)',
            yaxis_title=label,
            height=height or self.chart_height,
            template=self.template,
            margin=dict(l=40, r=20, t=50, b=40)
        )
        return fig

    def create_parameter_chart(self, profile: ParameterProfile, height: Optional[int] = None) -> go.Figure:
        return self.create_profile_chart(profile.chart_points, profile.axis_label, profile.color,
                                         title=f"{profile.display_label} Profile", height=height)

    def create_comparison_bar(self, profiles: Mapping[str, ParameterProfile]) -> go.Figure:
        """Surface value of each parameter side by side"""
        rows = [
            {'parameter': profile.display_label, 'value': profile.chart_points[0].value, 'color': profile.color}
            for profile in profiles.values() if profile.chart_points
        ]
        if not rows:
            return self._create_empty_plot("No surface values to compare")

        df = pd.DataFrame(rows)
        fig = px.bar(df, x='parameter', y='value', color='parameter',
                     color_discrete_sequence=df['color'].tolist(),
                     title='Surface Values by Parameter')
        fig.update_layout(template=self.template, height=self.chart_height, showlegend=False)
        return fig

    def create_surface_timeseries(self, series: pd.DataFrame, value_column: str = 'temperature',
                                  color: str = '#ff7f50') -> go.Figure:
        """Area chart of a surface time series"""
        if series.empty:
            return self._create_empty_plot("No time series data available")

        fig = px.area(series, x='step', y=value_column, title=f'Surface {value_column.title()} Time Series')
        fig.update_traces(line_color=color, fillcolor=color, opacity=0.3)
        fig.update_layout(template=self.template, height=self.chart_height)
        return fig

    def create_float_map(self, floats: Sequence[FloatRecord], selected_id: Optional[str] = None,
                         bounds: Optional[List[List[float]]] = None, enable_draw: bool = True) -> folium.Map:
        """Tile map with one circle marker per float"""
        if not floats:
            return self._create_empty_map()

        center_lat = float(np.mean([record.latitude for record in floats]))
        center_lon = float(np.mean([record.longitude for record in floats]))

        m = folium.Map(
            location=[center_lat, center_lon],
            zoom_start=self.zoom_start,
            tiles=self.tiles,
            control_scale=True,
            world_copy_jump=True
        )

        for record in floats:
            is_selected = record.id == selected_id
            color = SELECTED_COLOR if is_selected else FLOAT_COLOR
            folium.CircleMarker(
                location=[record.latitude, record.longitude],
                radius=8 if is_selected else 6,
                color=color,
                fill=True,
                fill_color=color,
                fill_opacity=0.7 if is_selected else 0.5,
                tooltip=self._create_float_tooltip(record),
                popup=folium.Popup(self._create_float_tooltip(record), max_width=250)
            ).add_to(m)

        if bounds:
            m.fit_bounds(bounds)

        if enable_draw:
            self._add_draw_control(m)

        return m

    def _create_float_tooltip(self, record: FloatRecord) -> str:
        parts = [
            f"<b>{record.id}</b>",
            f"T: {record.last_values.temperature}°C",
            f"Sal: {record.last_values.salinity}",
            f"Depth: {record.last_values.depth:g} m",
        ]
        return "<br>".join(parts)

    def _add_draw_control(self, map_obj: folium.Map):
        """Rectangle-only drawing tool for region selection"""
        Draw(
            export=False,
            position='topright',
            draw_options={
                'rectangle': True,
                'polygon': False,
                'polyline': False,
                'circle': False,
                'marker': False,
                'circlemarker': False
            },
            edit_options={'edit': False}
        ).add_to(map_obj)

    def _create_empty_map(self, center: Tuple[float, float] = (-10, 78)) -> folium.Map:
        """Create empty map with informative message"""
        m = folium.Map(location=center, zoom_start=3, tiles=self.tiles)

        folium.Marker(
            center,
            icon=folium.DivIcon(html='<div style="color: red; font-size: 16px;">No floats available</div>')
        ).add_to(m)

        return m

    def _create_empty_plot(self, message: str = "No data available") -> go.Figure:
        """Create empty plot with message"""
        fig = go.Figure()
        fig.add_annotation(
            text=message,
            xref="paper", yref="paper",
            x=0.5, y=0.5, xanchor='center', yanchor='middle',
            showarrow=False,
            font=dict(size=16, color="red")
        )
        fig.update_layout(
            plot_bgcolor='white',
            height=self.chart_height,
            xaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
            yaxis=dict(showgrid=False, zeroline=False, showticklabels=False)
        )
        return fig


def generate_surface_series(steps: int = 20, base: float = 20.0, seed: Optional[int] = None) -> pd.DataFrame:
    """Mock surface temperature series: a slow oscillation plus noise"""
    rng = np.random.default_rng(seed)
    step = np.arange(steps)
    values = base + np.sin(step / 3) + rng.uniform(-0.5, 0.5, steps)
    return pd.DataFrame({'step': step, 'temperature': np.round(values, 2)})
