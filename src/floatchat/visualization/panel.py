# src/floatchat/visualization/panel.py
import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from floatchat.data.mock_data import ChartPoint, ParameterProfile
from floatchat.visualization.plot_generator import FloatChatPlotGenerator

logger = logging.getLogger(__name__)

EMPTY_STATE_MESSAGE = "No data to visualize yet. Ask a question in the chat!"


@dataclass(frozen=True)
class ProfileSummary:
    minimum: float
    maximum: float
    average: float
    count: int


@dataclass
class PanelSection:
    parameter: str
    label: str
    summary: ProfileSummary
    table: pd.DataFrame
    figure: go.Figure
    insight: str


@dataclass
class PanelContent:
    sections: List[PanelSection] = field(default_factory=list)
    active_tab: str = 'profiles'
    selected_float: Optional[str] = None
    empty_message: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.sections


def summarize_points(points: Sequence[ChartPoint]) -> Optional[ProfileSummary]:
    if not points:
        return None
    values = np.array([point.value for point in points], dtype=float)
    return ProfileSummary(
        minimum=float(values.min()),
        maximum=float(values.max()),
        average=float(values.mean()),
        count=len(values),
    )


def generate_insight(parameter: str, summary: ProfileSummary) -> str:
    if parameter == 'temperature':
        if summary.average > 20:
            return "Surface waters are relatively warm, possibly from seasonal heating."
        return "Cooler temperatures suggest upwelling or winter conditions."
    if parameter == 'salinity':
        if summary.maximum > 36:
            return "High salinity detected. May indicate strong evaporation or restricted circulation."
        return "Salinity is within expected open-ocean range."
    if parameter == 'oxygen':
        if summary.average < 2:
            return "⚠️ Low oxygen levels detected. Possible oxygen minimum zone."
        return "Oxygen levels look healthy across most depths."
    return ""


def detect_active_tab(query: str) -> str:
    q = query.lower()
    if any(word in q for word in ('time', 'series', 'change')):
        return 'timeseries'
    if any(word in q for word in ('region', 'compare', 'indian', 'bay')):
        return 'regional'
    return 'profiles'


class VisualizationPanel:
    """Presentation-only view over whatever profiles it is handed"""

    def __init__(self, plot_generator: Optional[FloatChatPlotGenerator] = None):
        self.plot_generator = plot_generator or FloatChatPlotGenerator()

    def build(self, profiles: Mapping[str, ParameterProfile], query: str = '',
              selected_float: Optional[str] = None) -> PanelContent:
        content = PanelContent(active_tab=detect_active_tab(query), selected_float=selected_float)

        for name, profile in (profiles or {}).items():
            section = self.build_section(name, profile)
            if section is not None:
                content.sections.append(section)

        if content.is_empty:
            content.empty_message = EMPTY_STATE_MESSAGE

        logger.debug(f"Panel built with {len(content.sections)} sections for '{query}'")
        return content

    def build_section(self, name: str, profile: ParameterProfile) -> Optional[PanelSection]:
        summary = summarize_points(profile.chart_points)
        if summary is None:
            return None

        table = pd.DataFrame(
            [{'Depth': row.depth, profile.display_label: row.value} for row in profile.table_rows],
            columns=['Depth', profile.display_label]
        )
        return PanelSection(
            parameter=name,
            label=profile.display_label,
            summary=summary,
            table=table,
            figure=self.plot_generator.create_parameter_chart(profile),
            insight=generate_insight(name, summary),
        )
