# src/floatchat/nlp/query_interpreter.py
import re
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from floatchat.chat.messages import (
    ChartPayload, DownloadPayload, MessageDraft, MessageKind, MetadataPayload, TablePayload
)
from floatchat.data.exporter import DataExporter
from floatchat.data.mock_data import PARAMETER_ORDER, PROFILES, FloatRecord, ParameterProfile

logger = logging.getLogger(__name__)

GREETINGS: Tuple[str, ...] = ('hi', 'hello', 'hey', 'hola', 'greetings')
EXPORT_KEYWORDS: Tuple[str, ...] = ('export', 'download')

DEPTH_PATTERN = re.compile(r'(\d{1,4}) ?m', re.IGNORECASE)
ALPHA_PATTERN = re.compile(r'[a-zA-Z]')

GREETING_REPLY = "Hello! How can I assist you with ARGO float data today?"
WELCOME_MESSAGE = (
    "Hello! I'm your AI oceanography assistant. Ask me anything about ARGO float data. For example:\n\n"
    "• 'Show salinity near equator in March 2023'\n"
    "• 'Compare oxygen levels at 100m vs 500m depth'\n"
    "• 'Plot temperature changes in Arabian Sea'"
)

PROFILE_INTROS = {
    'temperature': "Temperature analysis complete! The ocean shows a clear stratification:",
    'salinity': "I found salinity data for your region. Here's a quick summary:",
    'oxygen': "Oxygen levels indicate a strong oxygen minimum zone:",
}


@dataclass(frozen=True)
class QueryResult:
    query: str
    parameters: Tuple[str, ...]
    depth: Optional[int]
    profiles: Mapping[str, ParameterProfile] = field(default_factory=dict)
    greeting: bool = False

    @property
    def has_text(self) -> bool:
        return bool(ALPHA_PATTERN.search(self.query))

    @property
    def wants_export(self) -> bool:
        lower = self.query.lower()
        return any(keyword in lower for keyword in EXPORT_KEYWORDS)


def extract_parameters(query: str) -> List[str]:
    """Recognized parameters in fixed order; all of them when none is named"""
    lower = query.lower()
    params = [name for name in PARAMETER_ORDER if name in lower]
    return params if params else list(PARAMETER_ORDER)


def extract_depth(query: str) -> Optional[int]:
    match = DEPTH_PATTERN.search(query)
    return int(match.group(1)) if match else None


def is_greeting(query: str) -> bool:
    lower = query.lower().strip()
    return any(lower.startswith(greet) for greet in GREETINGS)


class QueryInterpreter:
    """Keyword interpreter that maps chat text onto the mock parameter profiles"""

    def __init__(self, profiles: Optional[Mapping[str, ParameterProfile]] = None,
                 exporter: Optional[DataExporter] = None):
        self.profiles = profiles if profiles is not None else PROFILES
        self.exporter = exporter or DataExporter()

    def interpret(self, query: str) -> QueryResult:
        if is_greeting(query):
            logger.info(f"Greeting recognized: '{query}'")
            return QueryResult(query=query, parameters=(), depth=None, greeting=True)

        parameters = tuple(p for p in extract_parameters(query) if p in self.profiles)
        depth = extract_depth(query)
        profiles = {name: self.profiles[name] for name in parameters}

        logger.info(f"Interpreted '{query}' -> parameters={list(parameters)} depth={depth}")
        return QueryResult(query=query, parameters=parameters, depth=depth, profiles=profiles)

    def build_replies(self, result: QueryResult,
                      selected_float: Optional[FloatRecord] = None) -> List[MessageDraft]:
        """Draft the assistant replies for an interpreted query"""
        if result.greeting:
            return [MessageDraft(MessageKind.TEXT, GREETING_REPLY)]

        if not result.has_text:
            return []

        replies: List[MessageDraft] = []
        for name, profile in result.profiles.items():
            replies.append(MessageDraft(MessageKind.TEXT, self._narrative(profile, result.depth)))
            replies.append(self._table_reply(profile))
            replies.append(self._chart_reply(profile, result))

        if selected_float is not None:
            replies.append(self._metadata_reply(selected_float))

        if result.wants_export and result.profiles:
            replies.append(self._download_reply(result, selected_float))

        return replies

    def respond(self, query: str, selected_float: Optional[FloatRecord] = None) -> List[MessageDraft]:
        return self.build_replies(self.interpret(query), selected_float)

    def _narrative(self, profile: ParameterProfile, depth: Optional[int]) -> str:
        if depth is not None:
            value = profile.value_at(depth)
            if value is not None:
                return f"At {depth}m, {profile.display_label.lower()} is {value}."
            return (f"No {profile.display_label.lower()} reading at exactly {depth}m. "
                    f"{PROFILE_INTROS.get(profile.name, 'Here is the full profile:')}")
        return PROFILE_INTROS.get(profile.name, f"Here is the {profile.display_label.lower()} profile:")

    def _table_reply(self, profile: ParameterProfile) -> MessageDraft:
        payload = TablePayload(
            parameter=profile.name,
            columns=('Depth', profile.display_label),
            rows=profile.table_rows,
        )
        return MessageDraft(MessageKind.TABLE, f"{profile.display_label} table", payload)

    def _chart_reply(self, profile: ParameterProfile, result: QueryResult) -> MessageDraft:
        payload = ChartPayload(
            parameter=profile.name,
            label=profile.display_label,
            unit=profile.unit,
            color=profile.color,
            points=profile.chart_points,
            query=result.query,
            matched=result.parameters,
        )
        return MessageDraft(MessageKind.CHART, f"{profile.display_label} vs Depth", payload)

    def _metadata_reply(self, record: FloatRecord) -> MessageDraft:
        fields: Dict[str, str] = {
            'Name': record.display_name,
            'Location': f"{record.latitude:.2f}°, {record.longitude:.2f}°",
            'Temperature': f"{record.last_values.temperature} °C",
            'Salinity': f"{record.last_values.salinity} PSU",
            'Depth': f"{record.last_values.depth:g} m",
            'Last update': record.last_update.isoformat(),
        }
        payload = MetadataPayload(float_id=record.id, fields=fields)
        return MessageDraft(MessageKind.METADATA, f"Based on float {record.id}:", payload)

    def _download_reply(self, result: QueryResult, selected_float: Optional[FloatRecord]) -> MessageDraft:
        floats = [selected_float] if selected_float is not None else []
        artifact = self.exporter.export_json(floats, result.profiles)
        payload = DownloadPayload(filename=artifact.filename, mime=artifact.mime, data=artifact.data)
        return MessageDraft(MessageKind.DOWNLOAD, f"Export ready: {artifact.filename}", payload)
