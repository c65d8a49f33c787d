# src/floatchat/chat/messages.py
import enum
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping, Optional, Tuple, Union

from floatchat.data.mock_data import ChartPoint, TableRow


class Sender(enum.Enum):
    USER = "user"
    ASSISTANT = "assistant"


class MessageKind(enum.Enum):
    TEXT = "text"
    TABLE = "table"
    CHART = "chart"
    METADATA = "metadata"
    DOWNLOAD = "download"


@dataclass(frozen=True)
class TablePayload:
    parameter: str
    columns: Tuple[str, ...]
    rows: Tuple[TableRow, ...]


@dataclass(frozen=True)
class ChartPayload:
    parameter: str
    label: str
    unit: str
    color: str
    points: Tuple[ChartPoint, ...]
    query: str
    matched: Tuple[str, ...]


@dataclass(frozen=True)
class MetadataPayload:
    float_id: str
    fields: Mapping[str, str]


@dataclass(frozen=True)
class DownloadPayload:
    filename: str
    mime: str
    data: bytes


Payload = Union[TablePayload, ChartPayload, MetadataPayload, DownloadPayload]

PAYLOAD_TYPES = {
    MessageKind.TEXT: type(None),
    MessageKind.TABLE: TablePayload,
    MessageKind.CHART: ChartPayload,
    MessageKind.METADATA: MetadataPayload,
    MessageKind.DOWNLOAD: DownloadPayload,
}


@dataclass(frozen=True)
class MessageDraft:
    """Assistant reply before it is stamped with an id and timestamp"""
    kind: MessageKind
    content: str
    payload: Optional[Payload] = None


@dataclass(frozen=True)
class Message:
    sender: Sender
    kind: MessageKind
    content: str
    payload: Optional[Payload] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        expected = PAYLOAD_TYPES[self.kind]
        if not isinstance(self.payload, expected):
            raise ValueError(
                f"{self.kind.value} message requires {expected.__name__} payload, "
                f"got {type(self.payload).__name__}"
            )

    @classmethod
    def from_draft(cls, draft: MessageDraft) -> 'Message':
        return cls(sender=Sender.ASSISTANT, kind=draft.kind, content=draft.content, payload=draft.payload)

    @classmethod
    def user(cls, text: str) -> 'Message':
        return cls(sender=Sender.USER, kind=MessageKind.TEXT, content=text)

    def to_draft(self) -> MessageDraft:
        return MessageDraft(kind=self.kind, content=self.content, payload=self.payload)
