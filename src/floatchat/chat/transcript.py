# src/floatchat/chat/transcript.py
import asyncio
import logging
from typing import Callable, List, Mapping, Optional, Sequence, Tuple

from floatchat.chat.handoff import VisualizationHandoff
from floatchat.chat.messages import ChartPayload, Message, MessageDraft, MessageKind, Sender
from floatchat.data.mock_data import FloatRecord, ParameterProfile
from floatchat.nlp.query_interpreter import WELCOME_MESSAGE, QueryInterpreter

logger = logging.getLogger(__name__)

QueryCallback = Callable[[str, List[str], Mapping[str, ParameterProfile]], None]


class ChatTranscript:
    """Append-only chat history with delayed synthetic assistant replies.

    ``submit`` records the user turn immediately and schedules the assistant
    turn on the running event loop. Scheduled deliveries resolve strictly in
    submission order; with ``cancel_superseded`` a new submission cancels the
    deliveries still outstanding instead.
    """

    def __init__(self, interpreter: Optional[QueryInterpreter] = None,
                 reply_delay: float = 1.2,
                 cancel_superseded: bool = False,
                 on_query: Optional[QueryCallback] = None,
                 welcome: Optional[str] = WELCOME_MESSAGE):
        if reply_delay < 0:
            raise ValueError("reply_delay must be non-negative")

        self.interpreter = interpreter or QueryInterpreter()
        self.reply_delay = reply_delay
        self.cancel_superseded = cancel_superseded
        self.on_query = on_query
        self.selected_float: Optional[FloatRecord] = None

        self._messages: List[Message] = []
        self._pending: List[asyncio.Task] = []
        self._closed = False

        if welcome:
            self._messages.append(Message(sender=Sender.ASSISTANT, kind=MessageKind.TEXT, content=welcome))

    @property
    def messages(self) -> Tuple[Message, ...]:
        return tuple(self._messages)

    @property
    def is_pending(self) -> bool:
        return any(not task.done() for task in self._pending)

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, text: str) -> Optional[asyncio.Task]:
        """Record a user query and schedule the assistant replies"""
        if self._closed:
            raise RuntimeError("Transcript is closed")

        if not text or not text.strip():
            return None

        loop = asyncio.get_running_loop()
        self._messages.append(Message.user(text))

        result = self.interpreter.interpret(text)
        if self.on_query is not None:
            self.on_query(text, list(result.parameters), dict(result.profiles))

        drafts = self.interpreter.build_replies(result, self.selected_float)

        if self.cancel_superseded:
            self._cancel_pending("superseded by a new query")

        previous = self._pending[-1] if self._pending else None
        task = loop.create_task(self._deliver(drafts, previous))
        self._pending.append(task)
        task.add_done_callback(self._forget)
        return task

    async def _deliver(self, drafts: Sequence[MessageDraft], previous: Optional[asyncio.Task]):
        await asyncio.sleep(self.reply_delay)
        if previous is not None and not previous.done():
            # asyncio.wait never propagates the predecessor's cancellation
            await asyncio.wait({previous})

        for draft in drafts:
            self._messages.append(Message.from_draft(draft))
        logger.debug(f"Delivered {len(drafts)} assistant replies")

    def _forget(self, task: asyncio.Task):
        if task in self._pending:
            self._pending.remove(task)

    def _cancel_pending(self, reason: str):
        outstanding = [task for task in self._pending if not task.done()]
        for task in outstanding:
            task.cancel()
        if outstanding:
            logger.info(f"Cancelled {len(outstanding)} pending replies: {reason}")

    async def drain(self):
        """Wait until every scheduled delivery has finished or been cancelled"""
        while self._pending:
            await asyncio.wait(list(self._pending))

    async def submit_and_wait(self, text: str) -> List[Message]:
        before = len(self._messages)
        task = self.submit(text)
        if task is not None:
            await self.drain()
        return self._messages[before:]

    def close(self):
        """Cancel outstanding replies; the transcript accepts no more input"""
        self._cancel_pending("transcript closed")
        self._closed = True

    def forward(self, message: Message) -> VisualizationHandoff:
        """Turn a chart reply into the analytics handoff for its query"""
        if not isinstance(message.payload, ChartPayload):
            raise ValueError("Only chart messages can be forwarded to analytics")

        payload = message.payload
        profiles = {
            name: self.interpreter.profiles[name]
            for name in payload.matched
            if name in self.interpreter.profiles
        }
        selected = self.selected_float.id if self.selected_float is not None else None
        return VisualizationHandoff(query=payload.query, profiles=profiles, selected_float=selected)

    def latest_chart(self) -> Optional[Message]:
        for message in reversed(self._messages):
            if message.kind is MessageKind.CHART:
                return message
        return None
