# src/floatchat/chat/handoff.py
import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional

from floatchat.data.mock_data import ParameterProfile

logger = logging.getLogger(__name__)

ANALYTICS_PAGE = "Analytics"


@dataclass(frozen=True)
class VisualizationHandoff:
    """Profiles matched by a chat query, passed to the analytics view"""
    query: str
    profiles: Mapping[str, ParameterProfile] = field(default_factory=dict)
    selected_float: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.profiles


class HandoffStore:
    """Holds at most one handoff; it lives until the user leaves the analytics page"""

    def __init__(self, target_page: str = ANALYTICS_PAGE):
        self.target_page = target_page
        self._current: Optional[VisualizationHandoff] = None
        self._last_page: Optional[str] = None

    @property
    def current(self) -> Optional[VisualizationHandoff]:
        return self._current

    def publish(self, handoff: VisualizationHandoff):
        logger.info(f"Handoff published for '{handoff.query}' ({', '.join(handoff.profiles)})")
        self._current = handoff

    def clear(self):
        self._current = None

    def on_navigate(self, page: str):
        """Drop the handoff once the analytics page has been left"""
        if self._last_page == self.target_page and page != self.target_page and self._current is not None:
            logger.info("Leaving analytics, clearing handoff")
            self.clear()
        self._last_page = page
