"""Application composition root.

This module wires together configuration and the per-chat exchange sessions for the bot runtime.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass, field

import httpx

from src.config.settings import Settings
from src.finance.exchange import ExchangeState
from src.rates.source import refresh_exchange_state

logger = logging.getLogger(__name__)


@dataclass
class SessionStore:
    """One `ExchangeState` per chat, created lazily from the fallback rates.

    At most `max_sessions` chats are kept; creating one more evicts the least recently used chat.
    A manual "set rate" override lasts until the process restarts or its chat is evicted.
    """

    fallback_usd_to_cad: float
    fallback_cad_to_usd: float
    max_sessions: int = 10_000
    _states: OrderedDict[int, ExchangeState] = field(default_factory=OrderedDict)

    def get(self, chat_id: int) -> ExchangeState:
        state = self._states.get(chat_id)
        if state is not None:
            self._states.move_to_end(chat_id)
            return state

        state = ExchangeState(
            cad_to_usd=self.fallback_cad_to_usd,
            usd_to_cad=self.fallback_usd_to_cad,
        )
        self._states[chat_id] = state
        if len(self._states) > self.max_sessions:
            evicted, _ = self._states.popitem(last=False)
            logger.debug("session evicted chat_id=%s", evicted)
        return state

    def __contains__(self, chat_id: object) -> bool:
        return chat_id in self._states

    def __len__(self) -> int:
        return len(self._states)


@dataclass(frozen=True)
class App:
    """Shared application dependencies for handlers."""

    settings: Settings
    sessions: SessionStore
    _background: set[asyncio.Task[bool]] = field(default_factory=set)

    def open_session(self, chat_id: int) -> ExchangeState:
        """Return the chat's state, scheduling a background rate refresh for new sessions.

        The refresh never delays the caller: the first answers may use fallback rates.
        """

        is_new = chat_id not in self.sessions
        state = self.sessions.get(chat_id)
        if is_new and self.settings.rate_refresh_enabled:
            task = asyncio.create_task(self.refresh_session(chat_id))
            self._background.add(task)
            task.add_done_callback(self._background.discard)
        return state

    async def refresh_session(self, chat_id: int, client: httpx.AsyncClient | None = None) -> bool:
        """Pull a market quote into one chat's state; a failed fetch leaves it untouched."""

        if not self.settings.rate_refresh_enabled:
            return False
        return await refresh_exchange_state(
            self.sessions.get(chat_id),
            url=self.settings.rate_source_url,
            timeout_s=self.settings.rate_fetch_timeout_s,
            client=client,
        )


def create_app(settings: Settings) -> App:
    """Create the application container."""

    sessions = SessionStore(
        fallback_usd_to_cad=settings.fallback_usd_to_cad,
        fallback_cad_to_usd=settings.fallback_cad_to_usd,
        max_sessions=settings.session_limit,
    )
    return App(settings=settings, sessions=sessions)
