"""aiogram message handlers.

Contract: every incoming message gets exactly one text reply. When the interpreter finds no rule,
or anything fails internally, the reply is the generic help text and the cause is only logged.

Replies are written with `**...**` emphasis and sent as Telegram HTML: the text is escaped and
each emphasis pair becomes `<b>...</b>`.
"""

from __future__ import annotations

import logging
import re
from time import monotonic

from aiogram.types import Message
from aiogram.utils.text_decorations import html_decoration

from src.app import App
from src.intent import replies
from src.intent.interpreter import interpret

logger = logging.getLogger(__name__)

_EMPHASIS_RE = re.compile(r"\*\*(.+?)\*\*", re.DOTALL)

_COMMAND_REPLIES: dict[str, str] = {
    "/start": replies.WELCOME,
    "/help": replies.HELP,
}


def to_html(text: str) -> str:
    """Render `**bold**` reply text as Telegram HTML."""

    return _EMPHASIS_RE.sub(r"<b>\1</b>", html_decoration.quote(text))


def _command_reply(text: str) -> str:
    """Reply for a slash command; unknown commands get the fallback help."""

    command = text.strip().split(maxsplit=1)[0].split("@", 1)[0].lower()
    return _COMMAND_REPLIES.get(command, replies.FALLBACK_HELP)


async def handle_message(message: Message, app: App) -> None:
    """Answer one chat message with the interpreter's result or the fallback help."""

    started = monotonic()
    reply = replies.FALLBACK_HELP

    # noinspection PyBroadException
    try:
        raw_text = message.text or message.caption or ""
        if not raw_text.strip():
            await message.answer(to_html(replies.WELCOME))
            return
        if raw_text.lstrip().startswith("/"):
            await message.answer(to_html(_command_reply(raw_text)))
            return

        state = app.open_session(message.chat.id)
        result = interpret(raw_text, state)

        latency_ms = int((monotonic() - started) * 1000)
        if result is None:
            logger.info("unmatched latency_ms=%d", latency_ms)
        else:
            reply = result.text
            logger.info(
                "handled rule=%s state_changed=%s latency_ms=%d",
                result.rule,
                result.state_changed,
                latency_ms,
            )
    except Exception:
        # Handler boundary: internal errors must not leak into the chat.
        logger.exception("handler failed")

    await message.answer(to_html(reply))
