"""Bot router composition: every message goes to the calculator assistant."""

from __future__ import annotations

from aiogram import Router

from src.bot.handlers import handle_message

router = Router(name="assistant")
router.message.register(handle_message)
