"""Telegram transport using python-telegram-bot (long polling)."""

from __future__ import annotations

import asyncio
from typing import Any

from loguru import logger
from telegram import Bot, BotCommand, CallbackQuery, InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import Application, CallbackQueryHandler, CommandHandler, ContextTypes, MessageHandler, filters
from telegram.request import HTTPXRequest

from voice2action import __logo__
from voice2action.app import AppContext
from voice2action.config.schema import TelegramConfig
from voice2action.previews import ButtonRows

UNAUTHORIZED_MESSAGE = "⛔ Unauthorized user"

START_TEXT = (
    f"{__logo__} Voice Assistant Ready!\n\n"
    "Send me a voice or text message and I'll:\n"
    "• Transcribe it\n"
    "• Work out what you want\n"
    "• Prepare an email or calendar event for you to confirm\n\n"
    "Commands:\n"
    "/start - Show this message\n"
    "/status - Check system status\n"
    "/help - Get help"
)

HELP_TEXT = (
    "📖 Help\n\n"
    "Voice or text commands:\n"
    '• "Send email to [address] with subject [subject] and text [message]"\n'
    '• "Create calendar event [title] tomorrow at 3 PM"\n'
    "• Anything else gets a short reply\n\n"
    "Examples:\n"
    '🗣 "Send email to john@example.com about meeting"\n'
    '🗣 "Schedule team meeting tomorrow at 2 PM"\n'
    '🗣 "Gym on Friday at 7"'
)


def _keyboard(buttons: ButtonRows | None) -> InlineKeyboardMarkup | None:
    if not buttons:
        return None
    return InlineKeyboardMarkup(
        [[InlineKeyboardButton(label, callback_data=data) for label, data in row] for row in buttons]
    )


class TelegramChatReplier:
    """Send/edit/delete messages in one chat; handles are message ids."""

    def __init__(self, bot: Bot, chat_id: int) -> None:
        self._bot = bot
        self._chat_id = chat_id

    async def send(self, text: str, buttons: ButtonRows | None = None) -> int:
        msg = await self._bot.send_message(chat_id=self._chat_id, text=text, reply_markup=_keyboard(buttons))
        return msg.message_id

    async def edit(self, handle: Any, text: str) -> None:
        await self._bot.edit_message_text(chat_id=self._chat_id, message_id=handle, text=text)

    async def delete(self, handle: Any) -> None:
        await self._bot.delete_message(chat_id=self._chat_id, message_id=handle)


class TelegramCallbackReplier:
    """Replies for one button press, bound to the message carrying the buttons."""

    def __init__(self, query: CallbackQuery) -> None:
        self._query = query

    async def answer(self) -> None:
        await self._query.answer()

    async def clear_buttons(self) -> None:
        await self._query.edit_message_reply_markup(reply_markup=None)

    async def edit(self, text: str) -> None:
        await self._query.edit_message_text(text)

    async def send(self, text: str) -> None:
        message = self._query.message
        if message is None:
            logger.warning("Callback query has no message to reply to")
            return
        await self._query.get_bot().send_message(chat_id=message.chat.id, text=text)


class TelegramChannel:
    name = "telegram"

    BOT_COMMANDS = [
        BotCommand("start", "Start the bot"),
        BotCommand("status", "Check system status"),
        BotCommand("help", "Show examples"),
    ]

    def __init__(self, config: TelegramConfig, ctx: AppContext):
        self.config = config
        self.ctx = ctx
        self._app: Application | None = None
        self._running = False

    def is_allowed(self, user: Any) -> bool:
        """Empty allowlist admits everyone; entries match a user id or username."""
        if not self.config.allow_from:
            return True
        if str(user.id) in self.config.allow_from:
            return True
        username = getattr(user, "username", None)
        return bool(username) and username in self.config.allow_from

    async def start(self) -> None:
        """Start the Telegram bot with long polling."""
        if not self.config.token:
            logger.error("Telegram bot token not configured")
            return

        self._running = True

        req = HTTPXRequest(connection_pool_size=16, pool_timeout=5.0, connect_timeout=30.0, read_timeout=30.0)
        # Updates run concurrently; the admission queue decides what gets processed.
        builder = (
            Application.builder()
            .token(self.config.token)
            .request(req)
            .get_updates_request(req)
            .concurrent_updates(True)
        )
        if self.config.proxy:
            builder = builder.proxy(self.config.proxy).get_updates_proxy(self.config.proxy)
        self._app = builder.build()
        self._app.add_error_handler(self._on_error)

        self._app.add_handler(CommandHandler("start", self._on_start))
        self._app.add_handler(CommandHandler("help", self._on_help))
        self._app.add_handler(CommandHandler("status", self._on_status))
        self._app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, self._on_text))
        self._app.add_handler(MessageHandler(filters.VOICE | filters.AUDIO, self._on_voice))
        self._app.add_handler(CallbackQueryHandler(self._on_callback))

        logger.info("Starting Telegram bot (polling mode)...")

        await self._app.initialize()
        await self._app.start()

        bot_info = await self._app.bot.get_me()
        logger.info(f"Telegram bot @{bot_info.username} connected")

        try:
            await self._app.bot.set_my_commands(self.BOT_COMMANDS)
            logger.debug("Telegram bot commands registered")
        except Exception as e:
            logger.warning(f"Failed to register bot commands: {e}")

        await self._app.updater.start_polling(
            allowed_updates=["message", "callback_query"],
            drop_pending_updates=True,
        )

        while self._running:
            await asyncio.sleep(1)

    async def stop(self) -> None:
        """Stop the Telegram bot."""
        self._running = False
        if self._app:
            logger.info("Stopping Telegram bot...")
            await self._app.updater.stop()
            await self._app.stop()
            await self._app.shutdown()
            self._app = None

    async def _on_start(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if not update.message:
            return
        await update.message.reply_text(START_TEXT)

    async def _on_help(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if not update.message:
            return
        await update.message.reply_text(HELP_TEXT)

    async def _on_status(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if not update.message:
            return
        status = self.ctx.admission.status()
        cfg = self.ctx.config
        await update.message.reply_text(
            "📊 System Status\n\n"
            f"Active requests: {status.active}/{status.max}\n"
            f"Queued requests: {status.queued}\n"
            f"Pending confirmations: {len(self.ctx.store)}\n"
            f"Audio method: {cfg.audio.processing_method}\n"
            f"Resolver: {self.ctx.resolver.mode} ({cfg.llm.model})"
        )

    async def _on_text(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.message
        user = update.effective_user
        if not message or not user or not message.text:
            return
        if not self.is_allowed(user):
            logger.warning(f"Rejected message from unauthorized user {user.id}")
            await message.reply_text(UNAUTHORIZED_MESSAGE)
            return

        chat = TelegramChatReplier(context.bot, message.chat_id)
        await self.ctx.pipeline.handle_text(str(user.id), message.text, chat)

    async def _on_voice(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.message
        user = update.effective_user
        if not message or not user:
            return
        if not self.is_allowed(user):
            logger.warning(f"Rejected voice message from unauthorized user {user.id}")
            await message.reply_text(UNAUTHORIZED_MESSAGE)
            return

        media = message.voice or message.audio
        if media is None:
            return

        limit_mb = self.ctx.config.audio.max_size_mb
        if media.file_size and media.file_size > limit_mb * 1024 * 1024:
            logger.warning(f"Voice message from {user.id} too large: {media.file_size} bytes")
            await message.reply_text(f"❌ Voice message is too large (max {limit_mb} MB)")
            return

        try:
            file = await media.get_file()
            audio = bytes(await file.download_as_bytearray())
        except Exception as e:
            logger.error(f"Failed to download voice message: {e}")
            await message.reply_text(f"❌ Error: {e}")
            return
        logger.debug(f"Downloaded {len(audio)} bytes of audio from {user.id}")

        chat = TelegramChatReplier(context.bot, message.chat_id)
        mime_type = media.mime_type or self.ctx.config.audio.mime_type
        await self.ctx.pipeline.handle_voice(str(user.id), audio, chat, mime_type)

    async def _on_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        query = update.callback_query
        if query is None:
            return
        result = await self.ctx.lifecycle.handle(query.data, TelegramCallbackReplier(query))
        logger.info(f"Callback {result.action_id or query.data}: {result.outcome.value}")

    async def _on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Log polling / handler errors instead of silently swallowing them."""
        logger.error(f"Telegram error: {context.error}")
