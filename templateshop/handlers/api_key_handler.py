from telegram import Update
from telegram.ext import ContextTypes
from .base_handler import BaseHandler
from ..services.api_key_service import ApiKeyService

class ApiKeyHandler(BaseHandler):
    """مدیریت کلیدهای API از طریق ربات"""

    def __init__(self, db, catalog=None):
        super().__init__(db, catalog)
        self.api_key_service = ApiKeyService(db, self.audit_service)

    async def create_key(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """/apikey [name]"""
        result = await self.api_key_service.create_key(
            self.shop_user_id(update),
            " ".join(context.args or [])
        )
        if not result['success']:
            await update.message.reply_text(f"❌ {result['error']}")
            return

        await update.message.reply_text(
            "🔑 کلید API ساخته شد. این کلید فقط یک بار نمایش داده می‌شود:\n\n"
            f"{result['plain_key']}"
        )

    async def list_keys(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        keys = await self.api_key_service.list_keys(self.shop_user_id(update))
        await update.message.reply_text(self.messages.format_api_keys(keys))

    async def revoke_key(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """/revokekey <id>"""
        if not context.args:
            await update.message.reply_text("استفاده: /revokekey <id>")
            return

        revoked = await self.api_key_service.revoke_key(self.shop_user_id(update), context.args[0])
        await update.message.reply_text("✅ کلید باطل شد." if revoked else "❌ کلید فعالی یافت نشد.")
