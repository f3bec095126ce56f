from typing import Optional
from telegram import InlineKeyboardMarkup, Update
from ..config import Config
from ..services.audit_service import AuditService
from ..services.catalog_service import CatalogService
from ..services.user_service import UserService
from ..utils.keyboards import Keyboards
from ..utils.messages import Messages

class BaseHandler:
    """کلاس پایه برای هندلرها"""
    def __init__(self, db, catalog: Optional[CatalogService] = None):
        self.db = db
        self.catalog = catalog or CatalogService()
        self.audit_service = AuditService(db)
        self.user_service = UserService(db)
        self.keyboards = Keyboards()
        self.messages = Messages()

    @staticmethod
    async def reply(update: Update, text: str, markup: Optional[InlineKeyboardMarkup] = None):
        """پاسخ به پیام یا ویرایش پیام callback"""
        query = update.callback_query
        if query:
            await query.answer()
            await query.edit_message_text(text, reply_markup=markup)
        else:
            await update.message.reply_text(text, reply_markup=markup)

    def shop_user_id(self, update: Update) -> str:
        return self.user_service.telegram_user_id(update.effective_user.id)

    async def is_admin(self, user_id: int) -> bool:
        """بررسی دسترسی ادمین"""
        return user_id in Config.ADMIN_IDS
