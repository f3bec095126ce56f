from telegram import Update
from telegram.ext import ContextTypes
from .user_handlers import UserHandler

class CallbackHandler:
    """پردازش callback queries"""

    def __init__(self, user_handler: UserHandler):
        self.user_handler = user_handler

    async def handle_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """راهنمایی callback‌ها به هندلر مناسب"""
        query = update.callback_query
        data = query.data or ""
        handler = self.user_handler

        if data == "main_menu":
            await handler.show_main_menu(update, context)
        elif data == "catalog":
            await handler.show_catalog(update, context)
        elif data.startswith("product_"):
            await handler.show_product(update, context)
        elif data.startswith("buy_"):
            await handler.buy_product(update, context)
        elif data == "downloads":
            await handler.show_downloads(update, context)
        elif data == "orders":
            await handler.show_orders(update, context)
        elif data == "currency_menu":
            await handler.show_currency_menu(update, context)
        elif data.startswith("currency_"):
            await handler.set_currency(update, context)
        else:
            await query.answer("⚠️ دستور نامعتبر")
