import logging
from aiohttp import web
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler
)
from .api import create_app_from_db
from .config import Config
from .database.database import Database
from .handlers import (
    AdminHandler,
    ApiKeyHandler,
    CallbackHandler,
    UserHandler
)
from .services.catalog_service import CatalogService

class DigitalShopBot:
    def __init__(self, db: Database):
        """راه‌اندازی ربات و API"""
        self.db = db
        self.catalog = CatalogService()
        self.logger = logging.getLogger(__name__)
        self.application = Application.builder().token(Config.TELEGRAM_TOKEN).build()
        self.runner = None
        self.setup_handlers()

    def setup_handlers(self):
        """تنظیم هندلرهای ربات"""
        user_handler = UserHandler(self.db, self.catalog)
        admin_handler = AdminHandler(self.db, self.catalog)
        api_key_handler = ApiKeyHandler(self.db, self.catalog)
        callback_handler = CallbackHandler(user_handler)

        # هندلرهای پایه
        self.application.add_handler(CommandHandler("start", user_handler.start))
        self.application.add_handler(CommandHandler("help", user_handler.help))

        # کلیدهای API
        self.application.add_handler(CommandHandler("apikey", api_key_handler.create_key))
        self.application.add_handler(CommandHandler("apikeys", api_key_handler.list_keys))
        self.application.add_handler(CommandHandler("revokekey", api_key_handler.revoke_key))

        # هندلرهای ادمین
        self.application.add_handler(CommandHandler("approve", admin_handler.approve_order))
        self.application.add_handler(CommandHandler("coupon", admin_handler.create_coupon))

        # هندلر عمومی برای callback queries
        self.application.add_handler(CallbackQueryHandler(callback_handler.handle_callback))

    async def start(self):
        """اجرای ربات و سرور API"""
        self.runner = web.AppRunner(create_app_from_db(self.db, self.catalog))
        await self.runner.setup()
        await web.TCPSite(self.runner, Config.API_HOST, Config.API_PORT).start()
        self.logger.info(f"API listening on {Config.API_HOST}:{Config.API_PORT}")

        await self.application.initialize()
        await self.application.start()
        await self.application.updater.start_polling()
        self.logger.info("Bot polling started")

    async def stop(self):
        if self.application.updater and self.application.updater.running:
            await self.application.updater.stop()
        if self.application.running:
            await self.application.stop()
        await self.application.shutdown()
        if self.runner:
            await self.runner.cleanup()
