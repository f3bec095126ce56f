from telegram import Update
from telegram.ext import ContextTypes
from .base_handler import BaseHandler
from ..config import Config
from ..models.product import BASE_CURRENCY, Currency, LicenseType
from ..services.download_token_service import DownloadTokenService
from ..services.order_service import OrderService

class UserHandler(BaseHandler):
    """هندلر دستورات کاربر عادی"""
    def __init__(self, db, catalog=None):
        super().__init__(db, catalog)
        self.order_service = OrderService(db, self.catalog)
        self.token_service = DownloadTokenService(db, self.catalog)

    async def _preferences(self, user_id: str):
        user = await self.user_service.get_user(user_id)
        if not user:
            return Config.DEFAULT_LOCALE, BASE_CURRENCY
        return user.locale, user.preferred_currency

    async def start(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """هندلر دستور /start"""
        user = update.effective_user

        await self.user_service.register_user(
            user_id=self.shop_user_id(update),
            username=user.username,
            first_name=user.first_name,
            locale="en" if (user.language_code or "").startswith("en") else Config.DEFAULT_LOCALE
        )

        await update.message.reply_text(
            f"سلام {user.first_name} عزیز! 👋\n\n"
            "به فروشگاه قالب‌های دیجیتال خوش آمدید.\n"
            "برای مشاهده قالب‌ها از منوی زیر استفاده کنید.",
            reply_markup=self.keyboards.main_menu()
        )

    async def help(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """هندلر دستور /help"""
        await update.message.reply_text(
            "/start - منوی اصلی\n"
            "/apikey [نام] - ساخت کلید API\n"
            "/apikeys - فهرست کلیدها\n"
            "/revokekey <id> - ابطال کلید"
        )

    async def show_main_menu(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        await self.reply(update, "🏠 منوی اصلی", self.keyboards.main_menu())

    async def show_catalog(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """نمایش فهرست قالب‌ها"""
        products = await self.catalog.filter_products(sort="popular")
        if not products:
            await self.reply(update, "در حال حاضر محصولی موجود نیست.", self.keyboards.main_menu())
            return
        await self.reply(update, "📦 قالب‌ها و باندل‌ها:", self.keyboards.product_list(products))

    async def show_product(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """نمایش جزئیات محصول"""
        product_id = update.callback_query.data.split('_', 1)[1]
        product = await self.catalog.get_product_by_id(product_id)

        if not product:
            await self.reply(update, "❌ محصول مورد نظر یافت نشد.", self.keyboards.main_menu())
            return

        locale, currency = await self._preferences(self.shop_user_id(update))
        await self.reply(
            update,
            self.messages.format_product(product, currency, locale),
            self.keyboards.product_menu(product.product_id)
        )

    async def buy_product(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """ثبت سفارش برای لایسنس انتخاب شده"""
        try:
            product_id, license_value = update.callback_query.data[len('buy_'):].rsplit('_', 1)
            license_type = LicenseType(license_value)
        except ValueError:
            await self.reply(update, "❌ درخواست نامعتبر است.")
            return

        user_id = self.shop_user_id(update)
        locale, currency = await self._preferences(user_id)

        order = await self.order_service.build_order(user_id, product_id, currency, license_type)
        if not order:
            await self.reply(update, "❌ محصول مورد نظر یافت نشد.", self.keyboards.main_menu())
            return

        await self.order_service.create_order(order)
        _ = await self.audit_service.record(
            action="checkout.create",
            target_type="order",
            actor_user_id=user_id,
            target_id=order.order_id,
            details={'product_id': product_id, 'license_type': license_type.value}
        )
        await self.reply(update, self.messages.order_created(order, locale), self.keyboards.main_menu())

    async def show_downloads(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """نمایش دسترسی‌های دانلود"""
        items = await self.token_service.list_user_downloads(self.shop_user_id(update))
        await self.reply(update, self.messages.format_downloads(items), self.keyboards.main_menu())

    async def show_orders(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """نمایش سوابق خرید"""
        user_id = self.shop_user_id(update)
        locale, _ = await self._preferences(user_id)
        orders = await self.order_service.get_user_orders(user_id)

        if not orders:
            message = "شما هنوز خریدی انجام نداده‌اید."
        else:
            message = "📝 سوابق خرید شما:\n\n" + "\n\n".join(
                self.messages.format_order(order, locale) for order in orders
            )
        await self.reply(update, message, self.keyboards.main_menu())

    async def show_currency_menu(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        await self.reply(update, "💱 ارز نمایش قیمت را انتخاب کنید:", self.keyboards.currency_menu())

    async def set_currency(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """ذخیره ارز انتخابی کاربر"""
        try:
            currency = Currency(update.callback_query.data.split('_', 1)[1])
        except ValueError:
            await self.reply(update, "❌ ارز نامعتبر است.")
            return

        await self.user_service.set_preferred_currency(self.shop_user_id(update), currency)
        await self.reply(update, f"✅ ارز نمایش: {currency.value}", self.keyboards.main_menu())
