from telegram import Update
from telegram.ext import ContextTypes
from .base_handler import BaseHandler
from ..models.coupon import CouponType
from ..models.product import Currency
from ..services.coupon_service import CouponService
from ..services.download_token_service import DownloadTokenService
from ..services.entitlement_service import EntitlementService
from ..services.order_service import OrderService

class AdminHandler(BaseHandler):
    """هندلر دستورات ادمین"""

    def __init__(self, db, catalog=None):
        super().__init__(db, catalog)
        self.coupon_service = CouponService(db)
        self.order_service = OrderService(db, self.catalog, self.coupon_service)
        self.entitlement_service = EntitlementService(
            self.order_service,
            DownloadTokenService(db, self.catalog),
            self.audit_service
        )

    async def approve_order(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """تایید پرداخت دستی و فعال‌سازی دانلود: /approve <order_id>"""
        if not await self.is_admin(update.effective_user.id):
            await update.message.reply_text("⛔️ شما به این بخش دسترسی ندارید.")
            return

        if not context.args:
            await update.message.reply_text("استفاده: /approve <order_id>")
            return

        order_id = context.args[0].strip()
        fulfilled = await self.entitlement_service.fulfill_order(
            order_id,
            actor_user_id=self.shop_user_id(update),
            source="admin"
        )

        if not fulfilled:
            await update.message.reply_text(f"❌ سفارش {order_id} قابل تایید نیست.")
            return

        order = await self.order_service.get_order(order_id)
        await update.message.reply_text(
            f"✅ پرداخت سفارش {order_id} تایید و دانلودها فعال شد."
        )

        # اطلاع‌رسانی به خریدار در تلگرام
        if order and order.user_id.startswith("tg_"):
            await context.bot.send_message(
                chat_id=int(order.user_id[3:]),
                text=(
                    "✅ پرداخت شما تایید شد!\n\n"
                    f"شماره سفارش: {order_id}\n"
                    "از بخش «دانلودهای من» به فایل‌ها دسترسی دارید."
                )
            )

    async def create_coupon(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """ثبت کوپن: /coupon <code> <percent|fixed> <amount> [USD|EUR]"""
        if not await self.is_admin(update.effective_user.id):
            await update.message.reply_text("⛔️ شما به این بخش دسترسی ندارید.")
            return

        args = context.args or []
        try:
            code = CouponService.normalize_code(args[0])
            coupon_type = CouponType(args[1].lower())
            amount = int(args[2])
            currency = Currency(args[3].upper()) if len(args) > 3 else None
        except (IndexError, ValueError):
            await update.message.reply_text("استفاده: /coupon <code> <percent|fixed> <amount> [USD|EUR]")
            return

        if not code or amount < 0 or (coupon_type == CouponType.PERCENT and amount > 100):
            await update.message.reply_text("❌ مقدار کوپن نامعتبر است.")
            return

        coupon = await self.coupon_service.create_coupon(code, coupon_type, amount, currency)
        _ = await self.audit_service.record(
            action="coupon.create",
            target_type="coupon",
            actor_user_id=self.shop_user_id(update),
            target_id=coupon.coupon_id,
            details={'code': coupon.code, 'type': coupon.type.value, 'amount': coupon.amount}
        )
        await update.message.reply_text(f"✅ کوپن {coupon.code} ثبت شد.")
