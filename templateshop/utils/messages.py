from typing import List
from ..models.api_key import ApiKey
from ..models.download_token import DownloadTokenView
from ..models.order import Order, OrderStatus
from ..models.product import Currency, LicenseType, Product
from .formatters import format_datetime, format_money, price_label

class Messages:
    @staticmethod
    def format_product(product: Product, currency: Currency, locale: str = "fa") -> str:
        """قالب‌بندی اطلاعات محصول"""
        kind = "باندل" if product.is_bundle else "قالب"
        return (
            f"🏷 {product.title} ({kind})\n"
            f"📝 {product.summary}\n"
            f"🧰 {', '.join(product.tech)}\n"
            f"{'↔️ پشتیبانی از راست‌چین' if product.rtl else ''}\n"
            f"💰 لایسنس شخصی: {price_label(product, LicenseType.PERSONAL, currency, locale)}\n"
            f"💼 لایسنس تجاری: {price_label(product, LicenseType.COMMERCIAL, currency, locale)}\n"
        )

    @staticmethod
    def format_order(order: Order, locale: str = "fa") -> str:
        """قالب‌بندی اطلاعات سفارش"""
        status_emoji = {
            OrderStatus.PENDING: "⏳",
            OrderStatus.PAID: "✅",
            OrderStatus.FAILED: "❌",
            OrderStatus.REFUNDED: "↩️"
        }

        lines = [
            f"🛍 سفارش {order.order_id}",
            f"💰 مبلغ کل: {format_money(order.total_amount, order.currency, locale)}",
            f"📊 وضعیت: {status_emoji[order.status]} {order.status.value}",
        ]
        if order.discount:
            discount = format_money(order.discount, order.currency, locale)
            lines.insert(2, f"🎟 تخفیف {order.coupon_code or ''}: {discount}")
        for item in order.items:
            lines.append(
                f"- {item.product_title or item.product_id} ({item.license_type.value}): "
                f"{format_money(item.price_per_unit, order.currency, locale)}"
            )
        if order.created_at:
            lines.append(f"🕒 تاریخ: {format_datetime(order.created_at)}")
        return "\n".join(lines)

    @staticmethod
    def format_downloads(items: List[DownloadTokenView]) -> str:
        """فهرست دسترسی‌های دانلود"""
        if not items:
            return "شما هنوز دسترسی دانلودی ندارید."

        lines = ["📥 دانلودهای شما:\n"]
        for item in items:
            mark = "🟢" if item.is_active else "⚪️"
            lines.append(
                f"{mark} {item.product_title or item.product_id}\n"
                f"   استفاده: {item.used_count}/{item.max_uses} | "
                f"انقضا: {format_datetime(item.expires_at)}"
            )
        return "\n".join(lines)

    @staticmethod
    def format_api_keys(keys: List[ApiKey]) -> str:
        if not keys:
            return "هیچ کلید API ثبت نشده است."

        lines = ["🔑 کلیدهای API:\n"]
        for key in keys:
            state = "فعال" if key.is_active else "باطل شده"
            lines.append(f"- {key.name}: {key.key_prefix}… ({state})\n  id: {key.key_id}")
        return "\n".join(lines)

    @staticmethod
    def order_created(order: Order, locale: str = "fa") -> str:
        return (
            "✅ سفارش شما ثبت شد و در انتظار پرداخت است.\n\n"
            f"{Messages.format_order(order, locale)}\n\n"
            "پس از تایید پرداخت، دسترسی دانلود فعال می‌شود."
        )
