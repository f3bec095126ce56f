from typing import List
from telegram import InlineKeyboardButton, InlineKeyboardMarkup
from ..models.product import Currency, LicenseType, Product

class Keyboards:
    @staticmethod
    def main_menu() -> InlineKeyboardMarkup:
        """کیبورد منوی اصلی"""
        keyboard = [
            [InlineKeyboardButton("🛍 قالب‌ها و باندل‌ها", callback_data="catalog")],
            [InlineKeyboardButton("📥 دانلودهای من", callback_data="downloads"),
             InlineKeyboardButton("📝 سفارش‌های من", callback_data="orders")],
            [InlineKeyboardButton("💱 تغییر ارز", callback_data="currency_menu")]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def product_list(products: List[Product]) -> InlineKeyboardMarkup:
        """کیبورد فهرست محصولات"""
        keyboard = [
            [InlineKeyboardButton(p.title, callback_data=f"product_{p.product_id}")]
            for p in products
        ]
        keyboard.append([InlineKeyboardButton("🏠 منوی اصلی", callback_data="main_menu")])
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def product_menu(product_id: str) -> InlineKeyboardMarkup:
        """کیبورد انتخاب لایسنس"""
        keyboard = [
            [InlineKeyboardButton(
                "🛒 خرید لایسنس شخصی",
                callback_data=f"buy_{product_id}_{LicenseType.PERSONAL.value}"
            )],
            [InlineKeyboardButton(
                "💼 خرید لایسنس تجاری",
                callback_data=f"buy_{product_id}_{LicenseType.COMMERCIAL.value}"
            )],
            [InlineKeyboardButton("⬅️ بازگشت", callback_data="catalog"),
             InlineKeyboardButton("🏠 منوی اصلی", callback_data="main_menu")]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def currency_menu() -> InlineKeyboardMarkup:
        keyboard = [[
            InlineKeyboardButton(c.value, callback_data=f"currency_{c.value}")
            for c in Currency
        ]]
        return InlineKeyboardMarkup(keyboard)
