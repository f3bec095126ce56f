from datetime import datetime
import pytz
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import List, Union
from ..config import Config
from ..models.product import Currency, LicenseType, Product
from .pricing import price_for

DEFAULT_FORMAT_LOCALE = "en-US"

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
}

PERSIAN_DIGITS = str.maketrans("0123456789", "۰۱۲۳۴۵۶۷۸۹")

# قواعد نمایش مبلغ برای هر زبان
LOCALE_FORMATS = {
    "en-US": {"group": ",", "pattern": "{sign}{symbol}{amount}", "digits": None},
    "en": {"group": ",", "pattern": "{sign}{symbol}{amount}", "digits": None},
    "fa-IR": {"group": "٬", "pattern": "\u200e{sign}{symbol}{amount}", "digits": PERSIAN_DIGITS},
    "fa": {"group": "٬", "pattern": "\u200e{sign}{symbol}{amount}", "digits": PERSIAN_DIGITS},
    "de-DE": {"group": ".", "pattern": "{sign}{amount} {symbol}", "digits": None},
}

def locale_candidates(locale: str) -> List[str]:
    """زنجیره زبان‌های جایگزین"""
    normalized = (locale or "").strip().lower()
    if normalized == "fa":
        return ["fa-IR", "fa", "en-US"]
    if normalized == "en":
        return ["en-US", "en"]
    return [(locale or "").strip(), "en-US"]

def resolve_locale(locale: str) -> str:
    """انتخاب اولین زبان پشتیبانی شده"""
    for candidate in locale_candidates(locale):
        if candidate in LOCALE_FORMATS:
            return candidate
    return DEFAULT_FORMAT_LOCALE

def format_money(amount: Union[Decimal, int, float], currency: Union[Currency, str],
                 locale: str = "en") -> str:
    """قالب‌بندی مبلغ به صورت ارز محلی بدون اعشار"""
    rules = LOCALE_FORMATS[resolve_locale(locale)]
    code = getattr(currency, "value", currency)
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")

    try:
        value = Decimal(str(amount)).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        value = Decimal(0)
    if not value.is_finite():
        value = Decimal(0)

    grouped = f"{abs(value):,.0f}".replace(",", rules["group"])
    if rules["digits"]:
        grouped = grouped.translate(rules["digits"])

    return rules["pattern"].format(
        sign="-" if value < 0 else "",
        symbol=symbol,
        amount=grouped
    )

def price_label(product: Product, license_type: LicenseType, currency: Currency,
                locale: str = "en") -> str:
    """برچسب قیمت محصول"""
    return format_money(price_for(product, license_type, currency), currency, locale)

def format_datetime(dt: datetime) -> str:
    """قالب‌بندی تاریخ و زمان"""
    local_tz = pytz.timezone(Config.TIMEZONE)
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    return dt.astimezone(local_tz).strftime("%Y-%m-%d %H:%M")
