from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP
from typing import List, Union
from ..models.coupon import Coupon, CouponType
from ..models.product import BASE_CURRENCY, Currency, LicenseType, Product

# ثابت تبدیل دلار به یورو
EUR_RATE = Decimal("0.92")

RATES = {
    Currency.USD: Decimal(1),
    Currency.EUR: EUR_RATE,
}

def round_amount(amount: Decimal) -> Decimal:
    return amount.quantize(Decimal(1), rounding=ROUND_HALF_UP)

def convert_from_usd(amount: Union[Decimal, int], currency: Currency) -> Decimal:
    """تبدیل مبلغ دلاری به ارز مقصد، گرد شده به واحد کامل"""
    amount = Decimal(amount)
    if currency == BASE_CURRENCY:
        return amount
    return round_amount(amount * RATES[currency])

def price_for(product: Product, license_type: LicenseType, currency: Currency) -> Decimal:
    """قیمت محصول برای نوع لایسنس و ارز"""
    usd_price = product.base_price_usd.for_license(license_type)
    if currency == BASE_CURRENCY:
        return usd_price
    return convert_from_usd(usd_price, currency)

def convert_fixed_discount(amount: Union[Decimal, int], from_currency: Currency,
                           to_currency: Currency) -> Decimal:
    """تبدیل تخفیف ثابت بین ارزها، حداقل یک واحد"""
    amount = Decimal(amount)
    if from_currency == to_currency:
        return amount
    converted = amount * RATES[to_currency] / RATES[from_currency]
    return max(Decimal(1), round_amount(converted))

def coupon_discount(subtotal: Decimal, coupon: Coupon, currency: Currency) -> Decimal:
    """مبلغ تخفیف کوپن برای جمع سبد"""
    if coupon.type == CouponType.PERCENT:
        return max(Decimal(0), round_amount(subtotal * coupon.amount / 100))
    source = coupon.currency or BASE_CURRENCY
    return max(Decimal(0), convert_fixed_discount(coupon.amount, source, currency))

def distribute_discount(amounts: List[Decimal], discount: Decimal) -> List[Decimal]:
    """پخش تخفیف بین آیتم‌ها به نسبت قیمت؛ باقیمانده به بیشترین کسر"""
    subtotal = sum(amounts, Decimal(0))
    if discount <= 0 or subtotal <= 0:
        return list(amounts)

    allocations = []
    for index, amount in enumerate(amounts):
        raw = amount * discount / subtotal
        base = raw.to_integral_value(rounding=ROUND_FLOOR)
        allocations.append([index, base, raw - base])

    remaining = max(Decimal(0), discount - sum(a[1] for a in allocations))
    allocations.sort(key=lambda a: a[2], reverse=True)
    cursor = 0
    while remaining > 0:
        allocations[cursor][1] += 1
        remaining -= 1
        cursor = (cursor + 1) % len(allocations)

    shares = {index: share for index, share, _ in allocations}
    return [max(Decimal(0), amount - shares[i]) for i, amount in enumerate(amounts)]
