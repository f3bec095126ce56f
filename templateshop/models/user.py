from typing import Optional
from .base import TimeStampedModel
from .product import Currency

class User(TimeStampedModel):
    """Shop customer; chat users are keyed as tg_<telegram id>"""
    user_id: str
    username: Optional[str] = None
    first_name: Optional[str] = None
    locale: str = "fa"
    preferred_currency: Currency = Currency.USD
