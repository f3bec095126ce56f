from datetime import datetime
from typing import Optional
from pydantic import BaseModel
from .base import TimeStampedModel

class DownloadToken(TimeStampedModel):
    """Time- and use-bounded download entitlement"""
    token_id: str
    user_id: str
    product_id: str
    expires_at: datetime
    max_uses: int
    used_count: int = 0

    def is_active_at(self, now: datetime) -> bool:
        """Not expired and not exhausted"""
        return self.expires_at > now and self.used_count < self.max_uses

class DownloadTokenView(BaseModel):
    """Token as listed to its owner"""
    id: str
    product_id: str
    product_slug: Optional[str] = None
    product_title: Optional[str] = None
    expires_at: datetime
    max_uses: int
    used_count: int
    is_active: bool

    @classmethod
    def from_token(cls, token: DownloadToken, now: datetime,
                   slug: Optional[str] = None, title: Optional[str] = None) -> "DownloadTokenView":
        return cls(
            id=token.token_id,
            product_id=token.product_id,
            product_slug=slug,
            product_title=title,
            expires_at=token.expires_at,
            max_uses=token.max_uses,
            used_count=token.used_count,
            is_active=token.is_active_at(now)
        )
