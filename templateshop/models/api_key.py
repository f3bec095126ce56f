from datetime import datetime
from typing import Optional
from .base import TimeStampedModel

class ApiKey(TimeStampedModel):
    """Stored API key; the plaintext is never kept"""
    key_id: str
    user_id: str
    name: str
    key_prefix: str
    is_active: bool = True
    last_used_at: Optional[datetime] = None
    revoked_at: Optional[datetime] = None
