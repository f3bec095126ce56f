import logging
from typing import Any, Dict, List, Optional
from pydantic import ValidationError
from ..models.api_key import ApiKey
from ..utils.security import generate_api_key, get_api_key_prefix, hash_api_key
from ..utils.validators import ApiKeyCreateRequest

KEY_COLUMNS = """
    key_id::text AS key_id, user_id, name, key_prefix, is_active,
    last_used_at, revoked_at, created_at
"""

class ApiKeyService:
    """مدیریت کلیدهای API کاربران"""

    def __init__(self, db, audit_service=None):
        self.db = db
        self.audit_service = audit_service
        self.logger = logging.getLogger(__name__)

    async def create_key(self, user_id: str, name: Optional[str] = None) -> Dict[str, Any]:
        """ساخت کلید جدید؛ متن کامل کلید فقط یک بار برگردانده می‌شود"""
        try:
            key_name = ApiKeyCreateRequest(name=name).name
        except ValidationError:
            return {
                'success': False,
                'error': 'Key name is too long.'
            }

        plain_key = generate_api_key()
        async with self.db.pool.acquire() as conn:
            row = await conn.fetchrow(f"""
                INSERT INTO api_keys (user_id, name, key_prefix, key_hash)
                VALUES ($1, $2, $3, $4)
                RETURNING {KEY_COLUMNS}
            """, user_id, key_name, get_api_key_prefix(plain_key), hash_api_key(plain_key))

        key = ApiKey(**dict(row))
        if self.audit_service:
            _ = await self.audit_service.record(
                action="api_key.create",
                target_type="api_key",
                actor_user_id=user_id,
                target_id=key.key_id,
                details={'key_prefix': key.key_prefix, 'name': key.name}
            )

        return {
            'success': True,
            'plain_key': plain_key,
            'key': key
        }

    async def list_keys(self, user_id: str) -> List[ApiKey]:
        async with self.db.pool.acquire() as conn:
            rows = await conn.fetch(f"""
                SELECT {KEY_COLUMNS}
                FROM api_keys
                WHERE user_id = $1
                ORDER BY created_at DESC
            """, user_id)
        return [ApiKey(**dict(row)) for row in rows]

    async def revoke_key(self, user_id: str, key_id: str) -> bool:
        """غیرفعال کردن کلید"""
        async with self.db.pool.acquire() as conn:
            result = await conn.execute("""
                UPDATE api_keys
                SET is_active = false,
                    revoked_at = CURRENT_TIMESTAMP
                WHERE key_id::text = $1 AND user_id = $2 AND is_active = true
            """, key_id, user_id)

        revoked = result == "UPDATE 1"
        if revoked and self.audit_service:
            _ = await self.audit_service.record(
                action="api_key.revoke",
                target_type="api_key",
                actor_user_id=user_id,
                target_id=key_id
            )
        return revoked

    async def resolve_user(self, plain_key: Optional[str]) -> Optional[str]:
        """یافتن کاربر صاحب کلید فعال"""
        if not plain_key:
            return None

        async with self.db.pool.acquire() as conn:
            row = await conn.fetchrow("""
                UPDATE api_keys
                SET last_used_at = CURRENT_TIMESTAMP
                WHERE key_hash = $1 AND is_active = true
                RETURNING user_id
            """, hash_api_key(plain_key))
        return row['user_id'] if row else None
