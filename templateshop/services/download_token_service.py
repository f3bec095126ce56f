from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional
from ..models.download_token import DownloadToken, DownloadTokenView

TOKEN_COLUMNS = """
    token_id::text AS token_id, user_id, product_id, expires_at,
    max_uses, used_count, created_at
"""

class DownloadTokenService:
    """دسترسی به توکن‌های دانلود"""

    def __init__(self, db, catalog=None):
        self.db = db
        self.catalog = catalog

    @asynccontextmanager
    async def _connection(self, conn=None):
        if conn is not None:
            yield conn
        else:
            async with self.db.pool.acquire() as acquired:
                yield acquired

    @asynccontextmanager
    async def serialized(self, user_id: str, product_id: str):
        """تراکنش با قفل مشورتی روی (کاربر، محصول)"""
        async with self.db.pool.acquire() as conn:
            async with conn.transaction():
                await conn.execute(
                    "SELECT pg_advisory_xact_lock(hashtextextended($1, 0))",
                    f"{user_id}:{product_id}"
                )
                yield conn

    async def get_recent_tokens(self, user_id: str, product_id: str, now: datetime,
                                limit: int = 5, conn=None) -> List[DownloadToken]:
        """توکن‌های منقضی نشده، جدیدترین اول"""
        async with self._connection(conn) as c:
            rows = await c.fetch(f"""
                SELECT {TOKEN_COLUMNS}
                FROM download_tokens
                WHERE user_id = $1 AND product_id = $2 AND expires_at > $3
                ORDER BY created_at DESC
                LIMIT $4
            """, user_id, product_id, now, limit)
        return [DownloadToken(**dict(row)) for row in rows]

    async def create_token(self, user_id: str, product_id: str, expires_at: datetime,
                           max_uses: int, conn=None) -> DownloadToken:
        """ایجاد توکن دانلود جدید"""
        async with self._connection(conn) as c:
            row = await c.fetchrow(f"""
                INSERT INTO download_tokens (
                    user_id, product_id, expires_at, max_uses, used_count
                ) VALUES ($1, $2, $3, $4, 0)
                RETURNING {TOKEN_COLUMNS}
            """, user_id, product_id, expires_at, max_uses)
        return DownloadToken(**dict(row))

    async def get_user_tokens(self, user_id: str) -> List[DownloadToken]:
        async with self.db.pool.acquire() as conn:
            rows = await conn.fetch(f"""
                SELECT {TOKEN_COLUMNS}
                FROM download_tokens
                WHERE user_id = $1
                ORDER BY created_at DESC
            """, user_id)
        return [DownloadToken(**dict(row)) for row in rows]

    async def list_user_downloads(self, user_id: str,
                                  now: Optional[datetime] = None) -> List[DownloadTokenView]:
        """فهرست دانلودهای کاربر با وضعیت فعال بودن"""
        now = now or datetime.now(timezone.utc)
        views = []
        for token in await self.get_user_tokens(user_id):
            product = None
            if self.catalog:
                product = await self.catalog.get_product_by_id(token.product_id)
            views.append(DownloadTokenView.from_token(
                token,
                now,
                slug=product.slug if product else None,
                title=product.title if product else None
            ))
        return views
