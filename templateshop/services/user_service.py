from typing import Optional
from ..models.product import Currency
from ..models.user import User

class UserService:
    def __init__(self, db):
        self.db = db

    @staticmethod
    def telegram_user_id(telegram_id: int) -> str:
        return f"tg_{telegram_id}"

    async def register_user(self, user_id: str, username: Optional[str],
                            first_name: Optional[str], locale: Optional[str] = None) -> bool:
        """ثبت یا بروزرسانی کاربر"""
        async with self.db.pool.acquire() as conn:
            await conn.execute("""
                INSERT INTO users (user_id, username, first_name, locale)
                VALUES ($1, $2, $3, COALESCE($4, 'fa'))
                ON CONFLICT (user_id)
                DO UPDATE SET
                    username = EXCLUDED.username,
                    first_name = EXCLUDED.first_name,
                    updated_at = CURRENT_TIMESTAMP
            """, user_id, username, first_name, locale)
        return True

    async def get_user(self, user_id: str) -> Optional[User]:
        """دریافت اطلاعات کاربر"""
        async with self.db.pool.acquire() as conn:
            row = await conn.fetchrow("""
                SELECT user_id, username, first_name, locale, preferred_currency,
                       created_at, updated_at
                FROM users
                WHERE user_id = $1
            """, user_id)
        return User(**dict(row)) if row else None

    async def set_preferred_currency(self, user_id: str, currency: Currency) -> bool:
        async with self.db.pool.acquire() as conn:
            result = await conn.execute("""
                UPDATE users
                SET preferred_currency = $1,
                    updated_at = CURRENT_TIMESTAMP
                WHERE user_id = $2
            """, currency.value, user_id)
        return result == "UPDATE 1"
