import asyncpg
import logging
from pathlib import Path
from typing import Optional

class Database:
    """مدیریت ارتباط با دیتابیس"""

    def __init__(self, dsn: str, min_size: int = 2, max_size: int = 10):
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self.pool: Optional[asyncpg.Pool] = None
        self.logger = logging.getLogger(__name__)

    async def connect(self):
        """برقراری ارتباط با دیتابیس"""
        try:
            self.pool = await asyncpg.create_pool(
                self.dsn,
                min_size=self.min_size,
                max_size=self.max_size
            )

            await self._run_migrations()

            self.logger.info("Database pool ready")
        except Exception as e:
            self.logger.error(f"Database connection failed: {e}")
            raise

    async def close(self):
        """قطع ارتباط با دیتابیس"""
        if self.pool:
            await self.pool.close()
            self.pool = None
            self.logger.info("Database pool closed")

    async def _run_migrations(self):
        """اجرای migrations"""
        migrations_path = Path(__file__).parent / "migrations"

        async with self.pool.acquire() as conn:
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS migrations (
                    id SERIAL PRIMARY KEY,
                    name VARCHAR(255) NOT NULL,
                    applied_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP
                )
            """)

            for migration_file in sorted(migrations_path.glob("*.sql")):
                migration_name = migration_file.name

                is_applied = await conn.fetchval(
                    "SELECT COUNT(*) FROM migrations WHERE name = $1",
                    migration_name
                )
                if is_applied:
                    continue

                async with conn.transaction():
                    await conn.execute(migration_file.read_text(encoding="utf-8"))
                    await conn.execute(
                        "INSERT INTO migrations (name) VALUES ($1)",
                        migration_name
                    )

                self.logger.info(f"Migration {migration_name} applied")
