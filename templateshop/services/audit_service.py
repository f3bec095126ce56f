import json
import logging
from typing import Any, Dict, Optional
from ..config import Config

class AuditService:
    """ثبت رویدادهای ممیزی

    ثبت ممیزی نباید عملیات اصلی را متوقف کند؛ خطای ذخیره‌سازی به صورت
    نتیجه برگردانده می‌شود و فراخواننده آن را نادیده می‌گیرد.
    """

    def __init__(self, db):
        self.db = db
        self.logger = logging.getLogger(__name__)

    async def record(self, action: str, target_type: str,
                     actor_user_id: Optional[str] = None,
                     target_id: Optional[str] = None,
                     details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """ثبت یک رویداد ممیزی"""
        try:
            async with self.db.pool.acquire() as conn:
                await conn.execute("""
                    INSERT INTO audit_events (
                        actor_user_id, action, target_type, target_id, details
                    ) VALUES ($1, $2, $3, $4, $5::jsonb)
                """,
                    actor_user_id,
                    action,
                    target_type,
                    target_id,
                    json.dumps(details, default=str) if details is not None else None
                )
            return {'success': True}

        except Exception as e:
            if not Config.is_production():
                self.logger.warning(f"[audit] failed to persist {action}: {e}")
            return {
                'success': False,
                'error': str(e)
            }
