import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional
from ..models.download_token import DownloadToken
from ..models.order import OrderStatus

TOKEN_LIFETIME = timedelta(days=30)
TOKEN_MAX_USES = 10
RECENT_TOKEN_WINDOW = 5

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class EntitlementService:
    """صدور توکن دانلود برای سفارش‌های تکمیل شده"""

    def __init__(self, order_service, token_service, audit_service=None,
                 clock: Callable[[], datetime] = utcnow):
        self.order_service = order_service
        self.token_service = token_service
        self.audit_service = audit_service
        self.clock = clock
        self.logger = logging.getLogger(__name__)

    async def grant_tokens(self, order_id: str) -> List[DownloadToken]:
        """Issue one token per distinct product unless an active one exists.

        A missing order is a no-op: the caller only gets here after a payment
        confirmation, so absence means the event was raced or already handled.
        Store errors propagate to the caller.
        """
        order = await self.order_service.get_order(order_id)
        if not order:
            self.logger.debug(f"Order {order_id} not found, nothing to grant")
            return []

        now = self.clock()
        expires_at = now + TOKEN_LIFETIME
        created = []

        for product_id in order.product_ids:
            async with self.token_service.serialized(order.user_id, product_id) as conn:
                recent = await self.token_service.get_recent_tokens(
                    order.user_id,
                    product_id,
                    now,
                    limit=RECENT_TOKEN_WINDOW,
                    conn=conn
                )
                if any(token.is_active_at(now) for token in recent):
                    continue

                token = await self.token_service.create_token(
                    order.user_id,
                    product_id,
                    expires_at,
                    TOKEN_MAX_USES,
                    conn=conn
                )
                created.append(token)

        if created:
            self.logger.info(
                f"Granted {len(created)} download token(s) for order {order_id}"
            )
        return created

    async def fulfill_order(self, order_id: str, actor_user_id: Optional[str] = None,
                            source: str = "webhook") -> bool:
        """علامت‌گذاری پرداخت، صدور توکن و ثبت ممیزی"""
        order = await self.order_service.get_order(order_id)
        if not order:
            self.logger.warning(f"Fulfillment requested for unknown order {order_id}")
            return False

        if order.status == OrderStatus.PENDING:
            await self.order_service.mark_paid(order_id)
        elif order.status != OrderStatus.PAID:
            self.logger.warning(f"Order {order_id} is {order.status.value}, not fulfilling")
            return False

        tokens = await self.grant_tokens(order_id)

        if self.audit_service:
            _ = await self.audit_service.record(
                action="order.fulfill",
                target_type="order",
                actor_user_id=actor_user_id,
                target_id=order_id,
                details={
                    'source': source,
                    'granted_tokens': [t.token_id for t in tokens]
                }
            )
        return True
