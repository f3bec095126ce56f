import logging
from decimal import Decimal, InvalidOperation
from typing import Optional
from aiohttp import web
from pydantic import ValidationError
from .models.product import BASE_CURRENCY, Currency, LicenseType
from .services.api_key_service import ApiKeyService
from .services.audit_service import AuditService
from .services.catalog_service import CatalogService
from .services.download_token_service import DownloadTokenService
from .services.entitlement_service import EntitlementService
from .services.order_service import OrderService
from .utils.pricing import price_for
from .utils.security import verify_signature
from .utils.validators import CheckoutRequest, PaymentWebhook

logger = logging.getLogger(__name__)

CATALOG = web.AppKey("catalog", CatalogService)
ORDERS = web.AppKey("order_service", OrderService)
TOKENS = web.AppKey("token_service", DownloadTokenService)
API_KEYS = web.AppKey("api_key_service", ApiKeyService)
ENTITLEMENTS = web.AppKey("entitlement_service", EntitlementService)
AUDIT = web.AppKey("audit_service", AuditService)

SIGNATURE_HEADER = "X-Signature"

def error_response(message: str, status: int) -> web.Response:
    return web.json_response({"ok": False, "message": message}, status=status)

def extract_api_key(request: web.Request) -> Optional[str]:
    """کلید از X-API-Key یا Authorization: Bearer"""
    header_key = request.headers.get("X-API-Key", "").strip()
    if header_key:
        return header_key

    auth_header = request.headers.get("Authorization", "").strip()
    if auth_header.lower().startswith("bearer "):
        token = auth_header[7:].strip()
        if token:
            return token
    return None

async def authenticate(request: web.Request) -> Optional[str]:
    return await request.app[API_KEYS].resolve_user(extract_api_key(request))

@web.middleware
async def error_middleware(request: web.Request, handler):
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unhandled error on {request.method} {request.path}: {e}", exc_info=True)
        return error_response("Unexpected server error.", 500)

def _decimal_param(value: Optional[str]) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        amount = Decimal(value)
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None

def _json_amount(amount: Decimal):
    """مبلغ بدون از دست رفتن اعشار در JSON"""
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)

async def health(request: web.Request) -> web.Response:
    return web.json_response({"ok": True})

async def list_products(request: web.Request) -> web.Response:
    """فهرست محصولات با قیمت در ارز درخواستی"""
    params = request.query
    try:
        currency = Currency(params.get("currency", BASE_CURRENCY.value).upper())
        license_type = LicenseType(params.get("license", LicenseType.PERSONAL.value))
    except ValueError:
        return error_response("Invalid currency or license.", 400)

    products = await request.app[CATALOG].filter_products(
        search=params.get("search"),
        category=params.get("category"),
        tech=params.get("tech"),
        rtl=params.get("rtl"),
        type_=params.get("type"),
        license_type=license_type,
        currency=currency,
        min_price=_decimal_param(params.get("min")),
        max_price=_decimal_param(params.get("max")),
        sort=params.get("sort", "new")
    )

    items = []
    for product in products:
        item = product.model_dump(mode="json")
        item["price"] = {
            "currency": currency.value,
            "personal": _json_amount(price_for(product, LicenseType.PERSONAL, currency)),
            "commercial": _json_amount(price_for(product, LicenseType.COMMERCIAL, currency)),
        }
        items.append(item)

    return web.json_response({"ok": True, "count": len(items), "items": items})

async def my_downloads(request: web.Request) -> web.Response:
    """فهرست توکن‌های دانلود کاربر"""
    user_id = await authenticate(request)
    if not user_id:
        return error_response("Unauthorized", 401)

    items = await request.app[TOKENS].list_user_downloads(user_id)
    return web.json_response({
        "ok": True,
        "count": len(items),
        "items": [item.model_dump(mode="json") for item in items]
    })

async def checkout(request: web.Request) -> web.Response:
    """ثبت سفارش در انتظار پرداخت"""
    user_id = await authenticate(request)
    if not user_id:
        return error_response("Unauthorized", 401)

    try:
        payload = CheckoutRequest.model_validate_json(await request.read())
    except ValidationError:
        return error_response("Invalid checkout request.", 400)

    orders = request.app[ORDERS]
    result = await orders.build_cart_order(
        user_id,
        payload.items,
        payload.currency,
        payload.coupon_code
    )
    if not result['success']:
        status = 404 if result['reason'] == 'not_found' else 400
        return error_response(result['error'], status)

    order = result['order']
    await orders.create_order(order)
    _ = await request.app[AUDIT].record(
        action="checkout.create",
        target_type="order",
        actor_user_id=user_id,
        target_id=order.order_id,
        details={
            'items': [
                {'product_id': item.product_id, 'license_type': item.license_type.value}
                for item in order.items
            ],
            'currency': order.currency.value,
            'coupon_code': order.coupon_code,
            'discount': str(order.discount)
        }
    )

    return web.json_response(
        {"ok": True, "order": order.model_dump(mode="json")},
        status=201
    )

async def payment_webhook(request: web.Request) -> web.Response:
    """اعلان پرداخت موفق و فعال‌سازی دانلود"""
    body = await request.read()
    if not verify_signature(body, request.headers.get(SIGNATURE_HEADER)):
        return error_response("Invalid signature.", 401)

    try:
        event = PaymentWebhook.model_validate_json(body)
    except ValidationError:
        return error_response("Invalid webhook payload.", 400)

    fulfilled = False
    if event.status == "succeeded":
        fulfilled = await request.app[ENTITLEMENTS].fulfill_order(event.order_id, source="webhook")
    else:
        logger.info(f"Ignoring payment event {event.status} for {event.order_id}")

    return web.json_response({"ok": True, "fulfilled": fulfilled})

def create_app(catalog, order_service, token_service, api_key_service,
               entitlement_service, audit_service) -> web.Application:
    app = web.Application(middlewares=[error_middleware])
    app[CATALOG] = catalog
    app[ORDERS] = order_service
    app[TOKENS] = token_service
    app[API_KEYS] = api_key_service
    app[ENTITLEMENTS] = entitlement_service
    app[AUDIT] = audit_service

    app.router.add_get("/api/health", health)
    app.router.add_get("/api/products", list_products)
    app.router.add_get("/api/me/downloads", my_downloads)
    app.router.add_post("/api/checkout", checkout)
    app.router.add_post("/api/webhooks/payment", payment_webhook)
    return app

def create_app_from_db(db, catalog: Optional[CatalogService] = None) -> web.Application:
    """ساخت برنامه با سرویس‌های متصل به دیتابیس"""
    catalog = catalog or CatalogService()
    audit_service = AuditService(db)
    order_service = OrderService(db, catalog)
    token_service = DownloadTokenService(db, catalog)
    return create_app(
        catalog=catalog,
        order_service=order_service,
        token_service=token_service,
        api_key_service=ApiKeyService(db, audit_service),
        entitlement_service=EntitlementService(order_service, token_service, audit_service),
        audit_service=audit_service
    )
