import asyncio
from types import SimpleNamespace

from conftest import NOW, FakeDB, make_order, make_token

from templateshop.handlers.callback_handler import CallbackHandler
from templateshop.handlers.user_handlers import UserHandler
from templateshop.models.download_token import DownloadTokenView
from templateshop.models.product import Currency
from templateshop.services.catalog_service import CatalogService
from templateshop.utils.messages import Messages


class RecordingUserHandler:
    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        async def handler(update, context):
            self.calls.append(name)
        return handler


class FakeQuery:
    def __init__(self, data):
        self.data = data
        self.answers = []

    async def answer(self, text=None):
        self.answers.append(text)


def _dispatch(data):
    user_handler = RecordingUserHandler()
    query = FakeQuery(data)
    update = SimpleNamespace(callback_query=query)
    asyncio.run(CallbackHandler(user_handler).handle_callback(update, None))
    return user_handler.calls, query.answers


def test_callback_routing():
    assert _dispatch("catalog")[0] == ["show_catalog"]
    assert _dispatch("product_prd-1")[0] == ["show_product"]
    assert _dispatch("buy_prd-1_commercial")[0] == ["buy_product"]
    assert _dispatch("downloads")[0] == ["show_downloads"]
    assert _dispatch("currency_menu")[0] == ["show_currency_menu"]
    assert _dispatch("currency_EUR")[0] == ["set_currency"]


def test_unknown_callback_is_answered():
    calls, answers = _dispatch("wallet_deposit")
    assert calls == []
    assert answers == ["⚠️ دستور نامعتبر"]


def test_downloads_message_marks_active_tokens():
    views = [
        DownloadTokenView.from_token(make_token(used_count=2), NOW, "saas-indigo", "SaaS Indigo"),
        DownloadTokenView.from_token(make_token(used_count=10), NOW, "saas-indigo", "SaaS Indigo"),
    ]

    text = Messages.format_downloads(views)

    assert "🟢 SaaS Indigo" in text
    assert "⚪️ SaaS Indigo" in text
    assert "10/10" in text


def test_downloads_message_when_empty():
    assert Messages.format_downloads([]) == "شما هنوز دسترسی دانلودی ندارید."


def test_product_message_shows_both_licenses(catalog):
    text = Messages.format_product(catalog.products[0], Currency.EUR, "en")
    assert "€36" in text
    assert "€82" in text


def test_order_message(catalog):
    text = Messages.format_order(make_order(product_ids=("p1", "p2")), "en")
    assert "ord_1" in text
    assert "$78" in text
    assert text.count("(personal)") == 2


class EditableQuery(FakeQuery):
    def __init__(self, data):
        super().__init__(data)
        self.edits = []

    async def edit_message_text(self, text, reply_markup=None):
        self.edits.append(text)


def test_buy_callback_with_underscored_product_id():
    catalog = CatalogService([{
        "product_id": "prd_x_1", "slug": "x", "title": "Underscored",
        "base_price_usd": {"personal": 10, "commercial": 20},
    }])
    db = FakeDB()
    query = EditableQuery("buy_prd_x_1_commercial")
    update = SimpleNamespace(callback_query=query, effective_user=SimpleNamespace(id=7))

    asyncio.run(UserHandler(db, catalog).buy_product(update, None))

    item_inserts = [args for kind, sql, args in db.pool.calls if "INSERT INTO order_items" in sql]
    assert item_inserts[0][1] == "prd_x_1"
    assert item_inserts[0][4] == "commercial"
    assert "Underscored" in query.edits[0]
