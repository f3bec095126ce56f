import asyncio
from datetime import timedelta

from conftest import NOW, FakeDB, make_token

from templateshop.models.download_token import DownloadTokenView
from templateshop.services.download_token_service import DownloadTokenService


def test_expired_token_is_inactive_regardless_of_uses():
    for used in (0, 5, 10):
        token = make_token(expires_in=-timedelta(seconds=1), used_count=used)
        assert token.is_active_at(NOW) is False


def test_exhausted_token_is_inactive_regardless_of_expiry():
    for expires_in in (timedelta(seconds=1), timedelta(days=365)):
        token = make_token(expires_in=expires_in, used_count=10, max_uses=10)
        assert token.is_active_at(NOW) is False


def test_token_expiring_exactly_now_is_inactive():
    assert make_token(expires_in=timedelta(0)).is_active_at(NOW) is False


def test_usable_token_is_active():
    assert make_token(used_count=9, max_uses=10).is_active_at(NOW) is True


def test_view_derives_is_active():
    view = DownloadTokenView.from_token(make_token(used_count=10), NOW, slug="s", title="T")

    assert view.is_active is False
    assert view.model_dump(mode="json")["product_slug"] == "s"


def _row(token_id, product_id, used_count, expires_in):
    return {
        "token_id": token_id,
        "user_id": "u1",
        "product_id": product_id,
        "expires_at": NOW + expires_in,
        "max_uses": 10,
        "used_count": used_count,
        "created_at": NOW,
    }


def test_list_user_downloads_joins_catalog(catalog):
    db = FakeDB(results={"fetch": [[
        _row("t1", "prd-1", 0, timedelta(days=3)),
        _row("t2", "gone", 2, -timedelta(days=1)),
    ]]})
    service = DownloadTokenService(db, catalog)

    views = asyncio.run(service.list_user_downloads("u1", now=NOW))

    assert [v.id for v in views] == ["t1", "t2"]
    assert views[0].product_slug == "saas-indigo"
    assert views[0].product_title == "SaaS Indigo"
    assert views[0].is_active is True
    assert views[1].product_title is None
    assert views[1].is_active is False


def test_recent_tokens_query_is_bounded():
    db = FakeDB()
    service = DownloadTokenService(db)

    asyncio.run(service.get_recent_tokens("u1", "p1", NOW))

    kind, query, args = db.pool.calls[0]
    assert kind == "fetch"
    assert "expires_at > $3" in query
    assert "ORDER BY created_at DESC" in query
    assert args == ("u1", "p1", NOW, 5)


def test_serialized_takes_advisory_lock():
    db = FakeDB()
    service = DownloadTokenService(db)

    async def run():
        async with service.serialized("u1", "p1") as conn:
            await service.get_recent_tokens("u1", "p1", NOW, conn=conn)

    asyncio.run(run())

    assert "pg_advisory_xact_lock" in db.pool.calls[0][1]
    assert db.pool.calls[0][2] == ("u1:p1",)


def test_create_token_starts_unused():
    db = FakeDB(results={"fetchrow": [_row("t9", "p1", 0, timedelta(days=30))]})

    token = asyncio.run(DownloadTokenService(db).create_token("u1", "p1", NOW + timedelta(days=30), 10))

    assert token.token_id == "t9"
    assert token.used_count == 0
    assert db.pool.calls[0][2] == ("u1", "p1", NOW + timedelta(days=30), 10)
