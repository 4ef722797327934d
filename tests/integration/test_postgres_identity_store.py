import asyncio
import os

import pytest

from app.domain.entities import Account, Origin
from app.domain.errors import AccountAlreadyExists, AccountNotFound, StaleAccountVersion
from app.infrastructure.db.client_registry import PgClientRegistry
from app.infrastructure.db.identity_store import PgIdentityStore

pytestmark = pytest.mark.skipif(
    not os.environ.get("DATABASE_URL"), reason="DATABASE_URL not set"
)


@pytest.fixture()
def store(pool):
    return PgIdentityStore(
        pool,
        hash_password=lambda plain: "hashed-" + plain,
        verify_password=lambda plain, hashed: hashed == "hashed-" + plain,
    )


async def test_create_find_and_retrieve(store):
    created = await store.create_user(Account(username=" Jeremy@Example.COM "), "s3cret")

    assert created.id
    assert created.username == "jeremy@example.com"
    assert created.verified is False
    assert created.version == 0

    found = await store.find_by_username_and_origin("jeremy@example.com", Origin.UAA, "uaa")
    assert [a.id for a in found] == [created.id]
    assert await store.find_by_username_and_origin("jeremy@example.com", Origin.LDAP, "uaa") == []
    assert await store.find_by_username("jeremy@example.com", "acme") == []

    assert (await store.retrieve(created.id, "uaa")).id == created.id
    with pytest.raises(AccountNotFound):
        await store.retrieve(created.id, "acme")


async def test_duplicate_username_and_origin(store):
    await store.create_user(Account(username="dup@example.com"), "s3cret")
    with pytest.raises(AccountAlreadyExists):
        await store.create_user(Account(username="dup@example.com"), "other")

    ldap = await store.create_user(
        Account(username="dup@example.com", origin=Origin.LDAP), "s3cret"
    )
    other_zone = await store.create_user(
        Account(username="dup@example.com", zone_id="acme"), "s3cret"
    )
    assert len({ldap.id, other_zone.id}) == 2
    assert len(await store.find_by_username("dup@example.com", "uaa")) == 2


async def test_concurrent_creates_yield_one_account(store):
    results = await asyncio.gather(
        *(store.create_user(Account(username="race@example.com"), "s3cret") for _ in range(5)),
        return_exceptions=True,
    )

    assert sum(isinstance(r, Account) for r in results) == 1
    assert sum(isinstance(r, AccountAlreadyExists) for r in results) == 4


async def test_verify_uses_version(store):
    created = await store.create_user(Account(username="v@example.com"), "s3cret")

    verified = await store.verify(created.id, created.version, "uaa")
    assert verified.verified is True
    assert verified.version == created.version + 1

    with pytest.raises(StaleAccountVersion):
        await store.verify(created.id, created.version, "uaa")
    with pytest.raises(AccountNotFound):
        await store.verify("no-such-id", 0, "uaa")


async def test_password_check_and_change(store):
    created = await store.create_user(Account(username="p@example.com"), "old")

    assert await store.check_password_matches(created.id, "old", "uaa") is True
    assert await store.check_password_matches(created.id, "new", "uaa") is False

    changed = await store.change_password(created.id, "new", "uaa")
    assert changed.version == created.version + 1
    assert await store.check_password_matches(created.id, "new", "uaa") is True

    with pytest.raises(AccountNotFound):
        await store.change_password(created.id, "x", "acme")


async def test_client_registry_lookup(pool):
    async with pool.connection() as conn:
        await conn.execute(
            "INSERT INTO oauth_clients (zone_id, client_id, redirect_uris, signup_redirect_url)"
            " VALUES (%s, %s, %s, %s)",
            ("uaa", "c1", ["https://*.example.com/cb"], "https://example.com/welcome"),
        )
    registry = PgClientRegistry(pool)

    found = await registry.lookup("c1", "uaa")
    assert found is not None
    assert found.redirect_uris == ("https://*.example.com/cb",)
    assert found.signup_redirect_url == "https://example.com/welcome"
    assert await registry.lookup("c1", "acme") is None
