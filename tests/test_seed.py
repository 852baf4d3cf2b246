"""Tests for the bootstrap Mother Admin seed and the ``python -m rolewallet`` entry point."""

from dataclasses import replace

import pytest
from sqlalchemy import func, select

from rolewallet.__main__ import bootstrap
from rolewallet.core.roles import Role
from rolewallet.models import Account
from rolewallet.models.seed import run_seeding
from rolewallet.schemas import LoginRequest

pytestmark = pytest.mark.asyncio


@pytest.fixture
def seeded_settings(settings):
    return replace(
        settings,
        mother_admin_email="root@example.com",
        mother_admin_username="  root  ",
        mother_admin_password="bootstrap-password",
    )


async def _mother_admins(session_factory) -> list[Account]:
    async with session_factory() as s:
        return list((await s.scalars(select(Account).where(Account.role == Role.MOTHER_ADMIN))).all())


async def test_seed_creates_mother_admin(session_factory, seeded_settings, clock, services):
    await run_seeding(session_factory, seeded_settings, clock)

    [mother] = await _mother_admins(session_factory)
    assert mother.username == "root"
    assert mother.joined_at == clock.now()
    assert mother.created_by is None

    account = await services.accounts.login(LoginRequest(identifier="root@example.com", password="bootstrap-password"))
    assert account.role is Role.MOTHER_ADMIN


async def test_seed_is_idempotent(session_factory, seeded_settings, clock):
    await run_seeding(session_factory, seeded_settings, clock)
    await run_seeding(session_factory, seeded_settings, clock)

    assert len(await _mother_admins(session_factory)) == 1


async def test_seed_skips_without_credentials(session_factory, settings, clock):
    await run_seeding(session_factory, settings, clock)

    async with session_factory() as s:
        assert await s.scalar(select(func.count()).select_from(Account)) == 0


async def test_bootstrap_creates_schema_and_seed(tmp_path, seeded_settings):
    settings = replace(seeded_settings, database_url=f"sqlite+aiosqlite:///{tmp_path / 'fresh.db'}")

    await bootstrap(settings)
    await bootstrap(settings)

    assert (tmp_path / "fresh.db").exists()
