"""Shared fixtures: a file-backed SQLite database per test and account factories."""

import itertools
from decimal import Decimal

import pytest
import pytest_asyncio

from rolewallet.config import Settings
from rolewallet.core.clock import DeterministicClock
from rolewallet.core.roles import Role
from rolewallet.core.security.password import hash_password
from rolewallet.db.engine import build_engine, build_session_factory, init_db
from rolewallet.logging_config import LogContext, reset_logging
from rolewallet.models import Account, AccountStatus
from rolewallet.repositories import AccountRepository
from rolewallet.services import build_services

TEST_PASSWORD = "correct-horse-battery"
TEST_ROUNDS = 4


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'rolewallet.db'}", bcrypt_rounds=TEST_ROUNDS)


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock()


@pytest_asyncio.fixture
async def engine(settings):
    engine = build_engine(settings)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def services(session, settings, clock):
    return build_services(session, settings, clock)


@pytest.fixture
def account_password() -> str:
    """Plain password of every account built by ``make_account``."""
    return TEST_PASSWORD


@pytest.fixture
def make_account(session_factory, clock):
    """
    Inserts an account directly (bypassing hierarchy checks) in its own
    session and returns its id.
    """
    counter = itertools.count(1)
    password_hash = hash_password(TEST_PASSWORD, rounds=TEST_ROUNDS)

    async def _make(
        role: Role | str = Role.USER,
        balance: Decimal | int = 0,
        status: AccountStatus = AccountStatus.ACTIVATED,
        username: str | None = None,
        email: str | None = None,
    ) -> int:
        n = next(counter)
        role_name = str(getattr(role, "value", role))
        username = username or f"{role_name.lower().replace(' ', '_')}_{n}"
        async with session_factory() as s:
            async with s.begin():
                repo = AccountRepository(s)
                account = await repo.create(
                    {
                        "username": username,
                        "email": email or f"{username}@example.com",
                        "fullname": username.title(),
                        "password_hash": password_hash,
                        "role": role,
                        "status": status,
                        "joined_at": clock.now(),
                        "last_login": None,
                        "created_by": None,
                    }
                )
                if balance:
                    await repo.credit(account.id, Decimal(balance))
                return account.id

    return _make


@pytest.fixture
def load_account(session_factory):
    """Reads an account back in a fresh session."""

    async def _load(account_id: int) -> Account:
        async with session_factory() as s:
            return await s.get(Account, account_id)

    return _load


@pytest.fixture
def balance_of(load_account):
    async def _balance(account_id: int) -> Decimal:
        return (await load_account(account_id)).balance

    return _balance
