"""
Concurrent transfers against one SQLite file. Each task gets its own session
(its own connection), as concurrent requests would in production.
"""

import asyncio
from decimal import Decimal

import pytest

from rolewallet.core.roles import Role
from rolewallet.exceptions import InsufficientFundsError
from rolewallet.schemas import TransferRequest
from rolewallet.services import build_services

pytestmark = pytest.mark.asyncio

N_TRANSFERS = 100


@pytest.fixture
def transfer_in_own_session(session_factory, settings, clock):
    async def _transfer(actor_id: int, target_id: int, amount: Decimal):
        async with session_factory() as session:
            services = build_services(session, settings, clock)
            return await services.transfers.transfer(
                actor_id, TransferRequest(target_id=target_id, amount=amount, direction="add")
            )

    return _transfer


async def test_concurrent_transfers_conserve_balance(
    make_account, balance_of, services, transfer_in_own_session
):
    mother = await make_account(Role.MOTHER_ADMIN, balance=1000)
    user = await make_account(Role.USER)

    results = await asyncio.gather(
        *(transfer_in_own_session(mother, user, Decimal("1")) for _ in range(N_TRANSFERS)),
        return_exceptions=True,
    )

    assert not [r for r in results if isinstance(r, BaseException)]
    assert await balance_of(mother) == Decimal("900")
    assert await balance_of(user) == Decimal("100")
    assert len(await services.transfers.history(limit=N_TRANSFERS * 2)) == N_TRANSFERS


async def test_concurrent_overdraw_is_rejected(make_account, balance_of, services, transfer_in_own_session):
    master = await make_account(Role.MASTER, balance=50)
    user = await make_account(Role.USER)

    results = await asyncio.gather(
        *(transfer_in_own_session(master, user, Decimal("1")) for _ in range(N_TRANSFERS)),
        return_exceptions=True,
    )

    failures = [r for r in results if isinstance(r, BaseException)]
    assert len(failures) == N_TRANSFERS - 50
    assert all(isinstance(f, InsufficientFundsError) for f in failures)
    assert await balance_of(master) == Decimal("0")
    assert await balance_of(user) == Decimal("50")
    assert len(await services.transfers.history(account_id=master, limit=N_TRANSFERS * 2)) == 50
