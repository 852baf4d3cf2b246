from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from rolewallet.config import Settings
from rolewallet.core.clock import Clock, SystemClock
from rolewallet.repositories import AccountRepository, LedgerRepository

from .account import AccountService
from .status import StatusService
from .transfer import TransferService


@dataclass(frozen=True)
class Services:
    accounts: AccountService
    status: StatusService
    transfers: TransferService


def build_services(session: AsyncSession, settings: Settings, clock: Clock | None = None) -> Services:
    """Wires one unit of work: every service shares ``session``."""
    clock = clock or SystemClock()
    account_repo = AccountRepository(session)
    ledger_repo = LedgerRepository(session)
    return Services(
        accounts=AccountService(session, account_repo, clock, password_rounds=settings.bcrypt_rounds),
        status=StatusService(session, account_repo),
        transfers=TransferService(session, account_repo, ledger_repo, clock),
    )


__all__ = ["AccountService", "Services", "StatusService", "TransferService", "build_services"]
