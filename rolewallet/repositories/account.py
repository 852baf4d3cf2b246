from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rolewallet.core.roles import Role
from rolewallet.db.utils import apply_dict_updates
from rolewallet.models.definitions import Account, AccountStatus


def normalize_username(username: str) -> str:
    """Usernames are matched trimmed and case-insensitively."""
    return username.strip().lower()


class AccountRepository:
    """
    Manages data access for the Account table: identity lookups, profile
    writes, status flips and the two balance primitives used by transfers.

    Balance and status are written with bulk UPDATEs that bypass the identity
    map, so every lookup repopulates already-loaded instances.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # --- 1. Lookups ---

    async def get_by_id(self, account_id: int) -> Account | None:
        """Retrieves an Account by its primary ID."""
        return await self.session.get(Account, account_id, populate_existing=True)

    async def get_by_email(self, email: str) -> Account | None:
        """Retrieves an Account by exact email."""
        stmt = select(Account).where(Account.email == email).execution_options(populate_existing=True)
        return (await self.session.scalars(stmt)).one_or_none()

    async def get_by_username(self, username: str) -> Account | None:
        """Retrieves an Account by username, ignoring case and surrounding whitespace."""
        stmt = (
            select(Account)
            .where(func.lower(Account.username) == normalize_username(username))
            .execution_options(populate_existing=True)
        )
        return (await self.session.scalars(stmt)).one_or_none()

    async def list_accounts(self, role: Role | None = None, limit: int = 100) -> Sequence[Account]:
        stmt = select(Account).order_by(Account.id).limit(limit).execution_options(populate_existing=True)
        if role is not None:
            stmt = stmt.where(Account.role == role)
        return (await self.session.scalars(stmt)).all()

    # --- 2. Writes ---

    async def create(self, create_data: dict[str, Any]) -> Account:
        """Creates a new Account record and persists it."""
        sensitive_fields = {"id", "balance", "created_at", "updated_at"}
        account = Account()
        apply_dict_updates(account, create_data, sensitive_fields)
        self.session.add(account)
        await self.session.flush()
        return account

    async def update(self, account: Account, update_data: dict[str, Any]) -> set[str]:
        """
        Applies profile changes to a loaded account and flushes them.
        Returns the names of the fields that actually changed.
        """
        sensitive_fields = {"id", "balance", "status", "joined_at", "created_at", "created_by"}
        changed = apply_dict_updates(entity=account, update_data=update_data, excluded_attrs=sensitive_fields)
        if changed:
            await self.session.flush()
        return changed

    async def touch_last_login(self, account: Account, when: datetime) -> None:
        account.last_login = when
        await self.session.flush()

    async def set_status(self, account_id: int, status: AccountStatus) -> bool:
        """
        Sets the status only if it differs from the current one.
        Returns False when no row was modified (missing or already in state).
        """
        stmt = (
            update(Account)
            .where(Account.id == account_id, Account.status != status)
            .values(status=status)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    # --- 3. Balance primitives (caller owns the transaction boundary) ---

    async def debit_if_sufficient(self, account_id: int, amount: Decimal) -> Decimal | None:
        """
        CRITICAL: Atomically subtracts ``amount`` from the balance, but only if
        the balance covers it. The check and the write are one statement, so
        concurrent debits cannot both pass the check on a stale read.

        Returns:
            The new balance, or None if the account is missing or underfunded.
        """
        stmt = (
            update(Account)
            .where(Account.id == account_id, Account.balance >= amount)
            .values(balance=Account.balance - amount)
            .returning(Account.balance)
            .execution_options(synchronize_session=False)
        )
        return (await self.session.execute(stmt)).scalar_one_or_none()

    async def credit(self, account_id: int, amount: Decimal) -> Decimal | None:
        """Atomically adds ``amount`` to the balance. Returns the new balance."""
        stmt = (
            update(Account)
            .where(Account.id == account_id)
            .values(balance=Account.balance + amount)
            .returning(Account.balance)
            .execution_options(synchronize_session=False)
        )
        return (await self.session.execute(stmt)).scalar_one_or_none()
