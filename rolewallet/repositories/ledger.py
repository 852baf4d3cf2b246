from collections.abc import Sequence

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from rolewallet.models.ledger import TransactionLog


class LedgerRepository:
    """
    Manages data access for the immutable TransactionLog table.
    Only appends and reads are exposed; there is no update or delete path.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # --- 1. CORE FACT RECORDING ---

    async def record(self, log: TransactionLog) -> TransactionLog:
        """
        Appends one transaction record. Relies on the caller's transaction
        boundary so the record commits or rolls back together with the
        balance updates it describes.
        """
        self.session.add(log)
        await self.session.flush()
        return log

    # --- 2. AUDIT AND RETRIEVAL ---

    async def get_by_id(self, log_id: int) -> TransactionLog | None:
        return await self.session.get(TransactionLog, log_id)

    async def list_recent(self, limit: int = 50) -> Sequence[TransactionLog]:
        """Most recent transfers first."""
        stmt = select(TransactionLog).order_by(TransactionLog.created_at.desc(), TransactionLog.id.desc()).limit(limit)
        return (await self.session.scalars(stmt)).all()

    async def list_for_account(self, account_id: int, limit: int = 50) -> Sequence[TransactionLog]:
        """
        Retrieves recent transfers where the account was either the actor
        or the target.
        """
        stmt = (
            select(TransactionLog)
            .where(
                or_(
                    TransactionLog.from_account_id == account_id,
                    TransactionLog.to_account_id == account_id,
                )
            )
            .order_by(TransactionLog.created_at.desc(), TransactionLog.id.desc())
            .limit(limit)
        )
        return (await self.session.scalars(stmt)).all()
