from datetime import datetime
from decimal import Decimal
from enum import Enum as PyEnum

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from rolewallet.core.roles import Role
from rolewallet.db.types import Money, UTCDateTime

from .base import Base
from .definitions import Account


class TransferDirection(str, PyEnum):
    ADD = "add"  # actor pays the target
    MINUS = "minus"  # target pays the actor (Mother Admin claw-back)


class TransactionLog(Base):
    """
    The Transaction Log Table (T_TransactionLog) - The Immutable Ledger.
    One row per completed transfer, written in the same database transaction
    as the two balance updates. Rows are never updated or deleted.

    Both parties are stored as value snapshots ({id, username, role} at the
    time of the transfer) so history stays readable after renames and
    re-roles. ``from``/``to`` are always actor/target, not debtor/creditor.
    """

    __tablename__ = "transaction_logs"
    __table_args__ = (Index("ix_transaction_logs_recent", "created_at", "id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, comment="Unique Log ID.")

    # --- Actor snapshot ---
    from_account_id: Mapped[int] = mapped_column(
        ForeignKey(Account.id), nullable=False, index=True, comment="ID of the account that initiated the transfer."
    )
    from_username: Mapped[str] = mapped_column(String(50), nullable=False, comment="Actor username at write time.")
    from_role: Mapped[Role] = mapped_column(String(20), nullable=False, comment="Actor role at write time.")

    # --- Target snapshot ---
    to_account_id: Mapped[int] = mapped_column(
        ForeignKey(Account.id), nullable=False, index=True, comment="ID of the account the transfer was aimed at."
    )
    to_username: Mapped[str] = mapped_column(String(50), nullable=False, comment="Target username at write time.")
    to_role: Mapped[Role] = mapped_column(String(20), nullable=False, comment="Target role at write time.")

    amount: Mapped[Decimal] = mapped_column(
        Money(), nullable=False, comment="The transfer amount (always positive)."
    )
    type: Mapped[TransferDirection] = mapped_column(String(10), nullable=False, comment="'add' or 'minus'.")

    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, comment="Time the transfer completed.")
