from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from rolewallet.core.roles import Role
from rolewallet.models.ledger import TransactionLog, TransferDirection

# --- Input Schemas ---


class TransferRequest(BaseModel):
    """
    A balance transfer command issued by an actor. Amount rules (positive,
    at most 4 decimal places) are enforced by the transfer service so they
    surface as the service's own ValidationError.
    """

    target_id: int = Field(..., description="Account receiving ('add') or paying ('minus')")
    amount: Decimal = Field(..., description="Transfer amount")
    direction: TransferDirection = Field(..., description="'add' or 'minus'")


# --- Output Schemas ---


class PartySnapshot(BaseModel):
    id: int
    username: str
    role: Role


class TransactionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., description="Transaction ID")
    from_: PartySnapshot = Field(..., alias="from", description="Actor at the time of the transfer")
    to: PartySnapshot = Field(..., description="Target at the time of the transfer")
    amount: Decimal = Field(..., description="Transferred amount")
    type: TransferDirection = Field(..., description="'add' or 'minus'")
    created_at: datetime = Field(..., description="Time the transfer completed")

    @classmethod
    def from_log(cls, log: TransactionLog) -> "TransactionResponse":
        return cls(
            id=log.id,
            from_=PartySnapshot(id=log.from_account_id, username=log.from_username, role=log.from_role),
            to=PartySnapshot(id=log.to_account_id, username=log.to_username, role=log.to_role),
            amount=log.amount,
            type=log.type,
            created_at=log.created_at,
        )
