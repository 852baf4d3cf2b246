from .account import (
    AccountRequest,
    AccountResponse,
    LoginField,
    LoginRequest,
    PasswordChangeRequest,
    ProfileRequest,
    StatusAction,
    StatusResponse,
)
from .ledger import PartySnapshot, TransactionResponse, TransferRequest

__all__ = [
    "AccountRequest",
    "AccountResponse",
    "LoginField",
    "LoginRequest",
    "PasswordChangeRequest",
    "PartySnapshot",
    "ProfileRequest",
    "StatusAction",
    "StatusResponse",
    "TransactionResponse",
    "TransferRequest",
]
