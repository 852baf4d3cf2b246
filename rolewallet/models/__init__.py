from .base import Base
from .definitions import Account, AccountStatus
from .ledger import TransactionLog, TransferDirection

__all__ = ["Base", "Account", "AccountStatus", "TransactionLog", "TransferDirection"]
