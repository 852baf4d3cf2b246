from .account import AccountRepository
from .ledger import LedgerRepository

__all__ = ["AccountRepository", "LedgerRepository"]
