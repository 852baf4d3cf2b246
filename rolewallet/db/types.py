from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import BigInteger, DateTime
from sqlalchemy.types import TypeDecorator

# Monetary values have 4 decimal places and at most 14 significant digits
MONEY_PRECISION = 14
MONEY_SCALE = 4
MONEY_QUANTUM = Decimal(1).scaleb(-MONEY_SCALE)


class Money(TypeDecorator):
    """
    Exact decimal money stored as an integer count of ``MONEY_QUANTUM``.

    SQLite has no decimal type and evaluates NUMERIC arithmetic in floats.
    Keeping the column integral makes ``balance - :amount`` and
    ``balance >= :amount`` exact on every backend. Python code only ever
    sees ``Decimal`` values quantized to ``MONEY_SCALE`` places.
    """

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value: Decimal | int | None, dialect) -> int | None:
        if value is None:
            return None
        value = Decimal(value)
        if value.quantize(MONEY_QUANTUM) != value:
            raise ValueError(f"Money values support at most {MONEY_SCALE} decimal places: {value}")
        return int(value / MONEY_QUANTUM)

    def process_result_value(self, value: int | None, dialect) -> Decimal | None:
        if value is None:
            return None
        return (Decimal(value) * MONEY_QUANTUM).quantize(MONEY_QUANTUM)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC timestamps on every backend.

    SQLite drops tzinfo on storage; values are normalised to UTC on the way in
    and re-tagged as UTC on the way out so callers always see aware datetimes.
    """

    impl = DateTime
    cache_ok = True

    def __init__(self):
        super().__init__(timezone=True)

    def process_bind_param(self, value: datetime | None, dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError("Naive datetimes are not accepted; use an aware UTC datetime.")
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
