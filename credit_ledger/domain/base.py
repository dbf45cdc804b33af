"""Shared base for domain entities"""

from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import BigInteger, Integer, Numeric
from sqlalchemy.types import TypeDecorator
from sqlmodel import SQLModel

# BIGINT primary keys only autoincrement on SQLite when declared as INTEGER
BigIntegerPK = BigInteger().with_variant(Integer(), "sqlite")

CENT = Decimal("0.01")


class Money(TypeDecorator):
    """
    Monetary amount (currency units with cents)

    NUMERIC(18, 2) on PostgreSQL. SQLite has no exact decimal storage, so
    there the amount is kept as an integer number of cents; sums, CHECK
    constraints and conditional updates then compare exact values.
    """

    impl = Numeric(18, 2)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(BigInteger())
        return dialect.type_descriptor(Numeric(18, 2))

    def process_bind_param(self, value, dialect):
        if value is None or dialect.name != "sqlite":
            return value
        cents = Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP) * 100
        return int(cents)

    def process_result_value(self, value, dialect):
        if value is None or dialect.name != "sqlite":
            return value
        return (Decimal(int(value)) / 100).quantize(CENT)


class BaseModel(SQLModel):
    pass
