# backend/app/models.py
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import String, DateTime, ForeignKey, Numeric, UniqueConstraint, BigInteger, Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# Column precision (total digits, decimal places). Schemas validate input
# against these so nothing is rounded on write.
PRICE_DIGITS, PRICE_PLACES = 18, 8
QUANTITY_DIGITS, QUANTITY_PLACES = 28, 12
MONEY_DIGITS, MONEY_PLACES = 18, 2


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class Instrument(Base):
    """
    A tradable instrument (typically an ETF) tracked by the portfolio.

    The symbol is the identity: upper-case, trimmed, unique. Prices are
    entered manually and owned by the instrument (deleted with it).
    Purchases are NOT owned: they reference the symbol by value and
    survive the instrument's deletion.
    """
    __tablename__ = "instruments"

    symbol: Mapped[str] = mapped_column(String(32), primary_key=True)  # e.g. "VWCE"
    name: Mapped[str] = mapped_column(String, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    prices: Mapped[list["Price"]] = relationship(
        back_populates="instrument",
        cascade="all, delete-orphan",
        order_by="Price.timestamp",
    )


class Price(Base):
    """
    One manual price observation.

    At most one price per (symbol, timestamp). Writing a price at an
    existing timestamp overwrites it.
    """
    __tablename__ = "prices"
    __table_args__ = (
        # UniqueConstraint automatically creates an index on (symbol, timestamp)
        UniqueConstraint('symbol', 'timestamp', name='uq_price_symbol_timestamp'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    symbol: Mapped[str] = mapped_column(ForeignKey("instruments.symbol", ondelete="CASCADE"))
    timestamp: Mapped[int] = mapped_column(BigInteger)  # Epoch milliseconds
    price: Mapped[Decimal] = mapped_column(Numeric(PRICE_DIGITS, PRICE_PLACES))

    instrument: Mapped["Instrument"] = relationship(back_populates="prices")


class Purchase(Base):
    """
    Units of an instrument acquired at a point in time.

    No FK on symbol: a purchase may outlive its instrument. Such purchases
    stay in the store but have no price and contribute nothing to totals.
    """
    __tablename__ = "purchases"
    __table_args__ = (
        # "All purchases of X in a time range", the dashboard's main filter
        Index('ix_purchase_symbol_timestamp', 'symbol', 'timestamp'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True, autoincrement=True)
    symbol: Mapped[str] = mapped_column(String(32))
    timestamp: Mapped[int] = mapped_column(BigInteger, index=True)  # Epoch milliseconds
    quantity: Mapped[Decimal] = mapped_column(Numeric(QUANTITY_DIGITS, QUANTITY_PLACES))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))


class Goal(Base):
    """Savings goal: a target amount reached by a flat monthly contribution."""
    __tablename__ = "goals"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)  # e.g. "goal_3f2a..."
    name: Mapped[str] = mapped_column(String)
    target: Mapped[Decimal] = mapped_column(Numeric(MONEY_DIGITS, MONEY_PLACES), default=Decimal("0"))
    monthly: Mapped[Decimal] = mapped_column(Numeric(MONEY_DIGITS, MONEY_PLACES), default=Decimal("0"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
