"""SQLAlchemy ORM models for profile and calculation persistence."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String,
    Integer,
    Numeric,
    DateTime,
    Boolean,
    ForeignKey,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import DeclarativeBase, relationship, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class MortgageProfileRecord(Base):
    __tablename__ = "mortgage_profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    user_id: Mapped[str] = mapped_column(String(255), index=True)

    property_price: Mapped[Decimal] = mapped_column(Numeric(15, 2))
    property_type: Mapped[str] = mapped_column(String(50))
    down_payment_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2))
    subsidy_amount: Mapped[Decimal | None] = mapped_column(Numeric(15, 2), nullable=True)
    subsidy_included_in_down_payment: Mapped[bool] = mapped_column(Boolean)
    loan_term_years: Mapped[int] = mapped_column(Integer)
    annual_interest_rate_percent: Mapped[Decimal] = mapped_column(Numeric(5, 2))

    calculations: Mapped[list["MortgageCalculationRecord"]] = relationship(back_populates="profile")


class MortgageCalculationRecord(Base):
    __tablename__ = "mortgage_calculations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    user_id: Mapped[str] = mapped_column(String(255), index=True)
    profile_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("mortgage_profiles.id"))

    # Totals over up to 360 payments can exceed the profile amount columns
    monthly_payment: Mapped[Decimal] = mapped_column(Numeric(20, 2))
    total_payment: Mapped[Decimal] = mapped_column(Numeric(20, 2))
    total_overpayment_amount: Mapped[Decimal] = mapped_column(Numeric(20, 2))
    possible_tax_deduction: Mapped[Decimal] = mapped_column(Numeric(20, 2))
    subsidy_savings: Mapped[Decimal] = mapped_column(Numeric(20, 2))
    recommended_income: Mapped[Decimal] = mapped_column(Numeric(20, 2))

    # Nested {year: {month: entry}} schedule (JSON text)
    payment_schedule: Mapped[str] = mapped_column(Text)

    profile: Mapped["MortgageProfileRecord"] = relationship(back_populates="calculations")
