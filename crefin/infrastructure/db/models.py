"""
SQLAlchemy models for the database.
Maps domain entities to database tables.
"""

from sqlalchemy import (
    Column, Integer, String, DateTime, Text, Float,
    Numeric, Date, ForeignKey, Enum as SQLEnum,
    Index, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from crefin.domain.models.invoice import InvoiceStatus
from crefin.domain.models.income import IncomeSource

from .database import Base


def _enum_column(enum_cls):
    """Store enum values (``"paid"``) rather than member names (``"PAID"``)."""
    return SQLEnum(
        enum_cls,
        values_callable=lambda members: [member.value for member in members],
        native_enum=False,
        length=20,
    )


class UserProfileModel(Base):
    """User profile table, rows are provisioned by the auth service"""
    __tablename__ = 'user_profiles'

    id = Column(String(36), primary_key=True)
    email = Column(String(255), nullable=False, unique=True)
    full_name = Column(String(255))
    phone = Column(String(50))

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    owned_clients = relationship("ClientModel", back_populates="owner")
    owned_invoices = relationship("InvoiceModel", back_populates="owner")


class ClientModel(Base):
    """Client table"""
    __tablename__ = 'clients'

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(36), ForeignKey('user_profiles.id', ondelete='CASCADE'), nullable=False)
    name = Column(String(255), nullable=False)

    # Contact information
    email = Column(String(255))
    phone = Column(String(50))
    company = Column(String(255))
    address = Column(Text)

    notes = Column(Text)
    version = Column(Integer, nullable=False, default=1)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    owner = relationship("UserProfileModel", back_populates="owned_clients")
    invoices = relationship("InvoiceModel", back_populates="client")

    # Indexes
    __table_args__ = (
        Index('idx_clients_owner_name', 'owner_id', 'name'),
    )


class IncomeRecordModel(Base):
    """Income ledger table"""
    __tablename__ = 'income_records'

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(36), ForeignKey('user_profiles.id', ondelete='CASCADE'), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    client_id = Column(Integer, ForeignKey('clients.id', ondelete='SET NULL'))
    client_name = Column(String(255))
    project_name = Column(String(255))
    source = Column(_enum_column(IncomeSource), nullable=False, default=IncomeSource.MANUAL)
    notes = Column(Text)
    logged_at = Column(Date, nullable=False)
    version = Column(Integer, nullable=False, default=1)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    invoice = relationship("InvoiceModel", back_populates="income_record", uselist=False)

    __table_args__ = (
        Index('idx_income_records_owner_logged', 'owner_id', 'logged_at'),
        CheckConstraint('amount > 0', name='income_record_positive_amount'),
    )


class InvoiceModel(Base):
    """Invoice table"""
    __tablename__ = 'invoices'

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(36), ForeignKey('user_profiles.id', ondelete='CASCADE'), nullable=False)
    client_id = Column(Integer, ForeignKey('clients.id', ondelete='RESTRICT'), nullable=False)

    # Invoice details
    invoice_number = Column(String(50), nullable=False)
    status = Column(_enum_column(InvoiceStatus), nullable=False, default=InvoiceStatus.DRAFT)
    amount = Column(Numeric(12, 2), nullable=False)

    # Dates
    issue_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)
    paid_date = Column(Date)

    # Content
    description = Column(Text, nullable=False)
    notes = Column(Text)
    terms = Column(Text)

    # Payment link, set exactly when status is paid
    income_record_id = Column(Integer, ForeignKey('income_records.id', ondelete='SET NULL'), unique=True)

    # Payment-time prediction
    predicted_payment_days = Column(Float)
    predicted_payment_date = Column(Date)
    prediction_confidence = Column(Float)

    version = Column(Integer, nullable=False, default=1)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    owner = relationship("UserProfileModel", back_populates="owned_invoices")
    client = relationship("ClientModel", back_populates="invoices")
    income_record = relationship("IncomeRecordModel", back_populates="invoice")
    line_items = relationship(
        "InvoiceLineItemModel",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceLineItemModel.position"
    )

    # Indexes
    __table_args__ = (
        UniqueConstraint('owner_id', 'invoice_number', name='unique_invoice_number_per_owner'),
        Index('idx_invoices_owner_status', 'owner_id', 'status'),
        Index('idx_invoices_owner_client', 'owner_id', 'client_id'),
        Index('idx_invoices_issue_date', 'issue_date'),
        CheckConstraint('amount > 0', name='invoice_positive_amount'),
        CheckConstraint('due_date >= issue_date', name='invoice_due_after_issue'),
    )


class InvoiceLineItemModel(Base):
    """Invoice line item table"""
    __tablename__ = 'invoice_line_items'

    id = Column(Integer, primary_key=True, autoincrement=True)
    invoice_id = Column(Integer, ForeignKey('invoices.id', ondelete='CASCADE'), nullable=False)
    description = Column(Text, nullable=False)
    quantity = Column(Numeric(10, 3), nullable=False)
    rate = Column(Numeric(10, 2), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)

    # Position for ordering
    position = Column(Integer, default=0)

    # Relationships
    invoice = relationship("InvoiceModel", back_populates="line_items")


class InvoiceSequenceModel(Base):
    """Per-owner, per-year invoice number counter"""
    __tablename__ = 'invoice_sequences'

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(36), ForeignKey('user_profiles.id', ondelete='CASCADE'), nullable=False)
    year = Column(Integer, nullable=False)
    current_value = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint('owner_id', 'year', name='unique_invoice_sequence_per_owner_year'),
        CheckConstraint('current_value >= 0', name='invoice_sequence_non_negative'),
    )
