"""
Modello SQLAlchemy per i Preventivi (devis)
Progetto: Facturation MCP
"""

from __future__ import annotations

from datetime import date
from enum import IntEnum
from typing import Optional

from sqlalchemy import Date, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from facturation_mcp.models import Base
from facturation_mcp.models.mixins import RemoteIdMixin, TimestampMixin


class QuoteStatusCode(IntEnum):
    """Codici di stato del preventivo come salvati dall'API."""
    PENDING = 0
    ACCEPTED = 1
    REFUSED = 9


class Quote(Base, RemoteIdMixin, TimestampMixin):
    """
    Modello per i preventivi.

    Attributes:
        customer_id: ID locale del cliente (può essere NULL)
        quote_number: Numero preventivo
        quote_date: Data del preventivo
        status: 0 = in attesa, 1 = accettato, 9 = rifiutato
        total_ht, total_ttc, vat_amount: Importi
    """

    __tablename__ = "quotes"

    customer_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("customers.id", ondelete="SET NULL"),
        nullable=True,
    )

    quote_number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    quote_ref: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    quote_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    status: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=QuoteStatusCode.PENDING,
        doc="0: in attesa, 1: accettato, 9: rifiutato",
    )

    total_ht: Mapped[float] = mapped_column(Float, nullable=False)
    total_ttc: Mapped[float] = mapped_column(Float, nullable=False)
    vat_amount: Mapped[float] = mapped_column(Float, nullable=False)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("idx_quotes_customer", "customer_id"),
        Index("idx_quotes_date", "quote_date"),
        Index("idx_quotes_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<Quote(id={self.id}, number={self.quote_number!r}, status={self.status})>"
