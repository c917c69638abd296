"""
Modello SQLAlchemy per l'entità Customer
Progetto: Facturation MCP

Anagrafica clienti replicata da Facturation.PRO.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from facturation_mcp.models import Base
from facturation_mcp.models.mixins import RemoteIdMixin, TimestampMixin


class Customer(Base, RemoteIdMixin, TimestampMixin):
    """
    Modello per l'anagrafica clienti.

    Attributes:
        id: ID locale
        facturation_id: ID remoto
        name: Nome o ragione sociale
        email, phone, address, city, postal_code, country: Contatti
        vat_number: Partita IVA / numéro de TVA
    """

    __tablename__ = "customers"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    postal_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    vat_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    __table_args__ = (
        Index("idx_customers_name", "name"),
        Index("idx_customers_email", "email"),
    )

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, name={self.name!r})>"
