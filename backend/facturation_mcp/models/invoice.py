"""
Modelli SQLAlchemy per la Fatturazione
Progetto: Facturation MCP

Contiene:
- Invoice: Fattura replicata da Facturation.PRO
- Payment: Registro (ledger) dei pagamenti, opzionale e sparso
"""

from __future__ import annotations

from datetime import date
from enum import Enum, IntEnum
from typing import Any, Optional

from sqlalchemy import (
    Date,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from facturation_mcp.models import Base
from facturation_mcp.models.mixins import RemoteIdMixin, TimestampMixin
from facturation_mcp.models.types import LenientAmount


class InvoiceStatusCode(IntEnum):
    """Codici di stato della fattura come salvati dall'API."""
    UNPAID = 0
    PAID = 1


class PaymentSource(str, Enum):
    """Origine di una riga del ledger pagamenti."""
    API = "api"
    DERIVED = "derived"


class Invoice(Base, RemoteIdMixin, TimestampMixin):
    """
    Modello per le fatture.

    Gli importi sono nella valuta della fattura e rispettano
    total_ttc = total_ht + vat_amount.

    Attributes:
        id: ID locale
        facturation_id: ID remoto
        customer_id: ID locale del cliente (può essere NULL)
        invoice_number: Numero fattura
        invoice_ref: Numero sequenziale remoto
        invoice_date: Data di emissione
        due_date: Data di scadenza
        payment_mode: Codice modalità di pagamento remoto
        payment_date: Data dell'ultimo pagamento noto (anche parziale)
        status: 0 = non pagata, 1 = pagata
        paid_on: Data di saldo completo
        balance: Importo residuo; NULL o stringa vuota significano saldo zero
        total_ht: Imponibile
        total_ttc: Totale IVA inclusa
        vat_amount: Importo IVA
        notes: Note
    """

    __tablename__ = "invoices"

    customer_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("customers.id", ondelete="SET NULL"),
        nullable=True,
        doc="ID locale del cliente",
    )

    invoice_number: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        doc="Numero fattura",
    )

    invoice_ref: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        doc="Numero sequenziale della fattura sul sistema remoto",
    )

    invoice_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        doc="Data emissione fattura",
    )

    due_date: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
        doc="Data scadenza pagamento",
    )

    # ------------------------------------------------------------
    # Colonne Pagamento
    # ------------------------------------------------------------
    payment_mode: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Codice modalità di pagamento",
    )

    payment_date: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
        doc="Data dell'ultimo pagamento noto (anche parziale)",
    )

    status: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=InvoiceStatusCode.UNPAID,
        doc="0: non pagata, 1: pagata",
    )

    paid_on: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
        doc="Data di saldo completo",
    )

    balance: Mapped[Optional[Any]] = mapped_column(
        LenientAmount(),
        nullable=True,
        default=0,
        doc="Residuo da incassare (NULL/'' = saldata)",
    )

    # ------------------------------------------------------------
    # Colonne Importi
    # ------------------------------------------------------------
    total_ht: Mapped[float] = mapped_column(Float, nullable=False, doc="Imponibile")
    total_ttc: Mapped[float] = mapped_column(Float, nullable=False, doc="Totale IVA inclusa")
    vat_amount: Mapped[float] = mapped_column(Float, nullable=False, doc="Importo IVA")

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("idx_invoices_customer", "customer_id"),
        Index("idx_invoices_date", "invoice_date"),
        Index("idx_invoices_status", "status"),
        Index("idx_invoices_paid_on", "paid_on"),
    )

    def __repr__(self) -> str:
        return (
            f"<Invoice(id={self.id}, number={self.invoice_number!r}, "
            f"status={self.status}, total_ttc={self.total_ttc})>"
        )


class Payment(Base, TimestampMixin):
    """
    Riga del ledger pagamenti.

    Quando esiste almeno una riga nella finestra interrogata, il ledger
    fa fede sulla stima derivata da status/balance per quella fattura.

    Attributes:
        id: ID locale
        invoice_id: ID locale della fattura
        payment_date: Data del pagamento
        amount_ht, amount_ttc, amount_vat: Importi incassati
        payment_mode: Codice modalità di pagamento
        note: Nota
        source: 'api' se letto dall'API, 'derived' se ricostruito in sync
    """

    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    invoice_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=False,
    )

    payment_date: Mapped[date] = mapped_column(Date, nullable=False)

    amount_ht: Mapped[float] = mapped_column(Float, nullable=False)
    amount_ttc: Mapped[float] = mapped_column(Float, nullable=False)
    amount_vat: Mapped[float] = mapped_column(Float, nullable=False)

    payment_mode: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    source: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PaymentSource.DERIVED.value,
        doc="'api' o 'derived'",
    )

    __table_args__ = (
        Index("idx_payments_invoice", "invoice_id"),
        Index("idx_payments_date", "payment_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<Payment(id={self.id}, invoice_id={self.invoice_id}, "
            f"date={self.payment_date}, amount_ttc={self.amount_ttc})>"
        )
