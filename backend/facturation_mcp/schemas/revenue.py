"""
Schemas Pydantic per i report di fatturato
Progetto: Facturation MCP

Contiene:
- Enums: RevenueMode, InvoiceStatusFilter, QuoteStatusFilter
- Report fatture (calculate_revenue, ventiler_encaissements)
- Report preventivi (calculate_quotes_revenue)
"""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field


# -------------------------------------------------------------------
# Enum
# -------------------------------------------------------------------

class RevenueMode(str, Enum):
    """Modalità di calcolo; il valore è il query_type restituito."""
    INVOICED = "invoiced"
    COLLECTED = "paid"


class InvoiceStatusFilter(str, Enum):
    """Filtro stato fatture (solo per il fatturato)."""
    ALL = "tous"
    PAID = "paye"
    UNPAID = "non_paye"

    @property
    def status_code(self) -> Optional[int]:
        return {
            InvoiceStatusFilter.ALL: None,
            InvoiceStatusFilter.PAID: 1,
            InvoiceStatusFilter.UNPAID: 0,
        }[self]


class QuoteStatusFilter(str, Enum):
    """Filtro stato preventivi."""
    ALL = "tous"
    ACCEPTED = "acceptes"
    PENDING = "en_attente"
    REFUSED = "refuses"

    @property
    def status_code(self) -> Optional[int]:
        return {
            QuoteStatusFilter.ALL: None,
            QuoteStatusFilter.ACCEPTED: 1,
            QuoteStatusFilter.PENDING: 0,
            QuoteStatusFilter.REFUSED: 9,
        }[self]


# -------------------------------------------------------------------
# Report fatture
# -------------------------------------------------------------------

class MonthlyRevenue(BaseModel):
    """Riga mensile della ripartizione (sempre presente, anche a zero)."""

    month: int = Field(..., ge=1, le=12)
    month_name: str
    total_invoices: int = 0
    total_invoiced_ttc: float = 0.0
    total_invoiced_ht: float = 0.0
    total_vat_amount: float = 0.0


class RevenueSummary(BaseModel):
    """Totali del periodo e ripartizione mensile dell'anno di riferimento."""

    total_invoices: int = Field(0, description="Fatture che contribuiscono al periodo")
    total_invoiced_ttc: float = Field(0.0, description="Totale IVA inclusa")
    total_invoiced_ht: float = Field(0.0, description="Totale imponibile")
    total_vat_amount: float = Field(0.0, description="Totale IVA")
    avg_invoice_amount: float = Field(0.0, description="Media TTC per fattura")
    unique_customers: int = Field(0, description="Clienti distinti")
    monthly_breakdown: list[MonthlyRevenue] = Field(default_factory=list)


class RevenueReport(BaseModel):
    """Risultato di calculate_revenue."""

    year: int
    query_type: RevenueMode
    revenue: RevenueSummary


class MonthlyCollectionReport(BaseModel):
    """Risultato di ventiler_encaissements."""

    year: int
    query_type: Literal["paid_monthly"] = "paid_monthly"
    total_invoiced_ht: float = 0.0
    total_invoiced_ttc: float = 0.0
    total_vat_amount: float = 0.0
    monthly: list[MonthlyRevenue] = Field(default_factory=list)


# -------------------------------------------------------------------
# Report preventivi
# -------------------------------------------------------------------

class MonthlyQuotes(BaseModel):
    """Riga mensile della ripartizione preventivi."""

    month: int = Field(..., ge=1, le=12)
    month_name: str
    total_quotes: int = 0
    total_quoted_ttc: float = 0.0
    total_quoted_ht: float = 0.0
    total_vat_amount: float = 0.0


class QuotesSummary(BaseModel):
    """Totali preventivi del periodo."""

    total_quotes: int = 0
    total_quoted_ttc: float = 0.0
    total_quoted_ht: float = 0.0
    total_vat_amount: float = 0.0
    avg_quote_amount: float = 0.0
    unique_customers: int = 0
    monthly_breakdown: list[MonthlyQuotes] = Field(default_factory=list)


class QuotesReport(BaseModel):
    """Risultato di calculate_quotes_revenue."""

    year: int
    query_type: Literal["quotes"] = "quotes"
    quotes: QuotesSummary
