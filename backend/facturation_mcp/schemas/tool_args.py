"""
Argomenti degli strumenti MCP
Progetto: Facturation MCP

Ogni strumento valida i propri argomenti con uno di questi modelli;
il JSON Schema esposto in tools/list è generato da qui.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from facturation_mcp.schemas.revenue import InvoiceStatusFilter, QuoteStatusFilter


class _ToolArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")


class RevenueArgs(_ToolArgs):
    """Argomenti di calculate_revenue."""

    year: Optional[int] = Field(None, ge=1, le=9999, description="Année spécifique à analyser")
    start_year: Optional[int] = Field(None, ge=1, le=9999, description="Année de début pour la période")
    end_year: Optional[int] = Field(None, ge=1, le=9999, description="Année de fin pour la période")
    start_date: Optional[str] = Field(None, description="Date de début (YYYY-MM-DD)")
    end_date: Optional[str] = Field(None, description="Date de fin (YYYY-MM-DD)")
    status: InvoiceStatusFilter = Field(
        InvoiceStatusFilter.ALL,
        description="Statut des factures (tous, paye, non_paye); ignoré pour l'encaissé",
    )
    filter_by_payment_date: Optional[bool] = Field(
        None,
        description=(
            "Si true, calcule l'encaissé réel par date de paiement; "
            "si false, le facturé par date de facture"
        ),
    )


class QuotesRevenueArgs(_ToolArgs):
    """Argomenti di calculate_quotes_revenue."""

    year: Optional[int] = Field(None, ge=1, le=9999, description="Année à analyser")
    start_date: Optional[str] = Field(None, description="Date de début (YYYY-MM-DD)")
    end_date: Optional[str] = Field(None, description="Date de fin (YYYY-MM-DD)")
    status: QuoteStatusFilter = Field(
        QuoteStatusFilter.ALL,
        description="Filtre statut: tous | acceptes | en_attente | refuses",
    )


class CollectionPeriodArgs(_ToolArgs):
    """Argomenti di encaissements_periode."""

    start_date: str = Field(..., description="Date de début au format YYYY-MM-DD")
    end_date: Optional[str] = Field(
        None, description="Date de fin au format YYYY-MM-DD (par défaut: aujourd'hui)"
    )


class MonthlyCollectionArgs(_ToolArgs):
    """Argomenti di ventiler_encaissements."""

    year: int = Field(..., ge=1, le=9999, description="Année à ventiler (ex: 2024)")
