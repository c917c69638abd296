"""
Schemas Pydantic
Progetto: Facturation MCP

Esportazione centralizzata degli schemi usati da service e strumenti.
"""

from facturation_mcp.schemas.collection import (
    CollectionEvent,
    CollectionKind,
    Contribution,
    ContributionOrigin,
)
from facturation_mcp.schemas.period import Period
from facturation_mcp.schemas.revenue import (
    InvoiceStatusFilter,
    MonthlyCollectionReport,
    MonthlyQuotes,
    MonthlyRevenue,
    QuoteStatusFilter,
    QuotesReport,
    QuotesSummary,
    RevenueMode,
    RevenueReport,
    RevenueSummary,
)
from facturation_mcp.schemas.tool_args import (
    CollectionPeriodArgs,
    MonthlyCollectionArgs,
    QuotesRevenueArgs,
    RevenueArgs,
)

__all__ = [
    "CollectionEvent",
    "CollectionKind",
    "CollectionPeriodArgs",
    "Contribution",
    "ContributionOrigin",
    "InvoiceStatusFilter",
    "MonthlyCollectionArgs",
    "MonthlyCollectionReport",
    "MonthlyQuotes",
    "MonthlyRevenue",
    "Period",
    "QuoteStatusFilter",
    "QuotesReport",
    "QuotesRevenueArgs",
    "QuotesSummary",
    "RevenueArgs",
    "RevenueMode",
    "RevenueReport",
    "RevenueSummary",
]
