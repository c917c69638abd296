"""
Service Layer per i Preventivi
Progetto: Facturation MCP

Somma dei preventivi per data preventivo, con filtro di stato.
Nessun concetto di pagamento parziale: il calcolo è puramente additivo.
"""

import logging
from typing import Optional

from sqlalchemy import distinct, extract, func, select

from facturation_mcp.core.database import Store
from facturation_mcp.models import Quote
from facturation_mcp.schemas.period import Period
from facturation_mcp.schemas.revenue import (
    MonthlyQuotes,
    QuoteStatusFilter,
    QuotesReport,
    QuotesSummary,
)
from facturation_mcp.services.filters import PeriodFilter, quote_status_clause, where_all
from facturation_mcp.services.period import month_name


class QuoteService:
    """Aggregatore dei preventivi."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger(__name__)

    async def compute_quotes_revenue(
        self,
        store: Store,
        period: Period,
        status_filter: QuoteStatusFilter = QuoteStatusFilter.ALL,
    ) -> QuotesReport:
        """
        Calcola totali e ripartizione mensile dei preventivi.

        Args:
            store: Store di sola lettura
            period: Periodo risolto
            status_filter: tous | acceptes | en_attente | refuses

        Returns:
            QuotesReport: Totali del periodo e 12 righe mensili dell'anno di riferimento
        """
        window = PeriodFilter.for_period(period)
        status = quote_status_clause(Quote.status, status_filter)

        summary_stmt = select(
            func.count(Quote.id).label("total_quotes"),
            func.coalesce(func.sum(Quote.total_ttc), 0.0).label("total_ttc"),
            func.coalesce(func.sum(Quote.total_ht), 0.0).label("total_ht"),
            func.coalesce(func.sum(Quote.vat_amount), 0.0).label("total_vat"),
            func.coalesce(func.avg(Quote.total_ttc), 0.0).label("avg_ttc"),
            func.count(distinct(Quote.customer_id)).label("unique_customers"),
        ).where(where_all(window.clause(Quote.quote_date), status))
        row = await store.get(summary_stmt)

        summary = QuotesSummary()
        if row is not None:
            summary = QuotesSummary(
                total_quotes=int(row.total_quotes or 0),
                total_quoted_ttc=float(row.total_ttc or 0),
                total_quoted_ht=float(row.total_ht or 0),
                total_vat_amount=float(row.total_vat or 0),
                avg_quote_amount=float(row.avg_ttc or 0),
                unique_customers=int(row.unique_customers or 0),
            )

        year_window = PeriodFilter.for_year(period.year)
        month = extract("month", Quote.quote_date).label("month")
        monthly_stmt = (
            select(
                month,
                func.count(Quote.id).label("total_quotes"),
                func.coalesce(func.sum(Quote.total_ttc), 0.0).label("total_ttc"),
                func.coalesce(func.sum(Quote.total_ht), 0.0).label("total_ht"),
                func.coalesce(func.sum(Quote.vat_amount), 0.0).label("total_vat"),
            )
            .where(where_all(year_window.clause(Quote.quote_date), status))
            .group_by(month)
            .order_by(month)
        )
        rows = {int(r.month): r for r in await store.all(monthly_stmt)}

        breakdown = []
        for m in range(1, 13):
            r = rows.get(m)
            breakdown.append(
                MonthlyQuotes(
                    month=m,
                    month_name=month_name(m),
                    total_quotes=int(r.total_quotes) if r else 0,
                    total_quoted_ttc=float(r.total_ttc) if r else 0.0,
                    total_quoted_ht=float(r.total_ht) if r else 0.0,
                    total_vat_amount=float(r.total_vat) if r else 0.0,
                )
            )
        summary.monthly_breakdown = breakdown

        self.logger.debug(
            "Preventivi %s → %s (%s): %d",
            period.start_date,
            period.end_date,
            status_filter.value,
            summary.total_quotes,
        )
        return QuotesReport(year=period.year, quotes=summary)
