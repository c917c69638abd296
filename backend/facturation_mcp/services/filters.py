"""
Composizione dei filtri SQL
Progetto: Facturation MCP

Filtri di periodo e di stato compilati in predicati SQLAlchemy
parametrizzati, al posto della concatenazione di clausole SQL.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import and_, true
from sqlalchemy.sql.elements import ColumnElement

from facturation_mcp.schemas.period import Period
from facturation_mcp.schemas.revenue import InvoiceStatusFilter, QuoteStatusFilter


class PeriodFilter(BaseModel):
    """Finestra di date inclusiva [start, end]."""

    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @classmethod
    def for_period(cls, period: Period) -> "PeriodFilter":
        return cls(start=period.start_date, end=period.end_date)

    @classmethod
    def for_year(cls, year: int) -> "PeriodFilter":
        return cls(start=date(year, 1, 1), end=date(year, 12, 31))

    def contains(self, day: Optional[date]) -> bool:
        return day is not None and self.start <= day <= self.end

    def clause(self, column) -> ColumnElement[bool]:
        """Predicato per una colonna Date."""
        return column.between(self.start, self.end)

    def datetime_clause(self, column) -> ColumnElement[bool]:
        """Predicato per una colonna DateTime (giorno di fine incluso)."""
        return and_(
            column >= datetime.combine(self.start, time.min),
            column < datetime.combine(self.end + timedelta(days=1), time.min),
        )


def status_clause(column, status_code: Optional[int]) -> Optional[ColumnElement[bool]]:
    """Predicato di stato, None se il filtro non restringe."""
    if status_code is None:
        return None
    return column == status_code


def invoice_status_clause(column, status_filter: InvoiceStatusFilter):
    return status_clause(column, status_filter.status_code)


def quote_status_clause(column, status_filter: QuoteStatusFilter):
    return status_clause(column, status_filter.status_code)


def where_all(*clauses: Optional[ColumnElement[bool]]) -> ColumnElement[bool]:
    """AND dei predicati non nulli (TRUE se non ce ne sono)."""
    active = [c for c in clauses if c is not None]
    if not active:
        return true()
    return and_(*active)
