"""
Service Layer per il calcolo del fatturato e dell'incassato
Progetto: Facturation MCP

Due modalità:
- INVOICED (facturé): somma delle fatture emesse nel periodo, per data
  fattura, con filtro di stato opzionale.
- COLLECTED (encaissé): importi effettivamente incassati nel periodo.
  Le righe del ledger pagamenti fanno fede; le fatture senza righe di
  ledger nella finestra sono stimate con le regole di incasso derivato
  (services.collection_rules). Se il ledger è vuoto nella finestra di
  confronto, il calcolo è interamente derivato.

La ripartizione mensile copre sempre i 12 mesi dell'anno di riferimento.
"""

import logging
from typing import Iterable, Optional

from sqlalchemy import distinct, extract, func, or_, select

from facturation_mcp.core.database import Store
from facturation_mcp.models import Invoice, InvoiceStatusCode, Payment
from facturation_mcp.schemas.collection import Contribution
from facturation_mcp.schemas.period import Period
from facturation_mcp.schemas.revenue import (
    InvoiceStatusFilter,
    MonthlyRevenue,
    RevenueMode,
    RevenueReport,
    RevenueSummary,
)
from facturation_mcp.services.collection_rules import (
    classify,
    contribution_from_event,
    contribution_from_payment,
)
from facturation_mcp.services.filters import (
    PeriodFilter,
    invoice_status_clause,
    where_all,
)
from facturation_mcp.services.period import month_name


def empty_monthly_breakdown() -> list[MonthlyRevenue]:
    """Dodici righe a zero, da gennaio a dicembre."""
    return [MonthlyRevenue(month=m, month_name=month_name(m)) for m in range(1, 13)]


def summarize_contributions(contributions: Iterable[Contribution]) -> RevenueSummary:
    """Riduce i contributi ai totali del periodo (senza ripartizione mensile)."""
    contributions = list(contributions)
    invoice_ids = {c.invoice_id for c in contributions}
    customer_ids = {c.customer_id for c in contributions if c.customer_id is not None}

    total_ttc = sum(c.amount_ttc for c in contributions)
    total_invoices = len(invoice_ids)

    return RevenueSummary(
        total_invoices=total_invoices,
        total_invoiced_ttc=total_ttc,
        total_invoiced_ht=sum(c.amount_ht for c in contributions),
        total_vat_amount=sum(c.amount_vat for c in contributions),
        avg_invoice_amount=total_ttc / total_invoices if total_invoices else 0.0,
        unique_customers=len(customer_ids),
    )


def monthly_from_contributions(contributions: Iterable[Contribution]) -> list[MonthlyRevenue]:
    """Ripartizione mensile dei contributi, mesi senza attività a zero."""
    by_month: dict[int, list[Contribution]] = {}
    for c in contributions:
        by_month.setdefault(c.event_date.month, []).append(c)

    breakdown = []
    for month in range(1, 13):
        items = by_month.get(month, [])
        breakdown.append(
            MonthlyRevenue(
                month=month,
                month_name=month_name(month),
                total_invoices=len({c.invoice_id for c in items}),
                total_invoiced_ttc=sum(c.amount_ttc for c in items),
                total_invoiced_ht=sum(c.amount_ht for c in items),
                total_vat_amount=sum(c.amount_vat for c in items),
            )
        )
    return breakdown


class RevenueService:
    """
    Aggregatore del fatturato.

    Non scrive mai nella cache: riceve uno Store e legge.
    Il logger è iniettabile; di default usa quello del modulo.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger(__name__)

    async def compute_revenue(
        self,
        store: Store,
        period: Period,
        mode: RevenueMode = RevenueMode.COLLECTED,
        status_filter: InvoiceStatusFilter = InvoiceStatusFilter.ALL,
    ) -> RevenueReport:
        """
        Calcola totali e ripartizione mensile.

        Args:
            store: Store di sola lettura
            period: Periodo risolto
            mode: INVOICED (per data fattura) o COLLECTED (per data di incasso)
            status_filter: Filtro stato, applicato solo in modalità INVOICED

        Returns:
            RevenueReport: Report con totali e 12 righe mensili

        Raises:
            StoreUnavailableError: Errore di accesso alla cache
            ComputationInconsistencyError: Dati incoerenti in una fattura
        """
        period_filter = PeriodFilter.for_period(period)
        year_filter = PeriodFilter.for_year(period.year)

        if mode == RevenueMode.INVOICED:
            summary = await self._invoiced_summary(store, period_filter, status_filter)
            summary.monthly_breakdown = await self._invoiced_monthly(
                store, year_filter, status_filter
            )
        else:
            window_start, window_end = period.comparison_window
            ledger_rows = await store.count_payments_between(window_start, window_end)
            use_ledger = ledger_rows > 0
            self.logger.debug(
                "Incassato %s → %s: %s (%d righe ledger in %s → %s)",
                period.start_date,
                period.end_date,
                "ledger + derivato" if use_ledger else "solo derivato",
                ledger_rows,
                window_start,
                window_end,
            )

            ledger_filter = PeriodFilter(start=window_start, end=window_end)
            period_contributions = await self._collected_contributions(
                store, period_filter, use_ledger, ledger_filter
            )
            if period.covers_anchor_year:
                year_contributions = period_contributions
            else:
                year_contributions = await self._collected_contributions(
                    store, year_filter, use_ledger, ledger_filter
                )

            summary = summarize_contributions(period_contributions)
            summary.monthly_breakdown = monthly_from_contributions(year_contributions)

        return RevenueReport(year=period.year, query_type=mode, revenue=summary)

    # ------------------------------------------------------------
    # Fatturato (per data fattura)
    # ------------------------------------------------------------

    async def _invoiced_summary(
        self,
        store: Store,
        window: PeriodFilter,
        status_filter: InvoiceStatusFilter,
    ) -> RevenueSummary:
        stmt = select(
            func.count(Invoice.id).label("total_invoices"),
            func.coalesce(func.sum(Invoice.total_ttc), 0.0).label("total_ttc"),
            func.coalesce(func.sum(Invoice.total_ht), 0.0).label("total_ht"),
            func.coalesce(func.sum(Invoice.vat_amount), 0.0).label("total_vat"),
            func.coalesce(func.avg(Invoice.total_ttc), 0.0).label("avg_ttc"),
            func.count(distinct(Invoice.customer_id)).label("unique_customers"),
        ).where(
            where_all(
                window.clause(Invoice.invoice_date),
                invoice_status_clause(Invoice.status, status_filter),
            )
        )
        row = await store.get(stmt)
        if row is None:
            return RevenueSummary()

        return RevenueSummary(
            total_invoices=int(row.total_invoices or 0),
            total_invoiced_ttc=float(row.total_ttc or 0),
            total_invoiced_ht=float(row.total_ht or 0),
            total_vat_amount=float(row.total_vat or 0),
            avg_invoice_amount=float(row.avg_ttc or 0),
            unique_customers=int(row.unique_customers or 0),
        )

    async def _invoiced_monthly(
        self,
        store: Store,
        window: PeriodFilter,
        status_filter: InvoiceStatusFilter,
    ) -> list[MonthlyRevenue]:
        month = extract("month", Invoice.invoice_date).label("month")
        stmt = (
            select(
                month,
                func.count(Invoice.id).label("total_invoices"),
                func.coalesce(func.sum(Invoice.total_ttc), 0.0).label("total_ttc"),
                func.coalesce(func.sum(Invoice.total_ht), 0.0).label("total_ht"),
                func.coalesce(func.sum(Invoice.vat_amount), 0.0).label("total_vat"),
            )
            .where(
                where_all(
                    window.clause(Invoice.invoice_date),
                    invoice_status_clause(Invoice.status, status_filter),
                )
            )
            .group_by(month)
            .order_by(month)
        )
        rows = await store.all(stmt)

        breakdown = empty_monthly_breakdown()
        for row in rows:
            entry = breakdown[int(row.month) - 1]
            entry.total_invoices = int(row.total_invoices or 0)
            entry.total_invoiced_ttc = float(row.total_ttc or 0)
            entry.total_invoiced_ht = float(row.total_ht or 0)
            entry.total_vat_amount = float(row.total_vat or 0)
        return breakdown

    # ------------------------------------------------------------
    # Incassato (per data di pagamento)
    # ------------------------------------------------------------

    async def _collected_contributions(
        self,
        store: Store,
        window: PeriodFilter,
        use_ledger: bool,
        ledger_window: Optional[PeriodFilter] = None,
    ) -> list[Contribution]:
        """
        Contributi all'incassato della finestra.

        Le righe di ledger sono sommate se cadono in window. Una fattura con
        almeno una riga di ledger in ledger_window (default: window) è contata
        solo tramite il ledger ed esclusa dal calcolo derivato.
        """
        contributions: list[Contribution] = []

        candidates = select(
            Invoice.id,
            Invoice.customer_id,
            Invoice.status,
            Invoice.paid_on,
            Invoice.payment_date,
            Invoice.updated_at,
            Invoice.balance,
            Invoice.total_ttc,
            Invoice.total_ht,
            Invoice.vat_amount,
        ).where(
            or_(
                where_all(
                    Invoice.status == InvoiceStatusCode.PAID,
                    window.clause(Invoice.paid_on),
                ),
                window.clause(Invoice.payment_date),
                window.datetime_clause(Invoice.updated_at),
            )
        )

        if use_ledger:
            payments = await store.all(
                select(
                    Payment.id,
                    Payment.invoice_id,
                    Payment.payment_date,
                    Payment.amount_ttc,
                    Payment.amount_ht,
                    Payment.amount_vat,
                    Invoice.customer_id,
                )
                .outerjoin(Invoice, Invoice.id == Payment.invoice_id)
                .where(window.clause(Payment.payment_date))
                .order_by(Payment.payment_date, Payment.id)
            )
            contributions.extend(contribution_from_payment(p) for p in payments)

            ledger_invoices = select(Payment.invoice_id).where(
                (ledger_window or window).clause(Payment.payment_date)
            )
            candidates = candidates.where(Invoice.id.not_in(ledger_invoices))

        rows = await store.all(candidates.order_by(Invoice.id))
        derived = 0
        for row in rows:
            event = classify(row, window.start, window.end)
            contribution = contribution_from_event(row, event)
            if contribution is not None:
                contributions.append(contribution)
                derived += 1

        self.logger.debug(
            "Finestra %s → %s: %d contributi (%d derivati)",
            window.start,
            window.end,
            len(contributions),
            derived,
        )
        return contributions
