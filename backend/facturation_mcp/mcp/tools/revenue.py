"""
Strumenti MCP sul fatturato delle fatture
Progetto: Facturation MCP

- calculate_revenue: fatturato o incassato per anno / periodo
- encaissements_periode: incassato tra due date
- ventiler_encaissements: incassato mese per mese per un anno
"""

from datetime import date
from typing import Callable, Optional

from facturation_mcp.core.config import Settings, get_settings
from facturation_mcp.core.database import Store
from facturation_mcp.mcp.tools.base import Tool
from facturation_mcp.schemas.revenue import (
    InvoiceStatusFilter,
    MonthlyCollectionReport,
    RevenueMode,
    RevenueReport,
)
from facturation_mcp.schemas.tool_args import (
    CollectionPeriodArgs,
    MonthlyCollectionArgs,
    RevenueArgs,
)
from facturation_mcp.services.period import optional_date_range, resolve_period
from facturation_mcp.services.revenue_service import RevenueService


def calculate_revenue_tool(
    service: RevenueService,
    settings: Optional[Settings] = None,
    clock: Callable[[], date] = date.today,
) -> Tool:
    settings = settings or get_settings()

    async def handler(args: RevenueArgs, store: Store) -> RevenueReport:
        start_date, end_date = optional_date_range(args.start_date, args.end_date)
        period = resolve_period(
            year=args.year,
            start_date=start_date,
            end_date=end_date,
            start_year=args.start_year,
            end_year=args.end_year,
            today=clock(),
        )
        by_payment_date = (
            args.filter_by_payment_date
            if args.filter_by_payment_date is not None
            else settings.default_filter_by_payment_date
        )
        mode = RevenueMode.COLLECTED if by_payment_date else RevenueMode.INVOICED
        return await service.compute_revenue(store, period, mode, args.status)

    return Tool(
        name="calculate_revenue",
        description=(
            "Calcule les montants facturés ou encaissés (HT/TTC/TVA) par année ou période, "
            "avec ventilation mensuelle. filter_by_payment_date=true (défaut) donne "
            "l'encaissé réel par date de paiement; false donne le facturé par date de facture."
        ),
        args_model=RevenueArgs,
        handler=handler,
    )


def encaissements_periode_tool(
    service: RevenueService,
    clock: Callable[[], date] = date.today,
) -> Tool:
    async def handler(args: CollectionPeriodArgs, store: Store) -> RevenueReport:
        end_date = args.end_date or clock().isoformat()
        period = resolve_period(start_date=args.start_date, end_date=end_date)
        return await service.compute_revenue(
            store, period, RevenueMode.COLLECTED, InvoiceStatusFilter.ALL
        )

    return Tool(
        name="encaissements_periode",
        description=(
            "Calcule l'encaissé (HT/TTC/TVA) sur une période précise (date à date). "
            "Identique à calculate_revenue avec start_date/end_date et filter_by_payment_date=true."
        ),
        args_model=CollectionPeriodArgs,
        handler=handler,
    )


def ventiler_encaissements_tool(service: RevenueService) -> Tool:
    async def handler(args: MonthlyCollectionArgs, store: Store) -> MonthlyCollectionReport:
        period = resolve_period(year=args.year)
        report = await service.compute_revenue(
            store, period, RevenueMode.COLLECTED, InvoiceStatusFilter.ALL
        )
        revenue = report.revenue
        return MonthlyCollectionReport(
            year=report.year,
            total_invoiced_ht=revenue.total_invoiced_ht,
            total_invoiced_ttc=revenue.total_invoiced_ttc,
            total_vat_amount=revenue.total_vat_amount,
            monthly=revenue.monthly_breakdown,
        )

    return Tool(
        name="ventiler_encaissements",
        description=(
            "Ventile les encaissements (HT/TTC/TVA) par mois pour une année "
            "(encaissé réel par date de paiement). Pour du facturé par date de facture, "
            "utilisez calculate_revenue avec filter_by_payment_date=false."
        ),
        args_model=MonthlyCollectionArgs,
        handler=handler,
    )
