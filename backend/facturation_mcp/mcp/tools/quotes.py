"""
Strumento MCP sui preventivi
Progetto: Facturation MCP
"""

from datetime import date
from typing import Callable

from facturation_mcp.core.database import Store
from facturation_mcp.mcp.tools.base import Tool
from facturation_mcp.schemas.revenue import QuotesReport
from facturation_mcp.schemas.tool_args import QuotesRevenueArgs
from facturation_mcp.services.period import optional_date_range, resolve_period
from facturation_mcp.services.quote_service import QuoteService


def calculate_quotes_revenue_tool(
    service: QuoteService,
    clock: Callable[[], date] = date.today,
) -> Tool:
    async def handler(args: QuotesRevenueArgs, store: Store) -> QuotesReport:
        start_date, end_date = optional_date_range(args.start_date, args.end_date)
        period = resolve_period(
            year=args.year,
            start_date=start_date,
            end_date=end_date,
            today=clock(),
        )
        return await service.compute_quotes_revenue(store, period, args.status)

    return Tool(
        name="calculate_quotes_revenue",
        description=(
            "Calcule les montants de devis (HT/TTC/TVA) par année/période en un seul appel. "
            "Utiliser cet outil pour obtenir un total annuel de devis plutôt que "
            "d'additionner des mois."
        ),
        args_model=QuotesRevenueArgs,
        handler=handler,
    )
