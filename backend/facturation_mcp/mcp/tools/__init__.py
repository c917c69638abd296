"""
Registro degli strumenti MCP
Progetto: Facturation MCP
"""

import logging
from datetime import date
from typing import Callable, Optional

from facturation_mcp.core.config import Settings
from facturation_mcp.mcp.tools.base import Tool, ToolRegistry
from facturation_mcp.mcp.tools.quotes import calculate_quotes_revenue_tool
from facturation_mcp.mcp.tools.revenue import (
    calculate_revenue_tool,
    encaissements_periode_tool,
    ventiler_encaissements_tool,
)
from facturation_mcp.services.quote_service import QuoteService
from facturation_mcp.services.revenue_service import RevenueService


def build_registry(
    settings: Optional[Settings] = None,
    logger: Optional[logging.Logger] = None,
    clock: Callable[[], date] = date.today,
) -> ToolRegistry:
    """
    Crea il registro con tutti gli strumenti disponibili.

    Args:
        settings: Impostazioni (default: get_settings())
        logger: Logger iniettato negli aggregatori
        clock: Sorgente della data odierna
    """
    revenue_service = RevenueService(logger=logger)
    quote_service = QuoteService(logger=logger)

    return ToolRegistry(
        [
            calculate_revenue_tool(revenue_service, settings=settings, clock=clock),
            calculate_quotes_revenue_tool(quote_service, clock=clock),
            encaissements_periode_tool(revenue_service, clock=clock),
            ventiler_encaissements_tool(revenue_service),
        ]
    )


__all__ = ["Tool", "ToolRegistry", "build_registry"]
