"""
Main Entry Point - Server MCP
Progetto: Facturation MCP

Configura il logging, apre la cache locale e avvia il ciclo JSON-RPC
su stdin/stdout.
"""

import asyncio
import logging
import sys

from facturation_mcp.core.config import settings
from facturation_mcp.core.database import close_db, get_store, init_db
from facturation_mcp.mcp.server import McpServer
from facturation_mcp.mcp.tools import build_registry

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """
    Configura il logging su stderr.

    stdout trasporta le risposte JSON-RPC e non deve ricevere log.
    """
    logging.basicConfig(
        level=settings.log_level,
        stream=sys.stderr,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


async def run() -> None:
    """
    Ciclo di vita del server.

    - Startup: verifica la connessione alla cache locale
    - Serve: una richiesta per riga fino a EOF
    - Shutdown: chiude le connessioni database
    """
    logger.info("Avvio %s v%s", settings.app_name, settings.app_version)
    await init_db()

    try:
        async with get_store() as store:
            server = McpServer(build_registry(settings=settings), store, settings)
            await server.serve()
    finally:
        logger.info("Arresto server in corso...")
        await close_db()
        logger.info("Server arrestato")


def main() -> None:
    configure_logging()
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        logger.info("Interrotto dall'utente")


if __name__ == "__main__":
    main()
