"""
Configurazione Database - SQLAlchemy 2.0 Async
Progetto: Facturation MCP

Definisce engine, session factory e lo Store di sola lettura usato
dagli aggregatori.
"""

import logging
from contextlib import asynccontextmanager
from datetime import date
from pathlib import Path
from typing import Any, AsyncIterator, Optional

from sqlalchemy import Row, func, select, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.sql.expression import Executable

from facturation_mcp.core.config import settings
from facturation_mcp.core.exceptions import StoreUnavailableError
from facturation_mcp.models import Payment

# Logger per questo modulo
logger = logging.getLogger(__name__)

# ------------------------------------------------------------
# Engine Async SQLAlchemy 2.0
# ------------------------------------------------------------
engine: AsyncEngine = create_async_engine(
    settings.database_url,
    echo=settings.db_echo,  # Log query in modalità debug
    pool_pre_ping=True,
)


# ------------------------------------------------------------
# Session Factory
# ------------------------------------------------------------
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


class Store:
    """
    Accesso in sola lettura alla cache locale.

    Espone le primitive usate dagli aggregatori:
    - get(stmt): prima riga o None
    - all(stmt): tutte le righe
    - scalar(stmt): primo valore della prima riga
    - count_payments_between(start, end): righe del ledger nella finestra
    - release(): termina la transazione di lettura tra una chiamata e l'altra

    Una sola sessione per processo, riutilizzata da tutte le chiamate.
    Gli errori del driver diventano StoreUnavailableError.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, stmt: Executable) -> Optional[Row]:
        result = await self._execute(stmt)
        return result.first()

    async def all(self, stmt: Executable) -> list[Row]:
        result = await self._execute(stmt)
        return list(result.all())

    async def scalar(self, stmt: Executable) -> Any:
        result = await self._execute(stmt)
        return result.scalar()

    async def count_payments_between(self, start: date, end: date) -> int:
        """Conta le righe del ledger con payment_date in [start, end]."""
        stmt = select(func.count(Payment.id)).where(
            Payment.payment_date.between(start, end)
        )
        return int(await self.scalar(stmt) or 0)

    async def release(self) -> None:
        """Chiude la transazione di lettura aperta, per vedere le sincronizzazioni successive."""
        await self._session.rollback()

    async def _execute(self, stmt: Executable):
        try:
            return await self._session.execute(stmt)
        except DBAPIError as e:
            logger.error("Errore di accesso al database: %s", e)
            raise StoreUnavailableError(
                f"Database locale non disponibile: {e.orig}"
            ) from e


@asynccontextmanager
async def get_store(
    session_factory: async_sessionmaker[AsyncSession] = AsyncSessionLocal,
) -> AsyncIterator[Store]:
    """
    Apre la sessione del processo e la chiude al termine.

    Yields:
        Store: Store di sola lettura

    Example:
        async with get_store() as store:
            report = await RevenueService().compute_revenue(store, period)
    """
    async with session_factory() as session:
        try:
            yield Store(session)
        finally:
            await session.close()


def ensure_sqlite_directory(database_url: str) -> None:
    """Crea la cartella del file SQLite se non esiste."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return
    if not url.database or url.database == ":memory:":
        return
    Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)


async def init_db() -> None:
    """
    Inizializza la connessione al database.

    Esegue un test di connessione per verificare
    che la cache locale sia raggiungibile.
    """
    ensure_sqlite_directory(settings.database_url)
    try:
        async with engine.begin() as conn:
            # Test connessione
            await conn.execute(text("SELECT 1"))
        logger.info("Connessione al database stabilita con successo")
    except Exception as e:
        logger.error("Errore connessione database: %s", e)
        raise


async def close_db() -> None:
    """
    Chiude le connessioni al database.

    Da chiamare durante lo shutdown dell'applicazione.
    """
    await engine.dispose()
    logger.info("Connessioni database chiuse")
