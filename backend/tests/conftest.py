"""
Pytest configuration and fixtures per gli aggregatori di fatturato.

Ogni test riceve una cache SQLite temporanea su file, creata dai
metadati ORM, e uno Store aperto su di essa.
"""

import itertools
from datetime import date, datetime
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from facturation_mcp.core.config import Settings
from facturation_mcp.core.database import Store, get_store
from facturation_mcp.models import (
    Base,
    Customer,
    Invoice,
    InvoiceStatusCode,
    Payment,
    PaymentSource,
    Quote,
    QuoteStatusCode,
)


# ============================================================
# Fixtures per il database di test
# ============================================================


@pytest_asyncio.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Engine su un file SQLite temporaneo con lo schema della cache."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'cache.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def store(session_factory) -> AsyncGenerator[Store, None]:
    """Store di sola lettura, come quello aperto dal server."""
    async with get_store(session_factory) as s:
        yield s


@pytest.fixture
def seed(session_factory) -> Callable:
    """
    Scrive record nella cache con una sessione separata.

    Simula la sincronizzazione: gli aggregatori non scrivono mai.
    """
    async def _seed(*records) -> None:
        async with session_factory() as session:
            session.add_all(records)
            await session.commit()

    return _seed


@pytest.fixture
def test_settings() -> Settings:
    return Settings(database_url="sqlite+aiosqlite:///:memory:", app_env="testing")


# ============================================================
# Factory per i modelli della cache
# ============================================================


_ids = itertools.count(1)


@pytest.fixture
def make_customer() -> Callable[..., Customer]:
    def _make(**kwargs) -> Customer:
        pk = kwargs.pop("id", next(_ids))
        return Customer(
            id=pk,
            facturation_id=kwargs.pop("facturation_id", 50000 + pk),
            name=kwargs.pop("name", f"Client {pk}"),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_invoice() -> Callable[..., Invoice]:
    """
    Crea una fattura con importi coerenti (1000 HT + 200 TVA = 1200 TTC).

    Di default non pagata, emessa il 10/01/2024, senza saldo residuo.
    """
    def _make(**kwargs) -> Invoice:
        pk = kwargs.pop("id", next(_ids))
        values = {
            "facturation_id": 10000 + pk,
            "invoice_number": f"F-{pk:05d}",
            "invoice_date": date(2024, 1, 10),
            "status": InvoiceStatusCode.UNPAID,
            "total_ht": 1000.0,
            "vat_amount": 200.0,
            "total_ttc": 1200.0,
            "balance": 0,
        }
        values.update(kwargs)
        return Invoice(id=pk, **values)

    return _make


@pytest.fixture
def make_payment() -> Callable[..., Payment]:
    def _make(invoice_id: int, **kwargs) -> Payment:
        pk = kwargs.pop("id", next(_ids))
        values = {
            "payment_date": date(2024, 1, 15),
            "amount_ht": 1000.0,
            "amount_vat": 200.0,
            "amount_ttc": 1200.0,
            "source": PaymentSource.API.value,
        }
        values.update(kwargs)
        return Payment(id=pk, invoice_id=invoice_id, **values)

    return _make


@pytest.fixture
def make_quote() -> Callable[..., Quote]:
    def _make(**kwargs) -> Quote:
        pk = kwargs.pop("id", next(_ids))
        values = {
            "facturation_id": 20000 + pk,
            "quote_number": f"D-{pk:05d}",
            "quote_date": date(2024, 1, 10),
            "status": QuoteStatusCode.PENDING,
            "total_ht": 500.0,
            "vat_amount": 100.0,
            "total_ttc": 600.0,
        }
        values.update(kwargs)
        return Quote(id=pk, **values)

    return _make


# ============================================================
# Mock fattura (senza database) per le regole di incasso
# ============================================================


class MockInvoice:
    """Mock di una riga fattura letta dalla cache."""
    def __init__(self, **kwargs):
        self.id = kwargs.get('id', 1)
        self.customer_id = kwargs.get('customer_id', None)
        self.status = kwargs.get('status', 0)
        self.paid_on = kwargs.get('paid_on', None)
        self.payment_date = kwargs.get('payment_date', None)
        self.updated_at = kwargs.get('updated_at', None)
        self.balance = kwargs.get('balance', 0)
        self.total_ttc = kwargs.get('total_ttc', 1200.0)
        self.total_ht = kwargs.get('total_ht', 1000.0)
        self.vat_amount = kwargs.get('vat_amount', 200.0)


@pytest.fixture
def mock_invoice_factory():
    """Restituisce la classe MockInvoice per costruire righe ad hoc."""
    return MockInvoice


@pytest.fixture
def mock_paid_invoice():
    """Fattura pagata il 15/03/2024 (Scenario A)."""
    return MockInvoice(id=1, status=1, paid_on=date(2024, 3, 15))


@pytest.fixture
def mock_partial_invoice():
    """Fattura con 400 di residuo su 1000, pagamento il 01/05/2024 (Scenario B)."""
    return MockInvoice(
        id=2,
        status=0,
        balance=400,
        payment_date=date(2024, 5, 1),
        total_ttc=1000.0,
        total_ht=800.0,
        vat_amount=200.0,
        updated_at=datetime(2024, 5, 2, 9, 30),
    )
