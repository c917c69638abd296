"""
Tests per gli strumenti MCP e il registro.

Tool.execute non solleva mai: ogni esito è un envelope JSON.
"""

import json
from datetime import date

import pytest
from pydantic import BaseModel

from facturation_mcp.core.config import Settings
from facturation_mcp.core.exceptions import ToolNotFoundError
from facturation_mcp.mcp.tools import Tool, ToolRegistry, build_registry
from facturation_mcp.mcp.tools.base import INTERNAL_ERROR_MESSAGE

TODAY = date(2024, 6, 30)


@pytest.fixture
def registry():
    return build_registry(clock=lambda: TODAY)


@pytest.fixture
def paid_invoices(make_invoice):
    return [
        make_invoice(status=1, paid_on=date(2024, 3, 15), invoice_date=date(2024, 3, 1)),
        make_invoice(
            balance=400,
            payment_date=date(2024, 5, 1),
            total_ttc=1000.0,
            total_ht=800.0,
            vat_amount=200.0,
            invoice_date=date(2023, 12, 1),
        ),
    ]


# ============================================================
# Tests per il registro
# ============================================================


class TestRegistry:
    """Tests per ToolRegistry e tools/list."""

    def test_strumenti_registrati_in_ordine(self, registry):
        assert registry.names == [
            "calculate_revenue",
            "calculate_quotes_revenue",
            "encaissements_periode",
            "ventiler_encaissements",
        ]
        assert len(registry) == 4
        assert "calculate_revenue" in registry

    def test_strumento_sconosciuto(self, registry):
        with pytest.raises(ToolNotFoundError):
            registry.get("delete_everything")

    def test_registrazione_duplicata(self, registry):
        with pytest.raises(ValueError):
            registry.register(registry.get("calculate_revenue"))

    def test_describe_input_schema(self, registry):
        tools = {t["name"]: t for t in registry.describe()}

        revenue_schema = tools["calculate_revenue"]["inputSchema"]
        assert revenue_schema["type"] == "object"
        assert revenue_schema["required"] == []
        assert {"year", "start_date", "end_date", "status", "filter_by_payment_date"} <= set(
            revenue_schema["properties"]
        )
        assert tools["encaissements_periode"]["inputSchema"]["required"] == ["start_date"]
        assert tools["ventiler_encaissements"]["inputSchema"]["required"] == ["year"]
        assert all(t["description"] for t in tools.values())

    def test_describe_serializzabile(self, registry):
        json.dumps(registry.describe())


# ============================================================
# Tests per calculate_revenue
# ============================================================


class TestCalculateRevenueTool:
    """Tests per lo strumento calculate_revenue."""

    @pytest.mark.asyncio
    async def test_incassato_di_default(self, registry, store, seed, paid_invoices):
        await seed(*paid_invoices)

        envelope = await registry.get("calculate_revenue").execute({"year": 2024}, store)

        assert envelope["success"] is True
        data = envelope["data"]
        assert data["year"] == 2024
        assert data["query_type"] == "paid"
        assert data["revenue"]["total_invoiced_ttc"] == pytest.approx(1800.0)
        assert len(data["revenue"]["monthly_breakdown"]) == 12

    @pytest.mark.asyncio
    async def test_fatturato_per_data_fattura(self, registry, store, seed, paid_invoices):
        await seed(*paid_invoices)

        envelope = await registry.get("calculate_revenue").execute(
            {"year": 2024, "filter_by_payment_date": False, "status": "tous"}, store
        )

        assert envelope["data"]["query_type"] == "invoiced"
        assert envelope["data"]["revenue"]["total_invoiced_ttc"] == 1200.0

    @pytest.mark.asyncio
    async def test_default_da_impostazioni(self, store, seed, paid_invoices):
        await seed(*paid_invoices)
        settings = Settings(default_filter_by_payment_date=False)
        registry = build_registry(settings=settings, clock=lambda: TODAY)

        envelope = await registry.get("calculate_revenue").execute({"year": 2024}, store)

        assert envelope["data"]["query_type"] == "invoiced"

    @pytest.mark.asyncio
    async def test_anno_corrente_di_default(self, registry, store):
        envelope = await registry.get("calculate_revenue").execute(None, store)

        assert envelope["success"] is True
        assert envelope["data"]["year"] == TODAY.year

    @pytest.mark.asyncio
    async def test_periodo_invertito(self, registry, store):
        envelope = await registry.get("calculate_revenue").execute(
            {"start_date": "2024-06-30", "end_date": "2024-01-01"}, store
        )

        assert envelope["success"] is False
        assert envelope["error_code"] == "INVALID_PERIOD"
        assert "data" not in envelope

    @pytest.mark.asyncio
    async def test_data_malformata(self, registry, store):
        envelope = await registry.get("calculate_revenue").execute(
            {"start_date": "2024-02-30", "end_date": "2024-03-31"}, store
        )

        assert envelope["success"] is False
        assert envelope["error_code"] == "INVALID_PERIOD"

    @pytest.mark.asyncio
    async def test_solo_una_data(self, registry, store):
        envelope = await registry.get("calculate_revenue").execute(
            {"start_date": "2024-01-01"}, store
        )

        assert envelope["success"] is False
        assert envelope["error_code"] == "INVALID_ARGUMENT"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "dates",
        [
            {"start_date": "2024-03-01", "end_date": ""},
            {"start_date": "", "end_date": "2024-03-31"},
            {"start_date": "", "end_date": ""},
        ],
    )
    async def test_data_vuota_ricade_sull_anno(self, registry, store, seed, paid_invoices, dates):
        """Test stringa vuota in start_date/end_date: si usa year."""
        await seed(*paid_invoices)

        envelope = await registry.get("calculate_revenue").execute({"year": 2024, **dates}, store)

        assert envelope["success"] is True
        assert envelope["data"]["year"] == 2024
        assert envelope["data"]["revenue"]["total_invoiced_ttc"] == pytest.approx(1800.0)

    @pytest.mark.asyncio
    async def test_data_vuota_senza_anno_usa_anno_corrente(self, registry, store):
        envelope = await registry.get("calculate_revenue").execute(
            {"start_date": "2024-01-01", "end_date": ""}, store
        )

        assert envelope["success"] is True
        assert envelope["data"]["year"] == TODAY.year

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "args",
        [
            {"year": "duemila"},
            {"status": "annullate"},
            {"filter_by_payment_date": "forse"},
            ["2024"],
        ],
    )
    async def test_argomenti_non_validi(self, registry, store, args):
        envelope = await registry.get("calculate_revenue").execute(args, store)

        assert envelope["success"] is False
        assert envelope["error_code"] == "INVALID_ARGUMENT"
        assert envelope["error"]


# ============================================================
# Tests per gli altri strumenti
# ============================================================


class TestCollectionTools:
    """Tests per encaissements_periode e ventiler_encaissements."""

    @pytest.mark.asyncio
    async def test_encaissements_periode_fine_oggi(self, registry, store, seed, paid_invoices):
        """Test end_date assente → data odierna (30/06/2024)."""
        await seed(*paid_invoices)

        envelope = await registry.get("encaissements_periode").execute(
            {"start_date": "2024-04-01"}, store
        )

        assert envelope["success"] is True
        assert envelope["data"]["query_type"] == "paid"
        assert envelope["data"]["revenue"]["total_invoiced_ttc"] == pytest.approx(600.0)

    @pytest.mark.asyncio
    async def test_encaissements_periode_senza_start_date(self, registry, store):
        envelope = await registry.get("encaissements_periode").execute({}, store)

        assert envelope["success"] is False
        assert envelope["error_code"] == "INVALID_ARGUMENT"

    @pytest.mark.asyncio
    async def test_ventiler_encaissements(self, registry, store, seed, paid_invoices):
        await seed(*paid_invoices)

        envelope = await registry.get("ventiler_encaissements").execute({"year": 2024}, store)

        data = envelope["data"]
        assert data["query_type"] == "paid_monthly"
        assert data["total_invoiced_ttc"] == pytest.approx(1800.0)
        assert [m["month"] for m in data["monthly"]] == list(range(1, 13))
        assert data["monthly"][2]["total_invoiced_ttc"] == 1200.0
        assert data["monthly"][4]["total_invoiced_ttc"] == pytest.approx(600.0)

    @pytest.mark.asyncio
    async def test_quotes_data_vuota_ricade_sull_anno(self, registry, store, seed, make_quote):
        await seed(make_quote(quote_date=date(2023, 4, 4)))

        envelope = await registry.get("calculate_quotes_revenue").execute(
            {"year": 2023, "start_date": "", "end_date": "2023-12-31"}, store
        )

        assert envelope["data"]["year"] == 2023
        assert envelope["data"]["quotes"]["total_quotes"] == 1

    @pytest.mark.asyncio
    async def test_calculate_quotes_revenue(self, registry, store, seed, make_quote):
        await seed(make_quote(quote_date=date(2024, 4, 4), status=1))

        envelope = await registry.get("calculate_quotes_revenue").execute(
            {"year": 2024, "status": "acceptes"}, store
        )

        assert envelope["data"]["query_type"] == "quotes"
        assert envelope["data"]["quotes"]["total_quoted_ttc"] == 600.0


# ============================================================
# Tests per il confine degli errori
# ============================================================


class _NoArgs(BaseModel):
    pass


class TestToolBoundary:
    """Tests per la conversione delle eccezioni in envelope."""

    @pytest.mark.asyncio
    async def test_eccezione_imprevista(self, store):
        async def broken(args, store):
            raise RuntimeError("boom")

        tool = Tool("broken", "Strumento di test", _NoArgs, broken)
        envelope = await tool.execute({}, store)

        assert envelope == {
            "success": False,
            "error": INTERNAL_ERROR_MESSAGE,
            "error_code": "INTERNAL_ERROR",
        }

    def test_registro_vuoto(self):
        registry = ToolRegistry()

        assert len(registry) == 0
        assert registry.describe() == []
