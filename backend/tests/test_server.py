"""
Tests per il dispatcher JSON-RPC (McpServer).
"""

import io
import json
from datetime import date

import pytest

from facturation_mcp.mcp.server import (
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    McpServer,
)
from facturation_mcp.mcp.tools import build_registry


@pytest.fixture
def server(store, test_settings):
    registry = build_registry(settings=test_settings, clock=lambda: date(2024, 6, 30))
    return McpServer(registry, store, test_settings)


def tool_payload(response):
    """Envelope dello strumento contenuto in result.content[0].text."""
    content = response["result"]["content"]
    assert content[0]["type"] == "text"
    return json.loads(content[0]["text"])


class TestProtocol:
    """Tests per initialize, tools/list e metodi sconosciuti."""

    @pytest.mark.asyncio
    async def test_initialize(self, server, test_settings):
        response = await server.handle_request(
            {"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}}
        )

        assert response["id"] == 1
        result = response["result"]
        assert result["protocolVersion"] == test_settings.mcp_protocol_version
        assert result["serverInfo"] == {
            "name": test_settings.app_name,
            "version": test_settings.app_version,
        }
        assert result["capabilities"] == {"tools": {}}

    @pytest.mark.asyncio
    async def test_tools_list(self, server):
        response = await server.handle_request({"jsonrpc": "2.0", "id": 2, "method": "tools/list"})

        names = [tool["name"] for tool in response["result"]["tools"]]
        assert names == [
            "calculate_revenue",
            "calculate_quotes_revenue",
            "encaissements_periode",
            "ventiler_encaissements",
        ]
        assert all("inputSchema" in tool for tool in response["result"]["tools"])

    @pytest.mark.asyncio
    async def test_ping(self, server):
        response = await server.handle_request({"jsonrpc": "2.0", "id": 3, "method": "ping"})
        assert response["result"] == {}

    @pytest.mark.asyncio
    async def test_metodo_sconosciuto(self, server):
        response = await server.handle_request({"jsonrpc": "2.0", "id": 4, "method": "resources/list"})

        assert response["error"]["code"] == METHOD_NOT_FOUND
        assert "resources/list" in response["error"]["message"]

    @pytest.mark.asyncio
    async def test_notifica_senza_risposta(self, server):
        """Test richieste senza id: nessuna risposta."""
        assert await server.handle_request(
            {"jsonrpc": "2.0", "method": "notifications/initialized"}
        ) is None
        assert await server.handle_request({"jsonrpc": "2.0", "method": "tools/list"}) is None

    @pytest.mark.asyncio
    async def test_richiesta_non_valida(self, server):
        response = await server.handle_request({"jsonrpc": "2.0", "id": 5})
        assert response["error"]["code"] == INVALID_REQUEST

    @pytest.mark.asyncio
    async def test_json_non_valido(self, server):
        response = await server.handle_line("{not json")

        assert response["id"] is None
        assert response["error"]["code"] == PARSE_ERROR


class TestToolsCall:
    """Tests per tools/call."""

    @pytest.mark.asyncio
    async def test_chiamata_strumento(self, server, seed, make_invoice):
        await seed(make_invoice(status=1, paid_on=date(2024, 3, 15)))

        response = await server.handle_request(
            {
                "jsonrpc": "2.0",
                "id": 10,
                "method": "tools/call",
                "params": {"name": "calculate_revenue", "arguments": {"year": 2024}},
            }
        )

        payload = tool_payload(response)
        assert payload["success"] is True
        assert payload["data"]["revenue"]["monthly_breakdown"][2]["total_invoiced_ttc"] == 1200.0
        assert payload["data"]["revenue"]["monthly_breakdown"][2]["month_name"] == "Mars"

    @pytest.mark.asyncio
    async def test_errore_strumento_nel_contenuto(self, server):
        """Test errore di dominio: envelope success=false, non errore di protocollo."""
        response = await server.handle_request(
            {
                "jsonrpc": "2.0",
                "id": 11,
                "method": "tools/call",
                "params": {
                    "name": "calculate_revenue",
                    "arguments": {"start_date": "2024-12-31", "end_date": "2024-01-01"},
                },
            }
        )

        assert "error" not in response
        payload = tool_payload(response)
        assert payload["success"] is False
        assert payload["error_code"] == "INVALID_PERIOD"

    @pytest.mark.asyncio
    async def test_strumento_sconosciuto(self, server):
        response = await server.handle_request(
            {"jsonrpc": "2.0", "id": 12, "method": "tools/call", "params": {"name": "nope"}}
        )

        assert response["error"]["code"] == METHOD_NOT_FOUND

    @pytest.mark.asyncio
    async def test_output_identico_tra_chiamate(self, server, seed, make_invoice):
        await seed(make_invoice(balance=250, payment_date=date(2024, 2, 2)))
        request = {
            "jsonrpc": "2.0",
            "id": 13,
            "method": "tools/call",
            "params": {"name": "ventiler_encaissements", "arguments": {"year": 2024}},
        }

        first = await server.handle_request(request)
        second = await server.handle_request(request)

        assert first["result"]["content"][0]["text"] == second["result"]["content"][0]["text"]


class TestServeLoop:
    """Tests per il ciclo riga per riga su stream."""

    @pytest.mark.asyncio
    async def test_una_risposta_per_richiesta(self, server):
        lines = [
            json.dumps({"jsonrpc": "2.0", "id": 1, "method": "initialize"}),
            json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"}),
            "",
            "garbage",
            json.dumps({"jsonrpc": "2.0", "id": 2, "method": "tools/list"}),
        ]
        input_stream = io.StringIO("\n".join(lines) + "\n")
        output_stream = io.StringIO()

        await server.serve(input_stream, output_stream)

        responses = [json.loads(line) for line in output_stream.getvalue().splitlines()]
        assert len(responses) == 3
        assert responses[0]["id"] == 1
        assert responses[1]["error"]["code"] == PARSE_ERROR
        assert responses[2]["id"] == 2
