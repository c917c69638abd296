"""
Server MCP - JSON-RPC 2.0 su stdin/stdout
Progetto: Facturation MCP

Legge una richiesta JSON per riga ed elabora le richieste una alla volta:
ogni chiamata termina prima che venga letta la riga successiva.
stdout è riservato alle risposte; i log vanno su stderr.
"""

import asyncio
import json
import logging
import sys
from typing import Any, Optional, TextIO

from facturation_mcp.core.config import Settings, get_settings
from facturation_mcp.core.database import Store
from facturation_mcp.core.exceptions import ToolNotFoundError
from facturation_mcp.mcp.tools import ToolRegistry

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603


def rpc_result(request_id: Any, result: dict[str, Any]) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def rpc_error(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "error": {"code": code, "message": message},
    }


def text_content(payload: dict[str, Any]) -> dict[str, Any]:
    """Incapsula l'envelope di uno strumento in result.content[0].text."""
    return {
        "content": [
            {
                "type": "text",
                "text": json.dumps(payload, ensure_ascii=False, indent=2),
            }
        ]
    }


class McpServer:
    """
    Dispatcher delle richieste MCP.

    Metodi supportati: initialize, ping, tools/list, tools/call.
    Le notifiche (richieste senza id) non ricevono risposta.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        store: Store,
        settings: Optional[Settings] = None,
    ) -> None:
        self.registry = registry
        self.store = store
        self.settings = settings or get_settings()

    async def handle_request(self, request: Any) -> Optional[dict[str, Any]]:
        """
        Elabora una richiesta già decodificata.

        Returns:
            dict | None: Risposta JSON-RPC, None per le notifiche
        """
        if not isinstance(request, dict) or not isinstance(request.get("method"), str):
            request_id = request.get("id") if isinstance(request, dict) else None
            return rpc_error(request_id, INVALID_REQUEST, "Richiesta non valida")

        method = request["method"]
        request_id = request.get("id")
        is_notification = "id" not in request

        if method == "initialize":
            response = rpc_result(
                request_id,
                {
                    "protocolVersion": self.settings.mcp_protocol_version,
                    "capabilities": {"tools": {}},
                    "serverInfo": {
                        "name": self.settings.app_name,
                        "version": self.settings.app_version,
                    },
                },
            )
        elif method == "ping":
            response = rpc_result(request_id, {})
        elif method == "tools/list":
            response = rpc_result(request_id, {"tools": self.registry.describe()})
        elif method == "tools/call":
            response = await self._call_tool(request_id, request.get("params") or {})
        elif method.startswith("notifications/"):
            response = None
        else:
            response = rpc_error(request_id, METHOD_NOT_FOUND, f"Metodo non trovato: {method}")

        if is_notification:
            return None
        return response

    async def _call_tool(self, request_id: Any, params: Any) -> dict[str, Any]:
        if not isinstance(params, dict):
            return rpc_error(request_id, INVALID_REQUEST, "params deve essere un oggetto")

        name = params.get("name")
        try:
            tool = self.registry.get(name)
        except ToolNotFoundError as exc:
            return rpc_error(request_id, METHOD_NOT_FOUND, exc.detail)

        logger.info("Chiamata strumento %s", name)
        try:
            envelope = await tool.execute(params.get("arguments"), self.store)
        finally:
            await self.store.release()
        return rpc_result(request_id, text_content(envelope))

    async def handle_line(self, line: str) -> Optional[dict[str, Any]]:
        """Decodifica una riga ed elabora la richiesta."""
        try:
            request = json.loads(line)
        except json.JSONDecodeError as exc:
            logger.warning("Riga JSON non valida: %s", exc)
            return rpc_error(None, PARSE_ERROR, "JSON non valido")

        try:
            return await self.handle_request(request)
        except Exception as exc:
            logger.error("Errore nel trattamento della richiesta: %s", exc, exc_info=True)
            request_id = request.get("id") if isinstance(request, dict) else None
            return rpc_error(request_id, INTERNAL_ERROR, "Errore interno del server")

    async def serve(
        self,
        input_stream: Optional[TextIO] = None,
        output_stream: Optional[TextIO] = None,
    ) -> None:
        """
        Ciclo principale: una riga alla volta fino a EOF.

        Args:
            input_stream: Sorgente delle richieste (default: stdin)
            output_stream: Destinazione delle risposte (default: stdout)
        """
        input_stream = input_stream or sys.stdin
        output_stream = output_stream or sys.stdout

        logger.info("Strumenti disponibili: %s", ", ".join(self.registry.names))

        while True:
            line = await asyncio.to_thread(input_stream.readline)
            if not line:
                break
            line = line.strip()
            if not line:
                continue

            response = await self.handle_line(line)
            if response is not None:
                output_stream.write(json.dumps(response, ensure_ascii=False) + "\n")
                output_stream.flush()

        logger.info("Fine input, arresto del ciclo di lettura")
