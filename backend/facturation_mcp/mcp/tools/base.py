"""
Strumenti MCP - capability e registro
Progetto: Facturation MCP

Uno strumento è la composizione di:
- name / description
- un modello Pydantic degli argomenti (da cui deriva inputSchema)
- un handler async (argomenti validati, store) -> modello risultato

Tool.execute è il confine pubblico: non solleva mai, restituisce sempre
un envelope {"success": ..., ...} serializzabile in JSON.
"""

import logging
from typing import Any, Awaitable, Callable, Iterator, Optional, Type

from pydantic import BaseModel, ValidationError

from facturation_mcp.core.database import Store
from facturation_mcp.core.exceptions import (
    AppException,
    InvalidArgumentError,
    ToolNotFoundError,
)

logger = logging.getLogger(__name__)

Handler = Callable[[Any, Store], Awaitable[BaseModel]]

INTERNAL_ERROR_MESSAGE = "Errore interno durante l'esecuzione dello strumento"


def validate_args(args_model: Type[BaseModel], args: Any) -> BaseModel:
    """
    Valida gli argomenti grezzi di una chiamata.

    Raises:
        InvalidArgumentError: Argomenti non oggetto o non conformi al modello
    """
    if args is None:
        args = {}
    if not isinstance(args, dict):
        raise InvalidArgumentError("Gli argomenti devono essere un oggetto JSON")
    try:
        return args_model.model_validate(args)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}"
            for err in e.errors()
        )
        raise InvalidArgumentError(f"Parametri non validi: {problems}")


def success_envelope(result: BaseModel) -> dict[str, Any]:
    return {"success": True, "data": result.model_dump(mode="json")}


def error_envelope(message: str, error_code: str) -> dict[str, Any]:
    return {"success": False, "error": message, "error_code": error_code}


class Tool:
    """Strumento MCP: metadati, modello argomenti e handler."""

    def __init__(
        self,
        name: str,
        description: str,
        args_model: Type[BaseModel],
        handler: Handler,
    ) -> None:
        self.name = name
        self.description = description
        self.args_model = args_model
        self.handler = handler

    @property
    def input_schema(self) -> dict[str, Any]:
        schema = self.args_model.model_json_schema()
        schema.pop("title", None)
        schema.pop("description", None)
        schema.setdefault("required", [])
        return schema

    def describe(self) -> dict[str, Any]:
        """Voce di tools/list."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }

    async def execute(self, args: Any, store: Store) -> dict[str, Any]:
        """
        Esegue lo strumento e incapsula l'esito.

        Returns:
            dict: {"success": True, "data": ...} oppure
                {"success": False, "error": ..., "error_code": ...}
        """
        try:
            parsed = validate_args(self.args_model, args)
            result = await self.handler(parsed, store)
        except AppException as exc:
            logger.warning("Strumento %s: %s (%s)", self.name, exc.detail, exc.error_code)
            return error_envelope(exc.detail, exc.error_code)
        except Exception as exc:
            logger.error(
                "Errore imprevisto nello strumento %s: %s", self.name, exc, exc_info=True
            )
            return error_envelope(INTERNAL_ERROR_MESSAGE, AppException.error_code)
        return success_envelope(result)


class ToolRegistry:
    """Mappa nome → strumento, nell'ordine di registrazione."""

    def __init__(self, tools: Optional[list[Tool]] = None) -> None:
        self._tools: dict[str, Tool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Strumento già registrato: {tool.name}")
        self._tools[tool.name] = tool

    def get(self, name: str) -> Tool:
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(f"Strumento sconosciuto: {name}")

    def describe(self) -> list[dict[str, Any]]:
        return [tool.describe() for tool in self._tools.values()]

    @property
    def names(self) -> list[str]:
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)
