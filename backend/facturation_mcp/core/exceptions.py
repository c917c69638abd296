"""
Eccezioni Custom per l'applicazione.
Progetto: Facturation MCP

Definisce eccezioni specifiche del dominio per una gestione
centralizzata degli errori.

I service sollevano queste eccezioni; il confine degli strumenti MCP
(Tool.execute) le converte nell'envelope {"success": false, "error": ...}.
"""

from typing import Any, Dict, Optional

__all__ = [
    "AppException",
    "InvalidArgumentError",
    "InvalidPeriodError",
    "StoreUnavailableError",
    "ComputationInconsistencyError",
    "ToolNotFoundError",
]


class AppException(Exception):
    """
    Base exception per l'applicazione.

    Tutte le eccezioni custom ereditano da questa classe base.

    Attributes:
        error_code: Identificativo univoco dell'errore per il client MCP
        detail: Messaggio di errore leggibile
        extra: Dizionario con dati aggiuntivi
    """

    # Default values - overridden in subclasses
    error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        detail: str,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Inizializza l'eccezione.

        Args:
            detail: Messaggio di errore dettagliato
            error_code: Identificativo univoco (default: quello di classe)
            extra: Dati aggiuntivi (default: None)
        """
        self.detail = detail
        self.error_code = error_code if error_code is not None else self.error_code
        self.extra = extra
        super().__init__(detail)


class InvalidArgumentError(ValueError, AppException):
    """
    Argomento mancante o malformato.

    Esempi:
        - "Data non valida: 2024-13-01 (formato atteso YYYY-MM-DD)"
        - "start_date e end_date devono essere specificati insieme"
    """

    error_code: str = "INVALID_ARGUMENT"

    def __init__(
        self,
        detail: str = "Argomento non valido",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        # Chiama AppException.__init__ direttamente per evitare ValueError
        AppException.__init__(self, detail, error_code, extra)


class InvalidPeriodError(InvalidArgumentError):
    """Periodo incoerente: data di inizio successiva alla data di fine."""

    error_code: str = "INVALID_PERIOD"

    def __init__(
        self,
        detail: str = "Periodo non valido",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)


class StoreUnavailableError(AppException):
    """
    Errore di I/O verso la cache locale.

    Sollevata da Store quando il driver non riesce a eseguire la query
    (file mancante, database bloccato, connessione chiusa).
    """

    error_code: str = "STORE_UNAVAILABLE"

    def __init__(
        self,
        detail: str = "Database locale non disponibile",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)


class ComputationInconsistencyError(AppException):
    """
    Incoerenza rilevata durante il calcolo (es. ratio di pagamento fuori da ]0, 1[).
    """

    error_code: str = "COMPUTATION_INCONSISTENCY"

    def __init__(
        self,
        detail: str = "Incoerenza nei dati di calcolo",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)


class ToolNotFoundError(AppException):
    """Strumento MCP non registrato."""

    error_code: str = "TOOL_NOT_FOUND"

    def __init__(
        self,
        detail: str = "Strumento sconosciuto",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)
