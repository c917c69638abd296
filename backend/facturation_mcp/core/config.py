"""
Configurazione applicazione - Settings
Progetto: Facturation MCP

Definisce le impostazioni dell'applicazione caricate da variabili d'ambiente.
"""


from __future__ import annotations
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configurazione applicazione.

    Carica le impostazioni da variabili d'ambiente o dal file .env.
    Valori di default adatti per l'uso locale del server MCP.

    Per ottenere un'istanza singleton usa `get_settings()`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # ------------------------------------------------------------
    # Configurazione Database (cache locale)
    # ------------------------------------------------------------
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/facturation.db",
        description="URL connessione alla cache locale (formato async)",
    )

    db_echo: bool = Field(
        default=False,
        description="Stampa le query SQL eseguite",
    )

    # ------------------------------------------------------------
    # Configurazione Applicazione
    # ------------------------------------------------------------
    app_name: str = Field(
        default="facturation-pro-mcp",
        description="Nome del server MCP (serverInfo.name)",
    )

    app_version: str = Field(
        default="1.0.0",
        description="Versione applicazione",
    )

    app_env: Literal["development", "production", "testing"] = Field(
        default="development",
        description="Ambiente di esecuzione (development | production | testing)",
    )

    mcp_protocol_version: str = Field(
        default="2024-11-05",
        description="Versione del protocollo MCP annunciata in initialize",
    )

    # ------------------------------------------------------------
    # Configurazione Logging
    # ------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Livello logging (stderr)",
    )

    # ------------------------------------------------------------
    # Configurazione Calcolo Fatturato
    # ------------------------------------------------------------
    default_filter_by_payment_date: bool = Field(
        default=True,
        description="Se True, calculate_revenue calcola l'incassato (data di pagamento) per default",
    )

    @property
    def is_production(self) -> bool:
        """Verifica se l'applicazione è in produzione."""
        return self.app_env == "production"

    # ------------------------------------------------------------
    # Validatori
    # ------------------------------------------------------------

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accetta il livello anche in minuscolo (es. LOG_LEVEL=debug)."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """L'URL del database è obbligatorio."""
        if not v or not v.strip():
            raise ValueError("database_url non può essere vuoto")
        return v.strip()

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Blocca le impostazioni di debug in produzione."""
        if self.app_env != "production":
            return self

        errors = []

        if self.db_echo:
            errors.append("- db_echo: deve essere False in produzione")

        if self.log_level == "DEBUG":
            errors.append("- log_level: DEBUG non consentito in produzione")

        if errors:
            error_msg = "Errore di configurazione in produzione:\n" + "\n".join(errors)
            raise ValueError(error_msg)

        return self


@lru_cache()
def get_settings() -> Settings:
    """
    Restituisce l'istanza singleton delle impostazioni.

    Usa lru_cache per garantire che Settings() venga istanziato
    una sola volta e riutilizzato in tutta l'applicazione.
    In fase di test, usa get_settings.cache_clear() per resettare.

    Returns:
        Settings: Istanza delle impostazioni applicazione
    """
    return Settings()


settings = get_settings()
