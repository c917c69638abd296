"""
Schema Pydantic per il periodo di analisi
Progetto: Facturation MCP
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Period(BaseModel):
    """
    Periodo di analisi risolto.

    start_date/end_date delimitano i totali; year è l'anno di riferimento
    della ripartizione mensile (sempre i 12 mesi di quell'anno, anche per
    un intervallo personalizzato).
    """

    model_config = ConfigDict(frozen=True)

    start_date: date = Field(..., description="Inizio periodo (incluso)")
    end_date: date = Field(..., description="Fine periodo (inclusa)")
    year: int = Field(..., description="Anno di riferimento per la ripartizione mensile")

    @model_validator(mode="after")
    def validate_dates(self) -> "Period":
        """Valida che start_date <= end_date (resolve_period lo verifica prima)."""
        if self.start_date > self.end_date:
            raise ValueError(
                f"La data di inizio ({self.start_date.isoformat()}) è successiva "
                f"alla data di fine ({self.end_date.isoformat()})"
            )
        return self

    @property
    def year_start(self) -> date:
        return date(self.year, 1, 1)

    @property
    def year_end(self) -> date:
        return date(self.year, 12, 31)

    @property
    def covers_anchor_year(self) -> bool:
        """True se il periodo coincide esattamente con l'anno di riferimento."""
        return self.start_date == self.year_start and self.end_date == self.year_end

    @property
    def comparison_window(self) -> tuple[date, date]:
        """Finestra usata per decidere se il ledger pagamenti è disponibile."""
        return (
            min(self.start_date, self.year_start),
            max(self.end_date, self.year_end),
        )
