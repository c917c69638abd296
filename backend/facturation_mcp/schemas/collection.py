"""
Schemas per le regole di incasso
Progetto: Facturation MCP

Contiene:
- CollectionKind / CollectionEvent: esito della classificazione di una fattura
- Contribution: importo che una fattura (o una riga di ledger) porta al periodo
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CollectionKind(str, Enum):
    """Come una fattura contribuisce all'incassato di una finestra."""
    NONE = "none"
    FULL = "full"
    PARTIAL = "partial"


class ContributionOrigin(str, Enum):
    """Origine dell'importo incassato."""
    LEDGER = "ledger"
    FULL = "full"
    PARTIAL = "partial"


class CollectionEvent(BaseModel):
    """Esito di classify(): tipo, data dell'incasso e quota incassata."""

    model_config = ConfigDict(frozen=True)

    kind: CollectionKind
    event_date: Optional[date] = None
    ratio: float = Field(default=0.0, description="Quota incassata (1 per FULL)")

    @classmethod
    def none(cls) -> "CollectionEvent":
        return cls(kind=CollectionKind.NONE)

    @classmethod
    def full(cls, event_date: date) -> "CollectionEvent":
        return cls(kind=CollectionKind.FULL, event_date=event_date, ratio=1.0)

    @classmethod
    def partial(cls, event_date: date, ratio: float) -> "CollectionEvent":
        return cls(kind=CollectionKind.PARTIAL, event_date=event_date, ratio=ratio)


class Contribution(BaseModel):
    """Importo incassato attribuito a una data."""

    model_config = ConfigDict(frozen=True)

    invoice_id: int
    customer_id: Optional[int] = None
    event_date: date
    amount_ttc: float
    amount_ht: float
    amount_vat: float
    origin: ContributionOrigin
