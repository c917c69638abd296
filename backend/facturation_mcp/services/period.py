"""
Risoluzione del periodo di analisi
Progetto: Facturation MCP

Traduce gli argomenti degli strumenti (year, start_date/end_date,
start_year/end_year) in un Period coerente.
"""

from datetime import date, datetime
from typing import Optional

from facturation_mcp.core.exceptions import InvalidArgumentError, InvalidPeriodError
from facturation_mcp.schemas.period import Period

DATE_FORMAT = "%Y-%m-%d"

MONTH_NAMES = (
    "Janvier", "Février", "Mars", "Avril", "Mai", "Juin",
    "Juillet", "Août", "Septembre", "Octobre", "Novembre", "Décembre",
)


def month_name(month: int) -> str:
    """Nome francese del mese (1-12)."""
    return MONTH_NAMES[month - 1]


def parse_date(value: object, field_name: str) -> date:
    """
    Converte una stringa YYYY-MM-DD in date.

    Raises:
        InvalidPeriodError: Se il valore non è una data valida
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise InvalidPeriodError(
            f"{field_name} deve essere una stringa nel formato YYYY-MM-DD"
        )
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        raise InvalidPeriodError(
            f"Data non valida per {field_name}: {value!r} (formato atteso YYYY-MM-DD)"
        )


def optional_date_range(
    start_date: Optional[str], end_date: Optional[str]
) -> tuple[Optional[str], Optional[str]]:
    """
    Intervallo di date facoltativo degli strumenti.

    Una stringa vuota su uno dei due lati rende assente l'intervallo:
    si ricade su year o sull'anno corrente.
    """
    if start_date == "" or end_date == "":
        return None, None
    return start_date, end_date


def _year_bounds(year: int, field_name: str = "year") -> tuple[date, date]:
    try:
        return date(year, 1, 1), date(year, 12, 31)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"Anno non valido per {field_name}: {year!r}")


def _checked_period(start: date, end: date, year: int) -> Period:
    if start > end:
        raise InvalidPeriodError(
            f"La data di inizio ({start.isoformat()}) è successiva "
            f"alla data di fine ({end.isoformat()})"
        )
    return Period(start_date=start, end_date=end, year=year)


def resolve_period(
    year: Optional[int] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    start_year: Optional[int] = None,
    end_year: Optional[int] = None,
    today: Optional[date] = None,
) -> Period:
    """
    Risolve il periodo di analisi.

    Precedenza: start_date/end_date > year > start_year/end_year > anno corrente.
    L'anno di riferimento per la ripartizione mensile è l'anno di start_date,
    l'anno esplicito o start_year.

    Args:
        year: Anno singolo
        start_date: Data di inizio (YYYY-MM-DD), da fornire con end_date
        end_date: Data di fine (YYYY-MM-DD), da fornire con start_date
        start_year: Primo anno di un intervallo di anni
        end_year: Ultimo anno di un intervallo di anni
        today: Data odierna (iniettabile per i test)

    Returns:
        Period: Periodo risolto

    Raises:
        InvalidArgumentError: Campi del periodo incompleti
        InvalidPeriodError: Data malformata o inizio successivo alla fine
    """
    if start_date is not None or end_date is not None:
        if start_date is None or end_date is None:
            raise InvalidArgumentError(
                "start_date e end_date devono essere specificati insieme"
            )
        start = parse_date(start_date, "start_date")
        end = parse_date(end_date, "end_date")
        return _checked_period(start, end, start.year)

    if year is not None:
        start, end = _year_bounds(year)
        return _checked_period(start, end, year)

    if start_year is not None or end_year is not None:
        if start_year is None or end_year is None:
            raise InvalidArgumentError(
                "start_year e end_year devono essere specificati insieme"
            )
        start, _ = _year_bounds(start_year, "start_year")
        _, end = _year_bounds(end_year, "end_year")
        return _checked_period(start, end, start_year)

    current_year = (today or date.today()).year
    start, end = _year_bounds(current_year)
    return _checked_period(start, end, current_year)
