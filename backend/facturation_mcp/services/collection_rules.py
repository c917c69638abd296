"""
Regole di incasso derivato
Progetto: Facturation MCP

Decidono, fattura per fattura, quanto del suo importo conta come
incassato in una finestra di date e quale data ancora l'incasso.

Funzioni pure: lavorano su qualsiasi oggetto con gli attributi della
fattura (riga SQLAlchemy, modello ORM, mock) e non accedono al database.

Regole:
- FULL: status = pagata e paid_on nella finestra → importo intero a paid_on.
- PARTIAL: 0 < balance < total_ttc e data di incasso (payment_date, in
  mancanza updated_at) nella finestra → TTC = total_ttc - balance,
  HT e IVA scalati di (total_ttc - balance) / total_ttc.
- NONE: tutti gli altri casi.

Lo stato è autorevole per FULL: un saldo nullo o vuoto non promuove mai
una fattura non pagata a FULL. Una fattura pagata con paid_on valorizzato
non viene mai classificata PARTIAL.
"""

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from facturation_mcp.core.exceptions import ComputationInconsistencyError
from facturation_mcp.models.invoice import InvoiceStatusCode
from facturation_mcp.schemas.collection import (
    CollectionEvent,
    CollectionKind,
    Contribution,
    ContributionOrigin,
)

logger = logging.getLogger(__name__)


def parse_balance(raw: Any) -> float:
    """
    Normalizza il saldo residuo.

    NULL, stringa vuota, "0" e 0.00 valgono tutti 0 (nessun residuo).

    Raises:
        ComputationInconsistencyError: Se il saldo non è numerico
    """
    if raw is None:
        return 0.0
    if isinstance(raw, str):
        cleaned = raw.strip().replace(",", ".")
        if not cleaned:
            return 0.0
        try:
            return float(Decimal(cleaned))
        except InvalidOperation:
            raise ComputationInconsistencyError(f"Saldo non numerico: {raw!r}")
    return float(raw)


def as_date(value: Any) -> Optional[date]:
    """Converte date/datetime/stringa ISO in date (None se assente)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            logger.warning("Data non interpretabile ignorata: %r", value)
            return None
    return None


def paid_ratio(total_ttc: float, balance: float) -> float:
    """Quota incassata (total_ttc - balance) / total_ttc; 0 se total_ttc = 0."""
    if total_ttc == 0:
        return 0.0
    return (total_ttc - balance) / total_ttc


def settlement_date(invoice: Any) -> Optional[date]:
    """Data migliore nota dell'incasso parziale: payment_date, altrimenti updated_at."""
    return as_date(getattr(invoice, "payment_date", None)) or as_date(
        getattr(invoice, "updated_at", None)
    )


def classify(invoice: Any, window_start: date, window_end: date) -> CollectionEvent:
    """
    Classifica il contributo di una fattura alla finestra [window_start, window_end].

    Args:
        invoice: Oggetto con status, paid_on, balance, total_ttc,
            payment_date, updated_at
        window_start: Inizio finestra (incluso)
        window_end: Fine finestra (inclusa)

    Returns:
        CollectionEvent: NONE, FULL(data) o PARTIAL(data, ratio)

    Raises:
        ComputationInconsistencyError: Saldo non numerico o ratio fuori da ]0, 1[
    """
    status = int(invoice.status or 0)
    paid_on = as_date(invoice.paid_on)

    if status == InvoiceStatusCode.PAID and paid_on is not None:
        if window_start <= paid_on <= window_end:
            return CollectionEvent.full(paid_on)
        return CollectionEvent.none()

    total_ttc = float(invoice.total_ttc or 0)
    balance = parse_balance(invoice.balance)
    if not 0 < balance < total_ttc:
        return CollectionEvent.none()

    event_date = settlement_date(invoice)
    if event_date is None or not window_start <= event_date <= window_end:
        return CollectionEvent.none()

    ratio = paid_ratio(total_ttc, balance)
    if not 0 < ratio < 1:
        raise ComputationInconsistencyError(
            f"Quota incassata fuori intervallo ({ratio}) per la fattura {getattr(invoice, 'id', '?')}"
        )
    return CollectionEvent.partial(event_date, ratio)


def contribution_from_event(invoice: Any, event: CollectionEvent) -> Optional[Contribution]:
    """
    Importi incassati per una fattura classificata.

    FULL porta gli importi interi; PARTIAL porta total_ttc - balance in TTC
    e HT/IVA scalati della quota incassata.
    """
    if event.kind == CollectionKind.NONE:
        return None

    total_ttc = float(invoice.total_ttc or 0)
    total_ht = float(invoice.total_ht or 0)
    vat_amount = float(invoice.vat_amount or 0)

    if event.kind == CollectionKind.FULL:
        amount_ttc, amount_ht, amount_vat = total_ttc, total_ht, vat_amount
        origin = ContributionOrigin.FULL
    else:
        amount_ttc = total_ttc - parse_balance(invoice.balance)
        amount_ht = total_ht * event.ratio
        amount_vat = vat_amount * event.ratio
        origin = ContributionOrigin.PARTIAL

    return Contribution(
        invoice_id=invoice.id,
        customer_id=invoice.customer_id,
        event_date=event.event_date,
        amount_ttc=amount_ttc,
        amount_ht=amount_ht,
        amount_vat=amount_vat,
        origin=origin,
    )


def contribution_from_payment(payment: Any) -> Contribution:
    """Importi di una riga del ledger, presi così come sono."""
    return Contribution(
        invoice_id=payment.invoice_id,
        customer_id=getattr(payment, "customer_id", None),
        event_date=as_date(payment.payment_date),
        amount_ttc=float(payment.amount_ttc or 0),
        amount_ht=float(payment.amount_ht or 0),
        amount_vat=float(payment.amount_vat or 0),
        origin=ContributionOrigin.LEDGER,
    )
