"""
Modelli Database SQLAlchemy
Progetto: Facturation MCP

Import centralizzato di tutti i modelli della cache locale.

Le tabelle sono popolate dalla sincronizzazione con l'API Facturation.PRO
(fuori da questo package): gli aggregatori le leggono soltanto.
"""

# SQLAlchemy 2.0 Base declarativa
# Importato qui per essere disponibile per tutti i modelli
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class per tutti i modelli SQLAlchemy."""
    pass


# Import modelli implementati
from facturation_mcp.models.customer import Customer
from facturation_mcp.models.invoice import Invoice, InvoiceStatusCode, Payment, PaymentSource
from facturation_mcp.models.quote import Quote, QuoteStatusCode

__all__ = [
    "Base",
    "Customer",
    "Invoice",
    "InvoiceStatusCode",
    "Payment",
    "PaymentSource",
    "Quote",
    "QuoteStatusCode",
]
