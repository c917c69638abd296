"""
Mixin SQLAlchemy per modelli
Progetto: Facturation MCP

Mixin riutilizzabili per aggiungere funzionalità comuni ai modelli.
"""

import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func


class RemoteIdMixin:
    """
    Mixin per i record replicati dall'API remota.

    Aggiunge l'ID locale autoincrementale e l'identificativo remoto
    (facturation_id) usato dalla sincronizzazione per sovrascrivere i record.

    Usage:
        class MyModel(Base, RemoteIdMixin):
            __tablename__ = "my_table"
            ...
    """

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        doc="ID locale",
    )

    facturation_id: Mapped[int] = mapped_column(
        Integer,
        unique=True,
        nullable=False,
        doc="ID del record su Facturation.PRO",
    )


class TimestampMixin:
    """
    Mixin per i timestamp del record remoto e dell'ultima sincronizzazione.

    Aggiunge i campi:
    - created_at: data/ora di creazione sul sistema remoto
    - updated_at: data/ora ultimo aggiornamento sul sistema remoto
    - last_sync: data/ora dell'ultima scrittura locale (impostato dal database)

    created_at/updated_at sono copiati così come arrivano dall'API e non
    vengono mai riscritti localmente: updated_at è usato come data di
    riferimento per i pagamenti parziali senza payment_date.
    """

    created_at: Mapped[Optional[datetime.datetime]] = mapped_column(
        DateTime,
        nullable=True,
        doc="Data/ora di creazione sul sistema remoto",
    )

    updated_at: Mapped[Optional[datetime.datetime]] = mapped_column(
        DateTime,
        nullable=True,
        doc="Data/ora ultimo aggiornamento sul sistema remoto",
    )

    last_sync: Mapped[datetime.datetime] = mapped_column(
        DateTime,
        server_default=func.current_timestamp(),
        nullable=False,
        doc="Data/ora dell'ultima sincronizzazione del record",
    )
