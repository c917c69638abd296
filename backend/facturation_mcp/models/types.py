"""
Tipi di colonna personalizzati
Progetto: Facturation MCP
"""

from decimal import Decimal

from sqlalchemy.types import UserDefinedType


class LenientAmount(UserDefinedType):
    """
    Importo REAL che tollera la stringa vuota.

    L'API remota restituisce il saldo (balance) come numero, come stringa
    numerica o come stringa vuota quando la fattura è saldata. SQLite
    conserva il valore così com'è; il tipo non lo normalizza in lettura, in
    modo che la regola di incasso possa distinguere i casi
    (vedi services.collection_rules.parse_balance).
    """

    cache_ok = True

    def get_col_spec(self, **kw) -> str:
        return "REAL"

    def bind_processor(self, dialect):
        def process(value):
            if value is None or isinstance(value, str):
                return value
            if isinstance(value, Decimal):
                return float(value)
            return value

        return process

    def result_processor(self, dialect, coltype):
        return None
