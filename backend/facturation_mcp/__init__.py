"""
Facturation MCP - cache locale e strumenti di analisi fatturato.

Il logger del package resta silenzioso finché l'entry point non configura
il logging (vedi main.py).
"""

import logging

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
