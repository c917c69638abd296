import asyncio
import sys
import os

# Aggiungi backend/ alla PYTHONPATH per importare facturation_mcp.*
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "backend"))

from facturation_mcp.core.database import ensure_sqlite_directory, engine
from facturation_mcp.core.config import settings
from facturation_mcp.models import Base

async def reset():
    ensure_sqlite_directory(settings.database_url)
    print(f"Connessione a {engine.url.render_as_string(hide_password=True)}, eliminazione tabelle...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        print("Tabelle eliminate. Creazione nuove tabelle...")
        await conn.run_sync(Base.metadata.create_all)
    tables = ", ".join(sorted(Base.metadata.tables))
    print(f"Cache resettata con successo! Tabelle: {tables}")
    await engine.dispose()

if __name__ == "__main__":
    asyncio.run(reset())
