"""One-off migration script: JSON (data.json) -> SQL key-value table."""
from __future__ import annotations

from pathlib import Path
import sys

# Garantir que o pacote crm seja importável quando rodado diretamente
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from crm.core.config import get_settings
from crm.db.create_tables import create_all
from crm.repositories.json_storage import JsonFileStorage
from crm.repositories.sql_repository import SQLKeyValueStorage
from crm.repositories.storage import copy_collections


def migrate() -> None:
    settings = get_settings()
    data_file = settings.data_file
    if not data_file.exists():
        raise SystemExit(f"Arquivo nao encontrado: {data_file}")
    create_all()
    copied = copy_collections(JsonFileStorage(data_file), SQLKeyValueStorage())
    print(f"Migrated keys: {', '.join(copied) or 'none'}")


if __name__ == "__main__":
    migrate()
