#!/usr/bin/env python3
"""
Populate an empty CRM store with the demo customers and tasks.

Uso:
  python scripts/seed_demo.py [--data-file crm/data.json] [--assignee "John Smith"]
"""
from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
import sys

# Garantir que o pacote crm seja importável quando rodado diretamente
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from crm.core.config import get_settings
from crm.core.logging_setup import configure_logging
from crm.services.demo_data import seed_demo_data
from crm.services.store import build_store


def main() -> None:
    ap = argparse.ArgumentParser(description="Seed demo customers/tasks")
    ap.add_argument("--data-file", help="JSON file to seed (default: CRM_DATA_FILE)")
    ap.add_argument("--assignee", default="John Smith", help="Assignee for the demo tasks")
    args = ap.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level)
    if args.data_file:
        settings = replace(settings, storage_backend="json", data_file=Path(args.data_file))

    store = build_store(settings)
    if seed_demo_data(store, assignee=args.assignee):
        print(f"Seeded {len(store.customers.list())} customers and {len(store.tasks.list())} tasks.")
    else:
        print("Store already has data; nothing to do.")


if __name__ == "__main__":
    main()
