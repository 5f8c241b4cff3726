"""Backup the key-value store as one JSON file.

Note: Works for any STORE_BACKEND; for MySQL a `mysqldump` of kv_store is
equivalent.
"""

from __future__ import annotations

import importlib
import json
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_ledger.attendance_ledger.container import build_backend


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    backend = build_backend(store_backend=settings.STORE_BACKEND, db_config=dict(settings.DB_CONFIG))

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)
    out_file = out_dir / f"attendance_ledger_{datetime.now():%Y%m%d_%H%M%S}.json"

    data = {key: {"version": v.version, "value": v.value} for key, v in backend.dump().items()}
    out_file.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    print(f"OK: Backup created: {out_file} ({len(data)} keys)")


if __name__ == "__main__":
    main()
