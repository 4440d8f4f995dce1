"""Backup the persisted store.

Note: Reads the whole document through the configured backend and writes it
to backups/ as JSON, so it works the same for the json and mysql backends.
"""

from __future__ import annotations

import importlib
import json
from datetime import datetime
from pathlib import Path

from school_portal.config import get_settings_module
from school_portal.container import build_store
from school_portal.store.document import dump_state


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    store = build_store(settings)

    out_dir = Path(__file__).resolve().parents[1] / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"school_store_{ts}.json"
    out_file.write_text(json.dumps(dump_state(store.read()), ensure_ascii=False, indent=2), encoding="utf-8")
    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()
