"""Reset the configured store to the starter document.

Overwrites everything in the store; run it on a fresh install or a demo box.
"""

from __future__ import annotations

import importlib
import sys

from school_portal.config import get_settings_module
from school_portal.container import build_store
from school_portal.store.document import load_state
from school_portal.store.seed import seed_document


def main() -> None:
    if "--yes" not in sys.argv:
        raise SystemExit("This replaces the whole store with seed data. Re-run with --yes to continue.")

    settings = importlib.import_module(get_settings_module())
    store = build_store(settings)
    store.write(load_state(seed_document()))
    print(f"OK: Seeded {type(store).__name__} ({settings.STORE_BACKEND})")


if __name__ == "__main__":
    main()
