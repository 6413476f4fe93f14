"""Serverless entrypoint for the food log API.

The deployment bundles the repository root without installing the package,
so ``src`` is put on the import path before the app is loaded.
"""

from __future__ import annotations

import sys
from pathlib import Path

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from food_log.api.asgi import app  # noqa: E402

__all__ = ["app"]
