"""JSON rendering for everything envcachectl prints on stdout."""

from __future__ import annotations

import json
from typing import Any


def dumps_json(payload: Any) -> str:
    # `.env` values are user text; keep non-ASCII readable in reports.
    return json.dumps(payload, sort_keys=True, ensure_ascii=False)
