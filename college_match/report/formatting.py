from __future__ import annotations

import math
from typing import Any, Iterable


def format_money(value: Any, *, suffix: str = "") -> str:
    amount = _coerce_float(value)
    if amount is None:
        return "n/a"
    return f"${amount:,.0f}{suffix}"


def reasons_to_text(value: Iterable[str] | str | None) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return ", ".join(str(item) for item in value if str(item).strip())


def _coerce_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(numeric):
        return None
    return numeric
