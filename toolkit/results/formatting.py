"""Value formatting, key humanizing and CSV export for rendered results."""
import csv
import io
import json
import re
from typing import Any, Iterable, List, Sequence

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")

CURRENCY_SYMBOL = "$"


def is_number(value: Any) -> bool:
    """True for int/float but not bool."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


def humanize_key(key: str) -> str:
    """``monthlyPayment`` / ``monthly_payment`` -> ``Monthly Payment``."""
    spaced = _CAMEL_BOUNDARY.sub(r"\1 \2", str(key)).replace("_", " ").replace("-", " ")
    words = [w for w in spaced.split(" ") if w]
    return " ".join(w[:1].upper() + w[1:] for w in words)


def format_currency(value: float) -> str:
    sign = "-" if value < 0 else ""
    if isinstance(value, int):
        return f"{sign}{CURRENCY_SYMBOL}{abs(value):,}.00"
    return f"{sign}{CURRENCY_SYMBOL}{abs(value):,.2f}"


def format_value(value: Any, kind: str = "auto") -> str:
    if value is None:
        return "N/A"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if is_number(value):
        if kind == "currency":
            return format_currency(value)
        # Ints are formatted exactly; past ~1e308 they no longer fit a float.
        if isinstance(value, int):
            if kind == "percentage":
                return f"{value}.00%"
            if kind == "decimal":
                return f"{value}.00"
            return str(value)
        if kind == "percentage":
            return f"{value:.2f}%"
        if kind == "decimal":
            return f"{value:.2f}"
        if value.is_integer():
            return str(int(value))
        return f"{value:.2f}"
    return str(value)


def to_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def _csv_cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return value


def rows_to_csv(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    """CSV with a header line, ``\\n`` line endings, quoting cells that need it."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_csv_cell(c) for c in row])
    return buf.getvalue()


def join_csv(parts: List[str]) -> str:
    return "\n".join(parts)
