from datetime import datetime
from typing import Any, List, Literal, Optional, Sequence

from api.models import EPOCH


def generate_markdown_table(
    headers: Optional[Sequence[Any]],
    rows: Sequence[Sequence[Any]],
    aligns: Optional[Sequence[Literal["l", "c", "r"]]] = None,
) -> str:
    """
    Generate a Markdown table.

    Args:
        headers: Column headers, or None to use the first row as headers.
        rows: Rows of cells; cells are converted with str().
        aligns: 'l', 'c' or 'r' per column. Defaults to all left.

    Returns:
        str: Markdown table, or "" when there are no rows.
    """
    if not rows:
        return ""

    if not headers:
        headers, rows = rows[0], rows[1:]

    def cell(value: Any) -> str:
        return str(value).replace("|", "\\|")

    header_cells = [cell(h) for h in headers]
    if aligns is None:
        aligns = ["l"] * len(header_cells)
    elif len(aligns) != len(header_cells):
        raise ValueError("Length of aligns must match number of headers.")

    align_map = {"l": ":---", "c": ":---:", "r": "---:"}
    lines: List[str] = [
        "| " + " | ".join(header_cells) + " |",
        "| " + " | ".join(align_map[a] for a in aligns) + " |",
    ]
    lines.extend("| " + " | ".join(cell(c) for c in row) + " |" for row in rows)
    return "\n".join(lines)


def format_money(amount: float, symbol: str = "₹") -> str:
    return f"{symbol}{amount:,.2f}"


def format_date(ts: datetime) -> str:
    if ts == EPOCH:
        return "—"
    return ts.astimezone().strftime("%Y-%m-%d %H:%M")
