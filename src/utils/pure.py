from typing import List, Literal, Optional, Sequence

Align = Literal["l", "c", "r"]

_ALIGN_RULES = {"l": ":---", "c": ":---:", "r": "---:"}


def money(value: float) -> str:
    """Format an amount as US currency, e.g. 1234.5 -> '$1,234.50'."""
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def markdown_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[object]],
    aligns: Optional[Sequence[Align]] = None,
    empty: str = "_Nothing to show._",
) -> str:
    """
    Render rows as a Markdown table. Columns default to left alignment.
    Pipes inside cells are escaped; ``empty`` is returned when there are no rows.
    """
    if not rows:
        return empty
    aligns = list(aligns) if aligns else ["l"] * len(headers)
    if len(aligns) != len(headers):
        raise ValueError("Length of aligns must match number of headers.")

    def line(cells: Sequence[object]) -> str:
        return "| " + " | ".join(str(c).replace("|", "\\|") for c in cells) + " |"

    out: List[str] = [line(headers), line([_ALIGN_RULES[a] for a in aligns])]
    out.extend(line(row) for row in rows)
    return "\n".join(out)


def bar(value: float, maximum: float, width: int = 24) -> str:
    """A text bar scaled against ``maximum`` (which is floored at 1)."""
    maximum = max(maximum, 1)
    filled = round(width * max(value, 0) / maximum)
    return "█" * filled + "·" * (width - filled)
