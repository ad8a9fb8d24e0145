"""
ASCII terminal formatters for CLI commands.

All formatters accept engine objects and return plain multi-line strings
suitable for ``typer.echo()``. No third-party dependencies.

Ranking table::

    Rank  Candidate                    Score
    ----------------------------------------
       1  Hipro                         26.0
       2  Ultralift                     12.0
"""

from __future__ import annotations

from collections.abc import Sequence

from aesthetic_advisor.engine.ranking import RankedCandidate
from aesthetic_advisor.models.question import Question

_NAME_WIDTH = 28


def format_ranking_table(ranked: Sequence[RankedCandidate], limit: int | None = None) -> str:
    """Format a ranking as an ASCII table.

    Args:
        ranked: Output of ``rank()`` / ``DiagnosticSession.ranking()``.
        limit:  Show at most this many rows (all when ``None``).

    Returns:
        Multi-line table, or a one-line notice when the ranking is empty.
    """
    if not ranked:
        return "  (no candidates left)"

    rows = ranked if limit is None else ranked[:limit]
    lines = [
        f"  {'Rank':>4}  {'Candidate':<{_NAME_WIDTH}} {'Score':>6}",
        "  " + "-" * (4 + 2 + _NAME_WIDTH + 1 + 6),
    ]
    for position, row in enumerate(rows, start=1):
        name = row.name if len(row.name) <= _NAME_WIDTH else row.name[: _NAME_WIDTH - 1] + "~"
        lines.append(f"  {position:>4}  {name:<{_NAME_WIDTH}} {row.score:>6.1f}")
    if limit is not None and len(ranked) > limit:
        lines.append(f"  ... and {len(ranked) - limit} more.")
    return "\n".join(lines)


def format_question(question: Question, position: int, total: int) -> str:
    """Render a question with numbered options."""
    lines = [f"[{position}/{total}] {question.prompt_text}"]
    for i, option in enumerate(question.options, start=1):
        lines.append(f"  {i}. {option}")
    return "\n".join(lines)
