"""
Session export helpers: JSON and CSV files for a finished diagnostic.

All functions write to disk and return the written ``Path``. They are used by
the CLI (the calling layer); the engine itself never touches the filesystem.

Output files
------------
  data/reports/
    session_{label}.json   -- full SessionSummary (answers, ranking, profile)
    ranking_{label}.csv    -- one row per ranked candidate

``label`` defaults to the summary's ``session_id``.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Optional

from aesthetic_advisor.models.summary import SessionSummary

logger = logging.getLogger(__name__)

_RANKING_FIELDS = ["rank", "id", "name", "score"]


def write_session_json(
    summary: SessionSummary,
    output_dir: Path,
    session_label: Optional[str] = None,
) -> Path:
    """Write a ``SessionSummary`` as pretty-printed JSON.

    Args:
        summary:       Snapshot from ``DiagnosticSession.summary()``.
        output_dir:    Target directory (created if missing).
        session_label: Filename label. Defaults to ``summary.session_id``.

    Returns:
        Path to the written JSON file.
    """
    label = session_label or summary.session_id
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"session_{label}.json"
    path.write_text(
        json.dumps(summary.model_dump(mode="json"), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    logger.info("Session JSON written: %s", path)
    return path


def write_ranking_csv(
    summary: SessionSummary,
    output_dir: Path,
    session_label: Optional[str] = None,
) -> Path:
    """Write the summary's ranking as a flat CSV (rank is 1-based).

    An empty ranking still produces a file with just the header row.
    """
    label = session_label or summary.session_id
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"ranking_{label}.csv"

    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=_RANKING_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for position, row in enumerate(summary.ranking, start=1):
            writer.writerow({"rank": position, **row})

    logger.info("Ranking CSV written: %s (%d rows)", path, len(summary.ranking))
    return path
