"""
Aesthetic Advisor — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load and validate the question bank, relation matrix and catalog.
  4. Execute action (validate, interactive session, replay).
  5. Report result to stdout.

Install and run::

    pip install -e .
    aesthetic-advisor --help
    aesthetic-advisor validate-config
    aesthetic-advisor validate-data
    aesthetic-advisor run --seed 7 --report
    aesthetic-advisor simulate --answers answers.json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="aesthetic-advisor",
    help="Aesthetic clinic diagnostic questionnaire and equipment recommender.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from aesthetic_advisor.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from aesthetic_advisor.utils.logging import configure_logging
    configure_logging(config.logging, debug=config.debug)


def _build_session_or_exit(config, seed: Optional[int]):
    """Load engine inputs and build a DiagnosticSession, exiting on bad data."""
    from aesthetic_advisor.engine.session import DiagnosticSession

    try:
        return DiagnosticSession.from_config(config, seed=seed)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] Could not load engine data:\n{exc}", err=True)
        raise typer.Exit(code=1)


def _write_report(session, config) -> None:
    from aesthetic_advisor.reporting.export import write_ranking_csv, write_session_json

    summary = session.summary()
    out_dir = Path(config.data.reports_dir)
    json_path = write_session_json(summary, out_dir)
    csv_path  = write_ranking_csv(summary, out_dir)
    typer.echo(f"  Report:  {json_path}")
    typer.echo(f"  Ranking: {csv_path}")


def _print_result(session) -> None:
    from aesthetic_advisor.reporting.formatters import format_ranking_table

    profile = session.profile()
    typer.echo("")
    typer.echo("Recommended equipment:")
    typer.echo(format_ranking_table(session.ranking()))
    typer.echo("")
    typer.echo(f"  Confidence:      {session.confidence()}%")
    if profile.age_bracket:
        typer.echo(f"  Age bracket:     {profile.age_bracket}")
    if profile.primary_concern:
        typer.echo(
            f"  Primary concern: {profile.primary_concern.signal_key} "
            f"({profile.primary_concern.area})"
        )


def _resolve_option(question, raw: str) -> str:
    """Accept an option number or the option text itself."""
    raw = raw.strip()
    if raw.isdigit() and question.options:
        idx = int(raw) - 1
        if 0 <= idx < len(question.options):
            return question.options[idx]
    return raw


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Questions file:   {config.data.questions_file}")
    typer.echo(f"  Relations file:   {config.data.relations_file}")
    typer.echo(f"  Candidates file:  {config.data.candidates_file}")
    typer.echo(f"  Negative tokens:  {', '.join(config.engine.negative_tokens)}")
    typer.echo(f"  Shuffle seed:     {config.engine.shuffle_seed}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("validate-data")
def validate_data(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Load the question bank, relation matrix and catalog and report problems.

    Relation links to candidates missing from the catalog are listed as
    warnings; they are legal but will never appear in a ranking.
    """
    from aesthetic_advisor.catalog.loader import find_dangling_links, load_all

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        inputs = load_all(config.data)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    rankable = [c for c in inputs.catalog if c.is_rankable]
    typer.echo(f"  Questions:  {len(inputs.bank)} ({len(inputs.bank.mandatory())} mandatory)")
    typer.echo(f"  Signals:    {len(inputs.matrix)}")
    typer.echo(f"  Candidates: {len(inputs.catalog)} ({len(rankable)} rankable)")

    unused = sorted(set(inputs.matrix.signals()) - inputs.bank.context_keys())
    if unused:
        typer.echo(f"  [WARN] Signals no question asks for: {', '.join(unused)}")

    dangling = find_dangling_links(inputs.matrix, inputs.catalog)
    for signal, cid in dangling:
        typer.echo(f"  [WARN] {signal} -> unknown candidate '{cid}'")

    typer.echo("[OK] Data valid.")


@app.command("run")
def run(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Seed for the optional-question shuffle. Uses config value if omitted.",
    ),
    report: bool = typer.Option(
        False,
        "--report",
        help="Write the session JSON and ranking CSV to the reports directory.",
    ),
    live: bool = typer.Option(
        True,
        "--live/--no-live",
        help="Show the top of the ranking after each answer.",
    ),
) -> None:
    """Run an interactive diagnostic session in the terminal.

    Answer with the option number or by typing the option text.
    """
    from aesthetic_advisor.reporting.formatters import format_question, format_ranking_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    session = _build_session_or_exit(config, seed)
    stop_at = config.engine.confidence_stop

    total = len(session.state.sequence)
    while (question := session.current_question()) is not None:
        typer.echo("")
        typer.echo(format_question(question, session.state.current_index + 1, total))
        raw = typer.prompt("Answer")
        session.submit_answer(question.context_key, _resolve_option(question, raw))

        if live and not session.is_complete():
            typer.echo(format_ranking_table(session.ranking(), limit=3))

        if (
            stop_at is not None
            and not session.is_complete()
            and session.confidence() >= stop_at
            and typer.confirm(f"Confidence reached {session.confidence()}%. Finish now?")
        ):
            break

    _print_result(session)
    if report:
        _write_report(session, config)


@app.command("simulate")
def simulate(
    answers_file: str = typer.Option(
        ...,
        "--answers",
        "-a",
        help="JSON object mapping context_key -> answer.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Seed for the optional-question shuffle.",
    ),
    report: bool = typer.Option(
        False,
        "--report",
        help="Write the session JSON and ranking CSV to the reports directory.",
    ),
) -> None:
    """Replay a prepared set of answers through a session.

    \b
    Questions are answered in session order. Answers for questions the
    session never reaches (skipped by a branch) are ignored. The replay
    stops early at the first reached question with no prepared answer.
    """
    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    path = Path(answers_file)
    try:
        prepared = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        typer.echo(f"[ERROR] Could not read answers file: {exc}", err=True)
        raise typer.Exit(code=1)

    if not isinstance(prepared, dict):
        typer.echo("[ERROR] Answers file must contain a JSON object.", err=True)
        raise typer.Exit(code=1)

    session = _build_session_or_exit(config, seed)
    while (question := session.current_question()) is not None:
        if question.context_key not in prepared:
            typer.echo(f"  Stopped at '{question.id}': no prepared answer.")
            break
        answer = str(prepared[question.context_key])
        typer.echo(f"  {question.id}: {answer}")
        session.submit_answer(question.context_key, answer)

    typer.echo(f"  Completed: {session.is_complete()}")
    _print_result(session)
    if report:
        _write_report(session, config)


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
