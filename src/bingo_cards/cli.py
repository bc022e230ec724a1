from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer

from .builder import build_game
from .checker import CLAIM_KINDS, ClaimStatus, check_claim
from .config import resolve_parameters
from .draw import load_draw_state, save_draw_state
from .logging_setup import setup_logging
from .rng import create_rng
from .serialize import export_filename, write_bingo_cards
from .validation import BingoCardsFileError, load_bingo_cards, sanitize_filename, user_message
from .verify import verify_game
from .version import __version__

app = typer.Typer(help="90-ball bingo card generator and game checker")

logger = logging.getLogger(__name__)


def _fail(message: str) -> None:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


def _parse_numbers(text: str) -> List[int]:
    parts = [part for part in text.replace(" ", "").split(",") if part]
    if not all(re.fullmatch(r"[0-9]+", part) for part in parts):
        _fail(f"Drawn numbers must be comma-separated integers: {text!r}")
    return [int(part) for part in parts]


def _load_game(cards_file: Path):
    try:
        return load_bingo_cards(cards_file)
    except BingoCardsFileError as e:
        details = f" ({e.issue.details})" if e.issue.details else ""
        _fail(f"{user_message(e.issue.code)}{details}")
    except OSError as e:
        _fail(f"Cannot read {cards_file}: {e}")


@app.callback(invoke_without_command=True)
def common_options(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", help="Show application version and exit", is_eager=True
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(0)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


@app.command()
def generate(
    count: Optional[int] = typer.Option(None, "--count", "-n", help="Number of cards"),
    event_header: Optional[str] = typer.Option(None, "--event-header", help="Event name used in filenames"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for reproducible batches"),
    engine: Optional[str] = typer.Option(None, "--engine", help="py_random|lcg|numpy_pcg64"),
    out_dir: Optional[str] = typer.Option(None, "--out-dir", help="Directory for the .bingoCards file"),
    config: Optional[str] = typer.Option(None, "--config", help="Path to config file (YAML/JSON)"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Log file path"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG|INFO|WARN|ERROR"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Resolve params and exit"),
    force: bool = typer.Option(False, "--force", help="Overwrite output if it exists"),
    no_mkdirs: bool = typer.Option(False, "--no-mkdirs", help="Do not create parent directories"),
) -> None:
    """Generate a batch of unique cards and write it as .bingoCards."""
    cli_overrides = {}
    if count is not None:
        cli_overrides["count"] = count
    if event_header:
        cli_overrides["event_header"] = event_header
    if seed is not None:
        cli_overrides["seed.value"] = seed
    if engine:
        cli_overrides["seed.engine"] = engine
    if out_dir:
        cli_overrides["out_dir"] = out_dir
    if log_file:
        cli_overrides["log_file"] = log_file
    if log_level:
        cli_overrides["log_level"] = log_level

    try:
        resolved, params_hash, _cfg_path = resolve_parameters(
            config_path_str=config, cli_overrides=cli_overrides
        )
    except (OSError, ValueError) as e:
        _fail(f"Invalid configuration: {e}")

    setup_logging(level=str(resolved.get("log_level", "INFO")), log_file=resolved.get("log_file"))

    if dry_run:
        typer.echo(f"Params hash: {params_hash}")
        raise typer.Exit(0)

    n_cards = int(resolved.get("count") or 0)
    if n_cards < 0:
        _fail(f"--count must be non-negative, got {n_cards}")
    header = str(resolved.get("event_header") or "bingo")
    seed_cfg = resolved.get("seed") or {}
    seed_value = seed_cfg.get("value")
    rng = None
    try:
        if seed_value is not None:
            rng = create_rng(str(seed_cfg.get("engine") or "py_random"), int(seed_value))
    except (RuntimeError, ValueError) as e:
        _fail(str(e))

    logger.info("Generating %d cards for %r (%s)", n_cards, header, params_hash)
    now = datetime.now()
    game = build_game(n_cards, header, rng, now, max_attempts=int(resolved.get("max_attempts") or 100))

    target = Path(resolved.get("out_dir") or ".") / export_filename(sanitize_filename(header), now)
    try:
        write_bingo_cards(target, game, mkdirs=not no_mkdirs, overwrite=force)
    except (FileExistsError, FileNotFoundError) as e:
        _fail(str(e))

    typer.echo(f"Generated {len(game.cards)} cards: {target}")


@app.command()
def verify(
    cards_file: Path = typer.Argument(..., help="Path to a .bingoCards file"),
    as_json: bool = typer.Option(False, "--json", help="Print the full report as JSON"),
) -> None:
    """Validate a .bingoCards file and audit every card on it."""
    game = _load_game(cards_file)
    report = verify_game(game)
    if as_json:
        typer.echo(json.dumps(report, ensure_ascii=True, sort_keys=True, indent=2))
    else:
        typer.echo(f"Cards: {report['cards']}")
        for number, problems in report["violations"].items():  # type: ignore[union-attr]
            for problem in problems:
                typer.echo(f"  card {number}: {problem}")
        typer.echo(f"Identical cards: {'no' if report['ok_no_identical_cards'] else 'yes'}")
    if not (report["ok_cards_valid"] and report["ok_no_identical_cards"]):
        raise typer.Exit(code=1)


@app.command()
def check(
    cards_file: Path = typer.Argument(..., help="Path to a .bingoCards file"),
    card: str = typer.Option(..., "--card", help="Card number to check"),
    drawn: Optional[str] = typer.Option(None, "--drawn", help="Comma-separated drawn numbers"),
    state: Optional[Path] = typer.Option(None, "--state", help="Draw state JSON file"),
    kind: str = typer.Option("line", "--kind", help="line|bingo"),
) -> None:
    """Check a line or bingo claim for one card."""
    if kind not in CLAIM_KINDS:
        _fail(f"--kind must be one of {', '.join(sorted(CLAIM_KINDS))}")
    game = _load_game(cards_file)
    numbers: List[int] = []
    if state is not None:
        try:
            numbers.extend(load_draw_state(state).to_list())
        except ValueError as e:
            _fail(f"Invalid draw state: {e}")
    if drawn:
        numbers.extend(_parse_numbers(drawn))

    result = check_claim(game, card, numbers, kind=kind)
    messages = {
        ClaimStatus.VALID: f"Card {card}: {kind} is valid",
        ClaimStatus.NOT_VALID: f"Card {card}: {kind} is not valid",
        ClaimStatus.CARD_NOT_FOUND: f"Card {card} not found",
        ClaimStatus.INVALID_INPUT: f"Not a card number: {card!r}",
    }
    typer.echo(messages[result.status])
    if not result.valid:
        raise typer.Exit(code=1)


@app.command()
def draw(
    state: Path = typer.Option(..., "--state", help="Draw state JSON file"),
    restart: bool = typer.Option(False, "--restart", help="Clear all drawn numbers"),
    mark: Optional[int] = typer.Option(None, "--mark", help="Record a number called by hand"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for the draw"),
) -> None:
    """Draw the next number into a persistent draw state."""
    try:
        current = load_draw_state(state)
    except ValueError as e:
        _fail(f"Invalid draw state: {e}")
    if restart:
        current.restart()
        save_draw_state(state, current)
        typer.echo("Draw restarted")
        return

    if mark is not None:
        try:
            current.mark(mark)
        except ValueError as e:
            _fail(str(e))
        number: Optional[int] = mark
    else:
        number = current.draw(create_rng("py_random", seed) if seed is not None else None)
    if number is None:
        typer.echo("All numbers drawn")
        return
    save_draw_state(state, current)
    recent = ", ".join(str(n) for n in current.recent())
    typer.echo(f"Drawn: {number} ({len(current.drawn)} so far; recent: {recent})")


def main(_argv: list[str] | None = None) -> int:
    try:
        app(standalone_mode=True)
        return 0
    except SystemExit as e:
        return int(e.code) if e.code is not None else 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
