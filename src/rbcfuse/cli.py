"""rbcfuse command-line interface."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from rbcfuse.config import load_config
from rbcfuse.errors import InvalidPersistence, InvalidRunWeights
from rbcfuse.fusion.rbc import fuse_ranking
from rbcfuse.logging import get_logger, setup_logging

log = get_logger(__name__)

# Rankings R1-R4 from Bailey et al. (SIGIR 2017), Table 1
EXAMPLE_RANKINGS: list[list[str]] = [
    ["A", "D", "B", "C", "G", "F"],
    ["B", "D", "E", "C"],
    ["A", "B", "D", "C", "G", "F", "E"],
    ["G", "D", "E", "A", "F", "C"],
]


@click.group()
@click.option("--log-level", default=None, help="Logging level (default from RBCFUSE_LOG_LEVEL)")
@click.option("--log-json", is_flag=True, help="Emit JSON-formatted logs")
@click.pass_context
def cli(ctx, log_level: str | None, log_json: bool):
    """rbcfuse: fuse ranked lists with Rank-Biased Centroids."""
    config = load_config()
    level = log_level or config.log_level
    setup_logging(level=level, json_output=log_json or config.log_json)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command()
@click.argument("files", nargs=-1, type=click.Path(exists=True, allow_dash=True))
@click.option("-p", "--persistence", type=float, default=None, help="Persistence p, 0 <= p < 1")
@click.option(
    "-w", "--weight", "weights", type=float, multiple=True,
    help="Run weight; repeat once per ranking, in input order",
)
@click.option(
    "--format", "fmt", type=click.Choice(["auto", "json", "jsonl", "lines"]), default="auto",
    help="Input format (auto: by file suffix, stdin is read as JSONL)",
)
@click.option(
    "--top-n", type=click.IntRange(min=1), default=None, help="Only print the first N fused items",
)
@click.option("--no-scores", is_flag=True, help="Print items without scores")
@click.option("--json", "as_json", is_flag=True, help="Emit the fused ranking as JSON")
@click.pass_context
def fuse(
    ctx,
    files: tuple[str, ...],
    persistence: float | None,
    weights: tuple[float, ...],
    fmt: str,
    top_n: int | None,
    no_scores: bool,
    as_json: bool,
):
    """Fuse rankings read from FILES (or stdin) into one consensus ranking.

    \b
    Input formats:
      json   a JSON array of rankings, each an array of items
      jsonl  one JSON array (a ranking) per line
      lines  one ranking per file, one item per line
    """
    fusion_cfg = ctx.obj["config"].fusion
    p = fusion_cfg.persistence if persistence is None else persistence
    limit = top_n if top_n is not None else fusion_cfg.top_n

    rankings = _read_rankings(files or ("-",), fmt)
    if not rankings:
        click.echo("No rankings found in input", err=True)
        sys.exit(1)

    try:
        result = fuse_ranking(
            rankings,
            p,
            weights=list(weights) if weights else None,
            schedule_prefix=fusion_cfg.schedule_prefix,
        )
    except InvalidPersistence as exc:
        raise click.BadParameter(str(exc), param_hint="'-p' / '--persistence'") from exc
    except InvalidRunWeights as exc:
        raise click.BadParameter(str(exc), param_hint="'-w' / '--weight'") from exc

    if limit is not None:
        result = result.top(limit)

    log.info("fused", n_rankings=len(rankings), n_items=len(result), persistence=p)
    _echo_ranking(result.with_scores(), no_scores=no_scores, as_json=as_json)


@cli.command()
@click.option("-p", "--persistence", type=float, default=0.9, show_default=True, help="Persistence p")
def example(persistence: float):
    """Fuse the four example rankings from the RBC paper."""
    for i, ranking in enumerate(EXAMPLE_RANKINGS, 1):
        click.echo(f"R{i}: {' '.join(ranking)}")
    try:
        result = fuse_ranking(EXAMPLE_RANKINGS, persistence)
    except InvalidPersistence as exc:
        raise click.BadParameter(str(exc), param_hint="'-p' / '--persistence'") from exc

    click.echo(f"\nFused (p={persistence}):")
    _echo_ranking(result.with_scores(), no_scores=False, as_json=False)


def _echo_ranking(entries: list[tuple[object, float]], no_scores: bool, as_json: bool) -> None:
    if as_json:
        if no_scores:
            payload: list = [item for item, _ in entries]
        else:
            payload = [{"item": item, "score": score} for item, score in entries]
        click.echo(json.dumps(payload))
        return

    for rank, (item, score) in enumerate(entries, 1):
        if no_scores:
            click.echo(str(item))
        else:
            click.echo(f"{rank:>4}  {item}  {score:.4f}")


def _read_rankings(files: tuple[str, ...], fmt: str) -> list[list]:
    rankings: list[list] = []
    for name in files:
        text = _read_text(name)
        kind = fmt if fmt != "auto" else _guess_format(name)
        if kind == "json":
            data = _parse_json(text, name)
            if not isinstance(data, list) or not all(isinstance(r, list) for r in data):
                raise click.BadParameter(f"{name}: expected a JSON array of arrays")
            rankings.extend(data)
        elif kind == "jsonl":
            for lineno, line in enumerate(text.splitlines(), 1):
                line = line.strip()
                if not line:
                    continue
                data = _parse_json(line, f"{name}:{lineno}")
                if not isinstance(data, list):
                    raise click.BadParameter(f"{name}:{lineno}: expected a JSON array")
                rankings.append(data)
        else:
            rankings.append([line.strip() for line in text.splitlines() if line.strip()])

    for i, ranking in enumerate(rankings):
        for item in ranking:
            if isinstance(item, (list, dict)):
                raise click.BadParameter(
                    f"ranking {i}: items must be strings or numbers, got {json.dumps(item)}"
                )
    return rankings


def _guess_format(name: str) -> str:
    if name == "-":
        return "jsonl"
    suffix = Path(name).suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix == ".jsonl":
        return "jsonl"
    return "lines"


def _read_text(name: str) -> str:
    if name == "-":
        return click.get_text_stream("stdin").read()
    return Path(name).read_text()


def _parse_json(text: str, where: str):
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"{where}: invalid JSON ({exc.msg})") from exc


if __name__ == "__main__":
    cli()
