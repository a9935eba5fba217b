"""CLI for fluq."""

from __future__ import annotations

import io
import json
import logging
import sys

import click

from fluq import __version__


@click.group()
@click.version_option(__version__)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warn", "error"]),
    default="info",
    show_default=True,
    help="Minimum severity written to stderr.",
)
@click.option("--log-file", envvar="LOG_FILE", default=None, help="Also append log lines to this file.")
def main(log_level: str, log_file: str | None) -> None:
    """fluq: commit, mix, screen and score randomness rounds."""
    from fluq.log import configure_logging

    level = {"debug": logging.DEBUG, "info": logging.INFO,
             "warn": logging.WARNING, "error": logging.ERROR}[log_level]
    configure_logging(level=level, log_file=log_file, stream=sys.stderr)


# ────────────────────────────────────────────────────────────
# Rounds
# ────────────────────────────────────────────────────────────


@main.command("round")
@click.option("--round-id", default=None, help="Round identifier (default: round-<epoch ms>).")
@click.option("--prev-hash", envvar="PREV_ROUND_HASH", default=None,
              help="Previous round hash, 64 hex chars.")
@click.option("--timeout", "collect_timeout", default=20.0, type=float, show_default=True,
              help="Seconds to wait for all collectors.")
@click.option("--node-id", default="local-node-0", show_default=True)
@click.option("--keyboard/--no-keyboard", default=False,
              help="Prompt for typed input as the keyboard source.")
@click.option("--json", "as_json", is_flag=True, help="Print the round record as JSON.")
def round_cmd(
    round_id: str | None,
    prev_hash: str | None,
    collect_timeout: float,
    node_id: str,
    keyboard: bool,
    as_json: bool,
) -> None:
    """Run one full round and print its record."""
    from fluq.collectors import CpuNoiseCollector, CryptoCollector, KeyboardCollector, PointerCollector
    from fluq.config import RoundConfig
    from fluq.errors import CommitmentMismatch
    from fluq.round import RoundOrchestrator, new_round_id

    try:
        config = RoundConfig.from_env(
            prev_round_hash=prev_hash,
            collect_timeout=collect_timeout,
            node_id=node_id,
        )
    except ValueError as e:
        raise click.BadParameter(str(e)) from e

    round_id = round_id or new_round_id()
    kb = (
        KeyboardCollector(round_id=round_id, prompt=True)
        if keyboard
        else KeyboardCollector(round_id=round_id, stream=io.StringIO())
    )
    collectors = [PointerCollector(), kb, CpuNoiseCollector(), CryptoCollector()]

    try:
        outcome = RoundOrchestrator(collectors, config=config).play_round(round_id)
    except CommitmentMismatch:
        # the orchestrator has already logged the fatal line
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(outcome.record.as_dict(), indent=2))
        return
    _print_outcome(outcome)


def _print_outcome(outcome) -> None:
    from rich.console import Console
    from rich.panel import Panel
    from rich.table import Table

    console = Console()
    rec = outcome.record

    table = Table(show_header=True, header_style="bold")
    table.add_column("Source")
    table.add_column("Bytes", justify="right")
    table.add_column("Fallback", justify="center")
    table.add_column("Cheat check")
    for c in outcome.contributions:
        cheat = outcome.cheats.get(c.source_id)
        table.add_row(
            c.source_id,
            str(len(c.raw)),
            "yes" if c.fallback else "no",
            cheat.reason if cheat and cheat.cheated else "ok",
        )

    body = "\n".join([
        f"round_id:       {rec.round_id}",
        f"prev_root_hash: {rec.prev_root_hash}",
        f"timestamp:      {rec.timestamp}",
        f"commit:         {rec.reveals[0]['commit']}",
        f"R_round:        {rec.r_round}",
        f"score:          {outcome.score.score} ({outcome.score.category})",
        f"awarded:        {rec.awarded} ({outcome.reward.category})",
    ])
    console.print(table)
    console.print(Panel(body, title="Round record", expand=False))


# ────────────────────────────────────────────────────────────
# Pipeline stages
# ────────────────────────────────────────────────────────────


@main.command()
@click.argument("score", type=float)
@click.argument("miner_id", default="test-miner")
def reward(score: float, miner_id: str) -> None:
    """Compute the token reward for SCORE and credit MINER_ID."""
    from fluq.errors import InvalidMinerId, InvalidScore
    from fluq.reward import award_tokens

    try:
        award = award_tokens(miner_id, {}, score)
    except InvalidScore as e:
        raise click.BadParameter(f"Invalid score: {e}", param_hint="SCORE") from e
    except InvalidMinerId as e:
        raise click.BadParameter(str(e), param_hint="MINER_ID") from e
    click.echo("Computed reward:")
    click.echo(json.dumps(award.reward.as_dict(), indent=2))
    click.echo(f"\nAwarded {award.awarded} token(s) to miner '{miner_id}'.")
    click.echo("Updated balances (example):")
    click.echo(json.dumps(dict(award.balances), indent=2))


@main.command()
@click.argument("buffers", nargs=-1, required=True)
@click.option("--previous", multiple=True, help="Previous round buffer (hex), repeatable.")
@click.option("--max-bits", default=2048, show_default=True, type=int)
def score(buffers: tuple[str, ...], previous: tuple[str, ...], max_bits: int) -> None:
    """Uniqueness score for BUFFERS (hex or text)."""
    from fluq.normalize import normalize
    from fluq.scoring import compute_uniqueness_score

    result = compute_uniqueness_score(
        [normalize(b) for b in buffers],
        previous_rounds=[normalize(p) for p in previous],
        max_bits=max_bits,
    )
    click.echo(json.dumps(result.as_dict(), indent=2))


@main.command()
@click.argument("inputs", nargs=-1, required=True)
@click.option("--salt", default=None)
@click.option("--round-id", default=None)
@click.option("--prev-hash", default=None)
def mix(inputs: tuple[str, ...], salt: str | None, round_id: str | None, prev_hash: str | None) -> None:
    """Shuffle and hash INPUTS into a round seed."""
    from fluq.mixer import mix_randomness

    seed = mix_randomness(list(inputs), salt=salt, round_id=round_id, prev_hash=prev_hash)
    click.echo(json.dumps(seed.as_dict(), indent=2))


@main.command()
@click.argument("current")
@click.option("--previous", default=None, help="Previous round buffer (hex or text).")
def check(current: str, previous: str | None) -> None:
    """Run the cheat detector on CURRENT (hex or text)."""
    from fluq.detector import detect_cheating
    from fluq.normalize import normalize

    prev = normalize(previous) if previous is not None else None
    result = detect_cheating(normalize(current), prev)
    click.echo(json.dumps({"cheated": result.cheated, "reason": result.reason}))


# ────────────────────────────────────────────────────────────
# Discovery
# ────────────────────────────────────────────────────────────


@main.command()
def scan() -> None:
    """List the collectors usable on this machine."""
    from fluq.hashing import available_algorithms
    from fluq.platform import collector_status, platform_info

    info = platform_info()
    click.echo(f"Platform: {info['system']} {info['machine']} (Python {info['python']}, {info['cpus']} CPUs)")
    click.echo()
    for row in collector_status():
        mark = "✅" if row["available"] else "⚪"
        click.echo(f"  {mark} {row['name']:<10} {row['description']}")
    click.echo(f"\nHash algorithms: {', '.join(available_algorithms())}")


@main.command()
@click.argument("source", type=click.Choice(["cpu", "crypto"]))
@click.option("--round-id", default=None)
@click.option("--samples", "sample_target", default=4096, show_default=True, type=int,
              help="Timing samples to take (cpu only).")
def sample(source: str, round_id: str | None, sample_target: int) -> None:
    """Collect once from SOURCE and print the detailed report."""
    from fluq.collectors import CpuNoiseCollector, CryptoCollector

    if source == "cpu":
        report = CpuNoiseCollector(sample_target=sample_target).collect_detailed()
    else:
        report = CryptoCollector().collect_detailed(round_id)
    click.echo(json.dumps(report, indent=2))
