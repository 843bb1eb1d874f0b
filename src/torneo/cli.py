"""
Tournament Notation Analyzer - command-line harness.

Reads a notation file, runs the analysis pipeline and prints tables,
JSON or graph text. This is the only place that touches the filesystem.
"""
import argparse
import json
import sys
import time
import uuid
from pathlib import Path

import polars as pl

from .config import settings
from .exceptions import TorneoError
from .pipeline import AnalysisPipeline, AnalysisResult
from .reporting import (
    diagnostics_frame,
    scorers_frame,
    standings_frame,
    tokens_frame,
    top_scorers_frame,
    write_frame,
)
from .utils.observability import RUN_ID, Logger, initialize_observability

logger = Logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_DIAGNOSTICS = 2


def _analyze_file(path: str) -> AnalysisResult:
    text = Path(path).read_text(encoding="utf-8")
    return AnalysisPipeline(settings).run(text)


def cmd_tokens(args):
    """Print the token table."""
    logger.log_event('tokens_command_started', file=args.file)
    result = _analyze_file(args.file)

    df = tokens_frame(result.tokens)

    print(f"{'#':>4}  {'KIND':<10} {'LINE':>5} {'COL':>4}  LEXEME")
    print("-" * 60)
    for i, row in enumerate(df.iter_rows(named=True), start=1):
        print(f"{i:>4}  {row['kind']:<10} {row['line']:>5} {row['column']:>4}  {row['lexeme']}")
    print(f"\n{df.height} tokens, {len(result.lexical_diagnostics)} lexical errors")

    if args.output:
        path = write_frame(df, args.output)
        print(f"[OK] Tokens saved to: {path}")


def cmd_check(args):
    """Print diagnostics; exit code 2 when there are any."""
    logger.log_event('check_command_started', file=args.file)
    result = _analyze_file(args.file)

    df = diagnostics_frame(result.diagnostics)
    if args.output:
        path = write_frame(df, args.output)
        print(f"[OK] Diagnostics saved to: {path}")

    if not result.has_errors:
        print("[OK] No errors found")
        return EXIT_OK

    _print_diagnostics(df, result)
    return EXIT_DIAGNOSTICS


def cmd_model(args):
    """Dump the tournament model as JSON."""
    result = _analyze_file(args.file)
    payload = result.to_dict() if args.full else result.model.to_dict()
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def cmd_stats(args):
    """Print standings and top scorers, optionally exporting them."""
    result = _analyze_file(args.file)
    logger.log_event('stats_command_started', file=args.file)

    title = result.model.metadata.get("nombre", Path(args.file).stem)
    _print_standings(title, result)
    _print_top_scorers(result, args.limit)

    if args.output:
        path = write_frame(standings_frame(result.standings), args.output)
        print(f"[OK] Standings saved to: {path}")
    if args.scorers_output:
        path = write_frame(scorers_frame(result.scorers), args.scorers_output)
        print(f"[OK] Scorer events saved to: {path}")


def cmd_graph(args):
    """Emit the bracket as DOT text."""
    result = _analyze_file(args.file)
    logger.log_event('graph_command_started', file=args.file)

    if args.output:
        out_path = Path(args.output)
        out_path.write_text(result.graph, encoding="utf-8")
        print(f"[OK] Saved to: {out_path}")
    else:
        sys.stdout.write(result.graph)


def _print_diagnostics(df: pl.DataFrame, result: AnalysisResult):
    print(f"{'STAGE':<10} {'LINE':>5} {'COL':>4}  {'KIND':<22} DESCRIPTION")
    print("-" * 80)
    for row in df.iter_rows(named=True):
        print(f"{row['stage']:<10} {row['line']:>5} {row['column']:>4}  {row['kind']:<22} {row['description']}")
    print(f"\n{len(result.lexical_diagnostics)} lexical, {len(result.syntax_diagnostics)} syntax errors")


def _print_standings(title: str, result: AnalysisResult):
    print(f"\n{'':=^80}")
    print(title.upper().center(80))
    print(f"{'':=^80}\n")

    print(f"{'#':>3}  {'TEAM':<22} {'PJ':>3} {'G':>3} {'E':>3} {'P':>3} {'GF':>4} {'GC':>4} {'DG':>4} {'PTS':>4}  FASE")
    for position, s in enumerate(result.standings, start=1):
        print(
            f"{position:>3}  {s.team[:22]:<22} {s.played:>3} {s.won:>3} {s.drawn:>3} {s.lost:>3} "
            f"{s.goals_for:>4} {s.goals_against:>4} {s.goal_difference:>+4} {s.points:>4}  {s.phase_reached}"
        )


def _print_top_scorers(result: AnalysisResult, limit: int):
    top = top_scorers_frame(result.scorers).head(limit)
    print("\n--- Goleadores ---")
    if len(top) == 0:
        print("  (sin goles registrados)")
        return
    for row in top.iter_rows(named=True):
        print(f"  {row['goals']:>3}  {row['player_name'][:24]:<24} {row['team']}")


def main():
    parser = argparse.ArgumentParser(description="Tournament Notation Analyzer")
    subparsers = parser.add_subparsers(dest="command", required=True)

    tokens = subparsers.add_parser("tokens", help="Print the token table")
    tokens.add_argument("file")
    tokens.add_argument("--output", "-o", help="Save the token table (supports .csv, .json, .parquet)")
    tokens.set_defaults(func=cmd_tokens)

    check = subparsers.add_parser("check", help="Report lexical and syntax errors")
    check.add_argument("file")
    check.add_argument("--output", "-o", help="Save the diagnostics (supports .csv, .json, .parquet)")
    check.set_defaults(func=cmd_check)

    model = subparsers.add_parser("model", help="Dump the tournament model as JSON")
    model.add_argument("file")
    model.add_argument("--full", action="store_true", help="Include tokens, diagnostics, stats and graph")
    model.set_defaults(func=cmd_model)

    stats = subparsers.add_parser("stats", help="Standings and top scorers")
    stats.add_argument("file")
    stats.add_argument("--limit", type=int, default=10, help="Top scorers to show")
    stats.add_argument("--output", "-o", help="Save standings (supports .csv, .json, .parquet)")
    stats.add_argument("--scorers-output", help="Save scorer events (supports .csv, .json, .parquet)")
    stats.set_defaults(func=cmd_stats)

    graph = subparsers.add_parser("graph", help="Bracket graph as DOT text")
    graph.add_argument("file")
    graph.add_argument("--output", "-o", help="Write DOT text to this file")
    graph.set_defaults(func=cmd_graph)

    args = parser.parse_args()

    initialize_observability(settings.observability)
    run_token = RUN_ID.set(str(uuid.uuid4()))
    start_time = time.time()

    try:
        exit_code = args.func(args)
    except (TorneoError, OSError) as e:
        logger.log_error("command_failed", command=args.command, error=str(e))
        print(f"ERROR: {e}")
        sys.exit(EXIT_FAILURE)
    finally:
        duration = time.time() - start_time
        logger.log_event('command_completed', command=args.command, duration_seconds=duration)
        RUN_ID.reset(run_token)

    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
