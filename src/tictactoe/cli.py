from __future__ import annotations

import argparse
import csv
import logging
import sys
from pathlib import Path

from .census import CensusArgs, run_census
from .errors import TicTacToeError
from .game import GameState, Player
from .paths import data_raw
from .play import PlayerKind, play
from .solver import solve_state
from .tracking import log_metrics, log_params, maybe_mlflow_run

BOARD_HELP = "Board string, 9 chars of X/O/- row-major, e.g. XO--X---O"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ttt", description="Tic-tac-toe with exact minimax")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print environment and dependency info and exit",
    )

    kinds = [k.value for k in PlayerKind]
    p_play = sub.add_parser("play", help="Play a game; human moves are indices read from stdin")
    p_play.add_argument("--x", choices=kinds, default="computer", help="Who plays X (default: computer)")
    p_play.add_argument("--o", choices=kinds, default="computer", help="Who plays O (default: computer)")
    p_play.add_argument("--board", help="Start position (default: empty board)")
    p_play.add_argument(
        "--tracking",
        choices=["none", "mlflow"],
        default="none",
        help="Experiment tracking backend",
    )
    p_play.add_argument(
        "--log-dir",
        type=Path,
        default=Path("runs"),
        help="Directory for tracking logs/artifacts (for mlflow local backend)",
    )

    p_sol = sub.add_parser("solve", help="Score a board and list optimal cells for side-to-move")
    p_sol.add_argument("--board", help=BOARD_HELP + " (omit with --stdin)")
    p_sol.add_argument(
        "--stdin", action="store_true", help="Read many boards from stdin and stream CSV output"
    )

    p_mv = sub.add_parser("moves", help="List legal successor boards")
    p_mv.add_argument("--board", required=True, help=BOARD_HELP)

    p_r = sub.add_parser("render", help="Draw a board as a grid")
    p_r.add_argument("--board", required=True, help=BOARD_HELP)

    p_c = sub.add_parser("census", help="Tabulate every state reachable from the empty board")
    p_c.add_argument(
        "--out", type=Path, default=None, help="Output directory (default: $TTT_DATA_RAW or data_raw)"
    )
    p_c.add_argument(
        "--format",
        choices=["csv", "parquet", "both"],
        default="csv",
        help="Output format: csv (default), parquet, both",
    )
    p_c.add_argument(
        "--with-scores",
        action="store_true",
        help="Score live states too (slow: full tree search per state)",
    )
    p_c.add_argument("--tracking", choices=["none", "mlflow"], default="none")
    p_c.add_argument("--log-dir", type=Path, default=Path("runs"))

    return p


def _print_info() -> None:
    import platform
    from importlib.metadata import PackageNotFoundError, version

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["pandas", "pyarrow", "mlflow"]:
        try:
            print(f"{pkg}={version(pkg)}")
        except PackageNotFoundError:
            print(f"{pkg}=<not installed>")


def _print_version() -> None:
    from importlib.metadata import PackageNotFoundError, version

    try:
        print(version("tictactoe-minimax"))
    except PackageNotFoundError:
        print("unknown")


def _cmd_play(ns: argparse.Namespace) -> int:
    players = {Player.X: PlayerKind(ns.x), Player.O: PlayerKind(ns.o)}
    start = GameState.from_board(ns.board) if ns.board else None
    with maybe_mlflow_run(ns.tracking == "mlflow", run_name="play", log_dir=ns.log_dir):
        log_params({"x": ns.x, "o": ns.o, "start": (start or GameState.new()).to_board()})
        result = play(players, start=start)
        log_metrics({"score": float(result.score), "plies": float(result.plies)})
    return 0


def _cmd_solve(ns: argparse.Namespace) -> int:
    if ns.stdin:
        w = csv.writer(sys.stdout)
        w.writerow(["board", "turn", "status", "score", "best_moves"])
        for line in sys.stdin:
            raw = line.rstrip("\r\n")
            if not raw.strip():
                continue
            try:
                state = GameState.from_board(raw)
            except TicTacToeError as e:
                logging.debug("skipping %r: %s", raw, e)
                continue
            res = solve_state(state)
            w.writerow([
                res['board'],
                res['turn'],
                res['status'],
                res['score'],
                ' '.join(map(str, res['best_moves'])),
            ])
        return 0
    if not ns.board:
        logging.error("solve needs --board or --stdin")
        return 2
    res = solve_state(GameState.from_board(ns.board))
    logging.info(
        "turn=%s status=%s score=%d optimal=%s",
        res['turn'],
        res['status'],
        res['score'],
        list(res['best_moves']),
    )
    return 0


def _cmd_moves(ns: argparse.Namespace) -> int:
    state = GameState.from_board(ns.board)
    for i, (cell, child) in enumerate(zip(state.move_cells(), state.moves())):
        print(f"{i}\tcell={cell}\t{child.to_board()}")
    return 0


def _cmd_census(ns: argparse.Namespace, argv: list[str] | None) -> int:
    out = ns.out if ns.out is not None else data_raw()
    with maybe_mlflow_run(ns.tracking == "mlflow", run_name="census", log_dir=ns.log_dir):
        path = run_census(CensusArgs(
            out=out,
            format=ns.format,
            with_scores=ns.with_scores,
            cli_argv=list(argv) if argv is not None else None,
        ))
    logging.info("Census written to: %s", path)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    if ns.version:
        _print_version()
        return 0
    if ns.info:
        _print_info()
        return 0

    try:
        if ns.cmd == "play":
            return _cmd_play(ns)
        if ns.cmd == "solve":
            return _cmd_solve(ns)
        if ns.cmd == "moves":
            return _cmd_moves(ns)
        if ns.cmd == "render":
            print(GameState.from_board(ns.board))
            return 0
        if ns.cmd == "census":
            return _cmd_census(ns, argv)
    except (TicTacToeError, ValueError, EOFError) as e:
        logging.error("%s", e)
        return 2

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
