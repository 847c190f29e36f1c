"""
Census of every state reachable from the empty board.

Walks the game tree breadth-first through GameState.moves, tabulates each
distinct state once, and writes the table with a provenance manifest.
"""
from __future__ import annotations

import csv
import hashlib
import importlib.util
import json
import logging
import sys
from collections import Counter, deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, Dict, List, Optional

from .game import GameState, Status
from .paths import data_raw, get_git_commit, get_git_is_dirty
from .tracking import log_artifact, log_params

CENSUS_VERSION = "1.0.0"

TERMINAL_SCORES = {Status.X_WON: 1, Status.O_WON: -1, Status.DRAWN: 0}


@dataclass
class CensusArgs:
    out: Path = field(default_factory=data_raw)
    format: str = "csv"  # one of: "csv", "parquet", "both"
    with_scores: bool = False
    cli_argv: Optional[List[str]] = None


def enumerate_reachable() -> List[GameState]:
    """Distinct states reachable from new(), in breadth-first discovery order."""
    start = GameState.new()
    seen = {start}
    order = [start]
    q = deque([start])
    while q:
        s = q.popleft()
        for child in s.moves():
            if child not in seen:
                seen.add(child)
                order.append(child)
                q.append(child)
    return order


def build_rows(states: List[GameState], with_scores: bool = False) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for n, s in enumerate(states, 1):
        status = s.status()
        row: Dict[str, Any] = {
            'board': s.to_board(),
            'state_id': s.packed,
            'turn': s.turn.value,
            'status': status.value,
            'filled': s.filled,
            'n_moves': len(s.moves()),
        }
        if status in TERMINAL_SCORES:
            row['score'] = TERMINAL_SCORES[status]
        elif with_scores:
            row['score'] = s.score()
        else:
            row['score'] = None
        rows.append(row)
        if with_scores and n % 500 == 0:
            logging.info("Scored %d/%d states", n, len(states))
    return rows


def terminal_split(rows: List[Dict[str, Any]]) -> Dict[str, int]:
    c = Counter(r['status'] for r in rows)
    return {
        "x": c[Status.X_WON.value],
        "o": c[Status.O_WON.value],
        "draw": c[Status.DRAWN.value],
    }


def sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open('rb') as f:
        for chunk in iter(lambda: f.read(8192), b''):
            h.update(chunk)
    return h.hexdigest()


def write_csv(path: Path, rows: List[Dict[str, Any]]) -> None:
    fnames = sorted({k for r in rows for k in r.keys()})
    rows_sorted = sorted(rows, key=lambda r: (r['filled'], r['board']))
    with path.open('w', newline='') as f:
        w = csv.DictWriter(f, fieldnames=fnames)
        w.writeheader()
        for r in rows_sorted:
            w.writerow(r)


def _have_parquet_stack() -> bool:
    return all(importlib.util.find_spec(m) is not None for m in ("pandas", "pyarrow"))


def _package_versions() -> Dict[str, str]:
    versions: Dict[str, str] = {}
    for pkg in ["pandas", "pyarrow", "mlflow"]:
        try:
            versions[pkg] = version(pkg)
        except PackageNotFoundError:
            continue
    return versions


def run_census(args: CensusArgs) -> Path:
    fmt = (args.format or "csv").lower()
    if fmt not in {"csv", "parquet", "both"}:
        raise ValueError(f"Unknown census format: {args.format}")
    want_parquet = fmt in {"parquet", "both"}
    if want_parquet and not _have_parquet_stack():
        msg = "Parquet output needs pandas and pyarrow (pip install .[parquet])."
        if fmt == "parquet":
            raise RuntimeError(msg)
        logging.warning("%s Writing CSV only.", msg)
        want_parquet = False

    args.out.mkdir(parents=True, exist_ok=True)
    logging.info("Enumerating reachable states…")
    states = enumerate_reachable()
    logging.info("Found %d reachable states", len(states))
    rows = build_rows(states, with_scores=args.with_scores)

    states_csv = args.out / 'ttt_states.csv'
    states_parquet = args.out / 'ttt_states.parquet'
    files: Dict[str, Optional[str]] = {"states_csv": None, "states_parquet": None}

    if fmt in {"csv", "both"}:
        write_csv(states_csv, rows)
        files["states_csv"] = str(states_csv)
        logging.info("Wrote %s (%d rows)", states_csv, len(rows))
    if want_parquet:
        import pandas as pd  # type: ignore

        df = pd.DataFrame(rows).sort_values(["filled", "board"], kind="stable")
        df.to_parquet(states_parquet, index=False)
        files["states_parquet"] = str(states_parquet)
        logging.info("Wrote %s", states_parquet)

    checksums = {label: sha256_file(Path(p)) for label, p in files.items() if p is not None}
    manifest = {
        "census_version": CENSUS_VERSION,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "args": {"format": fmt, "with_scores": args.with_scores},
        "cli_argv": args.cli_argv,
        "git_commit": get_git_commit(),
        "git_is_dirty": get_git_is_dirty(),
        "python": {
            "python_version": sys.version.split(" ")[0],
            "packages": _package_versions(),
        },
        "row_counts": {"states": len(rows)},
        "terminal_split": terminal_split(rows),
        "files": files,
        "checksums": checksums,
        "parquet_written": files["states_parquet"] is not None,
    }
    manifest_path = args.out / "manifest.json"
    manifest_path.write_text(json.dumps(manifest, indent=2))
    logging.info("Wrote %s", manifest_path)

    log_params({"format": fmt, "with_scores": args.with_scores, "rows_states": len(rows)})
    log_artifact(manifest_path)
    for p in files.values():
        if p is not None:
            log_artifact(Path(p))
    return args.out
