#!/usr/bin/env python3
"""
Verify a reachable-state census directory.

Checks performed:
- manifest.json exists and is parseable
- Files listed in manifest exist and match manifest.checksums
- CSV row count matches manifest.row_counts.states
- CSV status column agrees with manifest.terminal_split
- Every CSV board parses back to a state with the recorded state_id and turn

Exit codes:
 0 on success, 1 on a validation failure, 2 if the manifest is unusable.
"""
from __future__ import annotations

import argparse
import csv
import json
import sys
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List

from tictactoe.census import sha256_file
from tictactoe.errors import TicTacToeError
from tictactoe.game import GameState


def read_rows(path: Path) -> List[Dict[str, str]]:
    with path.open('r', newline='') as f:
        return list(csv.DictReader(f))


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Verify tic-tac-toe census output")
    ap.add_argument("out", type=Path, help="Census directory (contains manifest.json)")
    ns = ap.parse_args(argv)
    manifest_path = ns.out / "manifest.json"
    if not manifest_path.exists():
        print(f"ERROR: manifest not found: {manifest_path}", file=sys.stderr)
        return 2
    try:
        manifest = json.loads(manifest_path.read_text())
    except json.JSONDecodeError as e:
        print(f"ERROR: failed to parse manifest: {e}", file=sys.stderr)
        return 2

    ok = True
    files: Dict[str, Any] = manifest.get("files", {}) or {}
    checksums: Dict[str, Any] = manifest.get("checksums", {}) or {}
    rc = manifest.get("row_counts", {}) or {}

    for label, p in files.items():
        if p is None:
            continue
        fp = Path(p)
        if not fp.exists():
            print(f"ERROR: missing file listed in manifest: {label} -> {fp}", file=sys.stderr)
            ok = False
            continue
        want = checksums.get(label)
        have = sha256_file(fp)
        if want != have:
            print(f"ERROR: checksum mismatch for {label}: manifest={want} computed={have}", file=sys.stderr)
            ok = False

    states_csv = files.get("states_csv")
    if states_csv and Path(states_csv).exists():
        rows = read_rows(Path(states_csv))
        if rc.get("states") != len(rows):
            print(f"ERROR: row count mismatch: manifest={rc.get('states')} actual={len(rows)}", file=sys.stderr)
            ok = False
        c = Counter(r['status'] for r in rows)
        split = {"x": c["x_won"], "o": c["o_won"], "draw": c["drawn"]}
        if manifest.get("terminal_split") != split:
            print(f"ERROR: terminal split mismatch: manifest={manifest.get('terminal_split')} actual={split}",
                  file=sys.stderr)
            ok = False
        for r in rows:
            try:
                s = GameState.from_board(r['board'])
            except TicTacToeError as e:
                print(f"ERROR: unparseable board {r['board']!r}: {e}", file=sys.stderr)
                ok = False
                continue
            if str(s.packed) != r['state_id'] or s.turn.value != r['turn']:
                print(f"ERROR: row disagrees with its board: {r}", file=sys.stderr)
                ok = False

    if not ok:
        return 1
    print("OK: census verified", file=sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
