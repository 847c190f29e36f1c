"""
Experiment tracking helpers (optional MLflow backend).

MLflow is imported only when tracking is requested, so it stays an optional
extra. Logging calls are no-ops unless a run is active.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

_active: Optional[Any] = None


@contextmanager
def maybe_mlflow_run(enabled: bool, run_name: str, log_dir: Optional[Path] = None) -> Iterator[bool]:
    """Open an MLflow run when enabled; yields whether tracking is active."""
    global _active
    if not enabled:
        yield False
        return
    try:
        import mlflow  # type: ignore
    except ImportError:
        logging.warning("mlflow not installed (pip install .[tracking]); continuing without tracking")
        yield False
        return

    if log_dir is not None:
        mlflow.set_tracking_uri(log_dir.resolve().joinpath("mlruns").as_uri())
    with mlflow.start_run(run_name=run_name):
        _active = mlflow
        try:
            yield True
        finally:
            _active = None


def log_params(params: Dict[str, object]) -> None:
    if _active is not None:
        _active.log_params(params)


def log_metrics(metrics: Dict[str, float]) -> None:
    if _active is not None:
        _active.log_metrics(metrics)


def log_artifact(path: Path, artifact_path: Optional[str] = None) -> None:
    if _active is not None:
        _active.log_artifact(str(path), artifact_path=artifact_path)
