"""Snapshot file helpers."""
from __future__ import annotations

import contextlib
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Iterator, TextIO

from rich.console import Console

from shotchain.errors import SnapshotError

console = Console()


@contextlib.contextmanager
def atomic_text_write(path: Path) -> Iterator[TextIO]:
    """Write through a sibling temp file so readers never see a partial snapshot."""

    path.parent.mkdir(parents=True, exist_ok=True)
    handle = tempfile.NamedTemporaryFile("w", encoding="utf-8", delete=False, dir=path.parent, suffix=".tmp")
    staged = Path(handle.name)
    try:
        with handle:
            yield handle
            handle.flush()
            os.fsync(handle.fileno())
        staged.replace(path)
    except BaseException:
        staged.unlink(missing_ok=True)
        raise


def read_json(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        raise SnapshotError(f"Cannot read snapshot {path}: {exc}") from exc


def write_json(path: Path, payload: Any) -> Path:
    with atomic_text_write(path) as fh:
        json.dump(payload, fh, indent=2, ensure_ascii=False)
        fh.write("\n")
    return path


def log_path(path: Path) -> None:
    console.log(f"[bold green]snapshot written[/] {path}")
