from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import List, Mapping, Optional, Tuple

from .errors import InvalidInput
from .models import Process
from .registry import ProcessRegistry

logger = logging.getLogger(__name__)


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.

    Entries without a ``pid`` are numbered in file order, starting at 1 and
    skipping any pid given explicitly elsewhere in the file.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        rows = _load_json(path)
    elif suffix == ".csv":
        rows = _load_csv(path)
    else:
        raise InvalidInput(f"Unsupported workload format: {suffix} (use .json or .csv)")

    entries = [_parse_entry(row) for row in rows]

    registry = ProcessRegistry()
    registry.reserve(pid for pid, _, _ in entries if pid is not None)

    processes = []
    for pid, arrival_time, burst_time in entries:
        if pid is None:
            processes.append(registry.add(arrival_time, burst_time))
        else:
            processes.append(Process(pid=pid, arrival_time=arrival_time, burst_time=burst_time))
    logger.info("Loaded %d processes from %s", len(processes), path)
    return processes


def _load_json(path: Path) -> List[Mapping]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InvalidInput(f"{path}: invalid JSON ({exc})") from exc

    if not isinstance(raw, list):
        raise InvalidInput("JSON workload must be a list of process objects")

    return raw


def _load_csv(path: Path) -> List[Mapping]:
    with path.open("r", encoding="utf-8", newline="") as f:
        try:
            return list(csv.DictReader(f))
        except (csv.Error, UnicodeDecodeError) as exc:
            raise InvalidInput(f"{path}: invalid CSV ({exc})") from exc


def _as_int(value) -> int:
    # JSON gives real ints; CSV gives strings. Floats and bools are never
    # silently truncated.
    if isinstance(value, bool):
        raise ValueError(f"not an integer: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return int(value.strip())
    raise TypeError(f"not an integer: {value!r}")


def _parse_entry(mapping) -> Tuple[Optional[int], int, int]:
    try:
        arrival_time = _as_int(mapping["arrival_time"])
        burst_time = _as_int(mapping["burst_time"])
        pid_val = mapping.get("pid")
        if pid_val in (None, ""):
            pid = None
        elif isinstance(pid_val, str):
            pid = _as_int(pid_val.strip().lstrip("Pp"))
        else:
            pid = _as_int(pid_val)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise InvalidInput(f"Invalid process entry: {mapping!r}") from exc

    return pid, arrival_time, burst_time
