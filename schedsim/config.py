from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .errors import InvalidConfiguration

ALGORITHM_NAMES = ("fcfs", "sjf", "srtf", "rr")
QUANTUM_ALGORITHMS = {"rr"}
DEFAULT_QUANTUM = 2


def parse_quantum(value: Any) -> int:
    """
    Normalize a user supplied time quantum to a positive int.

    Accepts ints and strings holding an int; rejects everything else.
    """
    if value is None:
        raise InvalidConfiguration("Round Robin requires a time quantum (use --quantum)")
    if isinstance(value, bool):
        raise InvalidConfiguration(f"Time quantum must be an integer, got {value!r}")
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise InvalidConfiguration(f"Time quantum must be an integer, got {value!r}") from None
    elif isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise InvalidConfiguration(f"Time quantum must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidConfiguration(f"Time quantum must be greater than 0, got {value}")
    return value


@dataclass(frozen=True)
class RunConfig:
    algorithm: str
    quantum: Optional[Any] = None

    def validated(self) -> "RunConfig":
        name = str(self.algorithm).strip().lower()
        if name not in ALGORITHM_NAMES:
            raise InvalidConfiguration(
                f"Unknown algorithm '{self.algorithm}' (choose from {', '.join(ALGORITHM_NAMES)})"
            )
        if name in QUANTUM_ALGORITHMS:
            return RunConfig(algorithm=name, quantum=parse_quantum(self.quantum))
        return RunConfig(algorithm=name, quantum=None)
