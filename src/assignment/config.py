"""
Solver configuration dataclass and YAML loader.

Construct SolverConfig directly in code and tests, or load it from YAML
with `load_config()`:

    solver:
      backend: hungarian
      check_invariants: true
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import yaml


@dataclass(frozen=True)
class SolverConfig:
    """Tunable solver parameters.

    backend           : solver used by create_solver() when no name is given
    check_invariants  : re-check reduced costs and stars after every phase
                        (debugging aid, roughly doubles per-phase work)
    """

    backend: Literal["hungarian", "scipy"] = "hungarian"
    check_invariants: bool = False


def load_config(path: str | Path) -> SolverConfig:
    """Load a SolverConfig from a YAML file.

    Args:
        path: Path to a YAML config file with an optional ``solver`` section.

    Returns:
        SolverConfig; missing keys keep their defaults.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return SolverConfig(**(raw.get("solver") or {}))
