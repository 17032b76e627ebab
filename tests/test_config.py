"""
Tests for SolverConfig and the YAML loader.

Run with: pytest tests/test_config.py -v
"""

import sys
from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from src.assignment.config import SolverConfig, load_config
from src.assignment.solver import HungarianSolver, ScipyLAPSolver, create_solver


class TestSolverConfig:
    def test_defaults(self):
        config = SolverConfig()

        assert config.backend == "hungarian"
        assert config.check_invariants is False

    def test_frozen(self):
        with pytest.raises(FrozenInstanceError):
            SolverConfig().backend = "scipy"


class TestLoadConfig:
    def test_full_file(self, tmp_path):
        path = tmp_path / "solver.yaml"
        path.write_text("solver:\n  backend: scipy\n  check_invariants: true\n", encoding="utf-8")

        config = load_config(path)

        assert config == SolverConfig(backend="scipy", check_invariants=True)
        assert isinstance(create_solver(solver_config=config), ScipyLAPSolver)

    def test_partial_section_keeps_defaults(self, tmp_path):
        path = tmp_path / "solver.yaml"
        path.write_text("solver:\n  check_invariants: true\n", encoding="utf-8")

        config = load_config(str(path))

        assert config.backend == "hungarian"
        assert config.check_invariants is True

    @pytest.mark.parametrize("text", ["", "solver:\n", "other: 1\n"])
    def test_missing_section_gives_defaults(self, tmp_path, text):
        path = tmp_path / "solver.yaml"
        path.write_text(text, encoding="utf-8")

        assert load_config(path) == SolverConfig()
        assert isinstance(create_solver(solver_config=load_config(path)), HungarianSolver)

    def test_shipped_config(self):
        path = Path(__file__).resolve().parents[1] / "config" / "solver.yaml"
        assert load_config(path) == SolverConfig()

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "solver.yaml"
        path.write_text("solver:\n  time_limit_ms: 50\n", encoding="utf-8")

        with pytest.raises(TypeError):
            load_config(path)
