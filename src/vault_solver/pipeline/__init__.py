from __future__ import annotations

from .run import run_solver, solve

__all__ = ["run_solver", "solve"]
