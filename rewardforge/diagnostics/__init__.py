"""Offline diagnostics for reward pools."""

from .checklist import ChecklistIssue, run_checklist
from .play_simulator import PlaySimulator, SimulationResult

__all__ = ["ChecklistIssue", "run_checklist", "PlaySimulator", "SimulationResult"]
