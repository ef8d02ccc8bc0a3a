"""Voyage simulation along a trade route."""

from .voyage_simulator import SimulationResult, SimulationStep, VoyageSimulator

__all__ = ["SimulationResult", "SimulationStep", "VoyageSimulator"]
