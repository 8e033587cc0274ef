"""Agent module: the simulation facade and its process runner."""

from blitz_markets.agent.runner import DemoRunner, main, run_demo
from blitz_markets.agent.simulation import BotSimulation

__all__ = [
    "BotSimulation",
    "DemoRunner",
    "main",
    "run_demo",
]
