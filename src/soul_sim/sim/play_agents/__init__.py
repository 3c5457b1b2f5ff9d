"""Play agent implementations for headless encounter simulation.

Re-exports the base class and all concrete agent implementations so
consumers can do::

    from soul_sim.sim.play_agents import PlayAgent, RandomAgent
"""

from .base import PlayAgent
from .patient_agent import PatientAgent
from .random_agent import RandomAgent

__all__ = ["PlayAgent", "PatientAgent", "RandomAgent"]
