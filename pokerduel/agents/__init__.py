"""
pokerduel Agents - computer opponents

This module provides the agent interface, the scripted opponent policy and
a call-station baseline for tests.
"""

from pokerduel.agents.base import BaseAgent, CallAgent, Decision, OpponentView
from pokerduel.agents.opponent import OpponentPolicy

__all__ = ["BaseAgent", "CallAgent", "Decision", "OpponentView", "OpponentPolicy"]
