"""
Service layer helpers that host the selection engine over stored entities.
"""

from .entity_store import EntityStore
from .gesture_script import GestureScript, ScriptResult, run_script
from .scheduling_session import SchedulingSession

__all__ = ["EntityStore", "GestureScript", "SchedulingSession", "ScriptResult", "run_script"]
