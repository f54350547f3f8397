"""
Client-side couplet authoring workflow: hesudhar correction, romanization
and couplet persistence over the admin HTTP API.
"""

from .client import BaakhClient
from .controller import CoupletWorkflow
from .state import WorkflowState, WorkflowStep

__all__ = ['BaakhClient', 'CoupletWorkflow', 'WorkflowState', 'WorkflowStep']
