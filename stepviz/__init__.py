"""stepviz: live visualization of externally driven workflows."""

from .config import StepvizConfig, load_config
from .connection import ConnectionManager, ConnectionStatus
from .contracts import Step, StepStatus, parse_event
from .dispatch import EventDispatcher
from .graph import GraphState
from .progress import ProgressReport, ProgressTracker
from .renderer import Renderer
from .scene import get_scene
from .transports import get_transport
from .visualization import WorkflowVisualization

__version__ = "0.1.0"
__all__ = [
    "ConnectionManager",
    "ConnectionStatus",
    "EventDispatcher",
    "GraphState",
    "ProgressReport",
    "ProgressTracker",
    "Renderer",
    "Step",
    "StepStatus",
    "StepvizConfig",
    "WorkflowVisualization",
    "get_scene",
    "get_transport",
    "load_config",
    "parse_event",
]
