# kvm_persistent_net/orchestrator/__init__.py
from .orchestrator import Orchestrator, Stage

__all__ = ["Orchestrator", "Stage"]
