# kvm_persistent_net/config/__init__.py
from .config_loader import Config
from .run_config import RunConfig

__all__ = ["Config", "RunConfig"]
