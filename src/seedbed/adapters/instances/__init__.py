"""Instance managers: containers started on demand, or servers attached to."""

from .attached import AttachedInstanceManager
from .containers import TestcontainersInstanceManager

__all__ = ["AttachedInstanceManager", "TestcontainersInstanceManager"]
