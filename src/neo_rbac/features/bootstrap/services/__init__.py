"""Bootstrap services."""

from .bootstrap_service import BootstrapService

__all__ = ["BootstrapService"]
