"""Bootstrap feature: one-time grant of SUPER_ADMIN to a configured principal."""

from .services import BootstrapService

__all__ = ["BootstrapService"]
