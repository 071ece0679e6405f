"""Core exceptions and shared value objects for neo-rbac."""
