"""Infrastructure bindings for neo-rbac."""
