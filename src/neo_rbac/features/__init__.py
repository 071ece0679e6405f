"""Features module for neo-rbac.

Each feature bundles its entities, asyncpg repositories and services:
permissions (roles, bindings, resolution), audit (the ledger), bootstrap
(the configured super admin) and sessions (the per-request principal).
"""
