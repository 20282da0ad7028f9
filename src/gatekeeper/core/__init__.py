"""Core services and cross-cutting concerns.

Submodules are imported explicitly (``gatekeeper.core.errors``,
``gatekeeper.core.database``...) so that ``gatekeeper.config`` can depend
on ``gatekeeper.core.constants`` without import cycles.
"""
