"""Entrypoints (inbound adapters) for REPOBUILDER.

Expose maintenance operations to the outside world as CLI commands. Parse and
validate inputs, call into `repobuilder.bootstrap`, and present results.
"""
