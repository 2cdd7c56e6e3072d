"""Adapters (infrastructure) for REPOBUILDER.

Provide concrete implementations of the interfaces consumed by the builders:
in-memory and SQLAlchemy persistence backends, content-addressed asset stores,
ID generators, plus persistence mapping and related wiring (engines, metadata,
migrations).

Dependency rule: may import `repobuilder.domain` and `repobuilder.interfaces`;
neither may import this package.
"""
