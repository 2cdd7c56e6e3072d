"""Bootstrap (composition root) for REPOBUILDER.

Assembles a test run at runtime: wires concrete adapters into a
`ServiceHandles` provider, and composes the run-scoped registry, service
locator, teardown coordinator and leak sweeper into a `BuilderRun`.

Import rules:
- Entry points and the pytest plugin import *this* package.
- This package may import: `repobuilder.adapters`, `repobuilder.builders`,
  `repobuilder.interfaces`, `repobuilder.domain`, and `repobuilder.config`.
- Inner layers must not import `repobuilder.bootstrap`.

No business rules live here; this is assembly and lifecycle only.
"""

from .bootstrap import memory_services, sqlalchemy_services, sweep_storage
from .run import BuilderRun

__all__ = [
    "BuilderRun",
    "memory_services",
    "sqlalchemy_services",
    "sweep_storage",
]
