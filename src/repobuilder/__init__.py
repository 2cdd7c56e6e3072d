"""REPOBUILDER

Integration-test object builders for a digital repository platform.
Builders create communities, collections, items, accounts and bitstreams
through the persistence services, and a run-scoped lifecycle tears them
down again in dependency-safe order before sweeping leaked bitstreams.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
