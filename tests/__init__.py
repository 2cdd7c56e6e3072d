"""REPOBUILDER test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- contract/     : Behavior every backend (memory, SQLite) and asset store must share.
- integration/  : SQLite files, the local filesystem and Alembic migrations.
- e2e/          : The `repobuilder` CLI driven through click's CliRunner.
- fixtures/     : Shared fixtures, registered via `pytest_plugins` (no tests here).

General guidance
- Builder lifecycle tests use the in-memory backend unless storage is the point.
- Contract tests take the `provider`/`handles`/`session` fixtures, so a new
  backend only has to be added to `tests/fixtures/backends.py`.
- Directory conftests apply the unit, contract, integration and e2e markers.
"""
