"""Global pytest fixtures for REPOBUILDER."""

pytest_plugins = [
    "pytester",
    "tests.fixtures.sqlite",
    "tests.fixtures.backends",
    "repobuilder.pytest_plugin",
]
