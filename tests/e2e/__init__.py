"""End-to-end tests.

Purpose
- Drive the installed `repobuilder` command the way an operator would.

Guidelines
- Invoke through `click.testing.CliRunner`; point the CLI at temp databases
  via environment variables.
- Assert exit codes and user-visible output, not internals.
"""
