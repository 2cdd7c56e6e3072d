"""End-to-end tests for `repobuilder sweep`."""

from repobuilder.entrypoints.cli.main import repobuilder
from repobuilder.entrypoints.cli.sweep import LEAK_EXIT_CODE


def test_clean_database_exits_zero(runner, db_env):
    """Nothing to purge: exit 0 and a success line."""
    result = runner.invoke(repobuilder, ["sweep"], env=db_env)
    assert result.exit_code == 0, result.output
    assert "No leftover bitstreams." in result.output


def test_deleted_bitstreams_are_purged(runner, db_env, seed_bitstream):
    """Soft-deleted leftovers are expunged and listed on stdout."""
    bitstream_id = seed_bitstream(deleted=True)

    result = runner.invoke(repobuilder, ["sweep"], env=db_env)

    assert result.exit_code == 0, result.output
    assert bitstream_id in result.stdout
    assert "Expunged 1 deleted bitstream(s)." in result.output

    again = runner.invoke(repobuilder, ["sweep"], env=db_env)
    assert again.exit_code == 0
    assert "No leftover bitstreams." in again.output


def test_live_bitstreams_fail_strict_sweep(runner, db_env, seed_bitstream):
    """Never-deleted bitstreams are purged, then reported with the leak exit code."""
    bitstream_id = seed_bitstream(deleted=False)

    result = runner.invoke(repobuilder, ["sweep"], env=db_env)

    assert result.exit_code == LEAK_EXIT_CODE
    assert bitstream_id in result.stdout
    assert "never deleted" in result.output

    again = runner.invoke(repobuilder, ["sweep"], env=db_env)
    assert again.exit_code == 0


def test_live_bitstreams_only_warn_when_lenient(runner, db_env, seed_bitstream):
    """--lenient purges and warns without failing."""
    bitstream_id = seed_bitstream(deleted=False)

    result = runner.invoke(repobuilder, ["sweep", "--lenient"], env=db_env)

    assert result.exit_code == 0
    assert bitstream_id in result.stdout
    assert "Purged 1 bitstream(s) that were never deleted." in result.output


def test_assetstore_option_overrides_environment(runner, db_env, tmp_path):
    """--assetstore takes precedence over REPOBUILDER_ASSETSTORE_DIR."""
    other = tmp_path / "other-store"
    result = runner.invoke(
        repobuilder, ["sweep", "--assetstore", str(other)], env=db_env
    )
    assert result.exit_code == 0
    assert other.is_dir()


def test_missing_schema_is_a_sweep_failure(runner, tmp_path):
    """A database without the repository tables fails with exit code 1."""
    env = {
        "REPOBUILDER_DB_URL": f"sqlite:///{tmp_path / 'empty.db'}",
        "REPOBUILDER_ASSETSTORE_DIR": str(tmp_path / "assetstore"),
        "REPOBUILDER_LOG_PATH": str(tmp_path / "cli.log"),
    }
    result = runner.invoke(repobuilder, ["sweep"], env=env)
    assert result.exit_code == 1
    assert "Leak sweep failed" in result.output


def test_missing_db_url_explains_how_to_set_it(runner, tmp_path):
    """Without REPOBUILDER_DB_URL the command exits 1 with guidance."""
    env = {
        "REPOBUILDER_DB_URL": None,
        "REPOBUILDER_ASSETSTORE_DIR": str(tmp_path / "assetstore"),
        "REPOBUILDER_LOG_PATH": str(tmp_path / "cli.log"),
    }
    result = runner.invoke(repobuilder, ["sweep"], env=env)
    assert result.exit_code == 1
    assert "REPOBUILDER_DB_URL is not set" in result.output


def test_missing_assetstore_is_a_usage_error(runner, db_env):
    """The asset store directory is required."""
    env = dict(db_env, REPOBUILDER_ASSETSTORE_DIR=None)
    result = runner.invoke(repobuilder, ["sweep"], env=env)
    assert result.exit_code == 2
    assert "--assetstore" in result.output
