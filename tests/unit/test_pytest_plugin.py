"""Tests for the `builder_run` pytest fixtures."""

from repobuilder.bootstrap import BuilderRun
from repobuilder.builders import CollectionBuilder, CommunityBuilder


def test_builder_run_is_started(builder_run, builder_session):
    """The fixture yields a started run whose session is `builder_session`."""
    assert isinstance(builder_run, BuilderRun)
    assert builder_run.locator.initialized
    assert builder_run.session is builder_session


def test_builders_register_with_the_run(builder_run):
    """Builders made through `new()` end up in the run's registry."""
    community = builder_run.new(CommunityBuilder).build()
    builder_run.new(CollectionBuilder, community=community).build()
    assert len(builder_run.registry) == 2


def test_each_test_gets_fresh_storage(builder_run, builder_session):
    """The default in-memory backend starts empty for every test."""
    handles = builder_run.locator.handles
    assert handles.bitstreams.find_all(builder_session) == []
    assert list(handles.assetstore.digests()) == []


PLUGIN_CONFTEST = """
pytest_plugins = ["repobuilder.pytest_plugin"]
"""


def test_leaked_bitstream_errors_the_test(pytester):
    """A bitstream the test never deleted turns into a teardown error."""
    pytester.makeconftest(PLUGIN_CONFTEST)
    pytester.makepyfile(
        """
        import io

        def test_leaks(builder_run, builder_session):
            handles = builder_run.locator.handles
            handles.bitstreams.create(builder_session, io.BytesIO(b"x"), name="x")
            builder_session.commit()
        """
    )
    result = pytester.runpytest_inprocess("-p", "no:cacheprovider")
    result.assert_outcomes(passed=1, errors=1)
    result.stdout.fnmatch_lines(["*LeakDetectedError*"])


def test_tracked_builders_are_torn_down_silently(pytester):
    """Records made by builders are removed without failing the test."""
    pytester.makeconftest(PLUGIN_CONFTEST)
    pytester.makepyfile(
        """
        from repobuilder.builders import BitstreamBuilder, CommunityBuilder

        def test_clean(builder_run):
            builder_run.new(CommunityBuilder).build()
            builder_run.new(BitstreamBuilder).with_content(b"kept tidy").build()
        """
    )
    result = pytester.runpytest_inprocess("-p", "no:cacheprovider")
    result.assert_outcomes(passed=1)

