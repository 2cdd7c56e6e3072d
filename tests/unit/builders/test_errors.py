"""Unit tests for builder lifecycle errors."""

from __future__ import annotations

import pytest

from repobuilder.builders import errors


def test_configuration_errors_share_a_base(make_recording):
    """All fail-fast configuration errors derive from ConfigurationError."""
    builder = make_recording("cfg")
    for error in (
        errors.ServicesNotInitializedError(),
        errors.InvalidPriorityError(builder, 0),
        errors.DuplicateRegistrationError(builder),
    ):
        assert isinstance(error, errors.ConfigurationError)
        assert isinstance(error, errors.BuilderError)


def test_creation_and_deletion_errors_name_the_builder(make_recording):
    """Messages start with the builder class; `.builder` keeps the instance."""
    builder = make_recording("x")
    creation = errors.CreationError(builder, "no such community")
    deletion = errors.DeletionError(builder, "still has items")
    assert str(creation) == "RecordingBuilder failed to build: no such community"
    assert str(deletion) == "RecordingBuilder failed to delete: still has items"
    assert creation.builder is builder
    assert deletion.builder is builder


def test_teardown_error_aggregates_failures(make_recording):
    """TeardownError keeps every (builder, error) pair in order."""
    a, b = make_recording("a"), make_recording("b")
    failures = [(a, RuntimeError("one")), (b, ValueError("two"))]
    error = errors.TeardownError(failures)
    assert error.failures == failures
    assert str(error).startswith("2 builder cleanup(s) failed:")
    assert "RecordingBuilder (one)" in str(error)


def test_leak_detected_error_lists_ids():
    """LeakDetectedError exposes the leaked ids as a tuple."""
    error = errors.LeakDetectedError(["b1", "b2"])
    assert error.bitstream_ids == ("b1", "b2")
    assert "b1, b2" in str(error)


def test_run_failed_error_carries_both_failures(make_recording):
    """RunFailedError names both failures and keeps the teardown pairs."""
    builder = make_recording("poison")
    teardown = errors.TeardownError([(builder, RuntimeError("boom"))])
    sweep = errors.LeakDetectedError(["b1"])
    error = errors.RunFailedError(teardown, sweep)
    assert error.teardown_error is teardown
    assert error.sweep_error is sweep
    assert error.failures == teardown.failures
    assert "boom" in str(error)
    assert "b1" in str(error)


@pytest.mark.parametrize(
    "error_cls",
    [
        errors.LeakSweepError,
        errors.LeakDetectedError,
        errors.TeardownError,
        errors.RunFailedError,
    ],
)
def test_lifecycle_errors_are_builder_errors(error_cls):
    """Callers can catch every lifecycle failure as BuilderError."""
    assert issubclass(error_cls, errors.BuilderError)
