"""Regression tests for literal log marker matching."""

from __future__ import annotations

import pytest

from glide_runner.adapters import SubstringMarkerMatcher


def test_adapters_markers_completion_requires_every_marker_anywhere_in_log() -> None:
    """Match completion only when all markers are present, on any line.

    Returns:
        None: Assertions validate completion matching.

    Raises:
        AssertionError: Raised when partial logs are treated as complete.
    """

    matcher = SubstringMarkerMatcher()
    complete_log = "Exiting Glide\nwriting poses\nTotal elapsed time = 42 seconds\ncleanup\n"

    assert matcher.marker_matches_completion(complete_log)
    assert not matcher.marker_matches_completion("Exiting Glide\n")
    assert not matcher.marker_matches_completion("Total elapsed time = 42 seconds\n")


def test_adapters_markers_failure_matches_any_marker() -> None:
    matcher = SubstringMarkerMatcher()

    assert matcher.marker_matches_failure("line 1\nFATAL ERROR: cannot open grid\n")
    assert matcher.marker_matches_failure("Failed to check out a license\n")
    assert not matcher.marker_matches_failure("All good so far\n")


def test_adapters_markers_matching_is_case_sensitive() -> None:
    matcher = SubstringMarkerMatcher()

    assert not matcher.marker_matches_failure("fatal error: lowercase is not a marker\n")
    assert not matcher.marker_matches_completion("exiting glide\ntotal elapsed time = 1\n")


def test_adapters_markers_extract_last_elapsed_line() -> None:
    """Use the last elapsed-time line when intermediate lines share the phrase."""

    matcher = SubstringMarkerMatcher()
    log_text = (
        "Total elapsed time for conformer generation = 3.1 sec\n"
        "Exiting Glide\n"
        "   Total elapsed time = 61.7 seconds   \n"
    )

    assert matcher.marker_extract_elapsed_line(log_text) == "Total elapsed time = 61.7 seconds"
    assert matcher.marker_extract_elapsed_line("no timing here\n") is None


def test_adapters_markers_custom_marker_sets() -> None:
    matcher = SubstringMarkerMatcher(
        completion_markers=("Job finished",),
        failure_markers=("Segmentation fault",),
        elapsed_time_marker="Wall time",
    )

    assert matcher.marker_matches_completion("Wall time 10s\nJob finished\n")
    assert matcher.marker_matches_failure("Segmentation fault (core dumped)\n")
    assert matcher.marker_extract_elapsed_line("Wall time 10s\n") == "Wall time 10s"


def test_adapters_markers_reject_empty_marker_sets() -> None:
    with pytest.raises(ValueError, match="completion_markers"):
        SubstringMarkerMatcher(completion_markers=())
    with pytest.raises(ValueError, match="blank"):
        SubstringMarkerMatcher(failure_markers=("FATAL ERROR", ""))
