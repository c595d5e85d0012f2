"""Literal substring marker matching for Schrodinger job logs."""

from __future__ import annotations

from typing import Final

from .interfaces import LogMarkerMatcherPort

GLIDE_COMPLETION_MARKERS: Final[tuple[str, ...]] = ("Exiting Glide", "Total elapsed time")
GLIDE_FAILURE_MARKERS: Final[tuple[str, ...]] = ("FATAL ERROR", "Failed to check out a license")
GLIDE_ELAPSED_TIME_MARKER: Final[str] = "Total elapsed time"


class SubstringMarkerMatcher(LogMarkerMatcherPort):
    """Case-sensitive literal substring matcher.

    Markers may appear anywhere in the log, not only on the last line. The
    completion line is written before the timing line, so completion requires
    every completion marker to guard against partially written logs.
    """

    def __init__(
        self,
        completion_markers: tuple[str, ...] = GLIDE_COMPLETION_MARKERS,
        failure_markers: tuple[str, ...] = GLIDE_FAILURE_MARKERS,
        elapsed_time_marker: str = GLIDE_ELAPSED_TIME_MARKER,
    ):
        """Initialize marker phrases.

        Args:
            completion_markers: Phrases that must all be present for completion.
            failure_markers: Phrases of which any one signals failure.
            elapsed_time_marker: Phrase identifying the elapsed-time line.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when a marker set is empty or has blank phrases.
        """

        if not completion_markers:
            raise ValueError("completion_markers must not be empty")
        if not failure_markers:
            raise ValueError("failure_markers must not be empty")
        if any(not marker.strip() for marker in (*completion_markers, *failure_markers)):
            raise ValueError("marker phrases must not be blank")
        if not elapsed_time_marker:
            raise ValueError("elapsed_time_marker must not be blank")

        self._completion_markers = tuple(completion_markers)
        self._failure_markers = tuple(failure_markers)
        self._elapsed_time_marker = elapsed_time_marker

    def marker_matches_completion(self, text: str) -> bool:
        return all(marker in text for marker in self._completion_markers)

    def marker_matches_failure(self, text: str) -> bool:
        return any(marker in text for marker in self._failure_markers)

    def marker_extract_elapsed_line(self, text: str) -> str | None:
        """Return the LAST line containing the elapsed-time phrase.

        The tool may log intermediate progress lines with a similar phrase,
        so the final occurrence wins.

        Args:
            text: Full log text.

        Returns:
            str | None: Stripped matching line, or None when absent.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        matching_lines = [line.strip() for line in text.splitlines() if self._elapsed_time_marker in line]
        if not matching_lines:
            return None
        return matching_lines[-1]
