from __future__ import annotations


class AnalyzerError(Exception):
	"""Base class for conditions the analyzer reports to its caller."""


class ScaleViolationError(AnalyzerError):
	"""Raised when a file set exceeds the configured ceiling.

	Raised before any file is read or analyzed, so no partial result exists.
	"""

	def __init__(self, total_files: int, max_files: int):
		self.total_files = total_files
		self.max_files = max_files
		super().__init__(
			f"Project contains {total_files:,} files; "
			f"exclude some folders to keep analysis under {max_files:,} files."
		)


class InvalidQueryError(AnalyzerError, ValueError):
	"""Raised when a search query is not a valid pattern."""

	def __init__(self, query: str, reason: str):
		self.query = query
		super().__init__(f"Invalid search pattern {query!r}: {reason}")
