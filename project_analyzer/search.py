"""Relevance-ranked search over the facts of a finished analysis.

A query is a case-insensitive regular expression. A file is a hit when the
pattern matches at least one of its imports, exports or references; raw
occurrences in the content are counted but neither make a file a hit nor
add to its match count.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

from .errors import InvalidQueryError
from .model import AnalysisResult, FileRecord, MatchType, SearchResult

logger = logging.getLogger(__name__)

EXPORT_WEIGHT = 2.0
IMPORT_WEIGHT = 1.0
REFERENCE_WEIGHT = 0.5
CRITICAL_BONUS = 0.3
SIGNIFICANCE_SCALE = 10.0


def compile_query(query: str) -> re.Pattern[str]:
	try:
		return re.compile(query, re.IGNORECASE)
	except re.error as e:
		raise InvalidQueryError(query, str(e)) from e


def _count_matching(pattern: re.Pattern[str], items: Sequence[str]) -> int:
	return sum(1 for item in items if pattern.search(item))


def find_context(pattern: re.Pattern[str], content: str) -> Optional[str]:
	"""Up to three lines around the first matching line, or None."""
	lines = content.split("\n")
	for i, line in enumerate(lines):
		if pattern.search(line):
			return "\n".join(lines[max(0, i - 1):i + 2])
	return None


def significance(
	export_matches: int,
	import_matches: int,
	reference_matches: int,
	critical: bool,
) -> float:
	score = (
		export_matches * EXPORT_WEIGHT
		+ import_matches * IMPORT_WEIGHT
		+ reference_matches * REFERENCE_WEIGHT
		+ (CRITICAL_BONUS if critical else 0.0)
	) / SIGNIFICANCE_SCALE
	return min(score, 1.0)


def _match_type(query: str, record: FileRecord, export_matches: int, import_matches: int) -> MatchType:
	if export_matches > 0:
		return "export"
	if import_matches > 0:
		return "import"
	if f"function {query}" in record.content:
		return "function"
	return "variable"


def search_files(query: str, files: Sequence[FileRecord]) -> List[SearchResult]:
	pattern = compile_query(query)
	results: List[SearchResult] = []
	for record in files:
		if not record.content:
			continue
		import_matches = _count_matching(pattern, record.imports)
		export_matches = _count_matching(pattern, record.exports)
		reference_matches = _count_matching(pattern, record.references)
		content_matches = len(pattern.findall(record.content))

		match_count = import_matches + export_matches + reference_matches
		if match_count == 0:
			continue
		logger.debug(
			"%s: %d fact matches, %d content occurrences", record.path, match_count, content_matches
		)

		results.append(
			SearchResult(
				file=record,
				match_type=_match_type(query, record, export_matches, import_matches),
				match_count=match_count,
				significance=significance(
					export_matches, import_matches, reference_matches, record.critical
				),
				context=find_context(pattern, record.content),
			)
		)

	results.sort(key=lambda r: r.significance, reverse=True)
	return results


def search(result: AnalysisResult, query: str) -> List[SearchResult]:
	"""Search a finished analysis. Blank queries return no results."""
	query = query.strip()
	if not query:
		return []
	return search_files(query, result.files)
