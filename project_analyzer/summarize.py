from __future__ import annotations

import logging
import math
from typing import Callable, Dict, List, Optional, Sequence, Set

from .classify import categorize, classify_files
from .config import PROGRESS_INTERVAL, AnalyzerConfig
from .errors import ScaleViolationError
from .extract import FactExtractor, build_file_record
from .graph import build_export_index, link_references, resolve_dependencies
from .model import AnalysisResult, FileRecord, LargestFile, Progress, SourceFile, Summary

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[Progress], None]

LARGEST_FILES_LIMIT = 5


def _round_half_up(value: float) -> int:
	return int(math.floor(value + 0.5))


def build_summary(files: Sequence[FileRecord]) -> Summary:
	if not files:
		return Summary()
	total_lines = sum(f.line_count for f in files)
	# sorted() is stable, so equal sizes keep ingestion order
	largest = sorted(files, key=lambda f: f.size_bytes, reverse=True)[:LARGEST_FILES_LIMIT]
	return Summary(
		total_files=len(files),
		total_size_bytes=sum(f.size_bytes for f in files),
		avg_lines_of_code=_round_half_up(total_lines / len(files)),
		largest_files=[
			LargestFile(path=f.path, size_bytes=f.size_bytes, line_count=f.line_count)
			for f in largest
		],
	)


def aggregate(
	files: Sequence[FileRecord],
	on_progress: Optional[ProgressCallback] = None,
	progress_interval: int = PROGRESS_INTERVAL,
) -> AnalysisResult:
	"""Fold classified file records into one AnalysisResult.

	``files`` must already carry their critical flag. ``on_progress`` is
	called with the cumulative count after every ``progress_interval`` files.
	"""
	files_by_category: Dict[str, List[str]] = {}
	for f in files:
		files_by_category.setdefault(categorize(f.path), []).append(f.path)

	export_index = build_export_index(files)
	dependencies: Dict[str, List[str]] = {}
	module_graph: Dict[str, Set[str]] = {}
	critical_paths: List[str] = []

	total = len(files)
	for processed, f in enumerate(files, start=1):
		logger.debug("Processing file: %s", f.path)
		dependencies[f.path] = resolve_dependencies(f.imports)
		module_graph[f.path] = link_references(f, files, export_index)
		if f.critical:
			critical_paths.append(f.path)
		if on_progress is not None and processed % progress_interval == 0:
			on_progress(
				Progress(
					processed_count=processed,
					total_count=total,
					stage="analyzing",
					current_file=f.path,
				)
			)

	return AnalysisResult(
		files=list(files),
		critical_paths=critical_paths,
		files_by_category=files_by_category,
		summary=build_summary(files),
		dependencies=dependencies,
		module_graph=module_graph,
	)


def analyze_project(
	sources: Sequence[SourceFile],
	config: Optional[AnalyzerConfig] = None,
	on_progress: Optional[ProgressCallback] = None,
	extractor: Optional[FactExtractor] = None,
) -> AnalysisResult:
	"""Run extraction, classification and aggregation over one file set.

	Raises ScaleViolationError before touching any file when the set is
	larger than ``config.max_files``.
	"""
	config = config or AnalyzerConfig()
	if len(sources) > config.max_files:
		raise ScaleViolationError(len(sources), config.max_files)

	logger.info("Starting analysis of %d files", len(sources))
	seen: Set[str] = set()
	records: List[FileRecord] = []
	for source in sources:
		if source.path in seen:
			logger.warning("Skipping duplicate path %s", source.path)
			continue
		seen.add(source.path)
		records.append(build_file_record(source, extractor))

	result = aggregate(classify_files(records), on_progress, config.progress_interval)
	logger.info(
		"Analysis complete: %d files, %d critical",
		result.summary.total_files,
		len(result.critical_paths),
	)
	return result


def _format_size(size_bytes: int) -> str:
	return f"{_round_half_up(size_bytes / 1024)} KB"


def render_overview(result: AnalysisResult) -> str:
	s = result.summary
	parts: List[str] = []
	parts.append(f"Project overview: {s.total_files} files, {_format_size(s.total_size_bytes)}")
	parts.append(f"  Average lines: {s.avg_lines_of_code} LOC")
	parts.append(f"  Critical files ({len(result.critical_paths)}):")
	for path in result.critical_paths:
		record = result.get_file(path)
		lines = record.line_count if record else 0
		parts.append(f"    {path} ({lines} LOC)")
	parts.append("  Project structure:")
	for category, paths in result.files_by_category.items():
		plural = "" if len(paths) == 1 else "s"
		parts.append(f"    {category}: {len(paths)} file{plural}")
	if s.largest_files:
		parts.append("  Largest files:")
		for lf in s.largest_files:
			parts.append(f"    {lf.path} {_format_size(lf.size_bytes)} {lf.line_count} LOC")
	return "\n".join(parts)
