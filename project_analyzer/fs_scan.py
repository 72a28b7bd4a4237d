from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .config import AnalyzerConfig
from .errors import ScaleViolationError
from .model import Progress, SourceFile

logger = logging.getLogger(__name__)


def should_exclude(name: str, patterns: Iterable[str]) -> bool:
	"""True if ``name`` contains a pattern or matches it as a regular expression.

	Patterns that are not valid regular expressions (``*.min.js``) only take
	part in the substring check.
	"""
	for pattern in patterns:
		if pattern in name:
			return True
		try:
			if re.search(pattern, name):
				return True
		except re.error:
			continue
	return False


def list_candidate_files(root: str, exclude_patterns: Iterable[str]) -> List[str]:
	patterns = list(exclude_patterns)
	paths: List[str] = []
	for dirpath, dirnames, filenames in os.walk(root):
		dirnames[:] = sorted(d for d in dirnames if not should_exclude(d, patterns))
		for filename in sorted(filenames):
			if should_exclude(filename, patterns):
				continue
			paths.append(os.path.join(dirpath, filename))
	return paths


def read_source_file(root: str, path: str) -> SourceFile:
	rel_path = Path(os.path.relpath(path, root)).as_posix()
	with open(path, "r", encoding="utf-8", errors="replace") as fh:
		content = fh.read()
	return SourceFile(path=rel_path, content=content, size_bytes=os.path.getsize(path))


def scan_repository(
	root: str,
	config: Optional[AnalyzerConfig] = None,
	on_progress: Optional[Callable[[Progress], None]] = None,
) -> List[SourceFile]:
	"""Collect the project's files as SourceFile tuples in a stable order.

	Files are counted before any is read; a count above ``config.max_files``
	raises ScaleViolationError. ``on_progress`` receives a ``scanning``
	message with the count, then one per file read. Files that cannot be
	read (dangling symlinks, permission errors, files removed mid-scan)
	are logged and skipped.
	"""
	config = config or AnalyzerConfig()
	paths = list_candidate_files(root, config.exclude_patterns)
	total = len(paths)
	logger.info("Found %d files under %s", total, root)
	if on_progress is not None:
		on_progress(Progress(processed_count=0, total_count=total, stage="scanning"))
	if total > config.max_files:
		raise ScaleViolationError(total, config.max_files)

	sources: List[SourceFile] = []
	for processed, path in enumerate(paths, start=1):
		try:
			source = read_source_file(root, path)
		except OSError as e:
			logger.warning("Skipping unreadable file %s: %s", path, e)
			continue
		sources.append(source)
		if on_progress is not None:
			on_progress(
				Progress(
					processed_count=processed,
					total_count=total,
					stage="scanning",
					current_file=source.path,
				)
			)
	return sources
