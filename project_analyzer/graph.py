from __future__ import annotations

import re
from typing import Dict, List, Optional, Sequence, Set

from .model import FileRecord


FROM_SPECIFIER_RE = re.compile(r"""(?i:from)\s+['"](.+?)['"]""")


def resolve_dependencies(imports: Sequence[str]) -> List[str]:
	"""Return the module specifiers named by ``from '...'`` clauses.

	Side-effect imports (``import './polyfill'``) have no ``from`` clause and
	contribute nothing. Specifiers are kept raw: no path resolution, and
	duplicates are preserved in statement order.
	"""
	specifiers: List[str] = []
	for statement in imports:
		match = FROM_SPECIFIER_RE.search(statement)
		if match:
			specifiers.append(match.group(1))
	return specifiers


def build_export_index(files: Sequence[FileRecord]) -> Dict[str, List[str]]:
	"""Map each exported name to the paths of the files exporting it."""
	index: Dict[str, List[str]] = {}
	for f in files:
		for name in f.exports:
			paths = index.setdefault(name, [])
			if f.path not in paths:
				paths.append(f.path)
	return index


def link_references(
	record: FileRecord,
	files: Sequence[FileRecord],
	index: Optional[Dict[str, List[str]]] = None,
) -> Set[str]:
	"""Paths of the other files whose exports match one of ``record``'s references.

	Without ``index`` every reference is checked against every other file's
	exports, which is quadratic in the file count. Passing the result of
	:func:`build_export_index` gives the same set with one lookup per
	reference.
	"""
	linked: Set[str] = set()
	if index is not None:
		for ref in record.references:
			for path in index.get(ref, ()):
				if path != record.path:
					linked.add(path)
		return linked

	for ref in record.references:
		for other in files:
			if other.path != record.path and ref in other.exports:
				linked.add(other.path)
	return linked
