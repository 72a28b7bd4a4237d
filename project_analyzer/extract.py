"""Pattern-based fact extraction for JavaScript/TypeScript sources.

Extraction is lexical: it never builds a syntax tree and never fails.
Malformed or empty content simply yields empty fact lists. The extractor
sits behind :class:`FactExtractor` so a parser-backed implementation can
replace it without touching graph or search code.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import List, Optional

from .model import Facts, FileRecord, SourceFile

logger = logging.getLogger(__name__)

# import x from 'y' / import { a, b } from "y" / import 'y'
IMPORT_RE = re.compile(
	r"""(?i:import)\s+?(?:(?:[\w*\s{},]*)\s+(?i:from)\s+?|)(?:".*?"|'.*?')\s*?(?:;|$|)"""
)

EXPORT_RE = re.compile(
	r"export\s+(?:default\s+)?(?:const|let|var|function|class|interface|type|enum)\s+(\w+)"
)

# identifier directly before a call or member access
REFERENCE_RE = re.compile(r"\b\w+\b(?=\s*[.(])")


class FactExtractor(ABC):
	"""Turns one file's text into its import/export/reference facts."""

	@abstractmethod
	def extract(self, content: str) -> Facts:
		...


class RegexFactExtractor(FactExtractor):

	def extract(self, content: str) -> Facts:
		if not content:
			return Facts()
		return Facts(
			imports=extract_imports(content),
			exports=extract_exports(content),
			references=extract_references(content),
		)


def extract_imports(content: str) -> List[str]:
	return [m.group(0) for m in IMPORT_RE.finditer(content)]


def extract_exports(content: str) -> List[str]:
	return [m.group(1) for m in EXPORT_RE.finditer(content)]


def extract_references(content: str) -> List[str]:
	return [m.group(0) for m in REFERENCE_RE.finditer(content)]


DEFAULT_EXTRACTOR: FactExtractor = RegexFactExtractor()


def build_file_record(source: SourceFile, extractor: Optional[FactExtractor] = None) -> FileRecord:
	"""Extract facts for one file. The record starts out non-critical."""
	facts = (extractor or DEFAULT_EXTRACTOR).extract(source.content)
	logger.debug(
		"Extracted %s: %d imports, %d exports, %d references",
		source.path,
		len(facts.imports),
		len(facts.exports),
		len(facts.references),
	)
	return FileRecord(
		path=source.path,
		size_bytes=source.size_bytes,
		content=source.content,
		imports=facts.imports,
		exports=facts.exports,
		references=facts.references,
	)
