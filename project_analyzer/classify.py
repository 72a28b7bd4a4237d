from __future__ import annotations

import logging
import re
from typing import List, Sequence, Tuple

from .model import FileRecord

logger = logging.getLogger(__name__)


MAX_IMPORTS = 5
MAX_REFERENCES = 10

CRITICAL_PATH_PATTERNS: List[re.Pattern] = [
	re.compile(p)
	for p in (
		r"package\.json$",
		r"tsconfig\.json$",
		r"vite\.config\.",
		r"webpack\.config\.",
		r"next\.config\.",
		r"\.env$",
		r"Config\.(js|ts)$",
		r"index\.",
		r"main\.",
		r"App\.",
		r"store\.",
		r"reducer\.",
		r"context\.",
		r"Modals?\.(js|tsx?)$",
		r"Drawer\.(js|tsx?)$",
		r"Step[0-9]+\.(js|tsx?)$",
		r"api\.\w+$",
		r"client\.\w+$",
		r"service\.\w+$",
		r"constants\.\w+$",
		r"types\.\w+$",
	)
]

# First match wins; directory checks come before extension checks.
DIRECTORY_CATEGORIES: List[Tuple[str, str]] = [
	("/components/", "Components"),
	("/pages/", "Pages"),
	("/hooks/", "Hooks"),
	("/utils/", "Utilities"),
	("/lib/", "Libraries"),
	("/types/", "Types"),
	("/assets/", "Assets"),
]

SOURCE_EXT_RE = re.compile(r"\.(ts|js|jsx|tsx)$")
CONFIG_EXT_RE = re.compile(r"\.(json|ya?ml|toml)$")

CATEGORIES = [label for _, label in DIRECTORY_CATEGORIES] + ["Source", "Configuration", "Other"]


def matches_critical_pattern(path: str) -> bool:
	return any(p.search(path) for p in CRITICAL_PATH_PATTERNS)


def is_critical(record: FileRecord) -> bool:
	return (
		matches_critical_pattern(record.path)
		or len(record.imports) > MAX_IMPORTS
		or len(record.references) > MAX_REFERENCES
	)


def classify_files(records: Sequence[FileRecord]) -> List[FileRecord]:
	"""Return copies of ``records`` with the critical flag assigned."""
	classified: List[FileRecord] = []
	for record in records:
		critical = is_critical(record)
		if critical:
			logger.debug("Found critical file: %s", record.path)
		classified.append(record.model_copy(update={"critical": critical}))
	return classified


def categorize(path: str) -> str:
	rooted = path if path.startswith("/") else "/" + path
	for segment, label in DIRECTORY_CATEGORIES:
		if segment in rooted:
			return label
	if SOURCE_EXT_RE.search(path):
		return "Source"
	if CONFIG_EXT_RE.search(path):
		return "Configuration"
	return "Other"
