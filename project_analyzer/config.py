"""Analyzer configuration and its environment overrides."""

from __future__ import annotations

import os
from typing import List, Mapping, Optional

from pydantic import BaseModel, Field


DEFAULT_EXCLUDE_PATTERNS: List[str] = [
	"node_modules",
	".git",
	"dist",
	"build",
	"coverage",
	".next",
	".nuxt",
	".cache",
	".temp",
	".tmp",
	"vendor",
	"bower_components",
	".idea",
	".vscode",
	".DS_Store",
]

MAX_FILES = 1000
PROGRESS_INTERVAL = 50

ENV_PREFIX = "PROJECT_ANALYZER_"


class AnalyzerConfig(BaseModel):
	max_files: int = Field(default=MAX_FILES, ge=1)
	exclude_patterns: List[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
	progress_interval: int = Field(default=PROGRESS_INTERVAL, ge=1)

	@classmethod
	def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AnalyzerConfig":
		"""Build a config from PROJECT_ANALYZER_* variables, falling back to defaults.

		PROJECT_ANALYZER_EXCLUDE is a comma-separated list that replaces the
		default exclusions.
		"""
		env = os.environ if environ is None else environ
		values = {}
		if env.get(ENV_PREFIX + "MAX_FILES"):
			values["max_files"] = env[ENV_PREFIX + "MAX_FILES"]
		if env.get(ENV_PREFIX + "PROGRESS_INTERVAL"):
			values["progress_interval"] = env[ENV_PREFIX + "PROGRESS_INTERVAL"]
		if env.get(ENV_PREFIX + "EXCLUDE") is not None:
			values["exclude_patterns"] = [
				p.strip() for p in env[ENV_PREFIX + "EXCLUDE"].split(",") if p.strip()
			]
		return cls(**values)
