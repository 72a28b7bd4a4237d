"""Run analysis and search tasks off the caller's thread.

Each submitted task gets its own :class:`TaskChannel`. The task posts
zero or more ``Progress`` messages followed by exactly one terminal message
(``AnalysisComplete``, ``SearchComplete``, ``ScaleViolation`` or
``TaskFailed``). Tasks share no mutable state: an analysis owns its file
set and a search only reads a finished, frozen AnalysisResult.

Progress counts are non-decreasing within a stage. A project task reports
the ``scanning`` stage first and then restarts its count for ``analyzing``.
"""

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Iterator, Optional, Sequence

from .config import AnalyzerConfig
from .errors import InvalidQueryError, ScaleViolationError
from .fs_scan import scan_repository
from .model import (
	TERMINAL_MESSAGES,
	AnalysisComplete,
	AnalysisResult,
	ScaleViolation,
	SearchComplete,
	SourceFile,
	TaskFailed,
	WorkerMessage,
)
from .search import search
from .summarize import analyze_project

logger = logging.getLogger(__name__)


class TaskChannel:
	"""One-directional message stream for a single task."""

	def __init__(self) -> None:
		self._queue: "queue.Queue[WorkerMessage]" = queue.Queue()
		self._discarded = threading.Event()
		self.future: Optional[Future] = None

	@property
	def discarded(self) -> bool:
		return self._discarded.is_set()

	def post(self, message: WorkerMessage) -> None:
		if not self._discarded.is_set():
			self._queue.put(message)

	def discard(self) -> None:
		"""Stop delivering messages. The task itself keeps running to completion."""
		self._discarded.set()

	def get(self, timeout: Optional[float] = None) -> WorkerMessage:
		return self._queue.get(timeout=timeout)

	def __iter__(self) -> Iterator[WorkerMessage]:
		while True:
			message = self._queue.get()
			yield message
			if isinstance(message, TERMINAL_MESSAGES):
				return

	def wait(self, timeout: Optional[float] = None) -> WorkerMessage:
		"""Drain the channel and return its terminal message."""
		while True:
			message = self._queue.get(timeout=timeout)
			if isinstance(message, TERMINAL_MESSAGES):
				return message


def run_analysis(
	channel: TaskChannel,
	sources: Sequence[SourceFile],
	config: Optional[AnalyzerConfig] = None,
) -> None:
	try:
		result = analyze_project(sources, config, on_progress=channel.post)
	except ScaleViolationError as e:
		logger.warning("%s", e)
		channel.post(ScaleViolation(total_files=e.total_files, max_files=e.max_files))
		return
	except Exception as e:
		logger.exception("Analysis task failed")
		channel.post(TaskFailed(error=str(e)))
		return
	channel.post(AnalysisComplete(result=result))


def run_project(channel: TaskChannel, root: str, config: Optional[AnalyzerConfig] = None) -> None:
	"""Scan ``root`` and analyze it in one task, posting both stages' progress."""
	try:
		sources = scan_repository(root, config, on_progress=channel.post)
	except ScaleViolationError as e:
		logger.warning("%s", e)
		channel.post(ScaleViolation(total_files=e.total_files, max_files=e.max_files))
		return
	except Exception as e:
		logger.exception("Scan task failed")
		channel.post(TaskFailed(error=str(e)))
		return
	run_analysis(channel, sources, config)


def run_search(channel: TaskChannel, result: AnalysisResult, query: str) -> None:
	try:
		results = search(result, query)
	except InvalidQueryError as e:
		channel.post(TaskFailed(error=str(e)))
		return
	except Exception as e:
		logger.exception("Search task failed")
		channel.post(TaskFailed(error=str(e)))
		return
	channel.post(SearchComplete(query=query, results=results))


class AnalyzerWorker:
	"""Thread pool that runs each analysis or search as an isolated task."""

	def __init__(self, max_workers: Optional[int] = None) -> None:
		self._executor = ThreadPoolExecutor(
			max_workers=max_workers, thread_name_prefix="project-analyzer"
		)

	def submit_analysis(
		self,
		sources: Sequence[SourceFile],
		config: Optional[AnalyzerConfig] = None,
	) -> TaskChannel:
		channel = TaskChannel()
		channel.future = self._executor.submit(run_analysis, channel, list(sources), config)
		return channel

	def submit_project(self, root: str, config: Optional[AnalyzerConfig] = None) -> TaskChannel:
		channel = TaskChannel()
		channel.future = self._executor.submit(run_project, channel, root, config)
		return channel

	def submit_search(self, result: AnalysisResult, query: str) -> TaskChannel:
		channel = TaskChannel()
		if not query.strip():
			channel.post(SearchComplete(query=query, results=[]))
			return channel
		channel.future = self._executor.submit(run_search, channel, result, query)
		return channel

	def shutdown(self, wait: bool = True) -> None:
		self._executor.shutdown(wait=wait)

	def __enter__(self) -> "AnalyzerWorker":
		return self

	def __exit__(self, *exc_info) -> None:
		self.shutdown()
