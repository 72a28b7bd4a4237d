from __future__ import annotations

import argparse
import json
import logging
import os
import posixpath
import sys
from typing import Dict, List, Sequence

import uvicorn

from project_analyzer.config import AnalyzerConfig
from project_analyzer.model import (
	AnalysisComplete,
	AnalysisResult,
	Progress,
	ScaleViolation,
	SearchComplete,
	SearchResult,
	TaskFailed,
)
from project_analyzer.summarize import render_overview
from project_analyzer.worker import AnalyzerWorker

EXIT_SCALE_VIOLATION = 2
EXIT_FAILURE = 1


def _build_config(args: argparse.Namespace) -> AnalyzerConfig:
	config = AnalyzerConfig.from_env()
	updates = {}
	if args.max_files is not None:
		updates["max_files"] = args.max_files
	if args.exclude:
		updates["exclude_patterns"] = config.exclude_patterns + args.exclude
	return AnalyzerConfig(**{**config.model_dump(), **updates}) if updates else config


def _print_progress(message: Progress) -> None:
	if message.stage == "scanning" and message.current_file is None:
		print(f"Scanning {message.total_count} files", file=sys.stderr)
		return
	line = f"[{message.stage}] {message.processed_count}/{message.total_count} files"
	if message.current_file:
		line += f"  {message.current_file}"
	print(line, file=sys.stderr)


def _run_analysis(worker: AnalyzerWorker, args: argparse.Namespace) -> AnalysisResult:
	root = os.path.abspath(args.path)
	for message in worker.submit_project(root, _build_config(args)):
		if isinstance(message, Progress):
			_print_progress(message)
		elif isinstance(message, AnalysisComplete):
			return message.result
		elif isinstance(message, ScaleViolation):
			print(
				f"error: project contains {message.total_files} files (limit {message.max_files})",
				file=sys.stderr,
			)
			sys.exit(EXIT_SCALE_VIOLATION)
		elif isinstance(message, TaskFailed):
			print(f"error: {message.error}", file=sys.stderr)
			sys.exit(EXIT_FAILURE)
	raise RuntimeError("analysis channel closed without a result")


def cmd_analyze(args: argparse.Namespace) -> None:
	with AnalyzerWorker() as worker:
		result = _run_analysis(worker, args)
	if args.json:
		data = result.model_dump(mode="json", exclude={"files": {"__all__": {"content"}}})
		print(json.dumps(data, indent=2))
	else:
		print(render_overview(result))


def _directory(path: str) -> str:
	parent = posixpath.dirname(path)
	return parent or "/"


def group_by_directory(results: Sequence[SearchResult]) -> Dict[str, List[SearchResult]]:
	"""Group hits by parent directory, keeping first-seen directory order."""
	groups: Dict[str, List[SearchResult]] = {}
	for hit in results:
		groups.setdefault(_directory(hit.file.path), []).append(hit)
	return groups


def _plural(count: int, word: str) -> str:
	return f"{count} {word}{'' if count == 1 else 's'}"


def cmd_search(args: argparse.Namespace) -> None:
	with AnalyzerWorker() as worker:
		result = _run_analysis(worker, args)
		message = worker.submit_search(result, args.query).wait()
	if isinstance(message, TaskFailed):
		print(f"error: {message.error}", file=sys.stderr)
		sys.exit(EXIT_FAILURE)
	if not isinstance(message, SearchComplete):
		print(f"error: unexpected search reply {message.type}", file=sys.stderr)
		sys.exit(EXIT_FAILURE)

	hits = message.results[: args.limit] if args.limit else message.results
	print(f"{_plural(len(message.results), 'result')} found")
	for directory, dir_hits in group_by_directory(hits).items():
		print(f"{directory} ({_plural(len(dir_hits), 'file')})")
		for hit in dir_hits:
			star = " *" if hit.file.critical else ""
			print(
				f"  {posixpath.basename(hit.file.path)}{star}  [{hit.match_type}] "
				f"{hit.match_count} matches, significance {hit.significance:.2f}"
			)
			if hit.context:
				for line in hit.context.split("\n"):
					print(f"      {line}")


def cmd_serve(args: argparse.Namespace) -> None:
	uvicorn.run("api:app", host=args.host, port=args.port, reload=args.reload)


def _add_scan_options(p: argparse.ArgumentParser) -> None:
	p.add_argument("path", help="Path to project root")
	p.add_argument("--max-files", type=int, default=None, help="Abort when the project has more files")
	p.add_argument(
		"--exclude",
		action="append",
		default=[],
		help="Extra exclusion pattern (substring or regex); repeatable",
	)


def main() -> None:
	parser = argparse.ArgumentParser(prog="project-analyzer")
	parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
	sub = parser.add_subparsers(dest="cmd", required=True)

	pa = sub.add_parser("analyze", help="Analyze a project and print an overview")
	_add_scan_options(pa)
	pa.add_argument("--json", action="store_true", help="Print the full result as JSON")
	pa.set_defaults(func=cmd_analyze)

	pq = sub.add_parser("search", help="Analyze a project and search its imports, exports and references")
	_add_scan_options(pq)
	pq.add_argument("query", help="Case-insensitive pattern")
	pq.add_argument("--limit", type=int, default=20)
	pq.set_defaults(func=cmd_search)

	ps = sub.add_parser("serve", help="Run FastAPI server")
	ps.add_argument("--host", default="127.0.0.1")
	ps.add_argument("--port", type=int, default=8000)
	ps.add_argument("--reload", action="store_true")
	ps.set_defaults(func=cmd_serve)

	args = parser.parse_args()
	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.WARNING,
		format="%(levelname)s %(name)s: %(message)s",
	)
	args.func(args)


if __name__ == "__main__":
	main()
