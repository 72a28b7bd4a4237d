from __future__ import annotations

import logging
import os
import uuid
from collections import OrderedDict
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from project_analyzer.config import AnalyzerConfig
from project_analyzer.errors import InvalidQueryError
from project_analyzer.model import (
	AnalysisComplete,
	AnalysisResult,
	MatchType,
	Progress,
	ScaleViolation,
	TaskFailed,
)
from project_analyzer.search import search
from project_analyzer.worker import AnalyzerWorker

logger = logging.getLogger(__name__)


app = FastAPI(title="Project Analyzer")
worker = AnalyzerWorker()

MAX_CACHED_ANALYSES = 16

# Finished analyses by id, least recently used first; searches only read these.
analysis_cache: "OrderedDict[str, AnalysisResult]" = OrderedDict()


class AnalyzeRequest(BaseModel):
	root_path: str
	max_files: Optional[int] = Field(default=None, ge=1)
	exclude_patterns: Optional[List[str]] = None


class AnalyzeResponse(BaseModel):
	analysis_id: str
	scanned_files: int
	result: AnalysisResult


class SearchRequest(BaseModel):
	analysis_id: str
	query: str


class SearchHit(BaseModel):
	path: str
	match_type: MatchType
	match_count: int
	significance: float
	critical: bool
	context: Optional[str] = None


def _cache_result(result: AnalysisResult) -> str:
	analysis_id = uuid.uuid4().hex
	analysis_cache[analysis_id] = result
	while len(analysis_cache) > MAX_CACHED_ANALYSES:
		evicted, _ = analysis_cache.popitem(last=False)
		logger.info("Evicted analysis %s", evicted)
	return analysis_id


@app.post("/analyze", response_model=AnalyzeResponse)
def analyze(req: AnalyzeRequest) -> AnalyzeResponse:
	root = os.path.abspath(req.root_path)
	if not os.path.isdir(root):
		raise HTTPException(status_code=400, detail=f"Invalid root_path: {root}")

	config = AnalyzerConfig.from_env()
	updates = {}
	if req.max_files is not None:
		updates["max_files"] = req.max_files
	if req.exclude_patterns is not None:
		updates["exclude_patterns"] = req.exclude_patterns
	if updates:
		config = AnalyzerConfig(**{**config.model_dump(), **updates})

	scanned_files = 0
	for message in worker.submit_project(root, config):
		if isinstance(message, Progress):
			if message.stage == "scanning" and message.current_file:
				scanned_files += 1
			logger.debug(
				"%s %d/%d %s",
				message.stage,
				message.processed_count,
				message.total_count,
				message.current_file or "",
			)
		elif isinstance(message, ScaleViolation):
			raise HTTPException(
				status_code=413,
				detail=f"Project contains {message.total_files} files; limit is {message.max_files}",
			)
		elif isinstance(message, TaskFailed):
			raise HTTPException(status_code=500, detail=message.error)
		elif isinstance(message, AnalysisComplete):
			analysis_id = _cache_result(message.result)
			return AnalyzeResponse(
				analysis_id=analysis_id, scanned_files=scanned_files, result=message.result
			)
	raise HTTPException(status_code=500, detail="Analysis ended without a result")


@app.delete("/analyze/{analysis_id}", status_code=204)
def forget_analysis(analysis_id: str) -> None:
	if analysis_cache.pop(analysis_id, None) is None:
		raise HTTPException(status_code=404, detail=f"Unknown analysis_id: {analysis_id}")


@app.post("/search", response_model=List[SearchHit])
def search_analysis(req: SearchRequest) -> List[SearchHit]:
	result = analysis_cache.get(req.analysis_id)
	if result is None:
		raise HTTPException(status_code=404, detail=f"Unknown analysis_id: {req.analysis_id}")
	analysis_cache.move_to_end(req.analysis_id)
	try:
		hits = search(result, req.query)
	except InvalidQueryError as e:
		raise HTTPException(status_code=400, detail=str(e))
	return [
		SearchHit(
			path=h.file.path,
			match_type=h.match_type,
			match_count=h.match_count,
			significance=h.significance,
			critical=h.file.critical,
			context=h.context,
		)
		for h in hits
	]


def create_app() -> FastAPI:
	return app
