from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Optional, Set, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer


MatchType = Literal["export", "import", "function", "variable", "route"]


class SourceFile(BaseModel):
	path: str
	content: str
	size_bytes: int = Field(ge=0)


class Facts(BaseModel):
	imports: List[str] = []
	exports: List[str] = []
	references: List[str] = []


class FileRecord(BaseModel):
	model_config = ConfigDict(frozen=True)

	path: str
	size_bytes: int = Field(ge=0)
	content: str
	imports: List[str] = []
	exports: List[str] = []
	references: List[str] = []
	critical: bool = False

	@property
	def line_count(self) -> int:
		return len(self.content.split("\n"))


class LargestFile(BaseModel):
	path: str
	size_bytes: int
	line_count: int


class Summary(BaseModel):
	total_files: int = 0
	total_size_bytes: int = 0
	avg_lines_of_code: int = 0
	largest_files: List[LargestFile] = []


class AnalysisResult(BaseModel):
	model_config = ConfigDict(frozen=True)

	files: List[FileRecord]
	critical_paths: List[str]
	files_by_category: Dict[str, List[str]]
	summary: Summary
	dependencies: Dict[str, List[str]]
	module_graph: Dict[str, Set[str]]

	@field_serializer("module_graph")
	def _serialize_module_graph(self, graph: Dict[str, Set[str]]) -> Dict[str, List[str]]:
		return {path: sorted(targets) for path, targets in graph.items()}

	def get_file(self, path: str) -> Optional[FileRecord]:
		for f in self.files:
			if f.path == path:
				return f
		return None


class SearchResult(BaseModel):
	file: FileRecord
	match_type: MatchType
	match_count: int
	significance: float = Field(ge=0.0, le=1.0)
	context: Optional[str] = None


# Messages crossing the task boundary. Exactly one terminal message
# (anything but Progress) closes a task's channel.

ProgressStage = Literal["scanning", "analyzing", "building-graph"]


class Progress(BaseModel):
	type: Literal["progress"] = "progress"
	processed_count: int
	total_count: int
	stage: ProgressStage = "analyzing"
	current_file: Optional[str] = None


class AnalysisComplete(BaseModel):
	type: Literal["analysis_complete"] = "analysis_complete"
	result: AnalysisResult


class SearchComplete(BaseModel):
	type: Literal["search_complete"] = "search_complete"
	query: str
	results: List[SearchResult] = []


class ScaleViolation(BaseModel):
	type: Literal["scale_violation"] = "scale_violation"
	total_files: int
	max_files: int


class TaskFailed(BaseModel):
	type: Literal["task_failed"] = "task_failed"
	error: str


WorkerMessage = Annotated[
	Union[Progress, AnalysisComplete, SearchComplete, ScaleViolation, TaskFailed],
	Field(discriminator="type"),
]

TERMINAL_MESSAGES = (AnalysisComplete, SearchComplete, ScaleViolation, TaskFailed)
