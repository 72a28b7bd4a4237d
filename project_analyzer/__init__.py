"""Analyzer package for extracting structural facts from JavaScript/TypeScript projects.

Modules:
- fs_scan.py: Filesystem scanning, exclusion filtering and the file-count ceiling.
- extract.py: Pattern-based extraction of imports, exports and references.
- graph.py: Dependency specifiers and cross-file reference linking.
- classify.py: Critical-file heuristic and structural categories.
- summarize.py: Aggregation into an AnalysisResult plus a text overview.
- search.py: Relevance-ranked search over extracted facts.
- worker.py: Task channels for running analysis and search off the caller thread.
- model.py: Data structures for records, results and boundary messages.
"""

__all__ = [
	"config",
	"errors",
	"fs_scan",
	"extract",
	"graph",
	"classify",
	"model",
	"search",
	"summarize",
	"worker",
]
