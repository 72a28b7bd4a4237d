import json
import sys

import pytest

from cli import EXIT_FAILURE, EXIT_SCALE_VIOLATION, group_by_directory, main
from project_analyzer.model import ScaleViolation, SearchResult
from project_analyzer.worker import AnalyzerWorker, TaskChannel

from conftest import make_record


def test_analyze_prints_overview(sample_project, monkeypatch, capsys):
	monkeypatch.setattr(sys, "argv", ["project-analyzer", "analyze", str(sample_project)])
	main()
	out = capsys.readouterr().out
	assert out.startswith("Project overview: 4 files")
	assert "package.json" in out


def test_analyze_json_omits_content(sample_project, monkeypatch, capsys):
	monkeypatch.setattr(sys, "argv", ["project-analyzer", "analyze", str(sample_project), "--json"])
	main()
	data = json.loads(capsys.readouterr().out)
	assert data["summary"]["total_files"] == 4
	assert "content" not in data["files"][0]


def test_search(sample_project, monkeypatch, capsys):
	monkeypatch.setattr(sys, "argv", ["project-analyzer", "search", str(sample_project), "fetchUsers"])
	main()
	out = capsys.readouterr().out
	assert out.startswith("2 results found")
	assert "src/api (1 file)\n  client.ts *  [export]" in out
	assert out.index("src/api (1 file)") < out.index("src (1 file)")


def test_scale_violation_exit_code(sample_project, monkeypatch):
	monkeypatch.setattr(
		sys, "argv", ["project-analyzer", "analyze", str(sample_project), "--max-files", "1"]
	)
	with pytest.raises(SystemExit) as exc_info:
		main()
	assert exc_info.value.code == EXIT_SCALE_VIOLATION


def test_analyze_shows_scan_progress(sample_project, monkeypatch, capsys):
	monkeypatch.setattr(sys, "argv", ["project-analyzer", "analyze", str(sample_project)])
	main()
	err = capsys.readouterr().err
	assert "Scanning 4 files" in err
	assert "[scanning] 4/4 files  src/components/Button.tsx" in err


def test_group_by_directory_keeps_first_seen_order():
	hits = [
		SearchResult(file=make_record(path), match_type="variable", match_count=1, significance=0.1)
		for path in ["src/a.ts", "lib/b.ts", "src/c.ts", "root.ts"]
	]
	groups = group_by_directory(hits)
	assert list(groups) == ["src", "lib", "/"]
	assert [h.file.path for h in groups["src"]] == ["src/a.ts", "src/c.ts"]


def test_search_exits_on_unexpected_reply(sample_project, monkeypatch):
	def reply_with_scale_violation(self, result, query):
		channel = TaskChannel()
		channel.post(ScaleViolation(total_files=1, max_files=1))
		return channel

	monkeypatch.setattr(AnalyzerWorker, "submit_search", reply_with_scale_violation)
	monkeypatch.setattr(sys, "argv", ["project-analyzer", "search", str(sample_project), "App"])
	with pytest.raises(SystemExit) as exc_info:
		main()
	assert exc_info.value.code == EXIT_FAILURE
