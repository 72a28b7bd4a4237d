from collections import OrderedDict

from fastapi.testclient import TestClient

import api

from api import app


client = TestClient(app)


def test_analyze_then_search(sample_project):
	resp = client.post("/analyze", json={"root_path": str(sample_project)})
	assert resp.status_code == 200
	body = resp.json()
	result = body["result"]
	assert result["summary"]["total_files"] == 4
	assert "src/App.tsx" in result["critical_paths"]
	assert result["module_graph"]["src/App.tsx"] == ["src/api/client.ts"]
	assert result["dependencies"]["src/App.tsx"] == ["react", "./api/client"]

	resp = client.post("/search", json={"analysis_id": body["analysis_id"], "query": "fetchUsers"})
	assert resp.status_code == 200
	hits = resp.json()
	assert [h["path"] for h in hits] == ["src/api/client.ts", "src/App.tsx"]
	assert hits[0]["match_type"] == "export"


def test_invalid_root(tmp_path):
	resp = client.post("/analyze", json={"root_path": str(tmp_path / "missing")})
	assert resp.status_code == 400


def test_scale_violation(sample_project):
	resp = client.post("/analyze", json={"root_path": str(sample_project), "max_files": 2})
	assert resp.status_code == 413


def test_unknown_analysis():
	resp = client.post("/search", json={"analysis_id": "nope", "query": "x"})
	assert resp.status_code == 404


def test_invalid_query(sample_project):
	analysis_id = client.post("/analyze", json={"root_path": str(sample_project)}).json()["analysis_id"]
	resp = client.post("/search", json={"analysis_id": analysis_id, "query": "("})
	assert resp.status_code == 400


def test_analyze_reports_scanned_files(sample_project):
	body = client.post("/analyze", json={"root_path": str(sample_project)}).json()
	assert body["scanned_files"] == 4


def test_forget_analysis(sample_project):
	analysis_id = client.post("/analyze", json={"root_path": str(sample_project)}).json()["analysis_id"]
	assert client.delete(f"/analyze/{analysis_id}").status_code == 204
	assert client.delete(f"/analyze/{analysis_id}").status_code == 404
	resp = client.post("/search", json={"analysis_id": analysis_id, "query": "x"})
	assert resp.status_code == 404


def test_cache_evicts_least_recently_used(sample_project, monkeypatch):
	monkeypatch.setattr(api, "MAX_CACHED_ANALYSES", 2)
	monkeypatch.setattr(api, "analysis_cache", OrderedDict())
	ids = [
		client.post("/analyze", json={"root_path": str(sample_project)}).json()["analysis_id"]
		for _ in range(2)
	]
	client.post("/search", json={"analysis_id": ids[0], "query": "App"})
	newest = client.post("/analyze", json={"root_path": str(sample_project)}).json()["analysis_id"]
	assert list(api.analysis_cache) == [ids[0], newest]
