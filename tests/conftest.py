from textwrap import dedent

import pytest

from project_analyzer.model import FileRecord, SourceFile


def make_source(path, content=""):
	return SourceFile(path=path, content=content, size_bytes=len(content.encode("utf-8")))


def make_record(path, content="x", imports=(), exports=(), references=(), critical=False):
	return FileRecord(
		path=path,
		size_bytes=len(content.encode("utf-8")),
		content=content,
		imports=list(imports),
		exports=list(exports),
		references=list(references),
		critical=critical,
	)


@pytest.fixture
def sample_project(tmp_path):
	files = {
		"src/App.tsx": dedent(
			"""
			import React from 'react';
			import { fetchUsers } from './api/client';
			export default function App() {
				return fetchUsers().then(render);
			}
			"""
		),
		"src/api/client.ts": dedent(
			"""
			export function fetchUsers() {
				return fetch('/users');
			}
			"""
		),
		"src/components/Button.tsx": "export const Button = () => null;\n",
		"package.json": '{"name": "sample"}\n',
		"node_modules/react/index.js": "module.exports = {};\n",
	}
	for rel, text in files.items():
		p = tmp_path / rel
		p.parent.mkdir(parents=True, exist_ok=True)
		p.write_text(text, encoding="utf-8")
	return tmp_path
