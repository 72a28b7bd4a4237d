from textwrap import dedent

from project_analyzer.extract import (
	FactExtractor,
	RegexFactExtractor,
	build_file_record,
	extract_imports,
)
from project_analyzer.model import Facts

from conftest import make_source


def test_extract_simple_component():
	code = dedent(
		"""
		import React from 'react';
		import { useState, useEffect } from "react";
		import './styles.css';
		export default function App() {
			const [x, setX] = useState(0);
			return api.get(x);
		}
		export const API_URL = 'x';
		"""
	)
	facts = RegexFactExtractor().extract(code)
	assert facts.imports == [
		"import React from 'react';",
		'import { useState, useEffect } from "react";',
		"import './styles.css';",
	]
	assert facts.exports == ["App", "API_URL"]
	assert facts.references == ["styles", "App", "useState", "api", "get"]


def test_import_keywords_are_case_insensitive():
	assert extract_imports("IMPORT Foo FROM 'bar';") == ["IMPORT Foo FROM 'bar';"]


def test_multiline_import_bindings():
	code = "import {\n  a,\n  b\n} from './ab'\nconst c = 1;"
	assert extract_imports(code) == ["import {\n  a,\n  b\n} from './ab'"]


def test_exports_of_every_declaration_kind():
	code = dedent(
		"""
		export let a = 1;
		export var b = 2;
		export class C {}
		export interface D {}
		export type E = string;
		export enum F { X }
		export default class G {}
		export { H };
		"""
	)
	assert RegexFactExtractor().extract(code).exports == ["a", "b", "C", "D", "E", "F", "G"]


def test_references_keep_keyword_noise():
	facts = RegexFactExtractor().extract("if (ready) { console.log(x) }")
	assert facts.references == ["if", "console", "log"]


def test_empty_and_malformed_content_yield_no_facts():
	assert RegexFactExtractor().extract("") == Facts()
	facts = RegexFactExtractor().extract("import from ;; export 42 {{{")
	assert facts.imports == []
	assert facts.exports == []


def test_build_file_record_uses_custom_extractor():
	class FixedExtractor(FactExtractor):
		def extract(self, content):
			return Facts(exports=["fixed"])

	record = build_file_record(make_source("a.ts", "anything"), FixedExtractor())
	assert record.exports == ["fixed"]
	assert record.critical is False
	assert record.size_bytes == len("anything")
