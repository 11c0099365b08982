from textwrap import dedent

from repo_mapper import imports
from repo_mapper.imports import IMPORT_RULES, extract_imports, has_import_rules, read_imports


def test_statement_matches_precede_call_matches():
	code = "const h = require('./helper');\nimport x from './util';\n"
	assert extract_imports(code, ".js") == ["./util", "./helper"]


def test_mixed_line():
	code = "import x from './util'; require('./helper')"
	assert extract_imports(code, ".ts") == ["./util", "./helper"]


def test_ecmascript_forms():
	code = dedent(
		"""
		import React from "react";
		import { a, b } from '@/lib/x';
		import * as path from 'path';
		const fs = require("fs");
		"""
	)
	assert extract_imports(code, ".tsx") == ["react", "@/lib/x", "path", "fs"]


def test_python_forms():
	code = dedent(
		"""
		import os
		from .models import User
		from ..pkg.mod import thing
		import a.b.c as abc

		def f():
			import inner
		"""
	)
	assert extract_imports(code, ".py") == ["os", ".models", "..pkg.mod", "a.b.c"]


def test_comments_are_false_positives():
	code = "// import x from './commented'\n"
	assert extract_imports(code, ".js") == ["./commented"]


def test_unregistered_extension():
	assert extract_imports("import x from './y'", ".rb") == []
	assert not has_import_rules(".md")
	assert has_import_rules(".PY")


def test_rule_table_groups():
	groups = [rule.group for rule in IMPORT_RULES]
	assert groups == ["ecmascript", "ecmascript", "python"]


def test_read_imports(tmp_path):
	p = tmp_path / "app.ts"
	p.write_text("import a from './a';\nrequire('./b');\n")
	assert read_imports(str(p), ".ts") == ["./a", "./b"]


def test_read_imports_missing_file(tmp_path, caplog):
	assert read_imports(str(tmp_path / "gone.py"), ".py") == []
	assert "Failed to read" in caplog.text


def test_read_imports_unreadable_file(tmp_path, monkeypatch):
	p = tmp_path / "locked.py"
	p.write_text("import os\n")

	def denied(path, *args, **kwargs):
		raise PermissionError(13, "Permission denied", path)

	monkeypatch.setattr(imports, "open", denied, raising=False)
	assert read_imports(str(p), ".py") == []


def test_read_imports_skips_unregistered_extension(tmp_path):
	p = tmp_path / "notes.md"
	p.write_text("import a from './a'\n")
	assert read_imports(str(p), ".md") == []
