import json
from textwrap import dedent

import pytest


@pytest.fixture
def sample_repo(tmp_path):
	"""A small mixed-language repository."""
	root = tmp_path / "repo"
	(root / "src" / "lib").mkdir(parents=True)
	(root / "node_modules" / "left-pad").mkdir(parents=True)
	(root / ".git").mkdir()
	(root / "docs").mkdir()
	(root / "pkg").mkdir()

	(root / "package.json").write_text(
		json.dumps({"dependencies": {"react": "18.0.0"}, "devDependencies": {"jest": "29.0.0"}})
	)
	(root / "requirements.txt").write_text("flask==2.0\n# c\nrequests>=2.0\n")
	(root / "README.md").write_text("# sample\n")
	(root / "LICENSE").write_text("MIT\n")
	(root / "src" / "app.ts").write_text(
		dedent(
			"""
			import React from 'react';
			import { util } from './util';
			import x from '@/lib/x';
			const missing = require('./missing');
			"""
		)
	)
	(root / "src" / "util.ts").write_text("import { app } from './app';\n")
	(root / "src" / "lib" / "x.tsx").write_text("export const x = 1;\n")
	(root / "pkg" / "__init__.py").write_text("")
	(root / "pkg" / "core.py").write_text("import os\nfrom . import helpers\nfrom .helpers import run\n")
	(root / "pkg" / "helpers.py").write_text("def run():\n    return 1\n")
	(root / "node_modules" / "left-pad" / "index.js").write_text("module.exports = 1;\n")
	(root / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
	return root
