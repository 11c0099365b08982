import os

import pytest

from repo_mapper import fs_scan, imports
from repo_mapper.fs_scan import ScanRootError, scan_repository
from repo_mapper.manifests import MANIFEST_FORMATS, ManifestFormat
from repo_mapper.model import ScanConfig


def _names(entry):
	return [c.name for c in entry.children]


def _count_entries(entry):
	total = 0
	for child in entry.children or []:
		total += 1
		if child.kind == "directory":
			total += _count_entries(child)
	return total


def test_counts_and_ignored_dirs(sample_repo):
	analysis = scan_repository(str(sample_repo))
	assert analysis.file_count == 10
	assert analysis.dir_count == 4
	assert analysis.file_count + analysis.dir_count == _count_entries(analysis.file_tree)
	assert "node_modules" not in _names(analysis.file_tree)
	assert ".git" not in _names(analysis.file_tree)


def test_children_sorted_directories_first(sample_repo):
	tree = scan_repository(str(sample_repo)).file_tree
	assert tree.relative_path == ""
	assert tree.name == "repo"
	assert _names(tree) == ["docs", "pkg", "src", "LICENSE", "README.md", "package.json", "requirements.txt"]
	src = next(c for c in tree.children if c.name == "src")
	assert _names(src) == ["lib", "app.ts", "util.ts"]
	assert src.children[1].relative_path == "src/app.ts"
	assert src.children[1].extension == ".ts"
	assert src.children[1].size > 0


def test_empty_directory_is_a_node(sample_repo):
	tree = scan_repository(str(sample_repo)).file_tree
	docs = tree.children[0]
	assert docs.kind == "directory"
	assert docs.children == []


def test_languages(sample_repo):
	analysis = scan_repository(str(sample_repo))
	assert analysis.languages == {"Python": 3, "TypeScript": 3, "JSON": 1, "Markdown": 1}


def test_dependencies_keyed_by_manifest_path(sample_repo):
	analysis = scan_repository(str(sample_repo))
	assert analysis.dependencies == {
		"package.json": ["react", "jest"],
		"requirements.txt": ["flask", "requests"],
	}


def test_imports_follow_traversal_order(sample_repo):
	analysis = scan_repository(str(sample_repo))
	assert list(analysis.imports) == ["pkg/core.py", "src/app.ts", "src/util.ts"]
	assert analysis.imports["src/app.ts"] == ["react", "./util", "@/lib/x", "./missing"]
	assert analysis.imports["pkg/core.py"] == ["os", ".", ".helpers"]
	# files without imports are not recorded
	assert "src/lib/x.tsx" not in analysis.imports


def test_scan_is_idempotent(sample_repo):
	first = scan_repository(str(sample_repo))
	second = scan_repository(str(sample_repo), ScanConfig(max_workers=1))
	assert first.model_dump() == second.model_dump()
	assert list(first.imports) == list(second.imports)


def test_custom_ignore_and_manifest_sets(sample_repo):
	config = ScanConfig(ignored_dirs={"pkg", ".git"}, manifest_names={"requirements.txt"})
	analysis = scan_repository(str(sample_repo), config)
	names = _names(analysis.file_tree)
	assert "pkg" not in names
	assert "node_modules" in names
	assert list(analysis.dependencies) == ["requirements.txt"]
	assert analysis.file_count == 8
	assert "node_modules/left-pad/index.js" in analysis.known_files()


def test_nested_manifest(sample_repo):
	(sample_repo / "src" / "go.mod").write_text("module x\n\nrequire (\n\tfoo v1.0\n\tbar v2.0\n)\n")
	analysis = scan_repository(str(sample_repo))
	assert analysis.dependencies["src/go.mod"] == ["foo", "bar"]


def test_serialization_uses_camel_case(sample_repo):
	data = scan_repository(str(sample_repo)).model_dump(by_alias=True)
	assert set(data) == {"fileTree", "fileCount", "dirCount", "languages", "dependencies", "imports"}
	assert data["fileTree"]["children"][0]["relativePath"] == "docs"


def test_missing_root_is_fatal(tmp_path):
	with pytest.raises(ScanRootError):
		scan_repository(str(tmp_path / "nope"))


def test_file_root_is_fatal(tmp_path):
	f = tmp_path / "file.txt"
	f.write_text("x")
	with pytest.raises(ScanRootError):
		scan_repository(str(f))


def test_unreadable_directory_is_kept_empty(sample_repo, monkeypatch):
	locked = sample_repo / "locked"
	locked.mkdir()
	(locked / "a.py").write_text("import os\n")
	real_scandir = os.scandir

	def scandir(path):
		if os.path.basename(path) == "locked":
			raise PermissionError(13, "Permission denied", path)
		return real_scandir(path)

	monkeypatch.setattr(fs_scan.os, "scandir", scandir)
	analysis = scan_repository(str(sample_repo))
	node = next(c for c in analysis.file_tree.children if c.name == "locked")
	assert node.kind == "directory"
	assert node.children == []
	assert analysis.dir_count == 5
	assert analysis.file_count == 10
	assert "locked/a.py" not in analysis.imports


def test_unreadable_root_is_fatal(sample_repo, monkeypatch):
	def scandir(path):
		raise PermissionError(13, "Permission denied", path)

	monkeypatch.setattr(fs_scan.os, "scandir", scandir)
	with pytest.raises(ScanRootError):
		scan_repository(str(sample_repo))


def _deny_reads(monkeypatch, *names):
	real_open = open

	def guarded_open(path, *args, **kwargs):
		if os.path.basename(path) in names:
			raise PermissionError(13, "Permission denied", path)
		return real_open(path, *args, **kwargs)

	monkeypatch.setattr(imports, "open", guarded_open, raising=False)


def test_unreadable_file_still_counted(sample_repo, monkeypatch):
	(sample_repo / "src" / "secret.ts").write_text("import a from './a';\n")
	_deny_reads(monkeypatch, "secret.ts")
	analysis = scan_repository(str(sample_repo))
	assert analysis.file_count == 11
	assert "src/secret.ts" in analysis.known_files()
	assert "src/secret.ts" not in analysis.imports
	assert "src/app.ts" in analysis.imports


def test_unreadable_manifest_is_not_recorded(sample_repo, monkeypatch):
	_deny_reads(monkeypatch, "package.json")
	analysis = scan_repository(str(sample_repo))
	assert analysis.file_count == 10
	assert list(analysis.dependencies) == ["requirements.txt"]


def test_manifest_formats_extend_per_scan(sample_repo):
	(sample_repo / "requirements-dev.txt").write_text("pytest>=7\nblack\n")
	formats = dict(MANIFEST_FORMATS, **{"requirements-dev.txt": ManifestFormat.REQUIREMENTS})
	config = ScanConfig(manifest_names={"requirements-dev.txt"}, manifest_formats=formats)
	analysis = scan_repository(str(sample_repo), config)
	assert analysis.dependencies == {"requirements-dev.txt": ["pytest", "black"]}
	# the module table is not touched
	assert "requirements-dev.txt" not in MANIFEST_FORMATS
	assert scan_repository(str(sample_repo)).dependencies.get("requirements-dev.txt") is None


def test_manifest_name_without_format_records_empty(sample_repo):
	(sample_repo / "deps.lst").write_text("flask\n")
	analysis = scan_repository(str(sample_repo), ScanConfig(manifest_names={"deps.lst"}))
	assert analysis.dependencies == {"deps.lst": []}
