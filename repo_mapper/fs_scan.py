"""Filesystem scanning: builds the file tree and aggregates per-file facts.

The walk itself is serial and depth-first, visiting each directory's entries in
the same order they are presented in the tree (directories first, then by name).
Reading and parsing file contents is independent per file and runs on a thread
pool; the results are merged back in traversal order once all reads finish.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Dict, List, NamedTuple, Optional, Tuple

from .imports import extract_imports, has_import_rules, read_imports, read_text
from .languages import detect_language, file_extension
from .manifests import parse_manifest
from .model import FileEntry, RepoAnalysis, ScanConfig

logger = logging.getLogger(__name__)


class ScanRootError(Exception):
	"""The scan root does not exist, is not a directory, or cannot be listed."""


class _FileJob(NamedTuple):
	path: str
	rel_path: str
	extension: str
	is_manifest: bool


class _FileResult(NamedTuple):
	dependencies: Optional[List[str]]
	imports: List[str]


def _analyze_file(job: _FileJob, config: ScanConfig) -> _FileResult:
	if not job.is_manifest:
		return _FileResult(dependencies=None, imports=read_imports(job.path, job.extension))
	text = read_text(job.path)
	if text is None:
		return _FileResult(dependencies=None, imports=[])
	deps = parse_manifest(job.rel_path, text, config.manifest_formats)
	return _FileResult(dependencies=deps, imports=extract_imports(text, job.extension))


def _sort_key(entry: os.DirEntry) -> Tuple[int, str]:
	return (0 if _is_dir(entry) else 1, entry.name)


def _is_dir(entry: os.DirEntry) -> bool:
	try:
		return entry.is_dir(follow_symlinks=False)
	except OSError:
		return False


def _is_file(entry: os.DirEntry) -> bool:
	try:
		return entry.is_file()
	except OSError:
		return False


def _join(rel_dir: str, name: str) -> str:
	return f"{rel_dir}/{name}" if rel_dir else name


class _Walker:
	def __init__(self, root: str, config: ScanConfig):
		self.root = root
		self.config = config
		self.file_count = 0
		self.dir_count = 0
		self.languages: Dict[str, int] = {}
		self.jobs: List[_FileJob] = []

	def walk_dir(self, path: str, rel_path: str, name: str) -> FileEntry:
		children: List[FileEntry] = []
		try:
			with os.scandir(path) as it:
				entries = sorted(it, key=_sort_key)
		except OSError as e:
			if not rel_path:
				raise ScanRootError(f"Cannot read scan root {path}: {e}") from e
			logger.warning(f"Error scanning directory {path}: {e}")
			entries = []

		for entry in entries:
			child_rel = _join(rel_path, entry.name)
			if _is_dir(entry):
				if entry.name in self.config.ignored_dirs:
					continue
				self.dir_count += 1
				children.append(self.walk_dir(entry.path, child_rel, entry.name))
			elif _is_file(entry):
				children.append(self.visit_file(entry, child_rel))

		return FileEntry(name=name, relative_path=rel_path, kind="directory", children=children)

	def visit_file(self, entry: os.DirEntry, rel_path: str) -> FileEntry:
		self.file_count += 1
		ext = file_extension(entry.name)
		language = detect_language(entry.name)
		if language:
			self.languages[language] = self.languages.get(language, 0) + 1

		is_manifest = entry.name in self.config.manifest_names
		if is_manifest or has_import_rules(ext):
			self.jobs.append(_FileJob(entry.path, rel_path, ext, is_manifest))

		try:
			size: Optional[int] = entry.stat().st_size
		except OSError as e:
			logger.warning(f"Failed to stat {entry.path}: {e}")
			size = None

		return FileEntry(
			name=entry.name,
			relative_path=rel_path,
			kind="file",
			size=size,
			extension=ext,
			language=language,
		)


def scan_repository(root: str, config: Optional[ScanConfig] = None) -> RepoAnalysis:
	"""Scan ``root`` and return an immutable snapshot of its structure.

	Raises ScanRootError when the root itself is unusable. Every other I/O problem
	is logged and the affected directory or file contributes empty results.
	"""
	config = config or ScanConfig()
	root = os.path.abspath(root)
	if not os.path.isdir(root):
		raise ScanRootError(f"Invalid root_path: {root}")

	walker = _Walker(root, config)
	tree = walker.walk_dir(root, "", os.path.basename(root) or "root")

	results: List[_FileResult] = []
	if walker.jobs:
		workers = min(config.max_workers, len(walker.jobs))
		with ThreadPoolExecutor(max_workers=workers) as executor:
			# map() yields in submission order, which is traversal order.
			results = list(executor.map(partial(_analyze_file, config=config), walker.jobs))

	dependencies: Dict[str, List[str]] = {}
	imports: Dict[str, List[str]] = {}
	for job, result in zip(walker.jobs, results):
		if result.dependencies is not None:
			dependencies[job.rel_path] = result.dependencies
		if result.imports:
			imports[job.rel_path] = result.imports

	logger.info(
		f"Scanned {root}: {walker.file_count} files, {walker.dir_count} directories, "
		f"{len(imports)} files with imports"
	)
	return RepoAnalysis(
		file_tree=tree,
		file_count=walker.file_count,
		dir_count=walker.dir_count,
		languages=walker.languages,
		dependencies=dependencies,
		imports=imports,
	)
