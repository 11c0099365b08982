from __future__ import annotations

from typing import Dict, FrozenSet, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .manifests import MANIFEST_FORMATS, ManifestFormat


DEFAULT_IGNORED_DIRS: FrozenSet[str] = frozenset(
	{".git", "node_modules", "dist", ".next", "build", "out", "coverage", ".idea", ".vscode"}
)

DEFAULT_MANIFEST_NAMES: FrozenSet[str] = frozenset(
	{
		"package.json",
		"requirements.txt",
		"go.mod",
		"Cargo.toml",
		"Gemfile",
		"composer.json",
		"Pipfile",
		"pipfile",
	}
)


class _Model(BaseModel):
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScanConfig(_Model):
	ignored_dirs: FrozenSet[str] = DEFAULT_IGNORED_DIRS
	manifest_names: FrozenSet[str] = DEFAULT_MANIFEST_NAMES
	manifest_formats: Dict[str, ManifestFormat] = Field(default_factory=lambda: dict(MANIFEST_FORMATS))
	max_workers: int = Field(default=8, ge=1)


class FileEntry(_Model):
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

	name: str
	relative_path: str
	kind: Literal["file", "directory"]
	size: Optional[int] = None
	extension: Optional[str] = None
	language: Optional[str] = None
	children: Optional[List[FileEntry]] = None

	def iter_files(self):
		"""Yield every file entry below this one in pre-order."""
		for child in self.children or []:
			if child.kind == "file":
				yield child
			else:
				yield from child.iter_files()


class RepoAnalysis(_Model):
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

	file_tree: FileEntry
	file_count: int
	dir_count: int
	languages: Dict[str, int] = {}
	dependencies: Dict[str, List[str]] = {}
	imports: Dict[str, List[str]] = {}

	def known_files(self) -> List[str]:
		return [f.relative_path for f in self.file_tree.iter_files()]


class ResolvedEdge(_Model):
	source: str
	target: str
	resolved: bool


class GraphNode(_Model):
	id: str
	label: str
	ghost: bool = False


class GraphEdge(_Model):
	id: str
	source: str
	target: str


class DependencyGraph(_Model):
	nodes: List[GraphNode] = []
	edges: List[GraphEdge] = []


FileEntry.model_rebuild()
