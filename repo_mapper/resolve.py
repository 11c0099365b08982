"""Best-effort resolution of import specifiers to files in a scanned repository.

Only local-looking specifiers are resolved: a leading ``.`` (relative to the
importing file), a leading ``/`` (relative to the repository root), or a configured
alias prefix such as ``@/``. Everything else is an external module reference and is
returned unchanged, as is any local specifier that matches no scanned file.
"""

from __future__ import annotations

import posixpath
import re
from typing import Dict, Iterable, List, Mapping, Optional

from .model import ResolvedEdge

DEFAULT_ALIASES: Dict[str, str] = {"@/": "src/"}

INDEX_STEMS = ("index", "__init__")

_PY_RELATIVE = re.compile(r"^(\.+)([\w.]*)$")


def _strip_ext(path: str) -> str:
	return posixpath.splitext(path)[0]


def python_relative_to_path(specifier: str) -> str:
	"""Rewrite ``..pkg.mod`` style specifiers as ``../pkg/mod``."""
	m = _PY_RELATIVE.match(specifier)
	if not m:
		return specifier
	dots, dotted = m.groups()
	parts = ["."] if len(dots) == 1 else [".."] * (len(dots) - 1)
	if dotted:
		parts.extend(dotted.split("."))
	return "/".join(parts)


def walk_segments(base: List[str], specifier: str) -> Optional[str]:
	"""Apply ``/``-separated segments to ``base``; None if ``..`` leaves the root."""
	parts = list(base)
	for segment in specifier.split("/"):
		if segment in ("", "."):
			continue
		if segment == "..":
			if not parts:
				return None
			parts.pop()
		else:
			parts.append(segment)
	return "/".join(parts)


class PathResolver:
	def __init__(self, known_files: Iterable[str], aliases: Optional[Mapping[str, str]] = None):
		self.known = set(known_files)
		self.aliases = dict(DEFAULT_ALIASES if aliases is None else aliases)
		# Longest prefix first so "@/lib/" wins over "@/".
		self._alias_order = sorted(self.aliases, key=lambda p: (-len(p), p))
		self._by_stem: Dict[str, List[str]] = {}
		for path in sorted(self.known):
			self._by_stem.setdefault(_strip_ext(path), []).append(path)

	def alias_for(self, specifier: str) -> Optional[str]:
		for prefix in self._alias_order:
			if specifier.startswith(prefix):
				return prefix
		return None

	def is_local(self, specifier: str) -> bool:
		return specifier.startswith((".", "/")) or self.alias_for(specifier) is not None

	def candidate(self, source: str, specifier: str) -> Optional[str]:
		"""Root-relative path the specifier points at, before extension matching."""
		prefix = self.alias_for(specifier)
		if prefix is not None:
			target_dir = self.aliases[prefix].strip("/")
			base = target_dir.split("/") if target_dir else []
			return walk_segments(base, specifier[len(prefix):])
		if specifier.startswith("/"):
			return walk_segments([], specifier)
		if specifier.startswith("."):
			if source.endswith(".py"):
				specifier = python_relative_to_path(specifier)
			source_dir = posixpath.dirname(source)
			return walk_segments(source_dir.split("/") if source_dir else [], specifier)
		return None

	def match(self, candidate: str) -> Optional[str]:
		if candidate in self.known:
			return candidate
		hits = self._by_stem.get(_strip_ext(candidate))
		if hits:
			return hits[0]
		for stem in INDEX_STEMS:
			key = f"{candidate}/{stem}" if candidate else stem
			hits = self._by_stem.get(key)
			if hits:
				return hits[0]
		return None

	def lookup(self, source: str, specifier: str) -> Optional[str]:
		if not self.is_local(specifier):
			return None
		candidate = self.candidate(source, specifier)
		if candidate is None:
			return None
		return self.match(candidate)

	def resolve(self, source: str, specifier: str) -> str:
		return self.lookup(source, specifier) or specifier

	def resolve_edge(self, source: str, specifier: str) -> ResolvedEdge:
		target = self.lookup(source, specifier)
		if target is None:
			return ResolvedEdge(source=source, target=specifier, resolved=False)
		return ResolvedEdge(source=source, target=target, resolved=True)


def resolve_import(
	source: str,
	specifier: str,
	known_files: Iterable[str],
	aliases: Optional[Mapping[str, str]] = None,
) -> str:
	return PathResolver(known_files, aliases).resolve(source, specifier)
