"""Dependency extraction from package-manager manifests.

Each supported manifest basename maps to a ``ManifestFormat`` and each format to a
handler. Handlers are line or JSON based and never attempt version resolution;
they return bare dependency names in the order they appear.
"""

from __future__ import annotations

import json
import logging
import posixpath
import re
from enum import Enum
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


class ManifestFormat(str, Enum):
	NPM = "npm"
	COMPOSER = "composer"
	REQUIREMENTS = "requirements"
	GO_MOD = "go-mod"
	CARGO = "cargo"
	PIPFILE = "pipfile"
	GEMFILE = "gemfile"


MANIFEST_FORMATS: Dict[str, ManifestFormat] = {
	"package.json": ManifestFormat.NPM,
	"composer.json": ManifestFormat.COMPOSER,
	"requirements.txt": ManifestFormat.REQUIREMENTS,
	"go.mod": ManifestFormat.GO_MOD,
	"Cargo.toml": ManifestFormat.CARGO,
	"Pipfile": ManifestFormat.PIPFILE,
	"pipfile": ManifestFormat.PIPFILE,
	"Gemfile": ManifestFormat.GEMFILE,
}

VERSION_OPERATORS: Tuple[str, ...] = ("==", ">=", "<=", "<", ">", "~=", ";")

_GO_BLOCK_OPEN = re.compile(r"^require\s*\(")


def _merged_keys(content: str, fields: Iterable[str]) -> List[str]:
	try:
		doc = json.loads(content)
	except ValueError:
		return []
	if not isinstance(doc, dict):
		return []
	names: Dict[str, None] = {}
	for field in fields:
		section = doc.get(field)
		if isinstance(section, dict):
			for key in section:
				names.setdefault(key, None)
	return list(names)


def parse_package_json(content: str) -> List[str]:
	return _merged_keys(content, ("dependencies", "devDependencies"))


def parse_composer_json(content: str) -> List[str]:
	return _merged_keys(content, ("require", "require-dev"))


def _strip_version(line: str) -> str:
	cut = len(line)
	for op in VERSION_OPERATORS:
		idx = line.find(op)
		if idx != -1 and idx < cut:
			cut = idx
	return line[:cut].strip()


def parse_requirements_txt(content: str) -> List[str]:
	deps: List[str] = []
	for raw in content.splitlines():
		line = raw.strip()
		if not line or line.startswith("#"):
			continue
		name = _strip_version(line)
		if name:
			deps.append(name)
	return deps


def parse_go_mod(content: str) -> List[str]:
	deps: List[str] = []
	in_block = False
	for raw in content.splitlines():
		line = raw.strip()
		if in_block:
			if line == ")":
				in_block = False
			elif line and not line.startswith("//"):
				deps.append(line.split()[0])
			continue
		if _GO_BLOCK_OPEN.match(line):
			in_block = True
		elif line.startswith("require "):
			parts = line.split()
			if len(parts) > 1:
				deps.append(parts[1])
	return deps


def _section_keys(content: str, sections: Iterable[str]) -> List[str]:
	wanted = {f"[{name}]" for name in sections}
	deps: List[str] = []
	capture = False
	for raw in content.splitlines():
		line = raw.strip()
		if line.startswith("["):
			capture = line in wanted
			continue
		if capture and line and not line.startswith("#"):
			name = line.split("=", 1)[0].strip()
			if name:
				deps.append(name)
	return deps


def parse_cargo_toml(content: str) -> List[str]:
	return _section_keys(content, ("dependencies", "dev-dependencies"))


def parse_pipfile(content: str) -> List[str]:
	return _section_keys(content, ("packages", "dev-packages"))


def parse_gemfile(content: str) -> List[str]:
	deps: List[str] = []
	for raw in content.splitlines():
		line = raw.strip()
		if not line.startswith("gem "):
			continue
		parts = line.split()
		if len(parts) > 1:
			# gem 'rails', '7.0' / gem "rails"
			name = parts[1].strip("'\",")
			if name:
				deps.append(name)
	return deps


FORMAT_HANDLERS: Dict[ManifestFormat, Callable[[str], List[str]]] = {
	ManifestFormat.NPM: parse_package_json,
	ManifestFormat.COMPOSER: parse_composer_json,
	ManifestFormat.REQUIREMENTS: parse_requirements_txt,
	ManifestFormat.GO_MOD: parse_go_mod,
	ManifestFormat.CARGO: parse_cargo_toml,
	ManifestFormat.PIPFILE: parse_pipfile,
	ManifestFormat.GEMFILE: parse_gemfile,
}


def manifest_format(
	filename: str, formats: Optional[Mapping[str, ManifestFormat]] = None
) -> Optional[ManifestFormat]:
	table = MANIFEST_FORMATS if formats is None else formats
	return table.get(posixpath.basename(filename.replace("\\", "/")))


def parse_manifest(
	filename: str, content: str, formats: Optional[Mapping[str, ManifestFormat]] = None
) -> List[str]:
	"""Return the dependency names declared in a manifest.

	Unknown manifest names and content that cannot be parsed both yield an empty
	list; this function does not raise for bad input. ``formats`` replaces the
	default basename table for this call.
	"""
	fmt = manifest_format(filename, formats)
	if fmt is None:
		return []
	try:
		return FORMAT_HANDLERS[fmt](content)
	except Exception as e:
		logger.debug(f"Could not parse {filename} as {fmt.value}: {e}")
		return []
