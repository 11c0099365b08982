from __future__ import annotations

import posixpath
from typing import Dict, Optional


EXTENSION_LANGUAGE: Dict[str, str] = {
	".js": "JavaScript",
	".jsx": "JavaScript",
	".mjs": "JavaScript",
	".cjs": "JavaScript",
	".ts": "TypeScript",
	".tsx": "TypeScript",
	".py": "Python",
	".go": "Go",
	".rs": "Rust",
	".java": "Java",
	".c": "C",
	".cpp": "C++",
	".h": "C/C++",
	".css": "CSS",
	".html": "HTML",
	".json": "JSON",
	".md": "Markdown",
	".yml": "YAML",
	".yaml": "YAML",
	".xml": "XML",
	".sh": "Shell",
	".rb": "Ruby",
	".php": "PHP",
}

# Conventional files without an extension.
FILENAME_LANGUAGE: Dict[str, str] = {
	"Dockerfile": "Docker",
	"Makefile": "Make",
	"Gemfile": "Ruby",
}


def file_extension(filename: str) -> str:
	_, ext = posixpath.splitext(filename)
	return ext.lower()


def detect_language(filename: str) -> Optional[str]:
	if filename in FILENAME_LANGUAGE:
		return FILENAME_LANGUAGE[filename]
	return EXTENSION_LANGUAGE.get(file_extension(filename))
