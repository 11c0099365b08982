"""Repository structure and import-graph extraction.

Modules:
- fs_scan.py: Directory walk, file tree, and per-scan statistics.
- languages.py: Language detection from file names.
- manifests.py: Dependency names from package-manager manifests.
- imports.py: Lexical import extraction per language family.
- resolve.py: Mapping import specifiers onto scanned files.
- graph.py: Deduplicated node/edge import graph.
- model.py: Data structures for scan results and graphs.
- summarize.py: Reduced context and text overview of a scan.
"""

__all__ = [
	"fs_scan",
	"languages",
	"manifests",
	"imports",
	"resolve",
	"graph",
	"model",
	"summarize",
]
