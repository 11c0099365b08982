from __future__ import annotations

import json
from typing import Any, Dict, List

from .model import RepoAnalysis


def build_context(analysis: RepoAnalysis, preview: int = 10) -> Dict[str, Any]:
	children = analysis.file_tree.children or []
	return {
		"files": analysis.file_count,
		"directories": analysis.dir_count,
		"languages": dict(analysis.languages),
		"dependencies": {path: list(names) for path, names in analysis.dependencies.items()},
		"structure_preview": [c.name for c in children[:preview]],
	}


def render_context(analysis: RepoAnalysis, preview: int = 10) -> str:
	return json.dumps(build_context(analysis, preview), indent=2)


def summarize_analysis(analysis: RepoAnalysis) -> str:
	parts: List[str] = []
	parts.append(
		f"Repository {analysis.file_tree.name}: {analysis.file_count} files, "
		f"{analysis.dir_count} directories"
	)
	if analysis.languages:
		ranked = sorted(analysis.languages.items(), key=lambda kv: (-kv[1], kv[0]))
		parts.append(f"  Languages: {', '.join(f'{lang} ({n})' for lang, n in ranked)}")
	for manifest, names in analysis.dependencies.items():
		shown = ", ".join(names[:10])
		more = f" (+{len(names) - 10} more)" if len(names) > 10 else ""
		parts.append(f"  {manifest}: {shown or 'no dependencies'}{more}")
	if analysis.imports:
		total = sum(len(v) for v in analysis.imports.values())
		parts.append(f"  Imports: {total} across {len(analysis.imports)} files")
	return "\n".join(parts)
