from __future__ import annotations

import logging
import os
from typing import Dict, FrozenSet, Optional

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from repo_mapper.fs_scan import ScanRootError, scan_repository
from repo_mapper.graph import build_analysis_graph
from repo_mapper.imports import read_text
from repo_mapper.manifests import ManifestFormat
from repo_mapper.model import DependencyGraph, RepoAnalysis, ScanConfig
from repo_mapper.summarize import build_context, summarize_analysis

logger = logging.getLogger(__name__)

app = FastAPI(title="Repo Mapper")


class AnalyzeRequest(BaseModel):
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

	root_path: str
	ignored_dirs: Optional[FrozenSet[str]] = None
	manifest_names: Optional[FrozenSet[str]] = None
	manifest_formats: Optional[Dict[str, ManifestFormat]] = None
	max_workers: Optional[int] = Field(default=None, ge=1)

	def scan_config(self) -> ScanConfig:
		overrides = {
			"ignored_dirs": self.ignored_dirs,
			"manifest_names": self.manifest_names,
			"manifest_formats": self.manifest_formats,
			"max_workers": self.max_workers,
		}
		return ScanConfig(**{k: v for k, v in overrides.items() if v is not None})


class GraphRequest(AnalyzeRequest):
	aliases: Optional[Dict[str, str]] = None
	include_external: bool = False


class ContextRequest(AnalyzeRequest):
	preview: int = 10


def _scan(req: AnalyzeRequest) -> RepoAnalysis:
	try:
		return scan_repository(req.root_path, req.scan_config())
	except ScanRootError as e:
		logger.warning(f"Scan rejected: {e}")
		raise HTTPException(status_code=400, detail=str(e))


@app.post("/analyze", response_model=RepoAnalysis)
def analyze(req: AnalyzeRequest) -> RepoAnalysis:
	return _scan(req)


@app.post("/graph", response_model=DependencyGraph)
def graph(req: GraphRequest) -> DependencyGraph:
	analysis = _scan(req)
	return build_analysis_graph(analysis, req.aliases, req.include_external)


@app.post("/context")
def context(req: ContextRequest) -> dict:
	analysis = _scan(req)
	return {
		"context": build_context(analysis, req.preview),
		"summary": summarize_analysis(analysis),
	}


@app.get("/file")
def get_file(root_path: str = Query(..., alias="rootPath"), path: str = Query(...)) -> dict:
	"""Return the text of one file inside ``root_path``."""
	root = os.path.realpath(root_path)
	if not os.path.isdir(root):
		raise HTTPException(status_code=400, detail=f"Invalid root_path: {root}")
	target = os.path.realpath(os.path.join(root, path))
	if os.path.commonpath([root, target]) != root:
		raise HTTPException(status_code=403, detail="Invalid path")
	if not os.path.isfile(target):
		raise HTTPException(status_code=404, detail="File not found")
	content = read_text(target)
	if content is None:
		raise HTTPException(status_code=500, detail=f"Cannot read file: {path}")
	return {"path": path, "content": content}


def create_app() -> FastAPI:
	return app
