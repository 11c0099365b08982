from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Dict, List, Optional, Tuple

import uvicorn

from repo_mapper.fs_scan import ScanRootError, scan_repository
from repo_mapper.graph import build_analysis_graph
from repo_mapper.manifests import MANIFEST_FORMATS, ManifestFormat
from repo_mapper.model import DEFAULT_IGNORED_DIRS, DEFAULT_MANIFEST_NAMES, RepoAnalysis, ScanConfig
from repo_mapper.resolve import DEFAULT_ALIASES
from repo_mapper.summarize import build_context, summarize_analysis


def _positive_int(value: str) -> int:
	try:
		n = int(value)
	except ValueError:
		raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}")
	if n < 1:
		raise argparse.ArgumentTypeError(f"must be at least 1, got {n}")
	return n


def _manifest_spec(value: str) -> Tuple[str, Optional[ManifestFormat]]:
	name, sep, fmt = value.partition("=")
	if not sep:
		return name, None
	try:
		return name, ManifestFormat(fmt)
	except ValueError:
		choices = ", ".join(f.value for f in ManifestFormat)
		raise argparse.ArgumentTypeError(f"unknown manifest format {fmt!r} (choose from {choices})")


def _config(args: argparse.Namespace) -> ScanConfig:
	ignored = set() if args.no_default_ignores else set(DEFAULT_IGNORED_DIRS)
	ignored |= set(args.ignore or [])
	manifests = set(DEFAULT_MANIFEST_NAMES)
	formats = dict(MANIFEST_FORMATS)
	for name, fmt in args.manifest or []:
		manifests.add(name)
		if fmt is not None:
			formats[name] = fmt
	return ScanConfig(
		ignored_dirs=ignored, manifest_names=manifests, manifest_formats=formats, max_workers=args.workers
	)


def _aliases(pairs: Optional[List[str]]) -> Dict[str, str]:
	if not pairs:
		return dict(DEFAULT_ALIASES)
	aliases: Dict[str, str] = {}
	for pair in pairs:
		prefix, sep, target = pair.partition("=")
		if not sep or not prefix:
			raise argparse.ArgumentTypeError(f"Alias must look like PREFIX=DIR, got {pair!r}")
		aliases[prefix] = target
	return aliases


def _scan(args: argparse.Namespace) -> RepoAnalysis:
	try:
		return scan_repository(args.path, _config(args))
	except ScanRootError as e:
		print(f"error: {e}", file=sys.stderr)
		sys.exit(2)


def cmd_analyze(args: argparse.Namespace) -> None:
	analysis = _scan(args)
	print(json.dumps(analysis.model_dump(by_alias=True), indent=2))


def cmd_graph(args: argparse.Namespace) -> None:
	try:
		aliases = _aliases(args.alias)
	except argparse.ArgumentTypeError as e:
		print(f"error: {e}", file=sys.stderr)
		sys.exit(2)
	analysis = _scan(args)
	graph = build_analysis_graph(analysis, aliases, args.include_external)
	print(json.dumps(graph.model_dump(by_alias=True), indent=2))


def cmd_context(args: argparse.Namespace) -> None:
	analysis = _scan(args)
	if args.text:
		print(summarize_analysis(analysis))
	else:
		print(json.dumps(build_context(analysis, args.preview), indent=2))


def cmd_serve(args: argparse.Namespace) -> None:
	uvicorn.run("api:app", host=args.host, port=args.port, reload=args.reload)


def _add_scan_args(p: argparse.ArgumentParser) -> None:
	p.add_argument("path", help="Path to repository root")
	p.add_argument(
		"--ignore", nargs="*", metavar="DIR",
		help="Directory names to skip, added to the defaults (see --no-default-ignores)",
	)
	p.add_argument(
		"--no-default-ignores", action="store_true",
		help="Skip only the directories given with --ignore",
	)
	p.add_argument(
		"--manifest", nargs="*", metavar="NAME[=FORMAT]", type=_manifest_spec,
		help="Extra manifest file names, added to the defaults; FORMAT maps the name to a parser, e.g. requirements-dev.txt=requirements",
	)
	p.add_argument("--workers", type=_positive_int, default=8, help="Threads used to read files (at least 1)")


def main(argv: Optional[List[str]] = None) -> None:
	parser = argparse.ArgumentParser(prog="repomap")
	parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
	sub = parser.add_subparsers(dest="cmd", required=True)

	pa = sub.add_parser("analyze", help="Scan a repository and print the analysis JSON")
	_add_scan_args(pa)
	pa.set_defaults(func=cmd_analyze)

	pg = sub.add_parser("graph", help="Print the resolved import graph JSON")
	_add_scan_args(pg)
	pg.add_argument("--alias", nargs="*", metavar="PREFIX=DIR", help="Import alias, e.g. @/=src/")
	pg.add_argument("--include-external", action="store_true", help="Add external modules as ghost nodes")
	pg.set_defaults(func=cmd_graph)

	pc = sub.add_parser("context", help="Print the reduced repository context")
	_add_scan_args(pc)
	pc.add_argument("--preview", type=int, default=10, help="Top-level entries to list")
	pc.add_argument("--text", action="store_true", help="Print a plain-text overview instead of JSON")
	pc.set_defaults(func=cmd_context)

	ps = sub.add_parser("serve", help="Run FastAPI server")
	ps.add_argument("--host", default="127.0.0.1")
	ps.add_argument("--port", type=int, default=8000)
	ps.add_argument("--reload", action="store_true")
	ps.set_defaults(func=cmd_serve)

	args = parser.parse_args(argv)
	logging.basicConfig(
		level=args.log_level.upper(),
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)
	args.func(args)


if __name__ == "__main__":
	main()
