from __future__ import annotations

import logging
import re
from typing import FrozenSet, List, NamedTuple, Optional, Pattern, Tuple

logger = logging.getLogger(__name__)


class ImportRule(NamedTuple):
	group: str
	extensions: FrozenSet[str]
	pattern: Pattern[str]
	capture: int = 1


ECMASCRIPT_EXTENSIONS = frozenset({".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs"})
PYTHON_EXTENSIONS = frozenset({".py"})

# Rules run in table order; each one scans the whole text before the next starts,
# so all `import ... from` matches of a file come before its `require()` matches.
IMPORT_RULES: Tuple[ImportRule, ...] = (
	ImportRule("ecmascript", ECMASCRIPT_EXTENSIONS, re.compile(r"import\s+.*?\s+from\s+['\"](.+?)['\"]")),
	ImportRule("ecmascript", ECMASCRIPT_EXTENSIONS, re.compile(r"require\(['\"](.+?)['\"]\)")),
	ImportRule("python", PYTHON_EXTENSIONS, re.compile(r"^(?:from|import)\s+([\w.]+)", re.MULTILINE)),
)


def rules_for(extension: str) -> List[ImportRule]:
	ext = extension.lower()
	return [rule for rule in IMPORT_RULES if ext in rule.extensions]


def has_import_rules(extension: str) -> bool:
	return bool(rules_for(extension))


def extract_imports(content: str, extension: str) -> List[str]:
	specifiers: List[str] = []
	for rule in rules_for(extension):
		specifiers.extend(m.group(rule.capture) for m in rule.pattern.finditer(content))
	return specifiers


def read_text(path: str) -> Optional[str]:
	try:
		with open(path, "r", encoding="utf-8", errors="replace") as fh:
			return fh.read()
	except OSError as e:
		logger.warning(f"Failed to read {path}: {e}")
		return None


def read_imports(path: str, extension: str) -> List[str]:
	"""Read a source file and extract its import specifiers; unreadable files give []."""
	if not has_import_rules(extension):
		return []
	text = read_text(path)
	if text is None:
		return []
	return extract_imports(text, extension)
