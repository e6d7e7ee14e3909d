"""Language tables for symbol-index extraction."""

from __future__ import annotations

import re

LANGUAGE_BY_SUFFIX: dict[str, str] = {
    ".py": "python",
    ".pyi": "python",
    ".js": "javascript",
    ".mjs": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".go": "go",
    ".rs": "rust",
    ".java": "java",
    ".c": "c",
    ".h": "c",
    ".cc": "cpp",
    ".cpp": "cpp",
    ".hpp": "cpp",
    ".rb": "ruby",
    ".lua": "lua",
    ".sh": "bash",
    ".bash": "bash",
}

FUNCTION_NODE_TYPES = frozenset(
    {
        "function_definition",
        "function_declaration",
        "function_item",
        "method_definition",
        "method_declaration",
        "method",
    }
)
CLASS_NODE_TYPES = frozenset(
    {
        "class_definition",
        "class_declaration",
        "class_specifier",
        "struct_item",
        "enum_item",
        "trait_item",
        "class",
    }
)

Patterns = tuple[tuple[str, "re.Pattern[str]"], ...]

_JS_NAME = r"(?P<name>[A-Za-z_$][\w$]*)"
_ECMASCRIPT: Patterns = (
    ("class", re.compile(rf"^\s*(?:export\s+)?(?:default\s+)?class\s+{_JS_NAME}")),
    ("fn", re.compile(rf"^\s*(?:export\s+)?(?:async\s+)?function\*?\s+{_JS_NAME}")),
    ("fn", re.compile(rf"^\s*(?:export\s+)?(?:const|let|var)\s+{_JS_NAME}\s*=\s*(?:async\s*)?\([^)]*\)\s*=>")),
)

FALLBACK_PATTERNS_BY_LANGUAGE: dict[str, Patterns] = {
    "python": (
        ("class", re.compile(r"^\s*class\s+(?P<name>[A-Za-z_]\w*)")),
        ("fn", re.compile(r"^\s*(?:async\s+)?def\s+(?P<name>[A-Za-z_]\w*)")),
    ),
    "javascript": _ECMASCRIPT,
    "typescript": _ECMASCRIPT,
    "tsx": _ECMASCRIPT,
    "go": (
        ("class", re.compile(r"^\s*type\s+(?P<name>[A-Za-z_]\w*)\s+(?:struct|interface)\b")),
        ("fn", re.compile(r"^\s*func\s+(?:\([^)]*\)\s*)?(?P<name>[A-Za-z_]\w*)\s*[\[(]")),
    ),
    "rust": (
        ("class", re.compile(r"^\s*(?:pub(?:\([^)]*\))?\s+)?(?:struct|enum|trait)\s+(?P<name>[A-Za-z_]\w*)")),
        ("fn", re.compile(r"^\s*(?:pub(?:\([^)]*\))?\s+)?(?:async\s+)?(?:unsafe\s+)?fn\s+(?P<name>[A-Za-z_]\w*)")),
    ),
    "java": (
        ("class", re.compile(r"^\s*(?:(?:public|private|protected|abstract|final|static)\s+)*(?:class|interface|enum)\s+(?P<name>[A-Za-z_]\w*)")),
    ),
    "ruby": (
        ("class", re.compile(r"^\s*(?:class|module)\s+(?P<name>[A-Za-z_][\w:]*)")),
        ("fn", re.compile(r"^\s*def\s+(?:self\.)?(?P<name>[A-Za-z_][\w!?=]*)")),
    ),
    "lua": (
        ("fn", re.compile(r"^\s*(?:local\s+)?function\s+(?P<name>[A-Za-z_][\w.:]*)")),
    ),
    "bash": (
        ("fn", re.compile(r"^\s*(?P<name>[A-Za-z_]\w*)\s*\(\)\s*\{")),
        ("fn", re.compile(r"^\s*function\s+(?P<name>[A-Za-z_]\w*)\b")),
    ),
}

GENERIC_FALLBACK_PATTERNS: Patterns = (
    ("class", re.compile(r"^\s*(?:export\s+)?class\s+(?P<name>[A-Za-z_][\w$]*)")),
    ("fn", re.compile(r"^\s*(?:async\s+)?def\s+(?P<name>[A-Za-z_]\w*)")),
    ("fn", re.compile(r"^\s*(?:export\s+)?(?:async\s+)?function\s+(?P<name>[A-Za-z_$][\w$]*)")),
    ("fn", re.compile(r"^\s*(?:pub\s+)?fn\s+(?P<name>[A-Za-z_]\w*)")),
)
