"""
Source languages recognized by the analysis engine.

Each language maps file extensions to a tree-sitter grammar, together with
the node types that count as branching constructs and as comments.
"""
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Optional

from tree_sitter import Language, Parser
import tree_sitter_c_sharp
import tree_sitter_cpp
import tree_sitter_go
import tree_sitter_java
import tree_sitter_javascript
import tree_sitter_python
import tree_sitter_rust
import tree_sitter_typescript

# Anonymous operator tokens that add a decision path.
LOGICAL_OPERATORS = frozenset({"&&", "||", "and", "or", "??"})

COMMENT_TYPES = frozenset({"comment", "line_comment", "block_comment"})

C_FAMILY_BRANCHES = frozenset({
    "if_statement", "for_statement", "while_statement", "do_statement",
    "case_statement", "catch_clause", "conditional_expression", "for_range_loop",
})

JS_BRANCHES = frozenset({
    "if_statement", "for_statement", "for_in_statement", "while_statement",
    "do_statement", "switch_case", "catch_clause", "ternary_expression",
})


@dataclass(frozen=True)
class LanguageSpec:
    """A source language the engine can count."""

    name: str
    extensions: tuple[str, ...]
    grammar: Callable[[], object]
    branch_types: frozenset
    comment_types: frozenset = COMMENT_TYPES


LANGUAGES = (
    LanguageSpec(
        name="Python",
        extensions=(".py", ".pyw"),
        grammar=tree_sitter_python.language,
        branch_types=frozenset({
            "if_statement", "elif_clause", "for_statement", "while_statement",
            "except_clause", "with_statement", "assert_statement",
            "conditional_expression", "case_clause", "for_in_clause", "if_clause",
        }),
    ),
    LanguageSpec(
        name="JavaScript",
        extensions=(".js", ".mjs", ".cjs", ".jsx"),
        grammar=tree_sitter_javascript.language,
        branch_types=JS_BRANCHES,
    ),
    LanguageSpec(
        name="TypeScript",
        extensions=(".ts", ".mts", ".cts"),
        grammar=tree_sitter_typescript.language_typescript,
        branch_types=JS_BRANCHES,
    ),
    LanguageSpec(
        name="TSX",
        extensions=(".tsx",),
        grammar=tree_sitter_typescript.language_tsx,
        branch_types=JS_BRANCHES,
    ),
    LanguageSpec(
        name="C#",
        extensions=(".cs",),
        grammar=tree_sitter_c_sharp.language,
        branch_types=frozenset({
            "if_statement", "for_statement", "foreach_statement", "while_statement",
            "do_statement", "switch_section", "catch_clause", "conditional_expression",
        }),
    ),
    LanguageSpec(
        name="Java",
        extensions=(".java",),
        grammar=tree_sitter_java.language,
        branch_types=frozenset({
            "if_statement", "for_statement", "enhanced_for_statement", "while_statement",
            "do_statement", "switch_label", "catch_clause", "ternary_expression",
        }),
    ),
    LanguageSpec(
        name="Rust",
        extensions=(".rs",),
        grammar=tree_sitter_rust.language,
        branch_types=frozenset({
            "if_expression", "for_expression", "while_expression",
            "loop_expression", "match_arm",
        }),
    ),
    LanguageSpec(
        name="C",
        extensions=(".c",),
        grammar=tree_sitter_cpp.language,
        branch_types=C_FAMILY_BRANCHES,
    ),
    LanguageSpec(
        name="C++",
        extensions=(".cpp", ".cc", ".cxx", ".hpp", ".hh", ".hxx", ".h"),
        grammar=tree_sitter_cpp.language,
        branch_types=C_FAMILY_BRANCHES,
    ),
    LanguageSpec(
        name="Go",
        extensions=(".go",),
        grammar=tree_sitter_go.language,
        branch_types=frozenset({
            "if_statement", "for_statement", "expression_case",
            "type_case", "communication_case",
        }),
    ),
)

_BY_EXTENSION = {ext: spec for spec in LANGUAGES for ext in spec.extensions}


def detect_language(filename: str) -> Optional[LanguageSpec]:
    """Return the language for a file name, or None if it is not source code."""
    dot = filename.rfind(".")
    if dot <= 0:
        return None
    return _BY_EXTENSION.get(filename[dot:].lower())


@lru_cache(maxsize=None)
def get_parser(spec: LanguageSpec) -> Parser:
    """Build (once) a tree-sitter parser for a language (API v0.22+)."""
    return Parser(Language(spec.grammar()))
