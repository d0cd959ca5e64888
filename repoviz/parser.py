"""Export / import extraction for TypeScript and JavaScript using Tree-sitter.

Only top-level declarations are inspected:

- ``export`` statements are classified into function / class / variable /
  interface / type exports, in source order.
- ``import`` statements are recorded with their module specifier and the
  names they bind.

Re-exports (``export ... from``), enums, namespaces, ``import x = require()``
and dynamic imports are deliberately not recorded.
"""

from __future__ import annotations

import importlib
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .errors import GrammarUnavailableError, ParseError
from .models import ExportInfo, FileInput, ImportInfo, ParsedFile

logger = logging.getLogger(__name__)

# grammar name -> (module providing the grammar, function returning the Language capsule)
GRAMMARS: Dict[str, Tuple[str, str]] = {
    "typescript": ("tree_sitter_typescript", "language_typescript"),
    "tsx": ("tree_sitter_typescript", "language_tsx"),
    "javascript": ("tree_sitter_javascript", "language"),
}

_DECLARATION_KINDS: Dict[str, str] = {
    "function_declaration": "function",
    "generator_function_declaration": "function",
    "class_declaration": "class",
    "abstract_class_declaration": "class",
    "interface_declaration": "interface",
    "type_alias_declaration": "type",
}

_VARIABLE_DECLARATIONS = ("lexical_declaration", "variable_declaration")

# Anonymous values allowed after ``export default``
_DEFAULT_VALUE_KINDS: Dict[str, str] = {
    "function": "function",
    "function_expression": "function",
    "generator_function": "function",
    "class": "class",
}


# ===================================================================
# Abstract Parser Interface
# ===================================================================

class SourceParser(ABC):
    """Extracts exports and imports from a single source file."""

    @abstractmethod
    def parse(self, file: FileInput) -> ParsedFile:
        """Parse *file*; raise :class:`ParseError` on invalid syntax."""
        ...

    @abstractmethod
    def supports_language(self, language: str) -> bool:
        ...


# ===================================================================
# Tree-sitter Parser
# ===================================================================

class TreeSitterSourceParser(SourceParser):
    """Source parser backed by the tree-sitter TypeScript and JavaScript grammars.

    ``Language`` objects are loaded once and shared; a fresh ``Parser`` is
    created for every call so instances can be used from several threads.
    """

    def __init__(self, grammars: Optional[List[str]] = None) -> None:
        self._languages: Dict[str, Any] = {}
        self._requested = grammars or list(GRAMMARS)
        self._init_languages()

    def _init_languages(self) -> None:
        try:
            from tree_sitter import Language  # type: ignore[import-untyped]
        except ImportError:
            logger.warning(
                "tree-sitter is not installed -- source parsing unavailable. "
                "Install with: pip install tree-sitter tree-sitter-typescript tree-sitter-javascript"
            )
            return

        for grammar in self._requested:
            spec = GRAMMARS.get(grammar)
            if spec is None:
                logger.warning("No grammar module mapped for '%s'", grammar)
                continue
            mod_name, func_name = spec
            try:
                mod = importlib.import_module(mod_name)
                self._languages[grammar] = Language(getattr(mod, func_name)())
                logger.debug("Loaded tree-sitter grammar %s", grammar)
            except ImportError:
                logger.warning(
                    "Grammar package '%s' not installed for '%s'. Install with: pip install %s",
                    mod_name, grammar, mod_name.replace("_", "-"),
                )
            except Exception as exc:
                logger.warning("Could not load tree-sitter grammar for %s: %s", grammar, exc)

    def supports_language(self, language: str) -> bool:
        return language in self._languages

    @staticmethod
    def grammar_for(file: FileInput) -> str:
        if file.language == "javascript":
            return "javascript"
        if file.path.endswith((".tsx", ".jsx")):
            return "tsx"
        return "typescript"

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def parse(self, file: FileInput) -> ParsedFile:
        grammar = self.grammar_for(file)
        language = self._languages.get(grammar)
        if language is None:
            raise GrammarUnavailableError(grammar, "grammar package not installed")

        from tree_sitter import Parser as TSParser  # type: ignore[import-untyped]

        try:
            source = file.content.encode("utf-8")
            tree = TSParser(language).parse(source)
        except Exception as exc:
            logger.error("Parse error in %s: %s", file.path, exc)
            raise ParseError(file.path, exc) from exc

        root = tree.root_node
        if root.has_error:
            cause = _describe_syntax_error(root, source)
            logger.error("Parse error in %s: %s", file.path, cause)
            raise ParseError(file.path, cause)

        local_kinds = _collect_local_declarations(root, source)
        exports: List[ExportInfo] = []
        imports: List[ImportInfo] = []
        for child in root.named_children:
            if child.type == "export_statement":
                exports.extend(_exports_from_statement(child, source, local_kinds))
            elif child.type == "import_statement":
                info = _import_from_statement(child, source)
                if info is not None:
                    imports.append(info)

        logger.debug(
            "Parsed %s: %d exports, %d imports", file.path, len(exports), len(imports),
        )
        return ParsedFile(path=file.path, exports=exports, imports=imports)


# ===================================================================
# Exports
# ===================================================================

def _classify_declaration(node: Any, source: bytes, ambient: bool = False) -> Iterator[Tuple[str, str]]:
    """Yield ``(name, kind)`` for every binding a declaration introduces."""
    if node.type in _DECLARATION_KINDS:
        name_node = node.child_by_field_name("name")
        if name_node is not None:
            yield _text(name_node, source), _DECLARATION_KINDS[node.type]
    elif node.type in _VARIABLE_DECLARATIONS:
        for declarator in node.named_children:
            if declarator.type != "variable_declarator":
                continue
            name_node = declarator.child_by_field_name("name")
            # Destructuring patterns are not recorded
            if name_node is not None and name_node.type == "identifier":
                yield _text(name_node, source), "variable"
    elif node.type == "function_signature" and ambient:
        name_node = node.child_by_field_name("name")
        if name_node is not None:
            yield _text(name_node, source), "function"
    elif node.type == "ambient_declaration":
        for inner in node.named_children:
            yield from _classify_declaration(inner, source, ambient=True)


def _collect_local_declarations(root: Any, source: bytes) -> Dict[str, List[str]]:
    """Map every top-level declared name to the kinds it was declared with."""
    kinds: Dict[str, List[str]] = {}
    for child in root.named_children:
        node = child
        if child.type == "export_statement":
            if child.child_by_field_name("source") is not None:
                continue
            node = child.child_by_field_name("declaration")
            if node is None:
                continue
        for name, kind in _classify_declaration(node, source):
            kinds.setdefault(name, []).append(kind)
    return kinds


def _exports_from_statement(
    node: Any,
    source: bytes,
    local_kinds: Dict[str, List[str]],
) -> List[ExportInfo]:
    # export ... from "./other" is a re-export
    if node.child_by_field_name("source") is not None:
        return []

    is_default = any(child.type == "default" for child in node.children)

    declaration = node.child_by_field_name("declaration")
    if declaration is not None:
        found = list(_classify_declaration(declaration, source))
        if is_default:
            return [ExportInfo(name="default", kind=kind) for _, kind in found[:1]]
        return [ExportInfo(name=name, kind=kind) for name, kind in found]

    if is_default:
        value = node.child_by_field_name("value")
        if value is None:
            return []
        if value.type in _DEFAULT_VALUE_KINDS:
            return [ExportInfo(name="default", kind=_DEFAULT_VALUE_KINDS[value.type])]
        if value.type == "identifier":
            return [
                ExportInfo(name="default", kind=kind)
                for kind in local_kinds.get(_text(value, source), [])
            ]
        return []

    exports: List[ExportInfo] = []
    for clause in node.named_children:
        if clause.type != "export_clause":
            continue
        for spec in clause.named_children:
            if spec.type != "export_specifier":
                continue
            name_node = spec.child_by_field_name("name")
            if name_node is None:
                continue
            local_name = _text(name_node, source)
            alias_node = spec.child_by_field_name("alias")
            exported = _text(alias_node, source) if alias_node is not None else local_name
            for kind in local_kinds.get(local_name, []):
                exports.append(ExportInfo(name=exported, kind=kind))
    return exports


# ===================================================================
# Imports
# ===================================================================

def _import_from_statement(node: Any, source: bytes) -> Optional[ImportInfo]:
    """Build the ImportInfo for one ``import`` statement.

    Bound names are ordered: named imports (local name), then the default
    import, then the namespace import rendered as ``* as name``.
    """
    source_node = node.child_by_field_name("source")
    if source_node is None:
        # import x = require("...")
        return None

    named: List[str] = []
    default: List[str] = []
    namespace: List[str] = []
    for clause in node.named_children:
        if clause.type != "import_clause":
            continue
        for part in clause.named_children:
            if part.type == "identifier":
                default.append(_text(part, source))
            elif part.type == "namespace_import":
                for ident in part.named_children:
                    if ident.type == "identifier":
                        namespace.append(f"* as {_text(ident, source)}")
                        break
            elif part.type == "named_imports":
                for spec in part.named_children:
                    if spec.type != "import_specifier":
                        continue
                    bound = spec.child_by_field_name("alias")
                    if bound is None:
                        bound = spec.child_by_field_name("name")
                    if bound is not None:
                        named.append(_text(bound, source))

    return ImportInfo(source=_string_value(source_node, source), specifiers=named + default + namespace)


# ===================================================================
# Shared Helpers
# ===================================================================

def _text(node: Any, source: bytes) -> str:
    return source[node.start_byte:node.end_byte].decode("utf-8")


def _string_value(node: Any, source: bytes) -> str:
    """Return a string literal's contents without its quotes."""
    raw = _text(node, source)
    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in ("'", '"'):
        return raw[1:-1]
    return raw


def _describe_syntax_error(root: Any, source: bytes) -> str:
    node = _first_error(root)
    if node is None:
        return "syntax error"
    row = node.start_point[0]
    column = character_column(source, node.start_byte)
    what = f"missing {node.type}" if node.is_missing else "unexpected syntax"
    return f"{what} at line {row + 1}, column {column + 1}"


def character_column(source: bytes, byte_offset: int) -> int:
    """0-based character column of *byte_offset* within its line.

    Tree-sitter points count bytes; the result counts characters.
    """
    line_start = source.rfind(b"\n", 0, byte_offset) + 1
    return len(source[line_start:byte_offset].decode("utf-8", errors="replace"))


def _first_error(node: Any) -> Optional[Any]:
    """Depth-first search for the first ERROR or MISSING node, pruned by ``has_error``."""
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None
