"""Builds the file-level dependency graph of a batch of source files."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import AbstractSet, Dict, List, Optional, Sequence

from .models import DependencyNode, FileInput, ParsedFile
from .parser import SourceParser, TreeSitterSourceParser
from .resolver import is_relative, resolve_import

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildOutput:
    files: List[ParsedFile] = field(default_factory=list)
    graph: List[DependencyNode] = field(default_factory=list)


@dataclass(frozen=True)
class UnresolvedImport:
    """A relative import that matched no file of the batch."""
    path: str
    source: str


class DependencyGraphBuilder:
    """Parses every file of a batch and links relative imports between them.

    Parsing is independent per file and can fan out over a thread pool;
    resolution runs once every file has been parsed.
    """

    def __init__(
        self,
        parser: Optional[SourceParser] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        self.parser = parser or TreeSitterSourceParser()
        self.max_workers = max_workers

    def parse_all(self, files: Sequence[FileInput]) -> List[ParsedFile]:
        """Parse *files*, returning results in input order.

        The first failure in input order propagates and no results are
        returned.
        """
        if self.max_workers and self.max_workers > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                return list(pool.map(self.parser.parse, files))
        return [self.parser.parse(f) for f in files]

    def build(self, files: Sequence[FileInput]) -> BuildOutput:
        parsed_files = self.parse_all(files)
        known_paths = {f.path for f in files}
        graph = [_build_node(parsed, known_paths) for parsed in parsed_files]
        logger.debug(
            "Built dependency graph: %d nodes, %d edges",
            len(graph), sum(len(n.dependencies) for n in graph),
        )
        return BuildOutput(files=parsed_files, graph=graph)


def _build_node(parsed: ParsedFile, known_paths: AbstractSet[str]) -> DependencyNode:
    # dict keeps first-seen order while deduplicating
    dependencies: Dict[str, None] = {}
    for imp in parsed.imports:
        target = resolve_import(imp.source, parsed.path, known_paths)
        if target is None:
            if is_relative(imp.source):
                logger.debug("Unresolved import '%s' in %s", imp.source, parsed.path)
            continue
        dependencies[target] = None
    return DependencyNode(path=parsed.path, dependencies=list(dependencies))


def find_unresolved_imports(
    parsed_files: Sequence[ParsedFile],
    known_paths: AbstractSet[str],
) -> List[UnresolvedImport]:
    """List relative imports that the graph dropped because no file matched."""
    unresolved: List[UnresolvedImport] = []
    for parsed in parsed_files:
        for imp in parsed.imports:
            if is_relative(imp.source) and resolve_import(imp.source, parsed.path, known_paths) is None:
                unresolved.append(UnresolvedImport(path=parsed.path, source=imp.source))
    return unresolved
