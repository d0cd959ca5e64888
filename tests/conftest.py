"""Pytest configuration and fixtures for repoviz tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Dict, Generator, List, Sequence

import pytest

from repoviz.models import AnalysisResult, DependencyNode


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch):
    """Point the config file at a temporary location for every test.

    Keeps the developer's own ``~/.repoviz/config.toml`` and
    ``REPOVIZ_LOG_LEVEL`` out of the test run.
    """
    config_file = tmp_path / "repoviz_home" / "config.toml"
    monkeypatch.setattr("repoviz.config_manager.CONFIG_FILE", config_file)
    monkeypatch.delenv("REPOVIZ_LOG_LEVEL", raising=False)
    return config_file


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_project_path() -> Path:
    """Get path to the sample TypeScript project."""
    return Path(__file__).parent / "fixtures" / "sample_project"


@pytest.fixture
def sample_project_copy(temp_dir: Path, sample_project_path: Path) -> Path:
    """A writable copy of the sample project."""
    target = temp_dir / "project"
    shutil.copytree(sample_project_path, target)
    return target


@pytest.fixture
def sample_typescript_code() -> str:
    """Sample TypeScript module for testing the parser."""
    return '''import { readFile } from "fs/promises";
import type { Config } from "./config";
import Logger, { LogLevel as Level } from "./logger";
import * as utils from "../utils";
import "./side-effect";

export function loadConfig(path: string): Promise<Config> {
  return readFile(path, "utf-8").then((raw) => JSON.parse(raw));
}

export class ConfigStore {
  constructor(private readonly logger: Logger) {}
}

export const DEFAULT_LEVEL: Level = "info", RETRIES = 3;

export interface Options {
  verbose: boolean;
}

export type Mode = "dev" | "prod";

const internal = utils.noop;
'''


def make_graph(edges: Dict[str, Sequence[str]]) -> List[DependencyNode]:
    """Build a graph from ``{path: [dependency, ...]}`` keeping insertion order."""
    return [DependencyNode(path=path, dependencies=list(deps)) for path, deps in edges.items()]


def make_analysis(edges: Dict[str, Sequence[str]]) -> AnalysisResult:
    """An AnalysisResult holding only a graph, enough for drift and render tests."""
    return AnalysisResult(files=[], graph=make_graph(edges), diagram="")


@pytest.fixture
def analysis_factory():
    """Factory fixture wrapping :func:`make_analysis`."""
    return make_analysis
