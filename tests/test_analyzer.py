"""Tests for the public analysis entry points."""

import logging

import pytest

import repoviz
from repoviz.analyzer import ProjectAnalyzer, analyze_project, validate_batch
from repoviz.errors import ParseError, ValidationError
from repoviz.models import ExportInfo, FileInput, ImportInfo


def ts(path: str, content: str) -> FileInput:
    return FileInput(path=path, content=content, language="typescript")


class TestAnalyzeProject:

    def test_two_file_project(self):
        result = analyze_project([
            ts("src/main.ts", 'import { add } from "./math";\nexport const total = add(1, 2);'),
            ts("src/math.ts", "export function add(a: number, b: number) { return a + b; }"),
        ])

        assert [f.path for f in result.files] == ["src/main.ts", "src/math.ts"]
        assert result.files[0].imports == [ImportInfo("./math", ["add"])]
        assert result.files[1].exports == [ExportInfo("add", "function")]
        assert [(n.path, n.dependencies) for n in result.graph] == [
            ("src/main.ts", ["src/math.ts"]),
            ("src/math.ts", []),
        ]
        assert result.diagram == 'graph LR\n  N0["main.ts"]\n  N1["math.ts"]\n  N0 --> N1'

    def test_thread_pool_matches_sequential(self, sample_project_path):
        from repoviz.file_loader import collect_files

        files = collect_files(sample_project_path)

        assert analyze_project(files, max_workers=3) == analyze_project(files)

    def test_parse_failure_propagates(self):
        with pytest.raises(ParseError) as exc_info:
            analyze_project([
                ts("ok.ts", "export const a = 1;"),
                ts("bad.ts", "export class {{{"),
            ])
        assert exc_info.value.path == "bad.ts"

    def test_logs_batch_progress(self, caplog):
        with caplog.at_level(logging.INFO, logger="repoviz"):
            analyze_project([ts("a.ts", "export const a = 1;")])

        messages = [record.getMessage() for record in caplog.records]
        assert "Analyzing 1 files" in messages
        assert any(m.startswith("Analysis complete") for m in messages)

    def test_package_exports(self):
        assert repoviz.analyze_project is analyze_project
        assert repoviz.__version__


class TestValidateBatch:

    def test_empty_batch(self):
        with pytest.raises(ValidationError) as exc_info:
            analyze_project([])
        assert exc_info.value.status_code == 422

    def test_duplicate_paths(self):
        files = [ts("a.ts", ""), ts("b.ts", ""), ts("a.ts", "")]

        with pytest.raises(ValidationError) as exc_info:
            validate_batch(files)

        assert exc_info.value.details == {"duplicates": ["a.ts"]}


class TestProjectAnalyzerDrift:

    def test_drift_between_two_analyses(self):
        analyzer = ProjectAnalyzer()
        before = analyzer.analyze([ts("a.ts", "export const a = 1;"), ts("b.ts", "")])
        after = analyzer.analyze([
            ts("a.ts", 'import "./b";\nexport const a = 1;'),
            ts("b.ts", ""),
            ts("c.ts", 'import { a } from "./a";'),
        ])

        drift = analyzer.drift(after, before)

        assert drift.added == ["c.ts"]
        assert drift.removed == []
        assert drift.modified == ["a.ts"]
        assert repoviz.detect_drift(after, before) == drift
