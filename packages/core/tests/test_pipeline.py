"""Tests for the ingestion pipeline."""

import json

from ghcorpus_core.config import DEFAULT_EXCLUDED_AUTHORS
from ghcorpus_core.errors import FailureKind
from ghcorpus_core.models import CommentRecord, IssueRecord
from ghcorpus_core.pipeline import IngestionPipeline, output_path_for, run_ingestion


def _issue(author="alice", body="", comments=None, issue_id="1"):
    return {"id": issue_id, "author": author, "title": "t", "url": "u", "body": body, "comments": comments or []}


def _comment(author="bob", content=""):
    return {"id": "c", "parentId": "1", "author": author, "content": content, "url": "u"}


def _write_dump(tmp_path, issues, name="dump.json"):
    path = tmp_path / name
    path.write_text(json.dumps(issues), encoding="utf-8")
    return str(path)


def _read_lines(path):
    with open(path, encoding="utf-8") as f:
        return f.read().splitlines()


class TestScrubIssue:
    def test_body_and_comments_in_order(self):
        issue = IssueRecord(
            author="alice",
            body="First. Second.",
            comments=[CommentRecord(author="bob", content="Third.")],
        )
        sentences, counted = IngestionPipeline().scrub_issue(issue)
        assert sentences == ["First.", "Second.", "Third."]
        assert counted is True

    def test_excluded_issue_author_keeps_comments(self):
        issue = IssueRecord(
            author="dotnet-maestro",
            body="Bot text.",
            comments=[CommentRecord(author="bob", content="Human text.")],
        )
        sentences, counted = IngestionPipeline().scrub_issue(issue)
        assert sentences == ["Human text."]
        assert counted is False

    def test_excluded_comments_removed_in_place(self):
        comments = [
            CommentRecord(author="azure-pipelines", content="Azure Pipelines successfully started running."),
            CommentRecord(author="bob", content="Looks good."),
        ]
        issue = IssueRecord(author="alice", comments=comments)
        sentences, _ = IngestionPipeline().scrub_issue(issue)
        assert sentences == ["Looks good."]
        assert issue.comments is comments
        assert [c.author for c in issue.comments] == ["bob"]

    def test_body_scrubbed_in_place(self):
        issue = IssueRecord(author="alice", body="cc @bob")
        IngestionPipeline().scrub_issue(issue)
        assert issue.body == "cc @github"

    def test_empty_body_yields_nothing(self):
        sentences, counted = IngestionPipeline().scrub_issue(IssueRecord(author="alice", body=None))
        assert sentences == []
        assert counted is True

    def test_custom_excluded_authors(self):
        pipeline = IngestionPipeline(excluded_authors={"alice"})
        sentences, counted = pipeline.scrub_issue(IssueRecord(author="alice", body="Hidden."))
        assert sentences == []
        assert counted is False
        assert not pipeline.is_excluded("maestro-bot")

    def test_default_excluded_authors(self):
        pipeline = IngestionPipeline()
        assert pipeline.excluded_authors == DEFAULT_EXCLUDED_AUTHORS


class TestRun:
    def test_end_to_end(self, tmp_path):
        input_file = _write_dump(
            tmp_path,
            [
                _issue(
                    author="alice",
                    body="Fix the bug. See [pr](http://x/1).",
                    comments=[_comment(author="bob", content="Thanks! /azp run")],
                )
            ],
        )
        output_file = str(tmp_path / "dump.csv")

        summary = IngestionPipeline().run(input_file, output_file)

        assert summary.issues_scrubbed == 1
        assert summary.comments_scrubbed == 1
        assert summary.sentences_written == 4
        assert summary.distinct_sentences == 3
        assert _read_lines(output_file) == ['"Fix the bug."', '"See #url."', '"Thanks!"']

    def test_excluded_authors_contribute_nothing(self, tmp_path):
        input_file = _write_dump(
            tmp_path,
            [
                _issue(
                    author="maestro-bot",
                    body="- **Build**: 20230101.1\nUpdate dependencies.",
                    comments=[
                        _comment(author="dotnet-policy-service", content="Tagging subscribers."),
                        _comment(author="carol", content="Merging."),
                    ],
                )
            ],
        )
        output_file = str(tmp_path / "dump.csv")

        summary = IngestionPipeline().run(input_file, output_file)

        assert summary.issues_scrubbed == 0
        assert summary.comments_scrubbed == 1
        assert _read_lines(output_file) == ['"Merging."']

    def test_duplicates_across_issues_collapse(self, tmp_path):
        input_file = _write_dump(
            tmp_path,
            [
                _issue(body="Same sentence.", issue_id="1"),
                _issue(body="same sentence. Other one.", issue_id="2"),
            ],
        )
        output_file = str(tmp_path / "dump.csv")

        summary = IngestionPipeline().run(input_file, output_file)

        assert summary.issues_scrubbed == 2
        assert _read_lines(output_file) == ['"Other one."', '"Same sentence."']

    def test_quotes_escaped(self, tmp_path):
        input_file = _write_dump(tmp_path, [_issue(body='He said "hi".')])
        output_file = str(tmp_path / "dump.csv")

        IngestionPipeline().run(input_file, output_file)

        assert _read_lines(output_file) == ['"He said ""hi""."']

    def test_empty_issue(self, tmp_path):
        input_file = _write_dump(tmp_path, [{"id": "1", "author": "alice", "body": None}])
        output_file = str(tmp_path / "dump.csv")

        summary = IngestionPipeline().run(input_file, output_file)

        assert summary.issues_scrubbed == 1
        assert summary.comments_scrubbed == 0
        assert _read_lines(output_file) == []


class TestOutputPath:
    def test_uses_input_stem(self, tmp_path):
        assert output_path_for("/data/runtime-issues.json", str(tmp_path)) == str(tmp_path / "runtime-issues.csv")

    def test_defaults_to_working_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert output_path_for("dump.json") == str(tmp_path / "dump.csv")


class TestRunIngestion:
    def test_success(self, tmp_path):
        input_file = _write_dump(tmp_path, [_issue(body="Hello there.")])
        out_dir = tmp_path / "out"
        out_dir.mkdir()

        result = run_ingestion(input_file, output_dir=str(out_dir))

        assert result.ok
        assert result.failure is None
        assert result.output_file == str(out_dir / "dump.csv")
        assert result.summary.issues_scrubbed == 1
        assert _read_lines(result.output_file) == ['"Hello there."']

    def test_input_not_found(self, tmp_path):
        result = run_ingestion(str(tmp_path / "missing.json"), output_dir=str(tmp_path))

        assert not result.ok
        assert result.failure == FailureKind.INPUT_NOT_FOUND
        assert "not found" in result.message
        assert not (tmp_path / "missing.csv").exists()

    def test_malformed_input_leaves_partial_output(self, tmp_path):
        path = tmp_path / "dump.json"
        path.write_text('[{"id": "1", "author": "alice", "body": "Hello there."}, {"id": ', encoding="utf-8")

        result = run_ingestion(str(path), output_dir=str(tmp_path))

        assert result.failure == FailureKind.PARSE_ERROR
        assert result.summary is None
        assert _read_lines(tmp_path / "dump.csv") == ['"Hello there."']

    def test_wrong_shape_is_parse_error(self, tmp_path):
        input_file = _write_dump(tmp_path, {"issues": []})

        result = run_ingestion(input_file, output_dir=str(tmp_path))

        assert result.failure == FailureKind.PARSE_ERROR

    def test_unwritable_output_is_io_error(self, tmp_path):
        input_file = _write_dump(tmp_path, [_issue(body="Hello.")])

        result = run_ingestion(input_file, output_dir=str(tmp_path / "no" / "such" / "dir"))

        assert result.failure == FailureKind.IO_ERROR
        assert result.message

    def test_excluded_authors_injected(self, tmp_path):
        input_file = _write_dump(tmp_path, [_issue(author="alice", body="Secret.")])

        result = run_ingestion(input_file, output_dir=str(tmp_path), excluded_authors=["alice"])

        assert result.summary.issues_scrubbed == 0
        assert _read_lines(result.output_file) == []

    def test_deeply_nested_input_is_parse_error(self, tmp_path):
        path = tmp_path / "dump.json"
        path.write_text(
            '[{"author": "alice", "body": "Hi.", "extra": ' + "[" * 100000 + "]" * 100000 + "}]",
            encoding="utf-8",
        )

        result = run_ingestion(str(path), output_dir=str(tmp_path))

        assert result.failure == FailureKind.PARSE_ERROR
        assert "nested too deeply" in result.message

    def test_unexpected_error_reported_not_raised(self, tmp_path, mocker):
        input_file = _write_dump(tmp_path, [_issue(body="Hello.")])
        mocker.patch.object(IngestionPipeline, "run", side_effect=RuntimeError("boom"))

        result = run_ingestion(input_file, output_dir=str(tmp_path))

        assert not result.ok
        assert result.failure == FailureKind.UNEXPECTED
        assert result.message == "The operation failed"
