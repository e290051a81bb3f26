"""Tests for the sysreview CLI commands."""
from __future__ import annotations

import json
import re
from pathlib import Path
from uuid import UUID, uuid4

import pytest
import yaml
from typer.testing import CliRunner

from sysreview.cli import app
from sysreview.core.enums import SelectionStatus
from sysreview.questions.form_schema import question_id_for
from sysreview.review.repository import JsonSearchSessionRepository, JsonStudyReviewRepository

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

FIXTURES = Path(__file__).parent.parent / "fixtures"

runner = CliRunner()


@pytest.fixture
def store(tmp_path: Path) -> Path:
    return tmp_path / "store"


@pytest.fixture
def imported(store: Path, review_id: UUID) -> JsonStudyReviewRepository:
    """Store pre-filled with the twelve-type fixture file."""
    result = runner.invoke(app, [
        "import", "--input", str(FIXTURES / "all_types.bib"),
        "--review", str(review_id), "--source", "Scopus", "--store", str(store),
    ])
    assert result.exit_code == 0, result.output
    return JsonStudyReviewRepository(store)


def test_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    output = _ANSI_RE.sub("", result.output)
    for command in ("import", "list", "sessions", "status", "duplicate", "answer", "export"):
        assert command in output


class TestImport:

    def test_import_bibtex(self, imported: JsonStudyReviewRepository, review_id: UUID) -> None:
        studies = imported.find_all_from_review(review_id)
        assert [s.study_id for s in studies] == list(range(1, 13))
        assert all(s.search_sources == {"Scopus"} for s in studies)

    def test_reimport_continues_ids(
        self, imported: JsonStudyReviewRepository, store: Path, review_id: UUID,
    ) -> None:
        result = runner.invoke(app, [
            "import", "--input", str(FIXTURES / "sample.ris"),
            "--review", str(review_id), "--store", str(store),
        ])
        assert result.exit_code == 0, result.output
        assert imported.max_study_id(review_id) == 14
        assert len(imported.find_all_by_source(review_id, "sample")) == 2

    def test_import_invalid_file(self, tmp_path: Path, store: Path, review_id: UUID) -> None:
        bad = tmp_path / "bad.bib"
        bad.write_text("@patent{p1, title = {T}, author = {A}, year = {2000}}")
        result = runner.invoke(app, [
            "import", "--input", str(bad), "--review", str(review_id), "--store", str(store),
        ])
        assert result.exit_code == 1
        assert JsonStudyReviewRepository(store).find_all_from_review(review_id) == []

    def test_import_unsupported_extension(self, tmp_path: Path, review_id: UUID) -> None:
        path = tmp_path / "refs.xml"
        path.write_text("<xml/>")
        result = runner.invoke(app, ["import", "--input", str(path), "--review", str(review_id)])
        assert result.exit_code == 1

    def test_import_records_search_session(
        self, imported: JsonStudyReviewRepository, store: Path, review_id: UUID,
    ) -> None:
        (session,) = JsonSearchSessionRepository(store).find_all(review_id)
        assert session.source == "Scopus"
        studies = imported.find_all_by_session(review_id, session.session_id)
        assert len(studies) == 12

    def test_import_with_search_string(self, store: Path, review_id: UUID) -> None:
        result = runner.invoke(app, [
            "import", "--input", str(FIXTURES / "sample.ris"), "--review", str(review_id),
            "--search-string", "antibiotic AND resistance", "--info", "2020-2023 only",
            "--store", str(store),
        ])
        assert result.exit_code == 0, result.output
        (session,) = JsonSearchSessionRepository(store).find_all(review_id)
        assert session.source == "sample"
        assert session.search_string == "antibiotic AND resistance"
        assert session.additional_info == "2020-2023 only"
        assert f"Search session: {session.session_id}" in result.output

    def test_import_into_existing_session(
        self, imported: JsonStudyReviewRepository, store: Path, review_id: UUID,
    ) -> None:
        (session,) = JsonSearchSessionRepository(store).find_all(review_id)
        result = runner.invoke(app, [
            "import", "--input", str(FIXTURES / "sample.ris"), "--review", str(review_id),
            "--session", str(session.session_id), "--store", str(store),
        ])
        assert result.exit_code == 0, result.output
        assert len(JsonSearchSessionRepository(store).find_all(review_id)) == 1
        assert len(imported.find_all_by_session(review_id, session.session_id)) == 14
        assert len(imported.find_all_by_source(review_id, "Scopus")) == 14

    def test_import_unknown_session(self, store: Path, review_id: UUID) -> None:
        result = runner.invoke(app, [
            "import", "--input", str(FIXTURES / "sample.ris"), "--review", str(review_id),
            "--session", str(uuid4()), "--store", str(store),
        ])
        assert result.exit_code == 1
        assert JsonStudyReviewRepository(store).find_all_from_review(review_id) == []


class TestListAndStatus:

    def test_list(self, imported: JsonStudyReviewRepository, store: Path, review_id: UUID) -> None:
        result = runner.invoke(app, ["list", "--review", str(review_id), "--store", str(store)])
        assert result.exit_code == 0
        assert "12 studies" in _ANSI_RE.sub("", result.output)

    def test_list_by_source(
        self, imported: JsonStudyReviewRepository, store: Path, review_id: UUID,
    ) -> None:
        result = runner.invoke(app, [
            "list", "--review", str(review_id), "--source", "IEEE", "--store", str(store),
        ])
        assert result.exit_code == 0
        assert "No studies found" in result.output

    def test_list_empty(self, store: Path, review_id: UUID) -> None:
        result = runner.invoke(app, ["list", "--review", str(review_id), "--store", str(store)])
        assert result.exit_code == 0
        assert "No studies found" in result.output

    def test_status(self, imported: JsonStudyReviewRepository, store: Path, review_id: UUID) -> None:
        result = runner.invoke(app, [
            "status", "--review", str(review_id), "--study", "3", "--selection", "included",
            "--priority", "HIGH", "--store", str(store),
        ])
        assert result.exit_code == 0, result.output
        study = imported.find_by_id(review_id, 3)
        assert study is not None
        assert study.selection_status == SelectionStatus.INCLUDED
        assert "priority=HIGH" in result.output

    def test_status_invalid_value(
        self, imported: JsonStudyReviewRepository, store: Path, review_id: UUID,
    ) -> None:
        result = runner.invoke(app, [
            "status", "--review", str(review_id), "--study", "3",
            "--extraction", "DISPATCHED", "--store", str(store),
        ])
        assert result.exit_code == 1

    def test_status_missing_study(self, store: Path, review_id: UUID) -> None:
        result = runner.invoke(app, [
            "status", "--review", str(review_id), "--study", "99",
            "--selection", "INCLUDED", "--store", str(store),
        ])
        assert result.exit_code == 1


class TestSessions:

    def test_sessions_listed(self, imported: JsonStudyReviewRepository, store: Path, review_id: UUID) -> None:
        result = runner.invoke(app, ["sessions", "--review", str(review_id), "--store", str(store)])
        assert result.exit_code == 0
        assert "1 sessions" in _ANSI_RE.sub("", result.output)

    def test_no_sessions(self, store: Path, review_id: UUID) -> None:
        result = runner.invoke(app, ["sessions", "--review", str(review_id), "--store", str(store)])
        assert result.exit_code == 0
        assert "No search sessions found" in result.output

    def test_list_by_session(self, imported: JsonStudyReviewRepository, store: Path, review_id: UUID) -> None:
        (session,) = JsonSearchSessionRepository(store).find_all(review_id)
        result = runner.invoke(app, [
            "list", "--review", str(review_id), "--session", str(session.session_id),
            "--store", str(store),
        ])
        assert result.exit_code == 0
        assert "12 studies" in _ANSI_RE.sub("", result.output)

    def test_list_by_unknown_session(
        self, imported: JsonStudyReviewRepository, store: Path, review_id: UUID,
    ) -> None:
        result = runner.invoke(app, [
            "list", "--review", str(review_id), "--session", str(uuid4()), "--store", str(store),
        ])
        assert result.exit_code == 0
        assert "No studies found" in result.output


class TestDuplicate:

    def test_duplicate(self, imported: JsonStudyReviewRepository, store: Path, review_id: UUID) -> None:
        result = runner.invoke(app, [
            "duplicate", "--review", str(review_id), "--target", "1", "--duplicate", "2",
            "--store", str(store),
        ])
        assert result.exit_code == 0, result.output
        duplicate = imported.find_by_id(review_id, 2)
        assert duplicate is not None and duplicate.is_duplicated


class TestAnswer:

    def test_answer_batch(
        self, imported: JsonStudyReviewRepository, store: Path, review_id: UUID, tmp_path: Path,
    ) -> None:
        form = yaml.safe_load((FIXTURES / "questions.yaml").read_text())
        form["systematic_study_id"] = str(review_id)
        form_path = tmp_path / "questions.yaml"
        form_path.write_text(yaml.dump(form))

        answers_path = tmp_path / "answers.json"
        answers_path.write_text(json.dumps([
            {"questionId": str(question_id_for(review_id, "Q1")), "type": "TEXTUAL", "answer": "ok"},
            {"questionId": str(question_id_for(review_id, "Q2")), "type": "TEXTUAL", "answer": "RCT"},
            {
                "questionId": str(question_id_for(review_id, "RB1")),
                "type": "LABELED_SCALE",
                "answer": {"name": "High", "value": 3},
            },
        ]))

        result = runner.invoke(app, [
            "answer", "--review", str(review_id), "--study", "1",
            "--answers", str(answers_path), "--questions", str(form_path), "--store", str(store),
        ])
        assert result.exit_code == 0, result.output
        assert "2 answered, 1 rejected" in result.output
        study = imported.find_by_id(review_id, 1)
        assert study is not None
        assert set(study.form_answers) == {question_id_for(review_id, "Q1")}
        assert set(study.rob_answers) == {question_id_for(review_id, "RB1")}

    def test_answer_needs_question_form(self, tmp_path: Path, review_id: UUID) -> None:
        answers_path = tmp_path / "answers.json"
        answers_path.write_text("[]")
        result = runner.invoke(app, [
            "answer", "--review", str(review_id), "--study", "1", "--answers", str(answers_path),
            "--store", str(tmp_path / "store"),
        ])
        assert result.exit_code == 1


class TestExport:

    def test_export_csv(
        self, imported: JsonStudyReviewRepository, store: Path, review_id: UUID, tmp_path: Path,
    ) -> None:
        out = tmp_path / "export" / "studies.csv"
        result = runner.invoke(app, [
            "export", "--review", str(review_id), "--output", str(out), "--store", str(store),
        ])
        assert result.exit_code == 0, result.output
        assert out.exists()
        assert "Wrote 12 studies" in result.output

    def test_export_source_filter(
        self, imported: JsonStudyReviewRepository, store: Path, review_id: UUID, tmp_path: Path,
    ) -> None:
        out = tmp_path / "studies.json"
        result = runner.invoke(app, [
            "export", "--review", str(review_id), "--output", str(out),
            "--source", "IEEE", "--store", str(store),
        ])
        assert result.exit_code == 0
        assert json.loads(out.read_text()) == []

    def test_export_bad_format(
        self, imported: JsonStudyReviewRepository, store: Path, review_id: UUID, tmp_path: Path,
    ) -> None:
        result = runner.invoke(app, [
            "export", "--review", str(review_id), "--output", str(tmp_path / "x.xlsx"),
            "--store", str(store),
        ])
        assert result.exit_code == 1


class TestConfigOption:

    def test_config_store_and_source(self, tmp_path: Path, review_id: UUID) -> None:
        config = tmp_path / "sysreview.yaml"
        config.write_text(yaml.dump({"store_dir": "data", "default_search_source": "WoS"}))
        result = runner.invoke(app, [
            "import", "--input", str(FIXTURES / "sample.ris"),
            "--review", str(review_id), "--config", str(config),
        ])
        assert result.exit_code == 0, result.output
        studies = JsonStudyReviewRepository(tmp_path / "data").find_all_from_review(review_id)
        assert [s.search_sources for s in studies] == [{"WoS"}, {"WoS"}]
