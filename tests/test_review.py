"""Tests for review orchestration."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from prsuggest.config import Settings
from prsuggest.github import GitHubClient
from prsuggest.models import FileDiffContent, Hunk, LineRange, RepoDomain, ReviewPlan
from prsuggest.review import (
  MissingTokenError,
  ReviewOrchestrator,
  build_review_plan,
  get_suggestion_hunks,
  run_review,
)

REMOTE = RepoDomain(owner="octo", repo="hello")


@pytest.fixture
def client() -> MagicMock:
  client = MagicMock(spec=GitHubClient)
  client.get_pull_request_scope.return_value = ({"cloudbuild.yaml": [LineRange(2, 8)]}, [])
  client.get_head_sha.return_value = "abc123"
  client.create_review.return_value = 11
  client.create_issue_comment.return_value = 22
  return client


class TestGetSuggestionHunks:
  def test_from_diff_text(self, one_line_diff: str) -> None:
    hunks = get_suggestion_hunks(one_line_diff)
    assert [(h.old_start, h.old_end) for h in hunks["cloudbuild.yaml"]] == [(5, 5)]

  def test_from_file_contents(self, cloudbuild: str) -> None:
    new = cloudbuild.replace("'30'", "'301'")
    hunks = get_suggestion_hunks({"cloudbuild.yaml": FileDiffContent(cloudbuild, new)})
    assert [(h.old_start, h.old_end) for h in hunks["cloudbuild.yaml"]] == [(5, 5)]


class TestBuildReviewPlan:
  def test_valid_and_invalid(self) -> None:
    plan = build_review_plan(
      {"a.py": [LineRange(1, 4).to_scope_hunk()]},
      {
        "a.py": [Hunk(2, 2, 2, 2, ("x",)), Hunk(9, 9, 9, 9, ("y",))],
        "b.py": [Hunk(1, 1, 1, 1, ("z",))],
      },
    )
    assert [(c.path, c.line) for c in plan.comments] == [("a.py", 2)]
    assert plan.summary.splitlines()[1:] == ["* a.py", "  * lines 9-9", "* b.py", "  * lines 1-1"]
    assert not plan.is_empty

  def test_nothing_suggested(self) -> None:
    plan = build_review_plan({"a.py": [LineRange(1, 4).to_scope_hunk()]}, {})
    assert plan.is_empty
    assert plan.summary == ""


class TestReviewOrchestrator:
  def test_plan_review(self, client: MagicMock, one_line_diff: str) -> None:
    orchestrator = ReviewOrchestrator(client, Settings(page_size=25))
    plan = orchestrator.plan_review(REMOTE, 3, one_line_diff)

    client.get_pull_request_scope.assert_called_once_with(REMOTE, 3, 25)
    assert len(plan.comments) == 1
    assert plan.comments[0].line == 5
    assert plan.invalid_hunks == {}

  def test_submits_review_with_summary(self, client: MagicMock, sample_plan: ReviewPlan) -> None:
    orchestrator = ReviewOrchestrator(client)
    assert orchestrator.make_inline_suggestions(sample_plan, REMOTE, 3) == 11
    client.create_review.assert_called_once_with(
      REMOTE, 3, "abc123", sample_plan.comments, body=sample_plan.summary
    )
    client.create_issue_comment.assert_not_called()

  def test_only_invalid_posts_issue_comment(self, client: MagicMock) -> None:
    plan = build_review_plan({}, {"README.md": [Hunk(1, 2, 1, 1)]})
    orchestrator = ReviewOrchestrator(client)
    assert orchestrator.make_inline_suggestions(plan, REMOTE, 3) == 22
    client.create_issue_comment.assert_called_once_with(REMOTE, 3, plan.summary)
    client.create_review.assert_not_called()

  def test_empty_plan_submits_nothing(self, client: MagicMock) -> None:
    plan = build_review_plan({}, {})
    orchestrator = ReviewOrchestrator(client)
    assert orchestrator.make_inline_suggestions(plan, REMOTE, 3) is None
    client.create_review.assert_not_called()
    client.create_issue_comment.assert_not_called()

  def test_review_pull_request_sets_id(self, client: MagicMock, one_line_diff: str) -> None:
    orchestrator = ReviewOrchestrator(client)
    plan = orchestrator.review_pull_request(REMOTE, 3, one_line_diff)
    assert plan.review_id == 11

  def test_dry_run_does_not_submit(self, client: MagicMock, one_line_diff: str) -> None:
    orchestrator = ReviewOrchestrator(client, Settings(dry_run=True))
    plan = orchestrator.review_pull_request(REMOTE, 3, one_line_diff)
    assert plan.review_id is None
    assert len(plan.comments) == 1
    client.create_review.assert_not_called()
    client.get_head_sha.assert_not_called()

  def test_files_missing_patch_are_out_of_scope(self, client: MagicMock) -> None:
    client.get_pull_request_scope.return_value = ({}, ["huge.json"])
    orchestrator = ReviewOrchestrator(client)
    diff = "--- a/huge.json\n+++ b/huge.json\n@@ -1 +1 @@\n-a\n+b\n"
    plan = orchestrator.plan_review(REMOTE, 3, diff)
    assert plan.comments == []
    assert list(plan.invalid_hunks) == ["huge.json"]


class TestRunReview:
  def test_missing_token(
    self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, one_line_diff: str
  ) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    diff_file = tmp_path / "change.diff"
    diff_file.write_text(one_line_diff)
    with pytest.raises(MissingTokenError):
      run_review("octo/hello", 3, diff_file=diff_file)

  def test_invalid_repository(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ValueError):
      run_review("not-a-repo", 3, diff_file=tmp_path / "x.diff", dry_run=True)

  def test_uses_given_settings(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GHE_TOKEN", raising=False)
    with patch("prsuggest.review.load_config") as mock_load:
      with pytest.raises(MissingTokenError) as excinfo:
        run_review("octo/hello", 3, diff_file=tmp_path / "x.diff", settings=Settings(token_env="GHE_TOKEN"))
    mock_load.assert_not_called()
    assert "GHE_TOKEN" in str(excinfo.value)

  def test_given_settings_are_not_modified(self, tmp_path: Path) -> None:
    settings = Settings()
    with pytest.raises(ValueError):
      run_review("not-a-repo", 3, diff_file=tmp_path / "x.diff", dry_run=True, settings=settings)
    assert not settings.dry_run
