"""Core review orchestration."""

import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Mapping

from rich.console import Console

from prsuggest.comments import build_review_comments, build_summary_comment
from prsuggest.config import Settings, load_config
from prsuggest.diff import (
  extract_file_contents,
  get_raw_suggestion_hunks,
  parse_all_hunks,
  read_diff_file,
)
from prsuggest.github import GitHubClient
from prsuggest.models import FileDiffContent, Hunk, RepoDomain, ReviewPlan
from prsuggest.scope import partition_suggested_hunks_by_scope, ranges_to_scope_hunks

logger = logging.getLogger(__name__)

_console = Console(stderr=True)

DiffSource = Mapping[str, FileDiffContent] | str


class MissingTokenError(Exception):
  """No GitHub token available for a request that needs one."""


def get_suggestion_hunks(diff_source: DiffSource) -> dict[str, list[Hunk]]:
  """Hunks of the proposed change from a diff text or file contents."""
  if isinstance(diff_source, str):
    return parse_all_hunks(diff_source)
  return get_raw_suggestion_hunks(diff_source)


def build_review_plan(
  pull_request_hunks: Mapping[str, list[Hunk]],
  suggested_hunks: Mapping[str, list[Hunk]],
) -> ReviewPlan:
  """Partition suggestions and render the comments and summary."""
  result = partition_suggested_hunks_by_scope(pull_request_hunks, suggested_hunks)
  return ReviewPlan(
    comments=build_review_comments(result.valid_hunks),
    summary=build_summary_comment(result.invalid_hunks),
    valid_hunks=result.valid_hunks,
    invalid_hunks=result.invalid_hunks,
  )


class ReviewOrchestrator:
  """Orchestrates turning a proposed change into a pull request review."""

  def __init__(self, client: GitHubClient, settings: Settings | None = None):
    self.client = client
    self.settings = settings or Settings()

  def get_pull_request_hunks(self, remote: RepoDomain, pull_number: int) -> dict[str, list[Hunk]]:
    """Scope hunks for every file of the pull request that has a patch."""
    ranges, files_missing_patch = self.client.get_pull_request_scope(
      remote, pull_number, self.settings.page_size
    )
    if files_missing_patch:
      logger.warning(
        "Suggestions for %s will be reported as out of scope",
        ", ".join(files_missing_patch),
      )
    return ranges_to_scope_hunks(ranges)

  def plan_review(
    self,
    remote: RepoDomain,
    pull_number: int,
    diff_source: DiffSource,
  ) -> ReviewPlan:
    """Compute the review comments without submitting anything."""
    with _console.status(f"Fetching scope of {remote}#{pull_number}..."):
      pull_request_hunks = self.get_pull_request_hunks(remote, pull_number)
    suggested_hunks = get_suggestion_hunks(diff_source)
    return build_review_plan(pull_request_hunks, suggested_hunks)

  def make_inline_suggestions(
    self,
    plan: ReviewPlan,
    remote: RepoDomain,
    pull_number: int,
  ) -> int | None:
    """Submit the plan and return the created review or comment id.

    Inline comments go out as one review with the summary as its body.
    When nothing can be placed inline the summary is posted as a
    timeline comment instead. Nothing is submitted for an empty plan.
    """
    if not plan.comments:
      logger.info("No valid suggestions to make")
    if plan.is_empty:
      logger.info("No suggestions were generated. Exiting...")
      return None
    if plan.summary:
      logger.warning("Some suggestions could not be made")

    if not plan.comments:
      comment_id = self.client.create_issue_comment(remote, pull_number, plan.summary)
      logger.info("Commented on pull request %d with out of scope suggestions.", pull_number)
      return comment_id

    # the head commit's diff covers the ranges of every earlier commit
    head_sha = self.client.get_head_sha(remote, pull_number)
    review_id = self.client.create_review(
      remote, pull_number, head_sha, plan.comments, body=plan.summary
    )
    logger.info("Successfully created a review on pull request: %d.", pull_number)
    return review_id

  def review_pull_request(
    self,
    remote: RepoDomain,
    pull_number: int,
    diff_source: DiffSource,
  ) -> ReviewPlan:
    """Plan the review and submit it unless configured for a dry run."""
    plan = self.plan_review(remote, pull_number, diff_source)
    if self.settings.dry_run:
      return plan
    with _console.status(f"Submitting review to {remote}#{pull_number}..."):
      review_id = self.make_inline_suggestions(plan, remote, pull_number)
    return replace(plan, review_id=review_id)


def _load_diff_source(diff_file: Path | None, git_dir: Path | None) -> DiffSource:
  if diff_file is not None:
    return read_diff_file(diff_file)
  if git_dir is not None:
    return extract_file_contents(git_dir)
  raise ValueError("Either a diff file or a git directory is required")


def run_review(
  repo: str,
  pull_number: int,
  diff_file: Path | None = None,
  git_dir: Path | None = None,
  config_path: Path | None = None,
  dry_run: bool = False,
  settings: Settings | None = None,
) -> ReviewPlan:
  """Run a pull request review with the given options.

  Settings already loaded by the caller are used as given; otherwise
  they are loaded from config_path or the discovered config file.
  """
  base = settings if settings is not None else load_config(config_path)
  settings = base.model_copy(deep=True)
  if dry_run:
    settings.dry_run = True

  token = os.environ.get(settings.token_env)
  if not token and not settings.dry_run:
    raise MissingTokenError(f"The {settings.token_env} environment variable is not set")

  remote = RepoDomain.parse(repo)
  diff_source = _load_diff_source(diff_file, git_dir)

  with GitHubClient.from_settings(settings, token) as client:
    orchestrator = ReviewOrchestrator(client, settings)
    return orchestrator.review_pull_request(remote, pull_number, diff_source)
