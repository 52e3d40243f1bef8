"""GitHub REST API client for pull request reviews."""

import logging
from typing import Any, Sequence

import httpx

from prsuggest.config import Settings
from prsuggest.github.patch import patch_text_to_ranges
from prsuggest.models import LineRange, RepoDomain, ReviewComment

logger = logging.getLogger(__name__)


class GitHubError(Exception):
  """GitHub API request failed."""

  def __init__(self, message: str, status_code: int | None = None):
    super().__init__(message)
    self.status_code = status_code


class EmptyPullRequestError(GitHubError):
  """Pull request has no changed files."""


class GitHubClient:
  """Thin synchronous wrapper over the endpoints used for reviews."""

  DEFAULT_API_URL = "https://api.github.com"
  ACCEPT = "application/vnd.github+json"

  def __init__(
    self,
    token: str | None = None,
    api_url: str = DEFAULT_API_URL,
    timeout: float = 30.0,
    max_retries: int = 2,
    transport: httpx.BaseTransport | None = None,
  ):
    headers = {"Accept": self.ACCEPT, "User-Agent": "prsuggest"}
    if token:
      headers["Authorization"] = f"Bearer {token}"
    self._max_retries = max_retries
    self._client = httpx.Client(
      base_url=api_url,
      headers=headers,
      timeout=timeout,
      transport=transport,
    )

  @classmethod
  def from_settings(cls, settings: Settings, token: str | None) -> "GitHubClient":
    return cls(
      token=token,
      api_url=settings.api_url,
      timeout=settings.timeout,
      max_retries=settings.max_retries,
    )

  def close(self) -> None:
    self._client.close()

  def __enter__(self) -> "GitHubClient":
    return self

  def __exit__(self, *exc_info: object) -> None:
    self.close()

  def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
    """Make request with retry on transient failures."""
    last_error: Exception | None = None

    for attempt in range(self._max_retries + 1):
      try:
        response = self._client.request(method, url, **kwargs)
        response.raise_for_status()
        return response
      except (httpx.ConnectError, httpx.ReadTimeout) as e:
        last_error = e
        if attempt < self._max_retries:
          logger.warning("Request to %s failed (%s), retrying", url, e)
          continue
      except httpx.HTTPStatusError as e:
        raise GitHubError(
          f"{method} {url} failed with {e.response.status_code}: {_error_message(e.response)}",
          status_code=e.response.status_code,
        ) from e

    raise GitHubError(f"{method} {url} failed: {last_error}") from last_error

  def list_pull_request_files(
    self,
    remote: RepoDomain,
    pull_number: int,
    page_size: int = 100,
  ) -> list[dict]:
    """List the files changed by a pull request (first page only)."""
    response = self._request(
      "GET",
      f"/repos/{remote.owner}/{remote.repo}/pulls/{pull_number}/files",
      params={"per_page": page_size},
    )
    return response.json()

  def get_current_pull_request_patches(
    self,
    remote: RepoDomain,
    pull_number: int,
    page_size: int = 100,
  ) -> tuple[dict[str, str], list[str]]:
    """Get each changed file's patch text.

    Files whose patch is too large are not returned with one by GitHub;
    they are collected separately.

    Returns:
      Tuple of (patch text by file name, file names missing a patch).

    Raises:
      EmptyPullRequestError: If the pull request has no files.
    """
    files = self.list_pull_request_files(remote, pull_number, page_size)
    if not files:
      logger.error(
        "0 file results have returned from list files query for Pull Request #%d."
        " Cannot make suggestions on an empty Pull Request",
        pull_number,
      )
      raise EmptyPullRequestError(f"Pull request #{pull_number} has no changed files")

    patches: dict[str, str] = {}
    files_missing_patch: list[str] = []
    for file in files:
      patch = file.get("patch")
      if patch is None:
        logger.warning(
          "File %s may have a patch that is too large to display patch object.",
          file["filename"],
        )
        files_missing_patch.append(file["filename"])
      else:
        patches[file["filename"]] = patch

    if not patches:
      logger.warning(
        "0 patches have been returned. This could be because the patch results were too large to return."
      )
    return patches, files_missing_patch

  def get_pull_request_scope(
    self,
    remote: RepoDomain,
    pull_number: int,
    page_size: int = 100,
  ) -> tuple[dict[str, list[LineRange]], list[str]]:
    """Get the commentable ranges of each file and the files missing a patch."""
    patches, files_missing_patch = self.get_current_pull_request_patches(
      remote, pull_number, page_size
    )
    return patch_text_to_ranges(patches), files_missing_patch

  def get_head_sha(self, remote: RepoDomain, pull_number: int) -> str:
    """Get the latest commit of the pull request branch."""
    response = self._request("GET", f"/repos/{remote.owner}/{remote.repo}/pulls/{pull_number}")
    return response.json()["head"]["sha"]

  def create_review(
    self,
    remote: RepoDomain,
    pull_number: int,
    commit_id: str,
    comments: Sequence[ReviewComment],
    body: str = "",
  ) -> int:
    """Create a COMMENT review and return its id."""
    payload: dict[str, Any] = {
      "commit_id": commit_id,
      "event": "COMMENT",
      "comments": [c.to_payload() for c in comments],
    }
    if body:
      payload["body"] = body
    response = self._request(
      "POST",
      f"/repos/{remote.owner}/{remote.repo}/pulls/{pull_number}/reviews",
      json=payload,
    )
    return response.json()["id"]

  def create_issue_comment(self, remote: RepoDomain, issue_number: int, body: str) -> int:
    """Post a timeline comment on an issue or pull request and return its id."""
    response = self._request(
      "POST",
      f"/repos/{remote.owner}/{remote.repo}/issues/{issue_number}/comments",
      json={"body": body},
    )
    return response.json()["id"]


def _error_message(response: httpx.Response) -> str:
  try:
    return response.json().get("message", response.text)
  except ValueError:
    return response.text
