"""GitHub patch parsing and API access."""

from prsuggest.github.client import EmptyPullRequestError, GitHubClient, GitHubError
from prsuggest.github.patch import (
  PatchSyntaxError,
  get_github_patch_ranges,
  patch_text_to_ranges,
)

__all__ = [
  "EmptyPullRequestError",
  "GitHubClient",
  "GitHubError",
  "PatchSyntaxError",
  "get_github_patch_ranges",
  "patch_text_to_ranges",
]
