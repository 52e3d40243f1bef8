"""Core domain models for hunk scoping and review comments."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Mapping, Sequence, Union


class Side(Enum):
  """Side of a pull request diff a comment is attached to."""

  LEFT = "LEFT"
  RIGHT = "RIGHT"


@dataclass(frozen=True)
class LineRange:
  """A half-open [start, end) span of 1-indexed line numbers."""

  start: int
  end: int

  def to_scope_hunk(self) -> "Hunk":
    """Convert to an inclusive scope hunk on the new side.

    This is the only place a half-open range becomes an inclusive hunk:
    the last commentable line is end - 1.
    """
    last = self.end - 1
    return Hunk(old_start=self.start, old_end=last, new_start=self.start, new_end=last)


@dataclass(frozen=True)
class Hunk:
  """A contiguous block of changed lines.

  Both old_start..old_end and new_start..new_end are inclusive. A pure
  insertion has old_end < old_start, a pure deletion has new_end < new_start.
  previous_line and next_line hold the unchanged context around the block.
  """

  old_start: int
  old_end: int
  new_start: int
  new_end: int
  new_content: tuple[str, ...] = ()
  previous_line: str | None = None
  next_line: str | None = None

  @property
  def is_insertion(self) -> bool:
    return self.old_end < self.old_start

  @property
  def is_deletion(self) -> bool:
    return self.new_end < self.new_start

  @property
  def is_degenerate(self) -> bool:
    """Check if the hunk has an empty old or new range."""
    return self.is_insertion or self.is_deletion

  def fits_within(self, candidate: "Hunk") -> bool:
    """Check if this hunk's old range lies inside the candidate's new range."""
    return self.old_start >= candidate.new_start and self.old_end <= candidate.new_end

  def adjusted_up(self) -> "Hunk | None":
    """Extend the hunk one line up using the preceding context line."""
    if not self.previous_line:
      return None
    return replace(
      self,
      old_start=self.old_start - 1,
      new_start=self.new_start - 1,
      new_content=(self.previous_line, *self.new_content),
      previous_line=None,
      next_line=None,
    )

  def adjusted_down(self) -> "Hunk | None":
    """Extend the hunk one line down using the following context line."""
    if not self.next_line:
      return None
    return replace(
      self,
      old_end=self.old_end + 1,
      new_end=self.new_end + 1,
      new_content=(*self.new_content, self.next_line),
      previous_line=None,
      next_line=None,
    )


@dataclass(frozen=True)
class FileDiffContent:
  """Full text of one file before and after the proposed edit."""

  old_content: str
  new_content: str


@dataclass(frozen=True)
class PartitionResult:
  """Suggested hunks split by whether they can be commented on."""

  valid_hunks: Mapping[str, Sequence[Hunk]] = field(default_factory=dict)
  invalid_hunks: Mapping[str, Sequence[Hunk]] = field(default_factory=dict)


@dataclass(frozen=True)
class SingleLineComment:
  """Review comment attached to a single line."""

  path: str
  body: str
  line: int
  side: Side = Side.RIGHT

  def to_payload(self) -> dict:
    return {
      "path": self.path,
      "body": self.body,
      "line": self.line,
      "side": self.side.value,
    }


@dataclass(frozen=True)
class MultilineComment:
  """Review comment spanning start_line..line."""

  path: str
  body: str
  start_line: int
  line: int
  side: Side = Side.RIGHT
  start_side: Side = Side.RIGHT

  def to_payload(self) -> dict:
    return {
      "path": self.path,
      "body": self.body,
      "start_line": self.start_line,
      "line": self.line,
      "side": self.side.value,
      "start_side": self.start_side.value,
    }


ReviewComment = Union[SingleLineComment, MultilineComment]


@dataclass(frozen=True)
class RepoDomain:
  """Owner and name of a GitHub repository."""

  owner: str
  repo: str

  @classmethod
  def parse(cls, slug: str) -> "RepoDomain":
    """Parse an 'owner/repo' string."""
    owner, sep, repo = slug.partition("/")
    if not sep or not owner or not repo or "/" in repo:
      raise ValueError(f"Expected repository as OWNER/REPO, got '{slug}'")
    return cls(owner=owner, repo=repo)

  def __str__(self) -> str:
    return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class ReviewPlan:
  """Result of scoping suggestions against a pull request."""

  comments: Sequence[ReviewComment]
  summary: str
  valid_hunks: Mapping[str, Sequence[Hunk]]
  invalid_hunks: Mapping[str, Sequence[Hunk]]
  review_id: int | None = None

  @property
  def is_empty(self) -> bool:
    return not self.comments and not self.invalid_hunks
