"""Output formatting for review plans."""

import json
from abc import ABC, abstractmethod

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from prsuggest.models import MultilineComment, ReviewComment, ReviewPlan


def _line_span(comment: ReviewComment) -> str:
  if isinstance(comment, MultilineComment):
    return f"{comment.start_line}-{comment.line}"
  return str(comment.line)


class OutputFormatter(ABC):
  """Base output formatter."""

  @abstractmethod
  def format(self, plan: ReviewPlan) -> str:
    """Format review plan for output."""
    ...


class TerminalFormatter(OutputFormatter):
  """Rich terminal output formatter."""

  def __init__(self, console: Console | None = None):
    self.console = console or Console()

  def format(self, plan: ReviewPlan) -> str:
    self._print_comments(plan)
    self._print_summary(plan)
    return ""

  def _print_comments(self, plan: ReviewPlan) -> None:
    if not plan.comments:
      self.console.print("\n[yellow]No suggestions fit inside the pull request diff.[/yellow]")
      return

    table = Table(show_header=True, header_style="bold")
    table.add_column("File", width=30)
    table.add_column("Lines", width=10, justify="right")
    table.add_column("Suggestion", min_width=40)

    for comment in plan.comments:
      table.add_row(
        comment.path,
        _line_span(comment),
        Syntax(comment.body, "markdown", word_wrap=True),
      )

    self.console.print()
    self.console.print(table)
    self.console.print(f"\n[dim]{len(plan.comments)} suggestion(s)[/dim]")

  def _print_summary(self, plan: ReviewPlan) -> None:
    if plan.summary:
      self.console.print()
      self.console.print(Panel(plan.summary, title="[bold]Out of scope[/bold]", border_style="yellow"))
    if plan.review_id is not None:
      self.console.print(f"\n[green]Submitted[/green] (id {plan.review_id})")


class JsonFormatter(OutputFormatter):
  """JSON output formatter using the GitHub review payload shape."""

  def format(self, plan: ReviewPlan) -> str:
    data = {
      "review_id": plan.review_id,
      "body": plan.summary,
      "comments": [c.to_payload() for c in plan.comments],
      "invalid_hunks": {
        path: [{"start": h.old_start, "end": h.old_end} for h in hunks]
        for path, hunks in sorted(plan.invalid_hunks.items())
      },
    }
    return json.dumps(data, indent=2)


class MarkdownFormatter(OutputFormatter):
  """Markdown output formatter."""

  def format(self, plan: ReviewPlan) -> str:
    lines = ["# Suggestions", ""]

    if plan.comments:
      for comment in plan.comments:
        lines.append(f"## {comment.path}:{_line_span(comment)}")
        lines.append("")
        lines.append(comment.body)
        lines.append("")
    else:
      lines.extend(["No suggestions fit inside the pull request diff.", ""])

    if plan.summary:
      lines.extend(["## Out of scope", "", plan.summary, ""])

    return "\n".join(lines)


def get_formatter(format_type: str) -> OutputFormatter:
  """Get formatter by type name."""
  formatters = {
    "terminal": TerminalFormatter,
    "json": JsonFormatter,
    "markdown": MarkdownFormatter,
  }
  formatter_class = formatters.get(format_type)
  if not formatter_class:
    raise ValueError(f"Unknown format: {format_type}")
  return formatter_class()
