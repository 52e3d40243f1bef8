"""Application settings."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

OutputFormat = Literal["terminal", "json", "markdown"]


class Settings(BaseModel):
  """Application configuration."""

  model_config = ConfigDict(extra="forbid")

  api_url: str = "https://api.github.com"
  token_env: str = "GITHUB_TOKEN"
  page_size: int = Field(default=100, ge=1, le=100)
  timeout: float = Field(default=30.0, gt=0)
  max_retries: int = Field(default=2, ge=0)
  dry_run: bool = False
  output_format: OutputFormat = "terminal"
