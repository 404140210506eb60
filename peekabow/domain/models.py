from typing import Iterator, List
from pydantic import BaseModel, Field, ConfigDict

class Credentials(BaseModel):
    """Bearer tokens for GitHub and ZenHub. Opaque: never parsed or logged."""
    model_config = ConfigDict(frozen=True)

    github_token: str = Field(..., min_length=1, repr=False, description="GitHub personal access token")
    zenhub_token: str = Field(..., min_length=1, repr=False, description="ZenHub API token")

class RepositoryRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: str = Field(..., min_length=1, description="Login name of the repository owner")
    name: str = Field(..., min_length=1, description="Name of the repository")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

class IssueRef(BaseModel):
    """A bare issue number as tracked by a ZenHub pipeline."""
    model_config = ConfigDict(frozen=True)

    issue_number: int = Field(..., description="Per-repository GitHub issue number")

class Pipeline(BaseModel):
    """
    A named, ordered bucket of issues on a ZenHub board.
    Duplicated issue numbers are kept as returned.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Pipeline name, e.g. 'In Progress'")
    issues: List[IssueRef] = Field(..., description="Issues in board order")

    def issue_numbers(self) -> Iterator[int]:
        for issue in self.issues:
            yield issue.issue_number

class Board(BaseModel):
    """Snapshot of all pipelines of a repository, in the order ZenHub returns them."""
    model_config = ConfigDict(frozen=True)

    pipelines: List[Pipeline] = Field(...)

class EnrichedIssue(BaseModel):
    """An issue number resolved to its GitHub title and canonical URL."""
    model_config = ConfigDict(frozen=True)

    number: int
    title: str
    url: str

    def summary_line(self) -> str:
        return f"#{self.number}: {self.title} : {self.url}"

class SummaryContext(BaseModel):
    """Everything a single run needs to know about what to summarize."""
    model_config = ConfigDict(frozen=True)

    repository: RepositoryRef
    pipeline_name: str = Field(..., min_length=1)

class PipelineSummary(BaseModel):
    """Result of one run: either the pipeline was missing or we have its lines."""
    model_config = ConfigDict(frozen=True)

    repository_id: int
    pipeline_name: str
    found: bool
    lines: List[str] = Field(default_factory=list)
