from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import ClassVar, Generic, Literal, Self

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import TypeVar


class BaseQualifier(BaseModel, ABC, frozen=True):
    """The `BaseQualifier` operator is the base class for all qualifiers."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    @abstractmethod
    def to_query(self) -> str:
        """Render the qualifier to a query string."""


class AssigneeQualifier(BaseQualifier, frozen=True):
    assignee: str = Field(description="The assignee to search for.")

    def to_query(self) -> str:
        return f'assignee:"{self.assignee}"'


class AuthorQualifier(BaseQualifier, frozen=True):
    author: str = Field(description="The author to search for.")

    def to_query(self) -> str:
        return f'author:"{self.author}"'


class KeywordQualifier(BaseQualifier, frozen=True):
    keyword: str = Field(description="The keyword to search for.")

    def to_query(self) -> str:
        # escape backslashes with more backslashes
        keyword = self.keyword.replace("\\", "\\\\")

        # escape quotes with backslashes
        keyword = keyword.replace('"', '\\"')

        return f'"{keyword}"'


class LabelQualifier(BaseQualifier, frozen=True):
    label: str = Field(description="The label to search for.")

    def to_query(self) -> str:
        return f'label:"{self.label}"'


class RepoQualifier(BaseQualifier, frozen=True):
    owner: str = Field(description="The owner or organization to search for.")
    repo: str = Field(description="The repository to search for under the owner.")

    def to_query(self) -> str:
        return f"repo:{self.owner}/{self.repo}"


class IssueOrPullRequestQualifier(BaseQualifier, frozen=True):
    issue_or_pull_request: Literal["issue", "pull_request"] = Field(
        description="The issue or pull request to search for, i.e. 'issue', 'pull_request'."
    )

    def to_query(self) -> str:
        if self.issue_or_pull_request == "pull_request":
            return "is:pr"

        return "is:issue"


class StateQualifier(BaseQualifier, frozen=True):
    state: Literal["open", "closed"] = Field(description="The state to search for, i.e. 'open', 'closed'.")

    def to_query(self) -> str:
        return f"state:{self.state}"


AllQualifierTypes = (
    AssigneeQualifier
    | AuthorQualifier
    | IssueOrPullRequestQualifier
    | KeywordQualifier
    | LabelQualifier
    | RepoQualifier
    | StateQualifier
)

QualifierTypes = TypeVar("QualifierTypes", bound=BaseQualifier, default=AllQualifierTypes)


class BaseQuery(BaseModel, Generic[QualifierTypes]):
    """The `BaseQuery` operator is the base class for all queries."""

    qualifiers: Sequence[QualifierTypes] = Field(description="The qualifiers of the search query.", default_factory=list)

    def add_qualifier(self, qualifier: QualifierTypes | None) -> Self:
        if qualifier is None:
            return self
        self.qualifiers = [*self.qualifiers, qualifier]
        return self

    def to_query(self) -> str:
        return " ".join([qualifier.to_query() for qualifier in self.qualifiers]).strip()
