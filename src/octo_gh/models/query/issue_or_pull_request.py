from collections.abc import Sequence
from typing import Literal, Self

from octo_gh.models.query.base import (
    AssigneeQualifier,
    AuthorQualifier,
    BaseQuery,
    IssueOrPullRequestQualifier,
    KeywordQualifier,
    LabelQualifier,
    RepoQualifier,
    StateQualifier,
)

IssueOrPullRequestSearchQualifierTypes = (
    AssigneeQualifier
    | AuthorQualifier
    | IssueOrPullRequestQualifier
    | KeywordQualifier
    | LabelQualifier
    | RepoQualifier
    | StateQualifier
)


def build_filter_qualifiers(
    state: Literal["open", "closed"] | None = None,
    labels: Sequence[str] = (),
    author: str | None = None,
    assignee: str | None = None,
    keywords: Sequence[str] = (),
) -> list[IssueOrPullRequestSearchQualifierTypes]:
    """Turn picker filters into search qualifiers."""

    qualifiers: list[IssueOrPullRequestSearchQualifierTypes] = []

    if state is not None:
        qualifiers.append(StateQualifier(state=state))

    qualifiers.extend(LabelQualifier(label=label) for label in labels)

    if author is not None:
        qualifiers.append(AuthorQualifier(author=author))

    if assignee is not None:
        qualifiers.append(AssigneeQualifier(assignee=assignee))

    qualifiers.extend(KeywordQualifier(keyword=keyword) for keyword in keywords)

    return qualifiers


class IssueSearchQuery(BaseQuery[IssueOrPullRequestSearchQualifierTypes]):
    """The `IssueSearchQuery` operator searches for issues."""

    @classmethod
    def from_repo(
        cls,
        owner: str,
        repo: str,
        qualifiers: Sequence[IssueOrPullRequestSearchQualifierTypes] | None = None,
    ) -> Self:
        query_qualifiers: list[IssueOrPullRequestSearchQualifierTypes] = [
            IssueOrPullRequestQualifier(issue_or_pull_request="issue"),
            RepoQualifier(owner=owner, repo=repo),
        ]

        if qualifiers:
            query_qualifiers.extend(qualifiers)

        return cls(qualifiers=query_qualifiers)


class PullRequestSearchQuery(BaseQuery[IssueOrPullRequestSearchQualifierTypes]):
    """The `PullRequestSearchQuery` operator searches for pull requests."""

    @classmethod
    def from_repo(
        cls,
        owner: str,
        repo: str,
        qualifiers: Sequence[IssueOrPullRequestSearchQualifierTypes] | None = None,
    ) -> Self:
        query_qualifiers: list[IssueOrPullRequestSearchQualifierTypes] = [
            IssueOrPullRequestQualifier(issue_or_pull_request="pull_request"),
            RepoQualifier(owner=owner, repo=repo),
        ]

        if qualifiers:
            query_qualifiers.extend(qualifiers)

        return cls(qualifiers=query_qualifiers)
