from datetime import datetime
from textwrap import dedent
from typing import Any
from urllib.parse import urlparse

from pydantic import AliasChoices, BaseModel, Field, computed_field, field_serializer, field_validator

from octo_gh.models.graphql.base import extract_nodes


def owner_repository_from_url(url: str) -> tuple[str, str]:
    """Get owner and repository from a URL like `https://github.com/owner/repository/...`."""
    parsed_url = urlparse(url)

    if parsed_url.scheme not in {"http", "https"} or not parsed_url.netloc:
        msg = f"URL must be in format 'https://github.com/owner/repository', got: {url}"
        raise ValueError(msg)

    parts = [part for part in parsed_url.path.split("/") if part]
    if len(parts) < 2:  # noqa: PLR2004
        msg = f"URL must be in format 'https://github.com/owner/repository', got: {url}"
        raise ValueError(msg)

    return parts[0], parts[1]


def serialize_optional_datetime(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


class Actor(BaseModel):
    """A user, bot, or app on GitHub."""

    user_type: str
    login: str

    @staticmethod
    def graphql_fragments() -> set[str]:
        fragment = """
            fragment gqlActor on Actor {
                user_type: __typename
                login
            }
            """
        return {dedent(text=fragment)}


def author_login(author: Actor | None) -> str:
    """Deleted accounts come back as a null author and are shown as `ghost` on GitHub."""
    return author.login if author else "ghost"


class Label(BaseModel):
    """A label in a repository."""

    id: str
    name: str
    color: str

    @property
    def hex_color(self) -> str:
        return "#" + self.color

    @staticmethod
    def graphql_fragments() -> set[str]:
        fragment = """
            fragment gqlLabel on Label {
                id
                name
                color
            }
            """
        return {dedent(text=fragment)}


class Comment(BaseModel):
    """A comment on an issue or pull request."""

    id: str
    url: str
    body: str
    author: Actor | None
    author_association: str = Field(validation_alias=AliasChoices("authorAssociation", "author_association"))
    created_at: datetime = Field(validation_alias=AliasChoices("createdAt", "created_at"))
    updated_at: datetime = Field(validation_alias=AliasChoices("updatedAt", "updated_at"))

    @field_serializer("created_at", "updated_at")
    def serialize_datetime(self, value: datetime | None) -> str | None:
        return serialize_optional_datetime(value)

    @staticmethod
    def graphql_fragments() -> set[str]:
        fragment = """
            fragment gqlComment on IssueComment {
                id
                url
                body
                author {
                    ...gqlActor
                }
                authorAssociation
                createdAt
                updatedAt
            }
            """
        return {dedent(text=fragment), *Actor.graphql_fragments()}


class Issue(BaseModel):
    """An issue on GitHub."""

    id: str
    number: int
    url: str
    title: str
    body: str
    state: str

    author: Actor | None
    created_at: datetime = Field(validation_alias=AliasChoices("createdAt", "created_at"))
    closed_at: datetime | None = Field(default=None, validation_alias=AliasChoices("closedAt", "closed_at"))

    labels: list[Label]

    assignees: list[Actor]

    @computed_field
    @property
    def repository(self) -> str:
        owner, repository = owner_repository_from_url(self.url)
        return f"{owner}/{repository}"

    @field_validator("labels", "assignees", mode="before")
    @classmethod
    def flatten_labels_and_assignees(cls, value: Any) -> Any:  # pyright: ignore[reportAny]
        return extract_nodes(value)

    @field_serializer("created_at", "closed_at")
    def serialize_datetime(self, value: datetime | None) -> str | None:
        return serialize_optional_datetime(value)

    @staticmethod
    def graphql_fragments() -> set[str]:
        fragment = """
            fragment gqlIssue on Issue {
                id
                number
                url
                title
                body
                state
                author {
                    ...gqlActor
                }
                createdAt
                closedAt
                labels(first: 20) {
                    nodes {
                        ...gqlLabel
                    }
                }
                assignees(first: 10) {
                    nodes {
                        ...gqlActor
                    }
                }
            }
            """
        return {dedent(text=fragment), *Actor.graphql_fragments(), *Label.graphql_fragments()}


class PullRequest(BaseModel):
    """A pull request on GitHub."""

    id: str
    number: int
    url: str
    title: str
    body: str
    state: str
    merged: bool
    is_draft: bool = Field(validation_alias=AliasChoices("isDraft", "is_draft"))
    base_ref_name: str = Field(validation_alias=AliasChoices("baseRefName", "base_ref_name"))
    head_ref_name: str = Field(validation_alias=AliasChoices("headRefName", "head_ref_name"))

    author: Actor | None
    created_at: datetime = Field(validation_alias=AliasChoices("createdAt", "created_at"))
    closed_at: datetime | None = Field(default=None, validation_alias=AliasChoices("closedAt", "closed_at"))
    merged_at: datetime | None = Field(default=None, validation_alias=AliasChoices("mergedAt", "merged_at"))

    labels: list[Label]

    assignees: list[Actor]

    @computed_field
    @property
    def repository(self) -> str:
        owner, repository = owner_repository_from_url(self.url)
        return f"{owner}/{repository}"

    @field_validator("labels", "assignees", mode="before")
    @classmethod
    def flatten_labels_and_assignees(cls, value: Any) -> Any:  # pyright: ignore[reportAny]
        return extract_nodes(value)

    @field_serializer("created_at", "closed_at", "merged_at")
    def serialize_datetime(self, value: datetime | None) -> str | None:
        return serialize_optional_datetime(value)

    @staticmethod
    def graphql_fragments() -> set[str]:
        fragment = """
            fragment gqlPullRequest on PullRequest {
                id
                number
                url
                title
                body
                state
                merged
                isDraft
                baseRefName
                headRefName
                author {
                    ...gqlActor
                }
                createdAt
                closedAt
                mergedAt
                labels(first: 20) {
                    nodes {
                        ...gqlLabel
                    }
                }
                assignees(first: 10) {
                    nodes {
                        ...gqlActor
                    }
                }
            }
            """
        return {dedent(text=fragment), *Actor.graphql_fragments(), *Label.graphql_fragments()}


class ReviewComment(BaseModel):
    """A comment in a pull request review thread."""

    id: str
    url: str
    body: str
    author: Actor | None
    created_at: datetime = Field(validation_alias=AliasChoices("createdAt", "created_at"))

    @staticmethod
    def graphql_fragments() -> set[str]:
        fragment = """
            fragment gqlReviewComment on PullRequestReviewComment {
                id
                url
                body
                author {
                    ...gqlActor
                }
                createdAt
            }
            """
        return {dedent(text=fragment), *Actor.graphql_fragments()}


class ReviewThread(BaseModel):
    """A thread of review comments anchored to a line of a file in a pull request."""

    id: str
    path: str
    line: int | None = None
    original_line: int | None = Field(default=None, validation_alias=AliasChoices("originalLine", "original_line"))
    is_resolved: bool = Field(validation_alias=AliasChoices("isResolved", "is_resolved"))
    is_outdated: bool = Field(validation_alias=AliasChoices("isOutdated", "is_outdated"))
    comments: list[ReviewComment]

    @field_validator("comments", mode="before")
    @classmethod
    def flatten_comments(cls, value: Any) -> Any:  # pyright: ignore[reportAny]
        return extract_nodes(value)

    @property
    def file_line(self) -> int:
        """Outdated threads lose their current line and only keep the line they were written against."""
        return self.line or self.original_line or 1

    @staticmethod
    def graphql_fragments() -> set[str]:
        fragment = """
            fragment gqlReviewThread on PullRequestReviewThread {
                id
                path
                line
                originalLine
                isResolved
                isOutdated
                comments(first: 50) {
                    nodes {
                        ...gqlReviewComment
                    }
                }
            }
            """
        return {dedent(text=fragment), *ReviewComment.graphql_fragments()}


class DiscussionComment(BaseModel):
    """A comment on a discussion."""

    id: str
    url: str
    body: str
    author: Actor | None
    created_at: datetime = Field(validation_alias=AliasChoices("createdAt", "created_at"))

    @staticmethod
    def graphql_fragments() -> set[str]:
        fragment = """
            fragment gqlDiscussionComment on DiscussionComment {
                id
                url
                body
                author {
                    ...gqlActor
                }
                createdAt
            }
            """
        return {dedent(text=fragment), *Actor.graphql_fragments()}


class DiscussionCategory(BaseModel):
    name: str


class Discussion(BaseModel):
    """A discussion on GitHub."""

    id: str
    number: int
    url: str
    title: str
    body: str
    closed: bool
    author: Actor | None
    created_at: datetime = Field(validation_alias=AliasChoices("createdAt", "created_at"))
    category: DiscussionCategory

    @computed_field
    @property
    def repository(self) -> str:
        owner, repository = owner_repository_from_url(self.url)
        return f"{owner}/{repository}"

    @staticmethod
    def graphql_fragments() -> set[str]:
        fragment = """
            fragment gqlDiscussion on Discussion {
                id
                number
                url
                title
                body
                closed
                author {
                    ...gqlActor
                }
                createdAt
                category {
                    name
                }
            }
            """
        return {dedent(text=fragment), *Actor.graphql_fragments()}


class IssueStub(BaseModel):
    """The fields shown for an issue search result in a picker."""

    number: int
    title: str
    state: str
    url: str

    @staticmethod
    def graphql_fragments() -> set[str]:
        fragment = """
            fragment gqlIssueStub on Issue {
                number
                title
                state
                url
            }
            """
        return {dedent(text=fragment)}


class PullRequestStub(BaseModel):
    """The fields shown for a pull request search result in a picker."""

    number: int
    title: str
    state: str
    url: str
    is_draft: bool = Field(validation_alias=AliasChoices("isDraft", "is_draft"))

    @staticmethod
    def graphql_fragments() -> set[str]:
        fragment = """
            fragment gqlPullRequestStub on PullRequest {
                number
                title
                state
                url
                isDraft
            }
            """
        return {dedent(text=fragment)}
