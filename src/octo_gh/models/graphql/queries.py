from typing import Any, Literal, override

from pydantic import AliasChoices, BaseModel, Field, field_validator

from octo_gh.models.graphql.base import BaseGqlQuery, build_document, extract_nodes
from octo_gh.models.graphql.fragments import (
    Comment,
    Discussion,
    DiscussionComment,
    Issue,
    IssueStub,
    Label,
    PullRequest,
    PullRequestStub,
    ReviewThread,
)

# Labels


class GqlLabelsRepository(BaseModel):
    labels: list[Label]

    @field_validator("labels", mode="before")
    @classmethod
    def flatten_labels(cls, value: Any) -> list[Label]:  # pyright: ignore[reportAny]
        return extract_nodes(value)


class GqlGetLabels(BaseGqlQuery):
    repository: GqlLabelsRepository

    @staticmethod
    @override
    def graphql_fragments() -> set[str]:
        return Label.graphql_fragments()

    @staticmethod
    @override
    def graphql_query() -> str:
        query = """
            query GqlGetLabels($owner: String!, $repo: String!) {
                repository(owner: $owner, name: $repo) {
                    labels(first: 100) {
                        nodes {
                            ...gqlLabel
                        }
                    }
                }
            }
        """
        return build_document(GqlGetLabels.graphql_fragments(), query)

    @staticmethod
    def to_graphql_query_variables(owner: str, repo: str) -> dict[str, Any]:
        return {"owner": owner, "repo": repo}


class LabelableNode(BaseModel):
    id: str
    labels: list[Label]

    @field_validator("labels", mode="before")
    @classmethod
    def flatten_labels(cls, value: Any) -> list[Label]:  # pyright: ignore[reportAny]
        return extract_nodes(value)


class GqlAssignedLabelsRepository(BaseModel):
    labelable: LabelableNode | None = Field(validation_alias="issueOrPullRequest")

    @field_validator("labelable", mode="before")
    @classmethod
    def remove_empty_labelable(cls, value: Any) -> Any | None:  # pyright: ignore[reportAny]
        return value if value else None


class GqlGetAssignedLabels(BaseGqlQuery):
    repository: GqlAssignedLabelsRepository

    @staticmethod
    @override
    def graphql_fragments() -> set[str]:
        return Label.graphql_fragments()

    @staticmethod
    @override
    def graphql_query() -> str:
        query = """
            query GqlGetAssignedLabels($owner: String!, $repo: String!, $number: Int!) {
                repository(owner: $owner, name: $repo) {
                    issueOrPullRequest(number: $number) {
                        ... on Issue {
                            id
                            labels(first: 100) {
                                nodes {
                                    ...gqlLabel
                                }
                            }
                        }
                        ... on PullRequest {
                            id
                            labels(first: 100) {
                                nodes {
                                    ...gqlLabel
                                }
                            }
                        }
                    }
                }
            }
        """
        return build_document(GqlGetAssignedLabels.graphql_fragments(), query)

    @staticmethod
    def to_graphql_query_variables(owner: str, repo: str, number: int) -> dict[str, Any]:
        return {"owner": owner, "repo": repo, "number": number}


class MutationResult(BaseModel):
    client_mutation_id: str | None = Field(default=None, validation_alias=AliasChoices("clientMutationId", "client_mutation_id"))


class GqlAddLabels(BaseGqlQuery):
    result: MutationResult | None = Field(validation_alias="addLabelsToLabelable")

    @staticmethod
    @override
    def graphql_fragments() -> set[str]:
        return set()

    @staticmethod
    @override
    def graphql_query() -> str:
        query = """
            mutation GqlAddLabels($labelable_id: ID!, $label_ids: [ID!]!) {
                addLabelsToLabelable(input: {labelableId: $labelable_id, labelIds: $label_ids}) {
                    clientMutationId
                }
            }
        """
        return build_document(GqlAddLabels.graphql_fragments(), query)

    @staticmethod
    def to_graphql_query_variables(labelable_id: str, label_ids: list[str]) -> dict[str, Any]:
        return {"labelable_id": labelable_id, "label_ids": label_ids}


class GqlRemoveLabels(BaseGqlQuery):
    result: MutationResult | None = Field(validation_alias="removeLabelsFromLabelable")

    @staticmethod
    @override
    def graphql_fragments() -> set[str]:
        return set()

    @staticmethod
    @override
    def graphql_query() -> str:
        query = """
            mutation GqlRemoveLabels($labelable_id: ID!, $label_ids: [ID!]!) {
                removeLabelsFromLabelable(input: {labelableId: $labelable_id, labelIds: $label_ids}) {
                    clientMutationId
                }
            }
        """
        return build_document(GqlRemoveLabels.graphql_fragments(), query)

    @staticmethod
    def to_graphql_query_variables(labelable_id: str, label_ids: list[str]) -> dict[str, Any]:
        return {"labelable_id": labelable_id, "label_ids": label_ids}


# Issue kind


class IssueKindNode(BaseModel):
    kind: Literal["Issue", "PullRequest"] = Field(validation_alias="__typename")
    id: str


class GqlIssueKindRepository(BaseModel):
    issue_or_pull_request: IssueKindNode | None = Field(validation_alias="issueOrPullRequest")


class GqlGetIssueKind(BaseGqlQuery):
    repository: GqlIssueKindRepository

    @staticmethod
    @override
    def graphql_fragments() -> set[str]:
        return set()

    @staticmethod
    @override
    def graphql_query() -> str:
        query = """
            query GqlGetIssueKind($owner: String!, $repo: String!, $number: Int!) {
                repository(owner: $owner, name: $repo) {
                    issueOrPullRequest(number: $number) {
                        __typename
                        ... on Issue {
                            id
                        }
                        ... on PullRequest {
                            id
                        }
                    }
                }
            }
        """
        return build_document(GqlGetIssueKind.graphql_fragments(), query)

    @staticmethod
    def to_graphql_query_variables(owner: str, repo: str, number: int) -> dict[str, Any]:
        return {"owner": owner, "repo": repo, "number": number}


# Issues


class GqlIssueWithComments(Issue):
    comments: list[Comment]

    @field_validator("comments", mode="before")
    @classmethod
    def flatten_comments(cls, value: Any) -> list[Comment]:  # pyright: ignore[reportAny]
        return extract_nodes(value)

    @staticmethod
    @override
    def graphql_fragments() -> set[str]:
        return {*Issue.graphql_fragments(), *Comment.graphql_fragments()}


class GqlGetIssueRepository(BaseModel):
    issue: GqlIssueWithComments | None = Field(validation_alias="issueOrPullRequest")

    @field_validator("issue", mode="before")
    @classmethod
    def remove_empty_issue(cls, value: Any) -> Any | None:  # pyright: ignore[reportAny]
        return value if value else None


class GqlGetIssue(BaseGqlQuery):
    repository: GqlGetIssueRepository

    @staticmethod
    @override
    def graphql_fragments() -> set[str]:
        return GqlIssueWithComments.graphql_fragments()

    @staticmethod
    @override
    def graphql_query() -> str:
        query = """
            query GqlGetIssue($owner: String!, $repo: String!, $number: Int!, $limit_comments: Int!) {
                repository(owner: $owner, name: $repo) {
                    issueOrPullRequest(number: $number) {
                        ... on Issue {
                            ...gqlIssue
                            comments(first: $limit_comments) {
                                nodes {
                                    ...gqlComment
                                }
                            }
                        }
                    }
                }
            }
        """
        return build_document(GqlGetIssue.graphql_fragments(), query)

    @staticmethod
    def to_graphql_query_variables(owner: str, repo: str, number: int, limit_comments: int) -> dict[str, Any]:
        return {"owner": owner, "repo": repo, "number": number, "limit_comments": limit_comments}


# Pull requests


class GqlPullRequestWithDetails(PullRequest):
    comments: list[Comment]
    review_threads: list[ReviewThread] = Field(validation_alias=AliasChoices("reviewThreads", "review_threads"))

    @field_validator("comments", mode="before")
    @classmethod
    def flatten_comments(cls, value: Any) -> list[Comment]:  # pyright: ignore[reportAny]
        return extract_nodes(value)

    @field_validator("review_threads", mode="before")
    @classmethod
    def flatten_review_threads(cls, value: Any) -> list[ReviewThread]:  # pyright: ignore[reportAny]
        return extract_nodes(value)

    @staticmethod
    @override
    def graphql_fragments() -> set[str]:
        return {*PullRequest.graphql_fragments(), *Comment.graphql_fragments(), *ReviewThread.graphql_fragments()}


class GqlGetPullRequestRepository(BaseModel):
    pull_request: GqlPullRequestWithDetails | None = Field(validation_alias="issueOrPullRequest")

    @field_validator("pull_request", mode="before")
    @classmethod
    def remove_empty_pull_request(cls, value: Any) -> Any | None:  # pyright: ignore[reportAny]
        return value if value else None


class GqlGetPullRequest(BaseGqlQuery):
    repository: GqlGetPullRequestRepository

    @staticmethod
    @override
    def graphql_fragments() -> set[str]:
        return GqlPullRequestWithDetails.graphql_fragments()

    @staticmethod
    @override
    def graphql_query() -> str:
        query = """
            query GqlGetPullRequest(
                $owner: String!
                $repo: String!
                $number: Int!
                $limit_comments: Int!
                $limit_threads: Int!
            ) {
                repository(owner: $owner, name: $repo) {
                    issueOrPullRequest(number: $number) {
                        ... on PullRequest {
                            ...gqlPullRequest
                            comments(first: $limit_comments) {
                                nodes {
                                    ...gqlComment
                                }
                            }
                            reviewThreads(first: $limit_threads) {
                                nodes {
                                    ...gqlReviewThread
                                }
                            }
                        }
                    }
                }
            }
        """
        return build_document(GqlGetPullRequest.graphql_fragments(), query)

    @staticmethod
    def to_graphql_query_variables(owner: str, repo: str, number: int, limit_comments: int, limit_threads: int) -> dict[str, Any]:
        return {
            "owner": owner,
            "repo": repo,
            "number": number,
            "limit_comments": limit_comments,
            "limit_threads": limit_threads,
        }


# Discussions


class GqlDiscussionWithComments(Discussion):
    comments: list[DiscussionComment]

    @field_validator("comments", mode="before")
    @classmethod
    def flatten_comments(cls, value: Any) -> list[DiscussionComment]:  # pyright: ignore[reportAny]
        return extract_nodes(value)

    @staticmethod
    @override
    def graphql_fragments() -> set[str]:
        return {*Discussion.graphql_fragments(), *DiscussionComment.graphql_fragments()}


class GqlGetDiscussionRepository(BaseModel):
    discussion: GqlDiscussionWithComments | None


class GqlGetDiscussion(BaseGqlQuery):
    repository: GqlGetDiscussionRepository

    @staticmethod
    @override
    def graphql_fragments() -> set[str]:
        return GqlDiscussionWithComments.graphql_fragments()

    @staticmethod
    @override
    def graphql_query() -> str:
        query = """
            query GqlGetDiscussion($owner: String!, $repo: String!, $number: Int!, $limit_comments: Int!) {
                repository(owner: $owner, name: $repo) {
                    discussion(number: $number) {
                        ...gqlDiscussion
                        comments(first: $limit_comments) {
                            nodes {
                                ...gqlDiscussionComment
                            }
                        }
                    }
                }
            }
        """
        return build_document(GqlGetDiscussion.graphql_fragments(), query)

    @staticmethod
    def to_graphql_query_variables(owner: str, repo: str, number: int, limit_comments: int) -> dict[str, Any]:
        return {"owner": owner, "repo": repo, "number": number, "limit_comments": limit_comments}


# Repositories


class DefaultBranchRef(BaseModel):
    name: str


class RepositoryDetails(BaseModel):
    name_with_owner: str = Field(validation_alias=AliasChoices("nameWithOwner", "name_with_owner"))
    url: str
    description: str | None = None
    stargazer_count: int = Field(validation_alias=AliasChoices("stargazerCount", "stargazer_count"))
    fork_count: int = Field(validation_alias=AliasChoices("forkCount", "fork_count"))
    is_archived: bool = Field(validation_alias=AliasChoices("isArchived", "is_archived"))
    default_branch_ref: DefaultBranchRef | None = Field(default=None, validation_alias=AliasChoices("defaultBranchRef", "default_branch_ref"))


class GqlGetRepository(BaseGqlQuery):
    repository: RepositoryDetails

    @staticmethod
    @override
    def graphql_fragments() -> set[str]:
        return set()

    @staticmethod
    @override
    def graphql_query() -> str:
        query = """
            query GqlGetRepository($owner: String!, $repo: String!) {
                repository(owner: $owner, name: $repo) {
                    nameWithOwner
                    url
                    description
                    stargazerCount
                    forkCount
                    isArchived
                    defaultBranchRef {
                        name
                    }
                }
            }
        """
        return build_document(GqlGetRepository.graphql_fragments(), query)

    @staticmethod
    def to_graphql_query_variables(owner: str, repo: str) -> dict[str, Any]:
        return {"owner": owner, "repo": repo}


# Search


class GqlSearchIssues(BaseGqlQuery):
    search: list[IssueStub]

    @field_validator("search", mode="before")
    @classmethod
    def flatten_search(cls, value: Any) -> list[IssueStub]:  # pyright: ignore[reportAny]
        return extract_nodes(value)

    @staticmethod
    @override
    def graphql_fragments() -> set[str]:
        return IssueStub.graphql_fragments()

    @staticmethod
    @override
    def graphql_query() -> str:
        query = """
            query GqlSearchIssues($search_query: String!, $limit: Int!) {
                search(query: $search_query, type: ISSUE, first: $limit) {
                    nodes {
                        ... on Issue {
                            ...gqlIssueStub
                        }
                    }
                }
            }
        """
        return build_document(GqlSearchIssues.graphql_fragments(), query)

    @staticmethod
    def to_graphql_query_variables(query: str, limit: int) -> dict[str, Any]:
        return {"search_query": query, "limit": limit}


class GqlSearchPullRequests(BaseGqlQuery):
    search: list[PullRequestStub]

    @field_validator("search", mode="before")
    @classmethod
    def flatten_search(cls, value: Any) -> list[PullRequestStub]:  # pyright: ignore[reportAny]
        return extract_nodes(value)

    @staticmethod
    @override
    def graphql_fragments() -> set[str]:
        return PullRequestStub.graphql_fragments()

    @staticmethod
    @override
    def graphql_query() -> str:
        query = """
            query GqlSearchPullRequests($search_query: String!, $limit: Int!) {
                search(query: $search_query, type: ISSUE, first: $limit) {
                    nodes {
                        ... on PullRequest {
                            ...gqlPullRequestStub
                        }
                    }
                }
            }
        """
        return build_document(GqlSearchPullRequests.graphql_fragments(), query)

    @staticmethod
    def to_graphql_query_variables(query: str, limit: int) -> dict[str, Any]:
        return {"search_query": query, "limit": limit}
