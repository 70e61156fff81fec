from collections.abc import Callable, Sequence
from logging import Logger, getLogger
from typing import Any, Literal, overload

from pydantic import BaseModel, Field, ValidationError

from octo_gh.clients.errors.gh import RequestError, ResourceNotFoundError, ResourceTypeMismatchError
from octo_gh.clients.runner import CommandResult, CommandRunner
from octo_gh.models.graphql.base import BaseGqlQuery
from octo_gh.models.graphql.fragments import IssueStub, Label, PullRequestStub
from octo_gh.models.graphql.queries import (
    GqlAddLabels,
    GqlDiscussionWithComments,
    GqlGetAssignedLabels,
    GqlGetDiscussion,
    GqlGetIssue,
    GqlGetIssueKind,
    GqlGetLabels,
    GqlGetPullRequest,
    GqlGetRepository,
    GqlIssueWithComments,
    GqlPullRequestWithDetails,
    GqlRemoveLabels,
    GqlSearchIssues,
    GqlSearchPullRequests,
    IssueKindNode,
    LabelableNode,
    RepositoryDetails,
)
from octo_gh.utilities.config import get_comments_limit, get_gh_binary, get_search_limit

NOT_FOUND_ERROR_TYPE = "NOT_FOUND"

DEFAULT_REVIEW_THREADS_LIMIT = 100


class GraphQLRequest(BaseModel):
    query: str
    variables: dict[str, Any]


class GraphQLErrorEntry(BaseModel):
    message: str
    type: str | None = None


class GraphQLResponse(BaseModel):
    data: dict[str, Any] | None = None
    errors: list[GraphQLErrorEntry] = Field(default_factory=list)


class GhClient:
    runner: CommandRunner
    gh_binary: str
    logger: Logger

    log_requests: bool
    log_responses: bool
    log_on_error: bool

    def __init__(
        self,
        runner: CommandRunner | None = None,
        gh_binary: str | None = None,
        logger: Logger | None = None,
        log_requests: bool = True,
        log_responses: bool = False,
        log_on_error: bool = True,
    ):
        self.logger = logger or getLogger(__name__)
        self.runner = runner or CommandRunner(logger=self.logger)
        self.gh_binary = gh_binary or get_gh_binary()
        self.log_requests = log_requests
        self.log_responses = log_responses
        self.log_on_error = log_on_error

    def _get_loggers(
        self, log_request: bool | None = None, log_response: bool | None = None, log_on_error: bool | None = None
    ) -> tuple[Callable[[str], Any], Callable[[str], Any], Callable[[str], Any]]:
        request_logger = self.logger.info if log_request or self.log_requests else self.logger.debug
        response_logger = self.logger.info if log_response or self.log_responses else self.logger.debug
        error_logger = self.logger.error if log_on_error or self.log_on_error else self.logger.debug
        return request_logger, response_logger, error_logger

    def _command(self, args: Sequence[str]) -> list[str]:
        return [self.gh_binary, *args]

    async def run(
        self,
        args: Sequence[str],
        action: str,
        input_text: str | None = None,
        log_request: bool | None = None,
        log_response: bool | None = None,
        log_on_error: bool | None = None,
        warn_on_stderr: bool = True,
    ) -> str:
        """Run a `gh` command and return its standard output.

        Args:
            args: The arguments to pass to `gh`.
            action: A description of what the command does, used in logs and errors.
            input_text: Text to pass to `gh` on standard input.
            warn_on_stderr: Log the standard error of a successful run as a warning rather than at debug level.

        Raises:
            RequestError: If `gh` exits with a non-zero status.
            CommandNotFoundError: If `gh` is not installed.
        """

        request_logger, response_logger, error_logger = self._get_loggers(
            log_request=log_request, log_response=log_response, log_on_error=log_on_error
        )

        request_logger(f"Performing {action} using {' '.join(args)}")

        result: CommandResult = await self.runner.run(self._command(args), input_text=input_text)

        if not result.ok:
            message = result.stderr.strip() or f"gh exited with status {result.returncode}"
            error_logger(f"Error performing {action} using {' '.join(args)}: {message}")
            raise RequestError(action=action, message=message)

        if stderr := result.stderr.strip():
            stderr_logger = self.logger.warning if warn_on_stderr else self.logger.debug
            stderr_logger(f"gh reported on stderr while performing {action}: {stderr}")

        response_logger(f"Completed {action} using {' '.join(args)}: {result.stdout.strip()}")

        return result.stdout

    @overload
    async def _perform_graphql_query[T: BaseGqlQuery](
        self,
        query_model: type[T],
        variables: dict[str, Any],
        log_request: bool | None = None,
        log_response: bool | None = None,
        log_on_error: bool | None = None,
        error_on_not_found: Literal[True] = True,
    ) -> T: ...

    @overload
    async def _perform_graphql_query[T: BaseGqlQuery](
        self,
        query_model: type[T],
        variables: dict[str, Any],
        log_request: bool | None = None,
        log_response: bool | None = None,
        log_on_error: bool | None = None,
        error_on_not_found: Literal[False] = False,
    ) -> T | None: ...

    async def _perform_graphql_query[T: BaseGqlQuery](
        self,
        query_model: type[T],
        variables: dict[str, Any],
        log_request: bool | None = None,
        log_response: bool | None = None,
        log_on_error: bool | None = None,
        error_on_not_found: bool | None = True,
    ) -> T | None:
        """Send a GraphQL document through `gh api graphql` and return the response as a model."""

        request_logger, response_logger, error_logger = self._get_loggers(
            log_request=log_request, log_response=log_response, log_on_error=log_on_error
        )

        action = f"Get {query_model.__name__}"

        request_logger(f"Executing GraphQL query {query_model.__name__} with variables {variables}")

        request_body = GraphQLRequest(query=query_model.graphql_query(), variables=variables).model_dump_json()

        result: CommandResult = await self.runner.run(self._command(["api", "graphql", "--input", "-"]), input_text=request_body)

        # gh prints the response body even when the API reports errors
        try:
            response = GraphQLResponse.model_validate_json(result.stdout) if result.stdout.strip() else GraphQLResponse()
        except ValidationError as e:
            error_logger(f"Invalid response to GraphQL query {query_model.__name__} with variables {variables}: {result.stdout}")
            raise RequestError(action=action, message=result.stderr.strip() or "Invalid JSON response") from e

        if errors := response.errors:
            messages = ". ".join([error.message for error in errors])

            if any(error.type == NOT_FOUND_ERROR_TYPE for error in errors):
                if error_on_not_found:
                    error_logger(f"Resource not found executing GraphQL query {query_model.__name__} with variables {variables}: {messages}")
                    raise ResourceNotFoundError(action=action, extra_info={"graphql_errors": messages})

                return None

            error_logger(f"Error executing GraphQL query {query_model.__name__} with variables {variables}: {messages}")

            raise RequestError(action=action, extra_info={"graphql_errors": messages})

        if not result.ok:
            message = result.stderr.strip() or f"gh exited with status {result.returncode}"
            error_logger(f"Error executing GraphQL query {query_model.__name__} with variables {variables}: {message}")
            raise RequestError(action=action, message=message)

        if response.data is None:
            raise RequestError(action=action, message="The response did not contain any data.")

        response_logger(f"Completed GraphQL query {query_model.__name__} with variables {variables}.")

        return query_model.model_validate(response.data)

    async def get_labels(self, owner: str, repo: str) -> list[Label]:
        """Get the labels defined in a repository."""

        response: GqlGetLabels = await self._perform_graphql_query(
            query_model=GqlGetLabels,
            variables=GqlGetLabels.to_graphql_query_variables(owner=owner, repo=repo),
        )

        return response.repository.labels

    async def get_assigned_labels(self, owner: str, repo: str, number: int) -> LabelableNode:
        """Get the node id and the labels of an issue or pull request."""

        response: GqlGetAssignedLabels = await self._perform_graphql_query(
            query_model=GqlGetAssignedLabels,
            variables=GqlGetAssignedLabels.to_graphql_query_variables(owner=owner, repo=repo, number=number),
        )

        if response.repository.labelable is None:
            raise ResourceNotFoundError(action="Get assigned labels", resource=f"{owner}/{repo}#{number}")

        return response.repository.labelable

    @overload
    async def get_issue_kind(self, owner: str, repo: str, number: int, error_on_not_found: Literal[True] = True) -> IssueKindNode: ...

    @overload
    async def get_issue_kind(
        self, owner: str, repo: str, number: int, error_on_not_found: Literal[False] = False
    ) -> IssueKindNode | None: ...

    async def get_issue_kind(self, owner: str, repo: str, number: int, error_on_not_found: bool = False) -> IssueKindNode | None:
        """Find out whether a number refers to an issue or to a pull request."""

        response: GqlGetIssueKind | None = await self._perform_graphql_query(
            query_model=GqlGetIssueKind,
            variables=GqlGetIssueKind.to_graphql_query_variables(owner=owner, repo=repo, number=number),
            error_on_not_found=error_on_not_found,
        )

        if response is None or response.repository.issue_or_pull_request is None:
            if error_on_not_found:
                raise ResourceNotFoundError(action="Get issue kind", resource=f"{owner}/{repo}#{number}")
            return None

        return response.repository.issue_or_pull_request

    async def get_issue(self, owner: str, repo: str, number: int, limit_comments: int | None = None) -> GqlIssueWithComments:
        """Get an issue and its comments."""

        response: GqlGetIssue = await self._perform_graphql_query(
            query_model=GqlGetIssue,
            variables=GqlGetIssue.to_graphql_query_variables(
                owner=owner, repo=repo, number=number, limit_comments=limit_comments or get_comments_limit()
            ),
        )

        if response.repository.issue is None:
            raise ResourceTypeMismatchError(action="Get issue", resource=f"{owner}/{repo}#{number}", expected_type="Issue")

        return response.repository.issue

    async def get_pull_request(
        self, owner: str, repo: str, number: int, limit_comments: int | None = None, limit_threads: int = DEFAULT_REVIEW_THREADS_LIMIT
    ) -> GqlPullRequestWithDetails:
        """Get a pull request with its comments and review threads."""

        response: GqlGetPullRequest = await self._perform_graphql_query(
            query_model=GqlGetPullRequest,
            variables=GqlGetPullRequest.to_graphql_query_variables(
                owner=owner,
                repo=repo,
                number=number,
                limit_comments=limit_comments or get_comments_limit(),
                limit_threads=limit_threads,
            ),
        )

        if response.repository.pull_request is None:
            raise ResourceTypeMismatchError(action="Get pull request", resource=f"{owner}/{repo}#{number}", expected_type="PullRequest")

        return response.repository.pull_request

    async def get_discussion(self, owner: str, repo: str, number: int, limit_comments: int | None = None) -> GqlDiscussionWithComments:
        """Get a discussion and its top-level comments."""

        response: GqlGetDiscussion = await self._perform_graphql_query(
            query_model=GqlGetDiscussion,
            variables=GqlGetDiscussion.to_graphql_query_variables(
                owner=owner, repo=repo, number=number, limit_comments=limit_comments or get_comments_limit()
            ),
        )

        if response.repository.discussion is None:
            raise ResourceNotFoundError(action="Get discussion", resource=f"{owner}/{repo}#{number}")

        return response.repository.discussion

    async def get_repository(self, owner: str, repo: str) -> RepositoryDetails:
        response: GqlGetRepository = await self._perform_graphql_query(
            query_model=GqlGetRepository,
            variables=GqlGetRepository.to_graphql_query_variables(owner=owner, repo=repo),
        )

        return response.repository

    async def search_issues(self, query: str, limit: int | None = None) -> list[IssueStub]:
        response: GqlSearchIssues = await self._perform_graphql_query(
            query_model=GqlSearchIssues,
            variables=GqlSearchIssues.to_graphql_query_variables(query=query, limit=limit or get_search_limit()),
        )

        return response.search

    async def search_pull_requests(self, query: str, limit: int | None = None) -> list[PullRequestStub]:
        response: GqlSearchPullRequests = await self._perform_graphql_query(
            query_model=GqlSearchPullRequests,
            variables=GqlSearchPullRequests.to_graphql_query_variables(query=query, limit=limit or get_search_limit()),
        )

        return response.search

    async def add_labels(self, labelable_id: str, label_ids: Sequence[str]) -> None:
        """Add labels to an issue or pull request by node id."""

        if not label_ids:
            return

        _ = await self._perform_graphql_query(
            query_model=GqlAddLabels,
            variables=GqlAddLabels.to_graphql_query_variables(labelable_id=labelable_id, label_ids=list(label_ids)),
        )

    async def remove_labels(self, labelable_id: str, label_ids: Sequence[str]) -> None:
        """Remove labels from an issue or pull request by node id."""

        if not label_ids:
            return

        _ = await self._perform_graphql_query(
            query_model=GqlRemoveLabels,
            variables=GqlRemoveLabels.to_graphql_query_variables(labelable_id=labelable_id, label_ids=list(label_ids)),
        )

    async def open_web(self, args: Sequence[str]) -> None:
        """Run a `gh ... --web` command, which opens the page in the default browser."""

        # gh announces the page it opens on stderr
        _ = await self.run(args=args, action="Open in browser", warn_on_stderr=False)
