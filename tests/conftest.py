import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any, overload, override

import pytest
from git.repo import Repo
from pydantic import BaseModel

from octo_gh.clients.gh import GhClient
from octo_gh.clients.git import GitClient
from octo_gh.clients.runner import CommandResult, CommandRunner
from octo_gh.pickers.base import FzfPicker

GRAPHQL_COMMAND = ["gh", "api", "graphql", "--input", "-"]


class RecordedCall(BaseModel):
    method: str
    args: list[str]
    input_text: str | None = None

    @property
    def graphql_body(self) -> dict[str, Any]:
        return json.loads(self.input_text or "{}")  # pyright: ignore[reportAny]


class CannedResponse(BaseModel):
    prefix: list[str]
    input_contains: str | None = None
    result: CommandResult

    def matches(self, args: Sequence[str], input_text: str | None) -> bool:
        if list(args[: len(self.prefix)]) != self.prefix:
            return False
        if self.input_contains is None:
            return True
        return input_text is not None and self.input_contains in input_text


class FakeRunner(CommandRunner):
    """Answers commands from canned responses instead of starting processes.

    Responses are matched on an argument prefix, and optionally on a piece of the stdin text. When several
    responses match, the first one is used up. The last matching response is reused for every later call.
    """

    calls: list[RecordedCall]
    responses: list[CannedResponse]

    def __init__(self):
        super().__init__()
        self.calls = []
        self.responses = []

    def on(
        self,
        prefix: Sequence[str],
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
        input_contains: str | None = None,
    ) -> "FakeRunner":
        self.responses.append(
            CannedResponse(
                prefix=list(prefix),
                input_contains=input_contains,
                result=CommandResult(args=list(prefix), returncode=returncode, stdout=stdout, stderr=stderr),
            )
        )
        return self

    def on_graphql(
        self,
        operation: str,
        data: dict[str, Any] | None = None,
        errors: list[dict[str, Any]] | None = None,
        returncode: int = 0,
        stderr: str = "",
    ) -> "FakeRunner":
        body: dict[str, Any] = {}
        if data is not None:
            body["data"] = data
        if errors is not None:
            body["errors"] = errors
        return self.on(GRAPHQL_COMMAND, stdout=json.dumps(body), stderr=stderr, returncode=returncode, input_contains=f"query {operation}(")

    def on_mutation(self, operation: str, data: dict[str, Any]) -> "FakeRunner":
        return self.on(GRAPHQL_COMMAND, stdout=json.dumps({"data": data}), input_contains=f"mutation {operation}(")

    def _respond(self, method: str, args: Sequence[str], input_text: str | None) -> CommandResult:
        self.calls.append(RecordedCall(method=method, args=list(args), input_text=input_text))

        # the most specific prefix wins
        matching = sorted(
            [response for response in self.responses if response.matches(args, input_text)],
            key=lambda response: len(response.prefix),
            reverse=True,
        )
        if not matching:
            msg = f"Unexpected command: {' '.join(args)}"
            raise AssertionError(msg)

        response = matching[0]
        same = [other for other in matching if other.prefix == response.prefix and other.input_contains == response.input_contains]
        if len(same) > 1:
            self.responses.remove(response)

        return response.result.model_copy(update={"args": list(args)})

    @override
    async def run(self, args: Sequence[str], input_text: str | None = None) -> CommandResult:
        return self._respond("run", args, input_text)

    @override
    async def run_picker(self, args: Sequence[str], input_text: str) -> CommandResult:
        return self._respond("run_picker", args, input_text)

    @override
    async def run_interactive(self, args: Sequence[str]) -> int:
        return self._respond("run_interactive", args, None).returncode

    def commands(self, method: str | None = None) -> list[list[str]]:
        return [call.args for call in self.calls if method is None or call.method == method]

    def graphql_calls(self) -> list[RecordedCall]:
        return [call for call in self.calls if call.args == GRAPHQL_COMMAND]


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def gh_client(runner: FakeRunner) -> GhClient:
    return GhClient(runner=runner, gh_binary="gh")


def init_checkout(path: Path, remotes: dict[str, str] | None = None) -> Path:
    """Create a git repository at `path` with the given remotes."""

    with Repo.init(path) as repository:
        for name, url in (remotes or {}).items():
            _ = repository.create_remote(name, url)

    return path


@pytest.fixture
def checkout(tmp_path: Path) -> Path:
    return init_checkout(tmp_path / "checkout")


@pytest.fixture
def git_client(checkout: Path) -> GitClient:
    return GitClient(cwd=checkout, remotes=["upstream", "origin"])


@pytest.fixture
def picker(runner: FakeRunner) -> FzfPicker:
    return FzfPicker(runner=runner, fzf_binary="fzf")


# Canned GraphQL nodes


def actor_node(login: str = "alice") -> dict[str, Any]:
    return {"user_type": "User", "login": login}


def label_node(label_id: str, name: str, color: str) -> dict[str, Any]:
    return {"id": label_id, "name": name, "color": color}


def comment_node(comment_id: str, body: str, login: str = "bob", created_at: str = "2024-03-02T10:00:00Z") -> dict[str, Any]:
    return {
        "id": comment_id,
        "url": f"https://github.com/octo/repo/issues/7#{comment_id}",
        "body": body,
        "author": actor_node(login),
        "authorAssociation": "MEMBER",
        "createdAt": created_at,
        "updatedAt": created_at,
    }


def issue_node(number: int = 7, comments: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    return {
        "id": f"I_{number}",
        "number": number,
        "url": f"https://github.com/octo/repo/issues/{number}",
        "title": "Crash on start",
        "body": "It crashes.\nEvery time.",
        "state": "OPEN",
        "author": actor_node("alice"),
        "createdAt": "2024-03-01T09:00:00Z",
        "closedAt": None,
        "labels": {"nodes": [label_node("L_1", "bug", "d73a4a")]},
        "assignees": {"nodes": [actor_node("carol")]},
        "comments": {"nodes": comments if comments is not None else [comment_node("C_1", "Same here"), comment_node("C_2", "Fixed?")]},
    }


def review_thread_node(thread_id: str = "T_1", path: str = "src/app.py", line: int | None = 12) -> dict[str, Any]:
    return {
        "id": thread_id,
        "path": path,
        "line": line,
        "originalLine": 10,
        "isResolved": False,
        "isOutdated": line is None,
        "comments": {
            "nodes": [
                {
                    "id": f"{thread_id}_C",
                    "url": f"https://github.com/octo/repo/pull/8#discussion_{thread_id}",
                    "body": "Rename this",
                    "author": actor_node("dave"),
                    "createdAt": "2024-03-03T08:00:00Z",
                }
            ]
        },
    }


def pull_request_node(number: int = 8, threads: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    return {
        "id": f"PR_{number}",
        "number": number,
        "url": f"https://github.com/octo/repo/pull/{number}",
        "title": "Fix the crash",
        "body": "",
        "state": "OPEN",
        "merged": False,
        "isDraft": False,
        "baseRefName": "main",
        "headRefName": "fix-crash",
        "author": actor_node("erin"),
        "createdAt": "2024-03-02T09:00:00Z",
        "closedAt": None,
        "mergedAt": None,
        "labels": {"nodes": []},
        "assignees": {"nodes": []},
        "comments": {"nodes": [comment_node("C_3", "LGTM")]},
        "reviewThreads": {"nodes": threads if threads is not None else [review_thread_node()]},
    }


def discussion_node(number: int = 9) -> dict[str, Any]:
    return {
        "id": f"D_{number}",
        "number": number,
        "url": f"https://github.com/octo/repo/discussions/{number}",
        "title": "Roadmap",
        "body": "What next?",
        "closed": False,
        "author": actor_node("frank"),
        "createdAt": "2024-02-01T09:00:00Z",
        "category": {"name": "Ideas"},
        "comments": {
            "nodes": [
                {
                    "id": "DC_1",
                    "url": f"https://github.com/octo/repo/discussions/{number}#discussioncomment-1",
                    "body": "Plugins",
                    "author": None,
                    "createdAt": "2024-02-02T09:00:00Z",
                }
            ]
        },
    }


def repository_node() -> dict[str, Any]:
    return {
        "nameWithOwner": "octo/repo",
        "url": "https://github.com/octo/repo",
        "description": "A test repository",
        "stargazerCount": 42,
        "forkCount": 3,
        "isArchived": False,
        "defaultBranchRef": {"name": "main"},
    }


def handle_exclude_keys(dictionary: dict[str, Any], exclude_keys: list[str] | None = None) -> dict[str, Any]:
    if exclude_keys is None:
        return dictionary
    return {key: value for key, value in dictionary.items() if key not in exclude_keys}


@overload
def dump_for_snapshot(
    basemodel: None,
    /,
    exclude_keys: list[str] | None = None,
    exclude_none: bool = True,
    **dump_kwargs: Any,
) -> None: ...


@overload
def dump_for_snapshot(
    basemodel: BaseModel,
    /,
    exclude_keys: list[str] | None = None,
    exclude_none: bool = True,
    **dump_kwargs: Any,
) -> dict[str, Any]: ...


def dump_for_snapshot(
    basemodel: None | BaseModel,
    /,
    exclude_keys: list[str] | None = None,
    exclude_none: bool = True,
    **dump_kwargs: Any,
) -> dict[str, Any] | None:
    if basemodel is None:
        return None

    return handle_exclude_keys(basemodel.model_dump(exclude_none=exclude_none, **dump_kwargs), exclude_keys)


def dump_list_for_snapshot(
    basemodel: None | Sequence[BaseModel],
    /,
    exclude_keys: list[str] | None = None,
    exclude_none: bool = True,
    **dump_kwargs: Any,
) -> list[dict[str, Any]] | None:
    if basemodel is None:
        return []

    return [dump_for_snapshot(item, exclude_keys, exclude_none, **dump_kwargs) for item in basemodel]
