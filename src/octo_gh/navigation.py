import platform
from bisect import bisect_left, bisect_right
from collections.abc import Sequence
from logging import Logger, getLogger
from pathlib import Path
from typing import Literal

import anyio
from octo_gh.clients.editor import Editor
from octo_gh.clients.errors.gh import RemoteNotFoundError
from octo_gh.clients.gh import GhClient
from octo_gh.clients.git import GitClient
from octo_gh.clients.runner import CommandRunner
from octo_gh.errors import FileNotFoundInRepositoryError, NavigationError
from octo_gh.models.buffer import BufferKind, Cursor, OctoBuffer, ThreadAnchor
from octo_gh.rendering import (
    render_discussion,
    render_issue,
    render_pull_request,
    render_repository,
    render_review_thread,
)
from octo_gh.utilities.repository import extract_issue_at_cursor, split_repo

logger: Logger = getLogger(__name__)

BrowseKind = Literal["issue", "pr", "pull_request", "discussion", "repo", "gist", "project", "workflow_run"]

TITLE_AND_BODY_ANCHORS = 2


# Ordered search


def next_greater(values: Sequence[int], value: int) -> int | None:
    """The smallest element of the sorted `values` strictly greater than `value`."""
    index = bisect_right(values, value)
    return values[index] if index < len(values) else None


def previous_less(values: Sequence[int], value: int) -> int | None:
    """The largest element of the sorted `values` strictly less than `value`."""
    index = bisect_left(values, value)
    return values[index - 1] if index > 0 else None


# Comment navigation


def next_comment_line(comment_rows: Sequence[int], cursor_line: int) -> int | None:
    """The 1-indexed line to move to when jumping to the next comment, or None to stay put.

    `comment_rows` are sorted 0-indexed header rows. The header of the row `r` is on line
    `r + 1` and the cursor lands on the first body line, `r + 2`.
    """
    header_line = next_greater([row + 1 for row in comment_rows], cursor_line)
    return None if header_line is None else header_line + 1


def prev_comment_line(comment_rows: Sequence[int], cursor_line: int) -> int | None:
    """The 1-indexed line to move to when jumping to the previous comment, or None to stay put."""
    return previous_less([row + 2 for row in comment_rows], cursor_line)


def navigable_comment_rows(buffer: OctoBuffer) -> list[int]:
    rows = buffer.sorted_comment_rows()

    # skip title and body
    if not buffer.is_review_thread():
        rows = rows[TITLE_AND_BODY_ANCHORS:]

    return rows


def next_comment(buffer: OctoBuffer, cursor: Cursor) -> Cursor:
    target = next_comment_line(navigable_comment_rows(buffer), cursor.line)
    if target is None:
        return cursor
    return Cursor(line=target, column=cursor.column)


def prev_comment(buffer: OctoBuffer, cursor: Cursor) -> Cursor:
    target = prev_comment_line(navigable_comment_rows(buffer), cursor.line)
    if target is None:
        return cursor
    return Cursor(line=target, column=cursor.column)


# Browser


def open_url_command(url: str, system: str | None = None) -> list[str] | None:
    system = system or platform.system()

    if system == "Darwin":
        return ["open", url]
    if system == "Linux":
        return ["xdg-open", url]
    if system == "Windows":
        return ["cmd", "/c", "start", "", url]

    return None


async def open_in_browser_raw(url: str, runner: CommandRunner | None = None, system: str | None = None) -> bool:
    """Open a url in the default browser without going through `gh`."""

    command = open_url_command(url, system=system)
    if command is None:
        logger.warning(f"Don't know how to open a browser on {system or platform.system()}")
        return False

    runner = runner or CommandRunner()
    result = await runner.run(command)

    if not result.ok:
        logger.warning(f"{command[0]} exited with status {result.returncode}: {result.stderr.strip()}")

    return result.ok


def browse_buffer_args(buffer: OctoBuffer, remote_host: str) -> list[str]:
    if buffer.is_pull_request() or buffer.is_review_thread():
        return ["pr", "view", "--web", "-R", f"{remote_host}/{buffer.repo}", str(buffer.number)]
    if buffer.is_issue():
        return ["issue", "view", "--web", "-R", f"{remote_host}/{buffer.repo}", str(buffer.number)]
    if buffer.is_repo():
        return ["repo", "view", "--web", f"{remote_host}/{buffer.repo}"]

    msg = f"Cannot browse a {buffer.kind} buffer with gh"
    raise NavigationError(message=msg)


def browse_kind_args(kind: BrowseKind, remote_host: str, repo: str | None, number: int | str | None) -> list[str]:
    if kind in {"pr", "pull_request", "issue"}:
        if repo is None or number is None:
            msg = f"Browsing {kind} requires a repository and a number"
            raise NavigationError(message=msg)

        command = "pr" if kind in {"pr", "pull_request"} else "issue"
        return [command, "view", "--web", "-R", f"{remote_host}/{repo}", str(number)]

    if kind == "repo":
        if repo is None:
            msg = "repo is required"
            raise NavigationError(message=msg)
        return ["repo", "view", "--web", repo]

    if kind == "project":
        if repo is None or number is None:
            msg = "Browsing project requires an owner and a number"
            raise NavigationError(message=msg)

        # projects belong to a user or an organization, not to a repository
        owner, _, _ = repo.partition("/")
        return ["project", "view", "--owner", owner, "--web", str(number)]

    if number is None:
        msg = f"Browsing {kind} requires a number"
        raise NavigationError(message=msg)

    if kind == "gist":
        return ["gist", "view", "--web", str(number)]

    if kind == "workflow_run":
        return ["run", "view", str(number), "--web"]

    msg = f"Cannot browse a {kind} with gh"
    raise NavigationError(message=msg)


async def open_in_browser(
    client: GhClient,
    git_client: GitClient,
    kind: BrowseKind | None = None,
    repo: str | None = None,
    number: int | str | None = None,
    buffer: OctoBuffer | None = None,
    runner: CommandRunner | None = None,
) -> None:
    """Open a GitHub page in the browser.

    Without a kind or a repository, the page is derived from the current buffer, or from the
    repository of the git remote when there is no buffer.
    """

    remote_host = await git_client.get_remote_host()
    if not remote_host:
        msg = "Cannot find repo remote host"
        raise RemoteNotFoundError(message=msg)

    if kind is None and repo is None:
        if buffer is None:
            owner_repo = await git_client.get_remote_name()
            if not owner_repo:
                msg = "No remote repository found"
                raise RemoteNotFoundError(message=msg)

            await client.open_web(["repo", "view", "--web", owner_repo])
            return

        if buffer.is_discussion():
            if buffer.url is None:
                msg = "The discussion buffer has no url"
                raise NavigationError(message=msg)

            _ = await open_in_browser_raw(buffer.url, runner=runner)
            return

        await client.open_web(browse_buffer_args(buffer, remote_host))
        return

    if kind == "discussion":
        if repo is None or number is None:
            msg = "Browsing discussion requires a repository and a number"
            raise NavigationError(message=msg)

        _ = await open_in_browser_raw(f"https://{remote_host}/{repo}/discussions/{number}", runner=runner)
        return

    if kind is None:
        kind = "repo"

    await client.open_web(browse_kind_args(kind, remote_host, repo, number))


# Files


def thread_for_cursor(buffer: OctoBuffer, cursor: Cursor) -> ThreadAnchor | None:
    if buffer.is_review_thread():
        return buffer.threads[0] if buffer.threads else None

    if buffer.is_pull_request():
        return buffer.thread_at_cursor(cursor.line)

    return None


async def go_to_file(
    buffer: OctoBuffer,
    cursor: Cursor,
    editor: Editor,
    git_client: GitClient,
    cwd: Path | None = None,
) -> Path | None:
    """Open the file a review thread comments on, at the commented line.

    Returns the opened path, or None when the cursor is not on a review thread.

    Raises:
        FileNotFoundInRepositoryError: If the file is in neither the working directory nor the git root.
    """

    thread = thread_for_cursor(buffer, cursor)
    if thread is None:
        return None

    candidate = (cwd or Path.cwd()) / thread.path

    if not await anyio.Path(candidate).exists() and (git_root := await git_client.show_toplevel()):
        candidate = git_root / thread.path

    if not await anyio.Path(candidate).exists():
        raise FileNotFoundInRepositoryError(path=thread.path)

    _ = await editor.open(candidate, thread.line)

    return candidate


# Loading


async def load_buffer(
    client: GhClient,
    kind: BufferKind,
    repo: str,
    number: int | None = None,
    thread: int = 1,
) -> OctoBuffer:
    """Fetch a GitHub object and render it. `thread` is the 1-indexed review thread of a pull request."""

    owner, name = split_repo(repo)

    if kind == BufferKind.REPO:
        return render_repository(await client.get_repository(owner=owner, repo=name))

    if number is None:
        msg = f"A number is required to load a {kind}"
        raise NavigationError(message=msg)

    if kind == BufferKind.ISSUE:
        return render_issue(await client.get_issue(owner=owner, repo=name, number=number))

    if kind == BufferKind.DISCUSSION:
        return render_discussion(await client.get_discussion(owner=owner, repo=name, number=number))

    pull_request = await client.get_pull_request(owner=owner, repo=name, number=number)

    if kind == BufferKind.PULL_REQUEST:
        return render_pull_request(pull_request)

    if not 1 <= thread <= len(pull_request.review_threads):
        msg = f"{repo}#{number} has no review thread {thread}"
        raise NavigationError(message=msg)

    return render_review_thread(pull_request, pull_request.review_threads[thread - 1])


async def go_to_issue(client: GhClient, buffer: OctoBuffer, line_text: str, column: int) -> OctoBuffer | None:
    """Load the issue or pull request referenced under the cursor.

    Returns None when there is no reference under the cursor or the number does not exist.
    """

    reference = extract_issue_at_cursor(buffer.repo, line_text, column)
    if reference is None:
        return None

    owner, name = split_repo(reference.repo)

    issue_kind = await client.get_issue_kind(owner=owner, repo=name, number=reference.number)
    if issue_kind is None:
        logger.info(f"{reference.repo}#{reference.number} is neither an issue nor a pull request")
        return None

    if issue_kind.kind == "Issue":
        return await load_buffer(client, BufferKind.ISSUE, reference.repo, reference.number)

    return await load_buffer(client, BufferKind.PULL_REQUEST, reference.repo, reference.number)
