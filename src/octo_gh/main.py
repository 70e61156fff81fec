import asyncio
import logging
from collections.abc import Coroutine
from logging import Logger, getLogger
from pathlib import Path
from typing import Any, Literal

import click

from octo_gh.clients.editor import Editor
from octo_gh.clients.errors.gh import ClientError
from octo_gh.clients.gh import GhClient
from octo_gh.clients.git import GitClient
from octo_gh.clients.runner import CommandRunner
from octo_gh.errors import OctoError
from octo_gh.models.buffer import BufferKind, Cursor, OctoBuffer
from octo_gh.models.query.issue_or_pull_request import build_filter_qualifiers
from octo_gh.navigation import (
    BrowseKind,
    go_to_file,
    go_to_issue,
    load_buffer,
    next_comment,
    open_in_browser,
    open_in_browser_raw,
    prev_comment,
)
from octo_gh.pickers.base import FzfPicker
from octo_gh.pickers.issues import select_issue, select_pull_request
from octo_gh.pickers.labels import add_labels_to, resolve_repo, select_assigned_labels, select_labels
from octo_gh.utilities.config import get_log_level

logger: Logger = getLogger(name=__name__)

VIEW_KINDS: dict[str, BufferKind] = {
    "issue": BufferKind.ISSUE,
    "pr": BufferKind.PULL_REQUEST,
    "discussion": BufferKind.DISCUSSION,
    "repo": BufferKind.REPO,
    "thread": BufferKind.REVIEW_THREAD,
}

# Browse kinds that fall back to the git remote, projects use only its owner
REPOSITORY_BROWSE_KINDS: set[str] = {"issue", "pr", "pull_request", "discussion", "repo", "project"}


class OctoContext:
    """The clients shared by every command of one invocation."""

    runner: CommandRunner
    cwd: Path | None
    gh: GhClient
    git: GitClient
    picker: FzfPicker
    editor: Editor

    def __init__(self, runner: CommandRunner | None = None, cwd: Path | None = None):
        self.runner = runner or CommandRunner()
        self.cwd = cwd
        self.gh = GhClient(runner=self.runner)
        self.git = GitClient(cwd=cwd)
        self.picker = FzfPicker(runner=self.runner)
        self.editor = Editor(runner=self.runner)


pass_octo = click.make_pass_decorator(OctoContext)


def run_async[T](coroutine: Coroutine[Any, Any, T]) -> T:
    try:
        return asyncio.run(coroutine)
    except (ClientError, OctoError, ValueError) as e:
        logger.debug("Command failed", exc_info=e)
        raise click.ClickException(str(e)) from e


def emit_buffer(buffer: OctoBuffer, output: Path | None) -> None:
    if output is None:
        click.echo(buffer.text, nl=False)
        return

    buffer.save(output)
    click.echo(f"Wrote {output}", err=True)


def load_buffer_file(path: Path) -> OctoBuffer:
    try:
        return OctoBuffer.load(path)
    except FileNotFoundError as e:
        msg = f"No buffer metadata found for {path}"
        raise click.ClickException(msg) from e


output_option = click.option(
    "-o", "--output", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Save the buffer to a file"
)
repo_option = click.option("--repo", "-R", default=None, help="The repository as owner/name, defaults to the git remote")
buffer_option = click.option(
    "--buffer", "buffer_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), required=True, help="A saved buffer"
)
line_option = click.option("--line", type=click.IntRange(min=1), required=True, help="The 1-indexed cursor line")
column_option = click.option("--column", type=click.IntRange(min=0), default=0, show_default=True, help="The 0-indexed cursor column")


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="The log level, defaults to OCTO_LOG_LEVEL",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None):
    """Browse GitHub issues, pull requests and discussions from the terminal."""

    logging.basicConfig(level=(log_level or get_log_level()).upper(), format="%(levelname)s %(name)s: %(message)s")

    if ctx.obj is None:
        ctx.obj = OctoContext()


@cli.command()
@repo_option
@click.option("--add", "add_to", type=int, default=None, help="Add the picked labels to this issue or pull request")
@click.option("--remove", "remove_from", type=int, default=None, help="Pick labels to remove from this issue or pull request")
@pass_octo
def labels(octo: OctoContext, repo: str | None, add_to: int | None, remove_from: int | None):
    """Pick labels from a repository."""

    if add_to is not None and remove_from is not None:
        msg = "--add and --remove cannot be used together"
        raise click.UsageError(msg)

    async def _labels() -> list[str]:
        resolved = await resolve_repo(repo=repo, git_client=octo.git)

        if remove_from is not None:
            selection = await select_assigned_labels(octo.gh, octo.picker, number=remove_from, repo=resolved)
            await octo.gh.remove_labels(labelable_id=selection.labelable_id, label_ids=[label.id for label in selection.labels])
            return [label.name for label in selection.labels]

        selected = await select_labels(octo.gh, octo.picker, repo=resolved)

        if add_to is not None:
            await add_labels_to(octo.gh, repo=resolved, number=add_to, labels=selected)

        return [label.name for label in selected]

    for name in run_async(_labels()):
        click.echo(name)


def search_options[F](func: F) -> F:
    for option in reversed(
        [
            repo_option,
            click.option("--state", type=click.Choice(["open", "closed"]), default="open", show_default=True),
            click.option("--label", "labels", multiple=True, help="Only show results with this label"),
            click.option("--author", default=None),
            click.option("--assignee", default=None),
            output_option,
            click.argument("keywords", nargs=-1),
        ]
    ):
        func = option(func)  # pyright: ignore[reportAny]
    return func


@cli.command()
@search_options
@pass_octo
def issues(
    octo: OctoContext,
    repo: str | None,
    state: Literal["open", "closed"],
    labels: tuple[str, ...],
    author: str | None,
    assignee: str | None,
    output: Path | None,
    keywords: tuple[str, ...],
):
    """Pick an issue and show it."""

    qualifiers = build_filter_qualifiers(state=state, labels=labels, author=author, assignee=assignee, keywords=keywords)

    async def _issues() -> OctoBuffer | None:
        resolved = await resolve_repo(repo=repo, git_client=octo.git)

        number = await select_issue(octo.gh, octo.picker, repo=resolved, qualifiers=qualifiers)
        if number is None:
            return None

        return await load_buffer(octo.gh, BufferKind.ISSUE, resolved, number)

    if buffer := run_async(_issues()):
        emit_buffer(buffer, output)


@cli.command()
@search_options
@pass_octo
def prs(
    octo: OctoContext,
    repo: str | None,
    state: Literal["open", "closed"],
    labels: tuple[str, ...],
    author: str | None,
    assignee: str | None,
    output: Path | None,
    keywords: tuple[str, ...],
):
    """Pick a pull request and show it."""

    qualifiers = build_filter_qualifiers(state=state, labels=labels, author=author, assignee=assignee, keywords=keywords)

    async def _prs() -> OctoBuffer | None:
        resolved = await resolve_repo(repo=repo, git_client=octo.git)

        number = await select_pull_request(octo.gh, octo.picker, repo=resolved, qualifiers=qualifiers)
        if number is None:
            return None

        return await load_buffer(octo.gh, BufferKind.PULL_REQUEST, resolved, number)

    if buffer := run_async(_prs()):
        emit_buffer(buffer, output)


@cli.command()
@click.argument("kind", type=click.Choice(list(VIEW_KINDS)))
@click.argument("number", type=int, required=False)
@repo_option
@click.option("--thread", type=click.IntRange(min=1), default=1, show_default=True, help="The review thread to show")
@output_option
@pass_octo
def view(octo: OctoContext, kind: str, number: int | None, repo: str | None, thread: int, output: Path | None):
    """Show an issue, pull request, discussion, repository or review thread."""

    async def _view() -> OctoBuffer:
        resolved = await resolve_repo(repo=repo, git_client=octo.git)
        return await load_buffer(octo.gh, VIEW_KINDS[kind], resolved, number, thread=thread)

    emit_buffer(run_async(_view()), output)


@cli.command()
@click.argument(
    "kind",
    type=click.Choice(["issue", "pr", "pull_request", "discussion", "repo", "gist", "project", "workflow_run"]),
    required=False,
)
@click.argument("number", required=False)
@click.option("--repo", "-R", default=None, help="The repository as owner/name, or the project owner")
@click.option("--buffer", "buffer_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None)
@pass_octo
def browse(octo: OctoContext, kind: BrowseKind | None, number: str | None, repo: str | None, buffer_path: Path | None):
    """Open a GitHub page in the browser."""

    buffer = load_buffer_file(buffer_path) if buffer_path else None

    async def _browse() -> None:
        resolved = repo
        if kind in REPOSITORY_BROWSE_KINDS and resolved is None:
            resolved = await resolve_repo(repo=None, git_client=octo.git)

        await open_in_browser(octo.gh, octo.git, kind=kind, repo=resolved, number=number, buffer=buffer, runner=octo.runner)

    run_async(_browse())


@cli.command("open-url")
@click.argument("url")
@pass_octo
def open_url(octo: OctoContext, url: str):
    """Open a url in the default browser."""

    if not run_async(open_in_browser_raw(url, runner=octo.runner)):
        msg = f"Could not open {url}"
        raise click.ClickException(msg)


@cli.command("next-comment")
@buffer_option
@line_option
@column_option
def next_comment_command(buffer_path: Path, line: int, column: int):
    """Print the cursor position of the next comment as line:column."""

    cursor = next_comment(load_buffer_file(buffer_path), Cursor(line=line, column=column))
    click.echo(f"{cursor.line}:{cursor.column}")


@cli.command("prev-comment")
@buffer_option
@line_option
@column_option
def prev_comment_command(buffer_path: Path, line: int, column: int):
    """Print the cursor position of the previous comment as line:column."""

    cursor = prev_comment(load_buffer_file(buffer_path), Cursor(line=line, column=column))
    click.echo(f"{cursor.line}:{cursor.column}")


@cli.command("goto-file")
@buffer_option
@line_option
@pass_octo
def goto_file(octo: OctoContext, buffer_path: Path, line: int):
    """Open the file of the review thread under the cursor in the editor."""

    buffer = load_buffer_file(buffer_path)

    path = run_async(go_to_file(buffer, Cursor(line=line), editor=octo.editor, git_client=octo.git, cwd=octo.cwd))
    if path is None:
        click.echo("No review thread under the cursor", err=True)


@cli.command("goto-issue")
@buffer_option
@line_option
@column_option
@output_option
@pass_octo
def goto_issue(octo: OctoContext, buffer_path: Path, line: int, column: int, output: Path | None):
    """Show the issue or pull request referenced under the cursor."""

    buffer = load_buffer_file(buffer_path)

    target = run_async(go_to_issue(octo.gh, buffer, buffer.line_at(line), column))
    if target is None:
        click.echo("No issue reference under the cursor", err=True)
        return

    emit_buffer(target, output)


def run():
    cli()


if __name__ == "__main__":
    run()
