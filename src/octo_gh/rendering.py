"""Writers that lay out GitHub objects as plain-text buffers.

Every comment is written as a header row followed by its body. The header row is
recorded as the comment's anchor, so the navigation helpers can land the cursor on
the first line of the body. Issues, pull requests and discussions also anchor their
title and description, which are always the first two anchors.
"""

from datetime import datetime

from octo_gh.models.buffer import BufferKind, OctoBuffer, ThreadAnchor
from octo_gh.models.graphql.fragments import Actor, ReviewThread, author_login
from octo_gh.models.graphql.queries import (
    GqlDiscussionWithComments,
    GqlIssueWithComments,
    GqlPullRequestWithDetails,
    RepositoryDetails,
)

EMPTY_BODY = "No description provided."
SEPARATOR = " · "


def format_date(value: datetime) -> str:
    return value.strftime("%Y-%m-%d")


class BufferWriter:
    lines: list[str]
    comment_rows: list[int]
    threads: list[ThreadAnchor]

    def __init__(self):
        self.lines = []
        self.comment_rows = []
        self.threads = []

    @property
    def row(self) -> int:
        """The 0-indexed row the next write will land on."""
        return len(self.lines)

    def write(self, *lines: str) -> None:
        self.lines.extend(lines)

    def write_body(self, body: str) -> None:
        self.write(*(body.strip().splitlines() or [EMPTY_BODY]))

    def anchor(self, header: str) -> None:
        self.comment_rows.append(self.row)
        self.write(header)

    def write_comment(self, author: Actor | None, created_at: datetime, body: str) -> None:
        self.anchor(f"### @{author_login(author)} commented on {format_date(created_at)}")
        self.write_body(body)
        self.write("")

    def write_thread(self, thread: ReviewThread) -> None:
        start_row = self.row

        status: list[str] = []
        if thread.is_resolved:
            status.append("resolved")
        if thread.is_outdated:
            status.append("outdated")
        suffix = f" ({', '.join(status)})" if status else ""

        self.write(f"#### {thread.path}:{thread.file_line}{suffix}", "")

        for comment in thread.comments:
            self.write_comment(comment.author, comment.created_at, comment.body)

        self.threads.append(ThreadAnchor(path=thread.path, line=thread.file_line, start_row=start_row, end_row=self.row - 1))

    def to_buffer(self, kind: BufferKind, repo: str, number: int | None, url: str | None) -> OctoBuffer:
        return OctoBuffer(
            kind=kind,
            repo=repo,
            number=number,
            url=url,
            lines=self.lines,
            comment_rows=self.comment_rows,
            threads=self.threads,
        )


def _write_title_and_description(writer: BufferWriter, title: str, details: list[str], body: str) -> None:
    writer.anchor(f"# {title}")
    writer.write("", *details, "")
    writer.anchor("## Description")
    writer.write_body(body)
    writer.write("")


def render_issue(issue: GqlIssueWithComments) -> OctoBuffer:
    writer = BufferWriter()

    details = [
        SEPARATOR.join(
            [
                f"{issue.repository}#{issue.number}",
                issue.state,
                f"opened by @{author_login(issue.author)} on {format_date(issue.created_at)}",
            ]
        )
    ]
    if issue.labels:
        details.append("Labels: " + ", ".join(label.name for label in issue.labels))
    if issue.assignees:
        details.append("Assignees: " + ", ".join(f"@{assignee.login}" for assignee in issue.assignees))

    _write_title_and_description(writer, issue.title, details, issue.body)

    for comment in issue.comments:
        writer.write_comment(comment.author, comment.created_at, comment.body)

    return writer.to_buffer(kind=BufferKind.ISSUE, repo=issue.repository, number=issue.number, url=issue.url)


def render_pull_request(pull_request: GqlPullRequestWithDetails) -> OctoBuffer:
    writer = BufferWriter()

    state = "MERGED" if pull_request.merged else pull_request.state
    if pull_request.is_draft:
        state += " (draft)"

    details = [
        SEPARATOR.join(
            [
                f"{pull_request.repository}#{pull_request.number}",
                state,
                f"opened by @{author_login(pull_request.author)} on {format_date(pull_request.created_at)}",
            ]
        ),
        f"Wants to merge {pull_request.head_ref_name} into {pull_request.base_ref_name}",
    ]
    if pull_request.labels:
        details.append("Labels: " + ", ".join(label.name for label in pull_request.labels))
    if pull_request.assignees:
        details.append("Assignees: " + ", ".join(f"@{assignee.login}" for assignee in pull_request.assignees))

    _write_title_and_description(writer, pull_request.title, details, pull_request.body)

    for comment in pull_request.comments:
        writer.write_comment(comment.author, comment.created_at, comment.body)

    if pull_request.review_threads:
        writer.write("## Review threads", "")
        for thread in pull_request.review_threads:
            writer.write_thread(thread)

    return writer.to_buffer(kind=BufferKind.PULL_REQUEST, repo=pull_request.repository, number=pull_request.number, url=pull_request.url)


def render_review_thread(pull_request: GqlPullRequestWithDetails, thread: ReviewThread) -> OctoBuffer:
    writer = BufferWriter()
    writer.write_thread(thread)

    url = thread.comments[0].url if thread.comments else pull_request.url

    return writer.to_buffer(kind=BufferKind.REVIEW_THREAD, repo=pull_request.repository, number=pull_request.number, url=url)


def render_discussion(discussion: GqlDiscussionWithComments) -> OctoBuffer:
    writer = BufferWriter()

    details = [
        SEPARATOR.join(
            [
                f"{discussion.repository} discussion #{discussion.number}",
                discussion.category.name,
                "CLOSED" if discussion.closed else "OPEN",
                f"started by @{author_login(discussion.author)} on {format_date(discussion.created_at)}",
            ]
        )
    ]

    _write_title_and_description(writer, discussion.title, details, discussion.body)

    for comment in discussion.comments:
        writer.write_comment(comment.author, comment.created_at, comment.body)

    return writer.to_buffer(kind=BufferKind.DISCUSSION, repo=discussion.repository, number=discussion.number, url=discussion.url)


def render_repository(repository: RepositoryDetails) -> OctoBuffer:
    writer = BufferWriter()

    facts = [f"Stars: {repository.stargazer_count}", f"Forks: {repository.fork_count}"]
    if repository.default_branch_ref:
        facts.append(f"Default branch: {repository.default_branch_ref.name}")
    if repository.is_archived:
        facts.append("Archived")

    writer.write(f"# {repository.name_with_owner}", "")
    writer.write_body(repository.description or "")
    writer.write("", SEPARATOR.join(facts), repository.url)

    return writer.to_buffer(kind=BufferKind.REPO, repo=repository.name_with_owner, number=None, url=repository.url)
