from collections.abc import Sequence

from octo_gh.clients.gh import GhClient
from octo_gh.clients.git import GitClient
from octo_gh.models.graphql.fragments import IssueStub, PullRequestStub
from octo_gh.models.query.issue_or_pull_request import (
    IssueOrPullRequestSearchQualifierTypes,
    IssueSearchQuery,
    PullRequestSearchQuery,
)
from octo_gh.pickers.base import DROPDOWN_OPTIONS, FzfPicker, PickerEntry, color_string_with_hex
from octo_gh.pickers.labels import resolve_repo
from octo_gh.utilities.repository import split_repo

STATE_COLORS: dict[str, str] = {
    "OPEN": "#3fb950",
    "CLOSED": "#f85149",
    "MERGED": "#a371f7",
    "DRAFT": "#8b949e",
}


def issue_entry(number: int, title: str, state: str) -> PickerEntry:
    colored_number = color_string_with_hex(f"#{number}", STATE_COLORS.get(state, STATE_COLORS["DRAFT"]))
    return PickerEntry(key=str(number), display=f"{colored_number} {title}")


async def select_issue(
    client: GhClient,
    picker: FzfPicker,
    repo: str | None = None,
    qualifiers: Sequence[IssueOrPullRequestSearchQualifierTypes] | None = None,
    limit: int | None = None,
    git_client: GitClient | None = None,
) -> int | None:
    """Search the issues of a repository and return the number the user picked."""

    repo = await resolve_repo(repo=repo, git_client=git_client)
    owner, name = split_repo(repo)

    query = IssueSearchQuery.from_repo(owner=owner, repo=name, qualifiers=qualifiers).to_query()
    issues: list[IssueStub] = await client.search_issues(query=query, limit=limit)

    entries = [issue_entry(issue.number, issue.title, issue.state) for issue in issues]

    selected = await picker.pick_entries(entries, options=DROPDOWN_OPTIONS, prompt="Issues> ")

    return int(selected[0]) if selected else None


async def select_pull_request(
    client: GhClient,
    picker: FzfPicker,
    repo: str | None = None,
    qualifiers: Sequence[IssueOrPullRequestSearchQualifierTypes] | None = None,
    limit: int | None = None,
    git_client: GitClient | None = None,
) -> int | None:
    """Search the pull requests of a repository and return the number the user picked."""

    repo = await resolve_repo(repo=repo, git_client=git_client)
    owner, name = split_repo(repo)

    query = PullRequestSearchQuery.from_repo(owner=owner, repo=name, qualifiers=qualifiers).to_query()
    pull_requests: list[PullRequestStub] = await client.search_pull_requests(query=query, limit=limit)

    entries = [
        issue_entry(pull_request.number, pull_request.title, "DRAFT" if pull_request.is_draft else pull_request.state)
        for pull_request in pull_requests
    ]

    selected = await picker.pick_entries(entries, options=DROPDOWN_OPTIONS, prompt="Pull Requests> ")

    return int(selected[0]) if selected else None
