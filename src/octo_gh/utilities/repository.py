import re

from pydantic import BaseModel


def split_repo(repo: str) -> tuple[str, str]:
    """Split an `owner/name` repository string."""
    owner, _, name = repo.partition("/")
    if not owner or not name or "/" in name:
        msg = f"Repository must be in format 'owner/name', got: {repo}"
        raise ValueError(msg)

    return owner, name


class IssueReference(BaseModel):
    """An issue or pull request mentioned in a buffer."""

    repo: str
    number: int


URL_REFERENCE_PATTERN = re.compile(r"https?://[^/\s]+/(?P<owner>[\w.-]+)/(?P<name>[\w.-]+)/(?:issues|pull)/(?P<number>\d+)")
QUALIFIED_REFERENCE_PATTERN = re.compile(r"(?P<owner>[\w.-]+)/(?P<name>[\w.-]+)#(?P<number>\d+)")
SHORT_REFERENCE_PATTERN = re.compile(r"#(?P<number>\d+)")


def extract_issue_at_cursor(current_repo: str | None, line: str, column: int) -> IssueReference | None:
    """Find the issue reference under the cursor.

    URLs are matched first, then `owner/name#number`, then a bare `#number` which resolves
    against `current_repo`. `column` is 0-indexed.
    """

    for match in URL_REFERENCE_PATTERN.finditer(line):
        if match.start() <= column < match.end():
            return IssueReference(repo=f"{match['owner']}/{match['name']}", number=int(match["number"]))

    for match in QUALIFIED_REFERENCE_PATTERN.finditer(line):
        if match.start() <= column < match.end():
            return IssueReference(repo=f"{match['owner']}/{match['name']}", number=int(match["number"]))

    if current_repo is None:
        return None

    for match in SHORT_REFERENCE_PATTERN.finditer(line):
        if match.start() <= column < match.end():
            return IssueReference(repo=current_repo, number=int(match["number"]))

    return None
