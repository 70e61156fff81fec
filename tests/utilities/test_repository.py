import pytest

from octo_gh.utilities.repository import IssueReference, extract_issue_at_cursor, split_repo


def test_split_repo():
    assert split_repo("octo/repo") == ("octo", "repo")


@pytest.mark.parametrize("repo", ["octo", "octo/", "/repo", "octo/repo/extra", ""])
def test_split_repo_invalid(repo: str):
    with pytest.raises(ValueError, match="owner/name"):
        _ = split_repo(repo)


@pytest.mark.parametrize(
    ("line", "column", "expected"),
    [
        ("Fixed by #8", 9, IssueReference(repo="octo/repo", number=8)),
        ("Fixed by #8", 10, IssueReference(repo="octo/repo", number=8)),
        ("Fixed by #8", 8, None),
        ("See other/lib#12 for details", 4, IssueReference(repo="other/lib", number=12)),
        ("See other/lib#12 for details", 14, IssueReference(repo="other/lib", number=12)),
        ("See other/lib#12 for details", 17, None),
        ("Dup of https://github.com/other/lib/issues/3", 20, IssueReference(repo="other/lib", number=3)),
        ("Via https://ghe.example.com/octo/app/pull/44.", 30, IssueReference(repo="octo/app", number=44)),
        ("#1 and #2", 7, IssueReference(repo="octo/repo", number=2)),
        ("no references here", 3, None),
    ],
)
def test_extract_issue_at_cursor(line: str, column: int, expected: IssueReference | None):
    assert extract_issue_at_cursor("octo/repo", line, column) == expected


def test_short_reference_needs_a_repository():
    assert extract_issue_at_cursor(None, "Fixed by #8", 10) is None
    assert extract_issue_at_cursor(None, "other/lib#8", 10) == IssueReference(repo="other/lib", number=8)
