from pathlib import Path

import pytest
from pydantic import ValidationError

from octo_gh.models.buffer import BufferKind, Cursor, OctoBuffer, ThreadAnchor


@pytest.fixture
def pull_request_buffer() -> OctoBuffer:
    return OctoBuffer(
        kind=BufferKind.PULL_REQUEST,
        repo="octo/repo",
        number=8,
        url="https://github.com/octo/repo/pull/8",
        lines=["# Fix", "", "body", "", "#### a.py:3", "", "### @dave commented", "nit", "", "#### b.py:9", "", "### @erin commented", "ok", ""],
        comment_rows=[11, 0, 6, 2, 6],
        threads=[
            ThreadAnchor(path="a.py", line=3, start_row=4, end_row=8),
            ThreadAnchor(path="b.py", line=9, start_row=9, end_row=13),
        ],
    )


def test_kind_predicates(pull_request_buffer: OctoBuffer):
    assert pull_request_buffer.is_pull_request()
    assert not pull_request_buffer.is_issue()
    assert not pull_request_buffer.is_repo()
    assert not pull_request_buffer.is_discussion()
    assert not pull_request_buffer.is_review_thread()


def test_sorted_comment_rows(pull_request_buffer: OctoBuffer):
    assert pull_request_buffer.sorted_comment_rows() == [0, 2, 6, 11]


@pytest.mark.parametrize(
    ("line", "path"),
    [
        (1, None),
        (4, None),
        (5, "a.py"),
        (9, "a.py"),
        (10, "b.py"),
        (14, "b.py"),
        (15, None),
    ],
)
def test_thread_at_cursor(pull_request_buffer: OctoBuffer, line: int, path: str | None):
    thread = pull_request_buffer.thread_at_cursor(line)

    assert (thread.path if thread else None) == path


def test_line_at(pull_request_buffer: OctoBuffer):
    assert pull_request_buffer.line_at(1) == "# Fix"
    assert pull_request_buffer.line_at(100) == ""


def test_cursor_bounds():
    assert Cursor(line=1) == Cursor(line=1, column=0)

    with pytest.raises(ValidationError):
        _ = Cursor(line=0)

    with pytest.raises(ValidationError):
        _ = Cursor(line=1, column=-1)


def test_save_and_load(pull_request_buffer: OctoBuffer, tmp_path: Path):
    path = tmp_path / "pr-8.md"

    pull_request_buffer.save(path)

    assert path.read_text(encoding="utf-8") == pull_request_buffer.text
    assert (tmp_path / "pr-8.md.octo.json").exists()

    loaded = OctoBuffer.load(path)

    assert loaded == pull_request_buffer


def test_load_without_metadata(tmp_path: Path):
    path = tmp_path / "notes.md"
    _ = path.write_text("hello\n", encoding="utf-8")

    with pytest.raises(FileNotFoundError):
        _ = OctoBuffer.load(path)
