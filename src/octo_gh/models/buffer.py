from enum import StrEnum
from pathlib import Path
from typing import Self

from pydantic import BaseModel, Field

METADATA_SUFFIX = ".octo.json"


class BufferKind(StrEnum):
    ISSUE = "issue"
    PULL_REQUEST = "pull_request"
    REPO = "repo"
    DISCUSSION = "discussion"
    REVIEW_THREAD = "review_thread"


class Cursor(BaseModel, frozen=True):
    """A cursor position. `line` is 1-indexed and `column` is 0-indexed."""

    line: int = Field(ge=1)
    column: int = Field(default=0, ge=0)


class ThreadAnchor(BaseModel):
    """Where a review thread was rendered in a buffer and which file line it comments on."""

    path: str
    line: int
    start_row: int = Field(description="The first 0-indexed row of the rendered thread.")
    end_row: int = Field(description="The last 0-indexed row of the rendered thread.")

    def contains(self, row: int) -> bool:
        return self.start_row <= row <= self.end_row


class OctoBuffer(BaseModel):
    """A rendered GitHub object plus the metadata needed to navigate it."""

    kind: BufferKind
    repo: str
    number: int | None = None
    url: str | None = None
    lines: list[str] = Field(default_factory=list, exclude=True)
    comment_rows: list[int] = Field(default_factory=list, description="0-indexed rows of the title, body and comment headers.")
    threads: list[ThreadAnchor] = Field(default_factory=list)

    def is_issue(self) -> bool:
        return self.kind == BufferKind.ISSUE

    def is_pull_request(self) -> bool:
        return self.kind == BufferKind.PULL_REQUEST

    def is_repo(self) -> bool:
        return self.kind == BufferKind.REPO

    def is_discussion(self) -> bool:
        return self.kind == BufferKind.DISCUSSION

    def is_review_thread(self) -> bool:
        return self.kind == BufferKind.REVIEW_THREAD

    @property
    def text(self) -> str:
        return "\n".join(self.lines) + "\n"

    def sorted_comment_rows(self) -> list[int]:
        return sorted(set(self.comment_rows))

    def line_at(self, line: int) -> str:
        """The text of a 1-indexed line, or an empty string past the end of the buffer."""
        if 1 <= line <= len(self.lines):
            return self.lines[line - 1]
        return ""

    def thread_at_cursor(self, line: int) -> ThreadAnchor | None:
        row = line - 1
        for thread in self.threads:
            if thread.contains(row):
                return thread
        return None

    @staticmethod
    def metadata_path(path: Path) -> Path:
        return path.with_name(path.name + METADATA_SUFFIX)

    def save(self, path: Path) -> None:
        """Write the rendered text to `path` and the navigation metadata next to it."""
        _ = path.write_text(self.text, encoding="utf-8")
        _ = self.metadata_path(path).write_text(self.model_dump_json(indent=2), encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> Self:
        metadata = cls.metadata_path(path).read_text(encoding="utf-8")
        buffer = cls.model_validate_json(metadata)
        buffer.lines = path.read_text(encoding="utf-8").splitlines()
        return buffer
