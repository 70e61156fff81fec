import asyncio
import re
from logging import Logger, getLogger
from pathlib import Path

from git.exc import InvalidGitRepositoryError, NoSuchPathError
from git.repo import Repo
from pydantic import BaseModel

from octo_gh.utilities.config import get_default_remotes

SCP_REMOTE_PATTERN = re.compile(r"^(?:[\w.-]+@)?(?P<host>[\w.-]+):(?P<path>[^/].*)$")
URL_REMOTE_PATTERN = re.compile(r"^(?:https?|ssh|git)://(?:[^@/]+@)?(?P<host>[\w.-]+)(?::\d+)?/(?P<path>.+)$")


class Remote(BaseModel):
    """A git remote pointing at a GitHub repository."""

    name: str
    host: str
    repo: str


def parse_remote_url(url: str) -> tuple[str, str] | None:
    """Parse a git remote URL into its host and `owner/name`.

    Supports `https://host/owner/name(.git)`, `ssh://git@host/owner/name.git` and the
    scp-like `git@host:owner/name.git`.
    """

    url = url.strip()

    match = URL_REMOTE_PATTERN.match(url) or SCP_REMOTE_PATTERN.match(url)
    if match is None:
        return None

    path = match["path"].strip("/").removesuffix(".git")
    parts = path.split("/")
    if len(parts) != 2 or not all(parts):  # noqa: PLR2004
        return None

    return match["host"], "/".join(parts)


class GitClient:
    """Reads the remotes and the root of the local checkout."""

    cwd: Path | None
    remotes: list[str]
    logger: Logger

    def __init__(self, cwd: Path | None = None, remotes: list[str] | None = None, logger: Logger | None = None):
        self.logger = logger or getLogger(__name__)
        self.cwd = cwd
        self.remotes = remotes if remotes is not None else get_default_remotes()

    def _open_repository(self) -> Repo | None:
        path = self.cwd or Path.cwd()
        try:
            return Repo(path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError):
            self.logger.debug(f"{path} is not inside a git repository")
            return None

    def _read_remote_urls(self) -> dict[str, str]:
        repository = self._open_repository()
        if repository is None:
            return {}

        with repository, repository.config_reader() as config:
            return {remote.name: str(config.get_value(f'remote "{remote.name}"', "url", default="")) for remote in repository.remotes}

    def _read_toplevel(self) -> Path | None:
        repository = self._open_repository()
        if repository is None:
            return None

        with repository:
            return Path(repository.working_tree_dir) if repository.working_tree_dir else None

    async def list_remotes(self) -> list[str]:
        return list(await asyncio.to_thread(self._read_remote_urls))

    async def get_remote(self) -> Remote | None:
        """Find the GitHub remote, preferring the configured remote names in order."""

        urls = await asyncio.to_thread(self._read_remote_urls)
        if not urls:
            return None

        candidates = [remote for remote in self.remotes if remote in urls] or list(urls)[:1]

        for candidate in candidates:
            if parsed := parse_remote_url(urls[candidate]):
                host, repo = parsed
                return Remote(name=candidate, host=host, repo=repo)

            self.logger.debug(f"Remote {candidate} has an unrecognized url: {urls[candidate]}")

        return None

    async def get_remote_host(self) -> str | None:
        remote = await self.get_remote()
        return remote.host if remote else None

    async def get_remote_name(self) -> str | None:
        remote = await self.get_remote()
        return remote.repo if remote else None

    async def show_toplevel(self) -> Path | None:
        return await asyncio.to_thread(self._read_toplevel)
