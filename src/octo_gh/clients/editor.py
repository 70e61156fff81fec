import shlex
from logging import Logger, getLogger
from pathlib import Path

from octo_gh.clients.runner import CommandRunner
from octo_gh.utilities.config import get_editor


class Editor:
    """Opens files in the user's terminal editor."""

    runner: CommandRunner
    command: str
    logger: Logger

    def __init__(self, runner: CommandRunner | None = None, command: str | None = None, logger: Logger | None = None):
        self.logger = logger or getLogger(__name__)
        self.runner = runner or CommandRunner(logger=self.logger)
        self.command = command or get_editor()

    def build_command(self, path: Path, line: int) -> list[str]:
        # `+N` is understood by vi, vim, nvim, nano and emacs
        return [*shlex.split(self.command), f"+{line}", str(path)]

    async def open(self, path: Path, line: int) -> int:
        returncode = await self.runner.run_interactive(self.build_command(path=path, line=line))

        if returncode != 0:
            self.logger.warning(f"Editor exited with status {returncode} while opening {path}")

        return returncode
