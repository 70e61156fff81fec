import asyncio
from collections.abc import Sequence
from logging import Logger, getLogger

from pydantic import BaseModel

from octo_gh.clients.errors.gh import CommandNotFoundError


class CommandResult(BaseModel):
    """The outcome of a finished subprocess."""

    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    logger: Logger

    def __init__(self, logger: Logger | None = None):
        self.logger = logger or getLogger(__name__)

    async def run(self, args: Sequence[str], input_text: str | None = None) -> CommandResult:
        """Run a command, capturing its output.

        Args:
            args: The program and its arguments.
            input_text: Text to write to the command's standard input.

        Raises:
            CommandNotFoundError: If the program is not installed.
        """

        self.logger.debug(f"Running {' '.join(args)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.PIPE if input_text is not None else asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise CommandNotFoundError(command=args[0]) from e

        stdout, stderr = await process.communicate(input=input_text.encode() if input_text is not None else None)

        return CommandResult(
            args=list(args),
            returncode=process.returncode if process.returncode is not None else -1,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
        )

    async def run_picker(self, args: Sequence[str], input_text: str) -> CommandResult:
        """Run an interactive filter that reads rows on stdin and draws its UI on the terminal."""

        self.logger.debug(f"Running picker {' '.join(args)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise CommandNotFoundError(command=args[0]) from e

        stdout, _ = await process.communicate(input=input_text.encode())

        return CommandResult(
            args=list(args),
            returncode=process.returncode if process.returncode is not None else -1,
            stdout=stdout.decode(errors="replace"),
        )

    async def run_interactive(self, args: Sequence[str]) -> int:
        """Run a command attached to the terminal and return its exit code."""

        self.logger.debug(f"Running interactive {' '.join(args)}")

        try:
            process = await asyncio.create_subprocess_exec(*args)
        except FileNotFoundError as e:
            raise CommandNotFoundError(command=args[0]) from e

        return await process.wait()
