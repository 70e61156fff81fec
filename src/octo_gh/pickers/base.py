from collections.abc import Mapping, Sequence
from logging import Logger, getLogger

import click
from pydantic import BaseModel

from octo_gh.clients.runner import CommandResult, CommandRunner
from octo_gh.errors import PickerError
from octo_gh.utilities.config import get_fzf_binary

FzfOptions = Mapping[str, str | None]

NO_MATCH_EXIT_CODE = 1
INTERRUPTED_EXIT_CODE = 130

DROPDOWN_OPTIONS: FzfOptions = {
    "--layout": "reverse",
    "--height": "40%",
    "--border": "rounded",
    "--info": "inline",
}

MULTI_DROPDOWN_OPTIONS: FzfOptions = {
    **DROPDOWN_OPTIONS,
    "--multi": None,
}

# Rows are "<key> <display>", the key is hidden from the finder but returned with the selection.
HIDDEN_KEY_OPTIONS: FzfOptions = {
    "--delimiter": " ",
    "--with-nth": "2..",
}


def color_string_with_hex(text: str, hex_color: str) -> str:
    """Wrap `text` in a 24-bit ANSI foreground color given as `#rrggbb`."""

    color = hex_color.removeprefix("#")
    if len(color) != 6:  # noqa: PLR2004
        msg = f"Color must be in format '#rrggbb', got: {hex_color}"
        raise ValueError(msg)

    red, green, blue = (int(color[index : index + 2], 16) for index in (0, 2, 4))

    return click.style(text, fg=(red, green, blue))


class PickerEntry(BaseModel):
    key: str
    display: str

    def to_row(self) -> str:
        return f"{self.key} {self.display}"


def key_from_row(row: str) -> str:
    key, _, _ = row.partition(" ")
    return key


class FzfPicker:
    runner: CommandRunner
    fzf_binary: str
    logger: Logger

    def __init__(self, runner: CommandRunner | None = None, fzf_binary: str | None = None, logger: Logger | None = None):
        self.logger = logger or getLogger(__name__)
        self.runner = runner or CommandRunner(logger=self.logger)
        self.fzf_binary = fzf_binary or get_fzf_binary()

    def build_command(self, options: FzfOptions, prompt: str | None = None) -> list[str]:
        command: list[str] = [self.fzf_binary, "--ansi"]

        for flag, value in options.items():
            command.append(flag)
            if value is not None:
                command.append(value)

        if prompt is not None:
            command.extend(["--prompt", prompt])

        return command

    async def pick(self, rows: Sequence[str], options: FzfOptions | None = None, prompt: str | None = None) -> list[str]:
        """Let the user choose among `rows` and return the chosen rows, unmodified.

        Raises:
            PickerError: If the finder exits with anything other than a selection, no match, or an abort.
        """

        command = self.build_command(options=options if options is not None else DROPDOWN_OPTIONS, prompt=prompt)

        result: CommandResult = await self.runner.run_picker(command, input_text="\n".join(rows))

        if result.returncode in {NO_MATCH_EXIT_CODE, INTERRUPTED_EXIT_CODE}:
            self.logger.debug(f"Picker closed without a selection (status {result.returncode})")
            return []

        if not result.ok:
            raise PickerError(returncode=result.returncode, command=" ".join(command))

        return [line for line in result.stdout.splitlines() if line]

    async def pick_entries(
        self, entries: Sequence[PickerEntry], options: FzfOptions | None = None, prompt: str | None = None
    ) -> list[str]:
        """Pick among entries and return the keys of the chosen ones."""

        base_options = options if options is not None else DROPDOWN_OPTIONS
        rows = await self.pick([entry.to_row() for entry in entries], options={**base_options, **HIDDEN_KEY_OPTIONS}, prompt=prompt)

        return [key_from_row(row) for row in rows]
