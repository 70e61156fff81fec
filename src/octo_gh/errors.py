ExtraInfoType = dict[str, str | None]


class OctoError(Exception):
    """An error raised by the pickers or the navigation helpers."""

    def __init__(self, message: str, extra_info: ExtraInfoType | None = None):
        msg = message
        if extra_info:
            msg += " (" + ", ".join([f"{key}: {value}" for key, value in extra_info.items() if value is not None]) + ")"
        super().__init__(msg)


class PickerError(OctoError):
    """The fuzzy finder exited with an unexpected status."""

    def __init__(self, returncode: int, command: str):
        super().__init__(message="The picker failed.", extra_info={"command": command, "returncode": str(returncode)})


class NavigationError(OctoError):
    """A navigation action could not be completed."""


class FileNotFoundInRepositoryError(NavigationError):
    """The file referenced by a review thread exists neither in the working directory nor in the git root."""

    def __init__(self, path: str):
        super().__init__(message="Cannot find file in CWD or git path", extra_info={"path": path})
