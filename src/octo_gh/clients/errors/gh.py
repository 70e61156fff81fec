ExtraInfoType = dict[str, str | None]


class ClientError(Exception):
    """A request error from the octo client."""

    def __init__(self, message: str, extra_info: ExtraInfoType | None = None):
        msg = message
        if extra_info:
            msg += " (" + ", ".join([f"{key}: {value}" for key, value in extra_info.items() if value is not None]) + ")"
        super().__init__(msg)


class RequestError(ClientError):
    """A `gh` invocation that failed."""

    def __init__(self, action: str, message: str | None = None, extra_info: ExtraInfoType | None = None):
        if not extra_info:
            extra_info = {}
        super().__init__(message="A request error occured.", extra_info={"action": action, "message": message, **extra_info})


class ResourceNotFoundError(RequestError):
    """A not found error returned by the GitHub GraphQL API."""

    def __init__(self, action: str, resource: str | None = None, extra_info: ExtraInfoType | None = None):
        if not extra_info:
            extra_info = {}
        super().__init__(
            action=action,
            message="The resource could not be found.",
            extra_info={"resource": resource, **extra_info},
        )


class CommandNotFoundError(ClientError):
    """The executable for a command is not installed or not on the PATH."""

    def __init__(self, command: str):
        super().__init__(message="The command could not be found.", extra_info={"command": command})


class RemoteNotFoundError(ClientError):
    """The local repository has no usable GitHub remote."""


class ResourceTypeMismatchError(RequestError):
    """The number resolved to a different kind of resource than the one requested."""

    def __init__(self, action: str, resource: str, expected_type: str):
        super().__init__(action, f"{resource}: Expected {expected_type}")
