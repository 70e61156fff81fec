import inspect
from collections.abc import Awaitable, Callable, Sequence
from logging import Logger, getLogger

from pydantic import BaseModel

from octo_gh.clients.errors.gh import RemoteNotFoundError
from octo_gh.clients.gh import GhClient
from octo_gh.clients.git import GitClient
from octo_gh.models.graphql.fragments import Label
from octo_gh.pickers.base import MULTI_DROPDOWN_OPTIONS, FzfPicker, PickerEntry, color_string_with_hex
from octo_gh.utilities.repository import split_repo

logger: Logger = getLogger(__name__)

LabelsCallback = Callable[[list[Label]], Awaitable[None] | None]


class AssignedLabelSelection(BaseModel):
    labelable_id: str
    labels: list[Label]


async def resolve_repo(repo: str | None, git_client: GitClient | None = None) -> str:
    """Use the given `owner/name`, or fall back to the repository of the git remote."""

    if repo:
        return repo

    git_client = git_client or GitClient()
    if remote_name := await git_client.get_remote_name():
        return remote_name

    msg = "No remote repository found"
    raise RemoteNotFoundError(message=msg)


def label_entries(labels: Sequence[Label]) -> list[PickerEntry]:
    return [PickerEntry(key=label.id, display=color_string_with_hex(label.name, label.hex_color)) for label in labels]


async def pick_labels(picker: FzfPicker, labels: Sequence[Label], prompt: str = "Labels> ") -> list[Label]:
    labels_by_id = {label.id: label for label in labels}

    selected_ids = await picker.pick_entries(label_entries(labels), options=MULTI_DROPDOWN_OPTIONS, prompt=prompt)

    return [labels_by_id[label_id] for label_id in selected_ids if label_id in labels_by_id]


async def _notify(cb: LabelsCallback | None, labels: list[Label]) -> None:
    if cb is None:
        return

    result = cb(labels)
    if inspect.isawaitable(result):
        await result


async def select_labels(
    client: GhClient,
    picker: FzfPicker,
    repo: str | None = None,
    cb: LabelsCallback | None = None,
    git_client: GitClient | None = None,
) -> list[Label]:
    """Pick labels from a repository and hand the selection to `cb`.

    The repository defaults to the one of the current git remote.
    """

    repo = await resolve_repo(repo=repo, git_client=git_client)
    owner, name = split_repo(repo)

    labels = await client.get_labels(owner=owner, repo=name)

    logger.debug(f"Loaded {len(labels)} labels from {repo}")

    selected = await pick_labels(picker, labels)

    await _notify(cb, selected)

    return selected


async def select_assigned_labels(
    client: GhClient,
    picker: FzfPicker,
    number: int,
    repo: str | None = None,
    cb: LabelsCallback | None = None,
    git_client: GitClient | None = None,
) -> AssignedLabelSelection:
    """Pick among the labels currently set on an issue or pull request."""

    repo = await resolve_repo(repo=repo, git_client=git_client)
    owner, name = split_repo(repo)

    labelable = await client.get_assigned_labels(owner=owner, repo=name, number=number)

    selected = await pick_labels(picker, labelable.labels, prompt="Remove labels> ")

    await _notify(cb, selected)

    return AssignedLabelSelection(labelable_id=labelable.id, labels=selected)


async def add_labels_to(client: GhClient, repo: str, number: int, labels: Sequence[Label]) -> None:
    owner, name = split_repo(repo)

    labelable = await client.get_issue_kind(owner=owner, repo=name, number=number, error_on_not_found=True)

    await client.add_labels(labelable_id=labelable.id, label_ids=[label.id for label in labels])
