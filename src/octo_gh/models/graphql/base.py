from abc import ABC, abstractmethod
from textwrap import dedent
from typing import Any

from pydantic import BaseModel


class BaseGqlQuery(BaseModel, ABC):  # pyright: ignore[reportUnsafeMultipleInheritance]
    @staticmethod
    @abstractmethod
    def graphql_fragments() -> set[str]: ...

    @staticmethod
    @abstractmethod
    def graphql_query() -> str: ...


def build_document(fragments: set[str], operation: str) -> str:
    """Join the fragments (in a stable order) and the operation into a single GraphQL document."""

    return "\n".join([*sorted(fragments), dedent(text=operation)])


def extract_nodes(value: Any) -> list[Any]:  # pyright: ignore[reportAny]
    if isinstance(value, dict):
        nodes: Any | None = value.get("nodes")  # pyright: ignore[reportUnknownVariableType, reportUnknownMemberType]
        if isinstance(nodes, list):
            # nodes for types excluded by an inline fragment come back as empty objects
            return [node for node in nodes if node != {}]  # pyright: ignore[reportUnknownVariableType]

    msg = f"Expected a list of nodes, got {value}"
    raise ValueError(msg)
