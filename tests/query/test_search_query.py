from typing import Self

import pytest
from pydantic import BaseModel

from octo_gh.models.query.base import (
    AssigneeQualifier,
    AuthorQualifier,
    BaseQualifier,
    BaseQuery,
    IssueOrPullRequestQualifier,
    KeywordQualifier,
    LabelQualifier,
    RepoQualifier,
    StateQualifier,
)
from octo_gh.models.query.issue_or_pull_request import IssueSearchQuery, PullRequestSearchQuery, build_filter_qualifiers


@pytest.mark.parametrize(
    ("qualifier", "query"),
    [
        (AssigneeQualifier(assignee="test"), 'assignee:"test"'),
        (AuthorQualifier(author="test"), 'author:"test"'),
        (IssueOrPullRequestQualifier(issue_or_pull_request="issue"), "is:issue"),
        (IssueOrPullRequestQualifier(issue_or_pull_request="pull_request"), "is:pr"),
        (LabelQualifier(label="test"), 'label:"test"'),
        (RepoQualifier(owner="owner", repo="repo"), "repo:owner/repo"),
        (StateQualifier(state="open"), "state:open"),
        (StateQualifier(state="closed"), "state:closed"),
        (KeywordQualifier(keyword="test"), '"test"'),
        (KeywordQualifier(keyword='say "hi"'), '"say \\"hi\\""'),
        (KeywordQualifier(keyword="back\\slash"), '"back\\\\slash"'),
    ],
)
def test_qualifiers(qualifier: BaseQualifier, query: str):
    assert qualifier.to_query() == query


class Case(BaseModel):
    name: str
    query: BaseQuery
    expected: str


class Cases(BaseModel):
    cases: list[Case]

    def add_case(self, name: str, query: BaseQuery, expected: str) -> Self:
        self.cases.append(Case(name=name, query=query, expected=expected))
        return self

    def get_names(self) -> list[str]:
        return [case.name for case in self.cases]

    def get_parameterization(self) -> list[tuple[BaseQuery, str]]:
        return [(case.query, case.expected) for case in self.cases]


cases: Cases = Cases(cases=[])

cases.add_case(
    name="Empty",
    query=BaseQuery(qualifiers=[]),
    expected="",
)

cases.add_case(
    name="Single Keyword",
    query=BaseQuery(qualifiers=[KeywordQualifier(keyword="test")]),
    expected='"test"',
)

cases.add_case(
    name="Keyword with Label and Assignee",
    query=BaseQuery(
        qualifiers=[
            KeywordQualifier(keyword="testOne"),
            LabelQualifier(label="labelOne"),
            AssigneeQualifier(assignee="assigneeOne"),
        ],
    ),
    expected='"testOne" label:"labelOne" assignee:"assigneeOne"',
)

cases.add_case(
    name="Issues in a Repository",
    query=IssueSearchQuery.from_repo(owner="ownerOne", repo="repoOne"),
    expected="is:issue repo:ownerOne/repoOne",
)

cases.add_case(
    name="Pull Requests in a Repository",
    query=PullRequestSearchQuery.from_repo(owner="ownerOne", repo="repoOne"),
    expected="is:pr repo:ownerOne/repoOne",
)

cases.add_case(
    name="Open Issues with Filters",
    query=IssueSearchQuery.from_repo(
        owner="ownerOne",
        repo="repoOne",
        qualifiers=build_filter_qualifiers(state="open", labels=["bug", "ui"], author="alice", keywords=["crash"]),
    ),
    expected='is:issue repo:ownerOne/repoOne state:open label:"bug" label:"ui" author:"alice" "crash"',
)


@pytest.mark.parametrize(("query", "expected"), cases.get_parameterization(), ids=cases.get_names())
def test_base_query(query: BaseQuery, expected: str):
    assert query.to_query() == expected


def test_add_qualifier():
    query = IssueSearchQuery.from_repo(owner="ownerOne", repo="repoOne")

    _ = query.add_qualifier(None).add_qualifier(AssigneeQualifier(assignee="bob"))

    assert query.to_query() == 'is:issue repo:ownerOne/repoOne assignee:"bob"'


def test_build_filter_qualifiers_empty():
    assert build_filter_qualifiers() == []
