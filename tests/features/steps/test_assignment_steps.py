"""Behavioural tests for maintainer assignment and notification."""

from __future__ import annotations

import asyncio
import random
import typing as typ

import pytest
from pytest_bdd import given, parsers, scenario, then, when

from gaffer.assignment import AssignmentEngine
from gaffer.gitlab import AccessLevel
from gaffer.notify import ChannelTable, ChatMessage, Notifier
from gaffer.webhook import DispatchOutcome, EventRouter
from tests.helpers.events import make_event
from tests.helpers.fake_gitlab import FakeGitLabClient, member

_FEATURE = "../merge_request_assignment.feature"


def run_async[T](coro: typ.Coroutine[typ.Any, typ.Any, T]) -> T:
    """Run async coroutines in sync BDD step functions."""
    return asyncio.run(coro)


class _RecordingSink:
    """Sink that accepts every message and keeps it for assertions."""

    def __init__(self) -> None:
        self.messages: list[ChatMessage] = []

    def deliver(self, message: ChatMessage) -> bool:
        self.messages.append(message)
        return True

    async def start(self) -> None:
        """Do nothing."""

    async def stop(self) -> None:
        """Do nothing."""


class AssignmentContext(typ.TypedDict):
    """Shared state used by assignment BDD steps."""

    client: FakeGitLabClient
    channels: dict[int, tuple[str, ...]]
    sink: _RecordingSink
    outcome: DispatchOutcome | None


@scenario(_FEATURE, "An unassigned merge request is given a maintainer")
def test_unassigned_merge_request_gets_maintainer() -> None:
    """Behavioural test: unassigned MRs are assigned to a maintainer."""


@scenario(_FEATURE, "A maintainer already assigned is kept")
def test_valid_maintainer_is_kept() -> None:
    """Behavioural test: a valid maintainer assignee is left alone."""


@scenario(_FEATURE, "A non-maintainer assignee is replaced")
def test_non_maintainer_is_replaced() -> None:
    """Behavioural test: non-maintainer assignees are corrected."""


@scenario(_FEATURE, "A project without maintainers cannot be assigned")
def test_project_without_maintainers() -> None:
    """Behavioural test: empty maintainer sets abort without side effects."""


@scenario(_FEATURE, "An approval is acknowledged without side effects")
def test_approval_is_a_no_op() -> None:
    """Behavioural test: non-assignment actions do nothing."""


@pytest.fixture
def assignment_context() -> AssignmentContext:
    """Provide an empty GitLab fake and chat sink for each scenario."""
    return {
        "client": FakeGitLabClient(),
        "channels": {},
        "sink": _RecordingSink(),
        "outcome": None,
    }


@given(
    parsers.parse(
        'project {project_id:d} has member "{name}" with id {user_id:d} '
        'at level "{level}"'
    )
)
def project_has_member(
    assignment_context: AssignmentContext,
    project_id: int,
    name: str,
    user_id: int,
    level: str,
) -> None:
    """Add a direct member to the fake project."""
    members = assignment_context["client"].members.setdefault(project_id, [])
    members.append(member(user_id, name, AccessLevel[level]))


@given(parsers.parse('project {project_id:d} announces on channel "{channel}"'))
def project_announces_on_channel(
    assignment_context: AssignmentContext, project_id: int, channel: str
) -> None:
    """Subscribe a chat channel to the project."""
    existing = assignment_context["channels"].get(project_id, ())
    assignment_context["channels"][project_id] = (*existing, channel)


@when(
    parsers.parse(
        "merge request {iid:d} on project {project_id:d} arrives with action "
        '"{action}" and assignee {assignee_id:d}'
    )
)
def merge_request_arrives(  # noqa: PLR0913 - one argument per parsed field
    assignment_context: AssignmentContext,
    iid: int,
    project_id: int,
    action: str,
    assignee_id: int,
) -> None:
    """Route one merge request event through the real router."""
    client = assignment_context["client"]
    router = EventRouter(
        AssignmentEngine(client, rng=random.Random(42)),
        Notifier(client, assignment_context["sink"]),
        ChannelTable(routes=assignment_context["channels"]),
    )
    event = make_event(
        project_id=project_id, iid=iid, action=action, assignee_id=assignee_id
    )
    assignment_context["outcome"] = run_async(router.dispatch(event))


def _new_assignee_name(context: AssignmentContext) -> str:
    (update,) = context["client"].update_calls
    names = {
        entry.user_id: entry.display_name
        for members in context["client"].members.values()
        for entry in members
    }
    return names[update.assignee_id]


@then(parsers.parse('the dispatch outcome is "{outcome}"'))
def dispatch_outcome_is(assignment_context: AssignmentContext, outcome: str) -> None:
    """Check the router's reported outcome."""
    assert assignment_context["outcome"] == DispatchOutcome(outcome)


@then("exactly one assignee update is issued")
def one_update_issued(assignment_context: AssignmentContext) -> None:
    """Check that GitLab was updated once."""
    assert len(assignment_context["client"].update_calls) == 1


@then("no assignee update is issued")
def no_update_issued(assignment_context: AssignmentContext) -> None:
    """Check that GitLab was not mutated."""
    assert assignment_context["client"].update_calls == []


@then(parsers.parse('the new assignee is one of "{names}"'))
def new_assignee_is_one_of(assignment_context: AssignmentContext, names: str) -> None:
    """Check that the assignee is drawn from the maintainer set."""
    allowed = {name.strip() for name in names.split(",")}
    assert _new_assignee_name(assignment_context) in allowed


@then(parsers.parse('channel "{channel}" is told about the new assignee'))
def channel_told_about_new_assignee(
    assignment_context: AssignmentContext, channel: str
) -> None:
    """Check that the announcement names the assignee that was set."""
    name = _new_assignee_name(assignment_context)
    (message,) = assignment_context["sink"].messages
    assert message.channel_id == channel
    assert f"has been assigned to {name}." in message.content


@then(
    parsers.parse(
        'channel "{channel}" is told the merge request is assigned to "{name}"'
    )
)
def channel_told_assignee(
    assignment_context: AssignmentContext, channel: str, name: str
) -> None:
    """Check that the announcement names the expected maintainer."""
    (message,) = assignment_context["sink"].messages
    assert message.channel_id == channel
    assert f"has been assigned to {name}." in message.content


@then("no notification is sent")
def no_notification_sent(assignment_context: AssignmentContext) -> None:
    """Check that nothing reached the chat sink."""
    assert assignment_context["sink"].messages == []
