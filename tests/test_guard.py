"""Access guard predicates.

Regression coverage for the view check: a requester must be authorized
when they are EITHER party, not only when they are both.
"""

from dataclasses import dataclass

import pytest

from messagely.auth.guard import (
    can_access_mailbox,
    can_mark_read,
    can_view,
    ensure_can_access_mailbox,
    ensure_can_mark_read,
    ensure_can_view,
)
from messagely.errors import UnauthorizedError


@dataclass
class Msg:
    from_username: str
    to_username: str
    body: str = "top secret"


MSG = Msg(from_username="alice", to_username="bob")


@pytest.mark.parametrize(
    "requester,expected",
    [
        ("alice", True),
        ("bob", True),
        ("carol", False),
        ("", False),
        ("ALICE", False),
    ],
)
def test_can_view_is_either_party(requester, expected):
    assert can_view(requester, MSG) is expected


def test_can_view_true_for_sender_and_recipient_of_same_message():
    # With an AND check both of these would be False.
    assert can_view(MSG.from_username, MSG)
    assert can_view(MSG.to_username, MSG)


@pytest.mark.parametrize(
    "requester,expected",
    [("bob", True), ("alice", False), ("carol", False)],
)
def test_only_recipient_can_mark_read(requester, expected):
    assert can_mark_read(requester, MSG) is expected


def test_mailbox_is_owner_only():
    assert can_access_mailbox("alice", "alice")
    assert not can_access_mailbox("bob", "alice")


def test_ensure_helpers_raise_without_leaking_content():
    with pytest.raises(UnauthorizedError) as exc_info:
        ensure_can_view("carol", MSG)
    assert MSG.body not in exc_info.value.message

    with pytest.raises(UnauthorizedError):
        ensure_can_mark_read("alice", MSG)

    with pytest.raises(UnauthorizedError):
        ensure_can_access_mailbox("bob", "alice")


def test_ensure_helpers_pass_for_authorized():
    ensure_can_view("alice", MSG)
    ensure_can_view("bob", MSG)
    ensure_can_mark_read("bob", MSG)
    ensure_can_access_mailbox("alice", "alice")
