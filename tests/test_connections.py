import pytest

from conftest import broken_dispatch

from app.core.errors import NotAuthorized, NotFound, SelfReferenceError
from app.modules.connections import service
from app.modules.connections.models import Interest
from app.modules.connections.service import (
    cancel_interest,
    create_interest,
    is_connected,
    list_interests,
    transition_interest,
)
from app.modules.notifications.models import Notification
from app.schemas.enums import InterestAction, InterestListType, InterestStatus, NotificationType


def _notifications(db, recipient_id, type_=None):
    q = db.query(Notification).filter(Notification.recipient_id == recipient_id)
    if type_ is not None:
        q = q.filter(Notification.type == type_)
    return q.all()


def test_create_interest_is_pending_and_notifies_receiver(db, make_profile):
    make_profile("alice")
    result = create_interest(db, "alice", "bob")

    assert not result.already_exists
    assert result.interest.status == InterestStatus.pending

    received = _notifications(db, "bob", NotificationType.interest_received)
    assert len(received) == 1
    assert received[0].actor_id == "alice"
    assert received[0].body == "Alice Test sent you a connection request"
    assert received[0].metadata_["interest_id"] == result.interest.id
    assert _notifications(db, "alice") == []


def test_create_interest_twice_keeps_one_row(db):
    first = create_interest(db, "alice", "bob")
    second = create_interest(db, "alice", "bob")

    assert second.already_exists
    assert second.interest.id == first.interest.id
    assert db.query(Interest).count() == 1
    assert len(_notifications(db, "bob")) == 1


def test_reverse_pair_is_a_separate_interest(db):
    forward = create_interest(db, "alice", "bob")
    reverse = create_interest(db, "bob", "alice")

    assert not reverse.already_exists
    assert reverse.interest.id != forward.interest.id
    assert db.query(Interest).count() == 2


@pytest.mark.parametrize("user_id", ["alice", "x", "42"])
def test_interest_to_self_is_rejected(db, user_id):
    with pytest.raises(SelfReferenceError):
        create_interest(db, user_id, user_id)
    assert db.query(Interest).count() == 0


def test_duplicate_insert_race_converges_on_existing(db, monkeypatch):
    original = create_interest(db, "alice", "bob").interest

    real_find = service._find_interest
    calls = {"n": 0}

    def stale_find(session, sender_id, receiver_id):
        # first lookup misses, as if the other request had not committed yet
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return real_find(session, sender_id, receiver_id)

    monkeypatch.setattr(service, "_find_interest", stale_find)

    result = create_interest(db, "alice", "bob")

    assert result.already_exists
    assert result.interest.id == original.id
    assert db.query(Interest).count() == 1
    assert len(_notifications(db, "bob")) == 1


def test_accept_notifies_sender_once(db):
    interest = create_interest(db, "alice", "bob").interest

    updated = transition_interest(db, interest.id, "bob", InterestAction.accept)

    assert updated.status == InterestStatus.accepted
    accepted = _notifications(db, "alice", NotificationType.interest_accepted)
    assert len(accepted) == 1
    assert accepted[0].actor_id == "bob"
    assert is_connected(db, "alice", "bob")
    assert is_connected(db, "bob", "alice")


def test_accept_twice_does_not_notify_again(db):
    interest = create_interest(db, "alice", "bob").interest
    transition_interest(db, interest.id, "bob", InterestAction.accept)
    transition_interest(db, interest.id, "bob", InterestAction.accept)

    assert len(_notifications(db, "alice", NotificationType.interest_accepted)) == 1


def test_reject_produces_no_notification(db):
    interest = create_interest(db, "alice", "bob").interest

    updated = transition_interest(db, interest.id, "bob", InterestAction.reject)

    assert updated.status == InterestStatus.rejected
    assert _notifications(db, "alice") == []
    assert not is_connected(db, "alice", "bob")


def test_only_receiver_can_transition(db):
    interest = create_interest(db, "alice", "bob").interest

    with pytest.raises(NotAuthorized):
        transition_interest(db, interest.id, "alice", InterestAction.accept)
    with pytest.raises(NotAuthorized):
        transition_interest(db, interest.id, "mallory", InterestAction.reject)

    db.refresh(interest)
    assert interest.status == InterestStatus.pending


def test_transition_missing_interest(db):
    with pytest.raises(NotFound):
        transition_interest(db, 999, "bob", InterestAction.accept)


def test_cancel_then_recreate_gets_new_id(db):
    old = create_interest(db, "alice", "bob").interest
    old_id = old.id

    cancel_interest(db, old_id, "alice")

    assert db.get(Interest, old_id) is None
    fresh = create_interest(db, "alice", "bob")
    assert not fresh.already_exists
    assert fresh.interest.id != old_id


def test_cancel_accepted_interest_is_allowed(db):
    interest = create_interest(db, "alice", "bob").interest
    transition_interest(db, interest.id, "bob", InterestAction.accept)

    cancel_interest(db, interest.id, "alice")

    assert db.query(Interest).count() == 0
    assert not is_connected(db, "alice", "bob")


def test_only_sender_can_cancel(db):
    interest = create_interest(db, "alice", "bob").interest

    with pytest.raises(NotAuthorized):
        cancel_interest(db, interest.id, "bob")
    with pytest.raises(NotFound):
        cancel_interest(db, interest.id + 100, "alice")


def test_list_interests_by_direction(db):
    create_interest(db, "alice", "bob")
    create_interest(db, "carol", "alice")
    create_interest(db, "bob", "carol")

    sent = list_interests(db, "alice", InterestListType.sent)
    received = list_interests(db, "alice", InterestListType.received)
    everything = list_interests(db, "alice", InterestListType.all)

    assert [(i.sender_id, i.receiver_id) for i in sent] == [("alice", "bob")]
    assert [(i.sender_id, i.receiver_id) for i in received] == [("carol", "alice")]
    assert len(everything) == 2


def test_create_rolls_back_when_notification_fails(db, other_db, monkeypatch):
    monkeypatch.setattr(service, "create_for", broken_dispatch)

    with pytest.raises(RuntimeError):
        create_interest(db, "alice", "bob")

    assert other_db.query(Interest).count() == 0
    assert other_db.query(Notification).count() == 0


def test_accept_rolls_back_when_notification_fails(db, other_db, monkeypatch):
    interest_id = create_interest(db, "alice", "bob").interest.id
    monkeypatch.setattr(service, "create_for", broken_dispatch)

    with pytest.raises(RuntimeError):
        transition_interest(db, interest_id, "bob", InterestAction.accept)

    assert other_db.get(Interest, interest_id).status == InterestStatus.pending
    assert _notifications(other_db, "alice") == []
    assert not is_connected(other_db, "alice", "bob")
