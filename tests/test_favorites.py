import pytest

from conftest import broken_dispatch

from app.core.errors import AlreadyExists, SelfReferenceError
from app.modules.favorites import service
from app.modules.favorites.models import Favorite
from app.modules.favorites.service import add_favorite, list_favorites, remove_favorite
from app.modules.notifications.models import Notification
from app.schemas.enums import NotifiableKind, NotificationType


def test_add_favorite_notifies_target(db, make_profile):
    make_profile("alice")
    fav = add_favorite(db, "alice", "bob")

    notes = db.query(Notification).filter(Notification.recipient_id == "bob").all()
    assert len(notes) == 1
    assert notes[0].type == NotificationType.favorited
    assert notes[0].notifiable_kind == NotifiableKind.favorite
    assert notes[0].notifiable_id == fav.id
    assert notes[0].body == "Alice Test added you to their favorites"


def test_add_favorite_twice_raises_already_exists_with_row(db):
    first = add_favorite(db, "alice", "bob")

    with pytest.raises(AlreadyExists) as exc:
        add_favorite(db, "alice", "bob")

    assert exc.value.existing.id == first.id
    assert exc.value.kind == "already_exists"
    assert db.query(Favorite).count() == 1
    assert db.query(Notification).count() == 1


def test_favorite_self_is_rejected(db):
    with pytest.raises(SelfReferenceError):
        add_favorite(db, "alice", "alice")


def test_duplicate_insert_race_reports_already_exists(db, monkeypatch):
    first = add_favorite(db, "alice", "bob")
    monkeypatch.setattr(service, "_find_favorite", _miss_once(service._find_favorite))

    with pytest.raises(AlreadyExists) as exc:
        add_favorite(db, "alice", "bob")

    assert exc.value.existing.id == first.id
    assert db.query(Notification).count() == 1


def test_remove_favorite_reports_found(db):
    add_favorite(db, "alice", "bob")

    assert remove_favorite(db, "alice", "bob") is True
    assert remove_favorite(db, "alice", "bob") is False
    assert db.query(Favorite).count() == 0


def test_favorites_are_per_owner(db):
    add_favorite(db, "alice", "bob")
    add_favorite(db, "alice", "carol")
    add_favorite(db, "bob", "alice")

    assert {f.favorite_user_id for f in list_favorites(db, "alice")} == {"bob", "carol"}
    assert remove_favorite(db, "carol", "alice") is False


def _miss_once(real):
    state = {"missed": False}

    def wrapper(*args, **kwargs):
        if not state["missed"]:
            state["missed"] = True
            return None
        return real(*args, **kwargs)

    return wrapper


def test_add_rolls_back_when_notification_fails(db, other_db, monkeypatch):
    monkeypatch.setattr(service, "create_for", broken_dispatch)

    with pytest.raises(RuntimeError):
        add_favorite(db, "alice", "bob")

    assert other_db.query(Favorite).count() == 0
    assert other_db.query(Notification).count() == 0
    # nothing half-written blocks a retry
    monkeypatch.undo()
    assert add_favorite(db, "alice", "bob").favorite_user_id == "bob"
