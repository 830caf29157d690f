from datetime import UTC, datetime, timedelta

from voice2action.confirmations.models import ActionKind, EmailPayload, PendingAction
from voice2action.confirmations.store import ConfirmationStore

T0 = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


def _action(action_id: str = "email_1_42_ab", created_at: datetime = T0) -> PendingAction:
    return PendingAction(
        id=action_id,
        kind=ActionKind.EMAIL,
        payload=EmailPayload(to="a@b.io", subject="Hi", body="hello"),
        original_text="send hello to a@b.io",
        owner_id="42",
        created_at=created_at,
    )


def test_create_get_delete_round_trip() -> None:
    store = ConfirmationStore()
    action = _action()

    store.create(action.id, action)
    assert store.get(action.id) is action
    assert action.id in store
    assert len(store) == 1

    store.delete(action.id)
    assert store.get(action.id) is None
    assert len(store) == 0


def test_pop_claims_an_action_once() -> None:
    store = ConfirmationStore()
    action = _action()
    store.create(action.id, action)

    assert store.pop(action.id) is action
    assert store.pop(action.id) is None
    assert action.id not in store


def test_delete_of_absent_id_is_a_no_op() -> None:
    store = ConfirmationStore()

    store.delete("missing")
    store.delete("missing")

    assert len(store) == 0


def test_clear_removes_everything() -> None:
    store = ConfirmationStore()
    for i in range(3):
        store.create(f"id{i}", _action(f"id{i}"))

    store.clear()

    assert len(store) == 0


def test_without_ttl_nothing_expires() -> None:
    store = ConfirmationStore(ttl_seconds=0, clock=lambda: T0 + timedelta(days=365))
    store.create("old", _action("old"))

    assert not store.is_expired(_action("old"))
    assert store.purge_expired() == 0
    assert "old" in store


def test_purge_expired_keeps_fresh_actions() -> None:
    store = ConfirmationStore(ttl_seconds=60, clock=lambda: T0 + timedelta(seconds=90))
    store.create("old", _action("old", created_at=T0))
    store.create("fresh", _action("fresh", created_at=T0 + timedelta(seconds=60)))

    assert store.purge_expired() == 1
    assert "old" not in store
    assert "fresh" in store
