from __future__ import annotations

from campusnav.models.position import Position
from campusnav.state.events import ChangeKind, ChangeNotifier, StateChange
from campusnav.state.policy import is_superseded, should_accept_fix
from campusnav.state.store import PositionStore

_T0 = 1_767_225_600_000


def _fix(ts: int, lat: float = 9.9641) -> Position:
    return Position(latitude=lat, longitude=76.4081, timestamp=ts)


def test_first_fix_always_accepted() -> None:
    assert should_accept_fix(current_timestamp=None, incoming_timestamp=_T0)


def test_older_fix_rejected_equal_fix_accepted() -> None:
    assert not should_accept_fix(current_timestamp=_T0, incoming_timestamp=_T0 - 1)
    assert should_accept_fix(current_timestamp=_T0, incoming_timestamp=_T0)


def test_superseded_only_by_newer_request() -> None:
    assert is_superseded(1, 2)
    assert not is_superseded(2, 2)
    assert not is_superseded(3, 2)


def test_store_keeps_latest_regardless_of_arrival_order() -> None:
    fixes = [_fix(_T0 + 3000, 9.9643), _fix(_T0 + 1000, 9.9641), _fix(_T0 + 2000, 9.9642)]

    forward = PositionStore()
    for fix in fixes:
        forward.apply(fix)
    backward = PositionStore()
    for fix in reversed(fixes):
        backward.apply(fix)

    assert forward.current == backward.current == fixes[0]


def test_store_publishes_only_accepted_fixes() -> None:
    store = PositionStore()
    changes: list[StateChange] = []
    store.subscribe(changes.append)

    assert store.apply(_fix(_T0 + 1000)) is True
    assert store.apply(_fix(_T0)) is False

    assert [c.kind for c in changes] == [ChangeKind.POSITION]
    assert changes[0].value.timestamp == _T0 + 1000


def test_failing_listener_does_not_block_others() -> None:
    notifier = ChangeNotifier()
    seen: list[ChangeKind] = []

    def _broken(change: StateChange) -> None:
        raise RuntimeError("listener bug")

    notifier.subscribe(_broken)
    notifier.subscribe(lambda change: seen.append(change.kind))
    notifier.publish(ChangeKind.ROSTER, 3)

    assert seen == [ChangeKind.ROSTER]


def test_unsubscribe_stops_delivery() -> None:
    notifier = ChangeNotifier()
    seen: list[StateChange] = []
    unsubscribe = notifier.subscribe(seen.append)

    unsubscribe()
    unsubscribe()
    notifier.publish(ChangeKind.ROUTE)

    assert seen == []
