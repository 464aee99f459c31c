import pytest

from arena.domain.waitlist.queue import WaitlistPriorityQueue
from arena.errors import ConflictError, NotFoundError, UnauthorizedError
from arena.models import WAITLIST_NOTIFIED, WAITLIST_WAITING, WaitlistEntry

DATE = "2024-01-10"


@pytest.fixture
def queue(db, clock):
    return WaitlistPriorityQueue(db, clock=clock)


def test_priority_comes_from_membership_tier(queue, make_user, give_membership, court):
    vip = make_user("VIP")
    give_membership(vip, "VIP")
    premium = make_user("Premium")
    give_membership(premium, "Premium")
    regular = make_user("Regular")
    give_membership(regular, "Regular")
    day_pass = make_user("Day Pass")
    give_membership(day_pass, "Day Pass")
    nobody = make_user("No membership")

    players = (vip, premium, regular, day_pass, nobody)
    priorities = [queue.join(p.id, court.id, DATE, 18).priority for p in players]

    assert priorities == [4, 3, 2, 1, 1]


def test_notify_next_order(queue, make_user, give_membership, court, clock):
    regular = make_user("Regular")
    give_membership(regular, "Regular")
    first_vip = make_user("First VIP")
    give_membership(first_vip, "VIP")
    second_vip = make_user("Second VIP")
    give_membership(second_vip, "VIP")
    walk_in = make_user("Walk-in")

    joined = []
    for player in (regular, first_vip, second_vip, walk_in):
        joined.append(queue.join(player.id, court.id, DATE, 18))
        clock.advance(minutes=1)
    assert [e.priority for e in joined] == [2, 4, 4, 1]

    order = [queue.notify_next(court.id, DATE, 18).user_id for _ in range(4)]

    assert order == [first_vip.id, second_vip.id, regular.id, walk_in.id]
    assert queue.notify_next(court.id, DATE, 18) is None


def test_notify_next_stamps_entry(queue, user, court, clock):
    entry = queue.join(user.id, court.id, DATE, 18)
    clock.advance(hours=2)

    notified = queue.notify_next(court.id, DATE, 18)

    assert notified.id == entry.id
    assert notified.status == WAITLIST_NOTIFIED
    assert notified.notified_at == clock.now()


def test_notify_next_only_considers_exact_slot(queue, user, court):
    queue.join(user.id, court.id, DATE, 19)

    assert queue.notify_next(court.id, DATE, 18) is None
    assert queue.notify_next(court.id, "2024-01-11", 19) is None


def test_membership_upgrade_does_not_reprioritize(db, queue, user, give_membership, court):
    entry = queue.join(user.id, court.id, DATE, 18)
    give_membership(user, "VIP")

    db.refresh(entry)
    assert entry.priority == 1


def test_ordered_waiting_matches_notification_order(queue, make_user, give_membership, court, clock):
    late_vip = make_user("VIP")
    early = make_user("Early")
    queue.join(early.id, court.id, DATE, 18)
    clock.advance(minutes=5)
    give_membership(late_vip, "VIP")
    queue.join(late_vip.id, court.id, DATE, 18)

    assert [e.user_id for e in queue.ordered_waiting(court.id, DATE, 18)] == [late_vip.id, early.id]


def test_duplicate_join_is_refused(queue, user, court):
    queue.join(user.id, court.id, DATE, 18)

    with pytest.raises(ConflictError):
        queue.join(user.id, court.id, DATE, 18)


def test_join_missing_court(queue, user):
    with pytest.raises(NotFoundError):
        queue.join(user.id, 999, DATE, 18)


def test_leave(db, queue, user, other_user, court):
    entry = queue.join(user.id, court.id, DATE, 18)

    with pytest.raises(UnauthorizedError):
        queue.leave(other_user.id, entry.id)

    queue.leave(user.id, entry.id)
    assert db.query(WaitlistEntry).count() == 0

    with pytest.raises(NotFoundError):
        queue.leave(user.id, entry.id)


def test_list_entries_filters(queue, user, other_user, court):
    queue.join(user.id, court.id, DATE, 18)
    queue.join(other_user.id, court.id, DATE, 18)
    queue.notify_next(court.id, DATE, 18)

    assert len(queue.list_entries()) == 2
    assert [e.user_id for e in queue.list_entries(user_id=other_user.id)] == [other_user.id]
    assert [e.user_id for e in queue.list_entries(status=WAITLIST_WAITING)] == [other_user.id]
