import pytest

from habithub import config, logic
from habithub.errors import InvalidInput, NotFound
from habithub.models import Weekday


def test_add_habit_normalizes_input(store, freeze_today):
    habit = logic.add_new_habit(store, "  Read  ", ["Fri", "Mon", "Fri"])

    assert habit.title == "Read"
    assert habit.scheduled_days == [Weekday.MON, Weekday.FRI]
    assert habit.is_active
    assert not habit.is_compulsory
    assert habit.color == config.DEFAULT_COLOR
    assert habit.created_at is not None


@pytest.mark.parametrize(
    "title, days",
    [
        ("", ["Mon"]),
        ("   ", ["Mon"]),
        (None, ["Mon"]),
        ("x" * 101, ["Mon"]),
        ("Read", []),
        ("Read", None),
        ("Read", ["Monday"]),
        ("Read", "Mon"),
    ],
)
def test_add_habit_rejects_bad_input(store, title, days):
    with pytest.raises(InvalidInput):
        logic.add_new_habit(store, title, days)
    assert store.count_habits(active_only=False) == 0


def test_list_habits_newest_first_and_active_only(store, freeze_today):
    a = logic.add_new_habit(store, "A", ["Mon"])
    b = logic.add_new_habit(store, "B", ["Tue"])
    c = logic.add_new_habit(store, "C", ["Wed"])
    logic.remove_habit(store, b.id)

    assert [h.id for h in logic.list_habits(store)] == [c.id, a.id]
    assert len(logic.list_habits(store, active_only=False)) == 3


def test_update_is_partial(store, freeze_today):
    habit = logic.add_new_habit(store, "Read", ["Mon"], color="#111111")
    updated = logic.update_habit(store, habit.id, is_compulsory=True)

    assert updated.is_compulsory
    assert updated.title == "Read"
    assert updated.color == "#111111"


def test_update_validates_before_writing(store, freeze_today):
    habit = logic.add_new_habit(store, "Read", ["Mon"])
    with pytest.raises(InvalidInput):
        logic.update_habit(store, habit.id, scheduled_days=[])
    with pytest.raises(InvalidInput):
        logic.update_habit(store, habit.id, nickname="x")
    assert logic.get_habit(store, habit.id).scheduled_days == [Weekday.MON]


def test_update_and_remove_unknown_habit(store, freeze_today):
    with pytest.raises(NotFound):
        logic.update_habit(store, "missing", title="x")
    with pytest.raises(NotFound):
        logic.remove_habit(store, "missing")


def test_remove_is_soft(store, freeze_today):
    habit = logic.add_new_habit(store, "Read", ["Mon"])
    logic.remove_habit(store, habit.id)
    assert logic.get_habit(store, habit.id).is_active is False
