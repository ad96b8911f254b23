"""Tests for the observable list base."""

import pytest

from cove.observable import ListObserver, ObservableList


class Letters(ObservableList):
    FIELDS = ("letter", "upper")

    def __init__(self, letters):
        super().__init__()
        self.letters = list(letters)

    def count(self):
        return len(self.letters)

    def _value(self, index, field):
        letter = self.letters[index]
        return letter.upper() if field == "upper" else letter


def test_data_by_field():
    model = Letters("ab")
    assert model.data(1, "letter") == "b"
    assert model.data(1, "upper") == "B"
    assert model.field_names() == ("letter", "upper")


def test_data_out_of_range():
    model = Letters("ab")
    assert model.data(2, "letter") is None
    assert model.data(-1, "letter") is None
    assert Letters("").data(0, "letter") is None


def test_unknown_field():
    assert Letters("a").data(0, "lower") is None


def test_insert_bracket(observer):
    model = Letters("a")
    model.subscribe(observer)
    model.begin_insert_rows(1, 2)
    model.letters += ["b", "c"]
    model.end_insert_rows()
    assert observer.events == [("about_to_insert", 1, 2), ("inserted", 1, 2)]


def test_unbalanced_end_raises():
    with pytest.raises(RuntimeError):
        Letters("a").end_remove_rows()


def test_mismatched_end_raises():
    model = Letters("a")
    model.begin_insert_rows(1, 1)
    with pytest.raises(RuntimeError):
        model.end_reset()


def test_nested_begin_raises():
    model = Letters("a")
    model.begin_reset()
    with pytest.raises(RuntimeError):
        model.begin_remove_rows(0, 0)


def test_unsubscribe(observer):
    model = Letters("a")
    model.subscribe(observer)
    model.unsubscribe(observer)
    model.notify_config_changed()
    assert observer.events == []


def test_subscribe_twice_delivers_once(observer):
    model = Letters("a")
    model.subscribe(observer)
    model.subscribe(observer)
    model.notify_config_changed()
    assert observer.events == [("config_changed",)]


def test_default_observer_hooks_are_noops():
    model = Letters("a")
    model.subscribe(ListObserver())
    model.begin_remove_rows(0, 0)
    model.letters.pop()
    model.end_remove_rows()
    model.notify_data_changed(0, 0, ["letter"])
    assert model.count() == 0
