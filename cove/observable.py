"""Observable ordered list with row-range change notifications."""

from abc import ABC, abstractmethod


class ListObserver:
    """Receives change announcements from an ObservableList.

    Every hook is a no-op by default, so observers override only what they
    care about. Notifications are delivered synchronously, inside the call
    that changes the list.
    """

    def rows_about_to_be_inserted(self, source, first: int, last: int):
        pass

    def rows_inserted(self, source, first: int, last: int):
        pass

    def rows_about_to_be_removed(self, source, first: int, last: int):
        pass

    def rows_removed(self, source, first: int, last: int):
        pass

    def about_to_reset(self, source):
        pass

    def reset(self, source):
        pass

    def data_changed(self, source, first: int, last: int, fields: list[str]):
        pass

    def config_changed(self, source):
        pass


class ObservableList(ABC):
    """Base for lists a presentation layer can watch and query by field name.

    Subclasses define ``FIELDS`` and implement ``count`` and ``_value``;
    ``data`` does the bounds and field checks.
    """

    FIELDS: tuple[str, ...] = ()

    def __init__(self):
        self._observers: list[ListObserver] = []
        self._pending: tuple | None = None

    def subscribe(self, observer: ListObserver):
        if observer not in self._observers:
            self._observers.append(observer)

    def unsubscribe(self, observer: ListObserver):
        if observer in self._observers:
            self._observers.remove(observer)

    @abstractmethod
    def count(self) -> int:
        """Number of rows."""

    @abstractmethod
    def _value(self, index: int, field: str):
        """Value of ``field`` at a row already known to be valid."""

    def field_names(self) -> tuple[str, ...]:
        return self.FIELDS

    def data(self, index: int, field: str):
        """Return ``field`` of row ``index``, or None if either is invalid."""
        if not 0 <= index < self.count():
            return None
        if field not in self.FIELDS:
            return None
        return self._value(index, field)

    def _emit(self, hook: str, *args):
        for observer in list(self._observers):
            getattr(observer, hook)(self, *args)

    def _begin(self, kind: str, *args):
        if self._pending is not None:
            raise RuntimeError(f"Change already in progress: {self._pending[0]}")
        self._pending = (kind, *args)

    def _end(self, kind: str) -> tuple:
        if self._pending is None or self._pending[0] != kind:
            raise RuntimeError(f"No {kind} in progress")
        pending, self._pending = self._pending, None
        return pending[1:]

    def begin_insert_rows(self, first: int, last: int):
        self._begin("insert", first, last)
        self._emit("rows_about_to_be_inserted", first, last)

    def end_insert_rows(self):
        first, last = self._end("insert")
        self._emit("rows_inserted", first, last)

    def begin_remove_rows(self, first: int, last: int):
        self._begin("remove", first, last)
        self._emit("rows_about_to_be_removed", first, last)

    def end_remove_rows(self):
        first, last = self._end("remove")
        self._emit("rows_removed", first, last)

    def begin_reset(self):
        self._begin("reset")
        self._emit("about_to_reset")

    def end_reset(self):
        self._end("reset")
        self._emit("reset")

    def notify_data_changed(self, first: int, last: int, fields: list[str]):
        self._emit("data_changed", first, last, list(fields))

    def notify_config_changed(self):
        self._emit("config_changed")
