"""Read-only list of the archives (PPAs and the like) of one container."""

from .observable import ObservableList
from .records import ContainerArchive


class ContainerArchivesList(ObservableList):
    """Snapshot of one container's archives.

    Call set_container_archives() whenever the selected container changes;
    later edits to the container are not tracked until the next call.
    """

    FIELDS = ("archiveName", "archiveStatus")

    def __init__(self, store):
        super().__init__()
        self._store = store
        self._archives: list[ContainerArchive] = []

    def set_container_archives(self, container_id: str):
        self.begin_reset()
        archives = self._store.get_archives_for_container(container_id)
        self._archives = list(archives) if archives is not None else []
        self.end_reset()

    def empty(self) -> bool:
        return not self._archives

    def size(self) -> int:
        return len(self._archives)

    def count(self) -> int:
        return len(self._archives)

    def _value(self, index: int, field: str):
        archive = self._archives[index]
        if field == "archiveName":
            return archive.archive_name
        return archive.archive_status.value
