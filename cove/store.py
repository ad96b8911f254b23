"""Container configuration store: the on-disk list of containers."""

import fcntl
import json
import logging
from collections.abc import Mapping
from contextlib import contextmanager
from pathlib import Path

from .naming import disambiguate, generate_bis
from .observable import ObservableList
from .records import (
    DEFAULT_CONTAINER_TYPE,
    AppStatus,
    ContainerApp,
    ContainerArchive,
    ContainerConfig,
    InstallStatus,
    coerce_status,
)

JSON_DEFAULT_CONTAINER = "defaultContainer"
JSON_CONTAINER_LIST = "containerList"

logger = logging.getLogger("cove.store")


class StoreError(Exception):
    """Raised when the store cannot do what was asked of it."""


@contextmanager
def _save_lock(path: Path):
    """Hold the exclusive advisory lock that serializes writers of ``path``.

    The lock lives on a sibling file so it survives the atomic rename in save().
    """
    lock_path = path.with_name(path.name + ".lock")
    fd = lock_path.open("a")
    try:
        fcntl.flock(fd, fcntl.LOCK_EX)
        yield
    finally:
        fcntl.flock(fd, fcntl.LOCK_UN)
        fd.close()


def _read_locked(path: Path) -> bytes:
    """Read ``path`` while holding an exclusive lock on the file itself."""
    with path.open("rb") as fd:
        fcntl.flock(fd, fcntl.LOCK_EX)
        try:
            return fd.read()
        finally:
            fcntl.flock(fd, fcntl.LOCK_UN)


def _parse_document(document: Mapping) -> tuple[str, list[ContainerConfig]]:
    """Turn a parsed JSON tree into (default id, records).

    Raises ValueError when the tree has the wrong shape. Malformed or
    repeated entries are skipped, and a default naming no loaded record
    falls back to the first record.
    """
    entries = document.get(JSON_CONTAINER_LIST)
    if entries is None:
        entries = []
    if not isinstance(entries, list):
        raise ValueError(f"{JSON_CONTAINER_LIST!r} must be a list, not {type(entries).__name__}")

    configs: list[ContainerConfig] = []
    seen = set()
    for entry in entries:
        if not isinstance(entry, dict):
            logger.warning("skipping malformed container entry: %r", entry)
            continue
        record = ContainerConfig.from_json(entry)
        if record.container_id in seen:
            logger.warning("skipping duplicate container id %r", record.container_id)
            continue
        seen.add(record.container_id)
        configs.append(record)

    default_id = str(document.get(JSON_DEFAULT_CONTAINER) or "")
    if default_id not in seen:
        fallback = configs[0].container_id if configs else ""
        if default_id:
            logger.warning("default container %r is not in the list, using %r", default_id, fallback)
        default_id = fallback
    return default_id, configs


class ContainerConfigList(ObservableList):
    """Ordered, observable list of container configurations.

    ``config`` is a path provider with a ``containers_config_file_name()``
    method; when given, the file is loaded immediately. The default container
    is tracked by id only and re-resolved on every lookup.
    """

    FIELDS = ("containerId", "name", "type", "distroSeries", "installStatus")

    def __init__(self, config=None):
        super().__init__()
        self._config = config
        self._configs: list[ContainerConfig] = []
        self._default_container_id = ""
        if config is not None:
            self.load()

    @classmethod
    def from_json(cls, data: Mapping, config=None) -> "ContainerConfigList":
        """Build a store from an already-parsed JSON tree.

        A tree with the wrong shape is logged and yields an empty store.
        """
        store = cls()
        store._config = config
        if data:
            try:
                parsed = _parse_document(data)
            except ValueError as e:
                logger.warning("error parsing containers config: %s", e)
            else:
                store._apply(*parsed)
        return store

    # ------------------------------------------------------------------
    # persistence
    # ------------------------------------------------------------------

    def _path(self) -> Path:
        return Path(self._config.containers_config_file_name())

    def load(self) -> bool:
        """Replace the contents with the containers file.

        Returns True if a document was applied. A missing or empty file, an
        unreadable file, or a malformed document leaves the store as it was.
        """
        if self._config is None:
            return False
        path = self._path()
        if not path.exists():
            return False

        try:
            raw = _read_locked(path)
        except OSError as e:
            logger.warning("could not open containers config file %s: %s", path, e)
            return False

        if not raw.strip():
            return False

        try:
            document = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("error parsing containers config file %s: %s", path, e)
            return False
        if not isinstance(document, dict) or not document:
            logger.warning("containers config file %s holds no container list", path)
            return False

        try:
            default_id, configs = _parse_document(document)
        except ValueError as e:
            logger.warning("error parsing containers config file %s: %s", path, e)
            return False

        self._apply(default_id, configs)
        return True

    def _apply(self, default_id: str, configs: list[ContainerConfig]):
        self.begin_reset()
        self._clear_configs()
        self._configs = configs
        self._default_container_id = default_id
        self.end_reset()

    def reload(self) -> bool:
        """Load again from disk and announce a whole-configuration change."""
        loaded = self.load()
        self.notify_config_changed()
        return loaded

    def save(self):
        """Write the store to its file atomically, under the writers' lock."""
        if self._config is None:
            raise StoreError("No containers config file to save to")
        path = self._path()
        path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(self.to_json(), indent=2) + "\n"
        with _save_lock(path):
            tmp = path.with_suffix(".tmp")
            tmp.write_text(content)
            tmp.rename(path)
        logger.info("saved %d containers to %s", len(self._configs), path)

    def to_json(self) -> dict:
        return {
            JSON_DEFAULT_CONTAINER: self._default_container_id,
            JSON_CONTAINER_LIST: [config.to_json() for config in self._configs],
        }

    # ------------------------------------------------------------------
    # containers
    # ------------------------------------------------------------------

    def add_new_container(self, image: Mapping, container_type: str = DEFAULT_CONTAINER_TYPE) -> str:
        """Append a container described by ``image`` and return its final id.

        A requested id already in use gets a numeric suffix, mirrored in the
        display name: a second "ubuntu" becomes "ubuntu-2" named "Ubuntu (2)".
        """
        distro_series = image.get("distro_series") or ""
        container_id = image.get("container_id") or ""
        name = image.get("name") or ""

        # No host distro discovery yet; the id doubles as the series
        if not distro_series:
            distro_series = container_id

        bis = generate_bis(container_id, (c.container_id for c in self._configs))
        container_id, name = disambiguate(container_id, name, bis)

        row = len(self._configs)
        self.begin_insert_rows(row, row)
        self._configs.append(
            ContainerConfig(
                container_id=container_id,
                name=name,
                container_type=container_type or DEFAULT_CONTAINER_TYPE,
                distro_series=distro_series,
            )
        )
        if len(self._configs) == 1:
            self._default_container_id = container_id
        self.end_insert_rows()

        logger.info("added container %s", container_id)
        return container_id

    def delete_container(self, container_id: str) -> bool:
        """Remove a container and everything it owns. Returns False if unknown."""
        index = self.get_container_index(container_id)
        if index < 0:
            return False

        self.begin_remove_rows(index, index)
        self._configs[index].clear()
        del self._configs[index]
        if not self._configs:
            self._default_container_id = ""
        elif self._default_container_id == container_id:
            self._default_container_id = self._configs[0].container_id
        self.end_remove_rows()

        logger.info("deleted container %s", container_id)
        return True

    def clear(self):
        """Remove every container."""
        self.begin_reset()
        self._clear_configs()
        self._default_container_id = ""
        self.end_reset()

    def _clear_configs(self):
        for config in self._configs:
            config.clear()
        self._configs.clear()

    def set_install_status(self, container_id: str, status) -> bool:
        index = self.get_container_index(container_id)
        if index < 0:
            return False
        self._configs[index].install_status = coerce_status(InstallStatus, status)
        self.notify_data_changed(index, index, ["installStatus"])
        return True

    # ------------------------------------------------------------------
    # apps and archives
    # ------------------------------------------------------------------

    def add_new_app(self, container_id: str, package_name: str):
        """Record a package as wanted in a container. Unknown containers are ignored."""
        config = self.get_container(container_id)
        if config is not None:
            config.container_apps.append(ContainerApp(package_name, AppStatus.NEW))

    def add_new_archive(self, container_id: str, archive_name: str):
        """Record an archive source for a container. Unknown containers are ignored."""
        config = self.get_container(container_id)
        if config is not None:
            config.container_archives.append(ContainerArchive(archive_name))

    def set_app_status(self, container_id: str, package_name: str, status) -> bool:
        config = self.get_container(container_id)
        app = config.find_app(package_name) if config is not None else None
        if app is None:
            return False
        app.app_status = coerce_status(AppStatus, status)
        return True

    def get_apps_for_container(self, container_id: str) -> list[ContainerApp] | None:
        config = self.get_container(container_id)
        return config.container_apps if config is not None else None

    def get_archives_for_container(self, container_id: str) -> list[ContainerArchive] | None:
        config = self.get_container(container_id)
        return config.container_archives if config is not None else None

    def is_app_installed(self, container_id: str, package_name: str) -> bool:
        return self.get_app_status(container_id, package_name) is not None

    def get_app_status(self, container_id: str, package_name: str) -> AppStatus | None:
        config = self.get_container(container_id)
        if config is None:
            return None
        app = config.find_app(package_name)
        return app.app_status if app is not None else None

    # ------------------------------------------------------------------
    # lookups
    # ------------------------------------------------------------------

    def get_container(self, container_id: str) -> ContainerConfig | None:
        for config in self._configs:
            if config.container_id == container_id:
                return config
        return None

    def get_container_index(self, container_id: str) -> int:
        for i, config in enumerate(self._configs):
            if config.container_id == container_id:
                return i
        return -1

    def get_container_type(self, container_id: str) -> str:
        config = self.get_container(container_id)
        return config.container_type if config is not None else DEFAULT_CONTAINER_TYPE

    def get_container_name(self, container_id: str) -> str | None:
        config = self.get_container(container_id)
        return config.name if config is not None else None

    @property
    def default_container_id(self) -> str:
        return self._default_container_id

    @default_container_id.setter
    def default_container_id(self, container_id: str):
        self._default_container_id = container_id

    def empty(self) -> bool:
        return not self._configs

    def size(self) -> int:
        return len(self._configs)

    def __len__(self):
        return len(self._configs)

    def __iter__(self):
        return iter(list(self._configs))

    # ------------------------------------------------------------------
    # observable list
    # ------------------------------------------------------------------

    def count(self) -> int:
        return len(self._configs)

    def _value(self, index: int, field: str):
        config = self._configs[index]
        if field == "containerId":
            return config.container_id
        if field == "name":
            return config.name
        if field == "type":
            return config.container_type
        if field == "distroSeries":
            return config.distro_series
        if field == "installStatus":
            return config.install_status.value
        return None
