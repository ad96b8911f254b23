"""Container configuration records and their JSON form."""

from dataclasses import dataclass, field
from enum import Enum

DEFAULT_CONTAINER_TYPE = "lxc"


class InstallStatus(str, Enum):
    NEW = "new"
    INSTALLING = "installing"
    READY = "ready"
    REMOVING = "removing"
    REMOVED = "removed"
    FAILED = "failed"


class AppStatus(str, Enum):
    NEW = "new"
    INSTALLING = "installing"
    INSTALLED = "installed"
    FAILED = "failed"
    REMOVING = "removing"
    REMOVED = "removed"


class ArchiveStatus(str, Enum):
    NEW = "new"
    INSTALLING = "installing"
    INSTALLED = "installed"
    FAILED = "failed"
    REMOVING = "removing"
    REMOVED = "removed"


def parse_status(enum_cls, value):
    """Coerce a stored status into ``enum_cls``.

    Accepts the string value (case-insensitive) or an integer index into the
    declaration order. Anything else falls back to the first member.
    """
    members = list(enum_cls)
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, bool):
        return members[0]
    if isinstance(value, int):
        return members[value] if 0 <= value < len(members) else members[0]
    if isinstance(value, str):
        try:
            return enum_cls(value.lower())
        except ValueError:
            return members[0]
    return members[0]


def coerce_status(enum_cls, value):
    """Like parse_status, but unknown values raise ValueError."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        return enum_cls(value.lower())
    raise ValueError(f"{value!r} is not a valid {enum_cls.__name__}")


def _json_list(data: dict, key: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{key!r} must be a list, not {type(value).__name__}")
    return value


@dataclass
class ContainerApp:
    package_name: str
    app_status: AppStatus = AppStatus.NEW

    def to_json(self) -> dict:
        return {"packageName": self.package_name, "appStatus": self.app_status.value}

    @classmethod
    def from_json(cls, data: dict) -> "ContainerApp":
        return cls(
            package_name=str(data.get("packageName") or ""),
            app_status=parse_status(AppStatus, data.get("appStatus")),
        )


@dataclass
class ContainerArchive:
    archive_name: str
    archive_status: ArchiveStatus = ArchiveStatus.NEW

    def to_json(self) -> dict:
        return {"archiveName": self.archive_name, "archiveStatus": self.archive_status.value}

    @classmethod
    def from_json(cls, data: dict) -> "ContainerArchive":
        return cls(
            archive_name=str(data.get("archiveName") or ""),
            archive_status=parse_status(ArchiveStatus, data.get("archiveStatus")),
        )


@dataclass
class ContainerConfig:
    """One container's identity, attributes and owned sub-lists.

    The apps and archives lists belong to this record alone; the store hands
    out the live lists but never shares them between records.
    """

    container_id: str
    name: str = ""
    container_type: str = DEFAULT_CONTAINER_TYPE
    distro_series: str = ""
    install_status: InstallStatus = InstallStatus.NEW
    container_apps: list[ContainerApp] = field(default_factory=list)
    container_archives: list[ContainerArchive] = field(default_factory=list)

    def clear(self):
        """Drop the owned app and archive records."""
        self.container_apps.clear()
        self.container_archives.clear()

    def find_app(self, package_name: str) -> ContainerApp | None:
        for app in self.container_apps:
            if app.package_name == package_name:
                return app
        return None

    def to_json(self) -> dict:
        return {
            "containerId": self.container_id,
            "name": self.name,
            "type": self.container_type,
            "distroSeries": self.distro_series,
            "installStatus": self.install_status.value,
            "apps": [app.to_json() for app in self.container_apps],
            "archives": [archive.to_json() for archive in self.container_archives],
        }

    @classmethod
    def from_json(cls, data: dict) -> "ContainerConfig":
        """Build a record from its JSON object. Raises ValueError on a bad shape."""
        apps = _json_list(data, "apps")
        archives = _json_list(data, "archives")
        return cls(
            container_id=str(data.get("containerId") or ""),
            name=str(data.get("name") or ""),
            container_type=str(data.get("type") or DEFAULT_CONTAINER_TYPE),
            distro_series=str(data.get("distroSeries") or ""),
            install_status=parse_status(InstallStatus, data.get("installStatus")),
            container_apps=[ContainerApp.from_json(a) for a in apps if isinstance(a, dict)],
            container_archives=[
                ContainerArchive.from_json(a) for a in archives if isinstance(a, dict)
            ],
        )
