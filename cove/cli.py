"""CLI entry point for cove."""

import json
import logging
import sys

import click

from . import __version__
from .archives import ContainerArchivesList
from .config import ContainersConfig, load_config
from .records import DEFAULT_CONTAINER_TYPE, AppStatus, InstallStatus
from .store import ContainerConfigList

logger = logging.getLogger("cove")


def _setup_logging(config: dict):
    """Send cove log records to the configured file, or stderr."""
    settings = config.get("logging", {})
    log_file = settings.get("file") or ""
    if log_file:
        handler = logging.FileHandler(log_file)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s  %(message)s", datefmt="%Y-%m-%d %H:%M:%S"))
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    logger.addHandler(handler)
    level = str(settings.get("level") or "WARNING").upper()
    if isinstance(logging.getLevelName(level), int):
        logger.setLevel(level)
    else:
        logger.setLevel(logging.WARNING)
        logger.warning("unknown log level %r in config, using WARNING", settings.get("level"))


def _open_store() -> ContainerConfigList:
    config = load_config()
    _setup_logging(config)
    return ContainerConfigList(ContainersConfig(config=config))


def _require_container(store: ContainerConfigList, container_id: str):
    if store.get_container_index(container_id) < 0:
        click.echo(f"No container '{container_id}'.", err=True)
        sys.exit(1)


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.version_option(__version__)
def main():
    """cove: keep track of your application containers.

    \b
    Examples:
      cove create ubuntu --name Ubuntu    Record a new container
      cove add-app ubuntu firefox         Ask for a package in it
      cove list                           Show every container
    """


@main.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_containers(as_json):
    """List all containers."""
    store = _open_store()

    if as_json:
        click.echo(json.dumps(store.to_json(), indent=2))
        return

    if store.empty():
        click.echo("No containers. Create one with: cove create ID")
        return

    header = f"  {'ID':<24} {'NAME':<24} {'TYPE':<8} {'SERIES':<12} STATUS"
    click.echo(header)
    click.echo("-" * len(header))
    for row in range(store.count()):
        container_id = store.data(row, "containerId")
        marker = "*" if container_id == store.default_container_id else " "
        click.echo(
            f"{marker} {container_id:<24} {store.data(row, 'name'):<24} "
            f"{store.data(row, 'type'):<8} {store.data(row, 'distroSeries'):<12} "
            f"{store.data(row, 'installStatus')}"
        )


@main.command()
@click.argument("container_id")
@click.option("--name", type=str, help="Display name (defaults to the id)")
@click.option("--distro", "distro_series", type=str, default="", help="Distro series, e.g. noble")
@click.option("--type", "container_type", type=str, default=DEFAULT_CONTAINER_TYPE,
              show_default=True, help="Container runtime type")
def create(container_id, name, distro_series, container_type):
    """Record a new container. Reused ids get a numeric suffix."""
    store = _open_store()
    image = {"container_id": container_id, "name": name or container_id, "distro_series": distro_series}
    assigned = store.add_new_container(image, container_type)
    store.save()
    click.echo(f"Container '{assigned}' created.")


@main.command()
@click.argument("container_id")
def destroy(container_id):
    """Forget a container and its apps and archives."""
    store = _open_store()
    if not store.delete_container(container_id):
        click.echo(f"No container '{container_id}'.", err=True)
        sys.exit(1)
    store.save()
    click.echo(f"Container '{container_id}' destroyed.")


@main.command()
@click.argument("container_id", required=False)
def default(container_id):
    """Show or set the default container."""
    store = _open_store()
    if container_id is None:
        click.echo(store.default_container_id or "(none)")
        return
    _require_container(store, container_id)
    store.default_container_id = container_id
    store.save()
    click.echo(f"Default container is now '{container_id}'.")


@main.command()
@click.argument("container_id")
@click.argument("status", type=click.Choice([s.value for s in InstallStatus]))
def status(container_id, status):
    """Set the install status of a container."""
    store = _open_store()
    _require_container(store, container_id)
    store.set_install_status(container_id, status)
    store.save()
    click.echo(f"Container '{container_id}' is {status}.")


# ---------------------------------------------------------------------------
# apps
# ---------------------------------------------------------------------------


@main.command()
@click.argument("container_id")
def apps(container_id):
    """List the packages recorded for a container."""
    store = _open_store()
    container_apps = store.get_apps_for_container(container_id)
    if container_apps is None:
        click.echo(f"No container '{container_id}'.", err=True)
        sys.exit(1)
    if not container_apps:
        click.echo("No apps.")
        return
    for app in container_apps:
        click.echo(f"{app.package_name:<32} {app.app_status.value}")


@main.command("add-app")
@click.argument("container_id")
@click.argument("package_name")
def add_app(container_id, package_name):
    """Record a package to install in a container."""
    store = _open_store()
    _require_container(store, container_id)
    if store.is_app_installed(container_id, package_name):
        click.echo(f"'{package_name}' is already {store.get_app_status(container_id, package_name).value}.")
        return
    store.add_new_app(container_id, package_name)
    store.save()
    click.echo(f"Added '{package_name}' to '{container_id}'.")


@main.command("app-status")
@click.argument("container_id")
@click.argument("package_name")
@click.argument("status", type=click.Choice([s.value for s in AppStatus]))
def app_status(container_id, package_name, status):
    """Set the status of a package in a container."""
    store = _open_store()
    if not store.set_app_status(container_id, package_name, status):
        click.echo(f"No app '{package_name}' in '{container_id}'.", err=True)
        sys.exit(1)
    store.save()
    click.echo(f"'{package_name}' is {status}.")


# ---------------------------------------------------------------------------
# archives
# ---------------------------------------------------------------------------


@main.command()
@click.argument("container_id")
def archives(container_id):
    """List the archives attached to a container."""
    store = _open_store()
    _require_container(store, container_id)
    archive_list = ContainerArchivesList(store)
    archive_list.set_container_archives(container_id)
    if archive_list.empty():
        click.echo("No archives.")
        return
    for row in range(archive_list.count()):
        click.echo(f"{archive_list.data(row, 'archiveName'):<40} {archive_list.data(row, 'archiveStatus')}")


@main.command("add-archive")
@click.argument("container_id")
@click.argument("archive_name")
def add_archive(container_id, archive_name):
    """Attach an archive (e.g. ppa:owner/name) to a container."""
    store = _open_store()
    _require_container(store, container_id)
    store.add_new_archive(container_id, archive_name)
    store.save()
    click.echo(f"Added archive '{archive_name}' to '{container_id}'.")
