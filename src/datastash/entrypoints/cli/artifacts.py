"""DATASTASH artifact commands: publish, fetch, ls and wipe.

Results (resolved paths, listed coordinates) go to **stdout**; status lines
and warnings go to **stderr** so the commands compose in shell pipelines::

    $ datastash publish ./weights.bin models encoder 3
    $ cp "$(datastash fetch models encoder 3)" /tmp/

Failure modes
- No remote configured → ``ClickException`` explaining DATASTASH_REMOTE.
- Nothing published at the coordinate → ``ClickException`` naming it.
- Remote store, lock or archive failures → ``ClickException`` with the cause.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

import click
from botocore.exceptions import BotoCoreError, ClientError

from datastash.adapters.archive import ArchiveError
from datastash.bootstrap import build_cache, build_datastore
from datastash.config import ConfigError, DatastashConfig, RemoteUrlNotSetError
from datastash.domain.errors import DatastashError, DoesNotExistError
from datastash.interfaces.locks import LockError
from datastash.interfaces.remote_store import RemoteStoreError
from datastash.service_layer.datastore import Datastore

from .helpers import hyperlink, success, warn

logger = logging.getLogger(__name__)

MISSING_REMOTE_MSG = (
    "No remote store is configured.\n\n"
    "Pass --remote or set DATASTASH_REMOTE before running this command, e.g.:\n"
    "  export DATASTASH_REMOTE='s3://my-bucket/artifacts'\n"
    "  export DATASTASH_REMOTE='file:///srv/datastash'"
)

WIPE_WARNING = "This will delete every cached artifact under the cache root."

_VERSION = click.IntRange(min=1)


@dataclass
class CliState:
    """Options of the top-level command, shared with its subcommands."""

    remote_url: str | None = None
    cache_dir: Path | None = None
    _datastore: Datastore | None = field(default=None, init=False, repr=False)

    def datastore(self) -> Datastore:
        """Build the datastore on first use."""
        if self._datastore is None:
            config = DatastashConfig.from_env(
                remote_url=self.remote_url, cache_dir=self.cache_dir
            )
            self._datastore = build_datastore(config)
        return self._datastore


@contextmanager
def reported_errors() -> Iterator[None]:
    """Turn library errors into ``ClickException`` with a readable message."""
    try:
        yield
    except RemoteUrlNotSetError as e:
        raise click.ClickException(MISSING_REMOTE_MSG) from e
    except DoesNotExistError as e:
        raise click.ClickException(f"{e} in the remote store.") from e
    except (
        DatastashError,
        ConfigError,
        RemoteStoreError,
        LockError,
        ArchiveError,
    ) as e:
        raise click.ClickException(str(e)) from e
    except (BotoCoreError, ClientError) as e:
        raise click.ClickException(f"Remote store request failed: {e}") from e
    except OSError as e:
        raise click.ClickException(str(e)) from e


@click.command()
@click.argument(
    "path", type=click.Path(exists=True, file_okay=True, dir_okay=True, path_type=Path)
)
@click.argument("group")
@click.argument("name")
@click.argument("version", type=_VERSION)
@click.pass_obj
def publish(state: CliState, path: Path, group: str, name: str, version: int) -> None:
    """Publish PATH as GROUP/NAME at VERSION.

    A directory is archived and published as a directory artifact; anything
    else is published as a file artifact. Publishing over an existing
    version replaces the remote copy only.
    """
    with reported_errors():
        store = state.datastore()
        if path.is_dir():
            coordinate = store.publish_directory(path, group, name, version)
        else:
            coordinate = store.publish_file(path, group, name, version)
    success(f"Published {coordinate}")


@click.command()
@click.argument("group")
@click.argument("name")
@click.argument("version", type=_VERSION)
@click.option(
    "--directory",
    "-d",
    "directory",
    is_flag=True,
    help="Fetch a published directory instead of a file.",
)
@click.pass_obj
def fetch(
    state: CliState, group: str, name: str, version: int, directory: bool
) -> None:
    """Print the local path of GROUP/NAME at VERSION, downloading it if needed."""
    with reported_errors():
        store = state.datastore()
        if directory:
            path = store.directory_path(group, name, version)
        else:
            path = store.file_path(group, name, version)
    click.echo(hyperlink(path.as_uri(), str(path)))


@click.command(name="ls")
@click.argument("group", required=False)
@click.pass_obj
def list_artifacts(state: CliState, group: str | None) -> None:
    """List published artifacts, optionally only those in GROUP.

    Each line shows the kind, the coordinate, and whether the artifact is
    already present in the local cache.
    """
    with reported_errors():
        store = state.datastore()
        coordinates = store.list_coordinates(group)
        for coordinate in coordinates:
            cached = "  (cached)" if store.is_cached(coordinate) else ""
            click.echo(f"{coordinate.kind.value:<9} {coordinate}{cached}")
    if not coordinates:
        logger.info("Nothing published%s", f" in group {group!r}" if group else "")


@click.command()
@click.option("--force", is_flag=True, help="Wipe without confirmation.")
@click.pass_obj
def wipe(state: CliState, force: bool) -> None:
    """Delete every locally cached artifact. Published artifacts are kept."""
    cache = build_cache(state.cache_dir)
    if not force:
        warn(WIPE_WARNING)
        click.secho(f"cache: {click.style(str(cache.root), underline=True)}")
        click.confirm("Are you sure you want to proceed?", abort=True)
    with reported_errors():
        cache.wipe()
    success(f"Wiped {cache.root}")


COMMANDS = (publish, fetch, list_artifacts, wipe)

__all__ = ["COMMANDS", "CliState", "reported_errors"]
