"""Command-line interface to an audit log in Redis.

Invoked as::

    audis [--host URL] [--verbose] COMMAND [ARGS]...

Commands
--------
- subjects   List known subjects
- retrieve   Print out the event log for one or more subjects
- log        Log an event against one or more subjects
- purge      Purge a subject's log up to (and including) an event
- truncate   Truncate a subject's log to its most recent events
"""

import asyncio
import sys
from collections.abc import Awaitable, Callable
from typing import TypeVar
from uuid import uuid4

import click

from audis.client import connect
from audis.config import get_settings
from audis.errors import AudisError, NotFoundError
from audis.log import AuditLog
from audis.models import AuditRecord, Event
from audis.observability.logging import setup_logging

T = TypeVar("T")


def _run(ctx: click.Context, action: Callable[[AuditLog], Awaitable[T]]) -> T:
    """Connect, run one action against the audit log, and close."""

    async def _main() -> T:
        async with await connect(ctx.obj["host"], ctx.obj["settings"]) as audit_log:
            return await action(audit_log)

    try:
        return asyncio.run(_main())
    except NotFoundError as e:
        removed = e.result.removed_count if e.result else 0
        click.echo(f"audis: {e} (removed {removed} event(s))", err=True)
        sys.exit(1)
    except AudisError as e:
        click.echo(f"audis: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(package_name="audis")
@click.option("-v", "--verbose", is_flag=True, help="Turn on verbose output")
@click.option(
    "-H",
    "--host",
    default=None,
    help="URL of the Redis server to connect to (default: $AUDIS_HOST)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, host: str | None) -> None:
    """Interact with an audit log, in Redis."""
    settings = get_settings()
    if verbose:
        setup_logging(level="DEBUG", format="console")
    else:
        setup_logging(
            level="WARNING",
            format=settings.observability.logging.format,
            redact_secrets=settings.observability.logging.redact_secrets,
        )

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["host"] = host or settings.host


@cli.command()
@click.pass_context
def subjects(ctx: click.Context) -> None:
    """List known subjects."""
    for subject in sorted(_run(ctx, lambda log: log.subjects())):
        click.echo(subject)


@cli.command()
@click.argument("subject", nargs=-1, required=True)
@click.pass_context
def retrieve(ctx: click.Context, subject: tuple[str, ...]) -> None:
    """Print out an event log for one or more subjects."""

    async def _retrieve(log: AuditLog) -> list[tuple[str, list[AuditRecord]]]:
        return [(s, await log.retrieve_events(s)) for s in subject]

    for name, records in _run(ctx, _retrieve):
        for record in records:
            click.echo(f"{name}: [{record.id}] {record.data}")


@cli.command("log")
@click.option(
    "-s",
    "--subject",
    "subjects_",
    multiple=True,
    required=True,
    help="The name of a subject to index this event against",
)
@click.option("-i", "--id", "event_id", default=None, help="A unique ID to assign this event")
@click.option("-d", "--data", required=True, help="The raw data to insert into the audit log")
@click.pass_context
def log_event(
    ctx: click.Context,
    subjects_: tuple[str, ...],
    event_id: str | None,
    data: str,
) -> None:
    """Log an event against one or more subjects."""
    event = Event(id=event_id or uuid4().hex, data=data, subjects=list(subjects_))
    _run(ctx, lambda log: log.log(event))
    click.echo(event.id)


@cli.command()
@click.argument("subject")
@click.option(
    "-t",
    "--to",
    "last_id",
    required=True,
    help="The event ID to purge up to (and including)",
)
@click.pass_context
def purge(ctx: click.Context, subject: str, last_id: str) -> None:
    """Purge an event log, up to a last-known audit event."""
    result = _run(ctx, lambda log: log.purge(subject, last_id))
    click.echo(f"removed {result.removed_count} event(s) from {subject}")


@cli.command()
@click.argument("subject")
@click.option(
    "-n",
    "--keep",
    required=True,
    type=int,
    help="How many audit events to keep",
)
@click.pass_context
def truncate(ctx: click.Context, subject: str, keep: int) -> None:
    """Truncate an event log such that it only includes a set number of events."""
    result = _run(ctx, lambda log: log.truncate(subject, keep))
    click.echo(f"removed {result.removed_count} event(s) from {subject}")


def main() -> None:
    """Console script entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
