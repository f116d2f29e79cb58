#!/usr/bin/env python3
"""Contact Passports CLI.

Command-line interface for the passport repository.
"""

import asyncio
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

import click
from pydantic import TypeAdapter

from contact_passports.config import get_settings
from contact_passports.core.database import Database
from contact_passports.core.exceptions import ContactPassportsError
from contact_passports.repositories import PassportRepository
from contact_passports.schemas import PassportRead, PassportWrite
from contact_passports.utils.logging import setup_logging

T = TypeVar("T")


def run_with_database(
    database_url: Optional[str], action: Callable[[Database], Awaitable[T]]
) -> T:
    """Open a database handle, run ``action`` with it and dispose it."""
    settings = get_settings()
    if database_url:
        settings = settings.model_copy(update={"database_url": database_url})

    async def runner() -> T:
        database = Database.from_settings(settings)
        try:
            return await action(database)
        finally:
            await database.dispose()

    try:
        return asyncio.run(runner())
    except ContactPassportsError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option(
    "--database-url",
    envvar="DATABASE_URL",
    default=None,
    help="Database URL (defaults to the configured database_url)",
)
@click.pass_context
def cli(ctx: click.Context, database_url: Optional[str]) -> None:
    """Contact Passports data tools."""
    setup_logging(stream=sys.stderr)
    ctx.ensure_object(dict)
    ctx.obj["database_url"] = database_url


@cli.command("init-db")
@click.pass_context
def init_db(ctx: click.Context) -> None:
    """Create the contacts and passports tables."""

    async def action(database: Database) -> None:
        await database.create_all()

    run_with_database(ctx.obj["database_url"], action)
    click.echo("Tables created")


@cli.command()
@click.argument("contact_id", type=int)
@click.option("--passport-number", help="Passport number")
@click.option("--surname", help="Surname")
@click.option("--given-names", help="Given names")
@click.option("--sex", help="Sex as printed on the passport")
@click.option("--date-of-birth", help="Date of birth as printed")
@click.option("--place-of-birth", help="Place of birth")
@click.option("--nationality", help="Nationality")
@click.option("--date-of-issue", help="Date of issue as printed")
@click.option("--date-of-expiration", help="Date of expiration as printed")
@click.option("--type", "passport_type", help="Passport type, e.g. P")
@click.option("--issuing-country", help="Issuing country code")
@click.option("--authority", help="Issuing authority")
@click.option(
    "--photo",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Image file with the passport photo",
)
@click.pass_context
def save(
    ctx: click.Context, contact_id: int, photo: Optional[Path], **fields: Any
) -> None:
    """Create or update the passport of CONTACT_ID."""
    data = PassportWrite(
        contact_id=contact_id,
        type=fields.pop("passport_type"),
        photo=photo.read_bytes() if photo else None,
        **fields,
    )

    async def action(database: Database) -> PassportRead:
        repository = PassportRepository(database)
        passport = await repository.create_or_update_passport(*data.as_args())
        return PassportRead.model_validate(passport)

    result = run_with_database(ctx.obj["database_url"], action)
    click.echo(result.model_dump_json(indent=2, exclude={"photo"}))


@cli.command()
@click.argument("contact_id", type=int)
@click.option("--with-photo", is_flag=True, help="Include the base64 photo")
@click.pass_context
def show(ctx: click.Context, contact_id: int, with_photo: bool) -> None:
    """Print the passport of CONTACT_ID as JSON."""

    async def action(database: Database) -> Optional[PassportRead]:
        passport = await PassportRepository(database).read_passport(contact_id)
        return PassportRead.model_validate(passport) if passport else None

    result = run_with_database(ctx.obj["database_url"], action)
    if result is None:
        click.echo(f"No passport for contact {contact_id}", err=True)
        ctx.exit(1)

    exclude = None if with_photo else {"photo"}
    click.echo(result.model_dump_json(indent=2, exclude=exclude))


@cli.command("list")
@click.pass_context
def list_passports(ctx: click.Context) -> None:
    """Print every passport as a JSON array."""

    async def action(database: Database) -> List[PassportRead]:
        passports = await PassportRepository(database).read_passports()
        return [PassportRead.model_validate(passport) for passport in passports]

    results = run_with_database(ctx.obj["database_url"], action)
    adapter = TypeAdapter(List[PassportRead])
    output = adapter.dump_json(results, indent=2, exclude={"__all__": {"photo"}})
    click.echo(output.decode())


@cli.command()
@click.argument("contact_id", type=int)
@click.pass_context
def delete(ctx: click.Context, contact_id: int) -> None:
    """Delete the passport of CONTACT_ID."""

    async def action(database: Database) -> bool:
        return await PassportRepository(database).delete_passport(contact_id)

    deleted = run_with_database(ctx.obj["database_url"], action)
    if deleted:
        click.echo(f"Deleted passport for contact {contact_id}")
    else:
        click.echo(f"No passport for contact {contact_id}")


def main() -> None:
    """Console script entry point."""
    cli(obj={})  # pylint: disable=no-value-for-parameter


if __name__ == "__main__":
    main()
