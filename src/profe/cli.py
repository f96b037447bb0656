"""Profe CLI - teacher's agenda."""

import json
import logging
import sys
from datetime import datetime

import click
import requests

from .adapters.firebase_agenda import AgendaStoreError
from .config import Session, load_config
from .core.agenda import CalendarItem, FilterMode, HeaderRow, local_naive
from .workflows import AgendaController, AgendaScope, build_controller, describe_scope


def _controller() -> AgendaController:
    return build_controller(load_config())


def _scope(class_ids: tuple[str, str]) -> AgendaScope:
    institution_id, class_id = (c.strip() for c in class_ids)
    return AgendaScope(institution_id, class_id, institution_id, class_id)


def _parse_when(value: str) -> datetime:
    try:
        return local_naive(datetime.fromisoformat(value))
    except ValueError:
        raise click.BadParameter(f"Invalid date/time '{value}' (use YYYY-MM-DD HH:MM)")


@click.group()
@click.version_option(package_name="profe-agenda")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Profe - teacher's agenda CLI."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command()
@click.option("--all", "show_all", is_flag=True, help="Include past items")
@click.option("--day", type=click.DateTime(formats=["%Y-%m-%d"]), help="Only this date")
@click.option("--class", "class_ids", nargs=2, help="INSTITUTION_ID CLASS_ID")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def agenda(show_all: bool, day: datetime | None, class_ids: tuple[str, str] | None, as_json: bool):
    """Show the agenda grouped by day."""
    if show_all and day:
        raise click.UsageError("--all and --day cannot be combined.")

    controller = _controller()
    if class_ids:
        controller.scope = _scope(class_ids)

    if day:
        controller.set_filter_mode(FilterMode.EXACT_DAY, day.date())
    elif show_all:
        controller.set_show_past(True)

    controller.load()
    rows = controller.rows()

    if as_json:
        click.echo(
            json.dumps(
                [
                    {"kind": r.kind.value, "day": r.day.isoformat(), "label": r.label}
                    if isinstance(r, HeaderRow)
                    else {"kind": r.kind.value, **r.item.to_dict()}
                    for r in rows
                ],
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    click.echo(describe_scope(controller.scope))
    if not rows:
        click.echo("Nenhum item nesta data." if day else "Nenhum item na agenda.")
        return

    now = datetime.now()
    for row in rows:
        if isinstance(row, HeaderRow):
            click.echo(f"\n{row.label}")
            continue
        item = row.item
        dot = "○" if item.is_past(now) else "●"
        click.echo(f"  {dot} {item.format_time()}  [{item.kind}] {item.title}  ({item.id})")


@main.command()
@click.argument("title")
@click.option("--start", "start_str", required=True, help="YYYY-MM-DD HH:MM")
@click.option("--end", "end_str", required=True, help="YYYY-MM-DD HH:MM")
@click.option("--kind", default="Aula", show_default=True, help="Aula / Prova / Evento / Plano de aula")
@click.option("--description", default="")
@click.option("--class", "class_ids", nargs=2, help="INSTITUTION_ID CLASS_ID")
def add(title: str, start_str: str, end_str: str, kind: str, description: str, class_ids):
    """Add an item to the agenda."""
    controller = _controller()
    if class_ids:
        controller.scope = _scope(class_ids)

    item = CalendarItem(
        id="",
        title=title.strip(),
        kind=kind.strip(),
        start=_parse_when(start_str),
        end=_parse_when(end_str),
        description=description.strip(),
        created_at=datetime.now().astimezone(),
    )

    try:
        controller.load()
        saved = controller.add(item)
    except (AgendaStoreError, requests.RequestException) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if saved is None:
        click.echo("Error: could not save to the general agenda.", err=True)
        sys.exit(1)
    click.echo(f"Added {saved.id}: {saved.title}")


@main.command()
@click.argument("item_id")
@click.option("--title")
@click.option("--kind")
@click.option("--start", "start_str", help="YYYY-MM-DD HH:MM")
@click.option("--end", "end_str", help="YYYY-MM-DD HH:MM")
@click.option("--description")
def edit(item_id: str, title, kind, start_str, end_str, description):
    """Edit an agenda item by id."""
    changes = {}
    if title is not None:
        changes["title"] = title.strip()
    if kind is not None:
        changes["kind"] = kind.strip()
    if start_str is not None:
        changes["start"] = _parse_when(start_str)
    if end_str is not None:
        changes["end"] = _parse_when(end_str)
    if description is not None:
        changes["description"] = description.strip()

    controller = _controller()
    try:
        controller.load()
        if controller.find(item_id) is None:
            click.echo(f"Error: no agenda item {item_id}.", err=True)
            sys.exit(1)
        updated = controller.update(item_id, **changes)
    except (AgendaStoreError, requests.RequestException) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if updated is None:
        click.echo("Error: could not update the general agenda.", err=True)
        sys.exit(1)
    click.echo(f"Updated {updated.id}: {updated.title}")


@main.command()
@click.argument("item_id")
@click.option("--class", "class_ids", nargs=2, help="INSTITUTION_ID CLASS_ID")
def delete(item_id: str, class_ids):
    """Delete an agenda item by id."""
    controller = _controller()
    if class_ids:
        controller.scope = _scope(class_ids)

    try:
        controller.load()
        ok = controller.delete(item_id)
    except (AgendaStoreError, requests.RequestException) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not ok:
        click.echo(f"Error: no agenda item {item_id}.", err=True)
        sys.exit(1)
    click.echo(f"Deleted {item_id}")


@main.command()
@click.option("--uid", required=True)
@click.option("--token", "id_token", default="", help="Firebase ID token")
@click.option("--email", default="")
def login(uid: str, id_token: str, email: str):
    """Store the session used for the remote agenda."""
    Session(uid=uid.strip(), email=email.strip(), id_token=id_token.strip()).save()
    click.echo(f"Session saved for {email or uid}.")


if __name__ == "__main__":
    main()
