from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence

import typer

from .config import DEFAULT_CONFIG_PATH, Config
from .errors import CorveeError, UsageError, ValidationError
from .localization import Localizer
from .output import SUPPORTED_FORMATS, render_output
from .service import CoreService, open_session

APP_NAME = "corvee"

app = typer.Typer(name=APP_NAME, add_completion=False, context_settings={"help_option_names": ["-h", "--help"]})

people_app = typer.Typer(help="People and their absences.")
tasks_app = typer.Typer(help="Task catalog.")
roster_app = typer.Typer(help="Roster import and export.")
config_app = typer.Typer(help="Configuration.")

app.add_typer(people_app, name="people")
app.add_typer(tasks_app, name="tasks")
app.add_typer(roster_app, name="roster")
app.add_typer(config_app, name="config")


@dataclass
class AppContext:
    config: Config
    config_path: Path
    roster_path: Optional[Path]
    service: CoreService
    formatter: str
    localizer: Localizer


def _ensure_format(value: str) -> str:
    fmt = value.lower()
    if fmt not in SUPPORTED_FORMATS:
        raise UsageError(f"Unsupported format: {value}")
    return fmt


def get_ctx(ctx: typer.Context) -> AppContext:
    if not isinstance(ctx.obj, AppContext):
        raise RuntimeError("Context not initialised")
    return ctx.obj


def print_rows(
    ctx: AppContext,
    rows: Sequence[dict],
    columns: Sequence[str],
    *,
    fmt: Optional[str] = None,
) -> None:
    formatter = _ensure_format(fmt or ctx.formatter)
    widths = {"name": ctx.config.general.name_width, "person": ctx.config.general.name_width}
    text = render_output(rows, columns, formatter, width_overrides=widths, empty=ctx.localizer.text("empty"))
    typer.echo(text)


def _distribute(app_ctx: AppContext, month: Optional[str]) -> None:
    if month:
        app_ctx.service.select_month(month)
    app_ctx.service.distribute()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", help="Path to the TOML config."),
    roster: Optional[Path] = typer.Option(None, "--roster", help="JSON roster to start from."),
    locale: Optional[str] = typer.Option(None, "--locale", help="fr-FR|en-US"),
    formatter: str = typer.Option("table", "--format", help="table|json|csv|yaml"),
) -> None:
    overrides: dict[str, Any] = {}
    if locale:
        overrides["general.default_locale"] = locale
    config = Config.load(path=config_path, env=os.environ, overrides=overrides)
    service = open_session(config, roster=roster)
    ctx.obj = AppContext(
        config=config,
        config_path=config_path,
        roster_path=roster,
        service=service,
        formatter=_ensure_format(formatter),
        localizer=Localizer(config.general.default_locale),
    )
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@people_app.command("list")
def people_list(
    ctx: typer.Context,
    search: Optional[str] = typer.Option(None, "--search", help="Case-insensitive name filter."),
    format: Optional[str] = typer.Option(None, "--format"),
) -> None:
    app_ctx = get_ctx(ctx)
    rows = [
        {
            "id": person.id,
            "name": person.name,
            "color": person.color,
            "absences": [f"{block.start.isoformat()} -> {block.end.isoformat()}" for block in person.absences],
        }
        for person in app_ctx.service.list_people(search)
    ]
    print_rows(app_ctx, rows, ["id", "name", "color", "absences"], fmt=format)


@tasks_app.command("list")
def tasks_list(
    ctx: typer.Context,
    format: Optional[str] = typer.Option(None, "--format"),
) -> None:
    app_ctx = get_ctx(ctx)
    rows = [task.to_dict() for task in app_ctx.service.list_tasks()]
    print_rows(app_ctx, rows, ["id", "name", "weight"], fmt=format)


@app.command("distribute")
def distribute_cmd(
    ctx: typer.Context,
    month: Optional[str] = typer.Option(None, "--month", help="Month name or number, current year."),
    format: Optional[str] = typer.Option(None, "--format"),
) -> None:
    """Distribute the task catalog over the selected month and list the assignments."""
    app_ctx = get_ctx(ctx)
    _distribute(app_ctx, month)
    print_rows(app_ctx, app_ctx.service.list_assignments(), ["date", "task", "person_id", "person"], fmt=format)


@app.command("totals")
def totals_cmd(
    ctx: typer.Context,
    month: Optional[str] = typer.Option(None, "--month"),
    format: Optional[str] = typer.Option(None, "--format"),
) -> None:
    """Total assigned weight per person for the month."""
    app_ctx = get_ctx(ctx)
    _distribute(app_ctx, month)
    print_rows(app_ctx, app_ctx.service.totals(), ["person_id", "name", "total"], fmt=format)


@app.command("calendar")
def calendar_cmd(
    ctx: typer.Context,
    month: Optional[str] = typer.Option(None, "--month"),
    format: Optional[str] = typer.Option(None, "--format"),
) -> None:
    """Day-by-day view: absent people and the tasks of each day."""
    app_ctx = get_ctx(ctx)
    _distribute(app_ctx, month)
    fmt = _ensure_format(format or app_ctx.formatter)
    days = app_ctx.service.calendar()
    if fmt != "table":
        rows = [
            {
                "date": day["date"],
                "label": day["label"],
                "absent": day["absent"],
                "assignments": [f"{entry['task']} - {entry['person']}" for entry in day["assignments"]],
            }
            for day in days
        ]
        print_rows(app_ctx, rows, ["date", "label", "absent", "assignments"], fmt=fmt)
        return
    for day in days:
        typer.echo(day["label"])
        for name in day["absent"]:
            typer.echo(f"  {app_ctx.localizer.text('person.absent', name=name)}")
        for entry in day["assignments"]:
            typer.echo(f"  {entry['task']} - {entry['person']}")


@roster_app.command("export")
def roster_export(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Destination JSON file."),
) -> None:
    app_ctx = get_ctx(ctx)
    target = app_ctx.service.export_roster(path)
    typer.echo(app_ctx.localizer.text("roster.exported", path=target))


@config_app.command("show")
def config_show(
    ctx: typer.Context,
    format: Optional[str] = typer.Option(None, "--format"),
) -> None:
    app_ctx = get_ctx(ctx)
    cfg = app_ctx.config
    rows = [
        {"section": "general", "key": "default_locale", "value": cfg.general.default_locale},
        {"section": "general", "key": "name_width", "value": cfg.general.name_width},
        {"section": "general", "key": "seed_defaults", "value": cfg.general.seed_defaults},
        {"section": "general", "key": "default_color", "value": cfg.general.default_color},
        {"section": "general", "key": "day_format", "value": cfg.general.day_format},
        {"section": "tasks", "key": "min_weight", "value": cfg.tasks.min_weight},
        {"section": "tasks", "key": "max_weight", "value": cfg.tasks.max_weight},
        {"section": "history", "key": "undo_depth", "value": cfg.history.undo_depth},
    ]
    print_rows(app_ctx, rows, ["section", "key", "value"], fmt=format)


@app.command("serve")
def serve_cmd(
    ctx: typer.Context,
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    from .webapp.app import create_app

    app_ctx = get_ctx(ctx)
    web_app = create_app(
        config_path=str(app_ctx.config_path),
        roster_path=str(app_ctx.roster_path) if app_ctx.roster_path else None,
        config=app_ctx.config,
    )
    uvicorn.run(web_app, host=host, port=port, log_level="info")


# entry point
def main_entry() -> None:
    try:
        app()
    except UsageError as exc:
        typer.secho(str(exc), err=True)
        raise SystemExit(2)
    except ValidationError as exc:
        typer.secho(str(exc), err=True)
        raise SystemExit(3)
    except CorveeError as exc:
        typer.secho(str(exc), err=True)
        raise SystemExit(exc.code)
    except Exception as exc:  # pragma: no cover
        typer.secho(f"Internal error: {exc}", err=True)
        raise SystemExit(6)
