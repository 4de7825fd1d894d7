"""CLI entry point for the work log."""

from __future__ import annotations

from datetime import timedelta

import click

from .core.errors import WtimeError
from .observability.logger import bind_command, get_logger

log = get_logger(__name__)


def _format_duration(duration: timedelta) -> str:
    seconds = int(duration.total_seconds())
    sign = "-" if seconds < 0 else ""
    hours, rest = divmod(abs(seconds), 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{sign}{hours} hours, {minutes} minutes and {seconds} seconds"


def _worklog(ctx: click.Context):
    return ctx.find_root().obj["worklog"]


@click.group(invoke_without_command=True)
@click.option("--config", default=None, help="Config file path (TOML)")
@click.option("--db", default=None, help="SQLite database file override")
@click.pass_context
def main(ctx: click.Context, config: str | None, db: str | None) -> None:
    """Record work sessions and report worked time.

    Without a command, prints the day and week summary.
    """
    from .main import open_worklog

    ctx.ensure_object(dict)
    overrides: dict = {}
    if db:
        overrides["store"] = {"path": db, "url": ""}

    try:
        worklog = open_worklog(
            config_path=config, overrides=overrides, clock=ctx.obj.get("clock"),
        )
    except WtimeError as exc:
        raise click.ClickException(str(exc)) from exc
    ctx.obj["worklog"] = worklog
    ctx.call_on_close(worklog.close)

    if ctx.invoked_subcommand is None:
        ctx.invoke(summary)


@main.command()
@click.pass_context
def checkin(ctx: click.Context) -> None:
    """Start counting working time."""
    bind_command("checkin")
    try:
        stamp = _worklog(ctx).sessions.check_in()
    except WtimeError as exc:
        log.warning("checkin_rejected", error=str(exc))
        raise click.ClickException(str(exc)) from exc

    log.info("checked_in", stamp_id=stamp.id)
    click.echo(f"Checked in at {stamp.timestamp:%H:%M}")


@main.command()
@click.pass_context
def checkout(ctx: click.Context) -> None:
    """Stop counting working time and show the session length."""
    bind_command("checkout")
    worklog = _worklog(ctx)
    try:
        stamp = worklog.sessions.check_out()
        worked = worklog.reporter.last_session(stamp)
    except WtimeError as exc:
        log.warning("checkout_rejected", error=str(exc))
        raise click.ClickException(str(exc)) from exc

    log.info("checked_out", stamp_id=stamp.id)
    click.echo(f"Checked out at {stamp.timestamp:%H:%M}")
    if worked is not None:
        click.echo(f"You worked {_format_duration(worked)}")


@main.command()
@click.pass_context
def summary(ctx: click.Context) -> None:
    """Print worked time for today and this week."""
    bind_command("summary")
    try:
        result = _worklog(ctx).reporter.summary()
    except WtimeError as exc:
        log.error("summary_failed", error=str(exc))
        raise click.ClickException(str(exc)) from exc

    click.echo(
        f"You worked {_format_duration(result.day_total)} today "
        f"(since {result.day_start:%Y-%m-%d %H:%M} UTC)"
    )
    # Suppressed on the first day of the week
    if result.week_total is not None:
        click.echo(
            f"You worked {_format_duration(result.week_total)} this week "
            f"(since {result.week_start:%Y-%m-%d %H:%M} UTC)"
        )


if __name__ == "__main__":
    main()
