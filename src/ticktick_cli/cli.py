"""tt - a fast TickTick CLI with inline shorthand."""

import logging
import secrets
import sys
from datetime import date

import click
import requests

from .adapters.ticktick_api import (
    AuthenticationError,
    TickTickAdapter,
    TickTickAPIError,
    authorization_url,
    exchange_code,
    require_credentials,
)
from .config import CONFIG_FILE, TOKEN_FILE, Config, Tokens, load_config
from .core.projects import ListNotFoundError, filter_projects_by_name
from .core.shorthand import WHEN_ALIASES, WhenFilter
from .core.tasks import InvalidFilterError
from .output import (
    render_project,
    render_project_data,
    render_projects,
    render_task,
    render_tasks,
)
from .workflows import (
    AddOptions,
    ListOptions,
    ProjectChanges,
    TaskChanges,
    TaskInputError,
    TaskNotFoundError,
    add_task,
    complete_task,
    create_project,
    delete_task,
    list_tasks,
    update_project,
    update_task,
)

CLI_ERRORS = (
    AuthenticationError,
    TickTickAPIError,
    ListNotFoundError,
    TaskNotFoundError,
    TaskInputError,
    InvalidFilterError,
    requests.RequestException,
)

OUTPUT_CHOICE = click.Choice(["human", "json"], case_sensitive=False)


def _fail(error: Exception) -> None:
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


def _adapter(ctx: click.Context) -> TickTickAdapter:
    return TickTickAdapter(config=ctx.obj["config"])


def _output_format(ctx: click.Context, output: str | None) -> str:
    config: Config = ctx.obj["config"]
    return (output or config.output).lower()


@click.group()
@click.version_option(package_name="ticktick-cli")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, debug: bool):
    """tt - TickTick from the terminal."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.WARNING,
    )
    ctx.ensure_object(dict)
    ctx.obj.setdefault("config", load_config())


# ============== auth ==============


@main.group()
def auth():
    """Log in to TickTick and manage stored tokens."""
    pass


@auth.command("login")
@click.pass_context
def auth_login(ctx):
    """Authenticate with TickTick (OAuth)."""
    config: Config = ctx.obj["config"]
    try:
        require_credentials(config)

        click.echo("Opening browser for TickTick authorization...")
        click.launch(authorization_url(config, secrets.token_urlsafe(16)))
        click.echo("\nAfter authorizing, you'll be redirected to a page that won't load.")
        click.echo("Copy the 'code' parameter from the URL.\n")

        code = click.prompt("Paste the code here", default="", show_default=False).strip()
        if not code:
            raise AuthenticationError("No code provided")

        click.echo("Exchanging code for tokens...")
        exchange_code(config, code).save()
    except CLI_ERRORS as e:
        _fail(e)

    click.echo("Authentication successful!")


@auth.command("logout")
def auth_logout():
    """Forget stored tokens."""
    if Tokens.clear():
        click.echo("Logged out.")
    else:
        click.echo("Not logged in.")


@auth.command("status")
def auth_status():
    """Show whether tokens are stored."""
    tokens = Tokens.load()
    if tokens.access_token:
        click.echo(f"Authenticated (tokens in {TOKEN_FILE})")
    else:
        click.echo("Not authenticated. Run 'tt auth login'.")
    click.echo(f"Config file: {CONFIG_FILE}")


# ============== task ==============


@main.group()
def task():
    """Add, list, update, complete and delete tasks."""
    pass


@task.command("add")
@click.argument("title", nargs=-1)
@click.option("--content", default=None)
@click.option("--desc", default=None)
@click.option("--project-id", default=None)
@click.option("--list", "list_name", default=None, help="List name (fuzzy match)")
@click.option("--start-date", default=None)
@click.option("--due-date", default=None)
@click.option("--time-zone", default=None)
@click.option("--all-day/--no-all-day", default=None)
@click.option("--priority", type=int, default=None)
@click.option("--tags", multiple=True)
@click.option("--reminders", multiple=True)
@click.option("--repeat-flag", default=None)
@click.option("--sort-order", type=int, default=None)
@click.option("--stdin", "from_stdin", is_flag=True, help="Read the title from stdin")
@click.option("--output", type=OUTPUT_CHOICE, default=None)
@click.pass_context
def task_add(ctx, title, from_stdin: bool, output: str | None, **opts):
    """
    Add a task. Shorthand in TITLE is understood:

    \b
      !high !medium !low !none   priority
      ~List                      target list
      #tag                       tag
      today, fri, next week, feb 1, 6/01, 2026-03-01   due date
    """
    stdin = click.get_text_stream("stdin")
    if from_stdin or (not title and not stdin.isatty()):
        raw = stdin.read()
    else:
        raw = " ".join(title)

    options = AddOptions(
        project_id=opts["project_id"],
        list_name=opts["list_name"],
        content=opts["content"],
        desc=opts["desc"],
        start_date=opts["start_date"],
        due_date=opts["due_date"],
        time_zone=opts["time_zone"],
        all_day=opts["all_day"],
        priority=opts["priority"],
        tags=list(opts["tags"]),
        reminders=list(opts["reminders"]),
        repeat_flag=opts["repeat_flag"],
        sort_order=opts["sort_order"],
    )

    try:
        created = add_task(
            _adapter(ctx),
            raw,
            date.today(),
            options,
            default_list=ctx.obj["config"].default_list,
        )
    except CLI_ERRORS as e:
        _fail(e)

    if _output_format(ctx, output) == "json":
        click.echo(render_task(created))
    else:
        click.echo(f"Task created: {created.title}")
        click.echo(f"ID: {created.id or ''}")


@task.command("list")
@click.argument("query", nargs=-1)
@click.option("--project-id", default=None)
@click.option("--list", "list_name", default=None, help="List name (fuzzy match)")
@click.option("--status", default=None, help="done/completed or todo/open")
@click.option("--priority", type=int, default=None)
@click.option("--tags", multiple=True)
@click.option(
    "--when",
    type=click.Choice(sorted(WHEN_ALIASES), case_sensitive=False),
    default=None,
)
@click.option("--limit", type=int, default=0, help="0 = no limit")
@click.option("--output", type=OUTPUT_CHOICE, default=None)
@click.pass_context
def task_list(ctx, query, project_id, list_name, status, priority, tags, when, limit, output):
    """
    List tasks. QUERY accepts the same shorthand as add, plus
    today / tomorrow / week / "this week" as date filters.
    """
    options = ListOptions(
        project_id=project_id,
        list_name=list_name,
        status=status,
        priority=priority,
        tags=list(tags),
        when=WhenFilter.from_token(when) if when else None,
        limit=limit,
    )

    try:
        tasks = list_tasks(_adapter(ctx), " ".join(query), date.today(), options)
    except CLI_ERRORS as e:
        _fail(e)

    click.echo(render_tasks(tasks, _output_format(ctx, output)))


@task.command("update")
@click.argument("task_id")
@click.option("--project-id", default=None)
@click.option("--list", "list_name", default=None)
@click.option("--title", default=None)
@click.option("--content", default=None)
@click.option("--desc", default=None)
@click.option("--start-date", default=None)
@click.option("--due-date", default=None)
@click.option("--time-zone", default=None)
@click.option("--priority", type=int, default=None)
@click.option("--reminders", multiple=True)
@click.option("--repeat-flag", default=None)
@click.option("--sort-order", type=int, default=None)
@click.option("--output", type=OUTPUT_CHOICE, default=None)
@click.pass_context
def task_update(ctx, task_id, project_id, list_name, output, reminders, **fields):
    """Update fields of an existing task."""
    changes = TaskChanges(reminders=list(reminders), **fields)
    try:
        updated = update_task(_adapter(ctx), task_id, changes, project_id, list_name)
    except CLI_ERRORS as e:
        _fail(e)

    if _output_format(ctx, output) == "json":
        click.echo(render_task(updated))
    else:
        click.echo(f"Task updated: {updated.title}")


@task.command("complete")
@click.argument("task_id")
@click.option("--project-id", default=None)
@click.option("--list", "list_name", default=None)
@click.option("--quiet", is_flag=True, help="Print nothing on success")
@click.pass_context
def task_complete(ctx, task_id, project_id, list_name, quiet: bool):
    """Mark a task as completed."""
    try:
        complete_task(_adapter(ctx), task_id, project_id, list_name)
    except CLI_ERRORS as e:
        _fail(e)

    if not quiet:
        click.echo(f"Task completed: {task_id}")


@task.command("delete")
@click.argument("task_id")
@click.option("--project-id", default=None)
@click.option("--list", "list_name", default=None)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def task_delete(ctx, task_id, project_id, list_name, yes: bool):
    """Delete a task."""
    if not yes and not click.confirm(f"Are you sure you want to delete task '{task_id}'?"):
        click.echo("Cancelled.")
        return

    try:
        delete_task(_adapter(ctx), task_id, project_id, list_name)
    except CLI_ERRORS as e:
        _fail(e)

    click.echo(f"Task deleted: {task_id}")


task.add_command(task_add, name="new")
task.add_command(task_list, name="ls")
task.add_command(task_update, name="edit")
task.add_command(task_complete, name="done")
task.add_command(task_delete, name="rm")
task.add_command(task_delete, name="del")


# ============== project ==============


@main.group()
def project():
    """Create, inspect, update and delete lists."""
    pass


@project.command("add")
@click.argument("name")
@click.option("--color", default=None)
@click.option("--view-mode", default=None, help="list, kanban or timeline")
@click.option("--kind", default=None, help="TASK or NOTE")
@click.option("--group-id", default=None)
@click.option("--output", type=OUTPUT_CHOICE, default=None)
@click.pass_context
def project_add(ctx, name, color, view_mode, kind, group_id, output):
    """Create a list."""
    try:
        created = create_project(_adapter(ctx), name, color, view_mode, kind, group_id)
    except CLI_ERRORS as e:
        _fail(e)

    if _output_format(ctx, output) == "json":
        click.echo(render_project(created))
    else:
        click.echo(f"Project created: {created.name}")
        click.echo(f"ID: {created.id or ''}")


@project.command("list")
@click.option("--name", default=None, help="Only lists whose name contains this text")
@click.option("--output", type=OUTPUT_CHOICE, default=None)
@click.pass_context
def project_list(ctx, name, output):
    """List all lists."""
    try:
        projects = _adapter(ctx).get_projects()
    except CLI_ERRORS as e:
        _fail(e)

    projects = filter_projects_by_name(projects, name)
    click.echo(render_projects(projects, _output_format(ctx, output)))


@project.command("get")
@click.argument("project_id")
@click.option("--output", type=OUTPUT_CHOICE, default=None)
@click.pass_context
def project_get(ctx, project_id, output):
    """Show one list."""
    try:
        found = _adapter(ctx).get_project(project_id)
    except CLI_ERRORS as e:
        _fail(e)

    if _output_format(ctx, output) == "json":
        click.echo(render_project(found))
    else:
        click.echo(f"Project: {found.name}")
        click.echo(f"ID: {found.id or ''}")


@project.command("data")
@click.argument("project_id")
@click.option("--output", type=OUTPUT_CHOICE, default=None)
@click.pass_context
def project_data(ctx, project_id, output):
    """Show a list with its tasks and columns."""
    try:
        data = _adapter(ctx).get_project_data(project_id)
    except CLI_ERRORS as e:
        _fail(e)

    click.echo(render_project_data(data, _output_format(ctx, output)))


@project.command("update")
@click.argument("project_id")
@click.option("--name", default=None)
@click.option("--color", default=None)
@click.option("--view-mode", default=None)
@click.option("--kind", default=None)
@click.option("--sort-order", type=int, default=None)
@click.pass_context
def project_update(ctx, project_id, **fields):
    """Update fields of an existing list."""
    try:
        updated = update_project(_adapter(ctx), project_id, ProjectChanges(**fields))
    except CLI_ERRORS as e:
        _fail(e)

    click.echo(f"Project updated: {updated.name}")


@project.command("delete")
@click.argument("project_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def project_delete(ctx, project_id, yes: bool):
    """Delete a list and its tasks."""
    adapter = _adapter(ctx)
    try:
        found = adapter.get_project(project_id)
        if not yes and not click.confirm(
            f"Are you sure you want to delete project '{found.name}'?"
        ):
            click.echo("Cancelled.")
            return
        adapter.delete_project(project_id)
    except CLI_ERRORS as e:
        _fail(e)

    click.echo(f"Project deleted: {found.name}")


project.add_command(project_add, name="new")
project.add_command(project_list, name="ls")
project.add_command(project_update, name="edit")
project.add_command(project_delete, name="rm")
project.add_command(project_delete, name="del")


if __name__ == "__main__":
    main()
