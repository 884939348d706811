from __future__ import annotations

import json
import logging
from typing import Optional

import click
from tabulate import tabulate

from navlib import paths
from navlib.config import Config, ConfigError, load_config
import navlib.clients as clients
from navlib.errors import FetchError, format_config_error, format_error_message, suggest_troubleshooting_steps


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--json-output",
    "json_output",
    is_flag=True,
    help="Output JSON instead of tables (pretty-printed)",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose logging to stderr (what the CLI is doing)",
)
@click.pass_context
def cli(ctx: click.Context, json_output: bool, verbose: bool) -> None:
    """API Navigator CLI.

    Browse a path-addressed JSON API using configuration loaded via XDG or
    the NAVCTL_CONFIG environment variable. JSON output is always pretty-printed.
    """
    ctx.ensure_object(dict)
    ctx.obj["json"] = json_output
    ctx.obj["verbose"] = verbose

    # Configure logging once per process
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _load_config_or_exit(log: logging.Logger) -> Config:
    try:
        log.info("Loading config...")
        cfg = load_config()
        log.info("Loaded config from %s", getattr(cfg, "source_path", "<unknown>"))
    except ConfigError as e:
        click.echo(format_config_error(e), err=True)
        raise SystemExit(2)
    return cfg


def _auth_hint(auth_required: bool) -> None:
    if auth_required:
        click.echo("Authentication required: run 'navctl auth set' and retry.", err=True)


@cli.command("ls")
@click.argument("path", default="/")
@click.pass_context
def ls(ctx: click.Context, path: str) -> None:
    """List the children of PATH (e.g. /livingroom or '#/livingroom')."""
    log = logging.getLogger("navctl.ls")
    cfg = _load_config_or_exit(log)
    segments = paths.parse_user_path(path)

    try:
        log.info("Listing %s", paths.encode(segments))
        result = clients.list_path(cfg, segments)
        log.info("Found %d children", len(result["children"]))
    except FetchError as e:  # surface helpful error without stack
        error_msg = format_error_message(
            "list path", e, {"base_url": cfg.base_url, "path": paths.encode(segments)}
        )
        click.echo(error_msg, err=True)
        if e.status == 401:
            _auth_hint(True)
        if ctx.obj.get("verbose"):
            suggestions = suggest_troubleshooting_steps("list path", e)
            if suggestions:
                click.echo("\nTroubleshooting suggestions:", err=True)
                for suggestion in suggestions[:3]:  # Show top 3 suggestions
                    click.echo(f"  • {suggestion}", err=True)
        raise SystemExit(2)

    if ctx.obj.get("json"):
        click.echo(json.dumps(result, indent=2, sort_keys=True))
        _auth_hint(result.get("auth_required", False))
        return

    range_info = result["range"]
    if range_info["is_range"]:
        click.echo(f"{result['path']}: numeric range 0-100")
        if range_info["extras"]:
            click.echo(tabulate([[x] for x in range_info["extras"]], headers=["EXTRA"]))
        _auth_hint(result.get("auth_required", False))
        return

    if not result["children"]:
        click.echo(f"No children under {result['path']}")
        return

    rows = []
    for child in result["children"]:
        has_children = child["has_children"]
        rows.append([child["name"], "yes" if has_children else ("—" if has_children is None else "no")])
    log.info("Rendering %d children", len(rows))
    click.echo(tabulate(rows, headers=["NAME", "CHILDREN"]))
    _auth_hint(result.get("auth_required", False))


@cli.command("exec")
@click.argument("path")
@click.argument("code")
@click.option("--value", "value", default=None, help="Optional value sent as &value=")
@click.pass_context
def exec_command(ctx: click.Context, path: str, code: str, value: Optional[str]) -> None:
    """Send CODE to PATH as a POST command and print the response."""
    log = logging.getLogger("navctl.exec")
    cfg = _load_config_or_exit(log)
    segments = paths.parse_user_path(path)

    log.info("Sending code %r to %s", code, paths.encode(segments))
    result = clients.run_command(cfg, segments, code, value)

    if ctx.obj.get("json"):
        click.echo(json.dumps(result, indent=2, sort_keys=True))
    else:
        click.echo(result["label"])
        click.echo(result["response"])
    _auth_hint(result.get("auth_required", False))


# CACHE commands


@cli.group()
@click.pass_context
def cache(ctx: click.Context) -> None:  # noqa: D401
    """Listing cache commands."""
    pass


@cache.command("show")
@click.pass_context
def cache_show(ctx: click.Context) -> None:
    """Show cached listings."""
    log = logging.getLogger("navctl.cache")
    cfg = _load_config_or_exit(log)
    entries = clients.cached_listings(cfg)

    if ctx.obj.get("json"):
        click.echo(json.dumps({"cache_path": str(cfg.cache_path), "entries": entries}, indent=2, sort_keys=True))
        return

    if not entries:
        click.echo("Cache is empty")
        return

    rows = [[path, len(children)] for path, children in sorted(entries.items())]
    click.echo(tabulate(rows, headers=["PATH", "CHILDREN"]))


@cache.command("clear")
@click.pass_context
def cache_clear(ctx: click.Context) -> None:
    """Drop every cached listing."""
    log = logging.getLogger("navctl.cache")
    cfg = _load_config_or_exit(log)
    outcome = clients.clear_cache(cfg)
    log.info("Cache clear outcome: %s", outcome)
    if ctx.obj.get("json"):
        click.echo(json.dumps({"cleared": True, "persisted": outcome}, indent=2, sort_keys=True))
    else:
        click.echo(f"Cache cleared ({outcome})")


# AUTH commands


@cli.group()
@click.pass_context
def auth(ctx: click.Context) -> None:  # noqa: D401
    """Credential commands."""
    pass


@auth.command("set")
@click.option("--username", prompt=True, help="Basic auth username")
@click.option("--password", prompt=True, hide_input=True, help="Basic auth password")
@click.pass_context
def auth_set(ctx: click.Context, username: str, password: str) -> None:
    """Store credentials used for every request."""
    log = logging.getLogger("navctl.auth")
    cfg = _load_config_or_exit(log)
    clients.set_credentials(cfg, username, password)
    click.echo(f"Credentials stored for {username.strip() or '(empty username)'}")


@auth.command("clear")
@click.pass_context
def auth_clear(ctx: click.Context) -> None:
    """Forget stored credentials."""
    log = logging.getLogger("navctl.auth")
    cfg = _load_config_or_exit(log)
    clients.clear_credentials(cfg)
    click.echo("Credentials cleared")


# CONFIG commands


@cli.group("config")
@click.pass_context
def config_group(ctx: click.Context) -> None:  # noqa: D401
    """Configuration commands."""
    pass


@config_group.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show the resolved configuration."""
    log = logging.getLogger("navctl.config")
    cfg = _load_config_or_exit(log)

    if ctx.obj.get("json"):
        click.echo(cfg.to_json())
        return

    rows = [
        ["base_url", cfg.base_url],
        ["timeout", cfg.timeout if cfg.timeout is not None else "—"],
        ["cache_path", str(cfg.cache_path) if cfg.cache_path else "—"],
        ["credentials_path", str(cfg.credentials_path) if cfg.credentials_path else "—"],
        ["start_location", cfg.start_location],
        ["source_path", str(cfg.source_path) if cfg.source_path else "—"],
    ]
    click.echo(tabulate(rows, headers=["FIELD", "VALUE"]))


@cli.command("tui")
@click.option("--location", default=None, help="Start location, e.g. '#/livingroom'")
def tui(location: Optional[str]) -> None:
    """Open the interactive browser."""
    from navtui.app import run_tui  # local import: textual is heavy

    run_tui(location)


def main() -> None:  # entry point
    cli(standalone_mode=True)


if __name__ == "__main__":  # pragma: no cover
    main()
