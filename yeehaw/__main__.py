"""Command line entry point for Yeehaw."""

import asyncio
import logging
import os
import sys
from collections.abc import Awaitable, Callable
from typing import TypeVar

import click

from yeehaw.config import Config
from yeehaw.dependencies import Dependencies
from yeehaw.models import RemoteEnvironment, SessionStatus, is_ssh_eligible, status_icon
from yeehaw.utils.console import ColorfulFormatter

logger = logging.getLogger(__name__)

T = TypeVar("T")


def configure_logging(level: str = "INFO", use_colors: bool = True) -> None:
    """Install the colorful formatter on the yeehaw logger."""
    if not sys.stderr.isatty():
        use_colors = False

    yeehaw_logger = logging.getLogger("yeehaw")
    yeehaw_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not yeehaw_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColorfulFormatter(use_colors=use_colors))
        yeehaw_logger.addHandler(handler)
        yeehaw_logger.propagate = False

    logging.getLogger("asyncssh").setLevel(logging.WARNING)


def _run(deps: Dependencies, work: Callable[[Dependencies], Awaitable[T]]) -> T:
    async def main() -> T:
        try:
            return await work(deps)
        finally:
            await deps.cleanup()

    return asyncio.run(main())


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log at DEBUG level.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Remote session reachability, path completion and pane signals."""
    config = Config.from_env()
    settings = config.settings
    configure_logging("DEBUG" if verbose else settings.log_level, settings.log_colors)
    ctx.obj = config


@cli.command()
@click.pass_obj
def hosts(config: Config) -> None:
    """List configured hosts and whether they are SSH-eligible."""
    for host in config.get_hosts():
        mark = "ssh" if is_ssh_eligible(host) else "-"
        click.echo(f"{host.name:<24} {mark:<4} {host.target if mark == 'ssh' else ''}")


@cli.command()
@click.pass_obj
def probe(config: Config) -> None:
    """Probe every eligible host for the managed session."""
    deps = Dependencies.from_config(config)

    async def work(d: Dependencies) -> None:
        await d.coordinator.refresh(force=True)

    _run(deps, work)
    for env in deps.coordinator.environment_states():
        click.echo(f"{env.host.name:<24} {env.state.value}")


@cli.command()
@click.pass_obj
def environments(config: Config) -> None:
    """List hosts where the managed session is running."""
    deps = Dependencies.from_config(config)

    async def work(d: Dependencies) -> None:
        await d.coordinator.refresh()

    _run(deps, work)
    for env in deps.coordinator.environments():
        click.echo(env.host.name)


@cli.command()
@click.option("--interval", type=float, default=None, help="Seconds between checks.")
@click.pass_obj
def watch(config: Config, interval: float | None) -> None:
    """Keep probing and print the available hosts after each batch."""
    deps = Dependencies.from_config(config)

    def show(envs: list[RemoteEnvironment]) -> None:
        click.echo(" ".join(env.host.name for env in envs) or "(none)")

    async def work(d: Dependencies) -> None:
        await d.coordinator.poll(interval or config.settings.poll_interval, show)

    try:
        _run(deps, work)
    except KeyboardInterrupt:
        pass


@cli.command()
@click.argument("path")
@click.option("--host", "host_name", default=None, help="Complete on this host over SSH.")
@click.pass_obj
def complete(config: Config, path: str, host_name: str | None) -> None:
    """Print directory completions for PATH."""
    host = None
    if host_name is not None:
        host = config.get_host(host_name)
        if host is None:
            raise click.BadParameter(f"unknown host {host_name!r}", param_hint="--host")

    deps = Dependencies.from_config(config)

    async def work(d: Dependencies) -> list[str]:
        return await d.completion_fetcher().complete(path, host)

    for name in _run(deps, work):
        click.echo(name)


@cli.command()
@click.argument("pane_id")
@click.pass_obj
def signal(config: Config, pane_id: str) -> None:
    """Show the current status signal for a tmux pane."""
    record = Dependencies.from_config(config).signals.read(pane_id)
    if record is None:
        click.echo("unknown")
        return
    click.echo(f"{status_icon(record.status)} {record.status.value}")


@cli.command()
@click.pass_obj
def sweep(config: Config) -> None:
    """Delete stale and malformed signal files."""
    removed = Dependencies.from_config(config).signals.sweep()
    click.echo(f"removed {removed}")


@cli.command()
@click.argument("status", type=click.Choice([s.value for s in SessionStatus]))
@click.option("--pane", "pane_id", default=None, help="Pane id (default: $TMUX_PANE).")
@click.pass_obj
def hook(config: Config, status: str, pane_id: str | None) -> None:
    """Record STATUS for the current tmux pane (assistant hook)."""
    pane = pane_id or os.getenv("TMUX_PANE") or "unknown"
    Dependencies.from_config(config).signals.write(pane, SessionStatus(status))
    logger.debug("Recorded %s for pane %s", status, pane)


if __name__ == "__main__":
    cli()
