"""Command-line interface for layout-keeper."""

import logging
import sys

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .config import DEFAULT_EXCLUDE, Config, parse_exclude
from .errors import ProtocolSetupError

console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Send log records to stderr, one line each."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
        force=True,
    )


def _show_help(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    click.echo(ctx.get_help(), err=True)
    ctx.exit(1)


@click.command(context_settings={"help_option_names": []})
@click.option("-x", "--width", type=int, required=True,
              help="Width, in pixels, of the original screen area")
@click.option("-y", "--height", type=int, required=True,
              help="Height, in pixels, of the original screen area")
@click.option("-r", "--refresh", type=int, default=5000, show_default=True,
              help="Interval, in milliseconds, between polls; windows are saved at this rate")
@click.option("-s", "--screen-timeout", type=int, default=2000, show_default=True,
              help="Quiet time, in milliseconds, after a screen event before windows are saved again")
@click.option("-t", "--settle-timeout", type=int, default=2000, show_default=True,
              help="Quiet time, in milliseconds, after the original screens return before restoring")
@click.option("-e", "--exclude", default=None,
              help="Comma separated window titles to leave alone "
                   f"(default: {','.join(DEFAULT_EXCLUDE)})")
@click.option("-a", "--raise", "raise_title", default=None,
              help="Title of a window to bring to the front when the original screens are lost")
@click.option("--raise-delay", type=int, default=0, show_default=True,
              help="Delay, in milliseconds, before raising that window")
@click.option("--fullscreen-delay", type=int, default=1000, show_default=True,
              help="Delay, in milliseconds, before fullscreen is set again on a restored window")
@click.option("--activate-refresh", type=int, default=3000, show_default=True,
              help="Delay, in milliseconds, between leaving and re-entering fullscreen on a raised window")
@click.option("-d", "--display", default=None, metavar="HOST:DPY",
              help="The X server to contact (default: $DISPLAY)")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.version_option(version=__version__)
@click.option("-h", "--help", is_flag=True, expose_value=False, is_eager=True,
              callback=_show_help, help="Display this message")
@click.pass_context
def cli(ctx: click.Context, width: int, height: int, refresh: int, screen_timeout: int,
        settle_timeout: int, exclude: str | None, raise_title: str | None, raise_delay: int,
        fullscreen_delay: int, activate_refresh: int, display: str | None, verbose: bool) -> int:
    """Restore window positions when the original screens come back.

    Window positions are saved while the screen has its original size.
    When the size changes (a dock is unplugged, say) and later returns,
    every saved window is moved back.
    """
    try:
        config = Config(
            original_width=width,
            original_height=height,
            poll_period_ms=refresh,
            capture_debounce_ms=screen_timeout,
            restore_settle_ms=settle_timeout,
            exclude=DEFAULT_EXCLUDE if exclude is None else parse_exclude(exclude),
            escalation_target=raise_title,
            escalation_delay_ms=raise_delay,
            fullscreen_settle_ms=fullscreen_delay,
            activate_refresh_ms=activate_refresh,
        )
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        raise click.UsageError(f"Invalid value for {field}: {error['msg']}", ctx=ctx) from e

    setup_logging(verbose)

    from .daemon import run_daemon

    try:
        run_daemon(config, display)
    except ProtocolSetupError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", highlight=False)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    try:
        rv = cli.main(args=argv, prog_name="layout-keeper", standalone_mode=False)
    except click.ClickException as e:
        e.show()
        return 1
    except click.Abort:
        return 1
    return rv if isinstance(rv, int) else 0


if __name__ == "__main__":
    sys.exit(main())
