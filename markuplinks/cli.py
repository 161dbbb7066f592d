import logging
import sys
from typing import Optional, Tuple

import click
import yaml

from markuplinks import __version__
from markuplinks.config import Config, load_config
from markuplinks.dispatcher import Dialect, FoundLink
from markuplinks.scanner import scan_file
from markuplinks.utils import set_console_handlers


def config_logger(verbose: bool, debug: bool):
    app_logger = logging.getLogger("markuplinks")
    app_logger.propagate = False
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
    set_console_handlers(app_logger, verbose, debug)


def print_version():
    click.echo(__version__)


def cmd_print_version(ctx: click.Context, param: click.Parameter, value: str):
    if not value or ctx.resilient_parsing:
        return
    print_version()
    ctx.exit()


def format_link(filepath: str, link: FoundLink) -> str:
    ret = "%s:%d:%d: %s %s <%s>" % (
        filepath,
        link.line,
        link.column,
        link.dialect.value,
        link.name,
        link.destination,
    )
    if link.title:
        ret += ' "%s"' % link.title
    return ret


@click.command()
@click.argument("files", nargs=-1, type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "-c", "configfile", type=click.Path(exists=True), default=None)
@click.option(
    "--dialect",
    "-D",
    "dialects",
    type=click.Choice([d.value for d in Dialect]),
    multiple=True,
    help="Dialect to look for (repeatable, default: all).",
)
@click.option("--verbose", "-v", "verbose", type=bool, default=False, is_flag=True)
@click.option("--debug", "-d", "debug", type=bool, default=False, is_flag=True)
@click.option(
    "--version",
    "-V",
    "version",
    help="Show version and exit.",
    is_flag=True,
    callback=cmd_print_version,
    is_eager=True,
    expose_value=False,
)
def extract_links(
    files: Tuple[str, ...],
    configfile: Optional[str],
    dialects: Tuple[str, ...],
    verbose: bool,
    debug: bool,
):
    """Extract hyperlinks from HTML and reStructuredText sources.

    \b
    FILES are the text files to scan (read as UTF-8)
    """
    if debug:
        verbose = True
    config_logger(verbose, debug)
    if configfile:
        with open(configfile, "r") as f:
            config_data = f.read()
        config_dict = yaml.safe_load(config_data) or {}
        config = load_config(config_dict)
    else:
        config = Config()
    if dialects:
        config.scan_config.dialects = [Dialect(d) for d in dialects]

    has_errors = False
    for filepath in files:
        links, diagnostics = scan_file(filepath, config=config.scan_config)
        for link in links:
            click.echo(format_link(filepath, link))
        has_errors = has_errors or bool(diagnostics)

    if config.strict_mode and has_errors:
        sys.exit(1)


def main():
    extract_links()


if __name__ == "__main__":
    main()
