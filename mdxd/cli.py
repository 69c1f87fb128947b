"""mdxbuild CLI.

Builds documents from the command line and starts the daemon.
"""

import asyncio
import sys
from pathlib import Path

import click

from mdx_library import MDXBuildError
from mdx_library import default_cache
from mdx_library.config import load_config

from .models import FileBuildRequest
from .services import BuildService


@click.group()
def cli():
    """mdxbuild - Compile Markdown and MDX documents."""
    pass


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--group", default=None, help="Cache group (default: configured default group)")
@click.option("--config-hash", default=None, help="Configuration fingerprint (default: derived from options)")
@click.option("--format", "format_", type=click.Choice(["md", "mdx"]), default=None, help="Syntax format")
@click.option(
    "--output-format",
    type=click.Choice(["program", "function-body"]),
    default=None,
    help="Shape of the emitted program",
)
@click.option("--development/--production", default=None, help="Emit source locations on elements")
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None, help="Write the program to a file")
@click.option("--deps", is_flag=True, help="Print included files to stderr")
def build(
    file: str,
    group: str | None,
    config_hash: str | None,
    format_: str | None,
    output_format: str | None,
    development: bool | None,
    output: str | None,
    deps: bool,
):
    """Compile FILE and print the program."""
    request = FileBuildRequest(
        path=file,
        group=group,
        config_hash=config_hash,
        format=format_,
        output_format=output_format,
        development=development,
    )
    service = BuildService(cache=default_cache, settings=load_config())

    try:
        outcome = asyncio.run(service.build_file(request))
    except MDXBuildError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for message in outcome.file.messages:
        click.echo(f"{file}: {message}", err=True)

    if output:
        Path(output).write_text(outcome.file.value, encoding="utf-8")
        click.echo(f"Wrote {output}", err=True)
    else:
        click.echo(outcome.file.value)

    if deps:
        for dependency in outcome.dependencies:
            click.echo(dependency, err=True)


@cli.command()
@click.option("--host", default=None, help="Listen address (default: configured host)")
@click.option("--port", type=int, default=None, help="Listen port (default: configured port)")
def serve(host: str | None, port: int | None):
    """Start the mdxd daemon."""
    from .__main__ import main as run_daemon

    run_daemon(host=host, port=port)


def main():
    """Entry point for the mdxbuild command."""
    cli()


if __name__ == "__main__":
    main()
