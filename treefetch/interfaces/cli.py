"""Command-line interface for treefetch.

Sample input:
    $ treefetch https://github.com/acme/widgets/tree/main/docs --out downloads
    $ treefetch https://github.com/acme/widgets --auth octocat:ghp_xxx --timeout 10000

Expected output:
    ✅ Downloaded 2 file(s) from acme/widgets@main into downloads
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn

from ..models import DownloadMode, FetchOptions
from ..infrastructure.error_handler import ConfigError, FetchError
from .api import GitHubFetcher
from .config_file import load_config, merge_options


app = typer.Typer(
    name="treefetch",
    help="Download a directory, a file or a whole repository from GitHub by URL",
    add_completion=False,
)

console = Console()


def print_error(message: str) -> None:
    console.print(f"[bold red]❌ {escape(message)}[/bold red]")


def print_success(message: str) -> None:
    console.print(f"[bold green]✅ {escape(message)}[/bold green]")


@app.command()
def fetch(
    url: str = typer.Argument(..., help="GitHub URL of a repository, directory or file"),
    out: Optional[Path] = typer.Option(
        None, "--out", "-o", help="Output directory (default: current directory)"
    ),
    auth: Optional[str] = typer.Option(
        None, "--auth", "-a", help="Credential as username:token"
    ),
    always_use_auth: bool = typer.Option(
        False, "--always-use-auth", help="Send the credential with every request"
    ),
    timeout: Optional[int] = typer.Option(
        None, "--timeout", "-t", min=0, help="Abort if the network is unreachable this many ms"
    ),
    file_name: Optional[str] = typer.Option(
        None, "--file-name", "-f", help="Name of the downloaded file or archive"
    ),
    root_directory: Optional[str] = typer.Option(
        None, "--root-directory", "-r",
        help="Folder to nest a directory download under; 'false' to disable"
    ),
    force_per_file: bool = typer.Option(
        False, "--force-per-file", help="Download a repository root file by file instead of as an archive"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="JSON config file (default: ~/.treefetch.json)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Fetch the content at URL, keeping the remote directory structure."""

    try:
        values = merge_options(
            {
                "url": url,
                "out": out,
                "auth": auth,
                "always_use_auth": always_use_auth,
                "timeout": timeout,
                "file_name": file_name,
                "root_directory": root_directory,
                "force_per_file": force_per_file,
                "verbose": verbose,
            },
            load_config(config),
        )
        options = FetchOptions(**values)
    except ConfigError as e:
        print_error(e.message)
        raise typer.Exit(code=1)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Downloading", total=None)

        def on_progress(completed: int, expected_total: int) -> None:
            progress.update(task, completed=completed, total=expected_total)

        options.progress_callback = on_progress
        fetcher = GitHubFetcher.from_options(options)

        try:
            result = asyncio.run(fetcher.fetch_options(options))
        except FetchError as e:
            progress.stop()
            print_error(e.message)
            raise typer.Exit(code=1)

    if result.mode is DownloadMode.ARCHIVE:
        print_success(f"Downloaded archive of {result.repository} into {options.out}")
    else:
        print_success(
            f"Downloaded {result.stats.completed} file(s) from {result.repository} into {options.out}"
        )
    for entry in result.skipped_entries:
        console.print(f"[yellow]⚠ Skipped {escape(entry)}[/yellow]")


def main() -> None:
    app()
