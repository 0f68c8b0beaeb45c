"""Command line interface for git-cleanup."""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from git_cleanup.cleanup import CleanupOptions, MainBranchNotFoundError, NotOnMainBranchError, run_cleanup
from git_cleanup.git import GitError, GitRunner

app = typer.Typer(help="Delete local branches whose remote branch is gone", add_completion=False)
console = Console()


def get_runner(path: Path) -> GitRunner:
    """Get git runner for the repository."""
    try:
        return GitRunner(path)
    except GitError as err:
        console.print(f"[red]Error:[/red] {escape(str(err))}", highlight=False)
        raise typer.Exit(code=1) from err


def invocation_arguments(options: CleanupOptions, extra_args: list[str]) -> list[str]:
    """Arguments the run was started with, unrecognized ones last."""
    args = []
    if options.dry_run:
        args.append("--dry-run")
    if options.force:
        args.append("--force")
    if options.head:
        args.extend(["--head", options.head])
    return args + list(extra_args)


def announce_options(options: CleanupOptions) -> None:
    """Tell the user which flags are active."""
    if options.dry_run:
        console.print("[yellow]Doing dry run! Will not delete any branches.[/yellow]")
    if options.force:
        console.print("[yellow]Using force flag. Branches will be deleted with force.[/yellow]")
    if options.head:
        console.print(f"Using '{escape(options.head)}' as head branch.")


@app.command(
    context_settings={
        "allow_extra_args": True,
        "ignore_unknown_options": True,
        "help_option_names": ["-h", "--help"],
    }
)
def cleanup(
    ctx: typer.Context,
    path: Annotated[Path, typer.Option(help="Path to git repository")] = Path("."),
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Performs dry run which only logs what it WOULD do.")
    ] = False,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Branches will be force-deleted, use at own risk")
    ] = False,
    head: Annotated[Optional[str], typer.Option("--head", help="Manually override head branch")] = None,
) -> None:
    """Delete local branches that no longer exist on the remote.

    The main branch is detected from 'git remote show origin' unless --head is
    given, and it has to be checked out before anything is deleted.
    """
    console.print("Starting local branch cleanup ...")
    options = CleanupOptions(dry_run=dry_run, force=force, head=head)
    args = invocation_arguments(options, ctx.args)
    if args:
        console.print(f"  with arguments: {' '.join(args)}", markup=False, highlight=False)
    announce_options(options)

    runner = get_runner(path)
    try:
        run_cleanup(runner, options, console)
    except MainBranchNotFoundError as err:
        console.print(f"[red]ERROR:[/red] {err}")
        raise typer.Exit(code=1) from err
    except NotOnMainBranchError as err:
        console.print(str(err), style="yellow", markup=False)
        raise typer.Exit(code=1) from err
    except GitError as err:
        console.print(str(err), style="red", markup=False)
        raise typer.Exit(code=1) from err


if __name__ == "__main__":
    app()
