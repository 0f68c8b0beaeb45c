"""Branch reconciliation: find local branches whose remote is gone and delete them."""

import re
from dataclasses import dataclass, field
from typing import Optional

from rich.console import Console

from git_cleanup.git import GitError, GitRunner

# Matches the "HEAD branch: <name>" line of `git remote show origin`.
HEAD_BRANCH_PATTERN = re.compile(r"HEAD\sbranch:\s(.+)")
CURRENT_BRANCH_MARKER = "*"
NOT_FULLY_MERGED = "not fully merged"


class CleanupError(Exception):
    """Cleanup stopped before touching any branch."""


class MainBranchNotFoundError(CleanupError):
    """The main branch could not be determined."""


class NotOnMainBranchError(CleanupError):
    """The checked out branch is not the main branch."""


@dataclass(frozen=True)
class CleanupOptions:
    """Flags for a single cleanup run."""

    dry_run: bool = False
    force: bool = False
    head: Optional[str] = None


@dataclass
class DeletionResult:
    """Outcome of the deletion pipeline."""

    deleted: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def deleted_count(self) -> int:
        return len(self.deleted)


def sanitize_branch_output(output: str) -> list[str]:
    """Split `git branch` output into whitespace-free branch tokens."""
    tokens = (re.sub(r"\s", "", line) for line in output.splitlines())
    return [token for token in tokens if token]


def resolve_main_branch(runner: GitRunner, console: Console, head: Optional[str] = None) -> str:
    """Return the main branch name.

    An explicit head override wins without asking the remote. Otherwise the
    name is taken from the ``HEAD branch:`` line of ``git remote show origin``.

    Raises:
        MainBranchNotFoundError: If the remote output has no HEAD branch line
    """
    if head:
        return head

    remote_info = runner.run("remote", "show", "origin")
    match = HEAD_BRANCH_PATTERN.search(remote_info)
    if not match:
        raise MainBranchNotFoundError(
            "Cannot find head branch! Use --head flag to manually override head branch. "
            "Also if not already done, try switching to your main branch, then try again."
        )

    main_branch = match.group(1).strip()
    console.print(f"Detected '{main_branch}' as default branch.")
    return main_branch


def find_current_branch(local_branches: list[str]) -> Optional[str]:
    """Return the token carrying the checked-out marker, if any."""
    return next((branch for branch in local_branches if CURRENT_BRANCH_MARKER in branch), None)


def ensure_on_main_branch(local_branches: list[str], main_branch: str) -> None:
    """Stop the run unless the main branch is checked out."""
    current = find_current_branch(local_branches)
    if current is None or current.replace(CURRENT_BRANCH_MARKER, "", 1) != main_branch:
        raise NotOnMainBranchError(
            f"Not on {main_branch} branch! Switch to {main_branch} branch first and then try again. "
            f"If {main_branch} is not your repository's default branch, pass it with --head."
        )


def find_stale_branches(local_branches: list[str], remote_branches: list[str], main_branch: str) -> list[str]:
    """Return local branches that no remote branch name ends with.

    Matching is by suffix, so a local branch is kept when any remote name merely
    ends with it (``a`` survives next to ``origin/feature-a``).
    """
    current_main = f"{CURRENT_BRANCH_MARKER}{main_branch}"
    return [
        branch
        for branch in local_branches
        if branch != current_main and not any(remote.endswith(branch) for remote in remote_branches)
    ]


def explain_deletion_error(message: str, branch: str, main_branch: str) -> str:
    """Turn git's "not fully merged" complaint into advice."""
    if NOT_FULLY_MERGED in message:
        return (
            f"ERROR: Git reports that branch {branch} is not fully merged yet. "
            "Execute 'git pull' and try cleanup again. If that doesn't help then it seems there were "
            f"branch commits that didn't make it into {main_branch}."
        )
    return message


def delete_branches(
    runner: GitRunner,
    branches: list[str],
    main_branch: str,
    console: Console,
    dry_run: bool = False,
    force: bool = False,
) -> DeletionResult:
    """Delete branches one at a time, carrying on past failures."""
    result = DeletionResult()
    delete_flag = "-D" if force else "-d"

    for branch in branches:
        console.print(f"Deleting {branch} ...")
        command = ("branch", delete_flag, branch)

        if dry_run:
            console.print(f"DRY RUN: Would execute '{runner.format_command(*command)}' now.", style="dim")
            result.skipped.append(branch)
            continue

        try:
            runner.run(*command)
        except GitError as err:
            result.failed.append(branch)
            console.print(explain_deletion_error(str(err), branch, main_branch), style="red", markup=False)
            continue
        result.deleted.append(branch)

    return result


def deleted_summary(count: int) -> str:
    """Final report line."""
    noun = "branch" if count == 1 else "branches"
    return f"Deleted {count} local {noun}!"


def run_cleanup(runner: GitRunner, options: CleanupOptions, console: Console) -> Optional[DeletionResult]:
    """Run the whole cleanup.

    Returns:
        The deletion outcome, or None when no branch needed deleting.

    Raises:
        MainBranchNotFoundError: If the main branch cannot be determined
        NotOnMainBranchError: If the main branch is not checked out
        GitError: If listing or fetching branches fails
    """
    main_branch = resolve_main_branch(runner, console, options.head)

    local_branches = sanitize_branch_output(runner.run("branch"))
    ensure_on_main_branch(local_branches, main_branch)

    runner.run("fetch", "-p", ignore_stderr=True)
    remote_branches = sanitize_branch_output(runner.run("branch", "-r"))

    stale = find_stale_branches(local_branches, remote_branches, main_branch)
    if not stale:
        console.print("[green]No local branches need to be deleted.[/green]")
        return None

    result = delete_branches(runner, stale, main_branch, console, dry_run=options.dry_run, force=options.force)
    console.print(deleted_summary(result.deleted_count))
    return result
