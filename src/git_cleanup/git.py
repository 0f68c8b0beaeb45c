"""Git command execution."""

from pathlib import Path

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo


class GitError(Exception):
    """Git operation error."""


class GitRunner:
    """Runs git commands inside a working tree and returns their output."""

    def __init__(self, path: Path) -> None:
        """Initialize runner."""
        try:
            self.repo: Repo = Repo(path)
            if self.repo.bare:
                raise GitError("Cannot operate on bare repository")
        except (GitCommandError, ValueError, InvalidGitRepositoryError, NoSuchPathError) as err:
            raise GitError(f"Failed to open repository: {err}") from err

    @staticmethod
    def format_command(*args: str) -> str:
        """Render a git invocation the way it would be typed in a shell."""
        return " ".join(("git", *args))

    def run(self, *args: str, ignore_stderr: bool = False) -> str:
        """Run a git command and return its standard output.

        Args:
            *args: Arguments passed to git
            ignore_stderr: Accept diagnostic output on a successful run

        Raises:
            GitError: If git exits non-zero, or writes to stderr and
                ignore_stderr is not set
        """
        try:
            _, stdout, stderr = self.repo.git.execute(["git", *args], with_extended_output=True)
        except GitCommandError as err:
            raise GitError(f"Error: {err}") from err
        if stderr and not ignore_stderr:
            raise GitError(f"Stderr: {stderr}")
        return stdout
