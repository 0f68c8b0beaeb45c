"""Test configuration and fixtures."""

from pathlib import Path
from typing import Generator

import pytest
from git import Actor, Repo


@pytest.fixture
def test_env(tmp_path: Path) -> Generator[tuple[Path, Path], None, None]:
    """Create a test environment with local and remote repositories.

    The local repository is on ``main`` and has:
    - ``feature/alive``: pushed and still on the remote
    - ``feature/gone``: pushed, merged, then deleted on the remote
    - ``feature/local``: never pushed, with a commit main does not have

    Returns:
        Tuple of (local_repo_path, remote_repo_path)
    """
    remote_path = tmp_path / "remote"
    local_path = tmp_path / "local"
    remote_path.mkdir()
    local_path.mkdir()

    remote_repo = Repo.init(remote_path, bare=True)
    local_repo = Repo.init(local_path)

    author = Actor("Test User", "test@example.com")
    local_repo.config_writer().set_value("user", "name", author.name).release()
    local_repo.config_writer().set_value("user", "email", author.email).release()

    readme = local_path / "README.md"
    readme.write_text("# Test Repository")
    local_repo.index.add(["README.md"])
    local_repo.index.commit("Initial commit", author=author)

    # Whatever init.defaultBranch says, the branch is called main from here on
    local_repo.git.branch("-M", "main")
    main_branch = local_repo.heads.main

    origin = local_repo.create_remote("origin", url=str(remote_path))
    origin.push("main")
    main_branch.set_tracking_branch(origin.refs.main)
    # `git remote show origin` reports the bare repository's HEAD
    remote_repo.git.symbolic_ref("HEAD", "refs/heads/main")

    local_repo.create_head("feature/alive")
    origin.push("feature/alive")

    local_repo.create_head("feature/gone")
    origin.push("feature/gone")
    origin.push(":feature/gone")

    local_branch = local_repo.create_head("feature/local")
    local_branch.checkout()
    (local_path / "local.txt").write_text("Unpushed work")
    local_repo.index.add(["local.txt"])
    local_repo.index.commit("Add local work", author=author)

    main_branch.checkout()

    yield local_path, remote_path
