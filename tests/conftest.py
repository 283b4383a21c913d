"""Shared fixtures: small git repositories built with GitPython."""

from pathlib import Path

import pytest
from git import Repo

HELLO_V1 = """function hello() {
  return "world";
}
"""

HELLO_V2 = """function hello() {
  // Added safety check for null
  if (!global) return "";
  return "world";
}
"""


def _commit(repo: Repo, file_path: Path, content: str, message: str):
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(content)
    repo.index.add([str(file_path)])
    return repo.index.commit(message)


@pytest.fixture
def create_commit():
    """Helper to write a file and commit it."""
    return _commit


@pytest.fixture
def temp_git_repo(tmp_path):
    """Create a basic temporary Git repository."""
    repo_path = tmp_path / "test_repo"
    repo_path.mkdir()
    repo = Repo.init(repo_path)
    with repo.config_writer() as config:
        config.set_value("user", "name", "Test User")
        config.set_value("user", "email", "test@example.com")
    return repo


@pytest.fixture
def hello_repo(temp_git_repo):
    """Repository where test.js has two commits: the function, then a null check."""
    repo = temp_git_repo
    repo_path = Path(repo.working_dir)
    test_file = repo_path / "test.js"

    first = _commit(repo, test_file, HELLO_V1, "Initial implementation")
    second = _commit(
        repo,
        test_file,
        HELLO_V2,
        "Add null safety check\n\nPrevents crash when global is undefined in some environments.",
    )

    return repo_path, test_file, first, second


@pytest.fixture
def plain_dir(tmp_path):
    """A directory that is not a git repository."""
    plain = tmp_path / "plain"
    plain.mkdir()
    (plain / "notes.js").write_text("function notes() {\n}\n")
    return plain
