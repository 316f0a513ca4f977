import shutil
from pathlib import Path

import pytest
from git_helpers import HistoryRepo, commit_files, git, init_git_repo

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not found")


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.integration)
            item.add_marker(requires_git)


@pytest.fixture
def history_repo(tmp_path: Path) -> HistoryRepo:
    root = tmp_path / "history"
    root.mkdir()
    init_git_repo(root)

    v1 = commit_files(
        root,
        {
            "README.md": "version one\n",
            "src/app.py": "print('app')\n",
            "src/lib/util.py": "VALUE = 1\n",
        },
        "first",
    )
    _ = git(root, "tag", "v1")

    v2 = commit_files(
        root,
        {"README.md": "version two\n", "docs/index.md": "# Docs\n"},
        "second",
    )
    _ = git(root, "tag", "v2")

    head = commit_files(root, {"CHANGELOG.md": "- unreleased\n"}, "third")
    return HistoryRepo(root=root, v1=v1, v2=v2, head=head)


@pytest.fixture
def bare_clone(history_repo: HistoryRepo, tmp_path: Path) -> Path:
    """Bare clone of history_repo, tags included."""
    target = tmp_path / "history.git"
    _ = git(tmp_path, "clone", "--quiet", "--bare", str(history_repo.root), str(target))
    return target


@pytest.fixture
def untagged_repo(tmp_path: Path) -> Path:
    root = tmp_path / "untagged"
    root.mkdir()
    init_git_repo(root)
    _ = commit_files(root, {"a.txt": "a\n"}, "only")
    return root
