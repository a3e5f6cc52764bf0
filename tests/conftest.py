"""
Pytest configuration and shared fixtures.
"""

import os
import shutil
import subprocess
from pathlib import Path

import pytest

from revloader.config import reload_config
from revloader.git_tool import GitOperationResult, GitTool

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


@pytest.fixture(autouse=True)
def isolated_git_env(tmp_path_factory, monkeypatch):
    """Keep user and system git config out of every test."""
    home = tmp_path_factory.mktemp("home")
    global_config = home / ".gitconfig"
    global_config.write_text("")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(global_config))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(Path(tmp_path_factory.getbasetemp()).parent))
    for key in list(os.environ):
        if key.startswith("REVLOADER_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("REVLOADER_LOG_LEVEL", "ERROR")
    reload_config()
    yield
    reload_config()


class GitRepoBuilder:
    """Creates commits with deterministic dates in a temporary repository."""

    def __init__(self, path: Path):
        self.path = path
        self._clock = 1_700_000_000
        self.git("init", "-q")
        self.git("symbolic-ref", "HEAD", "refs/heads/main")
        self.git("config", "user.name", "Test User")
        self.git("config", "user.email", "test@example.com")
        self.git("config", "commit.gpgsign", "false")
        self.git("config", "tag.gpgsign", "false")

    def git(self, *args: str) -> str:
        env = dict(os.environ)
        date = f"{self._clock} +0000"
        env.update({"GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date})
        result = subprocess.run(
            ["git", *args], cwd=self.path, check=True, capture_output=True, text=True, env=env
        )
        return result.stdout

    def write(self, relative_path: str, content: str) -> Path:
        target = self.path / relative_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target

    def commit(self, message: str, files=None) -> str:
        """Write ``files`` (path -> content), commit them, return the new sha."""
        for name, content in (files or {f"file{self._clock}.txt": message}).items():
            self.write(name, content)
        self.git("add", "-A")
        self.git("commit", "-q", "-m", message)
        self._clock += 60
        return self.git("rev-parse", "HEAD").strip()


@pytest.fixture
def make_git_repo(tmp_path):
    """Factory for fresh repositories under tmp_path."""
    if shutil.which("git") is None:
        pytest.skip("git executable not available")

    def factory(name: str = "repo") -> GitRepoBuilder:
        path = tmp_path / name
        path.mkdir()
        return GitRepoBuilder(path)

    return factory


class FakeGit(GitTool):
    """GitTool answering from a table of canned results."""

    def __init__(self, responses=None, repo_path="/repo"):
        super().__init__(repo_path)
        self.responses = {}
        self.calls = []
        for command, response in (responses or {}).items():
            self.respond(command, response)

    def respond(self, command, response):
        if isinstance(response, str):
            response = GitOperationResult(success=True, output=response)
        self.responses[tuple(command.split()) if isinstance(command, str) else tuple(command)] = response

    def run_git(self, command, cwd=None):
        self.calls.append(list(command))
        response = self.responses.get(tuple(command))
        if response is None:
            return GitOperationResult(success=False, error=f"fatal: no canned answer for {' '.join(command)}")
        return GitOperationResult(response.success, response.output, response.error, dict(response.data))


@pytest.fixture
def fake_git():
    return FakeGit


class FakeRequestor:
    """Stands in for GitRequestor; the test delivers the buffer by hand."""

    def __init__(self, working_dir, on_data_ready, git_binary="git"):
        self.working_dir = working_dir
        self.on_data_ready = on_data_ready
        self.git_binary = git_binary
        self.command = None
        self.cancelled = False

    def run(self, command):
        self.command = command

    def cancel(self):
        self.cancelled = True

    def deliver(self, data: bytes):
        self.on_data_ready(data)


class FakeRequestorFactory:
    def __init__(self):
        self.requestors = []

    def __call__(self, working_dir, on_data_ready, git_binary="git"):
        requestor = FakeRequestor(working_dir, on_data_ready, git_binary)
        self.requestors.append(requestor)
        return requestor

    @property
    def last(self) -> FakeRequestor:
        return self.requestors[-1]


@pytest.fixture
def fake_requestors():
    return FakeRequestorFactory()


def sha_for(n: int) -> str:
    return f"{n:040x}"


def make_token(
    sha: str,
    parents=(),
    subject: str = "Subject",
    body: str = "",
    mark: str = ">",
    timestamp: int = 1_700_000_000,
    log_size: bool = True,
) -> str:
    """Build one revision token as ``git log -z`` prints it."""
    text = (
        f"{mark}{sha}X{' '.join(parents)}\n"
        f"Committer Name<committer@example.com>\n"
        f"Author Name<author@example.com>\n"
        f"{timestamp}\n"
        f"{subject}\n"
        f"{body} "
    )
    if log_size:
        text = f"log size {len(subject) + len(body)}\n" + text
    return text


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def sha_factory():
    return sha_for
