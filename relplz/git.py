"""Run git as a child process and interpret its output."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

logger = logging.getLogger(__name__)

_NO_UPSTREAM = "fatal: no upstream configured for branch"
_NO_COMMITS = (
    "fatal: ambiguous argument 'HEAD': unknown revision or path not in the working tree."
)


class GitError(Exception):
    """Raised when a git command fails or its output cannot be understood."""


def string_from_bytes(data: bytes) -> str:
    """Decode UTF-8 command output and strip surrounding whitespace."""
    try:
        return data.decode("utf-8").strip()
    except UnicodeDecodeError as exc:
        raise GitError("cannot extract stderr") from exc


def git_in_dir(directory: str | os.PathLike[str], args: Sequence[str]) -> str:
    """Run ``git -C directory args...`` and return its trimmed stdout."""
    trimmed = [arg.strip() for arg in args]
    directory = str(directory)
    try:
        result = subprocess.run(
            ["git", "-C", directory, *trimmed], capture_output=True, check=False
        )
    except OSError as exc:
        raise GitError(
            f"error while running git in directory `{directory}` with args `{trimmed}`"
        ) from exc
    logger.debug("git %s: output = %r", trimmed, result)
    stdout = string_from_bytes(result.stdout)
    if result.returncode == 0:
        return stdout
    error = f"error while running git in directory `{directory}` with args `{trimmed}`"
    stderr = string_from_bytes(result.stderr)
    if stdout or stderr:
        error += ":"
    if stdout:
        error += f"\n- stdout: {stdout}"
    if stderr:
        error += f"\n- stderr: {stderr}"
    raise GitError(error)


def _succeeds(directory: str | os.PathLike[str], args: Sequence[str]) -> bool:
    try:
        git_in_dir(directory, args)
    except GitError:
        return False
    return True


def is_file_ignored(repo_path: str | os.PathLike[str], file: str | os.PathLike[str]) -> bool:
    """True if git ignores ``file``."""
    return _succeeds(repo_path, ["check-ignore", "--no-index", str(file)])


def is_file_committed(repo_path: str | os.PathLike[str], file: str | os.PathLike[str]) -> bool:
    """True if ``file`` is tracked by git."""
    return _succeeds(repo_path, ["ls-files", "--error-unmatch", str(file)])


def changed_files(output: str, predicate: Callable[[str], bool]) -> list[str]:
    """File names from ``git status --porcelain`` lines accepted by ``predicate``."""
    lines = (line.strip() for line in output.splitlines())
    return [line.rsplit(" ", 1)[-1] for line in lines if predicate(line)]


def _get_current_branch(directory: str | os.PathLike[str]) -> str:
    try:
        return git_in_dir(directory, ["rev-parse", "--abbrev-ref", "HEAD"])
    except GitError as exc:
        if _NO_COMMITS in str(exc):
            raise GitError("git repository does not contain any commit.") from exc
        raise


def _get_current_remote_and_branch(directory: str | os.PathLike[str]) -> tuple[str, str]:
    try:
        output = git_in_dir(
            directory,
            ["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{upstream}"],
        )
    except GitError as exc:
        message = str(exc)
        if _NO_UPSTREAM in message:
            branch = _get_current_branch(directory)
            logger.warning("no upstream configured for branch %s", branch)
            return "origin", branch
        if _NO_COMMITS in message:
            raise GitError("git repository does not contain any commit.") from exc
        raise
    remote, sep, branch = output.partition("/")
    if not sep:
        raise GitError("cannot determine current remote and branch")
    return remote, branch


class Repo:
    """A git repository, remembering the branch and remote it started on."""

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        logger.debug("initializing directory %s", directory)
        try:
            remote, branch = _get_current_remote_and_branch(directory)
        except GitError as exc:
            raise GitError(f"cannot determine current branch: {exc}") from exc
        self.directory = Path(directory)
        self.original_branch = branch
        self.original_remote = remote

    def __repr__(self) -> str:
        return (
            f"Repo(directory={str(self.directory)!r}, "
            f"original_branch={self.original_branch!r}, "
            f"original_remote={self.original_remote!r})"
        )

    def git(self, *args: str) -> str:
        """Run a git command in the repository directory."""
        return git_in_dir(self.directory, args)

    def is_clean(self) -> None:
        """Raise ``GitError`` if there are uncommitted changes."""
        changes = self.changes_except_typechanges()
        if changes:
            raise GitError(
                "the working directory of this project has uncommitted changes. "
                "If these files are both committed and in .gitignore, either delete them "
                "or remove them from .gitignore. Otherwise, please commit or stash these "
                f"changes:\n{changes!r}"
            )

    def checkout_new_branch(self, branch: str) -> None:
        self.git("checkout", "-b", branch)

    def delete_branch_in_remote(self, branch: str) -> None:
        try:
            self.push(f":refs/heads/{branch}")
        except GitError as exc:
            raise GitError(f"can't delete temporary branch {branch}: {exc}") from exc

    def add_all_and_commit(self, message: str) -> None:
        self.git("add", ".")
        self.git("commit", "-m", message)

    def changes(self, predicate: Callable[[str], bool]) -> list[str]:
        """Changed files whose ``git status --porcelain`` line satisfies ``predicate``."""
        return changed_files(self.git("status", "--porcelain"), predicate)

    def files_of_current_commit(self) -> set[Path]:
        """Files touched by the current commit."""
        output = self.git("show", "--oneline", "--name-only", "--pretty=format:")
        return {Path(line.strip()) for line in output.splitlines()}

    def changes_except_typechanges(self) -> list[str]:
        return self.changes(lambda line: not line.startswith("T "))

    def add(self, paths: Iterable[str | os.PathLike[str]]) -> None:
        self.git("add", *(str(p) for p in paths))

    def commit(self, message: str) -> None:
        self.git("commit", "-m", message)

    def commit_signed(self, message: str) -> None:
        self.git("commit", "-s", "-m", message)

    def push(self, obj: str) -> None:
        self.git("push", self.original_remote, obj)

    def fetch(self, obj: str) -> None:
        self.git("fetch", self.original_remote, obj)

    def force_push(self, obj: str) -> None:
        # --force-with-lease refuses to overwrite remote work we have not seen.
        self.git("push", self.original_remote, obj, "--force-with-lease")

    def checkout_head(self) -> None:
        """Go back to the branch the repository was on when opened."""
        self.checkout(self.original_branch)

    def stash_pop(self) -> None:
        self.git("stash", "pop")

    def checkout_last_commit_at_paths(self, paths: Iterable[str | os.PathLike[str]]) -> None:
        self.checkout(self._nth_commit_at_paths(1, paths))

    def checkout_previous_commit_at_paths(
        self, paths: Iterable[str | os.PathLike[str]]
    ) -> None:
        self.checkout(self._nth_commit_at_paths(2, paths))

    def checkout(self, obj: str) -> None:
        self.git("checkout", obj)

    def _nth_commit_at_paths(self, nth: int, paths: Iterable[str | os.PathLike[str]]) -> str:
        commits = self.git(
            "log", "--format=%H", "-n", str(nth), "--", *(str(p) for p in paths)
        ).splitlines()
        if len(commits) < nth:
            raise GitError("not enough commits")
        commit = commits[nth - 1]
        logger.debug("nth_commit found: %s", commit)
        return commit

    def current_commit_message(self) -> str:
        return self.git("log", "-1", "--pretty=format:%B")

    def get_author_name(self, commit_hash: str) -> str:
        return self._commit_info("%an", commit_hash)

    def get_author_email(self, commit_hash: str) -> str:
        return self._commit_info("%ae", commit_hash)

    def get_committer_name(self, commit_hash: str) -> str:
        return self._commit_info("%cn", commit_hash)

    def get_committer_email(self, commit_hash: str) -> str:
        return self._commit_info("%ce", commit_hash)

    def _commit_info(self, info: str, commit_hash: str) -> str:
        return self.git("log", "-1", f"--pretty=format:{info}", commit_hash)

    def current_commit_hash(self) -> str:
        """SHA1 of the current HEAD."""
        try:
            return self.git("log", "-1", "--pretty=format:%H")
        except GitError as exc:
            raise GitError(f"can't determine current commit hash: {exc}") from exc

    def tag(self, name: str, message: str) -> str:
        """Create an annotated tag."""
        return self.git("tag", "-m", message, name)

    def get_tag_commit(self, tag: str) -> str | None:
        """Commit hash the tag points to, or ``None``."""
        try:
            return self.git("rev-list", "-n", "1", tag)
        except GitError:
            return None

    def is_ancestor(self, maybe_ancestor_commit: str, descendant_commit: str) -> bool:
        """True if the first commit comes before the second one."""
        return _succeeds(
            self.directory,
            ["merge-base", "--is-ancestor", maybe_ancestor_commit, descendant_commit],
        )

    def original_remote_url(self) -> str:
        return self.git("config", "--get", f"remote.{self.original_remote}.url")

    def tag_exists(self, tag: str) -> bool:
        try:
            output = self.git("tag", "-l", tag)
        except GitError as exc:
            raise GitError(f"cannot determine if git tag exists: {exc}") from exc
        return len(output.splitlines()) >= 1