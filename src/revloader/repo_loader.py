"""
Repository loader.

GitRepoLoader owns the load cycle of one repository: it resolves the
repository root, requests the history asynchronously, fills the revision
cache with the working tree revision and the decoded commits, and finally
classifies references. Only one cycle runs at a time; a request made while a
cycle is active is rejected, not queued.

Events are delivered to registered listeners on the thread that produced
them, which for everything after ``load_repository`` returns is the
requestor's background thread.
"""

import logging
import threading
from enum import Enum
from typing import Callable, List, Optional

from .branches import GitBranches
from .config.settings import LoaderSettings
from .directory import configure_repo_directory
from .errors import ConfigurationError, LoadInProgressError, NotARepositoryError, RevLoaderError
from .git_tool import GitTool
from .models import CancelRequested, LoadEvent, LoadingFinished, LoadingStarted, LoadingStep
from .references import ReferenceLoader
from .requestor import GitRequestor
from .revision_parser import build_log_command, iter_commits, split_revisions
from .revisions_cache import RevisionsCache
from .working_tree import WorkingTreeSynthesizer

logger = logging.getLogger(__name__)

Listener = Callable[[LoadEvent], None]


class LoadState(str, Enum):
    """Lifecycle of a load cycle."""

    IDLE = "idle"
    LOADING = "loading"
    FINISHING = "finishing"


class GitRepoLoader:
    """Single-flight loader that populates a RevisionsCache."""

    def __init__(
        self,
        git: GitTool,
        cache: RevisionsCache,
        settings: Optional[LoaderSettings] = None,
        requestor_factory: Callable[..., GitRequestor] = GitRequestor,
    ):
        self.git = git
        self.cache = cache
        self.settings = settings or LoaderSettings()
        self.show_all = self.settings.show_all
        self.last_error: Optional[str] = None

        self._requestor_factory = requestor_factory
        self._requestor: Optional[GitRequestor] = None
        self._listeners: List[Listener] = []

        self._lock = threading.Lock()
        self._state = LoadState.IDLE
        self._generation = 0
        self._idle = threading.Event()
        self._idle.set()

        self._synthesizer = WorkingTreeSynthesizer(git)
        self._references = ReferenceLoader(
            git,
            cache,
            GitBranches(git, self.settings.default_branch, self.settings.remote_name),
        )

    @classmethod
    def from_settings(cls, settings: LoaderSettings, cache: Optional[RevisionsCache] = None) -> "GitRepoLoader":
        git = GitTool(settings.repo_path or None, git_binary=settings.git_binary, timeout=settings.command_timeout)
        return cls(git, cache or RevisionsCache(), settings)

    # State

    @property
    def state(self) -> LoadState:
        with self._lock:
            return self._state

    @property
    def is_loading(self) -> bool:
        return self.state == LoadState.LOADING

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until no cycle is active. Returns False on timeout."""
        return self._idle.wait(timeout)

    # Listeners

    def add_listener(self, listener: Listener) -> Listener:
        with self._lock:
            self._listeners.append(listener)
        return listener

    def remove_listener(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _emit(self, event: LoadEvent) -> None:
        # Listeners run outside the lock so they may call back into the loader
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(f"Listener failed while handling {event.kind} event")

    # Entry points

    def load_repository(self) -> bool:
        """Start a load cycle.

        Returns True once the history request is issued; the cycle then
        completes in the background and ends with a LoadingFinished event.
        """
        try:
            self._start_load()
        except LoadInProgressError as e:
            logger.warning(str(e))
            self.last_error = str(e)
            return False
        except RevLoaderError as e:
            logger.error(str(e))
            self.last_error = str(e)
            return False
        return True

    def cancel_all(self) -> None:
        """Cancel the outstanding history request and release the loader.

        Records already inserted stay in the cache. A late result from the
        cancelled command is ignored.
        """
        self._emit(CancelRequested())

        with self._lock:
            requestor, self._requestor = self._requestor, None
            if self._state != LoadState.IDLE:
                logger.info("Cancelling the current load.")
                self._generation += 1
                self._state = LoadState.IDLE
            self._idle.set()

        if requestor is not None:
            requestor.cancel()

    # Cycle

    def _start_load(self) -> None:
        with self._lock:
            if self._state != LoadState.IDLE:
                raise LoadInProgressError()
            if not self.git.get_working_dir():
                raise ConfigurationError("No working directory set.")

            logger.info("Initializing Git...")
            self.cache.clear()
            self._state = LoadState.LOADING
            self._generation += 1
            generation = self._generation
            self._idle.clear()

        self.last_error = None

        if not configure_repo_directory(self.git):
            self._release(generation)
            raise NotARepositoryError(self.git.get_working_dir())

        self.git.update_current_branch()
        self._request_revisions(generation)
        logger.info("... Git init finished")

    def _is_current(self, generation: int) -> bool:
        return self._generation == generation

    def _release(self, generation: int) -> bool:
        with self._lock:
            if not self._is_current(generation):
                return False
            self._state = LoadState.IDLE
            self._requestor = None
            self._idle.set()
            return True

    def _request_revisions(self, generation: int) -> None:
        logger.debug("Loading revisions.")

        scope = "--all" if self.show_all else self.git.current_branch
        requestor = self._requestor_factory(
            self.git.get_working_dir(),
            lambda data: self._process_revisions(data, generation),
            git_binary=self.git.git_binary,
        )

        with self._lock:
            if not self._is_current(generation):
                return
            self._requestor = requestor

        requestor.run(build_log_command(scope))

    def _process_revisions(self, data: bytes, generation: int) -> None:
        if not self._is_current(generation):
            logger.debug("Ignoring revisions from a cancelled load.")
            return

        try:
            self._ingest(data, generation)
        except Exception:
            logger.exception("Unexpected error while processing revisions")
            self._release(generation)
            raise

    def _ingest(self, data: bytes, generation: int) -> None:
        logger.debug("Processing revisions...")

        tokens = split_revisions(data)
        total = len(tokens)
        logger.debug(f"There are {total} commits to process.")

        with self._lock:
            if not self._is_current(generation):
                return
            self.cache.configure(total)
        self._emit(LoadingStarted(total=total))

        logger.debug("Adding the WIP commit.")
        wip = self._synthesizer.synthesize()
        with self._lock:
            if not self._is_current(generation):
                return
            self.cache.update_wip_commit(wip)

        for commit in iter_commits(tokens):
            with self._lock:
                if not self._is_current(generation):
                    logger.info(f"Load cancelled after {commit.sequence_index - 1} commits.")
                    return
                self.cache.insert_commit_info(commit, commit.sequence_index)
            self._emit(LoadingStep(index=commit.sequence_index))

        with self._lock:
            if not self._is_current(generation):
                return
            self._state = LoadState.FINISHING
            self._requestor = None

        snapshot = self._references.collect()
        with self._lock:
            if not self._is_current(generation):
                return
            self._references.apply(snapshot)
            self._state = LoadState.IDLE

        self._emit(LoadingFinished())

        with self._lock:
            # A listener may already have started the next cycle
            if self._is_current(generation) and self._state == LoadState.IDLE:
                self._idle.set()
