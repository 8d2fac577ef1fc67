from __future__ import annotations

import os
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from .results import ItemResult


DEFAULT_WORKERS = 10

ACCESS_KEY_ENV = "AWS_ACCESS_KEY"
SECRET_KEY_ENV = "AWS_SECRET_ACCESS_KEY"


@dataclass(frozen=True)
class Credentials:
    access_key: Optional[str]
    secret_key: Optional[str]

    @classmethod
    def from_env(cls) -> "Credentials":
        # Not validated here; a missing key only fails once a fetch is attempted
        return cls(os.environ.get(ACCESS_KEY_ENV), os.environ.get(SECRET_KEY_ENV))


def ensure_dir(path: Path) -> None:
    """Create `path` if absent.

    Tries a single-level mkdir first and falls back to creating all parents.
    """
    if path.is_dir():
        return
    try:
        path.mkdir()
    except FileNotFoundError:
        print(f"[INFO] Parent missing, creating directories recursively: {path}")
        path.mkdir(parents=True, exist_ok=True)
    except FileExistsError:
        if not path.is_dir():
            raise


@dataclass
class FetchRuntime:
    """Worker pool plus the settings shared by every fetch task.

    Use as a context manager so the pool is drained on exit.
    """

    max_workers: int = DEFAULT_WORKERS
    credentials: Credentials = field(default_factory=Credentials.from_env)
    _executor: Optional[ThreadPoolExecutor] = field(default=None, init=False, repr=False)
    # (item, directory, future or None when setup failed, setup error)
    _submitted: List[Tuple[str, Path, Optional[Future], Optional[str]]] = field(
        default_factory=list, init=False, repr=False
    )

    def __enter__(self) -> "FetchRuntime":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True)

    def start(self) -> None:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self.max_workers)

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def submit(self, item: str, directory: Path, fn: Callable[[], object]) -> bool:
        """Ensure `directory` exists, then schedule `fn` on the pool.

        Returns False when the directory setup fails; the task body's outcome
        is only available from `wait()`.
        """
        if self._executor is None:
            raise RuntimeError("FetchRuntime is not started")
        try:
            ensure_dir(directory)
        except Exception as e:
            print(f"[ERROR] {item}: could not create {directory}: {e}")
            self._submitted.append((item, directory, None, str(e)))
            return False
        fut = self._executor.submit(fn)
        fut.add_done_callback(partial(_print_failure, item))
        self._submitted.append((item, directory, fut, None))
        return True

    def wait(self) -> List[ItemResult]:
        """Block until every submitted task finishes; one result per item in submission order."""
        submitted, self._submitted = self._submitted, []
        results: List[ItemResult] = []
        total = len(submitted)
        for idx, (item, directory, fut, setup_error) in enumerate(submitted, start=1):
            if fut is None:
                result = ItemResult(item, str(directory), False, setup_error)
            else:
                try:
                    out = fut.result()
                except Exception as e:
                    result = ItemResult(item, str(directory), False, str(e))
                else:
                    destination = str(out) if isinstance(out, (str, Path)) else str(directory)
                    result = ItemResult(item, destination, True)
            print(f"[{idx}/{total}] {item}" + ("" if result.ok else " (failed)"))
            results.append(result)
        return results


def _print_failure(item: str, fut: Future) -> None:
    exc = fut.exception()
    if exc is not None:
        print(f"[ERROR] {item}: {exc}")
