"""Pipeline orchestration: resolve, load, extract, rank."""

from __future__ import annotations

import codecs
import os
import threading
from collections import Counter
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, as_completed, wait
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence

from .aggregator import NamespaceCounter, WarningLog
from .config import DEFAULT_GENERATED_FILES, DEFAULT_GRAMMAR
from .errors import OperationCancelledError
from .extractor import extract_usings
from .locator import resolve_target
from .logging import get_logger
from .models import CSHARP, Document, NamespaceCount, TargetReference
from .report import rank
from .toolchain import Toolchain, locate_toolchain
from .workspace import Workspace, WorkspaceLoader

# In-flight extraction tasks per worker thread.
_QUEUE_DEPTH = 4


class CancellationToken:
    """Cooperative cancellation flag checked between phases and documents."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelledError()


@dataclass
class RunOptions:
    """Effective settings for one run after merging config and CLI flags."""

    count: Optional[int] = None
    max_workers: Optional[int] = None
    generated_files: Sequence[str] = DEFAULT_GENERATED_FILES
    exclude_paths: Sequence[str] = ()
    exclude_root: Optional[Path] = None
    grammar: str = DEFAULT_GRAMMAR


@dataclass
class RunResult:
    """Outcome of a completed run."""

    work_item: Path
    rows: List[NamespaceCount]
    warnings: List[str] = field(default_factory=list)
    documents: int = 0


class Orchestrator:
    """Coordinates the phases of a usings count."""

    def __init__(
        self,
        toolchain_factory: Callable[[str], Toolchain] | None = None,
        loader_factory: Callable[[Callable[[str], None]], WorkspaceLoader] | None = None,
    ) -> None:
        self._toolchain_factory = toolchain_factory or locate_toolchain
        self._loader_factory = loader_factory or (lambda on_warning: WorkspaceLoader(on_warning))
        self.logger = get_logger("orchestrator")

    def run(
        self,
        target: str | TargetReference,
        options: RunOptions | None = None,
        token: CancellationToken | None = None,
    ) -> RunResult:
        """Count the usings of ``target``, a raw path or an already resolved reference."""
        options = options or RunOptions()
        token = token or CancellationToken()

        reference = target if isinstance(target, TargetReference) else resolve_target(target)
        work_item = reference.resolved
        self.logger.debug("Resolved %s (%s) to %s", reference.raw, reference.kind, work_item)
        token.raise_if_cancelled()

        toolchain = self._toolchain_factory(options.grammar)
        token.raise_if_cancelled()

        warnings = WarningLog()
        loader = self._loader_factory(warnings.add)
        self.logger.info("Loading %s", work_item.name)
        workspace = loader.open(work_item)
        token.raise_if_cancelled()

        documents = list(self.enumerate_documents(workspace, options, warnings))
        self.logger.info("Walking %d syntax trees", len(documents))

        counter = NamespaceCounter()
        self.extract(documents, toolchain, counter, warnings, options.max_workers, token)
        token.raise_if_cancelled()

        rows = rank(counter.snapshot(), options.count)
        return RunResult(
            work_item=work_item,
            rows=rows,
            warnings=warnings.messages(),
            documents=len(documents),
        )

    def enumerate_documents(
        self, workspace: Workspace, options: RunOptions, warnings: WarningLog
    ) -> Iterator[Document]:
        """Yield the C# documents to count, skipping generated and excluded files."""
        generated = tuple(options.generated_files)
        for project in workspace.projects:
            if project.language != CSHARP:
                warnings.add(f"Skipping non-C# project: {project.path}")
                continue
            for document in project.documents:
                if generated and document.path.name.endswith(generated):
                    continue
                if self._is_excluded(document.path, options):
                    self.logger.debug("Excluded %s", document.path)
                    continue
                yield document

    def extract(
        self,
        documents: Sequence[Document],
        toolchain: Toolchain,
        counter: NamespaceCounter,
        warnings: WarningLog,
        max_workers: Optional[int] = None,
        token: CancellationToken | None = None,
    ) -> None:
        """Parse ``documents`` on a thread pool and merge their usings into ``counter``."""
        token = token or CancellationToken()
        if not documents:
            return
        workers = max_workers or min(32, (os.cpu_count() or 1) + 4)
        limit = workers * _QUEUE_DEPTH

        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="usingstats")
        pending: Dict[Future[Optional[str]], int] = {}
        failures: Dict[int, str] = {}
        try:
            for index, document in enumerate(documents):
                token.raise_if_cancelled()
                if len(pending) >= limit:
                    done, _ = wait(pending, return_when=FIRST_COMPLETED)
                    _collect(done, pending, failures)
                future = executor.submit(
                    self._process_document, document, toolchain, counter, token
                )
                pending[future] = index
            _collect(as_completed(pending), pending, failures)
        except BaseException:
            token.cancel()
            executor.shutdown(wait=True, cancel_futures=True)
            raise
        executor.shutdown(wait=True)

        # Document order, not completion order.
        for index in sorted(failures):
            warnings.add(failures[index])

    def _process_document(
        self,
        document: Document,
        toolchain: Toolchain,
        counter: NamespaceCounter,
        token: CancellationToken,
    ) -> Optional[str]:
        """Count one document; return a warning message if it could not be read."""
        token.raise_if_cancelled()
        try:
            source = read_source(document.path)
            tree = toolchain.parse(source)
        except (OSError, ValueError) as exc:
            return f"Failed to process document {document.path}: {exc}"
        names = extract_usings(tree.root_node, source)
        self.logger.debug("%s: %d usings", document.path, len(names))
        counter.merge(Counter(names))
        return None

    @staticmethod
    def _is_excluded(path: Path, options: RunOptions) -> bool:
        if not options.exclude_paths or options.exclude_root is None:
            return False
        try:
            relative = path.relative_to(options.exclude_root).as_posix()
        except ValueError:
            return False
        for pattern in options.exclude_paths:
            pattern = pattern.replace("\\", "/").lstrip("/")
            if pattern.endswith("/"):
                if relative.startswith(pattern):
                    return True
            elif fnmatchcase(relative, pattern):
                return True
        return False


def _collect(
    done: Iterable[Future[Optional[str]]],
    pending: Dict[Future[Optional[str]], int],
    failures: Dict[int, str],
) -> None:
    for future in done:
        message = future.result()
        index = pending.pop(future)
        if message is not None:
            failures[index] = message


def read_source(path: Path) -> bytes:
    """Read a source file as UTF-8 bytes without a byte order mark."""
    data = path.read_bytes()
    if data.startswith(codecs.BOM_UTF8):
        return data[len(codecs.BOM_UTF8) :]
    if data.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return data.decode("utf-16").encode("utf-8")
    return data


__all__ = ["CancellationToken", "Orchestrator", "RunOptions", "RunResult", "read_source"]
