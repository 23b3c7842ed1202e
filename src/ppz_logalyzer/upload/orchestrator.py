"""Upload orchestration for paired log/data files.

UploadOrchestrator covers:
- Validating selected files against count, size and format limits
- Tracking per-file upload progress through an UploadTransport
- Recomputing the data/log pairing view after every change
- Reporting ready and completed pairs to a caller-supplied callback
"""

import asyncio
import uuid
from typing import Callable, Iterable, Optional

from ppz_logalyzer.core import get_logger
from ppz_logalyzer.core.errors import LogalyzerError
from ppz_logalyzer.session.context import SessionContext
from ppz_logalyzer.upload.models import (
    FileHandle,
    FilePair,
    UploadConfig,
    UploadItem,
    UploadStatus,
    UploadSummary,
)
from ppz_logalyzer.upload.pairing import build_file_pairs, filter_ready_pairs
from ppz_logalyzer.upload.status_tracker import build_upload_summary
from ppz_logalyzer.upload.transport import SimulatedTransport, UploadTransport
from ppz_logalyzer.upload.validator import FileValidator, split_file_name

logger = get_logger(__name__)

PairsReadyCallback = Callable[[list[FilePair]], None]

UPLOAD_CANCELLED_MESSAGE = "Upload cancelled before it finished."


class UploadOrchestrator:
    """Manages a batch of upload items from selection to completion.

    The item collection is an immutable tuple replaced wholesale on every
    mutation, and the pairing view is rebuilt from it each time. Each
    accepted item is uploaded by its own asyncio task; removing an item
    cancels its task, and progress reported by a task that is no longer
    registered for its item is ignored.

    Validation failures never raise. The most recent rejection message is
    kept in ``error`` and every rejection from the latest submission in
    ``errors``.
    """

    def __init__(
        self,
        config: Optional[UploadConfig] = None,
        on_pairs_ready: Optional[PairsReadyCallback] = None,
        transport: Optional[UploadTransport] = None,
        context: Optional[SessionContext] = None,
    ):
        """Initialize the orchestrator.

        Args:
            config: Accepted formats and limits (defaults: .log/.data, 500MB, 40 files)
            on_pairs_ready: Called with ready and completed pairs after every change
            transport: Upload transport (defaults to SimulatedTransport)
            context: Session context handed to the transport
        """
        self.config = config or UploadConfig()
        self.validator = FileValidator(self.config)
        self.transport = transport or SimulatedTransport()
        self.context = context
        self._on_pairs_ready = on_pairs_ready
        self._items: tuple[UploadItem, ...] = ()
        self._pairs: tuple[FilePair, ...] = ()
        self._tasks: dict[str, asyncio.Task] = {}
        self._error: Optional[str] = None
        self._errors: list[str] = []
        self._log = logger.bind(user_id=context.user_id) if context else logger

    async def __aenter__(self) -> "UploadOrchestrator":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    @property
    def items(self) -> tuple[UploadItem, ...]:
        return self._items

    @property
    def pairs(self) -> list[FilePair]:
        return list(self._pairs)

    @property
    def ready_pairs(self) -> list[FilePair]:
        return filter_ready_pairs(self._pairs)

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def errors(self) -> list[str]:
        return list(self._errors)

    @property
    def summary(self) -> UploadSummary:
        return build_upload_summary(self._items, self._pairs)

    def get_item(self, item_id: str) -> Optional[UploadItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def get_pair(self, pair_id: str) -> Optional[FilePair]:
        for pair in self._pairs:
            if pair.id == pair_id:
                return pair
        return None

    def submit_files(self, files: Iterable[FileHandle]) -> list[UploadItem]:
        """Validate a selection of files and start uploading the accepted ones.

        The whole batch is rejected when it would take the managed set over
        ``max_files``. Otherwise each file is checked independently and
        rejected files are skipped. Must be called with an event loop running.

        Args:
            files: Handles from a file picker or drop event

        Returns:
            The accepted items, already marked uploading
        """
        files = list(files)
        loop = asyncio.get_running_loop()

        batch_result = self.validator.validate_batch(len(self._items), len(files))
        if not batch_result.valid:
            self._error = batch_result.error_message
            self._errors = [batch_result.error_message]
            self._log.warning(
                "batch_rejected",
                current=len(self._items),
                incoming=len(files),
                max_files=self.config.max_files,
            )
            return []

        self._error = None
        self._errors = []

        accepted: list[UploadItem] = []
        for file in files:
            result = self.validator.validate(file)
            if not result.valid:
                self._error = result.error_message
                self._errors.append(result.error_message)
                self._log.info(
                    "file_rejected",
                    file_name=file.name,
                    file_size=file.size,
                    reason=result.error_code.value,
                )
                continue
            item = self._create_item(file)
            self._warn_on_duplicate_role(item, accepted)
            accepted.append(item)

        self._commit(self._items + tuple(accepted))

        accepted_ids = {item.id for item in accepted}
        self._commit(tuple(
            item.model_copy(update={"status": UploadStatus.UPLOADING})
            if item.id in accepted_ids else item
            for item in self._items
        ))

        for item_id in (item.id for item in accepted):
            task = loop.create_task(self._run_upload(item_id))
            self._tasks[item_id] = task
            task.add_done_callback(
                lambda finished, item_id=item_id: self._forget_task(item_id, finished)
            )

        self._log.info(
            "files_submitted",
            submitted=len(files),
            accepted=len(accepted),
            rejected=len(files) - len(accepted),
            total=len(self._items),
        )
        return [item for item in self._items if item.id in accepted_ids]

    def remove_item(self, item_id: str) -> bool:
        """Remove one item, cancelling its upload.

        Returns:
            True if the item was under management
        """
        if self.get_item(item_id) is None:
            return False
        self._cancel_task(item_id)
        self._commit(tuple(item for item in self._items if item.id != item_id))
        self._log.info("item_removed", item_id=item_id)
        return True

    def remove_pair(self, pair_id: str) -> bool:
        """Remove every item sharing the pair's base name.

        Returns:
            True if the pair existed
        """
        pair = self.get_pair(pair_id)
        if pair is None:
            return False
        removed = [item.id for item in self._items if item.base_name == pair.base_name]
        for item_id in removed:
            self._cancel_task(item_id)
        self._commit(tuple(item for item in self._items if item.base_name != pair.base_name))
        self._log.info("pair_removed", pair_id=pair_id, removed_items=len(removed))
        return True

    def clear_all(self) -> None:
        """Cancel all uploads, drop every item and the retained errors."""
        cleared = len(self._items)
        for item_id in list(self._tasks):
            self._cancel_task(item_id)
        self._error = None
        self._errors = []
        self._commit(())
        self._log.info("uploads_cleared", cleared_items=cleared)

    def dismiss_error(self) -> None:
        self._error = None
        self._errors = []

    async def wait_for_uploads(self) -> None:
        """Wait until every in-flight upload has finished or been cancelled."""
        pending = [task for task in self._tasks.values() if not task.done()]
        while pending:
            results = await asyncio.gather(*pending, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    raise result
            pending = [task for task in self._tasks.values() if not task.done()]

    async def aclose(self) -> None:
        """Cancel in-flight uploads and wait for their tasks to unwind.

        Items whose upload was interrupted are marked ``error`` with
        UPLOAD_CANCELLED_MESSAGE, so no item is left ``uploading``.
        """
        tasks = dict(self._tasks)
        for task in tasks.values():
            task.cancel()
        self._tasks.clear()
        if not tasks:
            return
        await asyncio.gather(*tasks.values(), return_exceptions=True)

        interrupted = [
            item.id for item in self._items if item.id in tasks and not item.is_finished
        ]
        if interrupted:
            self._commit(tuple(
                item.model_copy(update={
                    "status": UploadStatus.ERROR,
                    "error_message": UPLOAD_CANCELLED_MESSAGE,
                })
                if item.id in interrupted else item
                for item in self._items
            ))
        self._log.info("uploads_closed", interrupted_items=len(interrupted))

    def _create_item(self, file: FileHandle) -> UploadItem:
        base_name, extension = split_file_name(file.name)
        extension = extension.lower()
        return UploadItem(
            id=str(uuid.uuid4()),
            file=file,
            base_name=base_name,
            extension=extension,
            role=self.config.role_for_extension(extension),
        )

    def _warn_on_duplicate_role(self, item: UploadItem, accepted: list[UploadItem]) -> None:
        if item.role is None:
            return
        for other in self._items + tuple(accepted):
            if other.base_name == item.base_name and other.role == item.role:
                self._log.warning(
                    "duplicate_role_in_pair",
                    base_name=item.base_name,
                    role=item.role.value,
                    item_id=item.id,
                    shadowed_item_id=other.id,
                )

    def _commit(self, items: tuple[UploadItem, ...]) -> None:
        self._items = items
        self._pairs = tuple(build_file_pairs(items))
        if self._on_pairs_ready is None:
            return
        try:
            self._on_pairs_ready(filter_ready_pairs(self._pairs))
        except Exception:
            # Item state is already committed; the next commit redelivers
            self._log.exception("pairs_ready_callback_failed", total_items=len(items))

    def _update_item(self, item_id: str, **changes) -> None:
        item = self.get_item(item_id)
        if item is None or item.is_finished:
            return
        if "progress" in changes:
            changes["progress"] = max(item.progress, min(changes["progress"], 100.0))
        updated = item.model_copy(update=changes)
        self._commit(tuple(updated if other.id == item_id else other for other in self._items))

    def _is_current(self, item_id: str, task: Optional[asyncio.Task]) -> bool:
        return task is not None and self._tasks.get(item_id) is task

    def _cancel_task(self, item_id: str) -> None:
        task = self._tasks.pop(item_id, None)
        if task is not None:
            task.cancel()

    def _forget_task(self, item_id: str, task: asyncio.Task) -> None:
        if self._tasks.get(item_id) is task:
            del self._tasks[item_id]

    async def _run_upload(self, item_id: str) -> None:
        item = self.get_item(item_id)
        if item is None:
            return
        task = asyncio.current_task()

        def on_progress(progress: float) -> None:
            # Completion is recorded once the transport returns
            if progress >= 100.0 or not self._is_current(item_id, task):
                return
            self._update_item(item_id, progress=progress)

        try:
            response = await self.transport.send(item, on_progress, self.context)
        except LogalyzerError as e:
            if self._is_current(item_id, task):
                self._update_item(item_id, status=UploadStatus.ERROR, error_message=e.message)
                self._log.warning(
                    "upload_failed",
                    item_id=item_id,
                    file_name=item.file_name,
                    error=str(e),
                )
            return

        if not self._is_current(item_id, task):
            return
        self._update_item(
            item_id,
            status=UploadStatus.COMPLETED,
            progress=100.0,
            response=response,
        )
        self._log.info(
            "upload_completed",
            item_id=item_id,
            file_name=item.file_name,
            file_id=response.file_id,
        )
