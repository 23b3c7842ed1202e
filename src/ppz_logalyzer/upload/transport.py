"""Upload transports that move an item's bytes and report progress.

UploadTransport is the port the orchestrator drives. SimulatedTransport
stands in for the backend: it advances progress by a random amount on a
fixed tick until the item reaches 100%.
"""

import asyncio
import random
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Optional

from ppz_logalyzer.core import get_logger
from ppz_logalyzer.core.errors import ConfigurationError, UploadTransportError
from ppz_logalyzer.session.context import SessionContext
from ppz_logalyzer.upload.models import FileUploadResponse, UploadItem
from ppz_logalyzer.upload.pairing import pair_id_for

logger = get_logger(__name__)

ProgressCallback = Callable[[float], None]

DEFAULT_TICK_INTERVAL = 0.5
DEFAULT_MAX_INCREMENT = 30.0
PARSE_FAILURE_MESSAGE = (
    "Failed to parse log format. Please ensure the file is a valid PaparazziUAV log file."
)


class UploadTransport(ABC):
    """Port for sending one upload item to the backend."""

    @abstractmethod
    async def send(
        self,
        item: UploadItem,
        on_progress: ProgressCallback,
        context: Optional[SessionContext] = None,
    ) -> FileUploadResponse:
        """Upload an item, reporting progress as it goes.

        Args:
            item: Item to upload
            on_progress: Called with the new progress percent (0-100)
            context: Session context supplying credentials

        Returns:
            The backend's record of the stored file

        Raises:
            LogalyzerError: If the upload fails
        """
        ...


class SimulatedTransport(UploadTransport):
    """Transport that simulates upload progress with randomized ticks.

    Each tick waits ``tick_interval`` seconds and adds a random amount in
    ``[0, max_increment)`` to the progress, clamped to 100. With
    ``failure_rate`` > 0 a tick may fail the upload instead.
    """

    def __init__(
        self,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        max_increment: float = DEFAULT_MAX_INCREMENT,
        failure_rate: float = 0.0,
        rng: Optional[random.Random] = None,
    ):
        if tick_interval < 0:
            raise ConfigurationError(
                "tick_interval must not be negative", option="tick_interval", value=tick_interval
            )
        if max_increment <= 0:
            raise ConfigurationError(
                "max_increment must be positive", option="max_increment", value=max_increment
            )
        if not 0.0 <= failure_rate <= 1.0:
            raise ConfigurationError(
                "failure_rate must be between 0 and 1", option="failure_rate", value=failure_rate
            )
        self.tick_interval = tick_interval
        self.max_increment = max_increment
        self.failure_rate = failure_rate
        self._rng = rng or random.Random()

    async def send(
        self,
        item: UploadItem,
        on_progress: ProgressCallback,
        context: Optional[SessionContext] = None,
    ) -> FileUploadResponse:
        headers = context.authorization_header() if context is not None else {}

        logger.debug(
            "simulated_upload_started",
            item_id=item.id,
            file_name=item.file_name,
            authenticated="Authorization" in headers,
        )

        progress = item.progress
        while progress < 100.0:
            await asyncio.sleep(self.tick_interval)
            if self.failure_rate and self._rng.random() < self.failure_rate:
                raise UploadTransportError(
                    PARSE_FAILURE_MESSAGE, item_id=item.id, file_name=item.file_name
                )
            progress = min(progress + self._rng.random() * self.max_increment, 100.0)
            on_progress(progress)

        return FileUploadResponse(
            file_id=str(uuid.uuid4()),
            original_filename=item.file_name,
            file_size=item.file.size,
            upload_timestamp=datetime.now(timezone.utc),
            content_type=item.file.content_type or "application/octet-stream",
            processing_status="pending",
            file_pair_id=pair_id_for(item.base_name),
            base_filename=item.base_name,
            file_extension=item.extension,
        )
