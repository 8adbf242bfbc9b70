"""
Background import worker.

Runs ``ImportService.iter_import`` on a daemon thread so an interactive
caller stays responsive. Messages are handed over through a queue in the
order the service produced them.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Iterator, Optional, Union

from viewtrail.exceptions import (
    HistoryStoreError,
    ImportCancelledError,
    NoValidRecordsError,
    TakeoutParsingError,
    ViewtrailError,
)
from viewtrail.models.import_result import (
    CancelledMessage,
    CompleteMessage,
    ErrorMessage,
    ImportMessage,
    ImportResult,
)
from viewtrail.services.import_service import CancellationToken, ImportService

logger = logging.getLogger(__name__)

TERMINAL_MESSAGES = (CompleteMessage, ErrorMessage, CancelledMessage)

# Errors re-raised by result() with their structured attributes
ERROR_TYPES = {
    error.__name__: error
    for error in (ViewtrailError, TakeoutParsingError, NoValidRecordsError, HistoryStoreError)
}


class ImportWorker:
    """
    Thread adapter around ``ImportService``.

    Parameters
    ----------
    source : str | bytes
        Export contents.
    service : ImportService | None, optional
        Service to run (default: a new ``ImportService``).
    token : CancellationToken | None, optional
        Cancellation flag (default: a new token, see ``cancel()``).
    name : str | None, optional
        File name for logs and error messages.

    Examples
    --------
    >>> worker = ImportWorker(html_bytes, name="watch-history.html")
    >>> worker.start()
    >>> for message in worker.messages():
    ...     print(message.type)
    >>> result = worker.result()
    """

    def __init__(
        self,
        source: Union[str, bytes],
        service: Optional[ImportService] = None,
        token: Optional[CancellationToken] = None,
        name: Optional[str] = None,
    ) -> None:
        self._source = source
        self._service = service or ImportService()
        self.token = token or CancellationToken()
        self._name = name
        self._queue: "queue.Queue[ImportMessage]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._terminal: Optional[ImportMessage] = None
        self._done = threading.Event()

    def start(self) -> None:
        """Start the import thread. Calling twice is an error."""
        if self._thread is not None:
            raise RuntimeError("ImportWorker already started")
        self._thread = threading.Thread(
            target=self._run, name=f"import-{self._name or 'input'}", daemon=True
        )
        self._thread.start()

    def cancel(self) -> None:
        """Request cancellation; honoured at the next chunk boundary."""
        self.token.cancel()

    @property
    def done(self) -> bool:
        """Check if the terminal message has been produced."""
        return self._done.is_set()

    def _run(self) -> None:
        try:
            for message in self._service.iter_import(self._source, self.token, self._name):
                if isinstance(message, TERMINAL_MESSAGES):
                    self._terminal = message
                self._queue.put(message)
        except Exception as e:
            # Keep the protocol: a crash still ends with one terminal message
            logger.exception(f"❌ Import worker crashed: {e}")
            self._terminal = ErrorMessage(message=str(e), error_type=type(e).__name__)
            self._queue.put(self._terminal)
        finally:
            self._done.set()

    def messages(self, timeout: Optional[float] = None) -> Iterator[ImportMessage]:
        """
        Yield messages as they arrive, ending with the terminal one.

        Parameters
        ----------
        timeout : float | None, optional
            Seconds to wait for each message (default: wait forever).

        Raises
        ------
        queue.Empty
            If no message arrives within ``timeout``.
        """
        while True:
            message = self._queue.get(timeout=timeout)
            yield message
            if isinstance(message, TERMINAL_MESSAGES):
                return

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the thread to finish."""
        if self._thread is not None:
            self._thread.join(timeout)

    def result(self, timeout: Optional[float] = None) -> ImportResult:
        """
        Wait for the import and return its result.

        Raises
        ------
        ImportCancelledError
            If the import was cancelled.
        TakeoutParsingError
            If the input is not parseable as HTML.
        NoValidRecordsError
            If the document yields no watch records.
        ViewtrailError
            If the import failed for another reason.
        """
        self.join(timeout)
        terminal = self._terminal
        if isinstance(terminal, CompleteMessage):
            return ImportResult(records=terminal.records, summary=terminal.summary)
        if isinstance(terminal, CancelledMessage):
            raise ImportCancelledError(records_processed=terminal.records_processed)
        if isinstance(terminal, ErrorMessage):
            error_class = ERROR_TYPES.get(terminal.error_type)
            if error_class is None:
                raise ViewtrailError(terminal.message)
            raise error_class(terminal.message, **terminal.details)
        raise ViewtrailError("Import has not finished")
