"""Multi-step upload orchestration.

A workflow validates every item before touching the network, uploads the
items one after another, then commits them with a single finalize call that
is retried while the server reports a transient failure.
"""

from enum import Enum
from logging import getLogger
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar

from tenacity import (
    RetryCallState,
    RetryError,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_fixed,
)

from ._utils.constants import (
    ALBUM_MAX_ITEMS,
    ALBUM_MIN_ITEMS,
    CONFIGURE_RETRY_DELAY,
    MAX_CONFIGURE_RETRIES,
)
from .models.errors import WorkflowAlreadyRunError
from .models.exceptions import (
    ApiError,
    ConfigureRetriesExhaustedError,
    NetworkError,
    TransientApiError,
)

ItemT = TypeVar("ItemT")
ResultT = TypeVar("ResultT")


def is_transient_error(exception: BaseException) -> bool:
    """Network failures, transient API errors and unclassified API failures.

    Typed API errors (not found, empty response, throttling, login and the
    other account states) are permanent.
    """
    if isinstance(exception, (NetworkError, TransientApiError)):
        return True
    return type(exception) is ApiError


class WorkflowState(str, Enum):
    PENDING = "pending"
    VALIDATING = "validating"
    UPLOADING = "uploading"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


class RetryableWorkflow(Generic[ItemT, ResultT]):
    """Single-shot validate, upload, finalize pipeline.

    Args:
        items: Raw items, in upload order.
        upload_item: Uploads one validated item. Runs sequentially.
        finalize: Commits all validated items. Must build fresh requests on
            every call, since it may be invoked more than once.
        validate_item: Checks one raw item and returns what is carried
            forward. Defaults to passing the item through unchanged.
        min_items: Smallest accepted item count.
        max_items: Largest accepted item count.
        max_retries: Finalize retries after the first attempt.
        retry_delay: Seconds to wait between finalize attempts.
        is_transient: Decides whether a finalize failure may be retried.
        name: Label used in log lines.
    """

    def __init__(
        self,
        items: Sequence[Any],
        *,
        upload_item: Callable[[ItemT], None],
        finalize: Callable[[List[ItemT]], ResultT],
        validate_item: Optional[Callable[[Any], ItemT]] = None,
        min_items: int = ALBUM_MIN_ITEMS,
        max_items: int = ALBUM_MAX_ITEMS,
        max_retries: int = MAX_CONFIGURE_RETRIES,
        retry_delay: float = CONFIGURE_RETRY_DELAY,
        is_transient: Callable[[BaseException], bool] = is_transient_error,
        name: str = "workflow",
    ) -> None:
        self._logger = getLogger("appwire")
        self._raw_items = list(items)
        self._upload_item = upload_item
        self._finalize = finalize
        self._validate_item = validate_item or (lambda item: item)
        self.min_items = min_items
        self.max_items = max_items
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._is_transient = is_transient
        self.name = name

        self._state = WorkflowState.PENDING
        self.items: List[ItemT] = []
        self.finalize_attempts = 0

    @property
    def state(self) -> WorkflowState:
        return self._state

    def run(self) -> ResultT:
        """Run the workflow to completion.

        Raises:
            WorkflowAlreadyRunError: If ``run`` was already called.
            ValueError: If validation fails. No upload has happened then.
            ConfigureRetriesExhaustedError: If every finalize attempt failed
                transiently.
        """
        if self._state is not WorkflowState.PENDING:
            raise WorkflowAlreadyRunError()

        try:
            self._state = WorkflowState.VALIDATING
            self.items = self._validate()

            self._state = WorkflowState.UPLOADING
            for index, item in enumerate(self.items):
                self._logger.debug(f"{self.name}: uploading item {index}")
                self._upload_item(item)

            self._state = WorkflowState.FINALIZING
            result = self._finalize_with_retries()
        except BaseException:
            self._state = WorkflowState.FAILED
            raise

        self._state = WorkflowState.DONE
        return result

    def _validate(self) -> List[ItemT]:
        count = len(self._raw_items)
        if count < self.min_items or count > self.max_items:
            raise ValueError(
                f"{self.name} requires {self.min_items}-{self.max_items} items. "
                f"You tried to submit {count}."
            )
        return [self._validate_item(item) for item in self._raw_items]

    def _attempt_finalize(self) -> ResultT:
        self.finalize_attempts += 1
        return self._finalize(self.items)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exception = retry_state.outcome.exception() if retry_state.outcome else None
        self._logger.warning(
            f"{self.name}: finalize attempt {retry_state.attempt_number}/"
            f"{self.max_retries + 1} failed ({exception}). "
            f"Retrying after {self.retry_delay:.2f}s"
        )

    def _finalize_with_retries(self) -> ResultT:
        retrying = Retrying(
            retry=retry_if_exception(self._is_transient),
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_fixed(self.retry_delay),
            before_sleep=self._log_retry,
        )
        try:
            return retrying(self._attempt_finalize)
        except RetryError as e:
            last_error = e.last_attempt.exception()
            raise ConfigureRetriesExhaustedError(
                self.finalize_attempts, last_error
            ) from last_error
