"""
Result values for best-effort side calls.

Analytics writes and sensor probes must never hold up the rotation or a ping
answer, so they report through Ok/Err values that a logging sink consumes.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, Set, TypeVar, Union

from signage.gateway.client import GatewayError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    operation: str = ""

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: Exception
    operation: str = ""

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]


def log_result(result: Result) -> None:
    """Sink for fire-and-forget results; logs failures and never raises."""
    if isinstance(result, Err):
        logger.error(f"Error in {result.operation or 'background call'}: {str(result.error)}")
    else:
        logger.debug(f"{result.operation or 'background call'} succeeded")


async def capture(operation: str, call: Callable[[], Awaitable[T]]) -> Result:
    """Await a gateway call and turn its outcome into a Result."""
    try:
        return Ok(await call(), operation)
    except GatewayError as e:
        return Err(e, operation)


# Strong references so pending background calls are not garbage collected
_background: Set["asyncio.Task[Any]"] = set()


def spawn_best_effort(
    operation: str,
    call: Callable[[], Awaitable[Any]],
    sink: Optional[Callable[[Result], None]] = None,
) -> "asyncio.Task[None]":
    """
    Run a call in the background and feed its Result to the sink.

    Any exception the call raises becomes an Err; nothing escapes the task.
    """
    sink = sink or log_result

    async def runner() -> None:
        try:
            result = await capture(operation, call)
        except Exception as e:
            result = Err(e, operation)
        sink(result)

    task = asyncio.get_running_loop().create_task(runner())
    _background.add(task)
    task.add_done_callback(_background.discard)
    return task
