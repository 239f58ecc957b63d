import asyncio
from collections.abc import Awaitable
from typing import TypeVar

T = TypeVar('T')


class OperationTimeout(TimeoutError):
    pass


async def bounded(operation: Awaitable[T], seconds: float) -> T:
    """Await ``operation`` for at most ``seconds``; the pending call is cancelled on expiry."""
    try:
        return await asyncio.wait_for(operation, timeout=seconds)
    except TimeoutError as exc:
        raise OperationTimeout(f'Timed out after {int(seconds * 1000)}ms') from exc
