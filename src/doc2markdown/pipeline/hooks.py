"""
Caller hook signatures and result settling.

Every hook may be a plain function or an ``async def`` coroutine function.
Awaitable results are driven to completion before the pipeline continues,
so hooks run strictly in document and task order.
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Dict, TypeVar, Union

T = TypeVar("T")

# Local image path -> URL written into the Markdown
ImageHook = Callable[[str], Union[str, Awaitable[str]]]
UrlPredicate = Callable[[str], Union[bool, Awaitable[bool]]]
ProgressCallback = Callable[[int, int, int], None]
FinishCallback = Callable[[str, str, Dict[str, Any]], Union[None, Awaitable[None]]]


async def _await(awaitable: Awaitable[T]) -> T:
    return await awaitable


def settle(result: Union[T, Awaitable[T]]) -> T:
    """
    Value of a hook call, awaiting it first when it is awaitable.

    Args:
        result: Return value of a hook

    Returns:
        The plain value, or the awaited value of a coroutine/future

    Raises:
        RuntimeError: If an awaitable is returned while an event loop is
            already running in this thread
    """
    if not inspect.isawaitable(result):
        return result
    return asyncio.run(_await(result))
