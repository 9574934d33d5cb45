import asyncio
from collections.abc import Coroutine
from typing import Any


async def run_concurrently(*reads: Coroutine[Any, Any, Any]) -> list[Any]:
    """
    Run independent reads together and return their results in order.

    The first failure cancels the remaining reads and is raised as is, not
    wrapped in an ExceptionGroup, so the app's exception handlers still match it.
    """
    try:
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(read) for read in reads]
    except ExceptionGroup as failed:
        raise failed.exceptions[0] from None
    return [task.result() for task in tasks]
