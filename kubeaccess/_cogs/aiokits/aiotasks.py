"""
Helpers for orchestrating asyncio tasks.

These utilities only support tasks, not more generic futures, coroutines,
or other awaitables. In most case where we use it, we need specifically tasks,
as we not only wait for them, but also cancel them.
"""
import asyncio
from typing import Any, Collection, Optional, Set, Tuple

from kubeaccess._cogs.helpers import typedefs

Task = typedefs.Task


async def wait(
        tasks: Collection[Task],
        *,
        timeout: Optional[float] = None,
        return_when: Any = asyncio.ALL_COMPLETED,
) -> Tuple[Set[Task], Set[Task]]:
    """
    A safer version of :func:`asyncio.wait` -- does not fail on an empty list.
    """
    if not tasks:
        return set(), set()
    done, pending = await asyncio.wait(tasks, timeout=timeout, return_when=return_when)
    return done, pending


async def stop(
        tasks: Collection[Task],
        *,
        title: str,
        quiet: bool = False,
        logger: Optional[typedefs.Logger] = None,
) -> Tuple[Set[Task], Set[Task]]:
    """
    Cancel the tasks and wait for them to finish.

    The stopping itself does not have timeouts. It always ends either with
    the tasks stopped/exited, or with the stop-routine itself being cancelled.
    In the latter case, the tasks are left cancelled but not awaited.
    """
    captitle = title.capitalize()

    if not tasks:
        if logger is not None and not quiet:
            logger.debug(f"{captitle} tasks stopping is skipped: no tasks given.")
        return set(), set()

    for task in tasks:
        task.cancel()

    done, pending = await wait(tasks)
    if logger is not None and (not quiet or pending):
        are = 'are' if not pending else 'are not'
        logger.debug(f"{captitle} tasks {are} stopped; tasks left: {pending!r}")
    return done, pending


async def reraise(
        tasks: Collection[Task],
) -> None:
    """
    Re-raise the first error from the tasks, if any. Do nothing if all tasks have succeeded.

    The errors of all other failed tasks are retrieved too (and discarded),
    so that asyncio does not complain about them never being retrieved.
    Cancelled and unfinished tasks are ignored.
    """
    exceptions = [task.exception() for task in tasks if task.done() and not task.cancelled()]
    for exception in exceptions:
        if exception is not None:
            raise exception
