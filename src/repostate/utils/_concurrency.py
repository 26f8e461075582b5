"""Structured concurrency helpers built on anyio."""

from collections.abc import Awaitable, Callable, Sequence

import anyio


async def gather_settled[T](
    funcs: Sequence[Callable[[], Awaitable[T]]],
) -> list[T]:
    """Run async callables concurrently and return their results in order.

    Unlike a bare task group, a failing callable does not cancel its
    siblings: every callable runs to completion or to its own failure.
    Afterwards the first failure, in input order, is re-raised unchanged.

    Args:
        funcs: Zero-argument async callables.

    Returns:
        Results in the order of `funcs`.
    """
    results: list[T | None] = [None] * len(funcs)
    errors: list[Exception | None] = [None] * len(funcs)

    async def _run(index: int, func: Callable[[], Awaitable[T]]) -> None:
        try:
            results[index] = await func()
        except Exception as e:  # noqa: BLE001
            errors[index] = e

    async with anyio.create_task_group() as tg:
        for index, func in enumerate(funcs):
            tg.start_soon(_run, index, func)

    for error in errors:
        if error is not None:
            raise error

    return results  # pyright: ignore[reportReturnType]
