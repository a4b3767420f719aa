"""
Optimistic Updates

Three phases: snapshot the prior value, apply the speculative value
locally, then commit (keep it) or revert (restore the snapshot) once the
backend answers. No automatic retry.
"""

from typing import Any, Awaitable, Callable, Generic, TypeVar

T = TypeVar("T")


class OptimisticUpdate(Generic[T]):
    def __init__(self, read: Callable[[], T], write: Callable[[T], None]):
        self.read = read
        self.write = write

    async def run(self, speculative: T, commit: Callable[[], Awaitable[Any]]) -> T:
        """
        Apply ``speculative`` and await ``commit``.

        The prior value is restored if ``commit`` raises (or is cancelled)
        and the exception propagates.
        """
        prior = self.read()
        self.write(speculative)
        try:
            await commit()
        except BaseException:
            self.write(prior)
            raise
        return speculative
