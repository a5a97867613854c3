import asyncio
from collections.abc import Callable

from lotfill.batch.exceptions import TargetTimeout
from lotfill.logging.logger import Log
from lotfill.target.exceptions import TargetClosedError


async def wait_until_ready(
    probe: Callable[[], bool],
    *,
    interval: float,
    max_attempts: int,
    backoff_factor: float = 1.0,
    max_interval: float | None = None,
) -> int:
    """Probe until it returns True; return the number of probes used.

    Any exception from ``probe`` other than TargetClosedError means "not
    ready yet" and is retried silently. The delay starts at ``interval`` and
    grows by ``backoff_factor`` up to ``max_interval``. Cancelling the calling
    task stops the wait.

    Raises:
        TargetTimeout: after ``max_attempts`` unsuccessful probes.
        TargetClosedError: if the target disappeared.
    """
    delay = interval
    for attempt in range(1, max_attempts + 1):
        try:
            if probe():
                return attempt
        except TargetClosedError:
            raise
        except Exception as exc:
            Log.debug(f"Target not ready on probe {attempt}: {exc}")
        if attempt == max_attempts:
            break
        await asyncio.sleep(delay)
        delay = delay * backoff_factor
        if max_interval is not None:
            delay = min(delay, max_interval)
    raise TargetTimeout(f"Target not ready after {max_attempts} probes")
