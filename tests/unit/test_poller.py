from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from lotfill.batch.exceptions import TargetTimeout
from lotfill.batch.poller import wait_until_ready
from lotfill.target.exceptions import TargetAccessError, TargetClosedError


@pytest.fixture()
def sleep():
    with patch("lotfill.batch.poller.asyncio.sleep", new_callable=AsyncMock) as mocked:
        yield mocked


class TestWaitUntilReady:
    @pytest.mark.asyncio
    async def test_ready_on_first_probe(self, sleep: AsyncMock) -> None:
        probe = MagicMock(return_value=True)

        assert await wait_until_ready(probe, interval=0.05, max_attempts=600) == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_probe_errors_mean_not_ready(self, sleep: AsyncMock) -> None:
        probe = MagicMock(side_effect=[TargetAccessError("init"), RuntimeError("dom"), False, True])

        assert await wait_until_ready(probe, interval=0.05, max_attempts=600) == 4
        assert sleep.await_count == 3

    @pytest.mark.asyncio
    async def test_times_out_after_budget(self, sleep: AsyncMock) -> None:
        probe = MagicMock(return_value=False)

        with pytest.raises(TargetTimeout, match="600 probes"):
            await wait_until_ready(probe, interval=0.05, max_attempts=600)
        assert probe.call_count == 600
        assert sleep.await_count == 599

    @pytest.mark.asyncio
    async def test_closed_target_stops_polling(self, sleep: AsyncMock) -> None:
        probe = MagicMock(side_effect=[False, TargetClosedError("gone"), True])

        with pytest.raises(TargetClosedError):
            await wait_until_ready(probe, interval=0.05, max_attempts=10)
        assert probe.call_count == 2

    @pytest.mark.asyncio
    async def test_fixed_interval_by_default(self, sleep: AsyncMock) -> None:
        probe = MagicMock(side_effect=[False, False, True])

        await wait_until_ready(probe, interval=0.05, max_attempts=10)

        assert [call.args[0] for call in sleep.await_args_list] == [0.05, 0.05]

    @pytest.mark.asyncio
    async def test_backoff_is_capped(self, sleep: AsyncMock) -> None:
        probe = MagicMock(side_effect=[False, False, False, False, True])

        await wait_until_ready(probe, interval=0.1, max_attempts=10, backoff_factor=2.0, max_interval=0.3)

        assert [call.args[0] for call in sleep.await_args_list] == pytest.approx([0.1, 0.2, 0.3, 0.3])
