"""Connection supervisor: dialing, retry backoff and disconnect handling."""

import asyncio
from itertools import accumulate

import pytest

from parley.config import HostSettings
from parley.supervisor import (
    DISCONNECTED_MESSAGE,
    MAX_RETRY_ATTEMPTS,
    RESTORED_MESSAGE,
    ConnectionState,
    ConnectionSupervisor,
    RetryState,
    retry_delays,
)

from fakes import FakeSleep, FakeTransport


def make_supervisor(transport, sleep, notifications, connected_calls=None):
    return ConnectionSupervisor(
        transport,
        settings=lambda: HostSettings(host="chat.local", port=4000),
        notify=notifications.append,
        on_connected=(lambda: connected_calls.append(transport.dials[-1])) if connected_calls is not None else None,
        sleep=sleep,
    )


class TestRetrySchedule:
    def test_first_attempt_after_ten_seconds_then_minutes(self):
        delays = retry_delays()
        assert len(delays) == MAX_RETRY_ATTEMPTS
        assert delays[:3] == [10, 60, 120]
        assert delays[-1] == 540

    def test_gaps_strictly_increase(self):
        delays = retry_delays()
        assert all(a < b for a, b in zip(delays, delays[1:]))
        for k, elapsed in enumerate(accumulate(delays), start=1):
            assert elapsed >= 10 + 60 * k * (k - 1) / 2


class TestConnect:
    @pytest.mark.asyncio
    async def test_successful_connect(self, fake_sleep):
        transport = FakeTransport()
        notifications: list[str] = []
        connected: list = []
        supervisor = make_supervisor(transport, fake_sleep, notifications, connected)

        assert await supervisor.connect("localhost", 3811) is True
        assert supervisor.state is ConnectionState.CONNECTED
        assert fake_sleep.delays == [1.0]
        assert connected == [("localhost", 3811)]
        assert notifications == []
        assert supervisor.retry_task is None

    @pytest.mark.asyncio
    async def test_failed_retry_attempt_is_quiet(self, fake_sleep):
        transport = FakeTransport(failures=1)
        notifications: list[str] = []
        supervisor = make_supervisor(transport, fake_sleep, notifications)

        assert await supervisor.connect("localhost", 3811, is_retry=True) is False
        assert notifications == []
        assert supervisor.retry_task is None
        assert supervisor.state is ConnectionState.DISCONNECTED

    @pytest.mark.asyncio
    async def test_initial_failure_retries_until_restored(self, fake_sleep):
        transport = FakeTransport(failures=3)
        notifications: list[str] = []
        connected: list = []
        supervisor = make_supervisor(transport, fake_sleep, notifications, connected)

        assert await supervisor.connect("localhost", 3811) is False
        assert notifications[0].startswith('Can\'t connect to host "localhost:3811"')
        assert "Next try after: 10 sec" in notifications[0]
        assert "connection refused" in notifications[0]

        await supervisor.retry_task
        assert supervisor.retry_state is RetryState.RESTORED
        assert supervisor.state is ConnectionState.CONNECTED
        assert notifications[1:] == [RESTORED_MESSAGE]
        assert fake_sleep.delays == [1.0, 10, 1.0, 60, 1.0, 120, 1.0]
        assert transport.dials[1:] == [("chat.local", 4000)] * 3
        assert connected == [("chat.local", 4000)]

    @pytest.mark.asyncio
    async def test_exhaustion_is_silent(self, fake_sleep):
        transport = FakeTransport(failures=100)
        notifications: list[str] = []
        supervisor = make_supervisor(transport, fake_sleep, notifications)

        await supervisor.connect("localhost", 3811)
        await supervisor.retry_task
        assert supervisor.retry_state is RetryState.EXHAUSTED
        assert len(transport.dials) == 1 + MAX_RETRY_ATTEMPTS
        assert len(notifications) == 1

    @pytest.mark.asyncio
    async def test_only_one_retry_loop_runs(self):
        sleep = FakeSleep(block_above=5)
        transport = FakeTransport(failures=2)
        notifications: list[str] = []
        supervisor = make_supervisor(transport, sleep, notifications)

        await supervisor.connect("localhost", 3811)
        first = supervisor.retry_task
        await supervisor.connect("localhost", 3811)
        assert supervisor.retry_task is first
        await supervisor.close()

    @pytest.mark.asyncio
    async def test_connect_while_connected_does_not_redial(self, fake_sleep):
        transport = FakeTransport()
        connected: list = []
        supervisor = make_supervisor(transport, fake_sleep, [], connected)

        await supervisor.connect("localhost", 3811)
        assert await supervisor.connect("localhost", 3811) is True
        assert transport.dials == [("localhost", 3811)]
        assert connected == [("localhost", 3811)]

    @pytest.mark.asyncio
    async def test_manual_connect_cancels_pending_retry_loop(self):
        sleep = FakeSleep(block_above=5)
        transport = FakeTransport(failures=1)
        notifications: list[str] = []
        supervisor = make_supervisor(transport, sleep, notifications)

        await supervisor.connect("localhost", 3811)
        task = supervisor.retry_task
        await asyncio.sleep(0)
        assert supervisor.retry_state is RetryState.WAITING

        assert await supervisor.connect("localhost", 3811) is True
        assert task.cancelled()
        assert supervisor.retry_task is None
        assert supervisor.retry_state is RetryState.IDLE
        assert len(transport.dials) == 2
        assert RESTORED_MESSAGE not in notifications


class TestDisconnect:
    @pytest.mark.asyncio
    async def test_organic_disconnect_notifies_without_retry(self, fake_sleep):
        transport = FakeTransport()
        notifications: list[str] = []
        supervisor = make_supervisor(transport, fake_sleep, notifications)

        await supervisor.connect("localhost", 3811)
        transport.drop()
        assert notifications == [DISCONNECTED_MESSAGE]
        assert supervisor.state is ConnectionState.DISCONNECTED
        assert supervisor.retry_task is None

    @pytest.mark.asyncio
    async def test_close_cancels_retry_loop(self):
        sleep = FakeSleep(block_above=5)
        transport = FakeTransport(failures=1)
        supervisor = make_supervisor(transport, sleep, [])

        await supervisor.connect("localhost", 3811)
        task = supervisor.retry_task
        await asyncio.sleep(0)
        assert supervisor.retry_state is RetryState.WAITING

        await supervisor.close()
        assert task.cancelled()
        assert transport.closed
        assert supervisor.state is ConnectionState.DISCONNECTED
