import pytest

from fakes import FakeSleep, FakeTransport, RecordingPresenter


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()
