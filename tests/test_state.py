import asyncio

import httpx
import pytest

from libtech_directory.catalog.loader import DatasetLoader, parse_csv
from libtech_directory.main import refresh_worker
from libtech_directory.state import AppState

from samples import SCENARIO_CSV


def test_listeners_are_notified_of_installed_datasets():
    state = AppState()
    seen = []
    unsubscribe = state.subscribe(lambda dataset, generation: seen.append((len(dataset), generation)))

    generation = state.begin_load()
    state.install(parse_csv(SCENARIO_CSV, "fr"), generation)
    unsubscribe()
    state.install(parse_csv(SCENARIO_CSV, "fr"), state.begin_load())

    assert seen == [(3, 1)]


def test_failing_listener_does_not_block_install():
    state = AppState()

    def broken(dataset, generation):
        raise RuntimeError("boom")

    state.subscribe(broken)
    assert state.install(parse_csv(SCENARIO_CSV, "fr"), state.begin_load()) is True
    assert len(state.dataset) == 3


def test_superseded_generation_cannot_install_or_report():
    state = AppState()
    old = state.begin_load()
    state.begin_load()

    assert state.install(parse_csv(SCENARIO_CSV, "fr"), old) is False
    state.record_failure(old, "late failure")

    assert len(state.dataset) == 0
    assert state.notice is None


@pytest.mark.asyncio
async def test_refresh_worker_reloads_until_cancelled():
    state = AppState()
    requests = []

    def handler(request):
        requests.append(request)
        if len(requests) == 1:
            return httpx.Response(500)
        return httpx.Response(200, text=SCENARIO_CSV)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    loader = DatasetLoader(state, url="https://sheets.example.org/pub", client=client)

    worker = asyncio.create_task(refresh_worker(loader, 0.01))

    async def _until_loaded():
        while len(state.dataset) < 3:
            await asyncio.sleep(0.01)

    await asyncio.wait_for(_until_loaded(), timeout=5)
    worker.cancel()
    await worker

    assert len(state.dataset) == 3
    assert all("_" in r.url.params for r in requests)
