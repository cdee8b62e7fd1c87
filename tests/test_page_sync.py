import asyncio
import httpx
from app.client.page_sync import PageSync, create_page_sync, fingerprint


class FakeServer:
    """Serveur simulé: renvoie `pages` ou une erreur sur GET /pages"""

    def __init__(self, pages=None):
        self.pages = pages or []
        self.status_code = 200
        self.fail_transport = False
        self.calls = 0

    def handler(self, request):
        self.calls += 1
        assert request.url.path == "/pages"
        if self.fail_transport:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(self.status_code, json=self.pages)

    def client(self):
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler), base_url="http://test")


def page(page_id, updated_at):
    return {"id": page_id, "updatedAt": updated_at, "title": page_id}


# ========== FINGERPRINT ==========
def test_fingerprint_is_order_independent():
    pages = [page("b", "t2"), page("a", "t1")]
    assert fingerprint(pages) == "a:t1,b:t2"
    assert fingerprint(list(reversed(pages))) == fingerprint(pages)


def test_fingerprint_changes_with_updated_at():
    assert fingerprint([page("a", "t1")]) != fingerprint([page("a", "t2")])


def test_fingerprint_empty():
    assert fingerprint([]) == ""


# ========== TICK ==========
def test_tick_replaces_list_on_change():
    server = FakeServer([page("a", "t1")])
    changes = []

    async def scenario():
        async with server.client() as client:
            sync = PageSync(client, interval=0, on_change=changes.append)
            first = await sync.tick()
            second = await sync.tick()

            server.pages = [page("a", "t2"), page("b", "t1")]
            third = await sync.tick()
            return sync, [first, second, third]

    sync, results = asyncio.run(scenario())
    assert results == [True, False, True]
    assert sync.pages == server.pages
    assert sync.last_fingerprint == "a:t2,b:t1"
    assert len(changes) == 2


def test_tick_initial_pages_unchanged():
    initial = [page("a", "t1")]
    server = FakeServer(list(initial))

    async def scenario():
        async with server.client() as client:
            sync = PageSync(client, initial_pages=initial)
            return await sync.tick()

    assert asyncio.run(scenario()) is False


def test_tick_skipped_when_hidden():
    server = FakeServer([page("a", "t1")])

    async def scenario():
        async with server.client() as client:
            sync = PageSync(client, is_visible=lambda: False)
            return await sync.tick(), sync.pages

    changed, pages = asyncio.run(scenario())
    assert changed is False
    assert pages == []
    assert server.calls == 0


def test_tick_fetch_errors_are_noop():
    server = FakeServer([page("a", "t1")])

    async def scenario():
        async with server.client() as client:
            sync = PageSync(client, initial_pages=[page("x", "t0")])

            server.status_code = 500
            http_error = await sync.tick()

            server.status_code = 200
            server.fail_transport = True
            transport_error = await sync.tick()

            server.fail_transport = False
            recovered = await sync.tick()
            return sync, [http_error, transport_error, recovered]

    sync, results = asyncio.run(scenario())
    assert results == [False, False, True]
    assert sync.pages == [page("a", "t1")]


def test_tick_ignores_malformed_payload():
    server = FakeServer([{"title": "sans id"}])

    async def scenario():
        async with server.client() as client:
            sync = PageSync(client)
            return await sync.tick(), sync.pages

    assert asyncio.run(scenario()) == (False, [])


# ========== LOOP ==========
def test_run_detects_drift_eventually():
    server = FakeServer([page("a", "t1")])

    async def scenario():
        async with server.client() as client:
            sync = PageSync(client, interval=0.01)
            await sync.start()
            await asyncio.sleep(0.05)
            server.pages = [page("a", "t2")]
            for _ in range(100):
                if sync.last_fingerprint == "a:t2":
                    break
                await asyncio.sleep(0.01)
            await sync.stop()
            return sync

    sync = asyncio.run(scenario())
    assert sync.last_fingerprint == "a:t2"
    assert sync.task is None
    assert server.calls >= 2


def test_hidden_ticks_do_not_accumulate():
    server = FakeServer([page("a", "t1")])
    visible = {"value": False}

    async def scenario():
        async with server.client() as client:
            sync = PageSync(client, interval=0.01, is_visible=lambda: visible["value"])
            await sync.start()
            await asyncio.sleep(0.05)
            hidden_calls = server.calls

            visible["value"] = True
            for _ in range(100):
                if sync.pages:
                    break
                await asyncio.sleep(0.01)
            await sync.stop()
            return hidden_calls, sync

    hidden_calls, sync = asyncio.run(scenario())
    assert hidden_calls == 0
    assert sync.pages == [page("a", "t1")]


def test_create_page_sync_sets_auth_header():
    sync = create_page_sync("http://localhost:8000", "token123", interval=5)
    assert sync.client.headers["Authorization"] == "Bearer token123"
    assert sync.interval == 5
    asyncio.run(sync.client.aclose())
