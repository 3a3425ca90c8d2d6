"""Tests for hitrouter.app — registration, freezing, and hit counting end to end."""

import json

import pytest

from hitrouter import HitRouter, Request, Response, RouterConfig
from hitrouter.errors import ConfigurationError, RouteConflict
from hitrouter.testing import TestClient


def _listing(response: Response) -> list[dict]:
    assert response.status == 200
    assert response.content_type == "application/json"
    return json.loads(response.text)


class TestRegistration:
    def test_handle_returns_distinct_tokens(self) -> None:
        router = HitRouter()
        first = router.handle("GET", "/a", lambda: "a")
        second = router.handle("POST", "/a", lambda: "a")
        assert first != second

    def test_method_is_uppercased(self) -> None:
        router = HitRouter()
        router.handle("patch", "/a", lambda: "a")
        assert [(e.method, e.path) for e in router.endpoints()] == [("PATCH", "/a")]

    @pytest.mark.parametrize(
        "shortcut", ["get", "head", "options", "post", "put", "patch", "delete"]
    )
    def test_method_shortcuts(self, shortcut: str) -> None:
        router = HitRouter()
        getattr(router, shortcut)("/a", lambda: "a")
        assert [e.method for e in router.endpoints()] == [shortcut.upper()]

    def test_route_decorator_defaults_to_get(self) -> None:
        router = HitRouter()

        @router.route("/a")
        def a():
            return "a"

        assert a() == "a"
        assert [(e.method, e.path) for e in router.endpoints()] == [("GET", "/a")]

    def test_route_decorator_one_endpoint_per_method(self) -> None:
        router = HitRouter()

        @router.route("/a", methods=["GET", "POST"])
        def a():
            return "a"

        assert sorted(e.method for e in router.endpoints()) == ["GET", "POST"]

    def test_conflict_surfaces_and_is_not_recorded(self) -> None:
        router = HitRouter()
        router.get("/users/:id", lambda id: id)
        with pytest.raises(RouteConflict):
            router.get("/users/:uid", lambda uid: uid)
        assert [e.path for e in router.endpoints()] == ["/users/:id"]

    def test_duplicate_rejected(self) -> None:
        router = HitRouter()
        router.get("/a", lambda: "a")
        with pytest.raises(RouteConflict, match="duplicate route"):
            router.get("/a", lambda: "b")

    def test_invalid_pattern(self) -> None:
        with pytest.raises(ConfigurationError):
            HitRouter().get("a", lambda: "a")

    def test_introspection_routes_present_but_unlisted(self) -> None:
        router = HitRouter()
        assert {(r.method, r.path) for r in router.routes} == {
            ("GET", "/endpoints"),
            ("GET", "/endpoints/unhit"),
        }
        assert router.endpoints() == []

    def test_introspection_can_be_disabled(self) -> None:
        router = HitRouter(RouterConfig(introspection=False))
        assert router.routes == []

    def test_introspection_path_collides_with_user_route(self) -> None:
        router = HitRouter()
        with pytest.raises(RouteConflict):
            router.get("/endpoints", lambda: "mine")


class TestFreeze:
    async def test_registration_after_first_request_raises(self) -> None:
        router = HitRouter()
        router.get("/a", lambda: "a")
        async with TestClient(router) as client:
            await client.get("/a")
        with pytest.raises(ConfigurationError, match="after the router has started"):
            router.get("/b", lambda: "b")

    async def test_serve_files_after_first_request_raises(self, tmp_path) -> None:
        router = HitRouter()
        async with TestClient(router):
            pass
        with pytest.raises(ConfigurationError):
            router.serve_files("/static/*filepath", tmp_path)

    async def test_lifespan_freezes_and_acknowledges(self) -> None:
        router = HitRouter()
        router.get("/a", lambda: "a")
        incoming = [{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}]
        sent: list[dict] = []

        async def receive() -> dict:
            return incoming.pop(0)

        async def send(message: dict) -> None:
            sent.append(message)

        await router({"type": "lifespan"}, receive, send)

        assert [m["type"] for m in sent] == [
            "lifespan.startup.complete",
            "lifespan.shutdown.complete",
        ]
        with pytest.raises(ConfigurationError):
            router.get("/b", lambda: "b")


class TestHitCounting:
    async def test_fresh_endpoint_then_one_hit(self) -> None:
        router = HitRouter()
        router.get("/a", lambda: "a")
        async with TestClient(router) as client:
            before = _listing(await client.get("/endpoints"))
            assert before == [{"Method": "GET", "Path": "/a", "Hits": 0}]
            assert _listing(await client.get("/endpoints/unhit")) == before

            response = await client.get("/a")
            assert response.status == 200
            assert response.text == "a"

            assert _listing(await client.get("/endpoints")) == [
                {"Method": "GET", "Path": "/a", "Hits": 1}
            ]
            unhit = await client.get("/endpoints/unhit")
            assert _listing(unhit) == []
            assert unhit.text == "[]"

    async def test_parameterised_route_is_one_endpoint(self) -> None:
        router = HitRouter()
        seen: list[str] = []
        router.get("/users/:id", lambda id: seen.append(id) or "ok")
        async with TestClient(router) as client:
            await client.get("/users/7")
            await client.get("/users/8")
            listing = _listing(await client.get("/endpoints"))
        assert seen == ["7", "8"]
        assert listing == [{"Method": "GET", "Path": "/users/:id", "Hits": 2}]

    async def test_same_pattern_different_methods_counted_separately(self) -> None:
        router = HitRouter()
        router.get("/a", lambda: "get")
        router.post("/a", lambda: "post")
        async with TestClient(router) as client:
            await client.post("/a")
            listing = _listing(await client.get("/endpoints"))
        assert listing == [
            {"Method": "GET", "Path": "/a", "Hits": 0},
            {"Method": "POST", "Path": "/a", "Hits": 1},
        ]

    async def test_not_found_leaves_counts_unchanged(self) -> None:
        router = HitRouter()
        router.get("/a", lambda: "a")
        async with TestClient(router) as client:
            response = await client.get("/zzz")
            assert response.status == 404
            assert response.text == "No route matches GET /zzz"
            assert _listing(await client.get("/endpoints")) == [
                {"Method": "GET", "Path": "/a", "Hits": 0}
            ]

    async def test_method_not_allowed_leaves_counts_unchanged(self) -> None:
        router = HitRouter()
        router.get("/a", lambda: "a")
        async with TestClient(router) as client:
            response = await client.post("/a")
            assert response.status == 405
            assert response.header("allow") == "GET"
            assert _listing(await client.get("/endpoints"))[0]["Hits"] == 0

    async def test_introspection_requests_not_counted(self) -> None:
        router = HitRouter()
        async with TestClient(router) as client:
            await client.get("/endpoints")
            await client.get("/endpoints/unhit")
            assert _listing(await client.get("/endpoints")) == []

    async def test_handler_failure_still_counted(self) -> None:
        router = HitRouter()

        def boom():
            raise RuntimeError("boom")

        router.get("/boom", boom)
        async with TestClient(router) as client:
            with pytest.raises(RuntimeError, match="boom"):
                await client.get("/boom")
            assert _listing(await client.get("/endpoints")) == [
                {"Method": "GET", "Path": "/boom", "Hits": 1}
            ]

    async def test_unconvertible_return_value_still_counted(self) -> None:
        router = HitRouter()
        router.get("/odd", lambda: object())
        async with TestClient(router) as client:
            with pytest.raises(TypeError, match="Cannot convert object"):
                await client.get("/odd")
            assert _listing(await client.get("/endpoints"))[0]["Hits"] == 1

    async def test_trailing_slash_redirect_not_counted(self) -> None:
        router = HitRouter()
        router.get("/a", lambda: "a")
        async with TestClient(router) as client:
            response = await client.get("/a/?x=1")
            assert response.status == 301
            assert response.header("location") == "/a?x=1"
            assert _listing(await client.get("/endpoints"))[0]["Hits"] == 0

    async def test_custom_introspection_paths(self) -> None:
        config = RouterConfig(endpoints_path="/_cov", endpoints_unhit_path="/_cov/unhit")
        router = HitRouter(config)
        router.get("/a", lambda: "a")
        async with TestClient(router) as client:
            assert _listing(await client.get("/_cov/unhit")) == [
                {"Method": "GET", "Path": "/a", "Hits": 0}
            ]
            assert (await client.get("/endpoints")).status == 404

    async def test_endpoints_method_mirrors_listing(self) -> None:
        router = HitRouter()
        router.get("/a", lambda: "a")
        router.get("/b", lambda: "b")
        async with TestClient(router) as client:
            await client.get("/b")
        assert [e.path for e in router.endpoints(unhit=True)] == ["/a"]
        assert {e.path: e.hits for e in router.endpoints()} == {"/a": 0, "/b": 1}


class TestCollaborators:
    async def test_not_found_handler(self) -> None:
        router = HitRouter(not_found=lambda request: f"nothing at {request.path}")
        async with TestClient(router) as client:
            response = await client.get("/zzz")
        assert response.status == 404
        assert response.text == "nothing at /zzz"

    async def test_not_found_handler_without_arguments(self) -> None:
        router = HitRouter(not_found=lambda: None)
        async with TestClient(router) as client:
            response = await client.get("/zzz")
        assert response.status == 404
        assert response.text == ""

    async def test_method_not_allowed_receives_allowed_set(self) -> None:
        received: list[frozenset[str]] = []

        def handler(request: Request, allowed: frozenset[str]) -> str:
            received.append(allowed)
            return "no"

        router = HitRouter(method_not_allowed=handler)
        router.get("/a", lambda: "a")
        router.put("/a", lambda: "a")
        async with TestClient(router) as client:
            response = await client.post("/a")
        assert received == [frozenset({"GET", "PUT"})]
        assert response.status == 405
        assert response.header("Allow") == "GET, PUT"

    async def test_method_not_allowed_keeps_its_own_allow_header(self) -> None:
        def handler():
            return Response("no", status=405).with_header("Allow", "GET, HEAD")

        router = HitRouter(method_not_allowed=handler)
        router.get("/a", lambda: "a")
        async with TestClient(router) as client:
            response = await client.delete("/a")
        assert response.header("allow") == "GET, HEAD"

    async def test_collaborator_may_be_assigned_later(self) -> None:
        router = HitRouter()
        router.not_found = lambda: ("gone", 410)
        async with TestClient(router) as client:
            response = await client.get("/zzz")
        assert response.status == 410

    async def test_panic_handler_recovers(self) -> None:
        caught: list[BaseException] = []

        async def recover(request: Request, exc: Exception) -> str:
            caught.append(exc)
            return f"recovered {request.path}"

        def boom():
            raise ValueError("bad")

        router = HitRouter(panic_handler=recover)
        router.get("/boom", boom)
        async with TestClient(router) as client:
            response = await client.get("/boom")
            listing = _listing(await client.get("/endpoints"))
        assert response.status == 500
        assert response.text == "recovered /boom"
        assert isinstance(caught[0], ValueError)
        assert listing == [{"Method": "GET", "Path": "/boom", "Hits": 1}]

    async def test_panic_handler_covers_collaborator_failures(self) -> None:
        def broken_not_found():
            raise LookupError("broken")

        router = HitRouter(not_found=broken_not_found, panic_handler=lambda: "oops")
        async with TestClient(router) as client:
            response = await client.get("/zzz")
        assert response.status == 500
        assert response.text == "oops"


class TestServeFiles:
    def test_requires_filepath_suffix(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match=r"\*filepath"):
            HitRouter().serve_files("/static/*rest", tmp_path)

    async def test_files_served_and_not_counted(self, tmp_path) -> None:
        (tmp_path / "style.css").write_text("body {}")
        router = HitRouter()
        router.serve_files("/static/*filepath", tmp_path)
        async with TestClient(router) as client:
            response = await client.get("/static/style.css")
            listing = _listing(await client.get("/endpoints"))
        assert response.status == 200
        assert response.text == "body {}"
        assert response.content_type == "text/css"
        assert listing == []

    def test_file_route_listed_in_routes(self, tmp_path) -> None:
        router = HitRouter()
        router.serve_files("/static/*filepath", tmp_path)
        file_routes = [r for r in router.routes if r.path == "/static/*filepath"]
        assert len(file_routes) == 1
        assert file_routes[0].token is None


class TestStrictMode:
    def test_debug_makes_registry_strict(self) -> None:
        from hitrouter.errors import RegistryInvariantError

        router = HitRouter(RouterConfig(debug=True))
        with pytest.raises(RegistryInvariantError):
            router._registry.hit(999)
