"""Тесты для http_client модуля."""

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import call, patch

import httpx
import pytest
from conftest import RecordingHandler, json_response

from diffsome.exceptions import DiffsomeError
from diffsome.http_client import HttpClient
from diffsome.pagination import PaginationMeta
from diffsome.storage import MemoryStorage

pytestmark = pytest.mark.unit

MakeHttp = Callable[..., tuple[HttpClient, RecordingHandler]]


async def slow_handler(request: httpx.Request) -> httpx.Response:
    await asyncio.sleep(1)
    return httpx.Response(200, json={"data": "late"})


class TestUrlBuilding:
    """Построение URL."""

    async def test_endpoint_is_scoped_by_tenant(self, make_http: MakeHttp) -> None:
        http, recorder = make_http()

        await http.get("/boards")

        assert str(recorder.last.url) == "https://api.example.com/api/demo/boards"

    async def test_trailing_slash_stripped(self, make_http: MakeHttp) -> None:
        http, recorder = make_http(base_url="https://api.example.com/")

        await http.get("/boards")

        assert str(recorder.last.url) == "https://api.example.com/api/demo/boards"
        assert http.get_base_url() == "https://api.example.com/api/demo"

    async def test_none_params_are_dropped(self, make_http: MakeHttp) -> None:
        http, recorder = make_http()

        await http.get("/products", {"page": 2, "search": None, "is_featured": True})

        params = recorder.last.url.params
        assert params["page"] == "2"
        assert params["is_featured"] == "true"
        assert "search" not in params

    async def test_list_params_are_comma_joined(self, make_http: MakeHttp) -> None:
        """Списки передаются одним параметром через запятую."""
        http, recorder = make_http()

        await http.get("/products", {"ids": [1, 2], "tags": ("a", "b")})

        url = recorder.last.url
        assert url.params.get_list("ids") == ["1,2"]
        assert url.params["tags"] == "a,b"

    async def test_bool_params_are_lowercase(self, make_http: MakeHttp) -> None:
        http, recorder = make_http()

        await http.get("/products", {"is_featured": True, "in_stock": False})

        params = recorder.last.url.params
        assert params["is_featured"] == "true"
        assert params["in_stock"] == "false"

    async def test_download_url_without_token(self, make_http: MakeHttp) -> None:
        http, _ = make_http()

        assert (
            http.get_download_url("dl-token")
            == "https://api.example.com/download/demo/dl-token"
        )

    async def test_download_url_with_token(self, make_http: MakeHttp) -> None:
        http, _ = make_http()
        http.set_token("a b/c")

        assert (
            http.get_download_url("dl-token")
            == "https://api.example.com/download/demo/dl-token?auth_token=a%20b%2Fc"
        )


class TestHeaders:
    """Заголовки авторизации."""

    async def test_api_key_and_bearer_sent_together(self, make_http: MakeHttp) -> None:
        http, recorder = make_http(token="member-token")

        await http.get("/profile")

        headers = recorder.last.headers
        assert headers["X-API-Key"] == "pky_test"
        assert headers["Authorization"] == "Bearer member-token"
        assert headers["Content-Type"] == "application/json"
        assert headers["Accept"] == "application/json"

    async def test_no_auth_headers_when_unset(self, make_http: MakeHttp) -> None:
        http, recorder = make_http(api_key=None)

        await http.get("/boards")

        assert "X-API-Key" not in recorder.last.headers
        assert "Authorization" not in recorder.last.headers
        assert "X-Cart-Session" not in recorder.last.headers

    async def test_cart_session_header(self, make_http: MakeHttp) -> None:
        http, recorder = make_http()
        http.set_cart_session_id("cart-1")

        await http.get("/cart")

        assert recorder.last.headers["X-Cart-Session"] == "cart-1"

    async def test_custom_headers_merged(self, make_http: MakeHttp) -> None:
        http, recorder = make_http()

        await http.request("/boards", headers={"Accept-Language": "ko"})

        assert recorder.last.headers["Accept-Language"] == "ko"
        assert recorder.last.headers["X-API-Key"] == "pky_test"


class TestRequest:
    """Выполнение JSON-запросов."""

    async def test_unwraps_data_envelope(self, make_http: MakeHttp) -> None:
        http, _ = make_http(json_response({"success": True, "data": {"id": 1}}))

        assert await http.get("/posts/1") == {"id": 1}

    async def test_returns_bare_payload(self, make_http: MakeHttp) -> None:
        http, _ = make_http(json_response({"token": "t", "user": {"id": 1}}))

        assert await http.post("/auth/login", {"email": "a@b.c"}) == {
            "token": "t",
            "user": {"id": 1},
        }

    async def test_null_data_is_returned(self, make_http: MakeHttp) -> None:
        http, _ = make_http(json_response({"data": None}))

        assert await http.get("/cart") is None

    async def test_empty_body_returns_none(self, make_http: MakeHttp) -> None:
        http, _ = make_http(lambda request: httpx.Response(204))

        assert await http.delete("/posts/1") is None

    @pytest.mark.parametrize("method", ["post", "put", "patch"])
    async def test_body_serialized_as_json(self, make_http: MakeHttp, method: str) -> None:
        http, recorder = make_http()

        await getattr(http, method)("/posts", {"title": "Hello", "tags": ["a"]})

        assert recorder.last.method == method.upper()
        assert recorder.last_json() == {"title": "Hello", "tags": ["a"]}

    async def test_delete_sends_params(self, make_http: MakeHttp) -> None:
        http, recorder = make_http()

        await http.delete("/entities/customers", {"force": "true"})

        assert recorder.last.method == "DELETE"
        assert recorder.last.url.params["force"] == "true"

    async def test_unsupported_method(self, make_http: MakeHttp) -> None:
        http, recorder = make_http()

        with pytest.raises(ValueError):
            await http.request("/boards", method="OPTIONS")  # type: ignore[arg-type]

        assert recorder.requests == []


class TestErrorClassification:
    """Классификация ошибок."""

    async def test_validation_error(self, make_http: MakeHttp) -> None:
        http, _ = make_http(
            json_response(
                {"message": "Validation failed", "errors": {"email": ["required"]}},
                status=422,
            )
        )

        with pytest.raises(DiffsomeError) as exc_info:
            await http.post("/auth/register", {})

        assert exc_info.value.status == 422
        assert exc_info.value.message == "Validation failed"
        assert exc_info.value.errors == {"email": ["required"]}

    async def test_error_without_message_uses_fallback(self, make_http: MakeHttp) -> None:
        http, _ = make_http(json_response({}, status=500))

        with pytest.raises(DiffsomeError) as exc_info:
            await http.get("/boards")

        assert exc_info.value.status == 500
        assert str(exc_info.value) == "Request failed"
        assert exc_info.value.errors is None

    async def test_timeout(self, make_http: MakeHttp) -> None:
        http, _ = make_http(slow_handler, timeout=20)

        with pytest.raises(DiffsomeError) as exc_info:
            await http.get("/boards")

        assert exc_info.value.status == 408
        assert exc_info.value.message == "Request timeout"

    async def test_httpx_timeout_is_classified_as_timeout(self, make_http: MakeHttp) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("read timed out", request=request)

        http, _ = make_http(handler)

        with pytest.raises(DiffsomeError) as exc_info:
            await http.get("/boards")

        assert exc_info.value.status == 408

    async def test_transport_error(self, make_http: MakeHttp) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        http, _ = make_http(handler)

        with pytest.raises(DiffsomeError) as exc_info:
            await http.get("/boards")

        assert exc_info.value.status == 0
        assert exc_info.value.message == "connection refused"
        assert isinstance(exc_info.value.original_error, httpx.ConnectError)

    async def test_malformed_json(self, make_http: MakeHttp) -> None:
        http, _ = make_http(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(DiffsomeError) as exc_info:
            await http.get("/boards")

        assert exc_info.value.status == 0

    async def test_client_usable_after_timeout(self, make_http: MakeHttp) -> None:
        """Таймаут одного вызова не влияет на следующий."""
        calls = 0

        async def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            if calls == 1:
                await asyncio.sleep(1)
            return httpx.Response(200, json={"data": "ok"})

        http, _ = make_http(handler, timeout=20)

        with pytest.raises(DiffsomeError):
            await http.get("/boards")

        assert await http.get("/boards") == "ok"


class TestGetList:
    """Списковые запросы."""

    async def test_bare_array(self, make_http: MakeHttp) -> None:
        http, _ = make_http(json_response([{"id": 1}, {"id": 2}]))

        result = await http.get_list("/boards")

        assert result.data == [{"id": 1}, {"id": 2}]
        assert result.meta == PaginationMeta(total=2, from_=1, to=2)

    async def test_paginated_envelope(self, make_http: MakeHttp) -> None:
        """Ответ {data: [...], meta: {...}} распаковывается до списка.

        После снятия конверта data остаётся список, поэтому мета
        считается по нему.
        """
        http, _ = make_http(
            json_response({"data": [{"id": 1}], "meta": {"total": 50}})
        )

        result = await http.get_list("/blog")

        assert result.data == [{"id": 1}]
        assert result.meta.total == 1

    async def test_double_envelope_keeps_meta(self, make_http: MakeHttp) -> None:
        http, _ = make_http(
            json_response(
                {
                    "success": True,
                    "data": {
                        "data": [{"id": 1}, {"id": 2}],
                        "meta": {"total": 50, "current_page": 2},
                    },
                }
            )
        )

        result = await http.get_list("/blog")

        assert result.meta.total == 50
        assert result.meta.current_page == 2
        assert result.meta.per_page == 15

    async def test_null_data(self, make_http: MakeHttp) -> None:
        http, _ = make_http(json_response({"data": None}))

        result = await http.get_list("/boards")

        assert result.data == []
        assert result.meta.total == 0

    async def test_errors_still_raised(self, make_http: MakeHttp) -> None:
        http, _ = make_http(json_response({"message": "Forbidden"}, status=403))

        with pytest.raises(DiffsomeError) as exc_info:
            await http.get_list("/orders")

        assert exc_info.value.status == 403


class TestUpload:
    """Загрузка файлов."""

    async def test_multipart_body(self, make_http: MakeHttp) -> None:
        http, recorder = make_http(json_response({"data": {"id": 7}}), token="t")

        result = await http.upload("/media", ("photo.png", b"\x89PNG", "image/png"))

        request = recorder.last
        assert result == {"id": 7}
        assert request.method == "POST"
        assert request.headers["Content-Type"].startswith("multipart/form-data; boundary=")
        assert request.headers["X-API-Key"] == "pky_test"
        assert request.headers["Authorization"] == "Bearer t"
        assert b'name="file"; filename="photo.png"' in request.content

    async def test_custom_field_name(self, make_http: MakeHttp) -> None:
        http, recorder = make_http()

        await http.upload("/media", b"data", field_name="avatar")

        assert b'name="avatar"' in recorder.last.content

    async def test_path_input(self, make_http: MakeHttp, tmp_path: Path) -> None:
        path = tmp_path / "report.txt"
        path.write_bytes(b"hello")
        http, recorder = make_http()

        await http.upload("/media", path)

        assert b'filename="report.txt"' in recorder.last.content
        assert b"hello" in recorder.last.content

    async def test_path_read_off_event_loop(self, make_http: MakeHttp, tmp_path: Path) -> None:
        """Файл с диска читается в отдельном потоке."""
        path = tmp_path / "report.txt"
        path.write_bytes(b"hello")
        http, _ = make_http()

        with patch(
            "diffsome.http_client.asyncio.to_thread", wraps=asyncio.to_thread
        ) as to_thread:
            await http.upload("/media", path)

        assert call(path.read_bytes) in to_thread.await_args_list

    async def test_upload_timeout(self, make_http: MakeHttp) -> None:
        http, _ = make_http(slow_handler, timeout=20)

        with pytest.raises(DiffsomeError) as exc_info:
            await http.upload("/media", b"data")

        assert exc_info.value.status == 408
        assert exc_info.value.message == "Upload timeout"

    async def test_upload_failure_fallback_message(self, make_http: MakeHttp) -> None:
        http, _ = make_http(json_response({}, status=413))

        with pytest.raises(DiffsomeError) as exc_info:
            await http.upload("/media", b"data")

        assert exc_info.value.status == 413
        assert exc_info.value.message == "Upload failed"

    async def test_missing_file_is_transport_error(
        self, make_http: MakeHttp, tmp_path: Path
    ) -> None:
        http, recorder = make_http()

        with pytest.raises(DiffsomeError) as exc_info:
            await http.upload("/media", tmp_path / "missing.bin")

        assert exc_info.value.status == 0
        assert recorder.requests == []


class TestLifecycle:
    async def test_external_client_not_closed(
        self, make_config: Callable[..., Any]
    ) -> None:
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(json_response({}))
        ) as external:
            async with HttpClient(
                make_config(), storage=MemoryStorage(), client=external
            ) as http:
                await http.get("/boards")

            assert not external.is_closed
