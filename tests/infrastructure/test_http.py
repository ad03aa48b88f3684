import pytest
import requests
from requests.adapters import BaseAdapter

from djangoql_completion.errors import FetchError
from djangoql_completion.infrastructure import RequestsJsonClient


class StubResponse:
    def __init__(self, status_code: int = 200, payload=None, invalid_json: bool = False):
        self.status_code = status_code
        self._payload = payload
        self._invalid_json = invalid_json

    def json(self):
        if self._invalid_json:
            raise ValueError("Expecting value")
        return self._payload


class StubSession:
    def __init__(self, response: StubResponse | None = None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.requests: list[tuple[str, object, float]] = []
        self.closed = False

    def get(self, url: str, params=None, timeout: float | None = None):
        self.requests.append((url, params, timeout))
        if self.error is not None:
            raise self.error
        return self.response

    def close(self) -> None:
        self.closed = True


def test_get_json_forwards_params_to_session() -> None:
    session = StubSession(StubResponse(payload={"items": [], "page": 1, "has_next": False}))
    client = RequestsJsonClient(timeout=5, session=session)  # type: ignore[arg-type]
    params = {"field": "core.book.name", "search": "Tol", "page": 1}

    data = client.get_json_sync("http://testserver/suggestions/?a=1", params)

    assert data == {"items": [], "page": 1, "has_next": False}
    assert session.requests == [("http://testserver/suggestions/?a=1", params, 5)]


class RecordingAdapter(BaseAdapter):
    """Transport adapter answering every request with an empty JSON page."""

    def __init__(self) -> None:
        super().__init__()
        self.urls: list[str] = []

    def send(self, request, **kwargs):
        self.urls.append(request.url)
        response = requests.Response()
        response.status_code = 200
        response._content = b'{"items": [], "page": 1, "has_next": false}'
        response.url = request.url
        response.request = request
        return response

    def close(self) -> None:
        pass


def test_query_string_is_encoded_by_requests() -> None:
    adapter = RecordingAdapter()
    session = requests.Session()
    session.mount("http://", adapter)
    client = RequestsJsonClient(session=session)

    client.get_json_sync("http://testserver/suggestions/?a=1", {"field": "core.book.name", "search": "x y&z", "page": 2})

    assert adapter.urls == ["http://testserver/suggestions/?a=1&field=core.book.name&search=x+y%26z&page=2"]


def test_non_200_raises_fetch_error() -> None:
    client = RequestsJsonClient(session=StubSession(StubResponse(status_code=500)))  # type: ignore[arg-type]

    with pytest.raises(FetchError) as exc_info:
        client.get_json_sync("http://testserver/x/")

    assert exc_info.value.url == "http://testserver/x/"
    assert "HTTP 500" in str(exc_info.value)


def test_transport_error_raises_fetch_error() -> None:
    session = StubSession(error=requests.ConnectionError("connection refused"))
    client = RequestsJsonClient(session=session)  # type: ignore[arg-type]

    with pytest.raises(FetchError, match="connection refused"):
        client.get_json_sync("http://testserver/x/")


def test_invalid_json_raises_fetch_error() -> None:
    client = RequestsJsonClient(session=StubSession(StubResponse(invalid_json=True)))  # type: ignore[arg-type]

    with pytest.raises(FetchError, match="invalid JSON"):
        client.get_json_sync("http://testserver/x/")


@pytest.mark.asyncio
async def test_get_json_runs_in_thread() -> None:
    session = StubSession(StubResponse(payload={"current_model": None}))
    client = RequestsJsonClient(session=session)  # type: ignore[arg-type]

    assert await client.get_json("http://testserver/introspect/") == {"current_model": None}


def test_close() -> None:
    session = StubSession()
    RequestsJsonClient(session=session).close()  # type: ignore[arg-type]
    assert session.closed
