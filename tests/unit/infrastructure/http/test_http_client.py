# nosec B101


import asyncio
import contextlib
import pytest
from unittest.mock import AsyncMock
import httpx

from infrastructure.http.client import HttpClient
from domain.exceptions.rates import (
    HttpStatusError,
    NetworkError,
    RequestTimeoutError,
    TransportError,
)


def make_client(response=None, side_effect=None):
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    if side_effect is not None:
        mock_client.get.side_effect = side_effect
    else:
        mock_client.get.return_value = response
    return HttpClient(client=mock_client), mock_client


@pytest.mark.asyncio
async def test_get_json_body_is_parsed():
    client, mock_client = make_client(httpx.Response(200, json={'base': 'USD', 'rates': {'EUR': 0.9}}))

    data = await client.get('https://rates.example.com/latest')

    assert data == {'base': 'USD', 'rates': {'EUR': 0.9}}
    mock_client.get.assert_called_once()
    call_args = mock_client.get.call_args
    assert call_args[0][0] == 'https://rates.example.com/latest'
    assert call_args[1]['headers']['Accept'] == 'application/json'


@pytest.mark.asyncio
async def test_get_non_json_body_returns_text():
    client, _ = make_client(
        httpx.Response(200, text='pong', headers={'content-type': 'text/plain'})
    )

    data = await client.get('https://rates.example.com/ping')

    assert data == 'pong'


@pytest.mark.asyncio
async def test_get_builds_query_and_skips_none_values():
    client, mock_client = make_client(httpx.Response(200, json={}))

    await client.get(
        'https://rates.example.com/latest',
        query={'base': 'USD', 'symbols': None, 'places': 4},
    )

    url = mock_client.get.call_args[0][0]
    assert url == 'https://rates.example.com/latest?base=USD&places=4'


@pytest.mark.asyncio
async def test_get_appends_query_to_existing_query_string():
    client, mock_client = make_client(httpx.Response(200, json={}))

    await client.get('https://rates.example.com/latest?source=ecb', query={'base': 'EUR'})

    assert mock_client.get.call_args[0][0] == 'https://rates.example.com/latest?source=ecb&base=EUR'


@pytest.mark.asyncio
async def test_get_extra_headers_are_merged():
    client, mock_client = make_client(httpx.Response(200, json={}))

    await client.get('https://rates.example.com/symbols', headers={'X-Trace': 'abc'})

    headers = mock_client.get.call_args[1]['headers']
    assert headers['X-Trace'] == 'abc'
    assert headers['Accept'] == 'application/json'


# ============================================================================
# TEST: HTTP status errors
# ============================================================================

@pytest.mark.asyncio
async def test_get_http_error_uses_json_message():
    client, _ = make_client(httpx.Response(404, json={'message': 'base not supported'}))

    with pytest.raises(HttpStatusError) as exc_info:
        await client.get('https://rates.example.com/latest')

    assert exc_info.value.status == 404
    assert exc_info.value.detail == 'base not supported'
    assert '404' in str(exc_info.value)
    assert 'base not supported' in str(exc_info.value)


@pytest.mark.asyncio
async def test_get_http_error_falls_back_to_error_field():
    client, _ = make_client(httpx.Response(429, json={'error': 'rate limited'}))

    with pytest.raises(HttpStatusError) as exc_info:
        await client.get('https://rates.example.com/latest')

    assert exc_info.value.status == 429
    assert exc_info.value.detail == 'rate limited'


@pytest.mark.asyncio
async def test_get_http_error_with_text_body():
    client, _ = make_client(
        httpx.Response(500, text='Internal Server Error', headers={'content-type': 'text/plain'})
    )

    with pytest.raises(HttpStatusError) as exc_info:
        await client.get('https://rates.example.com/latest')

    assert exc_info.value.status == 500
    assert exc_info.value.detail == 'Internal Server Error'


@pytest.mark.asyncio
async def test_get_http_error_without_body_has_no_detail():
    client, _ = make_client(httpx.Response(503))

    with pytest.raises(HttpStatusError) as exc_info:
        await client.get('https://rates.example.com/latest')

    assert exc_info.value.status == 503
    assert exc_info.value.detail is None
    assert str(exc_info.value) == 'Request failed: 503 Service Unavailable'


@pytest.mark.asyncio
async def test_get_http_error_with_broken_json_body_has_no_detail():
    client, _ = make_client(
        httpx.Response(502, content=b'{oops', headers={'content-type': 'application/json'})
    )

    with pytest.raises(HttpStatusError) as exc_info:
        await client.get('https://rates.example.com/latest')

    assert exc_info.value.detail is None


# ============================================================================
# TEST: Timeouts and transport failures
# ============================================================================

@pytest.mark.asyncio
async def test_get_deadline_exceeded_raises_timeout():
    async def slow_get(*args, **kwargs):
        await asyncio.sleep(1)
        return httpx.Response(200, json={})

    client, _ = make_client(side_effect=slow_get)

    with pytest.raises(RequestTimeoutError) as exc_info:
        await client.get('https://rates.example.com/latest', timeout_ms=10)

    assert exc_info.value.timeout_ms == 10
    assert isinstance(exc_info.value, TransportError)
    assert not isinstance(exc_info.value, NetworkError)


@pytest.mark.asyncio
async def test_get_httpx_timeout_is_reported_as_timeout():
    client, _ = make_client(side_effect=httpx.ReadTimeout('Request timed out'))

    with pytest.raises(RequestTimeoutError):
        await client.get('https://rates.example.com/latest')


@pytest.mark.asyncio
async def test_get_connection_error_wraps_cause():
    cause = httpx.ConnectError('Connection refused')
    client, _ = make_client(side_effect=cause)

    with pytest.raises(NetworkError) as exc_info:
        await client.get('https://rates.example.com/latest')

    assert exc_info.value.cause is cause
    assert exc_info.value.__cause__ is cause


@pytest.mark.asyncio
async def test_get_invalid_json_is_network_error():
    client, _ = make_client(
        httpx.Response(200, content=b'not json', headers={'content-type': 'application/json'})
    )

    with pytest.raises(NetworkError) as exc_info:
        await client.get('https://rates.example.com/latest')

    assert isinstance(exc_info.value.cause, ValueError)


@pytest.mark.asyncio
async def test_get_uses_client_default_timeout():
    async def slow_get(*args, **kwargs):
        await asyncio.sleep(1)

    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.side_effect = slow_get
    client = HttpClient(client=mock_client, timeout_ms=5)

    with pytest.raises(RequestTimeoutError) as exc_info:
        await client.get('https://rates.example.com/latest')

    assert exc_info.value.timeout_ms == 5


# ============================================================================
# TEST: Real transport
# ============================================================================

@contextlib.asynccontextmanager
async def slow_server(delay):
    async def handle(reader, writer):
        body = b'{"base": "USD"}'
        with contextlib.suppress(ConnectionError):
            await reader.readuntil(b"\r\n\r\n")
            await asyncio.sleep(delay)
            writer.write(
                b"HTTP/1.1 200 OK\r\n"
                b"Content-Type: application/json\r\n"
                b"Content-Length: " + str(len(body)).encode() + b"\r\n"
                b"Connection: close\r\n\r\n" + body
            )
            await writer.drain()
        writer.close()

    server = await asyncio.start_server(handle, '127.0.0.1', 0)
    port = server.sockets[0].getsockname()[1]
    try:
        yield f'http://127.0.0.1:{port}'
    finally:
        server.close()
        await server.wait_closed()


@pytest.mark.asyncio
async def test_get_slow_response_within_deadline_outlasts_client_default_timeout():
    async with slow_server(delay=0.3) as base_url:
        async with httpx.AsyncClient(timeout=0.1) as short_timeout_client:
            client = HttpClient(client=short_timeout_client, timeout_ms=2000)

            data = await client.get(f'{base_url}/latest')

    assert data == {'base': 'USD'}


@pytest.mark.asyncio
async def test_get_slow_response_past_deadline_times_out():
    async with slow_server(delay=1) as base_url:
        client = HttpClient(timeout_ms=200)
        try:
            with pytest.raises(RequestTimeoutError) as exc_info:
                await client.get(f'{base_url}/latest')
        finally:
            await client.close()

    assert exc_info.value.timeout_ms == 200


def test_owned_client_timeout_matches_deadline():
    client = HttpClient(timeout_ms=12000)

    assert client._client.timeout == httpx.Timeout(12.0)


# ============================================================================
# TEST: Lifecycle
# ============================================================================

@pytest.mark.asyncio
async def test_close_leaves_injected_client_open():
    client, mock_client = make_client(httpx.Response(200, json={}))

    await client.close()

    mock_client.aclose.assert_not_called()


@pytest.mark.asyncio
async def test_close_closes_owned_client():
    client = HttpClient()

    await client.close()

    assert client._client.is_closed
