from __future__ import annotations

import ssl
from types import TracebackType
from typing import Any, Dict, Optional, Type, Union

import httpx


class AsyncHttpClient:
    """Shared httpx.AsyncClient for the LND gateway and remote pay services.

    Paths are joined to `base_url`; absolute URLs such as LNURL callbacks are
    sent as given. Error statuses raise unless `raise_for_status=False`, which
    callers use when the body carries an error envelope worth reading.
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        *,
        headers: Optional[Dict[str, str]] = None,
        verify: Union[bool, ssl.SSLContext] = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            timeout=timeout, headers=headers, verify=verify, transport=transport
        )

    def _url(self, path: str) -> str:
        if "://" in path:
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    async def _send(
        self, method: str, path: str, raise_for_status: bool, **kwargs: Any
    ) -> httpx.Response:
        resp = await self._client.request(method, self._url(path), **kwargs)
        if raise_for_status:
            resp.raise_for_status()
        return resp

    async def get(
        self, path: str, *, raise_for_status: bool = True, **kwargs: Any
    ) -> httpx.Response:
        return await self._send("GET", path, raise_for_status, **kwargs)

    async def post(
        self,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        raise_for_status: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        return await self._send("POST", path, raise_for_status, json=json, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHttpClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        await self.aclose()
