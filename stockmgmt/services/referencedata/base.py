# stockmgmt/services/referencedata/base.py
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

import httpx

from stockmgmt.core.config import AppSettings

logger = logging.getLogger("stockmgmt.referencedata")

T = TypeVar("T")


class ReferenceDataError(Exception):
    """
    referencedata 调用失败（非 2xx 或网络层错误）。

    status_code 为 None 表示根本没拿到响应（超时 / 连接失败）。
    """

    def __init__(self, status_code: Optional[int], message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def build_referencedata_client(settings: AppSettings) -> httpx.AsyncClient:
    headers: Dict[str, str] = {"Accept": "application/json"}
    if settings.REFERENCEDATA_TOKEN:
        headers["Authorization"] = f"Bearer {settings.REFERENCEDATA_TOKEN}"
    return httpx.AsyncClient(
        base_url=settings.REFERENCEDATA_URL.rstrip("/"),
        headers=headers,
        timeout=httpx.Timeout(settings.HTTP_TIMEOUT_SECONDS),
    )


class BaseReferenceDataService:
    """
    各资源客户端的公共部分：
      - resource_url: 资源前缀，例如 "/api/users"
      - 请求失败统一翻译为 ReferenceDataError
    """

    resource_url: str = ""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    def _url(self, path: str = "") -> str:
        if not path:
            return self.resource_url
        return f"{self.resource_url}/{path.lstrip('/')}"

    async def _request(
        self,
        method: str,
        path: str = "",
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
    ) -> httpx.Response:
        url = self._url(path)
        # None 的查询参数直接丢掉：缺省即“不按该维度过滤”
        clean = {k: str(v) for k, v in (params or {}).items() if v is not None}
        try:
            resp = await self.client.request(method, url, params=clean or None, json=json)
        except httpx.HTTPError as exc:
            logger.warning("referencedata %s %s transport error: %s", method, url, exc)
            raise ReferenceDataError(None, f"{method} {url} failed: {exc}") from exc

        if resp.is_error:
            logger.warning("referencedata %s %s -> %s", method, url, resp.status_code)
            msg = f"{resp.status_code} {resp.reason_phrase}"
            body = resp.text[:200]
            if body:
                msg = f"{msg}: {body}"
            raise ReferenceDataError(resp.status_code, msg)
        return resp

    def _decode(self, resp: httpx.Response, what: str, parse: Callable[[Any], T]) -> T:
        """
        2xx 但响应体不是预期形状（非 JSON / null / 结构不对）也算“问不到答案”，
        统一翻译为 ReferenceDataError。
        """
        try:
            return parse(resp.json())
        except (ValueError, TypeError, LookupError) as exc:
            logger.warning("referencedata malformed %s response: %s", what, exc)
            raise ReferenceDataError(resp.status_code, f"malformed {what} response: {exc}") from exc

    async def find_one(self, resource_id: Any, parse: Optional[Callable[[Any], Any]] = None) -> Any:
        """按 id 取单个资源；404 视为不存在。parse 缺省时只要求是 JSON 对象。"""
        try:
            resp = await self._request("GET", str(resource_id))
        except ReferenceDataError as exc:
            if exc.status_code == 404:
                return None
            raise
        return self._decode(resp, self.resource_url, parse or _as_object)


def _as_object(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"expected a JSON object, got {type(data).__name__}")
    return data
