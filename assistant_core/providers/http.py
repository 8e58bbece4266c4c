"""远程 Provider 共用的 HTTP 调用与响应解析。

- post_json: 发送一次 POST，并把网络异常 / 非 2xx 状态映射为 ProviderError 子类。
- extract_text: 按路径从响应 JSON 中取出文本字段，缺失即 InvalidResponseError。
"""

from typing import Any, Dict, Mapping, Optional, Sequence, Union

import httpx

from assistant_core.domain.exceptions import (
    InvalidCredentialError,
    InvalidResponseError,
    NetworkError,
    ProviderTimeoutError,
    ProviderUnavailableError,
    RateLimitError,
)

PathItem = Union[str, int]


async def post_json(
    provider: str,
    url: str,
    *,
    payload: Dict[str, Any],
    headers: Mapping[str, str],
    timeout: float,
    params: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    try:
        async with httpx.AsyncClient(timeout=timeout, trust_env=False) as client:
            resp = await client.post(url, json=payload, headers=dict(headers), params=params)
    except httpx.TimeoutException as e:
        raise ProviderTimeoutError(code="TIMEOUT", message=str(e) or "request timed out", provider=provider)
    except httpx.RequestError as e:
        # 网络错误：DNS 失败、连接被拒绝等
        raise NetworkError(code="NETWORK_ERROR", message=str(e), provider=provider)

    status = resp.status_code
    if status in (401, 403):
        raise InvalidCredentialError(
            code="INVALID_API_KEY", message=f"{provider} rejected the API key", http_status=status, provider=provider
        )
    if status == 429:
        raise RateLimitError(code="RATE_LIMIT", message=f"{provider} rate limit", http_status=status, provider=provider)
    if status in (404, 503):
        raise ProviderUnavailableError(
            code="MODEL_NOT_AVAILABLE", message=resp.text, http_status=status, provider=provider
        )
    if status < 200 or status >= 300:
        raise NetworkError(code="API_ERROR", message=resp.text, http_status=status, provider=provider)

    try:
        data = resp.json()
    except ValueError as e:
        raise InvalidResponseError(code="INVALID_RESPONSE", message=f"non-JSON body: {e}", provider=provider)
    if not isinstance(data, dict):
        raise InvalidResponseError(code="INVALID_RESPONSE", message="response is not an object", provider=provider)
    return data


def extract_text(provider: str, data: Any, path: Sequence[PathItem]) -> str:
    node = data
    for key in path:
        try:
            node = node[key]
        except (KeyError, IndexError, TypeError):
            raise InvalidResponseError(
                code="INVALID_RESPONSE",
                message=f"missing field {'.'.join(str(p) for p in path)}",
                provider=provider,
            ) from None
    if not isinstance(node, str) or not node.strip():
        raise InvalidResponseError(code="INVALID_RESPONSE", message="empty response text", provider=provider)
    return node.strip()
