# stockmgmt/core/security.py
"""
安全工具（统一入口）：

- PyJWT，仅 HS256
- 非 dev 环境必须显式配置 JWT_SECRET
- token 中 `sub`（或 `username`）即当前登录用户名，交给 referencedata 解析成用户
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional

import jwt

from stockmgmt.core.config import AppSettings, get_settings

_DEV_SECRETS = {
    "",
    "dev-temp-secret",
    "dev-secret-change-me",
}


def _checked_settings(settings: Optional[AppSettings] = None) -> AppSettings:
    s = settings or get_settings()
    if s.ENV != "dev" and s.JWT_SECRET in _DEV_SECRETS:
        raise RuntimeError(
            "SECURITY ERROR: JWT_SECRET is not properly configured.\n"
            f"ENV = {s.ENV!r}\n"
            "Set a strong JWT_SECRET via environment variable or .env file."
        )
    if s.JWT_ALG.lower() == "none":
        raise RuntimeError("SECURITY ERROR: alg=none is not allowed")
    return s


def create_access_token(
    username: str,
    extra: Optional[Dict[str, Any]] = None,
    expires_minutes: Optional[int] = None,
    settings: Optional[AppSettings] = None,
) -> str:
    s = _checked_settings(settings)
    now = int(time.time())
    payload: Dict[str, Any] = dict(extra or {})
    payload["sub"] = username
    payload["iat"] = now
    payload["exp"] = now + 60 * (expires_minutes or s.ACCESS_TOKEN_EXPIRE_MINUTES)
    return jwt.encode(payload, s.JWT_SECRET, algorithm=s.JWT_ALG)


def decode_token(token: str, settings: Optional[AppSettings] = None) -> Dict[str, Any]:
    """
    严格解码：签名错误 / 过期直接抛 PyJWT 异常，由调用方决定如何翻译。
    """
    s = _checked_settings(settings)
    return jwt.decode(token, s.JWT_SECRET, algorithms=[s.JWT_ALG])


def username_from_token(token: str, settings: Optional[AppSettings] = None) -> Optional[str]:
    try:
        payload = decode_token(token, settings)
    except jwt.PyJWTError:
        return None
    name = payload.get("sub") or payload.get("username")
    return str(name) if name else None
