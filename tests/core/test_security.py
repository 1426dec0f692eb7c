import time

import jwt
import pytest

from stockmgmt.core.config import AppSettings
from stockmgmt.core.security import create_access_token, decode_token, username_from_token

DEV = AppSettings(ENV="dev", JWT_SECRET="unit-secret")


class TestSecurity:
    """JWT 令牌的签发 / 解码 / 过期 / 环境保护。"""

    def test_token_round_trip_carries_username(self):
        token = create_access_token("divo1", extra={"scope": "stock"}, settings=DEV)
        payload = decode_token(token, DEV)

        assert payload["sub"] == "divo1"
        assert payload["scope"] == "stock"
        assert payload["exp"] > payload["iat"]
        assert username_from_token(token, DEV) == "divo1"

    def test_expired_token(self):
        expired = jwt.encode(
            {"sub": "divo1", "exp": int(time.time()) - 60}, "unit-secret", algorithm="HS256"
        )
        with pytest.raises(jwt.ExpiredSignatureError):
            decode_token(expired, DEV)
        assert username_from_token(expired, DEV) is None

    def test_wrong_secret_is_rejected(self):
        forged = jwt.encode({"sub": "admin"}, "other-secret", algorithm="HS256")
        assert username_from_token(forged, DEV) is None

    def test_username_claim_fallback(self):
        token = jwt.encode({"username": "srmanager"}, "unit-secret", algorithm="HS256")
        assert username_from_token(token, DEV) == "srmanager"

    def test_non_dev_requires_real_secret(self):
        prod = AppSettings(ENV="prod", JWT_SECRET="dev-temp-secret")
        with pytest.raises(RuntimeError):
            create_access_token("divo1", settings=prod)
