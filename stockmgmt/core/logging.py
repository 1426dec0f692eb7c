# stockmgmt/core/logging.py
import logging
import sys
from typing import Optional

# 本服务自己的 logger 树：stockmgmt.permission / stockmgmt.referencedata / stockmgmt.events ...
APP_LOGGER = "stockmgmt"
REFERENCEDATA_LOGGER = "stockmgmt.referencedata"


def setup_logging(level: str = "INFO", referencedata_level: Optional[str] = None) -> None:
    """
    统一日志：
    - 根 logger 与 stockmgmt 树使用同一级别，单一 stdout handler
    - referencedata 客户端可单独调级（排查权限校验时常需要 DEBUG 看请求）
    - httpx 自带的请求日志只在 DEBUG 下放出来，避免和 referencedata 日志重复
    """
    lvl = level.upper()
    root = logging.getLogger()
    root.setLevel(lvl)

    # 清已有 handlers，避免重复
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    fmt = "%(asctime)s %(levelname)s %(name)s %(message)s"
    handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)

    logging.getLogger(APP_LOGGER).setLevel(lvl)
    logging.getLogger(REFERENCEDATA_LOGGER).setLevel((referencedata_level or lvl).upper())

    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("httpx").setLevel(logging.DEBUG if lvl == "DEBUG" else logging.WARNING)
