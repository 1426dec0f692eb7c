# stockmgmt/api/__init__.py
"""
API package bootstrap.

- 这里不做任何重导出
- 路由挂载由 `stockmgmt/main.py` 管理
"""

__all__ = []
