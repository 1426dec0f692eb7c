# stockmgmt/__init__.py
"""
库存管理服务：盘点提交 → 库存事件映射 + 基于 referencedata 的权限校验。
"""

__version__ = "1.0.0"
