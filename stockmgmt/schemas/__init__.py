# stockmgmt/schemas/__init__.py
"""
Schemas package

本包保持“安静”：不做聚合导出，需要时从具体模块显式导入，例如：
    from stockmgmt.schemas.physical_inventory import PhysicalInventory
    from stockmgmt.schemas.stock_event import StockEvent
"""

__all__: list[str] = []
