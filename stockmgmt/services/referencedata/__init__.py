# stockmgmt/services/referencedata/__init__.py
"""
referencedata 服务客户端（httpx.AsyncClient）。

这里只做“问一次、翻译结果”，不缓存、不重试；超时由 HTTP 客户端配置决定。
"""
