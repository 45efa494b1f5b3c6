"""Data 模块：参考目录"""

from .catalog import Catalog, CatalogError, default_catalog, load_catalog

__all__ = [
    "Catalog",
    "CatalogError",
    "default_catalog",
    "load_catalog",
]
