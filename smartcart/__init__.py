"""SmartCart: AI-assisted grocery cart with budget tracking and price comparison."""

from .camera import CameraCapture, ProductCamera
from .cart import CartStore, CartTotals
from .compare import best_value_ids, category_key, comparison_groups, unit_price
from .config import (
    CameraConfig,
    CartConfig,
    ExportConfig,
    SmartCartConfig,
    VisionConfig,
    load_config,
)
from .manual import InvalidInputError, manual_record, parse_measure, parse_price
from .models import CartEntry, ProductRecord, ShoppingListEntry
from .session import BatchResult, SmartCartSession
from .shopping_list import ShoppingList, is_fulfilled, is_wished, missing_items
from .vision import (
    AnalysisError,
    ListReadError,
    MissingCredentialError,
    VisionBackend,
    create_backend,
)

__all__ = [
    "ProductRecord",
    "CartEntry",
    "ShoppingListEntry",
    "CartStore",
    "CartTotals",
    "comparison_groups",
    "best_value_ids",
    "category_key",
    "unit_price",
    "ShoppingList",
    "is_fulfilled",
    "is_wished",
    "missing_items",
    "InvalidInputError",
    "manual_record",
    "parse_price",
    "parse_measure",
    "SmartCartSession",
    "BatchResult",
    "VisionBackend",
    "AnalysisError",
    "ListReadError",
    "MissingCredentialError",
    "create_backend",
    "ProductCamera",
    "CameraCapture",
    "SmartCartConfig",
    "VisionConfig",
    "CameraConfig",
    "CartConfig",
    "ExportConfig",
    "load_config",
]
