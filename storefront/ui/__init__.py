"""Presentation helpers used by the storefront pages."""

from storefront.ui.filter_label import FilterLabel, filter_labels
from storefront.ui.utils import cn, format_price

__all__ = [
    "FilterLabel",
    "filter_labels",
    "cn",
    "format_price",
]
