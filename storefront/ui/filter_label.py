"""Filter section header for the product sidebar.

Renders the label of one filter section, an "Active" badge while that
filter is applied and a button that clears just that filter.
"""

from collections.abc import Callable
from dataclasses import dataclass
from html import escape

from storefront.catalog.filters import FILTER_KEYS, ProductFilter
from storefront.ui.utils import cn

# Sidebar section titles, by filter key
FILTER_TITLES: dict[str, str] = {
    "category": "Category",
    "color": "Color",
    "material": "Material",
    "price": "Price",
    "search": "Search",
    "inStock": "Availability",
}


@dataclass
class FilterLabel:
    """Header of a filter section.

    Attributes:
        label: Section title.
        is_active: Whether the section's filter differs from its default.
        filter_key: Key passed to on_clear.
        on_clear: Called with filter_key when the user clears the filter.
    """

    label: str
    is_active: bool
    filter_key: str
    on_clear: Callable[[str], None]

    def clear(self) -> bool:
        """Handle a click on the clear button.

        Returns:
            True if on_clear was called; False when the filter is inactive
            and there is no clear button to click.
        """
        if not self.is_active:
            return False
        self.on_clear(self.filter_key)
        return True

    def render(self) -> str:
        """Render the header as HTML."""
        label_class = cn(
            "block text-sm font-medium",
            {
                "text-zinc-900 dark:text-zinc-100": self.is_active,
                "text-zinc-700 dark:text-zinc-300": not self.is_active,
            },
        )
        parts = [
            '<div class="mb-2 flex items-center justify-between">',
            f'<span class="{label_class}">{escape(self.label)}',
        ]
        if self.is_active:
            parts.append(
                '<span class="ml-2 h-5 rounded bg-amber-500 px-1.5 text-xs text-white">Active</span>'
            )
        parts.append("</span>")
        if self.is_active:
            key = escape(self.filter_key, quote=True)
            parts.append(
                f'<button type="button" data-filter-key="{key}" '
                f'class="text-zinc-400 hover:text-zinc-600 dark:hover:text-zinc-200" '
                f'aria-label="Clear {key} filter">&times;</button>'
            )
        parts.append("</div>")
        return "".join(parts)


def filter_labels(
    filters: ProductFilter,
    on_clear: Callable[[str], None],
) -> list[FilterLabel]:
    """Build one label per filter section for the current filters.

    Args:
        filters: Filters currently applied.
        on_clear: Callback shared by every label.

    Returns:
        Labels in sidebar order.
    """
    return [
        FilterLabel(
            label=FILTER_TITLES[key],
            is_active=filters.is_active(key),
            filter_key=key,
            on_clear=on_clear,
        )
        for key in FILTER_KEYS
    ]
