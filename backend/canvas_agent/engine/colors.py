"""Color keyword matching for queryShapes fill filters."""

from __future__ import annotations

# Keyword → hex family. A shape matches if its fill equals or starts with one of
# these (fills may carry an alpha suffix such as #3B82F6FF).
COLOR_FAMILIES: dict[str, list[str]] = {
    "red": ["#EF4444", "#DC2626", "#B91C1C", "#FF0000", "#F87171"],
    "blue": ["#3B82F6", "#2563EB", "#1D4ED8", "#0000FF", "#60A5FA"],
    "green": ["#10B981", "#059669", "#047857", "#00FF00", "#34D399"],
    "yellow": ["#F59E0B", "#D97706", "#B45309", "#FFFF00", "#FBBF24"],
    "purple": ["#8B5CF6", "#7C3AED", "#6D28D9", "#A855F7"],
    "pink": ["#EC4899", "#DB2777", "#BE185D", "#F472B6"],
    "orange": ["#F97316", "#EA580C", "#C2410C", "#FB923C"],
    "gray": ["#6B7280", "#4B5563", "#374151", "#9CA3AF"],
    "black": ["#000000", "#111827", "#1F2937"],
    "white": ["#FFFFFF", "#F9FAFB", "#F3F4F6"],
}
COLOR_FAMILIES["grey"] = COLOR_FAMILIES["gray"]


def _normalize(color: str) -> str:
    return "".join(color.split()).upper()


def fill_matches(shape_fill: str | None, query: str) -> bool:
    """True if ``shape_fill`` matches a color keyword or hex substring ``query``."""
    if not shape_fill:
        return False
    keyword = query.strip().lower()
    family = COLOR_FAMILIES.get(keyword)
    if family is None:
        return keyword in shape_fill.lower()

    fill = _normalize(shape_fill)
    if any(fill.startswith(_normalize(hex_code)) for hex_code in family):
        return True
    return keyword in shape_fill.lower()
