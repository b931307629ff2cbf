# services/treemap_service.py
"""
Squarified treemap layout for market-cap weighted stock maps.
Pure computation: no I/O, deterministic for identical input.
"""

import math
from typing import List, Sequence, Tuple

from domain import TreemapRect, TreemapStock

# (stock, target area)
_Item = Tuple[TreemapStock, float]


def _worst_ratio(areas: Sequence[float], row_area: float, total_area: float, span: float, side: float) -> float:
    """
    Worst aspect ratio in a candidate row.

    span: length of the main axis of the free box (width for columns)
    side: length of the cross axis (height for columns)
    """
    thickness = row_area / total_area * span
    worst = 0.0
    for area in areas:
        length = area / row_area * side
        if length <= 0 or thickness <= 0:
            return float('inf')
        worst = max(worst, thickness / length, length / thickness)
    return worst


def calculate_treemap_layout(stocks: Sequence[TreemapStock], width: float, height: float) -> List[TreemapRect]:
    """
    Partition a width x height viewport into one rectangle per stock,
    each with area proportional to its market cap.

    Stocks are laid out largest first. Each step fills a column (when the
    free box is at least as wide as tall) or a row (otherwise) with the
    longest run of remaining items whose worst aspect ratio does not get
    worse, then continues in the leftover box. Stocks with a non-positive
    market cap have no area and are left out.

    Returns:
        List of TreemapRect, largest stock first; empty for degenerate input
    """
    if not stocks or not (math.isfinite(width) and math.isfinite(height)) or width <= 0 or height <= 0:
        return []

    # sorted() is stable: ties keep input order
    ranked = sorted((s for s in stocks if math.isfinite(s.market_cap) and s.market_cap > 0), key=lambda s: s.market_cap, reverse=True)
    total_market_cap = sum(s.market_cap for s in ranked)
    if not ranked or total_market_cap <= 0:
        return []

    viewport_area = width * height
    items: List[_Item] = [(s, s.market_cap / total_market_cap * viewport_area) for s in ranked]

    rects: List[TreemapRect] = []
    x, y, w, h = 0.0, 0.0, float(width), float(height)
    start = 0

    while start < len(items):
        remaining = items[start:]

        if len(remaining) == 1:
            rects.append(TreemapRect(x=x, y=y, width=w, height=h, stock=remaining[0][0]))
            break

        total_area = sum(area for _, area in remaining)
        columns = w >= h
        span, side = (w, h) if columns else (h, w)

        # Grow the row while the worst ratio does not increase
        row_size = 1
        row_area = remaining[0][1]
        best = _worst_ratio([remaining[0][1]], row_area, total_area, span, side)
        while row_size < len(remaining):
            candidate_area = row_area + remaining[row_size][1]
            candidate = _worst_ratio([a for _, a in remaining[:row_size + 1]], candidate_area, total_area, span, side)
            if candidate > best:
                break
            best = candidate
            row_area = candidate_area
            row_size += 1

        row = remaining[:row_size]
        last_row = row_size == len(remaining)
        thickness = span if last_row else row_area / total_area * span

        offset = 0.0
        for i, (stock, area) in enumerate(row):
            # Last item absorbs rounding so the row spans the full side
            length = side - offset if i == len(row) - 1 else area / row_area * side
            if columns:
                rects.append(TreemapRect(x=x, y=y + offset, width=thickness, height=length, stock=stock))
            else:
                rects.append(TreemapRect(x=x + offset, y=y, width=length, height=thickness, stock=stock))
            offset += length

        if columns:
            x, w = x + thickness, w - thickness
        else:
            y, h = y + thickness, h - thickness
        start += row_size

    return rects


def get_stock_color(change_percent: float) -> str:
    """Map a daily change percentage to a heat-map colour."""
    if change_percent > 5:
        return "rgb(0, 128, 0)"
    if change_percent > 2:
        return "rgb(34, 197, 94)"
    if change_percent > 0:
        return "rgb(134, 239, 172)"
    if change_percent == 0:
        return "rgb(156, 163, 175)"
    if change_percent > -2:
        return "rgb(252, 165, 165)"
    if change_percent > -5:
        return "rgb(239, 68, 68)"
    return "rgb(153, 27, 27)"
