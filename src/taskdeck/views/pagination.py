# src/taskdeck/views/pagination.py

from __future__ import annotations


def page_window(current_page: int, total_pages: int, max_visible: int = 5) -> list[int]:
    """
    Page numbers to show around current_page, at most max_visible of them.

    The window is centered on current_page when possible and slides to stay
    inside [1, total_pages]. Returns [] when there are no pages.
    """
    if total_pages < 1 or max_visible < 1:
        return []

    half = max_visible // 2
    start = max(current_page - half, 1)
    end = min(start + max_visible - 1, total_pages)

    if end - start + 1 < max_visible:
        start = max(end - max_visible + 1, 1)

    return list(range(start, end + 1))
