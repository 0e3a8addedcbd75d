from __future__ import annotations

from gspread.utils import absolute_range_name


def tab_range(title: str, cells: str) -> str:
    """A1 range on a tab, quoting titles such as ``Name | 123``."""
    return absolute_range_name(title, cells)
