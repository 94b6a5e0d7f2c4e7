from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd

from covid_core.config import settings
from covid_core.filters import COLUMNS, FilterState
from covid_core.view import column_options, page_buttons, paginate, total_pages

# Column order of the rendered table.
TABLE_COLUMNS = ["country"] + COLUMNS


def compute_table(filters: FilterState, ctx: Dict[str, Any]) -> Dict[str, Any]:
    rows = ctx.get("filtered_rows", [])
    pages = total_pages(len(rows), filters.items_per_page)
    page_rows = paginate(rows, filters.current_page, filters.items_per_page)
    return {
        "filters": filters.to_dict(),
        "columns": column_options(),
        "countries": ctx.get("countries", []),
        "rows": [row.to_record() for row in page_rows],
        "total_rows": len(rows),
        "total_pages": pages,
        "current_page": filters.current_page,
        "page_buttons": [asdict(b) for b in page_buttons(filters.current_page, pages, settings.max_page_buttons)],
    }


def export_csv(ctx: Dict[str, Any]) -> str:
    """CSV of every filtered, sorted row (all pages)."""
    rows = ctx.get("filtered_rows", [])
    df = pd.DataFrame([row.to_record() for row in rows], columns=TABLE_COLUMNS + ["date"])
    return df.to_csv(index=False)
