from html import escape
from typing import Iterable

from models.sql.suggestion import SuggestionModel
from services.feedback_service import iso_utc

PAGE_TITLE = "SVRX Suggestions Dashboard"

_PAGE_TEMPLATE = """<!doctype html>
<html>
<head><meta charset="utf-8"><title>{title} - Admin</title>
<style>
body{{font-family:Inter,system-ui,sans-serif;background:#061226;color:#e8f5ff;padding:20px}}
table{{width:100%;border-collapse:collapse;margin-top:10px}}
th,td{{border:1px solid rgba(255,255,255,0.1);padding:8px;font-size:13px;vertical-align:top}}
th{{background:rgba(255,255,255,0.05);text-align:left}}
tr:nth-child(even){{background:rgba(255,255,255,0.02)}}
td.long{{max-width:420px;white-space:pre-wrap}}
.header{{display:flex;align-items:center;justify-content:space-between}}
.header h1{{font-size:20px;margin:0}}
button{{padding:8px 12px;border:0;border-radius:8px;background:#2b6ef6;color:#012033;cursor:pointer}}
</style>
</head><body>
<div class="header"><h1>{title}</h1><button onclick="location.reload()">Refresh</button></div>
<p>{count} most recent suggestions</p>
<table><thead><tr>{header}</tr></thead><tbody>
{rows}
</tbody></table>
</body></html>
"""

COLUMNS = ("ID", "Time", "Type", "Priority", "Name", "Email", "Message", "Extra")


def _cell(value: str | None, css_class: str | None = None) -> str:
    attrs = f' class="{css_class}"' if css_class else ""
    return f"<td{attrs}>{escape(value or '', quote=True)}</td>"


def render_row(row: SuggestionModel) -> str:
    cells = [
        _cell(row.id),
        _cell(iso_utc(row.created_at)),
        _cell(row.type),
        _cell(row.impact),
        _cell(row.name),
        _cell(row.email),
        _cell(row.message, "long"),
        _cell(row.extra, "long"),
    ]
    return "<tr>" + "".join(cells) + "</tr>"


def render_admin_page(rows: Iterable[SuggestionModel]) -> str:
    """Static HTML table of suggestions; every field is escaped."""
    rendered = [render_row(row) for row in rows]
    return _PAGE_TEMPLATE.format(
        title=escape(PAGE_TITLE),
        count=len(rendered),
        header="".join(f"<th>{name}</th>" for name in COLUMNS),
        rows="\n".join(rendered),
    )
