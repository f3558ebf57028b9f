from __future__ import annotations

import html
from datetime import datetime
from typing import Iterable


def esc(s: str) -> str:
    return html.escape(s, quote=True)


def format_date(value: datetime, date_format: str) -> str:
    return value.strftime(date_format)


def render_thumb_list(thumbs: Iterable[str], *, css_class: str) -> str:
    """
    Wrap already-HTML thumbnail fragments in a <ul>.

    Only the class attribute is escaped; fragments come from the feed as
    markup and are emitted verbatim.
    """
    lines = [f'<ul class="{esc(css_class)}">']
    for thumb in thumbs:
        lines.append(f"<li>{thumb}</li>")
    lines.append("</ul>")
    return "\n".join(lines)
