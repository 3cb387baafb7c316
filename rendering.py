import re

from markdown import markdown


def render_markdown(md_text: str) -> str:
    return markdown(
        md_text or "",
        extensions=["fenced_code", "tables", "sane_lists"],
        output_format="html5",
    )


def build_excerpt(html: str, length: int = 220) -> str:
    text = re.sub(r"<[^>]+>", "", html or "").strip()
    if len(text) <= length:
        return text
    return f"{text[:length].rstrip()}…"
