# nocturne/utils/rendering.py
import markdown2


def md_to_html(text: str) -> str:
    """Markdown -> HTML for the reader (basic extras, raw HTML escaped)."""
    if not text:
        return ""
    return markdown2.markdown(
        text,
        safe_mode="escape",
        extras=["fenced-code-blocks", "tables", "strike", "smarty"],
    )
