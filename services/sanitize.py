import html
import re

# control characters except tab, newline and carriage return
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def sanitize_text(value: str) -> str:
    """Make user supplied text safe to store and to echo back to browsers.

    Control characters are dropped, surrounding whitespace trimmed and HTML
    metacharacters escaped, so a message like ``<script>`` is persisted and
    broadcast as ``&lt;script&gt;``.
    """
    value = _CONTROL_CHARS.sub("", value).strip()
    return html.escape(value, quote=True)