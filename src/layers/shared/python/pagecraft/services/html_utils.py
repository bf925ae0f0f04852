"""Cleanup and validation for generated landing-page HTML.

These run before markup reaches the editor or the component store; the
editor itself never re-sanitizes.
"""

import re
from dataclasses import dataclass

DEFAULT_MAX_HTML_SIZE = 1_000_000

TAILWIND_CDN = "https://cdn.tailwindcss.com"

_CODE_FENCE_OPEN = re.compile(r"```(html)?\n?", re.IGNORECASE)

_DANGEROUS_PATTERNS = (
    re.compile(r"<iframe", re.IGNORECASE),
    re.compile(r"<object", re.IGNORECASE),
    re.compile(r"<embed", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"data:text/html", re.IGNORECASE),
)

_SCRIPT_TAG = re.compile(r"<script\b([^>]*)>(.*?)</script>", re.IGNORECASE | re.DOTALL)

_DOCUMENT_SKELETON = """<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <title>Landing Page</title>
  <script src="{cdn}"></script>
</head>
<body>
{body}
</body>
</html>"""


@dataclass
class HtmlValidationResult:
    is_valid: bool
    error: str | None = None


def strip_code_fences(html: str) -> str:
    """Remove Markdown code fences a model wrapped around its markup."""
    return _CODE_FENCE_OPEN.sub("", html).replace("```", "").strip()


def wrap_html(html: str) -> str:
    """Wrap a bare fragment in a full document that loads Tailwind."""
    if "<html" in html.lower():
        return html
    return _DOCUMENT_SKELETON.format(cdn=TAILWIND_CDN, body=html)


def _is_allowed_script(attributes: str, body: str) -> bool:
    return "tailwindcss" in attributes and not body.strip()


def validate_html(html: object, max_size: int = DEFAULT_MAX_HTML_SIZE) -> HtmlValidationResult:
    """Check markup before it is stored or edited.

    Only the Tailwind CDN script is allowed; frames, plugins and script URLs
    are rejected outright.
    """
    if not html or not isinstance(html, str):
        return HtmlValidationResult(False, "HTML content is required and must be a string")

    if len(html.encode("utf-8")) > max_size:
        return HtmlValidationResult(False, "HTML content exceeds maximum size limit")

    for match in _SCRIPT_TAG.finditer(html):
        if not _is_allowed_script(match.group(1), match.group(2)):
            return HtmlValidationResult(False, "HTML content contains potentially dangerous elements")

    for pattern in _DANGEROUS_PATTERNS:
        if pattern.search(html):
            return HtmlValidationResult(False, "HTML content contains potentially dangerous elements")

    return HtmlValidationResult(True)


def prepare_generated_html(raw: str) -> str:
    """Model output to a storable document: fences stripped, skeleton added."""
    return wrap_html(strip_code_fences(raw))
