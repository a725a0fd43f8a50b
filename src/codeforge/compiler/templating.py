"""Static preview rendering for Shopify Liquid sections.

Nothing is evaluated: output expressions become placeholders or HTML
comments, and logic tags are dropped.  Each rewrite is a separate rule so
one can be replaced without touching the others.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from codeforge.models.artifact import Artifact

SECTION_IMAGE_PLACEHOLDER = "https://placehold.co/600x400?text=Section+Image"
IMAGE_PLACEHOLDER = "https://placehold.co/600x400?text=Image"

_SCHEMA_RE = re.compile(r"{% schema %}[\s\S]*?{% endschema %}")
_STYLESHEET_RE = re.compile(r"{% stylesheet %}([\s\S]*?){% endstylesheet %}")
_JAVASCRIPT_RE = re.compile(r"{% javascript %}([\s\S]*?){% endjavascript %}")
_SECTION_IMAGE_RE = re.compile(r"\{\{\s*section\.settings\.[^}]*img_url[^}]*\}\}")
_IMAGE_FILTER_RE = re.compile(r"\{\{\s*[^}]*\|\s*img_url[^}]*\}\}")
_SECTION_SETTING_RE = re.compile(r"\{\{\s*section\.settings\.([^}]+?)\s*\}\}")
_OUTPUT_RE = re.compile(r"\{\{\s*([^}]+?)\s*\}\}")
_LOGIC_TAG_RE = re.compile(r"{%[^%]*%}")

_DOCUMENT = """\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Liquid Preview</title>
  <style>
    body, html {{
      background-color: #ffffff;
      color: #1e293b;
      margin: 0;
      padding: 0;
      height: 100%;
      width: 100%;
      font-family: system-ui, -apple-system, sans-serif;
    }}
  </style>
</head>
<body>
  {markup}
  <script>{js}</script>
</body>
</html>"""


@dataclass
class RenderedTemplate:
    """Static markup plus the style and script blocks pulled out of it."""

    markup: str
    css: str = ""
    js: str = ""


def remove_schema(source: str) -> str:
    return _SCHEMA_RE.sub("", source)


def extract_stylesheet(source: str) -> tuple[str, str]:
    """Return ``(source without stylesheet blocks, css of the first block)``."""
    match = _STYLESHEET_RE.search(source)
    if match is None:
        return source, ""
    return _STYLESHEET_RE.sub("", source), f"\n/* Liquid Stylesheet */\n{match.group(1)}"


def extract_javascript(source: str) -> tuple[str, str]:
    match = _JAVASCRIPT_RE.search(source)
    if match is None:
        return source, ""
    return _JAVASCRIPT_RE.sub("", source), match.group(1)


def replace_images(source: str) -> str:
    source = _SECTION_IMAGE_RE.sub(SECTION_IMAGE_PLACEHOLDER, source)
    return _IMAGE_FILTER_RE.sub(IMAGE_PLACEHOLDER, source)


def replace_settings(source: str) -> str:
    """``{{ section.settings.title }}`` → labelled inert span."""
    return _SECTION_SETTING_RE.sub(r'<span data-liquid="\1">[Setting: \1]</span>', source)


def comment_out_expressions(source: str) -> str:
    return _OUTPUT_RE.sub(r"<!-- \1 -->", source)


def strip_logic_tags(source: str) -> str:
    # Conditionals and loops are dropped, not evaluated.
    return _LOGIC_TAG_RE.sub("", source)


def render_templating(artifact: Artifact) -> RenderedTemplate:
    """Convert a Liquid artifact into a static preview document."""
    source = remove_schema(artifact.content)
    source, css = extract_stylesheet(source)
    source, js = extract_javascript(source)
    source = replace_images(source)
    source = replace_settings(source)
    source = comment_out_expressions(source)
    source = strip_logic_tags(source)
    return RenderedTemplate(markup=_DOCUMENT.format(markup=source, js=js), css=css, js=js)
