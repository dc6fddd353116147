"""Placeholder interpolation for document templates.

A placeholder is ``{{fieldKey}}``. Substitution is a single pass over the
template content, so values are never rescanned for placeholders.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

import markupsafe
from jinja2 import Environment, FileSystemLoader, select_autoescape

from nexuserp.config import BASE_DIR
from nexuserp.schema import DocumentTemplate
from nexuserp.utils import dumps_json

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([^{}\s]+)\s*\}\}")

_env = Environment(
    loader=FileSystemLoader(str(BASE_DIR / "templates")),
    autoescape=select_autoescape(["html"]),
)


def format_number(value: int | float) -> str:
    if isinstance(value, int):
        return str(value)
    if not math.isfinite(value):
        return ""
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def value_to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, (list, tuple)):
        return ", ".join(value_to_text(item) for item in value if item is not None)
    if isinstance(value, Mapping):
        return dumps_json(dict(value))
    return str(value)


def placeholders(content: str) -> list[str]:
    keys: list[str] = []
    for match in PLACEHOLDER_PATTERN.finditer(content or ""):
        if match.group(1) not in keys:
            keys.append(match.group(1))
    return keys


def unresolved_placeholders(content: str, data: Mapping[str, Any]) -> list[str]:
    return [key for key in placeholders(content) if key not in data]


def interpolate(content: str, data: Mapping[str, Any], escape: bool = False) -> str:
    def substitute(match: re.Match[str]) -> str:
        text = value_to_text(data.get(match.group(1)))
        return str(markupsafe.escape(text)) if escape else text

    return PLACEHOLDER_PATTERN.sub(substitute, content or "")


def render_document(template: DocumentTemplate, data: Mapping[str, Any]) -> str:
    body = markupsafe.Markup(interpolate(template.content, data, escape=True))
    # "</" inside the style block would let the CSS close it early.
    return _env.get_template("document.html").render(
        title=template.name,
        styles=(template.styles or "").replace("</", "<\\/"),
        body=body,
    )
