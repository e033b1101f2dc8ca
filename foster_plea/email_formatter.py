from __future__ import annotations

import html
import logging
from pathlib import Path
from typing import Dict, Protocol, Sequence

from .config import EMAIL_TEMPLATE_NAME, PLEA_HEADING
from .models import PLEA_ENTRY_FIELDS, PleaEntry

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"


class TemplateError(Exception):
    """Raised when a template cannot be rendered."""


class TemplateNotFoundError(TemplateError):
    """Raised when a named template does not exist."""


class TemplateRenderer(Protocol):
    def render(self, template_name: str, *, heading: str, plea_entries: Sequence[PleaEntry]) -> str: ...


class HtmlTemplateRenderer:
    """
    Renders named HTML templates with str.format placeholders.

    A template named "email" is made of three files:
    - email.html: the document, with {heading} and {entries}
    - email_entry.html: one list item per entry, with one placeholder per PleaEntry field
    - email_photo.html: the photo markup, used only for entries that have a photo
    Entry values are HTML-escaped; the heading is escaped too.
    """

    def __init__(self, template_dir: str | Path | None = None):
        self._template_dir = Path(template_dir) if template_dir is not None else TEMPLATE_DIR
        self._cache: Dict[str, str] = {}

    def render(self, template_name: str, *, heading: str, plea_entries: Sequence[PleaEntry]) -> str:
        document = self._load(f"{template_name}.html")
        entry_template = self._load(f"{template_name}_entry.html")
        photo_template = self._load(f"{template_name}_photo.html")

        rendered_entries = [self._render_entry(entry_template, photo_template, entry) for entry in plea_entries]
        return self._format(
            document,
            template_name,
            heading=html.escape(heading),
            entries="\n".join(rendered_entries),
        )

    def _render_entry(self, entry_template: str, photo_template: str, entry: PleaEntry) -> str:
        values = {field: html.escape(getattr(entry, field)) for field in PLEA_ENTRY_FIELDS}
        values["photo"] = self._format(photo_template, "photo", **values) if entry.photo else ""
        return self._format(entry_template, "entry", **values)

    def _load(self, filename: str) -> str:
        if filename not in self._cache:
            path = self._template_dir / filename
            try:
                self._cache[filename] = path.read_text(encoding="utf-8").rstrip("\n")
            except FileNotFoundError as exc:
                raise TemplateNotFoundError(f"Template not found: {path}") from exc
        return self._cache[filename]

    @staticmethod
    def _format(template: str, label: str, **values: str) -> str:
        try:
            return template.format(**values)
        except (KeyError, IndexError, ValueError) as exc:
            raise TemplateError(f"Failed to render {label} template: {exc!r}") from exc


def create_plea_email_body(
    renderer: TemplateRenderer,
    plea_entries: Sequence[PleaEntry],
    heading: str = PLEA_HEADING,
) -> str:
    """Builds the body of the plea email from a list of plea entries."""
    body = renderer.render(EMAIL_TEMPLATE_NAME, heading=heading, plea_entries=plea_entries)
    logger.info("Rendered plea email body: entries=%s chars=%s", len(plea_entries), len(body))
    return body


def build_email_subject(subject_title: str, today: str) -> str:
    return f"{subject_title} - {today}"
