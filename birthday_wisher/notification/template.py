"""Birthday message template.

Rendering depends only on the display name: the same name always yields
byte-identical subject, HTML and plain-text bodies.  The HTML variant
escapes the name; the plain-text fallback uses it verbatim.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from html import escape
from pathlib import Path
from string import Template

TEMPLATE_DIR = Path(__file__).parent / "templates"

_SUBJECT = Template("\N{PARTY POPPER} Happy Birthday, ${display_name}! \N{BIRTHDAY CAKE}")
_TEXT = Template(
    "Happy Birthday, ${display_name}!\n\n"
    "Wishing you a fantastic day filled with joy, laughter, and wonderful memories!\n\n"
    "Best wishes!"
)


@dataclass(frozen=True)
class RenderedMessage:
    subject: str
    html: str
    text: str


@lru_cache(maxsize=1)
def _load_template() -> str:
    return (TEMPLATE_DIR / "birthday_email.html").read_text(encoding="utf-8")


def render_birthday_message(display_name: str) -> RenderedMessage:
    """Render the birthday email for *display_name*."""
    return RenderedMessage(
        subject=_SUBJECT.substitute(display_name=display_name),
        html=Template(_load_template()).safe_substitute(display_name=escape(display_name)),
        text=_TEXT.substitute(display_name=display_name),
    )
