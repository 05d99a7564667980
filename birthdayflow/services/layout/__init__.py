"""PDF documents produced from the enriched birthday batch."""

from .envelopes import generate_envelope_pdf, render_envelopes
from .greetings import generate_greeting_pdf, render_greetings

__all__ = [
    "generate_envelope_pdf",
    "generate_greeting_pdf",
    "render_envelopes",
    "render_greetings",
]
