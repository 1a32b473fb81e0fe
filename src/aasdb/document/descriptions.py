"""Multi-language strings.

The metamodel distinguishes several LangString types by their maximum text
length only. Length limits are not enforced here, so one model serves all of
them.
"""

from __future__ import annotations

from aasdb.document import LenientModel


class LangString(LenientModel):
    """A text in one language, tagged with a BCP-47 language code."""

    language: str | None = None
    text: str | None = None
