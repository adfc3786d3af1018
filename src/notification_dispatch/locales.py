"""Locale resolution for template content."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import ContentUnavailableError
from .models import DEFAULT_LOCALE

if TYPE_CHECKING:
    from .models import LocalizedContent, Template

logger = logging.getLogger(__name__)


class LocaleResolver:
    """Picks the user's locale if the template has it, else the default locale."""

    def __init__(self, default_locale: str = DEFAULT_LOCALE) -> None:
        self.default_locale = default_locale

    def resolve(self, template: Template, locale: str) -> LocalizedContent:
        content = template.translations.get(locale)
        if content is not None:
            return content

        content = template.translations.get(self.default_locale)
        if content is None:
            raise ContentUnavailableError(template.key, locale, self.default_locale)

        logger.debug(
            f"Template {template.key!r} has no {locale!r} content; "
            f"using {self.default_locale!r}"
        )
        return content
