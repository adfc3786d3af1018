"""Placeholder renderer for ``{{name}}`` and ``{{transform name}}`` patterns."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from ..delivery import RenderedContent
from ..exceptions import TemplateError
from ..models import LocalizedContent
from ..ports.renderer import ITemplateRenderer
from .transforms import TRANSFORMS, stringify

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
_IDENTIFIER = re.compile(r"^[A-Za-z_][\w.-]*$")
_BLOCK_MARKERS = ("#", "/", ">", "!", "^", "&", "{", "~")


class TemplateRenderer(ITemplateRenderer):
    """
    Renders placeholder patterns against a flat variable map.

    Missing variables render as the empty string so partial data never blocks a
    delivery. Unknown transforms and malformed placeholders are authoring bugs
    and raise :class:`TemplateError`. The renderer holds no state between calls.
    """

    def render(self, pattern: str, variables: Mapping[str, Any]) -> str:
        return _PLACEHOLDER.sub(lambda m: self._substitute(m.group(1), variables), pattern)

    def render_content(
        self, content: LocalizedContent, variables: Mapping[str, Any]
    ) -> RenderedContent:
        """Render subject, title and body independently."""
        return RenderedContent(
            subject=self._render_optional("subject", content.subject, variables),
            title=self._render_optional("title", content.title, variables),
            body=self._render_field("body", content.body, variables),
        )

    def extract_variables(self, pattern: str) -> list[str]:
        """Unique variable names referenced by a pattern, in first-seen order."""
        names: list[str] = []
        for match in _PLACEHOLDER.finditer(pattern):
            tokens = match.group(1).split()
            if not tokens or tokens[0].startswith(_BLOCK_MARKERS):
                continue
            name = tokens[-1] if tokens[0] in TRANSFORMS else tokens[0]
            if name not in names:
                names.append(name)
        return names

    def _render_optional(
        self, field: str, pattern: str | None, variables: Mapping[str, Any]
    ) -> str | None:
        if pattern is None:
            return None
        return self._render_field(field, pattern, variables)

    def _render_field(self, field: str, pattern: str, variables: Mapping[str, Any]) -> str:
        try:
            return self.render(pattern, variables)
        except TemplateError as e:
            logger.error(f"Rendering {field} failed: {e}")
            raise e.for_field(field) from e

    def _substitute(self, expression: str, variables: Mapping[str, Any]) -> str:
        tokens = expression.split()
        if not tokens:
            raise TemplateError("empty placeholder '{{}}'")
        head = tokens[0]
        if head.startswith(_BLOCK_MARKERS):
            raise TemplateError(f"unsupported placeholder '{{{{{expression.strip()}}}}}'")

        if len(tokens) == 1:
            if head in TRANSFORMS:
                raise TemplateError(f"transform {head!r} expects exactly one variable")
            self._check_identifier(head)
            return stringify(variables.get(head))

        if head not in TRANSFORMS:
            raise TemplateError(f"unknown transform {head!r}")
        if len(tokens) != 2:
            raise TemplateError(f"transform {head!r} expects exactly one variable")
        name = tokens[1]
        self._check_identifier(name)
        if name not in variables or variables[name] is None:
            return ""
        return TRANSFORMS[head](variables[name])

    @staticmethod
    def _check_identifier(name: str) -> None:
        if not _IDENTIFIER.match(name):
            raise TemplateError(f"invalid variable name {name!r}")
