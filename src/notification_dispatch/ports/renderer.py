"""Template renderer port."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..delivery import RenderedContent
    from ..models import LocalizedContent


@runtime_checkable
class ITemplateRenderer(Protocol):
    """Protocol for rendering placeholder patterns."""

    def render(self, pattern: str, variables: Mapping[str, Any]) -> str:
        """Render a single pattern."""
        ...

    def render_content(
        self, content: LocalizedContent, variables: Mapping[str, Any]
    ) -> RenderedContent:
        """Render every field of a localized content block."""
        ...
