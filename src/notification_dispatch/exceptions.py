"""Exception hierarchy for the dispatch pipeline."""

from __future__ import annotations


class NotificationDispatchError(Exception):
    """Root exception for the notification-dispatch package."""


class DispatchError(NotificationDispatchError):
    """Base class for terminal errors that abort a dispatch call before any send.

    Per-channel failures are never raised; they are reported in the result.
    """


class UserNotFoundError(DispatchError):
    """Raised when the recipient does not exist within the tenant."""

    def __init__(self, tenant_id: str, user_id: str) -> None:
        self.tenant_id = tenant_id
        self.user_id = user_id
        super().__init__(f"User {user_id!r} not found in tenant {tenant_id!r}")


class TemplateNotFoundError(DispatchError):
    """Raised when no template with the key exists within the tenant."""

    def __init__(self, tenant_id: str, template_key: str) -> None:
        self.tenant_id = tenant_id
        self.template_key = template_key
        super().__init__(f"Template {template_key!r} not found in tenant {tenant_id!r}")


class ContentUnavailableError(DispatchError):
    """Raised when a template has neither the user's locale nor the default locale."""

    def __init__(self, template_key: str, locale: str, default_locale: str) -> None:
        self.template_key = template_key
        self.locale = locale
        self.default_locale = default_locale
        super().__init__(
            f"Template {template_key!r} has no content for {locale!r} "
            f"or default locale {default_locale!r}"
        )


class TemplateError(DispatchError):
    """Raised when a placeholder pattern cannot be rendered.

    This is a template-authoring bug (unknown transform, malformed placeholder),
    never a missing-variable condition.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        prefix = f"{field}: " if field else ""
        super().__init__(f"{prefix}{message}")

    def for_field(self, field: str) -> TemplateError:
        """Return a copy of this error attributed to a content field."""
        return TemplateError(str(self), field=field)


class InfrastructureError(NotificationDispatchError):
    """Base class for store and backend infrastructure failures."""


class StoreDataError(InfrastructureError):
    """Raised when persisted data fails validation at the load boundary."""


class BackendConfigurationError(InfrastructureError):
    """Raised when a channel backend is constructed with incomplete settings."""
