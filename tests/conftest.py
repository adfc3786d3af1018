"""Test configuration for notification-dispatch."""

import pytest

from notification_dispatch import (
    BackendTable,
    Channel,
    DispatchOrchestrator,
    InMemoryBackend,
    InMemoryNotificationStore,
    LocalizedContent,
    Template,
    User,
)

TENANT = "tenant-1"


@pytest.fixture
def alice():
    """User reachable on every channel, with two iOS devices."""
    return User(
        id="user-alice",
        tenant_id=TENANT,
        locale="en-US",
        email="alice@example.com",
        phone_number="+15550001111",
        apns_tokens=["apns-device-1", "apns-device-2"],
        fcm_tokens=["fcm-device-1"],
    )


@pytest.fixture
def ana():
    """Spanish-speaking user with an email address only."""
    return User(
        id="user-ana",
        tenant_id=TENANT,
        locale="es-ES",
        email="ana@example.com",
    )


@pytest.fixture
def welcome_template():
    return Template(
        key="welcome",
        tenant_id=TENANT,
        name="Welcome",
        channels=(Channel.EMAIL, Channel.SMS),
        translations={
            "en-US": LocalizedContent(
                subject="Welcome, {{name}}",
                title="Hello",
                body="Hi {{name}}",
            ),
            "fr-FR": LocalizedContent(subject="Bienvenue", body="Salut {{name}}"),
        },
    )


@pytest.fixture
def store(alice, ana, welcome_template):
    store = InMemoryNotificationStore()
    store.add_user(alice)
    store.add_user(ana)
    store.add_template(welcome_template)
    return store


@pytest.fixture
def email_backend():
    return InMemoryBackend(Channel.EMAIL)


@pytest.fixture
def sms_backend():
    return InMemoryBackend(Channel.SMS)


@pytest.fixture
def apns_backend():
    return InMemoryBackend(Channel.APPLE_PUSH)


@pytest.fixture
def fcm_backend():
    return InMemoryBackend(Channel.GOOGLE_PUSH)


@pytest.fixture
def backends(email_backend, sms_backend, apns_backend, fcm_backend):
    return BackendTable([email_backend, sms_backend, apns_backend, fcm_backend])


@pytest.fixture
def orchestrator(store, backends):
    return DispatchOrchestrator.from_store(store, backends)
