import pytest
from fastapi.testclient import TestClient

from app.application.messages import MessageBranding
from app.domain.password_policy import PasswordPolicy
from app.domain.redirects import RedirectResolver
from app.main import create_app
from app.presentation.dependencies import (
    get_activation_code_ttl_seconds,
    get_branding,
    get_client_registry,
    get_code_store,
    get_event_publisher,
    get_message_port,
    get_password_policy,
    get_provisioner,
    get_redirect_resolver,
    get_reset_code_ttl_seconds,
)


@pytest.fixture()
def app_and_deps(provisioner, identity_store, code_store, messages, events, client_registry):
    app = create_app()

    app.dependency_overrides[get_provisioner] = lambda: provisioner
    app.dependency_overrides[get_code_store] = lambda: code_store
    app.dependency_overrides[get_message_port] = lambda: messages
    app.dependency_overrides[get_event_publisher] = lambda: events
    app.dependency_overrides[get_client_registry] = lambda: client_registry
    app.dependency_overrides[get_password_policy] = lambda: PasswordPolicy(min_length=8)
    app.dependency_overrides[get_redirect_resolver] = lambda: RedirectResolver("home")
    app.dependency_overrides[get_branding] = lambda: MessageBranding(
        service_name="Identity", base_url="https://login.example.com"
    )
    app.dependency_overrides[get_activation_code_ttl_seconds] = lambda: 60
    app.dependency_overrides[get_reset_code_ttl_seconds] = lambda: 60

    try:
        yield app
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app_and_deps):
    return TestClient(app_and_deps, raise_server_exceptions=False)
