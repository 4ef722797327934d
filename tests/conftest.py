import pytest

from app.application.messages import MessageBranding
from app.application.provisioning import AccountProvisioner
from app.domain.entities import IdentityZone, RedirectRegistration
from app.domain.password_policy import PasswordPolicy
from app.domain.redirects import RedirectResolver
from tests.fakes import (
    FakeActionCodeStore,
    FakeClientRegistry,
    FakeErroredActionCodeStore,
    FakeEventPublisher,
    FakeIdentityStore,
    FakeMessagesDown,
    FakeMessagesOK,
)


@pytest.fixture()
def zone():
    return IdentityZone.default()


@pytest.fixture()
def other_zone():
    return IdentityZone(id="acme", name="Acme")


@pytest.fixture()
def identity_store():
    return FakeIdentityStore()


@pytest.fixture()
def provisioner(identity_store):
    return AccountProvisioner(identity_store)


@pytest.fixture()
def code_store():
    return FakeActionCodeStore()


@pytest.fixture()
def errored_code_store():
    return FakeErroredActionCodeStore()


@pytest.fixture()
def messages():
    return FakeMessagesOK()


@pytest.fixture()
def messages_down():
    return FakeMessagesDown()


@pytest.fixture()
def events():
    return FakeEventPublisher()


@pytest.fixture()
def password_policy():
    return PasswordPolicy(min_length=8)


@pytest.fixture()
def branding():
    return MessageBranding(service_name="Identity", base_url="https://login.example.com")


@pytest.fixture()
def client_registry():
    return FakeClientRegistry(
        {
            "c1": RedirectRegistration(
                client_id="c1",
                redirect_uris=("https://*.example.com/cb",),
                signup_redirect_url="https://example.com/welcome",
            ),
            "bare": RedirectRegistration(client_id="bare"),
        }
    )


@pytest.fixture()
def redirects():
    return RedirectResolver("home")
