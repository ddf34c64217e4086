import pytest

from gfauth.errors import AuthError
from gfauth.generator import (
    NoAuth,
    TokenGenerator,
    enabled,
    init_system_token_manager,
    system_token_manager,
)
from gfauth.tokens import Options


class _IssuingGenerator(TokenGenerator):
    def get_token(self, options):
        return "token"

    def issuer(self):
        return "test-issuer"

    def get_authenticator(self):
        raise AuthError("unused")


@pytest.fixture
def restore_manager():
    previous = system_token_manager()
    yield
    init_system_token_manager(previous)


def test_no_auth():
    na = NoAuth()
    assert na.issuer() == ""
    with pytest.raises(AuthError, match="No authentication set"):
        na.get_authenticator()
    assert na.get_token(Options()) == ""


def test_default_manager_disabled(restore_manager):
    init_system_token_manager(NoAuth())
    assert enabled() is False
    assert system_token_manager().issuer() == ""


def test_install_manager_enables_auth(restore_manager):
    generator = _IssuingGenerator()
    init_system_token_manager(generator)
    assert system_token_manager() is generator
    assert enabled() is True
    assert system_token_manager().get_token(Options()) == "token"


def test_abstract_generator_cannot_be_created():
    with pytest.raises(TypeError):
        TokenGenerator()