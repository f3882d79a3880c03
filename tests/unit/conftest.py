import pytest

from cfneval.engine import resource_resolvers
from cfneval.engine.resolving_context import ResolvingContext

TEST_ACCOUNT_ID = "123456789012"
TEST_REGION = "us-east-1"
TEST_STACK_NAME = "test-stack"
TEST_SEED = 42


@pytest.fixture(autouse=True)
def skip_resource_resolver_plugins(monkeypatch):
    """
    Prevents the global registry from scanning the installed resource resolver plugins in unit tests.
    """
    monkeypatch.setattr(resource_resolvers.registry, "_plugins_loaded", True)


@pytest.fixture
def create_context():
    """Factory for resolving contexts with a fixed account, region and seed."""

    def _create(template: dict = None, **kwargs) -> ResolvingContext:
        kwargs.setdefault("region", TEST_REGION)
        kwargs.setdefault("account_id", TEST_ACCOUNT_ID)
        kwargs.setdefault("stack_name", TEST_STACK_NAME)
        kwargs.setdefault("seed", TEST_SEED)
        return ResolvingContext(template if template is not None else {"Resources": {}}, **kwargs)

    return _create
