import pytest
from protean.integrations.pytest import DomainFixture

from trustledger.gateway import reset_gateway, set_gateway
from trustledger.gateway.fake_adapter import FakeGateway

ADMIN = "acct-admin"
MANAGER = "acct-manager"
BROADCASTER = "acct-broadcaster"
VENDOR = "acct-vendor"
ALICE = "acct-alice"
BOB = "acct-bob"


@pytest.fixture(scope="session")
def trustledger_bed():
    from trustledger.domain import trustledger

    bed = DomainFixture(trustledger)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(trustledger_bed):
    with trustledger_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def gateway():
    """Fresh FakeGateway for each test."""
    fake = FakeGateway()
    set_gateway(fake)
    yield fake
    reset_gateway()


@pytest.fixture()
def access():
    """Initialized ledger with one account per role."""
    from trustledger.access.management import GrantRole, InitializeAccess
    from trustledger.dispatch import dispatch

    dispatch(InitializeAccess(admin=ADMIN))
    dispatch(GrantRole(caller=ADMIN, role="ProductManager", account=MANAGER))
    dispatch(GrantRole(caller=ADMIN, role="Broadcaster", account=BROADCASTER))
    return {"admin": ADMIN, "manager": MANAGER, "broadcaster": BROADCASTER}


@pytest.fixture()
def product(access):
    """Registered, active product owned by VENDOR."""
    from trustledger.dispatch import dispatch
    from trustledger.product.registration import AddProduct

    return dispatch(AddProduct(caller=MANAGER, product_id="prod-001", vendor=VENDOR))
