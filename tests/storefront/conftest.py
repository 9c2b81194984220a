import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield


@pytest.fixture()
def add_product():
    """Persist a catalogue product and return it."""
    from protean import current_domain
    from storefront.product.product import Product

    def _add(title="Test Product", price=10.0, stock=10, **kwargs):
        product = Product.add(title=title, price=price, stock=stock, **kwargs)
        current_domain.repository_for(Product).add(product)
        return product

    return _add


@pytest.fixture()
def no_version_retry(monkeypatch):
    """Surface version conflicts at once instead of re-running the handler."""
    from protean import current_domain

    server = dict(current_domain.config.get("server", {}))
    server["version_retry"] = {**server.get("version_retry", {}), "enabled": False}
    monkeypatch.setitem(current_domain.config, "server", server)
