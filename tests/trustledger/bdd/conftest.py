"""Shared BDD fixtures and step definitions for the TrustLedger domain."""

import pytest
from protean.exceptions import ObjectNotFoundError, ValidationError
from pytest_bdd import given, parsers, then

from trustledger.access.management import GrantRole, InitializeAccess
from trustledger.dispatch import dispatch
from trustledger.product.registration import AddProduct
from trustledger.review.ledger import review_count
from trustledger.review.posting import PostReview
from trustledger.trust.aggregator import get_trust_score


@pytest.fixture()
def outcome():
    """Container for the result or the captured error of the last action."""
    return {"result": None, "exc": None}


@pytest.fixture()
def attempt(outcome):
    """Dispatch a command, capturing its result or domain error in ``outcome``."""

    def _attempt(command):
        try:
            outcome["result"] = dispatch(command)
        except (ValidationError, ObjectNotFoundError) as exc:
            outcome["exc"] = exc

    return _attempt


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("the ledger is initialized")
def ledger_initialized():
    dispatch(InitializeAccess(admin="admin"))
    dispatch(GrantRole(caller="admin", role="ProductManager", account="manager"))
    dispatch(GrantRole(caller="admin", role="Broadcaster", account="broadcaster"))


@given(parsers.cfparse('product "{product_id}" is registered for vendor "{vendor}"'))
def product_registered(product_id, vendor):
    dispatch(AddProduct(caller="manager", product_id=product_id, vendor=vendor))


@given(
    parsers.cfparse(
        'reviewer "{reviewer}" has posted a review of "{product_id}" '
        'with transaction "{transaction_id}" and rating {rating:d}'
    )
)
def review_posted(reviewer, product_id, transaction_id, rating):
    dispatch(PostReview(reviewer=reviewer, product_id=product_id, transaction_id=transaction_id, rating=rating))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the trust score of "{product_id}" shows {total:d} reviews averaging {average:d}'))
def trust_score_shows(product_id, total, average):
    score = get_trust_score(product_id)
    assert score.total_reviews == total
    assert score.average_rating == average
    assert score.last_updated is not None


@then(parsers.cfparse("the ledger holds {count:d} reviews"))
def ledger_holds(count):
    assert review_count() == count
