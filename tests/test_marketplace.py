import pytest

from talentchain.ledger import ProgramError
from talentchain.marketplace import (
    VERIFIER_AUTHORITY,
    ResumeMarketplace,
    ResumeMarketplaceError,
    UnauthorizedVerifierError,
)


def test_list_resume_records_listing():
    market = ResumeMarketplace()
    nft = market.list_resume("alice", "mint-1", 1_000, 10)
    assert nft.original_creator == "alice"
    assert nft.owner == "alice"
    assert nft.mint == "mint-1"
    assert nft.price == 1_000
    assert nft.royalty_percentage == 10
    assert nft.is_for_sale is True
    assert nft.verified is False
    assert market.listing("mint-1") is nft


def test_listing_same_mint_twice_fails():
    market = ResumeMarketplace()
    market.list_resume("alice", "mint-1", 1, 0)
    with pytest.raises(ProgramError, match="already in use"):
        market.list_resume("bob", "mint-1", 2, 0)
    assert market.listing("mint-1").owner == "alice"


@pytest.mark.parametrize(
    "price, royalty", [(-1, 0), (2**64, 0), (1, -1), (1, 256)]
)
def test_list_resume_range_checks(price, royalty):
    market = ResumeMarketplace()
    with pytest.raises(ValueError):
        market.list_resume("alice", "mint-1", price, royalty)
    assert market.listings == {}


def test_verifier_verifies():
    market = ResumeMarketplace(verifier="verifier-key")
    market.list_resume("alice", "mint-1", 1, 5)
    nft = market.verify_resume("verifier-key", "mint-1")
    assert nft.verified is True


def test_default_verifier_is_fixed_authority():
    market = ResumeMarketplace()
    market.list_resume("alice", "mint-1", 1, 5)
    assert market.verify_resume(VERIFIER_AUTHORITY, "mint-1").verified is True


def test_other_authority_cannot_verify():
    market = ResumeMarketplace(verifier="verifier-key")
    market.list_resume("alice", "mint-1", 1, 5)
    with pytest.raises(UnauthorizedVerifierError):
        market.verify_resume("alice", "mint-1")
    assert market.listing("mint-1").verified is False


def test_verify_unlisted_mint_fails():
    market = ResumeMarketplace()
    with pytest.raises(ProgramError, match="not initialized"):
        market.verify_resume(VERIFIER_AUTHORITY, "mint-x")


def test_not_for_sale_message():
    error = ResumeMarketplaceError()
    assert str(error) == "This resume is not for sale."
    assert isinstance(error, ProgramError)