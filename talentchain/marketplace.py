"""A marketplace of resume NFTs with royalties and verification."""

from __future__ import annotations

from dataclasses import dataclass, field

from .ledger import U64_MAX, ProgramError

VERIFIER_AUTHORITY = "EyRWh1DRQ7c1Fku4RfwEmemHPUKxPRhexXaFgnrDmn8p"
U8_MAX = 2**8 - 1


class ResumeMarketplaceError(ProgramError):
    """A marketplace instruction was refused."""

    NOT_FOR_SALE = "This resume is not for sale."

    def __init__(self, message: str = NOT_FOR_SALE) -> None:
        super().__init__(message)


class UnauthorizedVerifierError(ProgramError):
    """Someone other than the verifier tried to verify a resume."""

    def __init__(self, authority: str) -> None:
        super().__init__(f"{authority} may not verify resumes")
        self.authority = authority


@dataclass
class ResumeNft:
    address: str
    original_creator: str
    owner: str
    mint: str
    price: int
    royalty_percentage: int
    is_for_sale: bool = True
    verified: bool = False


@dataclass(frozen=True)
class RoyaltyPaid:
    mint: str
    original_creator: str
    amount: int


@dataclass
class ResumeMarketplace:
    """Lists resume NFTs for sale and records their verification."""

    verifier: str = VERIFIER_AUTHORITY
    listings: dict[str, ResumeNft] = field(default_factory=dict)

    @staticmethod
    def listing_address(mint: str) -> str:
        return f"resume:{mint}"

    def listing(self, mint: str) -> ResumeNft:
        address = self.listing_address(mint)
        try:
            return self.listings[address]
        except KeyError:
            raise ProgramError(f"resume {address} is not initialized") from None

    def list_resume(
        self, owner: str, mint: str, price: int, royalty_percentage: int
    ) -> ResumeNft:
        """Put the owner's resume NFT up for sale at the given price."""
        if not 0 <= price <= U64_MAX:
            raise ValueError(f"price out of range: {price}")
        if not 0 <= royalty_percentage <= U8_MAX:
            raise ValueError(f"royalty_percentage out of range: {royalty_percentage}")
        address = self.listing_address(mint)
        if address in self.listings:
            raise ProgramError(f"account {address} already in use")
        nft = ResumeNft(
            address=address,
            original_creator=owner,
            owner=owner,
            mint=mint,
            price=price,
            royalty_percentage=royalty_percentage,
        )
        self.listings[address] = nft
        return nft

    def verify_resume(self, authority: str, mint: str) -> ResumeNft:
        """Mark a listed resume verified; only the verifier may do so."""
        nft = self.listing(mint)
        if authority != self.verifier:
            raise UnauthorizedVerifierError(authority)
        nft.verified = True
        return nft