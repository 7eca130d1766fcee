"""Talent profiles with contact price tiers and compressed resume references."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from .ledger import U64_MAX, Clock, EventLog, ProgramError, TokenLedger

MAX_SKILLS = 10
MAX_SKILL_BYTES = 50
MAX_REGION_BYTES = 50
MAX_BIO_BYTES = 280
MAX_UPDATED_BIO_BYTES = 500
MIN_HANDLE_BYTES = 3
MAX_HANDLE_BYTES = 30
MAX_CONTACT_TIERS = 5
MAX_TIER_DESCRIPTION_BYTES = 50
MAX_RESPONSE_TIME_HOURS = 168
MAX_MESSAGE_BYTES = 1000
MAX_METADATA_URI_BYTES = 200
HASH_BYTES = 32
U16_MAX = 2**16 - 1


class ProfileManagerErrorCode(enum.Enum):
    TOO_MANY_SKILLS = "Too many skills provided"
    BIO_TOO_LONG = "Bio is too long"
    INVALID_HANDLE = "Invalid handle length"
    INVALID_RESPONSE_TIME = "Invalid response time"
    MESSAGE_TOO_LONG = "Message is too long"
    CONTACT_NOT_ALLOWED = "Contact not allowed"
    CONTACT_ALREADY_PROCESSED = "Contact request already processed"
    CONTACT_EXPIRED = "Contact request expired"
    INVALID_USDC_MINT = "Invalid USDC mint address"
    INVALID_CONTACT_STATUS = "Invalid contact status for payment"
    CONTACT_REQUEST_EXPIRED = "Contact request has expired"
    INVALID_PROFILE_OWNER = "Invalid profile owner"
    CANNOT_REFUND = "Cannot refund payment"
    INSUFFICIENT_PAYMENT = "Insufficient payment amount"
    CONTACT_NOT_EXPIRED = "Contact not expired yet"
    INVALID_TIER_INDEX = "Invalid tier index"
    INVALID_METADATA_URI = "Invalid metadata URI"
    METADATA_URI_TOO_LONG = "Metadata URI is too long"
    NO_RESUME_DATA = "No resume data available"
    INVALID_RESUME_PROOF = "Invalid resume proof"


class ProfileManagerError(ProgramError):
    """A profile instruction was refused."""

    def __init__(self, code: ProfileManagerErrorCode) -> None:
        super().__init__(code.value)
        self.code = code


class ContactStatus(enum.Enum):
    PENDING = "Pending"
    RESPONDED = "Responded"
    REJECTED = "Rejected"
    EXPIRED = "Expired"


def _utf8_len(text: str) -> int:
    return len(text.encode("utf-8"))


def _check_range(name: str, value: int, upper: int) -> None:
    if not 0 <= value <= upper:
        raise ValueError(f"{name} out of range: {value}")


def _check_hash(name: str, value: bytes) -> bytes:
    data = bytes(value)
    if len(data) != HASH_BYTES:
        raise ValueError(f"{name} must be {HASH_BYTES} bytes, got {len(data)}")
    return data


@dataclass
class ContactPriceTier:
    price: int
    description: str = ""

    def __post_init__(self) -> None:
        _check_range("price", self.price, U64_MAX)
        if _utf8_len(self.description) > MAX_TIER_DESCRIPTION_BYTES:
            raise ValueError(
                f"tier description longer than {MAX_TIER_DESCRIPTION_BYTES} bytes"
            )


@dataclass
class Profile:
    address: str
    owner: str
    skills: list[str]
    experience_years: int
    region: str
    bio: str
    handle: str
    contact_prices: list[ContactPriceTier]
    response_time_hours: int
    created_at: int
    updated_at: int
    resume_merkle_tree: str | None = None
    resume_leaf_index: int | None = None
    resume_root_hash: bytes | None = None
    nft_mint: str | None = None
    is_public: bool = True


@dataclass
class ContactRequest:
    address: str
    requester: str
    target_profile: str
    message: str
    amount: int
    created_at: int
    expires_at: int
    status: ContactStatus = ContactStatus.PENDING

    @property
    def escrow(self) -> str:
        """Token account that holds the request's payment."""
        return f"escrow:{self.address}"


@dataclass(frozen=True)
class ProfileCreated:
    owner: str
    handle: str
    skills: tuple[str, ...]
    region: str
    experience_years: int
    is_public: bool
    created_at: int


@dataclass(frozen=True)
class ResumeCompressed:
    owner: str
    profile: str
    merkle_tree: str
    leaf_index: int
    data_hash: bytes
    metadata_uri: str
    compressed_at: int


@dataclass(frozen=True)
class ResumeAccessed:
    requester: str
    profile_owner: str
    profile: str
    accessed_at: int


@dataclass(frozen=True)
class ContactRequestSent:
    requester: str
    target: str
    amount: int
    created_at: int


@dataclass(frozen=True)
class ContactRequestProcessed:
    requester: str
    target: str
    accepted: bool
    amount: int


@dataclass(frozen=True)
class ContactRequestExpired:
    requester: str
    target: str
    amount: int


def _check_storable(
    skills: Sequence[str] | None,
    region: str | None,
    bio: str | None,
    contact_prices: Sequence[ContactPriceTier] | None,
) -> None:
    """Refuse data that does not fit the profile account's fixed layout."""
    if skills is not None and any(_utf8_len(s) > MAX_SKILL_BYTES for s in skills):
        raise ProgramError("account data too small for skills")
    if region is not None and _utf8_len(region) > MAX_REGION_BYTES:
        raise ProgramError("account data too small for region")
    if bio is not None and _utf8_len(bio) > MAX_BIO_BYTES:
        raise ProgramError("account data too small for bio")
    if contact_prices is not None and len(contact_prices) > MAX_CONTACT_TIERS:
        raise ProgramError("account data too small for contact prices")


def _check_response_time(hours: int) -> None:
    if not 0 < hours <= MAX_RESPONSE_TIME_HOURS:
        raise ProfileManagerError(ProfileManagerErrorCode.INVALID_RESPONSE_TIME)


@dataclass
class ProfileManager:
    """Creates and updates profiles and records compressed resume references."""

    ledger: TokenLedger = field(default_factory=TokenLedger)
    clock: Clock = field(default_factory=Clock)
    events: EventLog = field(default_factory=EventLog)
    profiles: dict[str, Profile] = field(default_factory=dict)

    @staticmethod
    def profile_address(owner: str) -> str:
        return f"profile:{owner}"

    def profile(self, owner: str) -> Profile:
        address = self.profile_address(owner)
        try:
            return self.profiles[address]
        except KeyError:
            raise ProgramError(f"profile {address} is not initialized") from None

    def create_profile(
        self,
        owner: str,
        skills: Iterable[str],
        experience_years: int,
        region: str,
        bio: str,
        handle: str,
        contact_prices: Iterable[ContactPriceTier],
        response_time_hours: int,
        resume_link: str | None = None,
    ) -> Profile:
        """Create the owner's profile; the resume link is kept off the account."""
        skill_list = list(skills)
        tiers = list(contact_prices)
        _check_range("experience_years", experience_years, U16_MAX)
        _check_range("response_time_hours", response_time_hours, U16_MAX)

        address = self.profile_address(owner)
        if address in self.profiles:
            raise ProgramError(f"account {address} already in use")

        if len(skill_list) > MAX_SKILLS:
            raise ProfileManagerError(ProfileManagerErrorCode.TOO_MANY_SKILLS)
        if _utf8_len(bio) > MAX_BIO_BYTES:
            raise ProfileManagerError(ProfileManagerErrorCode.BIO_TOO_LONG)
        if not MIN_HANDLE_BYTES <= _utf8_len(handle) <= MAX_HANDLE_BYTES:
            raise ProfileManagerError(ProfileManagerErrorCode.INVALID_HANDLE)
        _check_response_time(response_time_hours)

        normalized_handle = handle.lower()
        if _utf8_len(normalized_handle) > MAX_HANDLE_BYTES:
            raise ProgramError("account data too small for handle")
        _check_storable(skill_list, region, bio, tiers)

        now = self.clock.now()
        profile = Profile(
            address=address,
            owner=owner,
            skills=skill_list,
            experience_years=experience_years,
            region=region,
            bio=bio,
            handle=normalized_handle,
            contact_prices=tiers,
            response_time_hours=response_time_hours,
            created_at=now,
            updated_at=now,
        )
        self.profiles[address] = profile
        self.events.emit(
            ProfileCreated(
                owner=owner,
                handle=normalized_handle,
                skills=tuple(skill_list),
                region=region,
                experience_years=experience_years,
                is_public=profile.is_public,
                created_at=now,
            )
        )
        return profile

    def update_profile(
        self,
        owner: str,
        skills: Iterable[str] | None = None,
        bio: str | None = None,
        is_public: bool | None = None,
        contact_prices: Iterable[ContactPriceTier] | None = None,
        response_time_hours: int | None = None,
    ) -> Profile:
        """Change the given fields; fields left as None keep their values."""
        profile = self.profile(owner)
        skill_list = list(skills) if skills is not None else None
        tiers = list(contact_prices) if contact_prices is not None else None

        if skill_list is not None and len(skill_list) > MAX_SKILLS:
            raise ProfileManagerError(ProfileManagerErrorCode.TOO_MANY_SKILLS)
        if bio is not None and _utf8_len(bio) > MAX_UPDATED_BIO_BYTES:
            raise ProfileManagerError(ProfileManagerErrorCode.BIO_TOO_LONG)
        if response_time_hours is not None:
            _check_range("response_time_hours", response_time_hours, U16_MAX)
            _check_response_time(response_time_hours)
        _check_storable(skill_list, None, bio, tiers)

        if skill_list is not None:
            profile.skills = skill_list
        if bio is not None:
            profile.bio = bio
        if is_public is not None:
            profile.is_public = is_public
        if tiers is not None:
            profile.contact_prices = tiers
        if response_time_hours is not None:
            profile.response_time_hours = response_time_hours
        return profile

    def compress_resume(
        self,
        owner: str,
        merkle_tree: str,
        resume_data_hash: bytes,
        metadata_uri: str,
    ) -> Profile:
        """Record the resume's tree, leaf and root hash on the owner's profile."""
        data_hash = _check_hash("resume_data_hash", resume_data_hash)
        profile = self.profile(owner)

        if not metadata_uri:
            raise ProfileManagerError(ProfileManagerErrorCode.INVALID_METADATA_URI)
        if _utf8_len(metadata_uri) > MAX_METADATA_URI_BYTES:
            raise ProfileManagerError(ProfileManagerErrorCode.METADATA_URI_TOO_LONG)

        leaf_index = 0
        now = self.clock.now()
        profile.resume_merkle_tree = merkle_tree
        profile.resume_leaf_index = leaf_index
        profile.resume_root_hash = data_hash
        profile.updated_at = now

        self.events.emit(
            ResumeCompressed(
                owner=profile.owner,
                profile=profile.address,
                merkle_tree=merkle_tree,
                leaf_index=leaf_index,
                data_hash=data_hash,
                metadata_uri=metadata_uri,
                compressed_at=now,
            )
        )
        return profile

    def verify_resume_access(
        self, requester: str, profile_owner: str, merkle_proof: Iterable[bytes]
    ) -> str:
        """Check the profile has a resume and return the URI to fetch it from."""
        proof = [_check_hash("merkle proof node", node) for node in merkle_proof]
        profile = self.profile(profile_owner)

        if (
            profile.resume_merkle_tree is None
            or profile.resume_leaf_index is None
            or profile.resume_root_hash is None
        ):
            raise ProfileManagerError(ProfileManagerErrorCode.NO_RESUME_DATA)
        if not _proof_accepted(
            proof, profile.resume_root_hash, profile.resume_leaf_index
        ):
            raise ProfileManagerError(ProfileManagerErrorCode.INVALID_RESUME_PROOF)

        metadata_uri = f"ipfs://resume-{profile.owner}-{profile.resume_leaf_index}"
        self.events.emit(
            ResumeAccessed(
                requester=requester,
                profile_owner=profile.owner,
                profile=profile.address,
                accessed_at=self.clock.now(),
            )
        )
        return metadata_uri


def _proof_accepted(proof: list[bytes], root: bytes, leaf_index: int) -> bool:
    """Any well-formed proof is accepted against a recorded root."""
    return len(root) == HASH_BYTES and leaf_index >= 0