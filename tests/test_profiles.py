import pytest

from talentchain.ledger import Clock, EventLog, ProgramError
from talentchain.profiles import (
    ContactPriceTier,
    ContactRequest,
    ContactStatus,
    ProfileCreated,
    ProfileManager,
    ProfileManagerError,
    ProfileManagerErrorCode,
    ResumeAccessed,
    ResumeCompressed,
)


def make_manager(start=1_000):
    return ProfileManager(clock=Clock(start), events=EventLog())


def create(manager, owner="alice", **overrides):
    args = dict(
        skills=["rust", "python"],
        experience_years=5,
        region="EU",
        bio="Builder",
        handle="AliceDev",
        contact_prices=[ContactPriceTier(10, "quick"), ContactPriceTier(50, "call")],
        response_time_hours=24,
        resume_link=None,
    )
    args.update(overrides)
    return manager.create_profile(owner, **args)


HASH = bytes(range(32))


def test_create_profile_stores_fields_and_lowercases_handle():
    manager = make_manager()
    profile = create(manager)
    assert profile.handle == "alicedev"
    assert profile.owner == "alice"
    assert profile.is_public is True
    assert profile.created_at == profile.updated_at == 1_000
    assert profile.resume_merkle_tree is None
    assert manager.profile("alice") is profile


def test_create_profile_emits_event():
    manager = make_manager()
    create(manager)
    [event] = manager.events.of_type(ProfileCreated)
    assert event.handle == "alicedev"
    assert event.skills == ("rust", "python")
    assert event.region == "EU"
    assert event.created_at == 1_000


def test_create_profile_twice_is_refused():
    manager = make_manager()
    create(manager)
    with pytest.raises(ProgramError, match="already in use"):
        create(manager)


@pytest.mark.parametrize(
    "overrides, code",
    [
        ({"skills": ["s"] * 11}, ProfileManagerErrorCode.TOO_MANY_SKILLS),
        ({"bio": "x" * 281}, ProfileManagerErrorCode.BIO_TOO_LONG),
        ({"handle": "ab"}, ProfileManagerErrorCode.INVALID_HANDLE),
        ({"handle": "a" * 31}, ProfileManagerErrorCode.INVALID_HANDLE),
        ({"response_time_hours": 0}, ProfileManagerErrorCode.INVALID_RESPONSE_TIME),
        ({"response_time_hours": 169}, ProfileManagerErrorCode.INVALID_RESPONSE_TIME),
    ],
)
def test_create_profile_validation(overrides, code):
    manager = make_manager()
    with pytest.raises(ProfileManagerError) as info:
        create(manager, **overrides)
    assert info.value.code is code
    assert "profile:alice" not in manager.profiles


def test_create_profile_boundaries_accepted():
    manager = make_manager()
    profile = create(
        manager,
        skills=["s"] * 10,
        bio="x" * 280,
        handle="abc",
        response_time_hours=168,
    )
    assert len(profile.skills) == 10
    assert profile.response_time_hours == 168


def test_create_profile_too_many_tiers_does_not_fit():
    manager = make_manager()
    with pytest.raises(ProgramError, match="too small"):
        create(manager, contact_prices=[ContactPriceTier(1)] * 6)


def test_error_message_comes_from_code():
    manager = make_manager()
    with pytest.raises(ProfileManagerError, match="Bio is too long"):
        create(manager, bio="x" * 300)


def test_update_profile_changes_only_given_fields():
    manager = make_manager()
    create(manager)
    manager.clock.advance(100)
    profile = manager.update_profile("alice", bio="new bio", is_public=False)
    assert profile.bio == "new bio"
    assert profile.is_public is False
    assert profile.skills == ["rust", "python"]
    assert profile.response_time_hours == 24
    assert profile.updated_at == 1_000


def test_update_profile_bio_limits():
    manager = make_manager()
    create(manager)
    with pytest.raises(ProfileManagerError) as info:
        manager.update_profile("alice", bio="x" * 501)
    assert info.value.code is ProfileManagerErrorCode.BIO_TOO_LONG
    with pytest.raises(ProgramError, match="too small"):
        manager.update_profile("alice", bio="x" * 300)
    assert manager.profile("alice").bio == "Builder"


def test_update_profile_failure_leaves_profile_unchanged():
    manager = make_manager()
    create(manager)
    with pytest.raises(ProfileManagerError) as info:
        manager.update_profile("alice", skills=["a"], response_time_hours=200)
    assert info.value.code is ProfileManagerErrorCode.INVALID_RESPONSE_TIME
    assert manager.profile("alice").skills == ["rust", "python"]


def test_update_profile_requires_existing_profile():
    manager = make_manager()
    with pytest.raises(ProgramError, match="not initialized"):
        manager.update_profile("bob", bio="hi")


def test_compress_resume_records_reference_and_event():
    manager = make_manager()
    create(manager)
    manager.clock.advance(60)
    profile = manager.compress_resume("alice", "tree-1", HASH, "ipfs://meta")
    assert profile.resume_merkle_tree == "tree-1"
    assert profile.resume_leaf_index == 0
    assert profile.resume_root_hash == HASH
    assert profile.updated_at == 1_060
    [event] = manager.events.of_type(ResumeCompressed)
    assert event.data_hash == HASH
    assert event.metadata_uri == "ipfs://meta"
    assert event.profile == profile.address


@pytest.mark.parametrize(
    "uri, code",
    [
        ("", ProfileManagerErrorCode.INVALID_METADATA_URI),
        ("u" * 201, ProfileManagerErrorCode.METADATA_URI_TOO_LONG),
    ],
)
def test_compress_resume_uri_validation(uri, code):
    manager = make_manager()
    create(manager)
    with pytest.raises(ProfileManagerError) as info:
        manager.compress_resume("alice", "tree-1", HASH, uri)
    assert info.value.code is code
    assert manager.profile("alice").resume_root_hash is None


def test_compress_resume_rejects_wrong_hash_length():
    manager = make_manager()
    create(manager)
    with pytest.raises(ValueError):
        manager.compress_resume("alice", "tree-1", b"short", "ipfs://meta")


def test_verify_resume_access_without_resume():
    manager = make_manager()
    create(manager)
    with pytest.raises(ProfileManagerError) as info:
        manager.verify_resume_access("bob", "alice", [])
    assert info.value.code is ProfileManagerErrorCode.NO_RESUME_DATA


def test_verify_resume_access_returns_uri_and_emits():
    manager = make_manager()
    create(manager)
    manager.compress_resume("alice", "tree-1", HASH, "ipfs://meta")
    uri = manager.verify_resume_access("bob", "alice", [HASH])
    assert uri == "ipfs://resume-alice-0"
    [event] = manager.events.of_type(ResumeAccessed)
    assert event.requester == "bob"
    assert event.profile_owner == "alice"


def test_verify_resume_access_rejects_malformed_proof():
    manager = make_manager()
    create(manager)
    manager.compress_resume("alice", "tree-1", HASH, "ipfs://meta")
    with pytest.raises(ValueError):
        manager.verify_resume_access("bob", "alice", [b"\x00" * 5])


def test_contact_price_tier_validation():
    with pytest.raises(ValueError):
        ContactPriceTier(-1)
    with pytest.raises(ValueError):
        ContactPriceTier(1, "d" * 51)


def test_contact_request_defaults_to_pending_with_escrow():
    request = ContactRequest("contact:a:b", "a", "profile:b", "hi", 5, 0, 10)
    assert request.status is ContactStatus.PENDING
    assert request.escrow == "escrow:contact:a:b"