"""Paid contact requests to profiles, with payments held in escrow."""

from __future__ import annotations

from dataclasses import dataclass, field

from .ledger import Clock, EventLog, ProgramError, TokenLedger
from .profiles import (
    MAX_MESSAGE_BYTES,
    ContactRequest,
    ContactRequestExpired,
    ContactRequestProcessed,
    ContactRequestSent,
    ContactStatus,
    ProfileManager,
    ProfileManagerError,
    ProfileManagerErrorCode,
)

SECONDS_PER_HOUR = 3600
U8_MAX = 2**8 - 1


def _refuse(code: ProfileManagerErrorCode) -> ProfileManagerError:
    return ProfileManagerError(code)


@dataclass
class ContactGate:
    """Sends, answers and expires contact requests against profiles."""

    profiles: ProfileManager = field(default_factory=ProfileManager)
    requests: dict[str, ContactRequest] = field(default_factory=dict)

    @property
    def ledger(self) -> TokenLedger:
        return self.profiles.ledger

    @property
    def clock(self) -> Clock:
        return self.profiles.clock

    @property
    def events(self) -> EventLog:
        return self.profiles.events

    @staticmethod
    def request_address(requester: str, target_profile: str) -> str:
        return f"contact:{requester}:{target_profile}"

    def request(self, requester: str, target_owner: str) -> ContactRequest:
        """The request the requester sent to the target owner's profile."""
        address = self.request_address(
            requester, self.profiles.profile_address(target_owner)
        )
        try:
            return self.requests[address]
        except KeyError:
            raise ProgramError(f"contact request {address} is not initialized") from None

    def send_contact_request(
        self,
        requester: str,
        requester_token_account: str,
        target_owner: str,
        message: str,
        tier_index: int,
    ) -> ContactRequest:
        """Pay the chosen tier's price into escrow and open a pending request."""
        if not 0 <= tier_index <= U8_MAX:
            raise ValueError(f"tier_index out of range: {tier_index}")
        target_profile = self.profiles.profile(target_owner)
        address = self.request_address(requester, target_profile.address)
        if address in self.requests:
            raise ProgramError(f"account {address} already in use")

        if len(message.encode("utf-8")) > MAX_MESSAGE_BYTES:
            raise _refuse(ProfileManagerErrorCode.MESSAGE_TOO_LONG)
        if not target_profile.contact_prices:
            raise _refuse(ProfileManagerErrorCode.CONTACT_NOT_ALLOWED)
        if tier_index >= len(target_profile.contact_prices):
            raise _refuse(ProfileManagerErrorCode.INVALID_TIER_INDEX)

        price = target_profile.contact_prices[tier_index].price
        if price <= 0:
            raise _refuse(ProfileManagerErrorCode.CONTACT_NOT_ALLOWED)

        now = self.clock.now()
        contact = ContactRequest(
            address=address,
            requester=requester,
            target_profile=target_profile.address,
            message=message,
            amount=price,
            created_at=now,
            expires_at=now + target_profile.response_time_hours * SECONDS_PER_HOUR,
        )
        self.ledger.transfer(requester_token_account, contact.escrow, price)
        self.requests[address] = contact

        self.events.emit(
            ContactRequestSent(
                requester=requester,
                target=target_profile.address,
                amount=price,
                created_at=now,
            )
        )
        return contact

    def respond_to_contact(
        self,
        target: str,
        requester: str,
        accept: bool,
        requester_token_account: str,
        target_token_account: str,
    ) -> ContactRequest:
        """Accept (pay the target) or reject (refund the requester) a pending request."""
        target_profile = self.profiles.profile(target)
        contact = self.request(requester, target)
        if contact.target_profile != target_profile.address:
            raise ProgramError("contact request belongs to another profile")

        if contact.status is not ContactStatus.PENDING:
            raise _refuse(ProfileManagerErrorCode.CONTACT_ALREADY_PROCESSED)
        if self.clock.now() > contact.expires_at:
            raise _refuse(ProfileManagerErrorCode.CONTACT_EXPIRED)

        if accept:
            self.ledger.transfer(contact.escrow, target_token_account, contact.amount)
            contact.status = ContactStatus.RESPONDED
        else:
            self.ledger.transfer(
                contact.escrow, requester_token_account, contact.amount
            )
            contact.status = ContactStatus.REJECTED

        self.events.emit(
            ContactRequestProcessed(
                requester=contact.requester,
                target=contact.target_profile,
                accepted=accept,
                amount=contact.amount,
            )
        )
        return contact

    def handle_expired_contact(
        self, requester: str, target_owner: str, requester_token_account: str
    ) -> ContactRequest:
        """Refund a pending request whose response time has run out."""
        contact = self.request(requester, target_owner)

        if contact.status is not ContactStatus.PENDING:
            raise _refuse(ProfileManagerErrorCode.CONTACT_NOT_EXPIRED)
        if self.clock.now() <= contact.expires_at:
            raise _refuse(ProfileManagerErrorCode.CONTACT_NOT_EXPIRED)

        self.ledger.transfer(contact.escrow, requester_token_account, contact.amount)
        contact.status = ContactStatus.EXPIRED

        self.events.emit(
            ContactRequestExpired(
                requester=contact.requester,
                target=contact.target_profile,
                amount=contact.amount,
            )
        )
        return contact