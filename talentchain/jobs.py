"""Job postings with escrowed hiring bounties, applications and referral links."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable

from .hiring_rewards import HiringRewards
from .ledger import U64_MAX, Clock, EventLog, ProgramError, TokenLedger

MAX_TITLE_BYTES = 100
MAX_DESCRIPTION_BYTES = 1000
MAX_SKILLS = 10
MAX_SKILL_BYTES = 50
MAX_COVER_LETTER_BYTES = 1000
MAX_DEADLINE_DAYS = 365
SECONDS_PER_DAY = 24 * 60 * 60
U32_MAX = 2**32 - 1

DIRECT_HIRE_PERCENTAGE = 70
REFERRAL_PERCENTAGE = 20
CANDIDATE_PERCENTAGE = 50


class JobApplicationErrorCode(enum.Enum):
    TITLE_TOO_LONG = "Title too long"
    DESCRIPTION_TOO_LONG = "Description too long"
    TOO_MANY_SKILLS = "Too many skills"
    INVALID_SALARY_RANGE = "Invalid salary range"
    INVALID_DEADLINE = "Invalid deadline"
    JOB_NOT_ACTIVE = "Job is not active"
    APPLICATION_EXISTS = "Application already exists"
    UNAUTHORIZED = "Unauthorized"
    INVALID_BOUNTY_AMOUNT = "Invalid bounty amount"


class JobApplicationError(ProgramError):
    """A job-board instruction was refused."""

    def __init__(self, code: JobApplicationErrorCode) -> None:
        super().__init__(code.value)
        self.code = code


class ApplicationStatus(enum.Enum):
    PENDING = "Pending"
    REVIEWING = "Reviewing"
    INTERVIEW = "Interview"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    HIRED = "Hired"


@dataclass
class Job:
    address: str
    recruiter: str
    title: str
    description: str
    required_skills: list[str]
    salary_min: int
    salary_max: int
    created_at: int
    deadline: int
    job_id: int
    hiring_bounty: int
    is_active: bool = True
    application_count: int = 0
    bounty_distributed: bool = False

    @property
    def escrow(self) -> str:
        """Token account that holds the job's hiring bounty."""
        return f"bounty_escrow:{self.address}"


@dataclass
class JobBounty:
    address: str
    job: str
    recruiter: str
    amount: int
    direct_hire_percentage: int = DIRECT_HIRE_PERCENTAGE
    referral_percentage: int = REFERRAL_PERCENTAGE
    candidate_percentage: int = CANDIDATE_PERCENTAGE
    distributed: bool = False


@dataclass
class Application:
    address: str
    applicant: str
    job: str
    profile: str
    cover_letter: str
    applied_at: int
    status: ApplicationStatus = ApplicationStatus.PENDING
    referrer: str | None = None
    referral_link_id: int | None = None


@dataclass
class ReferralLink:
    address: str
    job: str
    referrer: str
    link_id: int
    created_at: int
    applications_count: int = 0
    successful_hires: int = 0
    is_active: bool = True


@dataclass(frozen=True)
class JobCreated:
    job_id: str
    recruiter: str
    title: str
    hiring_bounty: int
    created_at: int


@dataclass(frozen=True)
class ApplicationSubmitted:
    applicant: str
    job: str
    referrer: str | None
    applied_at: int


@dataclass(frozen=True)
class ApplicationStatusUpdated:
    application: str
    new_status: str
    updated_at: int


@dataclass(frozen=True)
class ReferralLinkCreated:
    job: str
    referrer: str
    link_id: int
    created_at: int


def _utf8_len(text: str) -> int:
    return len(text.encode("utf-8"))


def _check_u64(name: str, value: int) -> None:
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"{name} out of range: {value}")


def _already_in_use(address: str) -> ProgramError:
    return ProgramError(f"account {address} already in use")


@dataclass
class JobBoard:
    """Posts jobs, takes applications and referral links, and hires applicants."""

    ledger: TokenLedger = field(default_factory=TokenLedger)
    clock: Clock = field(default_factory=Clock)
    events: EventLog = field(default_factory=EventLog)
    rewards: HiringRewards | None = None
    jobs: dict[str, Job] = field(default_factory=dict)
    bounties: dict[str, JobBounty] = field(default_factory=dict)
    applications: dict[str, Application] = field(default_factory=dict)
    referral_links: dict[str, ReferralLink] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.rewards is None:
            self.rewards = HiringRewards(self.ledger, self.clock, self.events)

    @staticmethod
    def job_address(recruiter: str, job_id: int) -> str:
        return f"job:{recruiter}:{job_id}"

    @staticmethod
    def application_address(job_key: str, applicant: str) -> str:
        return f"application:{job_key}:{applicant}"

    @staticmethod
    def referral_link_address(referrer: str, job_key: str, link_id: int) -> str:
        return f"referral:{referrer}:{job_key}:{link_id}"

    def create_job(
        self,
        recruiter: str,
        recruiter_token_account: str,
        title: str,
        description: str,
        required_skills: Iterable[str],
        salary_min: int,
        salary_max: int,
        deadline_days: int,
        job_id: int,
        hiring_bounty: int,
    ) -> Job:
        skills = list(required_skills)
        for name, value in (
            ("salary_min", salary_min),
            ("salary_max", salary_max),
            ("job_id", job_id),
            ("hiring_bounty", hiring_bounty),
        ):
            _check_u64(name, value)

        address = self.job_address(recruiter, job_id)
        bounty_address = f"job_bounty:{address}"
        if address in self.jobs:
            raise _already_in_use(address)
        if bounty_address in self.bounties:
            raise _already_in_use(bounty_address)

        if _utf8_len(title) > MAX_TITLE_BYTES:
            raise JobApplicationError(JobApplicationErrorCode.TITLE_TOO_LONG)
        if _utf8_len(description) > MAX_DESCRIPTION_BYTES:
            raise JobApplicationError(JobApplicationErrorCode.DESCRIPTION_TOO_LONG)
        if len(skills) > MAX_SKILLS:
            raise JobApplicationError(JobApplicationErrorCode.TOO_MANY_SKILLS)
        if salary_max < salary_min:
            raise JobApplicationError(JobApplicationErrorCode.INVALID_SALARY_RANGE)
        if not 0 < deadline_days <= MAX_DEADLINE_DAYS:
            raise JobApplicationError(JobApplicationErrorCode.INVALID_DEADLINE)
        if hiring_bounty <= 0:
            raise JobApplicationError(JobApplicationErrorCode.INVALID_BOUNTY_AMOUNT)
        if any(_utf8_len(skill) > MAX_SKILL_BYTES for skill in skills):
            raise ProgramError("account data too small for required skills")

        now = self.clock.now()
        job = Job(
            address=address,
            recruiter=recruiter,
            title=title,
            description=description,
            required_skills=skills,
            salary_min=salary_min,
            salary_max=salary_max,
            created_at=now,
            deadline=now + deadline_days * SECONDS_PER_DAY,
            job_id=job_id,
            hiring_bounty=hiring_bounty,
        )
        self.ledger.transfer(recruiter_token_account, job.escrow, hiring_bounty)

        self.jobs[address] = job
        self.bounties[bounty_address] = JobBounty(
            address=bounty_address,
            job=address,
            recruiter=recruiter,
            amount=hiring_bounty,
        )
        self.events.emit(
            JobCreated(
                job_id=address,
                recruiter=recruiter,
                title=title,
                hiring_bounty=hiring_bounty,
                created_at=now,
            )
        )
        return job

    def _job(self, job_key: str) -> Job:
        try:
            return self.jobs[job_key]
        except KeyError:
            raise ProgramError(f"job {job_key} is not initialized") from None

    def _application(self, application_key: str) -> Application:
        try:
            return self.applications[application_key]
        except KeyError:
            raise ProgramError(
                f"application {application_key} is not initialized"
            ) from None

    def apply_to_job(
        self,
        applicant: str,
        job_key: str,
        profile: str,
        cover_letter: str,
        referral_link_key: str | None = None,
    ) -> Application:
        job = self._job(job_key)
        address = self.application_address(job_key, applicant)
        if address in self.applications:
            raise _already_in_use(address)

        now = self.clock.now()
        if not job.is_active:
            raise JobApplicationError(JobApplicationErrorCode.JOB_NOT_ACTIVE)
        if now > job.deadline:
            raise JobApplicationError(JobApplicationErrorCode.INVALID_DEADLINE)

        link: ReferralLink | None = None
        if referral_link_key is not None:
            link = self.referral_links.get(referral_link_key)
            if link is None or not link.is_active:
                raise JobApplicationError(JobApplicationErrorCode.UNAUTHORIZED)
            if link.applications_count >= U32_MAX:
                raise ProgramError("referral link application count overflow")

        if _utf8_len(cover_letter) > MAX_COVER_LETTER_BYTES:
            raise ProgramError("account data too small for cover letter")
        if job.application_count >= U32_MAX:
            raise ProgramError("job application count overflow")

        application = Application(
            address=address,
            applicant=applicant,
            job=job_key,
            profile=profile,
            cover_letter=cover_letter,
            applied_at=now,
            referrer=link.referrer if link else None,
            referral_link_id=link.link_id if link else None,
        )
        self.applications[address] = application
        job.application_count += 1
        if link is not None:
            link.applications_count += 1

        self.events.emit(
            ApplicationSubmitted(
                applicant=applicant,
                job=job_key,
                referrer=application.referrer,
                applied_at=now,
            )
        )
        return application

    def create_referral_link(
        self, referrer: str, job_key: str, link_id: int
    ) -> ReferralLink:
        _check_u64("link_id", link_id)
        address = self.referral_link_address(referrer, job_key, link_id)
        if address in self.referral_links:
            raise _already_in_use(address)
        now = self.clock.now()
        link = ReferralLink(
            address=address,
            job=job_key,
            referrer=referrer,
            link_id=link_id,
            created_at=now,
        )
        self.referral_links[address] = link
        self.events.emit(
            ReferralLinkCreated(
                job=job_key, referrer=referrer, link_id=link_id, created_at=now
            )
        )
        return link

    def _authorized_application(
        self, recruiter: str, application_key: str
    ) -> Application:
        application = self._application(application_key)
        if self._job(application.job).recruiter != recruiter:
            raise JobApplicationError(JobApplicationErrorCode.UNAUTHORIZED)
        return application

    def update_application_status(
        self,
        recruiter: str,
        application_key: str,
        new_status: ApplicationStatus | str,
    ) -> Application:
        status = ApplicationStatus(new_status)
        application = self._authorized_application(recruiter, application_key)
        application.status = status
        self.events.emit(
            ApplicationStatusUpdated(
                application=application_key,
                new_status=status.value,
                updated_at=self.clock.now(),
            )
        )
        return application

    def hire_applicant(
        self,
        recruiter: str,
        application_key: str,
        tier_index: int,
        usdc_mint: str | None = None,
        destination: str | None = None,
        referrer_account: str | None = None,
    ) -> tuple[int, int]:
        """Mark the applicant hired and, given a reward pool, pay its reward.

        Returns (paid to destination, paid to referrer).
        """
        application = self._authorized_application(recruiter, application_key)

        payouts = (0, 0)
        if usdc_mint is not None:
            if destination is None:
                raise ProgramError("a destination token account is required")
            assert self.rewards is not None
            payouts = self.rewards.distribute_reward(
                recruiter, usdc_mint, destination, tier_index, referrer_account
            )

        application.status = ApplicationStatus.HIRED
        self.events.emit(
            ApplicationStatusUpdated(
                application=application_key,
                new_status=ApplicationStatus.HIRED.value,
                updated_at=self.clock.now(),
            )
        )
        return payouts