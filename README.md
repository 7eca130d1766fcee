# talentchain

An in-memory model of a talent marketplace. Accounts are plain strings,
token amounts are integers in the unsigned 64-bit range, and time is an
integer Unix timestamp that moves only when told to. The services can share
one `TokenLedger`, one `Clock` and one `EventLog`, so recruiters, candidates
and referrers can be simulated together in plain Python.

## Modules

- `talentchain.ledger`: `TokenLedger` (`mint_to`, `transfer`, `balance`),
  `Clock` (`now`, `advance`), `EventLog` (`emit`, `of_type`), and the
  `ProgramError` and `InsufficientBalanceError` exceptions.
- `talentchain.hiring_rewards`: `HiringRewards` with `create_reward_pool`,
  `create_referral`, `distribute_reward` and `pool_address`. A pool holds up
  to 5 `RewardTier`s. `distribute_reward` pays a tier's amount from the
  pool's vault account (`RewardPool.vault`); when a referrer account is
  given the reward is split, the hire getting half rounded down and the
  referrer the rest. It returns `(paid to destination, paid to referrer)`.
- `talentchain.jobs`: `JobBoard` with `create_job`, `apply_to_job`,
  `create_referral_link`, `update_application_status` and `hire_applicant`.
  Creating a job moves its hiring bounty from the recruiter's token account
  into the job's escrow account (`Job.escrow`) and records a `JobBounty`.
  `hire_applicant` marks the application hired and, when a `usdc_mint` is
  given, pays a reward from the recruiter's reward pool through
  `HiringRewards.distribute_reward`.
- `talentchain.profiles`: `ProfileManager` with `create_profile`,
  `update_profile`, `compress_resume`, `verify_resume_access` and `profile`.
- `talentchain.contacts`: `ContactGate` with `send_contact_request`,
  `respond_to_contact`, `handle_expired_contact` and `request`. The chosen
  tier's price is moved into an escrow account (`ContactRequest.escrow`),
  then paid to the target on acceptance, refunded on rejection, or refunded
  once the response time has passed.
- `talentchain.marketplace`: `ResumeMarketplace` with `list_resume`,
  `verify_resume` and `listing`. Only the configured `verifier` may mark a
  listing verified.

Each module's instructions emit frozen dataclass events (`JobCreated`,
`ProfileCreated`, `ContactRequestSent`, ...) to its `EventLog`.

## Example

```python
from talentchain.contacts import ContactGate
from talentchain.profiles import ContactPriceTier

gate = ContactGate()
gate.profiles.create_profile(
    "alice", ["rust"], 5, "EU", "Engineer", "Alice",
    [ContactPriceTier(100, "quick question")], 24,
)
gate.ledger.mint_to("bob-usdc", 500)
gate.send_contact_request("bob", "bob-usdc", "alice", "Hello", 0)
gate.respond_to_contact("alice", "bob", True, "bob-usdc", "alice-usdc")
assert gate.ledger.balance("alice-usdc") == 100
```

## Errors

A refused instruction raises a subclass of `talentchain.ledger.ProgramError`.
`HiringRewardError`, `JobApplicationError` and `ProfileManagerError` carry a
`code` from their module's error-code enum (`HiringRewardErrorCode`,
`JobApplicationErrorCode`, `ProfileManagerErrorCode`) and that code's message.
`ResumeMarketplaceError` carries the message "This resume is not for sale.",
and `UnauthorizedVerifierError` is raised when someone other than the
verifier calls `verify_resume`. Creating an account that already exists, or
using one that does not, raises a plain `ProgramError`. A transfer that would
overdraw an account raises `InsufficientBalanceError`. Values outside their
integer range raise `ValueError`.

## Limits

Lengths are counted in UTF-8 bytes.

- Profiles: at most 10 skills of up to 50 bytes each, a handle of 3 to 30
  bytes (stored lower-cased), a region of up to 50 bytes, up to 5 contact
  price tiers, and a response time of 1 to 168 hours. A bio longer than 280
  bytes is refused at creation; on update a bio over 500 bytes raises
  `BIO_TOO_LONG` and one of 281 to 500 bytes is refused as not fitting the
  profile.
- Jobs: a title of at most 100 bytes, a description of at most 1000 bytes,
  at most 10 skills of up to 50 bytes, a maximum salary not below the
  minimum, a deadline 1 to 365 days away, and a positive hiring bounty. Cover
  letters may be up to 1000 bytes; applying after the deadline is refused.
- Contact requests: messages up to 1000 bytes; the chosen price tier must
  exist and carry a non-zero price.

## What it does not do

- Everything is held in memory; nothing is stored or loaded.
- There is no command-line tool.
- `HiringRewards` has no deposit instruction: a pool's `total_amount` starts
  at 0, so funds must be minted into `RewardPool.vault` and `total_amount`
  set directly before a reward can be paid.
- A job's escrowed hiring bounty is never paid out.
- `ResumeMarketplace` has no purchase instruction and holds no token
  ledger; `RoyaltyPaid` is defined but never emitted.
- Resume compression only records the tree, a leaf index of 0 and the data
  hash; `verify_resume_access` accepts any proof whose nodes are 32 bytes.
  The `resume_link` passed to `create_profile` is not kept.