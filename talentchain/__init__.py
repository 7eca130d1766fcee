"""In-memory talent marketplace: profiles, contacts, jobs, hiring rewards and resume listings."""

__version__ = "0.1.0"
__all__ = ["contacts", "hiring_rewards", "jobs", "ledger", "marketplace", "profiles"]