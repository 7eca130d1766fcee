"""Reward pools that pay out hiring rewards, split with referrers."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable

from .ledger import (
    Clock,
    EventLog,
    InsufficientBalanceError,
    ProgramError,
    TokenLedger,
)

MAX_REWARD_TIERS = 5
MAX_TIER_DESCRIPTION_BYTES = 50


class HiringRewardErrorCode(enum.Enum):
    INSUFFICIENT_FUNDS = "Insufficient funds in the reward pool."
    NO_TIERS_AVAILABLE = "No reward tiers available."
    INVALID_TIER_INDEX = "Invalid tier index."


class HiringRewardError(ProgramError):
    """A reward-pool instruction was refused."""

    def __init__(self, code: HiringRewardErrorCode) -> None:
        super().__init__(code.value)
        self.code = code


@dataclass
class RewardTier:
    reward_amount: int
    description: str = ""

    def __post_init__(self) -> None:
        if not 0 <= self.reward_amount < 2**64:
            raise ValueError(f"reward amount out of range: {self.reward_amount}")
        if len(self.description.encode("utf-8")) > MAX_TIER_DESCRIPTION_BYTES:
            raise ValueError(
                f"tier description longer than {MAX_TIER_DESCRIPTION_BYTES} bytes"
            )


@dataclass
class RewardPool:
    address: str
    authority: str
    usdc_mint: str
    total_amount: int = 0
    reward_tiers: list[RewardTier] = field(default_factory=list)

    @property
    def vault(self) -> str:
        """Token account that holds the pool's funds."""
        return f"{self.address}/vault"


@dataclass
class Referral:
    address: str
    referrer: str
    referee: str
    reward_pool: str
    created_at: int


class HiringRewards:
    """Creates reward pools and referrals and distributes rewards from them."""

    def __init__(
        self,
        ledger: TokenLedger | None = None,
        clock: Clock | None = None,
        events: EventLog | None = None,
    ) -> None:
        self.ledger = ledger if ledger is not None else TokenLedger()
        self.clock = clock if clock is not None else Clock()
        self.events = events if events is not None else EventLog()
        self.pools: dict[str, RewardPool] = {}
        self.referrals: dict[str, Referral] = {}

    @staticmethod
    def pool_address(usdc_mint: str, authority: str) -> str:
        return f"reward_pool:{usdc_mint}:{authority}"

    @staticmethod
    def _referral_address(reward_pool: str, referrer: str, referee: str) -> str:
        return f"referral:{reward_pool}:{referrer}:{referee}"

    def create_reward_pool(
        self, authority: str, usdc_mint: str, reward_tiers: Iterable[RewardTier]
    ) -> RewardPool:
        tiers = list(reward_tiers)
        if len(tiers) > MAX_REWARD_TIERS:
            raise ValueError(f"at most {MAX_REWARD_TIERS} reward tiers are allowed")
        address = self.pool_address(usdc_mint, authority)
        if address in self.pools:
            raise ProgramError(f"account {address} already in use")
        pool = RewardPool(
            address=address,
            authority=authority,
            usdc_mint=usdc_mint,
            total_amount=0,
            reward_tiers=tiers,
        )
        self.pools[address] = pool
        return pool

    def _pool(self, address: str) -> RewardPool:
        try:
            return self.pools[address]
        except KeyError:
            raise ProgramError(f"reward pool {address} is not initialized") from None

    def distribute_reward(
        self,
        authority: str,
        usdc_mint: str,
        destination: str,
        tier_index: int,
        referrer_account: str | None = None,
    ) -> tuple[int, int]:
        """Pay the tier's reward; returns (paid to destination, paid to referrer)."""
        pool = self._pool(self.pool_address(usdc_mint, authority))
        if not pool.reward_tiers:
            raise HiringRewardError(HiringRewardErrorCode.NO_TIERS_AVAILABLE)
        if not 0 <= tier_index < len(pool.reward_tiers):
            raise HiringRewardError(HiringRewardErrorCode.INVALID_TIER_INDEX)

        reward_amount = pool.reward_tiers[tier_index].reward_amount
        if pool.total_amount < reward_amount:
            raise HiringRewardError(HiringRewardErrorCode.INSUFFICIENT_FUNDS)

        vault_balance = self.ledger.balance(pool.vault)
        if vault_balance < reward_amount:
            raise InsufficientBalanceError(pool.vault, vault_balance, reward_amount)

        if referrer_account is not None:
            referee_reward = reward_amount // 2
            referrer_reward = reward_amount - referee_reward
            self.ledger.transfer(pool.vault, destination, referee_reward)
            self.ledger.transfer(pool.vault, referrer_account, referrer_reward)
        else:
            referee_reward, referrer_reward = reward_amount, 0
            self.ledger.transfer(pool.vault, destination, reward_amount)

        pool.total_amount -= reward_amount
        return referee_reward, referrer_reward

    def create_referral(self, referrer: str, reward_pool: str, referee: str) -> Referral:
        self._pool(reward_pool)
        address = self._referral_address(reward_pool, referrer, referee)
        if address in self.referrals:
            raise ProgramError(f"account {address} already in use")
        referral = Referral(
            address=address,
            referrer=referrer,
            referee=referee,
            reward_pool=reward_pool,
            created_at=self.clock.now(),
        )
        self.referrals[address] = referral
        return referral