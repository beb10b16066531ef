"""Account analytics over simulation summaries."""

from dcagrid.analytics.account import (
    AccountStats,
    ProfitTarget,
    account_stats,
    is_net_long,
    profit_target,
)

__all__ = [
    "AccountStats",
    "ProfitTarget",
    "account_stats",
    "is_net_long",
    "profit_target",
]
