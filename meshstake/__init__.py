"""In-memory staking contract logic for mesh security providers."""

__version__ = "0.1.0"

__all__ = [
    "errors",
    "messages",
    "native_staking",
    "points_alignment",
    "proxy",
    "stake_state",
    "stakes",
]