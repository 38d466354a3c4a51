"""Identity matchers."""

from .base import BaseIdentityMatcher
from .last_registered import LastRegisteredMatcher

MATCHERS = {
    "last_registered": LastRegisteredMatcher,
}


def create_matcher(name: str = "last_registered", **kwargs) -> BaseIdentityMatcher:
    """Create a matcher by name.

    Raises:
        ValueError: If the matcher name is unknown
    """
    if name not in MATCHERS:
        raise ValueError(
            f"Unknown matcher: {name}. "
            f"Available: {list(MATCHERS.keys())}"
        )
    return MATCHERS[name](**kwargs)


__all__ = [
    "BaseIdentityMatcher",
    "LastRegisteredMatcher",
    "MATCHERS",
    "create_matcher",
]
