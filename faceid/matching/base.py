"""Base identity matcher interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np

from ..members import MemberRecord


class BaseIdentityMatcher(ABC):
    """Abstract base class for identity matchers."""

    name = "base"

    @abstractmethod
    def match(
        self,
        members: List[MemberRecord],
        frame: Optional[np.ndarray] = None,
    ) -> Optional[MemberRecord]:
        """Pick the member a scan identifies.

        Args:
            members: Registered members in insertion order
            frame: Last frame captured during the scan, if any

        Returns:
            Matched member, or None if nobody matches
        """
        pass
