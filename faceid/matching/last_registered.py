"""Placeholder matcher: the most recently registered member wins."""

from typing import List, Optional

import numpy as np

from ..members import MemberRecord
from .base import BaseIdentityMatcher


class LastRegisteredMatcher(BaseIdentityMatcher):
    """Matches the last member by insertion order. Ignores the frame."""

    name = "last_registered"

    def match(
        self,
        members: List[MemberRecord],
        frame: Optional[np.ndarray] = None,
    ) -> Optional[MemberRecord]:
        return members[-1] if members else None
