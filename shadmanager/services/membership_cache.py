from __future__ import annotations

import logging
import time
from typing import Callable

from shadmanager.models.organization import MembershipContext
from shadmanager.settings import settings

logger = logging.getLogger(__name__)

MembershipLoader = Callable[[str], "MembershipContext | None"]


class MembershipCache:
    """Holds the signed-in user's organization membership for a short time.

    Only one user is cached at a time; asking for a different user reloads.
    """

    def __init__(
        self,
        loader: MembershipLoader,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.loader = loader
        self.ttl_seconds = settings.membership_cache_ttl if ttl_seconds is None else ttl_seconds
        self.clock = clock
        self._entry: tuple[str, MembershipContext, float] | None = None

    def get(self, user_id: str, force: bool = False) -> MembershipContext | None:
        now = self.clock()
        if not force and self._entry is not None:
            cached_user, context, cached_at = self._entry
            if cached_user == user_id and now - cached_at < self.ttl_seconds:
                return context

        context = self.loader(user_id)
        if context is None:
            logger.info("User %s has no organization membership", user_id)
            self._entry = None
            return None

        self._entry = (user_id, context, now)
        logger.debug("Membership cached: user=%s org=%s role=%s", user_id, context.organization_id, context.role)
        return context

    def clear(self) -> None:
        self._entry = None
