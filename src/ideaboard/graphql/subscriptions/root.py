"""
Root GraphQL subscription definitions
"""

from collections.abc import AsyncGenerator

import strawberry

from ...events import USER_ADDED
from ...logging import get_logger
from ..access_control import get_event_bus
from ..types.user import User

logger = get_logger(__name__)


@strawberry.type
class Subscription:
    """Root GraphQL subscription type."""

    @strawberry.subscription(name="userAdded")
    async def user_added(self, info: strawberry.Info) -> AsyncGenerator[User, None]:
        """Stream users created through createUser from now on."""
        subscription = get_event_bus(info).subscribe(USER_ADDED)
        logger.debug("userAdded subscription opened")
        try:
            async for user in subscription:
                yield user
        finally:
            subscription.close()
            logger.debug("userAdded subscription closed")
