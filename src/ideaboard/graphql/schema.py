"""
ideaboard GraphQL schema, startup validation and per-request context
"""

from typing import Any

import strawberry
from fastapi import Response
from graphql import get_introspection_query, graphql_sync
from graphql import validate_schema as gql_validate_schema
from starlette.requests import HTTPConnection
from strawberry.fastapi import GraphQLRouter

from ..auth.middleware import get_auth_context
from ..logging import bind_user_id, get_logger
from .loaders import Loaders
from .mutations.root import Mutation
from .queries.root import Query
from .subscriptions.root import Subscription

logger = get_logger(__name__)

schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    subscription=Subscription,
)


# Root fields clients of the session lifecycle depend on
REQUIRED_FIELDS = {
    "Query": ("me",),
    "Mutation": ("login", "register", "refreshTokens", "forgetPassword", "createUser"),
    "Subscription": ("userAdded",),
}


class SchemaValidationError(RuntimeError):
    pass


def validate_schema() -> None:
    """Fail fast at startup on a broken schema.

    Checks graphql-core's structural rules, that the schema survives
    introspection, and that the session and subscription operations are
    exposed under their public names.

    Raises:
        SchemaValidationError: Listing every problem found
    """
    graphql_schema = schema._schema

    problems = [str(e) for e in gql_validate_schema(graphql_schema)]
    if not problems:
        introspection = graphql_sync(graphql_schema, get_introspection_query())
        problems.extend(str(e) for e in introspection.errors or ())

    for type_name, fields in REQUIRED_FIELDS.items():
        root = graphql_schema.get_type(type_name)
        exposed = getattr(root, "fields", {})
        problems.extend(f"{type_name}.{name} is missing" for name in fields if name not in exposed)

    if problems:
        logger.error("GraphQL schema validation failed", problems=problems)
        raise SchemaValidationError("; ".join(problems))

    logger.info("GraphQL schema validated", operations=sum(map(len, REQUIRED_FIELDS.values())))


async def get_context(connection: HTTPConnection, response: Response = None) -> dict[str, Any]:
    """Build the per-request GraphQL context.

    Works for both HTTP requests and subscription websockets. When the access
    token had to be rotated, the new pair goes back in the ``x-token`` and
    ``x-refresh-token`` response headers.
    """
    state = connection.app.state
    tokens = state.token_issuer

    auth = await get_auth_context(
        tokens,
        authorization=connection.headers.get("authorization"),
        x_token=connection.headers.get("x-token"),
        x_refresh_token=connection.headers.get("x-refresh-token"),
    )
    if auth.refreshed is not None and response is not None:
        response.headers["x-token"] = auth.refreshed.access_token
        response.headers["x-refresh-token"] = auth.refreshed.refresh_token

    bind_user_id(str(auth.user_id) if auth.user_id else None)

    return {
        "auth": auth,
        "tokens": tokens,
        "events": state.event_bus,
        "loaders": Loaders(),
    }


def create_graphql_router() -> GraphQLRouter[dict[str, Any], None]:
    """Create a GraphQL router for FastAPI."""
    return GraphQLRouter(
        schema,
        path="/graphql",
        graphql_ide="graphiql",
        context_getter=get_context,
    )
