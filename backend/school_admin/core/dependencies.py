"""FastAPI dependencies for the backend client, the current actor and authorization."""

from typing import Annotated

import httpx
from fastapi import Depends, Header, HTTPException, Request, status

from school_admin.clients.backend_api import BackendAPIClient, BackendAPIError
from school_admin.core.app_exceptions import forbidden, upstream_error
from school_admin.core.permissions import ConsoleAction, is_allowed
from school_admin.schemas.auth import Actor
from school_admin.services.importer.session import ImportSessionStore


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared HTTP client created at start-up."""
    return request.app.state.http_client


def get_import_store(request: Request) -> ImportSessionStore:
    return request.app.state.import_store


def get_backend_client(
    http: httpx.AsyncClient = Depends(get_http_client),
    authorization: Annotated[str | None, Header()] = None,
) -> BackendAPIClient:
    """Backend client acting with the caller's credentials."""
    return BackendAPIClient(http, authorization)


async def get_current_actor(
    authorization: Annotated[str | None, Header()] = None,
    client: BackendAPIClient = Depends(get_backend_client),
) -> Actor:
    """Dependency to get the signed-in user from the school backend."""
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header missing",
        )

    try:
        return await client.get_current_actor()
    except BackendAPIError as e:
        raise upstream_error(e.status_code, e.message) from e


def require_action(action: ConsoleAction):
    """Dependency factory to require the capability behind a console action."""

    def action_checker(actor: Actor = Depends(get_current_actor)) -> Actor:
        if not is_allowed(actor.capabilities, action):
            raise forbidden(f"Access denied. Missing permission for {action.value}")
        return actor

    return action_checker
