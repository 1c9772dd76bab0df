"""Base service: transactions, request context and error translation."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from blogapi.core import errors as api_errors
from blogapi.services._shared.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ServiceError,
)
from blogapi.services._shared.identity import RequestIdentity
from blogapi.services._shared.policies import Action, ResourceRef, decide
from blogapi.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

APP_LOGGER_NAME = "blogapi"


@dataclass(slots=True)
class ServiceContext:
    """
    Carry request-scoped data into services.

    :param identity: Authenticated principal, ``None`` for anonymous calls.
    :param request_id: Correlation id for logging/tracing.
    """

    identity: RequestIdentity | None = None
    request_id: str | None = None

    @property
    def actor_id(self) -> str | None:
        return self.identity.user_id if self.identity else None


def translate_service_error(exc: ServiceError) -> api_errors.APIError:
    """
    Map a service-level error to the API error rendered for clients.

    :param exc: Error raised within the service layer.
    :type exc: ServiceError
    :returns: API error carrying status and code.
    :rtype: blogapi.core.errors.APIError
    """
    message = str(exc)
    if isinstance(exc, NotFoundError):
        return api_errors.NotFound(message)
    if isinstance(exc, ConflictError):
        return api_errors.Conflict(message)
    if isinstance(exc, AuthenticationError):
        return api_errors.Unauthorized(message)
    if isinstance(exc, AuthorizationError):
        return api_errors.Forbidden(message)
    # Any other ServiceError subclass → 400 Bad Request
    return api_errors.BadRequest(message)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Hold the request context (identity, request id) and the app logger.
    * Turn policy denials into :class:`AuthorizationError`.

    Notes
    -----
    - Services never touch the global session; always use a Unit of Work.
    - Services never read ``flask.g``; identity arrives through ``ctx``.
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    def __init__(
        self,
        *,
        ctx: ServiceContext | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize the base service.

        :param ctx: Optional request-scoped context.
        :type ctx: ServiceContext | None
        :param logger: Application logger; defaults to the ``blogapi`` logger.
        :type logger: logging.Logger | None
        """
        self.ctx = ctx or ServiceContext()
        self.log = logger or logging.getLogger(APP_LOGGER_NAME)

    @property
    def identity(self) -> RequestIdentity | None:
        return self.ctx.identity

    def log_extra(self, **fields) -> dict:
        """Structured ``extra`` payload tagged with the request id."""
        return {"request_id": self.ctx.request_id, **fields}

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork()

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param isolation: Transaction isolation level.
        :type isolation: str | None
        :param enforce_db_readonly: Apply ``SET TRANSACTION READ ONLY`` when supported.
        :type enforce_db_readonly: bool
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
        )

    # --------------------------- AuthZ --------------------------------

    def require_identity(self) -> RequestIdentity:
        """
        Return the caller identity or fail.

        :raises AuthenticationError: For anonymous calls.
        """
        if self.identity is None:
            raise AuthenticationError("authorization header is required")
        return self.identity

    def authorize(self, action: Action, resource: ResourceRef, *, msg: str) -> None:
        """
        Consult the policy and raise when it denies.

        :param action: Requested action.
        :param resource: Target descriptor.
        :param msg: Client-facing denial message.
        :raises AuthorizationError: When the policy denies.
        """
        if not decide(self.identity, action, resource).allowed:
            self.log.info(
                "authz.denied",
                extra=self.log_extra(
                    actor_id=self.ctx.actor_id,
                    action=getattr(action, "value", action),
                    resource=resource.kind.value,
                    owner_id=resource.owner_id,
                ),
            )
            raise AuthorizationError(msg)

