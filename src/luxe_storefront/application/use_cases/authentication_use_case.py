"""
Authentication use case

Login and logout as far as the cart cares: a successful login makes the
server cart authoritative and migrates the guest cart into it, a logout
always drops the local session keys.
"""

from dataclasses import dataclass
from typing import Optional

from luxe_storefront.application.dtos.cart_dtos import MigrationReport
from luxe_storefront.application.use_cases.cart_reconciliation_use_case import (
    CartReconciliationUseCase,
)
from luxe_storefront.application.use_cases.order_admin_use_case import OrderAdminUseCase
from luxe_storefront.domain.repositories.auth_repository import AuthRepository
from luxe_storefront.infrastructure.events.cart_badge_notifier import CartBadgeNotifier
from luxe_storefront.infrastructure.logging.logging_config import get_structured_logger
from luxe_storefront.infrastructure.session.session_store import SessionStore
from luxe_storefront.infrastructure.utilities.exceptions import (
    StorefrontError,
    ValidationError,
)


@dataclass
class LoginResponse:
    """Response from a login attempt"""

    success: bool
    requires_two_factor: bool = False
    migration: Optional[MigrationReport] = None
    message: Optional[str] = None


class AuthenticationUseCase:
    """Use case for signing in and out"""

    def __init__(
        self,
        auth_repository: AuthRepository,
        session: SessionStore,
        cart_reconciliation: CartReconciliationUseCase,
        notifier: CartBadgeNotifier,
        order_admin: Optional[OrderAdminUseCase] = None,
    ):
        self._auth_repository = auth_repository
        self._session = session
        self._cart = cart_reconciliation
        self._notifier = notifier
        self._order_admin = order_admin
        self._log = get_structured_logger(__name__, component="authentication")

    async def login(self, email: str, password: str, otp: Optional[str] = None) -> LoginResponse:
        """Sign in; on success the guest cart is migrated to the server

        API failures (bad credentials included) propagate to the caller.
        """
        if not email or not password:
            raise ValidationError("Email and password are required", "email")

        result = await self._auth_repository.login(email, password, otp)

        if result.temp_token:
            self._session.set_temp_token(result.temp_token)

        if not result.token:
            self._log.info(
                "login_pending", two_factor=result.requires_two_factor, success=result.success
            )
            return LoginResponse(
                success=False,
                requires_two_factor=result.requires_two_factor,
                message=result.message,
            )

        self._session.set_token(result.token)
        self._session.clear_temp_token()
        user_id = (result.user or {}).get("id") or (result.user or {}).get("_id")
        if user_id:
            self._session.cache_user_id(str(user_id))

        migration = await self._cart.migrate_local_cart_to_backend()
        self._log.info(
            "login_succeeded",
            migration_completed=migration.completed,
            migrated_lines=migration.migrated_lines,
            pending_lines=migration.pending_lines,
        )
        return LoginResponse(success=True, migration=migration, message=result.message)

    async def logout(self) -> None:
        """Sign out; local session keys are dropped even if the API call fails"""
        try:
            await self._auth_repository.logout()
        except StorefrontError as e:
            self._log.warning("logout_request_failed", error=str(e))
        finally:
            self._session.clear()
            if self._order_admin is not None:
                self._order_admin.reset()
            # The guest cart is authoritative again
            self._notifier.emit_set(self._cart.local_store.item_count())
            self._log.info("logged_out")
