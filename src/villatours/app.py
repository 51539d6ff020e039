from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from uuid import UUID

from villatours.config import Config
from villatours.core.core import Core
from villatours.core.modules.admin.models import AdminView
from villatours.core.modules.auth.models import AuthToken
from villatours.core.modules.csrf.gate import CsrfGate
from villatours.core.modules.gallery.models import GalleryImage
from villatours.core.modules.inclusion.models import Inclusion
from villatours.core.modules.order.models import Customer, OrderView
from villatours.core.modules.package.models import Package, PackageData, PackageUpdate
from villatours.core.modules.payhere.models import CheckoutForm, PayHereNotification
from villatours.core.modules.session.models import Session
from villatours.core.pagination import PaginationResult
from villatours.errors import AuthenticationError, NotFoundError


class App:
    """Facade for all application operations, validates admin access before delegating to Core."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    @property
    def csrf_gate(self) -> CsrfGate:
        return self._core.csrf_gate

    # === Admin authentication ===
    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        return await self._core.services.auth.is_auth_token_valid(auth_token)

    async def login(self, username: str, password: str) -> AuthToken:
        """Authenticate admin and create an admin session."""
        if not self._core.services.admin.verify_password(username, password):
            raise AuthenticationError("Invalid credentials")
        admin = self._core.services.admin.get_admin_by_username(username)
        return await self._core.services.auth.create_session(admin.id)

    async def logout(self, auth_token: AuthToken) -> None:
        await self._core.services.auth.get_authenticated_admin(auth_token)
        await self._core.services.auth.invalidate_session(auth_token)

    async def get_current_admin(self, auth_token: AuthToken) -> AdminView:
        admin = await self._core.services.auth.get_authenticated_admin(auth_token)
        return AdminView.from_domain(admin)

    # === Packages ===
    async def get_packages(self, limit: int = 50, offset: int = 0) -> PaginationResult[Package]:
        return await self._core.services.package.list_packages(limit, offset)

    async def get_package(self, package_id: UUID) -> Package:
        return await self._core.services.package.get_package(package_id)

    async def create_package(self, auth_token: AuthToken, data: PackageData) -> Package:
        """Create a package (admin only)."""
        await self._ensure_admin(auth_token)
        return await self._core.services.package.create_package(data)

    async def update_package(self, auth_token: AuthToken, package_id: UUID, update: PackageUpdate) -> Package:
        """Partially update a package (admin only)."""
        await self._ensure_admin(auth_token)
        return await self._core.services.package.update_package(package_id, update)

    async def delete_package(self, auth_token: AuthToken, package_id: UUID) -> None:
        """Delete a package together with its inclusions (admin only)."""
        await self._ensure_admin(auth_token)
        await self._core.services.package.delete_package(package_id)
        await self._core.services.inclusion.delete_inclusions_by_package(package_id)

    # === Trending ===
    async def get_trending_packages(self, limit: int = 50, offset: int = 0) -> PaginationResult[Package]:
        return await self._core.services.package.list_packages(limit, offset, trending=True)

    async def set_package_trending(self, auth_token: AuthToken, package_id: UUID, trending: bool) -> Package:
        await self._ensure_admin(auth_token)
        return await self._core.services.package.set_trending(package_id, trending)

    # === Inclusions ===
    async def get_inclusions(self, package_id: UUID | None = None) -> list[Inclusion]:
        return await self._core.services.inclusion.list_inclusions(package_id)

    async def create_inclusion(self, auth_token: AuthToken, package_id: UUID, title: str, description: str) -> Inclusion:
        await self._ensure_admin(auth_token)
        return await self._core.services.inclusion.create_inclusion(package_id, title, description)

    async def update_inclusion(
        self, auth_token: AuthToken, inclusion_id: UUID, title: str | None, description: str | None
    ) -> Inclusion:
        await self._ensure_admin(auth_token)
        return await self._core.services.inclusion.update_inclusion(inclusion_id, title, description)

    async def delete_inclusion(self, auth_token: AuthToken, inclusion_id: UUID) -> None:
        await self._ensure_admin(auth_token)
        await self._core.services.inclusion.delete_inclusion(inclusion_id)

    # === Gallery ===
    async def get_gallery(self) -> list[GalleryImage]:
        return await self._core.services.gallery.list_images()

    async def add_gallery_image(self, auth_token: AuthToken, image_url: str, title: str, caption: str) -> GalleryImage:
        await self._ensure_admin(auth_token)
        return await self._core.services.gallery.add_image(image_url, title, caption)

    async def delete_gallery_image(self, auth_token: AuthToken, image_id: UUID) -> None:
        await self._ensure_admin(auth_token)
        await self._core.services.gallery.delete_image(image_id)

    # === Payments ===
    async def checkout(self, session: Session, package_id: UUID, travellers: int, customer: Customer) -> CheckoutForm:
        """Create an order for the payment session and sign the PayHere checkout form."""
        package = await self._core.services.package.get_package(package_id)
        order = await self._core.services.order.create_order(package, travellers, customer)
        session.order_id = order.id
        await self._core.services.session.save(session)
        return self._core.services.order.build_checkout_form(order)

    async def clear_order(self, session: Session | None) -> None:
        """Forget the order remembered on the payment session, if any."""
        if session is None or session.order_id is None:
            return
        session.order_id = None
        await self._core.services.session.save(session)

    async def get_session_order(self, session: Session) -> OrderView:
        if session.order_id is None:
            raise NotFoundError("No order in progress")
        order = await self._core.services.order.get_order(session.order_id)
        return OrderView.from_domain(order)

    async def get_order_by_number(self, order_number: int) -> OrderView:
        order = await self._core.services.order.get_order_by_number(order_number)
        return OrderView.from_domain(order)

    async def handle_payhere_notification(self, notification: PayHereNotification) -> None:
        await self._core.services.order.apply_notification(notification)

    # === Private helpers ===
    async def _ensure_admin(self, auth_token: AuthToken) -> None:
        await self._core.services.auth.get_authenticated_admin(auth_token)
