"""Ownership of resources and the access checks built on it."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from gfauth.errors import PermissionDeniedError
from gfauth.userinfo import Context, UserInfo, user_info_from_context

ADMIN_GROUP = "*"
"""Group that gives its members access to any resource."""

_ANY = "*"


class AccessType(IntEnum):
    """Level of access; a higher level includes the lower ones."""

    READ = 0
    WRITE = 1
    ADMIN = 2

    def is_access_permitted(self, access_type: AccessType) -> bool:
        """Return True if this level grants ``access_type``."""
        return self >= access_type


@dataclass
class PublicAccess:
    """Access granted to every user."""

    type: AccessType = AccessType.READ


@dataclass
class AccessControl:
    """Access lists of a resource."""

    groups: dict[str, AccessType] | None = None
    collaborators: dict[str, AccessType] | None = None
    public: PublicAccess | None = None


@dataclass
class Ownership:
    """Owner and access lists of a resource."""

    owner: str = ""
    acls: AccessControl | None = None

    def is_permitted(self, user: UserInfo | None, access_type: AccessType) -> bool:
        """Return True if ``user`` may access the resource with ``access_type``."""
        if self.is_public(access_type):
            return True
        if user is None or not user.username:
            return False
        return (
            self.is_owner(user)
            or self.is_user_allowed_by_group(user, access_type)
            or self.is_user_allowed_by_collaborators(user, access_type)
        )

    def groups(self) -> dict[str, AccessType] | None:
        """Return the group access list, if any."""
        return self.acls.groups if self.acls is not None else None

    def collaborators(self) -> dict[str, AccessType] | None:
        """Return the collaborator access list, if any."""
        return self.acls.collaborators if self.acls is not None else None

    def is_user_allowed_by_group(self, user: UserInfo, access_type: AccessType) -> bool:
        """Return True if one of the user's groups grants access."""
        if self.is_admin_by_user(user):
            return True
        owner_groups = self.groups()
        if not owner_groups:
            return False
        for group in user.claims.groups or ():
            if group in owner_groups:
                return owner_groups[group].is_access_permitted(access_type)
        if _ANY in owner_groups:
            return owner_groups[_ANY].is_access_permitted(access_type)
        return False

    def is_user_allowed_by_collaborators(
        self, user: UserInfo, access_type: AccessType
    ) -> bool:
        """Return True if the user is a collaborator with enough access."""
        collaborators = self.collaborators()
        if not collaborators:
            return False
        if user.username in collaborators:
            return collaborators[user.username].is_access_permitted(access_type)
        if _ANY in collaborators:
            return collaborators[_ANY].is_access_permitted(access_type)
        return False

    def has_an_owner(self) -> bool:
        return bool(self.owner)

    def is_access_permitted_by_public(self, access_type: AccessType) -> bool:
        """Return True if public access grants ``access_type``."""
        return (
            self.acls is not None
            and self.acls.public is not None
            and self.acls.public.type.is_access_permitted(access_type)
        )

    def is_public(self, access_type: AccessType) -> bool:
        """Return True if access is public or the resource has no owner."""
        return self.is_access_permitted_by_public(access_type) or not self.has_an_owner()

    def is_owner(self, user: UserInfo) -> bool:
        return self.owner == user.username

    def is_admin_by_user(self, user: UserInfo | None) -> bool:
        """Return True if ``user`` is an ownership administrator."""
        return is_admin_by_user(user)

    def update(self, new_owner_info: Ownership | None, user: UserInfo | None) -> None:
        """Apply ``new_owner_info``, checking that ``user`` may change it."""
        new_owner = new_owner_info.owner if new_owner_info is not None else ""
        new_acls = new_owner_info.acls if new_owner_info is not None else None

        if user is None:
            self.owner = new_owner
            self.acls = new_acls
            return

        if (
            user.username != self.owner
            and not self.is_admin_by_user(user)
            and not self.is_permitted(user, AccessType.ADMIN)
        ):
            raise PermissionDeniedError(
                "Only owner or those with admin access type can update volume acls"
            )

        if new_owner:
            if not self.is_admin_by_user(user):
                raise PermissionDeniedError(
                    "Only the administrator can change the owner of the resource"
                )
            self.owner = new_owner
        self.acls = new_acls

    def is_match(self, check: Ownership | None) -> bool:
        """Return True if ``check`` shares an owner, group or collaborator."""
        if check is None:
            return False
        if self.owner == check.owner:
            return True
        if check.acls is None or self.acls is None:
            return False
        own_groups = self.acls.groups or {}
        if any(group in own_groups for group in check.acls.groups or {}):
            return True
        own_collaborators = self.acls.collaborators or {}
        return any(name in own_collaborators for name in check.acls.collaborators or {})


def ownership_set_username_from_context(
    ctx: Context, src_ownership: Ownership | None
) -> Ownership | None:
    """Return ownership owned by the user in ``ctx``, keeping the given ACLs."""
    user = user_info_from_context(ctx)
    if user is None:
        return src_ownership
    if user.is_guest():
        return None
    acls = src_ownership.acls if src_ownership is not None else None
    return Ownership(owner=user.username, acls=acls)


def is_permitted_by_context(
    ownership: Ownership | None, ctx: Context, access_type: AccessType
) -> bool:
    """Return True if the user in ``ctx`` may access a resource with ``ownership``."""
    if ownership is None:
        return True
    user = user_info_from_context(ctx)
    if user is None:
        return True
    return ownership.is_permitted(user, access_type)


def is_admin_by_user(user: UserInfo | None) -> bool:
    """Return True if ``user`` belongs to the admin group; None means no auth."""
    if user is None:
        return True
    return not user.is_guest() and ADMIN_GROUP in (user.claims.groups or ())


def is_admin_by_context(ctx: Context) -> bool:
    """Return True if the user in ``ctx`` is an administrator."""
    user = user_info_from_context(ctx)
    if user is None:
        return True
    return is_admin_by_user(user)