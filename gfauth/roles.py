"""Role based access control for gRPC style method names."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from gfauth.errors import PermissionDeniedError
from gfauth.match import deny_rule, match_rule

SYSTEM_ADMIN_ROLE_NAME = "system.admin"
SYSTEM_GUEST_ROLE_NAME = "system.guest"


@dataclass
class Rule:
    """Services and APIs a rule applies to; entries starting with ``!`` deny."""

    services: list[str] = field(default_factory=list)
    apis: list[str] = field(default_factory=list)


@dataclass
class Role:
    """A named set of rules."""

    name: str = ""
    rules: list[Rule] = field(default_factory=list)


class RoleManager(ABC):
    """Decides whether a set of roles may call a method."""

    @abstractmethod
    def verify(self, roles: Iterable[str], fullmethod: str) -> str:
        """Return the role granting access or raise PermissionDeniedError."""


def get_method_information(root_path: str, fullmethod: str) -> tuple[str, str]:
    """Split ``/<service>/<api>`` into service and api, dropping ``root_path``."""
    parts = fullmethod.split("/")
    service = parts[1] if len(parts) > 1 else ""
    api = parts[2] if len(parts) > 2 else ""
    if root_path and service.lower().startswith(root_path.lower()):
        service = service[len(root_path):]
    return service, api


class GenericRoleManager(RoleManager):
    """Role manager backed by a fixed mapping of role names to roles."""

    def __init__(self, tag: str, roles: Mapping[str, Role]) -> None:
        self.tag = tag
        self.roles = roles

    def verify(self, roles: Iterable[str], fullmethod: str) -> str:
        """Return the first role allowed to call ``fullmethod``."""
        roles = list(roles)
        for name in roles:
            role = self.roles.get(name)
            if role is None:
                continue
            try:
                self.verify_rules(role.rules, self.tag, fullmethod)
            except PermissionDeniedError:
                continue
            return name
        raise PermissionDeniedError(f"Access denied to roles: [{' '.join(roles)}]")

    def verify_rules(self, rules: Sequence[Rule], root_path: str, fullmethod: str) -> Rule:
        """Return the rule authorizing ``fullmethod``; denials take priority."""
        req_service, req_api = get_method_information(root_path, fullmethod)

        for rule in rules:
            for service in rule.services:
                if deny_rule(service, req_service):
                    raise PermissionDeniedError("access denied to service by role")
                if match_rule(service, req_service) and any(
                    deny_rule(api, req_api) for api in rule.apis
                ):
                    raise PermissionDeniedError("access denied to api by role")

        for rule in rules:
            if any(match_rule(service, req_service) for service in rule.services) and any(
                match_rule(api, req_api) for api in rule.apis
            ):
                return rule

        raise PermissionDeniedError("no accessible rule to authorize access found")


DEFAULT_ROLES: dict[str, Role] = {
    SYSTEM_ADMIN_ROLE_NAME: Role(rules=[Rule(services=["*"], apis=["*"])]),
    SYSTEM_GUEST_ROLE_NAME: Role(rules=[Rule(services=["!*"], apis=["!*"])]),
}


def new_default_generic_role_manager() -> GenericRoleManager:
    """Return a role manager that knows only the default roles."""
    return GenericRoleManager("", DEFAULT_ROLES)