import pytest

from gfauth.errors import PermissionDeniedError
from gfauth.roles import (
    DEFAULT_ROLES,
    GenericRoleManager,
    Role,
    Rule,
    get_method_information,
    new_default_generic_role_manager,
)

VOL_ENUM = "/openstorage.api.OpenStorageVolumes/Enumerate"
VOL_CREATE = "/openstorage.api.OpenStorageVolumes/Create"
FUTURE = "/openstorage.api.OpenStorageFutureService/SomeCallInTheFuture"
FUTURE_ENUM = "/openstorage.api.OpenStorageFutureService/SomeCallInTheFutureEnumerate"
CLUSTER_INSPECT = "/openstorage.api.OpenStorageCluster/InspectCurrent"
NODE_ENUM = "/openstorage.api.OpenStorageNode/Enumerate"
NODE_INSPECT = "/openstorage.api.OpenStorageNode/Inspect"
NODE_FUTURE = "/openstorage.api.OpenStorageNode/FutureCall"
GENERIC = "/my.api.GenericCall/FutureCall"
VOLUMES_SVC = "openstorage.api.OpenStorageVolumes"
FUTURE_SVC = "openstorage.api.OpenStorageFutureService"


def _rules(services, apis):
    return [Rule(services=list(services), apis=list(apis))]


ROLE_CASES = [
    (False, VOL_ENUM, ["system.admin"]),
    (False, FUTURE, ["system.admin"]),
    (False, FUTURE_ENUM, ["system.admin"]),
    (True, FUTURE, ["system.view"]),
    (True, CLUSTER_INSPECT, ["system.guest"]),
    (True, NODE_ENUM, ["system.guest"]),
    (True, NODE_INSPECT, ["system.guest"]),
    (True, CLUSTER_INSPECT, ["system.user"]),
    (True, NODE_ENUM, ["system.user"]),
    (True, NODE_INSPECT, ["system.user"]),
    (True, NODE_FUTURE, ["system.user"]),
    (False, GENERIC, ["system.admin"]),
]


@pytest.mark.parametrize(
    "denied, fullmethod, rules",
    [
        (True, VOL_ENUM, _rules(["*"], ["!enumerate"])),
        (True, VOL_ENUM, _rules(["!" + VOLUMES_SVC], ["*"])),
        (True, VOL_CREATE, _rules([VOLUMES_SVC], ["*", "!create"])),
        (True, VOL_CREATE, _rules([VOLUMES_SVC], ["!create", "*"])),
        (True, VOL_CREATE, _rules([VOLUMES_SVC], ["!*", "create"])),
        (True, VOL_CREATE, _rules(["*", "!*"], ["*"])),
        (True, VOL_CREATE, _rules(["*"], ["*", "!*"])),
        (False, VOL_CREATE, _rules([VOLUMES_SVC], ["*"])),
        (True, FUTURE, []),
        (False, FUTURE, _rules([FUTURE_SVC], ["*"])),
        (True, FUTURE, _rules([FUTURE_SVC], ["anothercall"])),
        (True, FUTURE, _rules(["*"], ["anothercall"])),
        (
            False,
            FUTURE,
            _rules(
                [
                    "openstorage.api.OpenStorageCluster",
                    "openstorage.api.OpenStorageVolume",
                    "openstorage.api.openStoragefutureservice",
                ],
                ["somecallinthefuture"],
            ),
        ),
    ],
)
def test_verify_rules_without_tag(denied, fullmethod, rules):
    r = new_default_generic_role_manager()
    if denied:
        with pytest.raises(PermissionDeniedError):
            r.verify_rules(rules, "", fullmethod)
    else:
        assert r.verify_rules(rules, "", fullmethod) is rules[0]


@pytest.mark.parametrize("denied, fullmethod, roles", ROLE_CASES)
def test_verify_roles_without_tag(denied, fullmethod, roles):
    r = new_default_generic_role_manager()
    if denied:
        with pytest.raises(PermissionDeniedError, match="Access denied to roles"):
            r.verify(roles, fullmethod)
    else:
        assert r.verify(roles, fullmethod) == roles[0]


@pytest.mark.parametrize(
    "denied, fullmethod, rules",
    [
        (True, VOL_ENUM, _rules(["*"], ["!enumerate"])),
        (True, VOL_ENUM, _rules(["!volumes"], ["*"])),
        (True, VOL_CREATE, _rules(["volumes"], ["*", "!create"])),
        (True, VOL_CREATE, _rules(["volumes"], ["!create", "*"])),
        (True, VOL_CREATE, _rules(["volumes"], ["!*", "create"])),
        (True, VOL_CREATE, _rules(["*", "!*"], ["*"])),
        (True, VOL_CREATE, _rules(["*"], ["*", "!*"])),
        (False, VOL_CREATE, _rules(["volumes"], ["*"])),
        (True, FUTURE, []),
        (False, FUTURE, _rules(["futureservice"], ["*"])),
        (True, FUTURE, _rules(["futureservice"], ["anothercall"])),
        (True, FUTURE, _rules(["*"], ["anothercall"])),
        (False, FUTURE, _rules(["cluster", "volume", "futureservice"], ["somecallinthefuture"])),
    ],
)
def test_verify_rules_with_tag(denied, fullmethod, rules):
    r = GenericRoleManager("openstorage.api.OpenStorage", DEFAULT_ROLES)
    if denied:
        with pytest.raises(PermissionDeniedError):
            r.verify_rules(rules, r.tag, fullmethod)
    else:
        assert r.verify_rules(rules, r.tag, fullmethod) is rules[0]


@pytest.mark.parametrize("denied, fullmethod, roles", ROLE_CASES)
def test_verify_roles_with_tag(denied, fullmethod, roles):
    r = GenericRoleManager("openstorage.api.OpenStorage", DEFAULT_ROLES)
    if denied:
        with pytest.raises(PermissionDeniedError):
            r.verify(roles, fullmethod)
    else:
        assert r.verify(roles, fullmethod) == roles[0]


CUSTOM_ROLES = {
    "admin": Role(name="admin", rules=[Rule(services=["*"], apis=["*"])]),
    "user": Role(
        name="user",
        rules=[
            Rule(services=["futureservice"], apis=["somecallinthefuture", "anothercall"]),
            Rule(services=["volumes"], apis=["*"]),
        ],
    ),
}


@pytest.mark.parametrize(
    "granted, fullmethod, roles",
    [
        (None, VOL_ENUM, ["qa"]),
        ("user", VOL_CREATE, ["user"]),
        ("admin", VOL_CREATE, ["admin", "user"]),
        ("user", VOL_CREATE, ["qa", "user"]),
        ("admin", FUTURE, ["admin"]),
        ("user", FUTURE, ["user"]),
        ("user", FUTURE, ["qa", "user"]),
        (None, FUTURE, ["qa"]),
        ("user", "/openstorage.api.OpenStorageFutureService/AnotherCall", ["qa", "user"]),
        (None, "/openstorage.api.OpenStorageFutureService/AdminOnly", ["qa", "user"]),
    ],
)
def test_verify_with_tag_and_custom_roles(granted, fullmethod, roles):
    r = GenericRoleManager("openstorage.api.OpenStorage", CUSTOM_ROLES)
    if granted is None:
        with pytest.raises(PermissionDeniedError):
            r.verify(roles, fullmethod)
    else:
        assert r.verify(roles, fullmethod) == granted


def test_verify_error_lists_roles():
    r = new_default_generic_role_manager()
    with pytest.raises(PermissionDeniedError, match=r"Access denied to roles: \[qa system.guest\]"):
        r.verify(["qa", "system.guest"], VOL_ENUM)


def test_get_method_information_with_tag():
    assert get_method_information("openstorage.api.OpenStorage", VOL_ENUM) == (
        "Volumes",
        "Enumerate",
    )


def test_get_method_information_without_tag():
    assert get_method_information("", GENERIC) == ("my.api.GenericCall", "FutureCall")


def test_default_roles_contents():
    assert DEFAULT_ROLES["system.admin"].rules == [Rule(services=["*"], apis=["*"])]
    assert DEFAULT_ROLES["system.guest"].rules == [Rule(services=["!*"], apis=["!*"])]