import pytest

from gfauth.match import deny_rule, match_rule


@pytest.mark.parametrize(
    "found, rule, s",
    [
        (False, "", ""),
        (True, "!*", "test"),
        (True, "!test", "test"),
        (True, "!!!!!!!!!!!!!*******************test****", "test"),
        (False, "test", "test"),
    ],
)
def test_deny_rule(found, rule, s):
    assert deny_rule(rule, s) is found


@pytest.mark.parametrize(
    "found, rule, s",
    [
        (False, "", ""),
        (True, "*", "test"),
        (True, "***********", "test"),
        (False, "nomatch", "test"),
        (False, "*nomatch", "test"),
        (False, "nomatch*", "test"),
        (False, "*nomatch*", "test"),
        (True, "*test", "thisisatest"),
        (True, "this*", "thisisatest"),
        (True, "*isa*", "thisisatest"),
        (False, "isa", "thisisatest"),
    ],
)
def test_match_rule(found, rule, s):
    assert match_rule(rule, s) is found


def test_match_rule_ignores_case():
    assert match_rule("OpenStorage*", "openstorage.api") is True
    assert match_rule("Create", "CREATE") is True


def test_deny_rule_negated_prefix():
    assert deny_rule("!open*", "OpenStorageVolumes") is True
    assert deny_rule("!open*", "volumes") is False