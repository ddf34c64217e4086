# gfauth

Authentication and authorization building blocks for RPC services:

- token claims and the choice of which claim names the user (`gfauth.claims`)
- signing and inspecting JWTs (`gfauth.tokens`)
- checking tokens against an OpenID Connect provider or a JWKS endpoint (`gfauth.oidc`)
- role-based access rules for service methods (`gfauth.roles`, `gfauth.match`)
- ownership and ACL checks on resources (`gfauth.ownership`)
- the request context that carries the current user (`gfauth.userinfo`)
- the process-wide token generator (`gfauth.generator`)
- human-friendly durations such as `5d` or `1y` (`gfauth.duration`)

Errors are raised as `gfauth.errors.AuthError`; refused access is raised as its
subclass `gfauth.errors.PermissionDeniedError`.

## Installation

Install the project directory with pip. The `test` extra adds pytest for
running the test suite.

## Claims

`Claims` holds `issuer`, `subject`, `name`, `email`, `roles` and `groups`.
`Claims.from_mapping` builds it from a decoded JSON object (keys `iss`, `sub`,
`name`, `email`, `roles`, `groups`; other keys are ignored) and
`Claims.to_mapping` turns it back.

`UsernameClaimType` selects which claim is the user's unique id: `SUBJECT`
(also the `DEFAULT`), `EMAIL` or `NAME`. `get_username` returns that value and
`validate_username` raises `AuthError` when it is empty.

## Signing and reading tokens

```python
import time

from gfauth.claims import Claims
from gfauth.tokens import Options, new_signature_shared_secret, token, token_issuer

claims = Claims(issuer="my-issuer", subject="user-1", name="Jane", email="jane@example.com",
                roles=["system.admin"])
signature = new_signature_shared_secret("secret")
raw = token(claims, signature, Options(expiration=int(time.time()) + 600))

assert token_issuer(raw) == "my-issuer"
```

`new_signature_shared_secret` signs with HS256. RSA (RS256) and ECDSA (ES256)
keys are loaded from PEM data with `new_signature_rsa` and `new_signature_ecdsa`,
or from a file with `new_signature_rsa_from_file` and
`new_signature_ecdsa_from_file`.

`Options.expiration` is the `exp` value in Unix seconds. `Options.iat_subtract`
is a `timedelta` taken off the issued-at time, a guard against clock drift
between machines.

`token_claims` and `token_issuer` read a token without checking its signature.
`is_jwt_token` tells whether a string parses as a JWT with a known algorithm.
`is_guest` returns `True` when a `Context` carries no `authorization` metadata.

## Verifying tokens

```python
from gfauth.oidc import JWKSAuthConfig, new_jwks_authenticator

authenticator = new_jwks_authenticator(JWKSAuthConfig(
    issuer="https://auth.example.com",
    jwks_url="https://auth.example.com/.well-known/jwks.json",
))
claims = authenticator.authenticate_token(raw_token)
user_id = authenticator.username(claims)
```

`new_jwks_authenticator` requires the issuer and the JWKS URL to be on the same
host; `new_jwks_with_issuer_authenticator` drops that check. Keys are fetched
from the JWKS URL when a token is verified.

`new_oidc_authenticator` reads the provider's
`/.well-known/openid-configuration` document from `OIDCAuthConfig.issuer` and
verifies tokens with the keys it publishes. `client_id`,
`skip_client_id_check` and `skip_issuer_check` control the audience and issuer
checks.

`authenticate_token` requires the claims `iss`, `sub`, `exp`, `iat`, `name` and
`email`. When a `namespace` is configured, `<namespace>roles` and
`<namespace>groups` replace the top-level `roles` and `groups`.

## Role-based access

Roles hold rules. Each rule lists services and APIs. An entry of `*` matches
everything, `*x`, `x*` and `*x*` match by suffix, prefix and substring, and a
leading `!` denies. Matching ignores case. Denials always win over grants.
`match_rule` and `deny_rule` in `gfauth.match` apply a single entry.

```python
from gfauth.roles import GenericRoleManager, Role, Rule, new_default_generic_role_manager

manager = new_default_generic_role_manager()
manager.verify(["system.admin"], "/my.api.Service/Call")   # returns "system.admin"

custom = GenericRoleManager(
    "openstorage.api.OpenStorage",
    {"user": Role(name="user", rules=[Rule(services=["volumes"], apis=["*"])])},
)
custom.verify(["user"], "/openstorage.api.OpenStorageVolumes/Create")
```

The tag given to `GenericRoleManager` is stripped from the front of the service
name, so rules can name just `volumes`. `verify` returns the first role that
grants access. A denied call raises `PermissionDeniedError`. The default roles
are `system.admin`, which may call anything, and `system.guest`, which may call
nothing.

## Ownership

```python
from gfauth.ownership import AccessControl, AccessType, Ownership
from gfauth.userinfo import UserInfo

resource = Ownership(owner="me", acls=AccessControl(collaborators={"*": AccessType.READ}))
someone = UserInfo(username="someone")

resource.is_permitted(someone, AccessType.READ)    # True
resource.is_permitted(someone, AccessType.WRITE)   # False
```

Access levels are `READ`, `WRITE` and `ADMIN`; a higher level includes the
lower ones. A resource without an owner is public. Members of the `*` group are
administrators. `Ownership.update` applies new owner and ACLs: only the owner,
an administrator or a user with `ADMIN` access may change the ACLs, and only an
administrator may change the owner. Otherwise it raises `PermissionDeniedError`.

## Request context

The user making a request travels in a `gfauth.userinfo.Context`. Use
`context_save_user_info` to store the user and `user_info_from_context` to read
it back. `new_guest_user` returns the unauthenticated guest. `is_admin_by_context`
and `is_permitted_by_context` apply the ownership checks to whoever is in the
context. When the context holds no user, auth is treated as disabled and access
is granted.

## System token manager

`gfauth.generator` keeps the process-wide token generator. The default, `NoAuth`,
leaves auth disabled: it has no issuer, hands out empty tokens and raises
`AuthError` when asked for an authenticator. Install another `TokenGenerator`
with `init_system_token_manager`, read it with `system_token_manager`, and check
`enabled()` to see whether auth is active.

## What is not included

This is a library only. It has no command-line tool, no server and no
interceptors that hook these checks into an RPC framework; callers build the
`Context` and call the checks themselves. Roles are held in memory in the
mapping given to `GenericRoleManager`; there is no storage for them.