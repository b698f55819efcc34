"""Exchange credential resolution and Basic auth headers."""

from __future__ import annotations

import base64
import os
import re
from dataclasses import replace
from typing import TextIO

from hzn_sdk.config import USING_API_KEY_ENV_VAR, api_key_in_use, with_default_env_var
from hzn_sdk.errors import CredentialError
from hzn_sdk.options import GlobalOptions
from hzn_sdk.output import verbose

USER_AUTH_ENV_VAR = "HZN_EXCHANGE_USER_AUTH"
NODE_AUTH_ENV_VAR = "HZN_EXCHANGE_NODE_AUTH"

# Some API keys start with: a-<6charorgid>-
_API_KEY_PATTERN = re.compile(r"^a-[A-Za-z0-9]{6}-")


def basic_auth_header(credentials: str | None) -> dict[str, str]:
    if not credentials:
        return {}
    token = base64.b64encode(credentials.encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {token}"}


def split_id_token(id_token: str) -> tuple[str, str]:
    """Split ``id:token`` (or ``user:pw``) into its two parts."""
    ident, _, token = id_token.partition(":")
    return ident, token


def resolve_exchange_auth(user_pw: str = "", node_id_tok: str = "") -> str:
    """Pick the credentials for an exchange call.

    Precedence: explicit user/password, explicit node id/token, then the
    ``HZN_EXCHANGE_USER_AUTH`` and ``HZN_EXCHANGE_NODE_AUTH`` env vars.
    """
    if user_pw:
        return user_pw
    if node_id_tok:
        return node_id_tok

    creds = with_default_env_var(user_pw, USER_AUTH_ENV_VAR)
    if not creds:
        creds = with_default_env_var(node_id_tok, NODE_AUTH_ENV_VAR)
    if not creds:
        raise CredentialError(
            "exchange authentication must be specified with one of the following: "
            f"the -u flag, the -n flag, {USER_AUTH_ENV_VAR} or {NODE_AUTH_ENV_VAR}"
        )
    return creds


def looks_like_api_key(creds: str) -> bool:
    # USING_API_KEY=0 says the creds are not an api key even if they look like one.
    if os.getenv(USING_API_KEY_ENV_VAR) == "0":
        return False
    return bool(_API_KEY_PATTERN.match(creds))


def set_whether_using_api_key(
    options: GlobalOptions,
    creds: str,
    *,
    stderr: TextIO | None = None,
) -> GlobalOptions:
    if looks_like_api_key(creds):
        options = replace(options, using_api_key=True)
        verbose(options, "Using API key", stderr=stderr)
    return options


def org_and_creds(org: str, creds: str, options: GlobalOptions) -> str:
    """Prepend ``org/`` to creds unless they already carry an org or are an API key."""
    if api_key_in_use(options):
        return creds
    # Only the id part can carry an org prefix.
    ident, _ = split_id_token(creds)
    if "/" in ident:
        return creds
    return f"{org}/{creds}"
