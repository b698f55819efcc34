"""hzn SDK public surface."""

from hzn_sdk.api import (
    exchange_delete,
    exchange_get,
    exchange_put_post,
    horizon_delete,
    horizon_get,
    horizon_put_post,
)
from hzn_sdk.auth import (
    basic_auth_header,
    org_and_creds,
    resolve_exchange_auth,
    set_whether_using_api_key,
    split_id_token,
)
from hzn_sdk.client import APIResult, LocalAgentClient, RegistryClient
from hzn_sdk.config import get_exchange_url, get_horizon_url_base
from hzn_sdk.decode import (
    PRETTY_STRING,
    RAW_BYTES,
    RAW_TEXT,
    PrettyString,
    RawBytes,
    RawText,
    ResponseTarget,
    TypedValue,
    decode_body,
    encode_body,
)
from hzn_sdk.errors import (
    CredentialError,
    FileIOError,
    GeneralError,
    HTTPError,
    HznSDKError,
    InputError,
    InternalError,
    NotFoundError,
    ParseError,
    SignatureInvalidError,
    StatusError,
    TransportError,
)
from hzn_sdk.options import GlobalOptions
from hzn_sdk.status import is_good_code

__all__ = [
    "HznSDKError",
    "InputError",
    "CredentialError",
    "ParseError",
    "FileIOError",
    "HTTPError",
    "TransportError",
    "StatusError",
    "GeneralError",
    "NotFoundError",
    "SignatureInvalidError",
    "InternalError",
    "GlobalOptions",
    "APIResult",
    "LocalAgentClient",
    "RegistryClient",
    "horizon_get",
    "horizon_put_post",
    "horizon_delete",
    "exchange_get",
    "exchange_put_post",
    "exchange_delete",
    "is_good_code",
    "ResponseTarget",
    "RawBytes",
    "RawText",
    "PrettyString",
    "TypedValue",
    "RAW_BYTES",
    "RAW_TEXT",
    "PRETTY_STRING",
    "decode_body",
    "encode_body",
    "basic_auth_header",
    "resolve_exchange_auth",
    "split_id_token",
    "org_and_creds",
    "set_whether_using_api_key",
    "get_exchange_url",
    "get_horizon_url_base",
]
