"""
ninja_auth.py
Request signing for the NinjaRMM API (HMAC-SHA1, "NJ" authorization scheme).
"""

import base64
import hashlib
import hmac
from datetime import datetime, timezone
from email.utils import format_datetime


def build_string_to_sign(http_method, content_md5, content_type, request_datetime, canonical_path):
    # GET requests leave content_md5 and content_type empty
    return "\n".join([http_method, content_md5, content_type, request_datetime, canonical_path])


def get_signature(secret_access_key, string_to_sign):
    """
    Sign the request string the way the API expects it:
    base64 the string, HMAC-SHA1 the base64 text with the secret, base64 the digest.
    """
    data = base64.b64encode(string_to_sign.encode('utf-8'))
    digest = hmac.new(secret_access_key.encode('utf-8'), data, hashlib.sha1).digest()
    return base64.b64encode(digest).decode('ascii')


def request_date(now=None):
    # RFC 1123 with a numeric offset, e.g. "Mon, 02 Jan 2006 15:04:05 +0000"
    if now is None:
        now = datetime.now(timezone.utc)
    return format_datetime(now.astimezone(timezone.utc))
