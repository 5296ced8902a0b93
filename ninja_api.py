"""
ninja_api.py
Minimal NinjaRMM v2 API client: signed GET requests decoded into organizations and devices.

Credentials come from the environment:
  NINJA_ACCESS_KEY_ID, NINJA_SECRET_ACCESS_KEY
"""

import os
from dataclasses import dataclass

import requests

from ninja_auth import build_string_to_sign, get_signature, request_date

API_HOST = 'https://api.ninjarmm.com'
ORGANIZATIONS_URL = '/v2/organizations'
DEVICES_URL = '/v2/organization/{}/devices'


# ----- Errors -----
class NinjaApiError(Exception):
    """Base class for failures of a single API call."""


class NinjaTransportError(NinjaApiError):
    pass


class NinjaStatusError(NinjaApiError):
    def __init__(self, url, status_code, text=''):
        super().__init__(f"GET {url} returned status {status_code}: {text}")
        self.url = url
        self.status_code = status_code


class NinjaDecodeError(NinjaApiError):
    pass


# ----- Config -----
@dataclass(frozen=True)
class NinjaConfig:
    access_key_id: str
    secret_access_key: str
    host: str = API_HOST

    @classmethod
    def from_env(cls, environ=None):
        if environ is None:
            environ = os.environ
        return cls(
            access_key_id=environ.get('NINJA_ACCESS_KEY_ID') or '<YOUR_ACCESS_KEY_ID>',
            secret_access_key=environ.get('NINJA_SECRET_ACCESS_KEY') or '<YOUR_SECRET_ACCESS_KEY>',
        )


# ----- Records -----
def _lookup(record, key):
    # exact key first, then any case-insensitive match ("NodeClass" fills nodeClass)
    if key in record:
        return record[key]
    folded = key.lower()
    for name, value in record.items():
        if name.lower() == folded:
            return value
    return None


def _field(record, key, kind, default):
    """
    Read one typed field from a decoded JSON object.
    Missing keys and nulls give the zero value; a value of the wrong JSON type is an error.
    """
    value = _lookup(record, key)
    if value is None:
        return default
    # bool is an int subclass, never accept it for numeric fields
    if kind is bool:
        ok = isinstance(value, bool)
    elif kind is int:
        ok = isinstance(value, int) and not isinstance(value, bool)
    elif kind is float:
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
    else:
        ok = isinstance(value, kind)
    if not ok:
        raise NinjaDecodeError(f"field {key!r}: expected {kind.__name__}, got {type(value).__name__} {value!r}")
    return kind(value)


def _objects(body):
    # null body decodes to an empty list, null elements to all-zero records
    if body is None:
        return
    if not isinstance(body, list):
        raise NinjaDecodeError(f"expected a JSON array, got {type(body).__name__}")
    for item in body:
        if item is None:
            item = {}
        elif not isinstance(item, dict):
            raise NinjaDecodeError(f"expected a JSON object, got {type(item).__name__}")
        yield item


@dataclass
class Organization:
    id: int
    name: str
    description: str

    @classmethod
    def from_json(cls, record):
        return cls(
            id=_field(record, 'id', int, 0),
            name=_field(record, 'name', str, ''),
            description=_field(record, 'description', str, ''),
        )


@dataclass
class Device:
    id: int
    organization_id: int
    location_id: int
    node_class: str
    node_role_id: int
    role_policy_id: int
    approval_status: str
    offline: bool
    system_name: str
    dns_name: str
    created: float
    last_contact: float
    last_update: float

    @classmethod
    def from_json(cls, record):
        return cls(
            id=_field(record, 'id', int, 0),
            organization_id=_field(record, 'organizationId', int, 0),
            location_id=_field(record, 'locationId', int, 0),
            node_class=_field(record, 'nodeClass', str, ''),
            node_role_id=_field(record, 'nodeRoleId', int, 0),
            role_policy_id=_field(record, 'rolePolicyId', int, 0),
            approval_status=_field(record, 'approvalStatus', str, ''),
            offline=_field(record, 'offline', bool, False),
            system_name=_field(record, 'systemName', str, ''),
            dns_name=_field(record, 'dnsName', str, ''),
            created=_field(record, 'created', float, 0.0),
            last_contact=_field(record, 'lastContact', float, 0.0),
            last_update=_field(record, 'lastUpdate', float, 0.0),
        )


# ----- Client -----
class NinjaClient:
    """
    One signed GET per call, no retries and no pagination.
    Every failure surfaces as a NinjaApiError subclass; callers decide whether to keep going.
    """

    def __init__(self, config, session=None):
        self.config = config
        self.session = session if session is not None else requests.Session()

    def sign_request(self, path):
        # each request gets its own Date header, never reused
        request_datetime = request_date()
        string_to_sign = build_string_to_sign('GET', '', '', request_datetime, path)
        return request_datetime, get_signature(self.config.secret_access_key, string_to_sign)

    def call(self, path, signature, request_datetime):
        url = self.config.host + path
        headers = {
            'Authorization': f'NJ {self.config.access_key_id}:{signature}',
            'Date': request_datetime,
        }
        try:
            resp = self.session.get(url, headers=headers)
        except requests.RequestException as e:
            raise NinjaTransportError(f"GET {url} failed: {e}") from e

        if not (200 <= resp.status_code < 300):
            raise NinjaStatusError(url, resp.status_code, resp.text)

        try:
            return resp.json()
        except ValueError as e:
            raise NinjaDecodeError(f"JSON decode error for {url}: {e}") from e

    def get(self, path):
        request_datetime, signature = self.sign_request(path)
        return self.call(path, signature, request_datetime)

    def get_organizations(self):
        body = self.get(ORGANIZATIONS_URL)
        return [Organization.from_json(item) for item in _objects(body)]

    def get_devices(self, organization_id):
        body = self.get(DEVICES_URL.format(organization_id))
        return [Device.from_json(item) for item in _objects(body)]
