# Copyright 2016 OpenStack Foundation
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or
# implied. See the License for the specific language governing
# permissions and limitations under the License.

"""
Identity v3 tokens.

Tokens are issued by ``POST /v3/auth/tokens``; the token itself comes back
in the ``X-Subject-Token`` response header and the body describes it::

   < HTTP/1.1 201 Created
   < X-Subject-Token: <token>
   <
   < {"token": {"methods": ["password"], "expires_at": "...",
   <            "project": {...}, "user": {...}, "catalog": [...]}}

An existing token can be looked up (without rescoping it) with
``GET /v3/auth/tokens`` and the same header on the request.
"""

from stackclient.catalog import ServiceCatalogV3
from stackclient.exceptions import ClientException, InvalidAuthOptions
from stackclient.utils import parse_api_response

SUBJECT_TOKEN_HEADER = 'X-Subject-Token'


class Token:
    """An issued v3 token."""

    def __init__(self, token_id, token):
        self.token_id = token_id
        self.token = token
        self.methods = token.get('methods') or []
        self.expires_at = token.get('expires_at')
        self.issued_at = token.get('issued_at')
        self.user = token.get('user') or {}
        self.project = token.get('project')
        self.domain = token.get('domain')
        self.system = token.get('system')
        self.roles = token.get('roles') or []
        self.service_catalog = ServiceCatalogV3.from_list(
            token.get('catalog'))

    @property
    def user_id(self):
        return self.user.get('id')

    @property
    def project_id(self):
        return (self.project or {}).get('id')

    @classmethod
    def from_response(cls, resp):
        token_id = resp.headers.get(SUBJECT_TOKEN_HEADER)
        body = parse_api_response(resp.headers, resp.content) or {}
        token = body.get('token')
        if not token_id or token is None:
            raise ClientException.from_response(
                resp, 'Token response is missing the token')
        return cls(token_id, token)


def _domain_ref(domain_id, domain_name):
    if domain_id and domain_name:
        raise InvalidAuthOptions('You must provide exactly one of '
                                 'domain_id or domain_name')
    if domain_id:
        return {'id': domain_id}
    if domain_name:
        return {'name': domain_name}
    return None


def _user_ref(options):
    if options.user_id:
        if options.domain_id or options.domain_name:
            raise InvalidAuthOptions("You can't provide both user_id and "
                                     "a domain")
        return {'id': options.user_id}
    if options.username:
        domain = _domain_ref(options.domain_id, options.domain_name)
        if domain is None:
            raise InvalidAuthOptions('You must provide exactly one of '
                                     'domain_id or domain_name to '
                                     'authenticate by username')
        return {'name': options.username, 'domain': domain}
    return None


def _identity(options):
    if options.token_id:
        if options.username or options.user_id:
            raise InvalidAuthOptions('A token cannot be combined with a '
                                     'username or user ID')
        return {'methods': ['token'], 'token': {'id': options.token_id}}

    if options.application_credential_id or \
            options.application_credential_name:
        if not options.application_credential_secret:
            raise InvalidAuthOptions('You must provide an application '
                                     'credential secret')
        credential = {'secret': options.application_credential_secret}
        if options.application_credential_id:
            credential['id'] = options.application_credential_id
        else:
            user = _user_ref(options)
            if user is None:
                raise InvalidAuthOptions('An application credential name '
                                         'requires a username or user ID')
            credential['name'] = options.application_credential_name
            credential['user'] = user
        return {'methods': ['application_credential'],
                'application_credential': credential}

    user = _user_ref(options)
    identity = {'methods': []}
    if options.password:
        if user is None:
            raise InvalidAuthOptions('You must provide a username or user '
                                     'ID to authenticate with a password')
        identity['methods'].append('password')
        identity['password'] = {'user': dict(user,
                                             password=options.password)}
    if options.passcode:
        if user is None:
            raise InvalidAuthOptions('You must provide a username or user '
                                     'ID to authenticate with a passcode')
        identity['methods'].append('totp')
        identity['totp'] = {'user': dict(user, passcode=options.passcode)}
    if not identity['methods']:
        raise InvalidAuthOptions('You must provide a password, passcode, '
                                 'token or application credential')
    return identity


def scope_map(scope):
    """
    Render an :class:`~stackclient.auth.AuthScope` as a v3 scope.

    :returns: the scope dict, or None for an unscoped request
    """
    if scope is None or scope.is_empty():
        return None
    if scope.project_id:
        if scope.project_name:
            raise InvalidAuthOptions('You must provide exactly one of '
                                     'project_id or project_name')
        if scope.domain_id or scope.domain_name:
            raise InvalidAuthOptions('A project_id scope must not name a '
                                     'domain')
        return {'project': {'id': scope.project_id}}
    if scope.project_name:
        domain = _domain_ref(scope.domain_id, scope.domain_name)
        if domain is None:
            raise InvalidAuthOptions('A project_name scope needs exactly '
                                     'one of domain_id or domain_name')
        return {'project': {'name': scope.project_name, 'domain': domain}}
    if scope.domain_id or scope.domain_name:
        return {'domain': _domain_ref(scope.domain_id, scope.domain_name)}
    if scope.system:
        return {'system': {'all': True}}
    if scope.trust_id:
        return {'OS-TRUST:trust': {'id': scope.trust_id}}
    return None


def token_create_body(options):
    """
    Build the request body for :func:`create`.

    :param options: an :class:`~stackclient.auth.AuthOptions`
    :raises InvalidAuthOptions: the credentials or scope are inconsistent
    """
    auth = {'identity': _identity(options)}
    # Application credentials are bound to a project already.
    if 'application_credential' not in auth['identity']['methods']:
        scope = scope_map(options.effective_scope())
        if scope is not None:
            auth['scope'] = scope
    return {'auth': auth}


def create(client, options, response_dict=None):
    """
    Authenticate and get a token.

    :param client: identity v3 :class:`~stackclient.client.ServiceClient`
    :param options: an :class:`~stackclient.auth.AuthOptions`
    :param response_dict: an optional dictionary into which to place
                          the response - status, reason and headers
    :returns: a :class:`Token`
    :raises ClientException: HTTP POST request failed
    """
    body = token_create_body(options)
    resp = client.post(client.service_url('auth', 'tokens'), json=body,
                       ok_codes=(201,), omit_headers=('X-Auth-Token',),
                       response_dict=response_dict)
    return Token.from_response(resp)


def get(client, token, response_dict=None):
    """
    Validate a token and get the details it was issued with.

    The request is authenticated with the client's current token, which
    may be ``token`` itself.

    :returns: a :class:`Token`
    :raises ClientException: HTTP GET request failed
    """
    resp = client.get(client.service_url('auth', 'tokens'),
                      more_headers={SUBJECT_TOKEN_HEADER: token},
                      ok_codes=(200, 203), response_dict=response_dict)
    return Token.from_response(resp)
