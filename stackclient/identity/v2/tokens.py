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
Identity v2.0 tokens.

A token is requested with either a password::

   > POST /v2.0/tokens
   > {"auth": {"passwordCredentials": {"username": "...",
   >                                    "password": "..."},
   >           "tenantName": "demo"}}

or an existing token (``{"auth": {"token": {"id": "..."}}}``), and comes
back in an ``access`` document holding the token and the service catalog.
"""

from stackclient.catalog import ServiceCatalogV2
from stackclient.exceptions import ClientException, InvalidAuthOptions
from stackclient.utils import parse_api_response


class Token:
    """An issued v2.0 token and the access document it came with."""

    def __init__(self, access):
        self.access = access
        token = access.get('token') or {}
        self.token_id = token.get('id')
        self.expires_at = token.get('expires')
        self.issued_at = token.get('issued_at')
        self.tenant = token.get('tenant') or {}
        self.user = access.get('user') or {}
        self.service_catalog = ServiceCatalogV2.from_list(
            access.get('serviceCatalog'))

    @property
    def user_id(self):
        return self.user.get('id')

    @property
    def project_id(self):
        return self.tenant.get('id')


def token_create_body(options):
    """
    Build the request body for :func:`create`.

    :param options: an :class:`~stackclient.auth.AuthOptions`
    :raises InvalidAuthOptions: the options use v3-only features or carry
                                no usable credential
    """
    if options.user_id:
        raise InvalidAuthOptions('User IDs are not supported by identity '
                                 'v2.0; use a username')
    if options.domain_id or options.domain_name:
        raise InvalidAuthOptions('Domains are not supported by identity '
                                 'v2.0')
    if options.application_credential_id or \
            options.application_credential_name:
        raise InvalidAuthOptions('Application credentials are not '
                                 'supported by identity v2.0')

    auth = {}
    if options.token_id:
        auth['token'] = {'id': options.token_id}
    elif options.password:
        if not options.username:
            raise InvalidAuthOptions('You must provide a username to '
                                     'authenticate with a password')
        auth['passwordCredentials'] = {
            'username': options.username,
            'password': options.password,
        }
    else:
        raise InvalidAuthOptions('You must provide a password or a token '
                                 'to authenticate')

    tenant_id = options.tenant_id
    tenant_name = options.tenant_name
    scope = options.scope
    if scope is not None:
        tenant_id = scope.project_id or tenant_id
        tenant_name = scope.project_name or tenant_name
    if tenant_id:
        auth['tenantId'] = tenant_id
    elif tenant_name:
        auth['tenantName'] = tenant_name
    return {'auth': auth}


def create(client, options, response_dict=None):
    """
    Authenticate and get a token.

    :param client: identity v2.0 :class:`~stackclient.client.ServiceClient`
    :param options: an :class:`~stackclient.auth.AuthOptions`
    :param response_dict: an optional dictionary into which to place
                          the response - status, reason and headers
    :returns: a :class:`Token`
    :raises ClientException: HTTP POST request failed
    """
    body = token_create_body(options)
    resp = client.post(client.service_url('tokens'), json=body,
                       ok_codes=(200, 203), omit_headers=('X-Auth-Token',),
                       response_dict=response_dict)
    access = (parse_api_response(resp.headers, resp.content) or {}).get(
        'access')
    if not access:
        raise ClientException.from_response(
            resp, 'Token response has no access document')
    return Token(access)
