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
Authentication against an OpenStack cloud and service client construction.

Typical use::

   from stackclient import auth
   from stackclient.client import EndpointOpts

   options = auth.auth_options_from_env()
   provider = auth.authenticated_client(options)
   network = auth.new_network_v2(provider, EndpointOpts(region='RegionOne'))

:func:`authenticated_client` negotiates the identity version (v3 preferred
over v2.0), authenticates, and installs on the provider:

* a :class:`~stackclient.catalog.CatalogEndpointLocator` used by the
  ``new_*`` constructors to find service endpoints, and
* when ``allow_reauth`` is set, an :class:`IdentityReauthenticator` so that
  a request failing with ``401 Unauthorized`` gets a new token and is
  replayed once.
"""

import logging
import os

from stackclient.catalog import CatalogEndpointLocator
from stackclient.client import EndpointOpts, ProviderClient, \
    Reauthenticator, ServiceClient, HTTPConnection
from stackclient.discover import Version, choose_version
from stackclient.exceptions import ConfigurationError, InvalidAuthOptions
from stackclient.identity.v2 import tokens as tokens2
from stackclient.identity.v3 import tokens as tokens3
from stackclient.utils import base_endpoint, normalize_url

logger = logging.getLogger(__name__)

V2 = Version('v2.0', 20, '/v2.0/')
V3 = Version('v3', 30, '/v3/')
IDENTITY_VERSIONS = (V2, V3)


class AuthScope:
    """
    What a v3 token should be scoped to.

    Set one of: ``project_id``; ``project_name`` with ``domain_id`` or
    ``domain_name``; ``domain_id`` or ``domain_name`` alone; ``system``;
    ``trust_id``.
    """

    def __init__(self, project_id=None, project_name=None, domain_id=None,
                 domain_name=None, system=False, trust_id=None):
        self.project_id = project_id
        self.project_name = project_name
        self.domain_id = domain_id
        self.domain_name = domain_name
        self.system = system
        self.trust_id = trust_id

    def is_empty(self):
        return not (self.project_id or self.project_name or
                    self.domain_id or self.domain_name or self.system or
                    self.trust_id)

    def __eq__(self, other):
        if not isinstance(other, AuthScope):
            return NotImplemented
        return vars(self) == vars(other)

    def __repr__(self):
        return 'AuthScope(%s)' % ', '.join(
            '%s=%r' % (k, v) for k, v in sorted(vars(self).items()) if v)


class AuthOptions:
    """
    Credentials and scope used to get a token.

    ``tenant_id`` and ``tenant_name`` scope v2.0 tokens, and v3 tokens when
    no explicit ``scope`` is given. ``domain_id``/``domain_name`` name the
    domain of ``username`` (v3 only).

    A ``token_id`` without any scope is passed through as-is on v3: the
    token is looked up rather than exchanged, so it cannot be combined with
    ``allow_reauth``.
    """

    _fields = ('identity_endpoint', 'username', 'user_id', 'password',
               'passcode', 'domain_id', 'domain_name', 'tenant_id',
               'tenant_name', 'allow_reauth', 'token_id', 'scope',
               'application_credential_id', 'application_credential_name',
               'application_credential_secret')

    def __init__(self, identity_endpoint=None, username=None, user_id=None,
                 password=None, passcode=None, domain_id=None,
                 domain_name=None, tenant_id=None, tenant_name=None,
                 allow_reauth=False, token_id=None, scope=None,
                 application_credential_id=None,
                 application_credential_name=None,
                 application_credential_secret=None):
        self.identity_endpoint = identity_endpoint
        self.username = username
        self.user_id = user_id
        self.password = password
        self.passcode = passcode
        self.domain_id = domain_id
        self.domain_name = domain_name
        self.tenant_id = tenant_id
        self.tenant_name = tenant_name
        self.allow_reauth = allow_reauth
        self.token_id = token_id
        self.scope = scope
        self.application_credential_id = application_credential_id
        self.application_credential_name = application_credential_name
        self.application_credential_secret = application_credential_secret

    def can_reauth(self):
        # A TOTP passcode is single use.
        if self.passcode:
            return False
        return bool(self.allow_reauth)

    def copy(self, **overrides):
        values = dict((f, getattr(self, f)) for f in self._fields)
        values.update(overrides)
        return AuthOptions(**values)

    def effective_scope(self):
        """
        The explicit ``scope``, or one derived from the tenant fields.

        :returns: an :class:`AuthScope`, or None when unscoped
        """
        if self.scope is not None and not self.scope.is_empty():
            return self.scope
        if self.tenant_id:
            return AuthScope(project_id=self.tenant_id)
        if self.tenant_name:
            return AuthScope(project_name=self.tenant_name,
                             domain_id=self.domain_id,
                             domain_name=self.domain_name)
        return None

    def is_token_passthrough(self):
        return bool(self.token_id) and self.effective_scope() is None

    def __repr__(self):
        shown = []
        for field in self._fields:
            value = getattr(self, field)
            if not value:
                continue
            if field in ('password', 'passcode', 'token_id',
                         'application_credential_secret'):
                value = '***'
            shown.append('%s=%r' % (field, value))
        return 'AuthOptions(%s)' % ', '.join(shown)


def auth_options_from_env(environ=None):
    """
    Build :class:`AuthOptions` from the usual ``OS_*`` variables.

    ``OS_PROJECT_ID``/``OS_PROJECT_NAME`` take precedence over
    ``OS_TENANT_ID``/``OS_TENANT_NAME`` and ``OS_USER_DOMAIN_*`` over
    ``OS_DOMAIN_*``. ``OS_SYSTEM_SCOPE=all`` requests a system scoped token.

    :param environ: mapping to read instead of ``os.environ``
    :raises ConfigurationError: the auth URL or the credentials are missing
    """
    if environ is None:
        environ = os.environ

    def env(*names):
        for name in names:
            value = environ.get(name)
            if value:
                return value
        return None

    auth_url = env('OS_AUTH_URL')
    username = env('OS_USERNAME')
    user_id = env('OS_USERID', 'OS_USER_ID')
    password = env('OS_PASSWORD')
    passcode = env('OS_PASSCODE')
    app_cred_id = env('OS_APPLICATION_CREDENTIAL_ID')
    app_cred_name = env('OS_APPLICATION_CREDENTIAL_NAME')
    app_cred_secret = env('OS_APPLICATION_CREDENTIAL_SECRET')

    if not auth_url:
        raise ConfigurationError('Missing environment variable OS_AUTH_URL')
    if app_cred_id or app_cred_name:
        if app_cred_name and not (username or user_id):
            raise ConfigurationError(
                'Missing environment variable OS_USERNAME or OS_USERID '
                'for application credential %s' % app_cred_name)
        if not app_cred_secret:
            raise ConfigurationError('Missing environment variable '
                                     'OS_APPLICATION_CREDENTIAL_SECRET')
    else:
        if not (username or user_id):
            raise ConfigurationError('Missing environment variable '
                                     'OS_USERNAME or OS_USERID')
        if not (password or passcode):
            raise ConfigurationError('Missing environment variable '
                                     'OS_PASSWORD or OS_PASSCODE')

    scope = None
    if env('OS_SYSTEM_SCOPE') == 'all':
        scope = AuthScope(system=True)

    return AuthOptions(
        identity_endpoint=auth_url,
        username=username,
        user_id=user_id,
        password=password,
        passcode=passcode,
        domain_id=env('OS_USER_DOMAIN_ID', 'OS_DOMAIN_ID'),
        domain_name=env('OS_USER_DOMAIN_NAME', 'OS_DOMAIN_NAME'),
        tenant_id=env('OS_PROJECT_ID', 'OS_TENANT_ID'),
        tenant_name=env('OS_PROJECT_NAME', 'OS_TENANT_NAME'),
        scope=scope,
        application_credential_id=app_cred_id,
        application_credential_name=app_cred_name,
        application_credential_secret=app_cred_secret)


def new_client(endpoint, http_conn=None, **http_kwargs):
    """
    Build an unauthenticated :class:`~stackclient.client.ProviderClient`.

    :param endpoint: identity endpoint, versioned or not
    :param http_conn: an existing :class:`~stackclient.client.HTTPConnection`
    :param http_kwargs: passed to ``HTTPConnection`` when ``http_conn`` is
                        not given (``insecure``, ``cacert``, ``timeout``...)
    :raises ConfigurationError: the endpoint is not an absolute URL
    """
    if not endpoint:
        raise ConfigurationError('An identity endpoint is required')
    try:
        base = base_endpoint(endpoint)
    except ValueError as err:
        raise ConfigurationError(str(err))
    if http_conn is None:
        http_conn = HTTPConnection(**http_kwargs)
    return ProviderClient(identity_endpoint=normalize_url(endpoint),
                          identity_base=normalize_url(base),
                          http_conn=http_conn)


def authenticated_client(options, **http_kwargs):
    """
    Build a provider for ``options.identity_endpoint`` and authenticate it.

    :returns: an authenticated :class:`~stackclient.client.ProviderClient`
    """
    provider = new_client(options.identity_endpoint, **http_kwargs)
    authenticate(provider, options)
    return provider


def authenticate(provider, options):
    """
    Authenticate (or authenticate again) ``provider`` against the most
    recent identity version its endpoint offers.
    """
    _check_passthrough(options)
    version, endpoint = choose_version(provider, IDENTITY_VERSIONS)
    if version is V2:
        return _v2auth(provider, endpoint, options, EndpointOpts())
    if version is V3:
        return _v3auth(provider, endpoint, options, EndpointOpts())
    raise ConfigurationError('Unrecognized identity version: %s'
                             % version.id)


def authenticate_v2(provider, options, endpoint_opts=None):
    """Authenticate against identity v2.0 without version discovery."""
    return _v2auth(provider, None, options, endpoint_opts or EndpointOpts())


def authenticate_v3(provider, options, endpoint_opts=None):
    """Authenticate against identity v3 without version discovery."""
    return _v3auth(provider, None, options, endpoint_opts or EndpointOpts())


class IdentityReauthenticator(Reauthenticator):
    """
    Gets a new token with the options of the original authentication.

    Each run authenticates a fresh throwaway copy of the provider (no token,
    unable to reauthenticate itself) with ``allow_reauth`` turned off, then
    copies the throwaway's token and catalog onto the live provider in one
    step.

    :param version: :data:`V2` or :data:`V3`
    :param endpoint: resolved identity endpoint tokens are requested from
    :param options: the :class:`AuthOptions` used the first time
    """

    def __init__(self, version, endpoint, options):
        self.version = version
        self.endpoint = endpoint
        self.options = options.copy(allow_reauth=False)

    def reauthenticate(self, provider):
        tac = provider.copy_for_reauth()
        if self.version is V2:
            _v2auth(tac, self.endpoint, self.options, EndpointOpts())
        else:
            _v3auth(tac, self.endpoint, self.options, EndpointOpts())
        provider.copy_token_from(tac)


def _check_passthrough(options):
    if options.is_token_passthrough() and options.can_reauth():
        raise InvalidAuthOptions('Cannot use allow_reauth when a token ID '
                                 'is given and no auth scope is set')


def _install(provider, version, endpoint, options):
    if options.can_reauth() and not provider.throwaway:
        provider.reauthenticator = IdentityReauthenticator(
            version, endpoint, options)
    provider.endpoint_locator = CatalogEndpointLocator(provider)


def _v2auth(provider, endpoint, options, endpoint_opts):
    identity = new_identity_v2(provider, endpoint_opts, endpoint=endpoint)
    result = tokens2.create(identity, options)
    provider.set_token_and_auth_result(result)
    logger.debug('Authenticated with identity v2.0 at %s', identity.endpoint)
    _install(provider, V2, identity.endpoint, options)


def _v3auth(provider, endpoint, options, endpoint_opts):
    _check_passthrough(options)
    identity = new_identity_v3(provider, endpoint_opts, endpoint=endpoint)
    if options.is_token_passthrough():
        # Look the token up without rescoping it.
        provider.set_token(options.token_id)
        result = tokens3.get(identity, options.token_id)
    else:
        result = tokens3.create(identity, options)
    provider.set_token_and_auth_result(result)
    logger.debug('Authenticated with identity v3 at %s', identity.endpoint)
    _install(provider, V3, identity.endpoint, options)


def _locate(provider, opts):
    if provider.endpoint_locator is None:
        raise ConfigurationError('The provider has no endpoint locator; '
                                 'authenticate first')
    return provider.endpoint_locator(opts)


def new_identity_v2(provider, endpoint_opts=None, endpoint=None):
    """
    Identity v2.0 client. Uses ``endpoint`` when given, else the catalog
    when ``endpoint_opts`` is not empty, else ``<identity base>v2.0/``.
    """
    if endpoint:
        url = normalize_url(endpoint)
    elif endpoint_opts is not None and not endpoint_opts.is_empty():
        opts = endpoint_opts.copy()
        opts.apply_defaults('identity')
        url = _locate(provider, opts)
    else:
        url = provider.identity_base + 'v2.0/'
    return ServiceClient(provider, url, type='identity')


def new_identity_v3(provider, endpoint_opts=None, endpoint=None):
    """
    Identity v3 client. A catalog endpoint is always rewritten to end with
    ``v3/``, whatever version (if any) it was published with.
    """
    if endpoint:
        url = normalize_url(endpoint)
    else:
        if endpoint_opts is not None and not endpoint_opts.is_empty():
            opts = endpoint_opts.copy()
            opts.apply_defaults('identity')
            url = _locate(provider, opts)
        else:
            url = provider.identity_base
        url = normalize_url(base_endpoint(url)) + 'v3/'
    return ServiceClient(provider, url, type='identity')


def _init_client_opts(provider, endpoint_opts, service_type, version,
                      **kwargs):
    opts = endpoint_opts.copy() if endpoint_opts else EndpointOpts()
    opts.apply_defaults(service_type)
    if opts.version and opts.version != version:
        raise ConfigurationError(
            'Conflict between requested %s major version %s and manually '
            'set version %s' % (service_type, version, opts.version))
    opts.version = version
    url = _locate(provider, opts)
    return ServiceClient(provider, url, type=service_type, **kwargs)


def new_baremetal_v1(provider, endpoint_opts=None):
    sc = _init_client_opts(provider, endpoint_opts, 'baremetal', 1)
    if not sc.endpoint.rstrip('/').endswith('v1'):
        sc.resource_base = sc.endpoint + 'v1/'
    return sc


def new_baremetal_introspection_v1(provider, endpoint_opts=None):
    return _init_client_opts(provider, endpoint_opts,
                             'baremetal-introspection', 1)


def new_object_storage_v1(provider, endpoint_opts=None):
    return _init_client_opts(provider, endpoint_opts, 'object-store', 1)


def new_compute_v2(provider, endpoint_opts=None):
    return _init_client_opts(provider, endpoint_opts, 'compute', 2)


def new_network_v2(provider, endpoint_opts=None):
    sc = _init_client_opts(provider, endpoint_opts, 'network', 2)
    sc.resource_base = sc.endpoint + 'v2.0/'
    return sc


def new_block_storage_v1(provider, endpoint_opts=None):
    return _init_client_opts(provider, endpoint_opts, 'volume', 1)


def new_block_storage_v2(provider, endpoint_opts=None):
    return _init_client_opts(provider, endpoint_opts, 'block-storage', 2)


def new_block_storage_v3(provider, endpoint_opts=None):
    return _init_client_opts(provider, endpoint_opts, 'block-storage', 3)


def new_shared_file_system_v2(provider, endpoint_opts=None):
    return _init_client_opts(provider, endpoint_opts, 'shared-file-system',
                             2)


def new_orchestration_v1(provider, endpoint_opts=None):
    return _init_client_opts(provider, endpoint_opts, 'orchestration', 1)


def new_db_v1(provider, endpoint_opts=None):
    return _init_client_opts(provider, endpoint_opts, 'database', 1)


def new_dns_v2(provider, endpoint_opts=None):
    sc = _init_client_opts(provider, endpoint_opts, 'dns', 2)
    sc.resource_base = sc.endpoint + 'v2/'
    return sc


def new_image_v2(provider, endpoint_opts=None):
    sc = _init_client_opts(provider, endpoint_opts, 'image', 2)
    sc.resource_base = sc.endpoint + 'v2/'
    return sc


def new_load_balancer_v2(provider, endpoint_opts=None):
    sc = _init_client_opts(provider, endpoint_opts, 'load-balancer', 2)
    # Some clouds publish the versioned endpoint, others the root.
    endpoint = sc.endpoint.replace('v2.0/', '')
    sc.resource_base = endpoint + 'v2.0/'
    return sc


def new_messaging_v2(provider, client_id, endpoint_opts=None):
    return _init_client_opts(provider, endpoint_opts, 'messaging', 2,
                             more_headers={'Client-ID': client_id})


def new_container_v1(provider, endpoint_opts=None):
    return _init_client_opts(provider, endpoint_opts,
                             'application-container', 1)


def new_key_manager_v1(provider, endpoint_opts=None):
    sc = _init_client_opts(provider, endpoint_opts, 'key-manager', 1)
    sc.resource_base = sc.endpoint + 'v1/'
    return sc


def new_container_infra_v1(provider, endpoint_opts=None):
    return _init_client_opts(provider, endpoint_opts,
                             'container-infrastructure-management', 1)


def new_workflow_v2(provider, endpoint_opts=None):
    return _init_client_opts(provider, endpoint_opts, 'workflow', 2)


def new_placement_v1(provider, endpoint_opts=None):
    return _init_client_opts(provider, endpoint_opts, 'placement', 1)
