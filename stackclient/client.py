# Copyright (c) 2010-2012 OpenStack, LLC.
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
# implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
OpenStack client library used internally: transport, provider and service
clients.
"""
import json as jsonlib
import logging
import threading

import os_service_types
import requests
from requests.structures import CaseInsensitiveDict
from urllib.parse import urlparse, unquote

from stackclient import version as stackclient_version
from stackclient.exceptions import ClientException, ReauthenticationError
from stackclient.utils import normalize_url

logger = logging.getLogger("stackclient")
logger.addHandler(logging.NullHandler())

#: Default behaviour is to redact header values known to contain secrets,
#: such as ``X-Auth-Token`` and ``X-Subject-Token``. Up to the first 16 chars
#: may be revealed.
#:
#: To disable, set the value of ``redact_sensitive_headers`` to ``False``.
#:
#: When header redaction is enabled, ``reveal_sensitive_prefix`` configures the
#: maximum length of any sensitive header data sent to the logs. If the header
#: is less than twice this length, only ``int(len(value)/2)`` chars will be
#: logged; if it is less than 15 chars long, even less will be logged.
logger_settings = {
    'redact_sensitive_headers': True,
    'reveal_sensitive_prefix': 16
}
#: A list of sensitive headers to redact in logs. Note that when extending this
#: list, the header names must be added in all lower case.
LOGGER_SENSITIVE_HEADERS = [
    'x-auth-token', 'x-subject-token', 'x-service-token', 'authorization',
    'set-cookie'
]

PUBLIC = 'public'
INTERNAL = 'internal'
ADMIN = 'admin'
AVAILABILITIES = (PUBLIC, INTERNAL, ADMIN)

UNAUTHENTICATED = 'UNAUTHENTICATED'
AUTHENTICATED = 'AUTHENTICATED'
REAUTHENTICATING = 'REAUTHENTICATING'

_SERVICE_TYPES = os_service_types.ServiceTypes()

DEFAULT_OK_CODES = {
    'GET': (200,),
    'POST': (201, 202),
    'PUT': (201, 202),
    'PATCH': (200, 202, 204),
    'DELETE': (202, 204),
    'HEAD': (204,),
}


def safe_value(name, value):
    """
    Only show up to logger_settings['reveal_sensitive_prefix'] characters
    from a sensitive header.

    :param name: Header name
    :param value: Header value
    :return: Safe header value
    """
    if name.lower() in LOGGER_SENSITIVE_HEADERS:
        prefix_length = logger_settings.get('reveal_sensitive_prefix', 16)
        prefix_length = int(
            min(prefix_length, (len(value) ** 2) / 32, len(value) / 2)
        )
        redacted_value = value[0:prefix_length]
        return redacted_value + '...'
    return value


def scrub_headers(headers):
    """
    Redact header values that can contain sensitive information that
    should not be logged.

    :param headers: Either a dict or an iterable of two-element tuples
    :return: Safe dictionary of headers with sensitive information removed
    """
    if hasattr(headers, 'items'):
        headers = headers.items()
    headers = [
        (parse_header_string(key), parse_header_string(val))
        for (key, val) in headers
    ]
    if not logger_settings.get('redact_sensitive_headers', True):
        return dict(headers)
    if logger_settings.get('reveal_sensitive_prefix', 16) < 0:
        logger_settings['reveal_sensitive_prefix'] = 16
    return {key: safe_value(key, val) for (key, val) in headers}


def parse_header_string(data):
    if not isinstance(data, (str, bytes)):
        data = str(data)
    if isinstance(data, bytes):
        try:
            data = data.decode('ascii')
        except UnicodeDecodeError:
            return data.decode('utf-8', 'replace')
    try:
        unquoted = unquote(data, errors='strict')
    except UnicodeDecodeError:
        return data
    return unquoted


def http_log(args, kwargs, resp, body):
    if not logger.isEnabledFor(logging.INFO):
        return

    # create and log equivalent curl command
    string_parts = ['curl -i']
    for element in args:
        if element == 'HEAD':
            string_parts.append(' -I')
        elif element in ('GET', 'POST', 'PUT', 'PATCH', 'DELETE'):
            string_parts.append(' -X %s' % element)
        else:
            string_parts.append(' %s' % parse_header_string(element))
    if 'headers' in kwargs:
        headers = scrub_headers(kwargs['headers'])
        for element in headers:
            header = ' -H "%s: %s"' % (element, headers[element])
            string_parts.append(header)

    # log response as debug if good, or info if error
    if resp.status_code < 300:
        log_method = logger.debug
    else:
        log_method = logger.info

    log_method("REQ: %s", "".join(string_parts))
    log_method("RESP STATUS: %s %s", resp.status_code, resp.reason)
    log_method("RESP HEADERS: %s", scrub_headers(resp.headers))
    if body:
        if isinstance(body, bytes):
            body = body.decode('utf-8', 'replace')
        log_method("RESP BODY: %s", body)


class LowerKeyCaseInsensitiveDict(CaseInsensitiveDict):
    """
    CaseInsensitiveDict returning lower case keys for items()
    """

    def __iter__(self):
        return iter(self._store.keys())


def resp_header_dict(resp):
    resp_headers = LowerKeyCaseInsensitiveDict()
    for header, value in resp.headers.items():
        header = parse_header_string(header)
        resp_headers[header] = parse_header_string(value)
    return resp_headers


def store_response(resp, response_dict):
    """
    store information about an operation into a dict

    :param resp: an http response object containing the response
                 headers
    :param response_dict: a dict into which are placed the
       status, reason and a dict of lower-cased headers
    """
    if response_dict is not None:
        response_dict['status'] = resp.status_code
        response_dict['reason'] = resp.reason
        response_dict['headers'] = resp_header_dict(resp)


class HTTPConnection:
    def __init__(self, proxy=None, cacert=None, insecure=False,
                 cert=None, cert_key=None, default_user_agent=None,
                 timeout=None):
        """
        Wrap a requests session shared by every call a provider makes.

        :param proxy: proxy to connect through, if any; None by default; str
                      of the format 'http://127.0.0.1:8888' to set one
        :param cacert: A CA bundle file to use in verifying a TLS server
                       certificate.
        :param insecure: Allow to access servers without checking SSL certs.
                         The server's certificate will not be verified.
        :param cert: Client certificate file to connect on SSL server
                            requiring SSL client certificate.
        :param cert_key: Client certificate private key file.
        :param default_user_agent: Set the User-Agent header on every request.
                                   If set to None (default), the user agent
                                   will be "python-stackclient-<version>".
                                   This may be overridden on a per-request
                                   basis by explicitly setting the user-agent
                                   header on a call to request().
        :param timeout: socket read timeout value, passed directly to
                        the requests library.
        :raises ClientException: Unable to handle the proxy URL
        """
        self.requests_args = {}
        self.request_session = requests.Session()
        self.requests_args['verify'] = not insecure
        if cacert and not insecure:
            # verify requests parameter is used to pass the CA_BUNDLE file
            self.requests_args['verify'] = cacert
        if cert:
            if cert_key:
                self.requests_args['cert'] = cert, cert_key
            else:
                self.requests_args['cert'] = cert

        if proxy:
            proxy_parsed = urlparse(proxy)
            if not proxy_parsed.scheme:
                raise ClientException("Proxy's missing scheme")
            self.requests_args['proxies'] = {
                proxy_parsed.scheme: '%s://%s' % (
                    proxy_parsed.scheme, proxy_parsed.netloc
                )
            }
        if default_user_agent is None:
            default_user_agent = \
                'python-stackclient-%s' % stackclient_version.version_string
        self.default_user_agent = default_user_agent
        self.timeout = timeout

    def _request(self, *arg, **kwarg):
        """Final wrapper before requests call, to be patched in tests"""
        return self.request_session.request(*arg, **kwarg)

    def request(self, method, url, data=None, headers=None, timeout=None):
        """Set default headers, then call requests.request"""
        scheme = urlparse(url).scheme
        if scheme not in ('http', 'https'):
            raise ClientException('Unsupported scheme "%s" in url "%s"'
                                  % (scheme, url))
        headers = dict(headers or {})
        if 'user-agent' not in (k.lower() for k in headers):
            headers['User-Agent'] = self.default_user_agent
        kwargs = dict(self.requests_args)
        timeout = timeout or self.timeout
        if timeout:
            kwargs['timeout'] = timeout
        return self._request(method, url, headers=headers, data=data,
                             **kwargs)

    def close(self):
        self.request_session.close()


class EndpointOpts:
    """
    Describes the catalog entry a service client should be bound to.

    :param type: service type, e.g. ``network``. Filled in by the
                 service client constructor when left unset.
    :param name: service name, matched only when given.
    :param region: region name or region ID.
    :param availability: interface, one of ``public`` (default),
                         ``internal`` or ``admin``.
    :param aliases: extra service types accepted for ``type``.
    :param version: major API version the endpoint must serve; versioned
                    catalog URLs for another major version are skipped.
    """

    def __init__(self, type=None, name=None, region=None, availability=None,
                 aliases=None, version=None):
        self.type = type
        self.name = name
        self.region = region
        self.availability = availability
        self.aliases = list(aliases or [])
        self.version = version

    def apply_defaults(self, service_type):
        if not self.type:
            self.type = service_type
        if not self.aliases:
            self.aliases = [t for t in _SERVICE_TYPES.get_all_types(self.type)
                            if t != self.type]
        if not self.availability:
            self.availability = PUBLIC

    def is_empty(self):
        return not (self.type or self.name or self.region or
                    self.availability or self.aliases or self.version)

    def copy(self):
        return EndpointOpts(self.type, self.name, self.region,
                            self.availability, self.aliases, self.version)

    def __repr__(self):
        return ('EndpointOpts(type=%r, name=%r, region=%r, availability=%r, '
                'version=%r)' % (self.type, self.name, self.region,
                                 self.availability, self.version))


class Reauthenticator:
    """
    Strategy installed on a :class:`ProviderClient` that knows how to obtain
    a fresh token for it.
    """

    def reauthenticate(self, provider):
        """
        Authenticate again and install the new token on ``provider``.

        Implementations must publish the result with
        :meth:`ProviderClient.copy_token_from` or
        :meth:`ProviderClient.set_token_and_auth_result` so the swap is
        atomic.
        """
        raise NotImplementedError()


class _ReauthAttempt:
    """The outcome of one reauthentication run, seen by its waiters."""

    def __init__(self):
        self.done = False
        self.error = None


class ProviderClient:
    """
    Shared state for every service client talking to one cloud.

    Holds the current token together with the authentication result it came
    from (and so the service catalog), the endpoint locator used to build
    service clients, and the :class:`Reauthenticator` used when a request
    comes back with ``401 Unauthorized``.

    The token and auth result are only ever read and replaced together,
    under one lock. At most one reauthentication runs at a time; callers
    that need one while another is in flight wait for it and then reuse
    its outcome.
    """

    def __init__(self, identity_endpoint=None, identity_base=None,
                 http_conn=None, user_agent=None):
        self.identity_endpoint = identity_endpoint
        self.identity_base = identity_base
        self.http_conn = http_conn or HTTPConnection()
        self.user_agent = user_agent
        self.endpoint_locator = None
        self.reauthenticator = None
        self.throwaway = False

        self._cond = threading.Condition(threading.Lock())
        self._token = None
        self._auth_result = None
        self._state = UNAUTHENTICATED
        self._reauth_attempt = None

    @property
    def state(self):
        with self._cond:
            return self._state

    @property
    def token(self):
        with self._cond:
            return self._token

    @property
    def auth_result(self):
        with self._cond:
            return self._auth_result

    def get_auth_state(self):
        """:returns: ``(token, auth_result)`` read atomically"""
        with self._cond:
            return self._token, self._auth_result

    def _install(self, token, auth_result):
        # caller holds self._cond
        self._token = token
        self._auth_result = auth_result
        if self._state != REAUTHENTICATING:
            self._state = AUTHENTICATED if token else UNAUTHENTICATED

    def set_token(self, token):
        """Use ``token`` without any authentication result."""
        with self._cond:
            self._install(token, None)

    def set_token_and_auth_result(self, result):
        """
        Install the token and auth result of an identity response.

        :param result: an identity token result exposing ``token_id``, or
                       None to clear the current token
        """
        token = result.token_id if result is not None else None
        with self._cond:
            self._install(token, result)

    def copy_token_from(self, other):
        """Atomically take over the token and auth result of ``other``."""
        token, auth_result = other.get_auth_state()
        with self._cond:
            self._install(token, auth_result)

    def copy_for_reauth(self):
        """
        Build a disposable provider used to authenticate on behalf of this
        one. It shares the transport and endpoints but starts without a
        token and can never reauthenticate itself.
        """
        tac = ProviderClient(identity_endpoint=self.identity_endpoint,
                             identity_base=self.identity_base,
                             http_conn=self.http_conn,
                             user_agent=self.user_agent)
        tac.throwaway = True
        return tac

    def can_reauthenticate(self):
        return self.reauthenticator is not None and not self.throwaway

    def reauthenticate(self, previous_token=None):
        """
        Replace the current token using the installed reauthenticator.

        :param previous_token: the token a failed request was sent with. If
                               it has already been replaced by another
                               caller nothing is done.
        :raises ClientException: no reauthenticator is installed, or the
                                 reauthentication itself failed (possibly
                                 in another thread)
        """
        with self._cond:
            if self._state == REAUTHENTICATING:
                # Wait for this attempt only; another may start before we wake.
                attempt = self._reauth_attempt
                while not attempt.done:
                    self._cond.wait()
                if attempt.error is not None:
                    raise attempt.error
                return
            if previous_token is not None and previous_token != self._token:
                logger.debug('Token already replaced, not reauthenticating')
                return
            if not self.can_reauthenticate():
                raise ClientException('Reauthentication is not allowed '
                                      'for this client')
            previous_state = self._state
            self._state = REAUTHENTICATING
            attempt = self._reauth_attempt = _ReauthAttempt()

        logger.debug('Reauthenticating against %s', self.identity_endpoint)
        error = None
        try:
            self.reauthenticator.reauthenticate(self)
        except Exception as err:
            error = err
            raise
        finally:
            with self._cond:
                if error is None:
                    self._state = AUTHENTICATED
                else:
                    self._state = previous_state
                attempt.error = error
                attempt.done = True
                self._cond.notify_all()

    def _build_headers(self, token, has_body, more_headers, omit_headers):
        headers = {'Accept': 'application/json'}
        if has_body:
            headers['Content-Type'] = 'application/json'
        if self.user_agent:
            headers['User-Agent'] = self.user_agent
        if token:
            headers['X-Auth-Token'] = token
        if more_headers:
            headers.update(more_headers)
        for header in omit_headers or ():
            for key in list(headers):
                if key.lower() == header.lower():
                    del headers[key]
        return headers

    def _do_request(self, method, url, headers, data, ok_codes,
                    response_dict, timeout):
        resp = self.http_conn.request(method, url, data=data,
                                      headers=headers, timeout=timeout)
        body = resp.content
        http_log((url, method,), {'headers': headers}, resp, body)
        store_response(resp, response_dict)
        if resp.status_code not in ok_codes:
            raise ClientException.from_response(
                resp, '%s %s failed' % (method, url), body)
        return resp

    def request(self, method, url, json=None, data=None, ok_codes=None,
                more_headers=None, omit_headers=None, response_dict=None,
                timeout=None):
        """
        Issue an authenticated request.

        A ``401 Unauthorized`` answer makes the provider reauthenticate once
        and replay the request with the new token; any other failure, or a
        second 401, is raised as-is.

        :param method: HTTP method
        :param url: absolute URL
        :param json: object to send JSON encoded as the request body
        :param data: raw request body, used when ``json`` is None
        :param ok_codes: status codes treated as success; defaults depend on
                         the method
        :param more_headers: extra request headers
        :param omit_headers: names of default headers to leave out
        :param response_dict: an optional dictionary into which to place
                              the response - status, reason and headers
        :param timeout: per-request timeout passed to requests
        :returns: the ``requests.Response``
        :raises ClientException: unexpected response status
        :raises ReauthenticationError: a 401 could not be recovered from
        """
        method = method.upper()
        if ok_codes is None:
            ok_codes = DEFAULT_OK_CODES.get(method, (200,))
        if json is not None:
            data = jsonlib.dumps(json)
        retried_auth = False
        while True:
            token = self.token
            headers = self._build_headers(token, data is not None,
                                          more_headers, omit_headers)
            try:
                return self._do_request(method, url, headers, data,
                                        ok_codes, response_dict, timeout)
            except ClientException as err:
                if err.http_status != 401 or retried_auth or \
                        not self.can_reauthenticate():
                    raise
                retried_auth = True
                try:
                    self.reauthenticate(token)
                except Exception as reauth_err:
                    raise ReauthenticationError(
                        'Unable to reauthenticate after %s %s: %s'
                        % (method, url, reauth_err),
                        original=err, cause=reauth_err) from reauth_err

    def close(self):
        self.http_conn.close()


class ServiceClient:
    """
    A client bound to one service endpoint of a :class:`ProviderClient`.

    :param provider: the shared provider client
    :param endpoint: the service endpoint from the catalog, normalised to
                     end with a slash
    :param type: the service type, e.g. ``network``
    :param resource_base: base URL for resources if it differs from the
                          endpoint, e.g. ``<endpoint>v2.0/``
    :param more_headers: headers sent with every request
    """

    def __init__(self, provider, endpoint, type=None, resource_base=None,
                 more_headers=None):
        self.provider = provider
        self.endpoint = normalize_url(endpoint) if endpoint else endpoint
        self.type = type
        self.resource_base = resource_base
        self.more_headers = dict(more_headers or {})

    @property
    def resource_base_url(self):
        return self.resource_base or self.endpoint

    def service_url(self, *parts):
        return self.resource_base_url + '/'.join(parts)

    def request(self, method, url, **kwargs):
        headers = dict(self.more_headers)
        headers.update(kwargs.pop('more_headers', None) or {})
        return self.provider.request(method, url, more_headers=headers,
                                     **kwargs)

    def get(self, url, **kwargs):
        return self.request('GET', url, **kwargs)

    def post(self, url, json=None, **kwargs):
        return self.request('POST', url, json=json, **kwargs)

    def put(self, url, json=None, **kwargs):
        return self.request('PUT', url, json=json, **kwargs)

    def patch(self, url, json=None, **kwargs):
        return self.request('PATCH', url, json=json, **kwargs)

    def delete(self, url, **kwargs):
        return self.request('DELETE', url, **kwargs)

    def head(self, url, **kwargs):
        return self.request('HEAD', url, **kwargs)
