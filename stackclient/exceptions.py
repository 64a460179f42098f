# Copyright (c) 2010-2013 OpenStack, LLC.
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

import urllib.parse


class ClientException(Exception):

    def __init__(self, msg, http_scheme='', http_host='', http_port='',
                 http_path='', http_query='', http_status=None, http_reason='',
                 http_method='', http_response_content='',
                 http_response_headers=None):
        super(ClientException, self).__init__(msg)
        self.msg = msg
        self.http_scheme = http_scheme
        self.http_host = http_host
        self.http_port = http_port
        self.http_path = http_path
        self.http_query = http_query
        self.http_status = http_status
        self.http_reason = http_reason
        self.http_method = http_method
        self.http_response_content = http_response_content
        self.http_response_headers = http_response_headers

        self.request_id = None
        if self.http_response_headers:
            for header in ('X-Openstack-Request-Id', 'X-Compute-Request-Id',
                           'X-Trans-Id'):
                if header in self.http_response_headers:
                    self.request_id = self.http_response_headers[header]
                    break

    @classmethod
    def from_response(cls, resp, msg=None, body=None):
        msg = msg or '%s %s' % (resp.status_code, resp.reason)
        body = body or resp.content
        if isinstance(body, bytes):
            body = body.decode('utf-8', 'replace')
        parsed_url = urllib.parse.urlparse(resp.request.url)
        return cls(msg, parsed_url.scheme, parsed_url.hostname,
                   parsed_url.port, parsed_url.path, parsed_url.query,
                   resp.status_code, resp.reason, resp.request.method,
                   body, resp.headers)

    def __str__(self):
        a = self.msg
        b = ''
        if self.http_method:
            b += '%s ' % self.http_method
        if self.http_scheme:
            b += '%s://' % self.http_scheme
        if self.http_host:
            b += self.http_host
        if self.http_port:
            b += ':%s' % self.http_port
        if self.http_path:
            b += self.http_path
        if self.http_query:
            b += '?%s' % self.http_query
        if self.http_status:
            if b:
                b = '%s %s' % (b, self.http_status)
            else:
                b = str(self.http_status)
        if self.http_reason:
            if b:
                b = '%s %s' % (b, self.http_reason)
            else:
                b = '- %s' % self.http_reason
        if self.http_response_content:
            if len(self.http_response_content) <= 60:
                b += '   %s' % self.http_response_content
            else:
                b += '  [first 60 chars of response] %s' \
                    % self.http_response_content[:60]
        c = ''
        if self.request_id:
            c = ' (request-id: %s)' % self.request_id
        return b and '%s: %s%s' % (a, b, c) or (a + c)


class ConfigurationError(ClientException):
    """Options that can never work, raised before anything is retried."""


class VersionNegotiationError(ConfigurationError):
    """No usable identity API version could be chosen."""


class InvalidAuthOptions(ConfigurationError):
    """Credentials that were combined in an unsupported way."""


class EndpointNotFound(ClientException):
    """The service catalog holds no endpoint matching a query."""


class AmbiguousEndpoint(EndpointNotFound):

    def __init__(self, msg, urls=None):
        super(AmbiguousEndpoint, self).__init__(msg)
        self.urls = list(urls or [])


class ReauthenticationError(ClientException):

    def __init__(self, msg, original=None, cause=None):
        kwargs = {}
        if original is not None:
            kwargs = dict(
                http_scheme=original.http_scheme,
                http_host=original.http_host,
                http_port=original.http_port,
                http_path=original.http_path,
                http_query=original.http_query,
                http_status=original.http_status,
                http_reason=original.http_reason,
                http_method=original.http_method,
                http_response_headers=original.http_response_headers)
        super(ReauthenticationError, self).__init__(msg, **kwargs)
        self.original = original
        self.cause = cause
