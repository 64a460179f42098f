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

import collections
import functools
import io
import json
import threading
import unittest
from unittest import mock

from requests import RequestException
from requests.structures import CaseInsensitiveDict
from urllib.parse import urlparse

from stackclient import client as c
from stackclient import shell as s

IDENTITY = 'http://keystone.example.com:5000/'
NETWORK = 'http://neutron.example.com:9696/'


class StubResponse(object):
    """
    Placeholder structure describing one canned response (status, body,
    headers). A dict or list body is sent JSON encoded.
    """

    def __init__(self, status=200, body='', headers=None):
        self.status = status
        self.body = body
        self.headers = headers or {}

    def __repr__(self):
        return '%s(%r, %r, %r)' % (self.__class__.__name__, self.status,
                                   self.body, self.headers)


class FakeRequest(object):
    def __init__(self, method, url):
        self.method = method
        self.url = url


class FakeResponse(object):
    """Just enough of ``requests.Response`` for the client code."""

    def __init__(self, stub, method, url):
        self.status_code = stub.status
        self.reason = 'Fake'
        self.headers = CaseInsensitiveDict(stub.headers)
        body = stub.body
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
            self.headers.setdefault('Content-Type', 'application/json')
        if isinstance(body, str):
            body = body.encode('utf-8')
        self.content = body
        self.request = FakeRequest(method, url)

    def json(self):
        return json.loads(self.content.decode('utf-8'))

    def __repr__(self):
        return 'FakeResponse(%r)' % self.status_code


class MockHttpTest(unittest.TestCase):
    """
    Patches ``HTTPConnection._request`` so that requests are answered from
    canned responses and recorded in ``self.request_log``.

    Queue responses with :meth:`set_responses`, or set ``self.on_request``
    to a callable ``(method, url, headers, body)`` returning a
    :class:`StubResponse` to answer by route (needed for threaded tests).
    """

    def setUp(self):
        super(MockHttpTest, self).setUp()
        self.request_log = []
        self.responses = collections.deque()
        self.on_request = None
        self._lock = threading.Lock()
        patcher = mock.patch.object(c.HTTPConnection, '_request',
                                    autospec=True,
                                    side_effect=self._fake_request)
        self.mock_request = patcher.start()
        self.addCleanup(patcher.stop)

    def set_responses(self, *responses):
        self.validateMockedRequestsConsumed()
        self.request_log = []
        self.responses = collections.deque(
            r if isinstance(r, StubResponse) else StubResponse(r)
            for r in responses)

    def _fake_request(self, conn, method, url, headers=None, data=None,
                      **kwargs):
        headers = CaseInsensitiveDict(headers or {})
        with self._lock:
            if self.on_request is not None:
                stub = None
            elif self.responses:
                stub = self.responses.popleft()
            else:
                self.fail('Unexpected %s request for %s' % (method, url))
            self.request_log.append({
                'method': method,
                'url': url,
                'parsed': urlparse(url),
                'headers': headers,
                'body': data,
                'json': json.loads(data) if data else None,
                'kwargs': kwargs,
            })
        if stub is None:
            stub = self.on_request(method, url, headers, data)
        if isinstance(stub, Exception):
            raise stub
        if stub.status <= 0:
            raise RequestException('connection failed')
        return FakeResponse(stub, method, url)

    def assert_request_equal(self, expected, real_request):
        method, url = expected[:2]
        self.assertEqual((method, url),
                         (real_request['method'], real_request['url']))
        if len(expected) > 2 and expected[2] is not None:
            self.assertEqual(expected[2], real_request['json'],
                             'Body mismatch for %s %s' % (method, url))
        if len(expected) > 3:
            for key, value in expected[3].items():
                self.assertEqual(
                    value, real_request['headers'].get(key),
                    'Header mismatch on %r for %s %s: %r' % (
                        key, method, url, real_request['headers']))

    def assertRequests(self, expected_requests):
        """
        Make sure some requests were made like you expected, provide a list of
        expected requests, typically in the form of [(method, url), ...]
        or [(method, url, json_body, headers), ...]
        """
        self.assertEqual(len(expected_requests), len(self.request_log),
                         'Expected %d requests, got %r' % (
                             len(expected_requests),
                             [(r['method'], r['url'])
                              for r in self.request_log]))
        for expected, real_request in zip(expected_requests,
                                          self.request_log):
            self.assert_request_equal(expected, real_request)

    def validateMockedRequestsConsumed(self):
        if self.responses:
            self.fail('Unused responses %r' % (list(self.responses),))

    def tearDown(self):
        self.validateMockedRequestsConsumed()
        super(MockHttpTest, self).tearDown()


class CaptureOutput(object):

    def __init__(self, suppress_systemexit=False):
        self._out = io.StringIO()
        self._err = io.StringIO()
        self.patchers = []

        WrappedOutputManager = functools.partial(s.OutputManager,
                                                 print_stream=self._out,
                                                 error_stream=self._err)

        if suppress_systemexit:
            self.patchers += [
                mock.patch('stackclient.shell.OutputManager.get_error_count',
                           return_value=0)
            ]

        self.patchers += [
            mock.patch('stackclient.shell.OutputManager',
                       WrappedOutputManager),
            mock.patch('sys.stdout', self._out),
            mock.patch('sys.stderr', self._err),
        ]

    def __enter__(self):
        for patcher in self.patchers:
            patcher.start()
        return self

    def __exit__(self, *args, **kwargs):
        for patcher in self.patchers:
            patcher.stop()

    @property
    def out(self):
        return self._out.getvalue()

    @property
    def err(self):
        return self._err.getvalue()

    def clear(self):
        for stream in (self._out, self._err):
            stream.truncate(0)
            stream.seek(0)

    # act like the string captured by stdout

    def __str__(self):
        return self.out

    def __eq__(self, other):
        return self.out == other

    def __ne__(self, other):
        return not self.__eq__(other)


def v3_catalog(network_url=NETWORK, region='RegionOne'):
    return [
        {'type': 'identity', 'name': 'keystone', 'id': 'id-1',
         'endpoints': [
             {'interface': 'public', 'region': region,
              'region_id': region, 'url': IDENTITY + 'v3/'},
         ]},
        {'type': 'network', 'name': 'neutron', 'id': 'net-1',
         'endpoints': [
             {'interface': 'public', 'region': region,
              'region_id': region, 'url': network_url},
             {'interface': 'internal', 'region': region,
              'region_id': region, 'url': 'http://10.0.0.1:9696/'},
         ]},
    ]


def v3_token(token_id='token-1', catalog=None, project_id='project-1'):
    """A canned ``201 Created`` answer to ``POST /v3/auth/tokens``."""
    body = {'token': {
        'methods': ['password'],
        'expires_at': '2030-01-01T00:00:00.000000Z',
        'issued_at': '2029-12-31T23:00:00.000000Z',
        'user': {'id': 'user-1', 'name': 'demo',
                 'domain': {'id': 'default', 'name': 'Default'}},
        'project': {'id': project_id, 'name': 'demo',
                    'domain': {'id': 'default', 'name': 'Default'}},
        'roles': [{'id': 'role-1', 'name': 'member'}],
        'catalog': v3_catalog() if catalog is None else catalog,
    }}
    return StubResponse(201, body, {'X-Subject-Token': token_id})


def v2_access(token_id='token-1', network_url=NETWORK):
    """A canned answer to ``POST /v2.0/tokens``."""
    return StubResponse(200, {'access': {
        'token': {'id': token_id, 'expires': '2030-01-01T00:00:00Z',
                  'tenant': {'id': 'tenant-1', 'name': 'demo'}},
        'user': {'id': 'user-1', 'name': 'demo'},
        'serviceCatalog': [
            {'type': 'network', 'name': 'neutron',
             'endpoints': [{'region': 'RegionOne',
                            'publicURL': network_url,
                            'internalURL': 'http://10.0.0.1:9696/',
                            'adminURL': 'http://10.0.0.2:9696/'}]},
        ],
    }})


def version_document(base=IDENTITY, v3_status='stable',
                     v2_status='deprecated'):
    """A canned ``300 Multiple Choices`` identity discovery document."""
    return StubResponse(300, {'versions': {'values': [
        {'id': 'v3.14', 'status': v3_status,
         'links': [{'rel': 'self', 'href': base + 'v3/'}]},
        {'id': 'v2.0', 'status': v2_status,
         'links': [{'rel': 'self', 'href': base + 'v2.0/'}]},
    ]}})
