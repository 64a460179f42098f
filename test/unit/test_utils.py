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

import unittest
from unittest import mock

from stackclient import utils as u


class TestConfigTrueValue(unittest.TestCase):

    def test_TRUE_VALUES(self):
        for v in u.TRUE_VALUES:
            self.assertEqual(v, v.lower())

    @mock.patch.object(u, 'TRUE_VALUES', 'hello world'.split())
    def test_config_true_value(self):
        for val in 'hello world HELLO WORLD'.split():
            self.assertIs(True, u.config_true_value(val))
        self.assertIs(True, u.config_true_value(True))
        self.assertIs(False, u.config_true_value('foo'))
        self.assertIs(False, u.config_true_value(False))
        self.assertIs(False, u.config_true_value(None))


class TestNormalizeUrl(unittest.TestCase):

    def test_adds_trailing_slash(self):
        self.assertEqual('http://example.com/v3/',
                         u.normalize_url('http://example.com/v3'))

    def test_keeps_trailing_slash(self):
        self.assertEqual('http://example.com/v3/',
                         u.normalize_url('http://example.com/v3/'))


class TestBaseEndpoint(unittest.TestCase):

    def test_versionless(self):
        for url, expected in (
                ('http://example.com:5000/', 'http://example.com:5000/'),
                ('http://example.com:5000', 'http://example.com:5000'),
                ('https://example.com/identity/',
                 'https://example.com/identity/')):
            self.assertEqual(expected, u.base_endpoint(url))

    def test_strips_version_and_rest_of_path(self):
        for url in ('http://example.com:5000/v3',
                    'http://example.com:5000/v3/',
                    'http://example.com:5000/v3/auth/tokens',
                    'http://example.com:5000/v2.0/'):
            self.assertEqual('http://example.com:5000/', u.base_endpoint(url))

    def test_keeps_path_prefix(self):
        self.assertEqual(
            'http://example.com/identity/',
            u.base_endpoint('http://example.com/identity/v3/'))

    def test_drops_query_and_fragment(self):
        self.assertEqual(
            'http://example.com:5000/',
            u.base_endpoint('http://example.com:5000/v3/?foo=bar#frag'))

    def test_invalid(self):
        for url in ('', 'example.com/v3', '/v3/'):
            self.assertRaises(ValueError, u.base_endpoint, url)


class TestBuildQueryString(unittest.TestCase):

    def test_empty(self):
        self.assertEqual('', u.build_query_string({}))
        self.assertEqual('', u.build_query_string([('name', None),
                                                   ('marker', '')]))

    def test_keeps_order_of_pairs(self):
        self.assertEqual(
            '?limit=10&marker=abc&sort_key=name&sort_dir=asc',
            u.build_query_string([('limit', 10), ('marker', 'abc'),
                                  ('sort_key', 'name'),
                                  ('sort_dir', 'asc')]))

    def test_booleans(self):
        self.assertEqual('?enable_dhcp=true&shared=false',
                         u.build_query_string([('enable_dhcp', True),
                                               ('shared', False)]))

    def test_lists_repeat(self):
        self.assertEqual('?fields=id&fields=name',
                         u.build_query_string({'fields': ['id', 'name']}))

    def test_quoting(self):
        self.assertEqual('?name=a+b%2Fc',
                         u.build_query_string({'name': 'a b/c'}))

    def test_zero_is_kept(self):
        self.assertEqual('?revision_number=0',
                         u.build_query_string({'revision_number': 0}))


class TestBuildRequestBody(unittest.TestCase):

    def test_drops_none(self):
        self.assertEqual({'name': 'x', 'enable_dhcp': False},
                         u.build_request_body({'name': 'x', 'cidr': None,
                                               'enable_dhcp': False}))

    def test_parent(self):
        self.assertEqual({'subnet': {'name': 'x'}},
                         u.build_request_body({'name': 'x'}, 'subnet'))


class TestParseApiResponse(unittest.TestCase):

    def test_empty(self):
        self.assertIsNone(u.parse_api_response({}, b''))

    def test_json(self):
        self.assertEqual({'a': 1},
                         u.parse_api_response({}, b'{"a": 1}'))

    def test_charset(self):
        body = '{"name": "été"}'.encode('latin-1')
        headers = {'content-type': 'application/json; charset=latin-1'}
        self.assertEqual({'name': 'été'},
                         u.parse_api_response(headers, body))


class TestParseTimeout(unittest.TestCase):

    def test_seconds(self):
        self.assertEqual(30.0, u.parse_timeout('30'))
        self.assertEqual(1.5, u.parse_timeout('1.5s'))

    def test_suffixes(self):
        self.assertEqual(120.0, u.parse_timeout('2m'))
        self.assertEqual(3600.0, u.parse_timeout('1h'))
        self.assertEqual(86400.0, u.parse_timeout('1d'))

    def test_invalid(self):
        self.assertRaises(ValueError, u.parse_timeout, 'soon')
