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

import unittest

from keystoneauth1 import exceptions as ksa_exceptions
from keystoneauth1 import plugin

from .utils import IDENTITY, NETWORK, v3_catalog

from stackclient import client as c
from stackclient import ksa
from stackclient.catalog import CatalogEndpointLocator
from stackclient.identity.v3 import tokens as tokens3


class SwapReauthenticator(c.Reauthenticator):

    def reauthenticate(self, provider):
        tac = provider.copy_for_reauth()
        tac.set_token_and_auth_result(_token('token-2'))
        provider.copy_token_from(tac)


def _token(token_id, catalog=None):
    return tokens3.Token(token_id, {
        'methods': ['password'],
        'user': {'id': 'user-1'},
        'project': {'id': 'project-1'},
        'catalog': v3_catalog() if catalog is None else catalog,
    })


class TestProviderAuthPlugin(unittest.TestCase):

    def setUp(self):
        self.provider = c.ProviderClient(identity_endpoint=IDENTITY + 'v3/',
                                         identity_base=IDENTITY)
        self.provider.set_token_and_auth_result(_token('token-1'))
        self.provider.endpoint_locator = CatalogEndpointLocator(
            self.provider)
        self.plugin = ksa.ProviderAuthPlugin(self.provider)

    def test_token_and_headers(self):
        self.assertEqual('token-1', self.plugin.get_token(None))
        self.assertEqual({'X-Auth-Token': 'token-1'},
                         self.plugin.get_headers(None))

    def test_auth_endpoint(self):
        self.assertEqual(IDENTITY + 'v3/', self.plugin.get_endpoint(
            None, interface=plugin.AUTH_INTERFACE))

    def test_no_service_type(self):
        self.assertIsNone(self.plugin.get_endpoint(None))

    def test_catalog_endpoint(self):
        self.assertEqual(NETWORK, self.plugin.get_endpoint(
            None, service_type='network'))
        self.assertEqual('http://10.0.0.1:9696/', self.plugin.get_endpoint(
            None, service_type='network', interface='internalURL'))
        self.assertEqual('http://10.0.0.1:9696/', self.plugin.get_endpoint(
            None, service_type='network', interface=['internal', 'public'],
            region_name='RegionOne', version='2.0'))

    def test_endpoint_not_found(self):
        for kwargs in ({'service_type': 'dns'},
                       {'service_type': 'network', 'interface': 'admin'},
                       {'service_type': 'network', 'region_name': 'Nope'}):
            self.assertRaises(ksa_exceptions.EndpointNotFound,
                              self.plugin.get_endpoint, None, **kwargs)

    def test_no_locator(self):
        self.provider.endpoint_locator = None
        self.assertRaises(ksa_exceptions.EndpointNotFound,
                          self.plugin.get_endpoint, None,
                          service_type='network')

    def test_ids(self):
        self.assertEqual('user-1', self.plugin.get_user_id(None))
        self.assertEqual('project-1', self.plugin.get_project_id(None))
        self.provider.set_token('bare')
        self.assertIsNone(self.plugin.get_user_id(None))

    def test_invalidate(self):
        self.assertFalse(self.plugin.invalidate())
        self.assertEqual('token-1', self.provider.token)

        self.provider.reauthenticator = SwapReauthenticator()
        self.assertTrue(self.plugin.invalidate())
        self.assertEqual('token-2', self.plugin.get_token(None))
