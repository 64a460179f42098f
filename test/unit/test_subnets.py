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

import json
import unittest

from .utils import MockHttpTest, StubResponse, NETWORK

from stackclient import client as c
from stackclient.exceptions import ClientException
from stackclient.networking.v2 import subnets

SUBNETS = NETWORK + 'v2.0/subnets'


def subnet_dict(subnet_id='subnet-1', **kwargs):
    data = {
        'id': subnet_id,
        'network_id': 'net-1',
        'name': 'private-subnet',
        'description': '',
        'ip_version': 4,
        'cidr': '10.0.0.0/24',
        'gateway_ip': '10.0.0.1',
        'dns_nameservers': [],
        'allocation_pools': [{'start': '10.0.0.2', 'end': '10.0.0.254'}],
        'host_routes': [],
        'enable_dhcp': True,
        'tenant_id': 'project-1',
        'project_id': 'project-1',
        'ipv6_address_mode': None,
        'ipv6_ra_mode': None,
        'subnetpool_id': None,
        'service_types': [],
        'tags': ['blue'],
        'revision_number': 2,
    }
    data.update(kwargs)
    return data


class TestListOpts(unittest.TestCase):

    def test_empty(self):
        self.assertEqual('', subnets.ListOpts().to_query_string())

    def test_query_string(self):
        opts = subnets.ListOpts(limit=2, marker='subnet-1', sort_key='name',
                                sort_dir='asc', enable_dhcp=True,
                                network_id='net-1', name='')
        self.assertEqual(
            '?enable_dhcp=true&network_id=net-1&limit=2&marker=subnet-1'
            '&sort_key=name&sort_dir=asc', opts.to_query_string())

    def test_tag_filters(self):
        opts = subnets.ListOpts(tags_any='blue', not_tags='red',
                                revision_number=0, ip_version=6)
        self.assertEqual(
            '?ip_version=6&tags-any=blue&not-tags=red&revision_number=0',
            opts.to_query_string())

    def test_unknown_filter(self):
        self.assertRaises(TypeError, subnets.ListOpts, colour='blue')


class TestCreateOpts(unittest.TestCase):

    def test_network_id_required(self):
        self.assertRaises(ValueError, subnets.CreateOpts, None)
        self.assertRaises(ValueError, subnets.CreateOpts, '')

    def test_minimal(self):
        self.assertEqual(
            {'subnet': {'network_id': 'net-1', 'cidr': '10.0.0.0/24',
                        'ip_version': 4}},
            subnets.CreateOpts('net-1', cidr='10.0.0.0/24',
                               ip_version=4).to_request_body())

    def test_full(self):
        opts = subnets.CreateOpts(
            'net-1', cidr='10.0.0.0/24', ip_version=4, name='',
            enable_dhcp=False, dns_nameservers=['8.8.8.8'],
            allocation_pools=[subnets.AllocationPool('10.0.0.2',
                                                     '10.0.0.50')],
            host_routes=[{'destination': '0.0.0.0/0',
                          'nexthop': '10.0.0.254'}],
            service_types=[], tenant_id='')
        self.assertEqual({'subnet': {
            'network_id': 'net-1',
            'cidr': '10.0.0.0/24',
            'ip_version': 4,
            'enable_dhcp': False,
            'dns_nameservers': ['8.8.8.8'],
            'allocation_pools': [{'start': '10.0.0.2', 'end': '10.0.0.50'}],
            'host_routes': [{'destination': '0.0.0.0/0',
                             'nexthop': '10.0.0.254'}],
        }}, opts.to_request_body())

    def test_gateway(self):
        body = subnets.CreateOpts('net-1').to_request_body()
        self.assertNotIn('gateway_ip', body['subnet'])
        body = subnets.CreateOpts('net-1',
                                  gateway_ip='').to_request_body()
        self.assertIsNone(body['subnet']['gateway_ip'])
        body = subnets.CreateOpts('net-1',
                                  gateway_ip='10.0.0.1').to_request_body()
        self.assertEqual('10.0.0.1', body['subnet']['gateway_ip'])


class TestUpdateOpts(unittest.TestCase):

    def test_only_given_fields(self):
        self.assertEqual({'subnet': {}},
                         subnets.UpdateOpts().to_request_body())
        self.assertEqual({'subnet': {'name': 'new'}},
                         subnets.UpdateOpts(name='new').to_request_body())

    def test_clearing(self):
        opts = subnets.UpdateOpts(dns_nameservers=[], host_routes=[],
                                  gateway_ip='', description='')
        self.assertEqual({'subnet': {'dns_nameservers': [],
                                     'host_routes': [],
                                     'gateway_ip': None,
                                     'description': ''}},
                         opts.to_request_body())

    def test_pools(self):
        opts = subnets.UpdateOpts(allocation_pools=[
            subnets.AllocationPool('10.0.0.10', '10.0.0.20')])
        self.assertEqual([{'start': '10.0.0.10', 'end': '10.0.0.20'}],
                         opts.to_request_body()['subnet']['allocation_pools'])

    def test_headers(self):
        self.assertEqual({}, subnets.UpdateOpts(name='x').to_headers())
        self.assertEqual({'If-Match': 'revision_number=0'},
                         subnets.UpdateOpts(revision_number=0).to_headers())

    def test_unknown_field(self):
        self.assertRaises(TypeError, subnets.UpdateOpts, cidr='10.0.0.0/8')


class TestSubnets(MockHttpTest):

    def setUp(self):
        super(TestSubnets, self).setUp()
        provider = c.ProviderClient()
        provider.set_token('token')
        self.client = c.ServiceClient(provider, NETWORK, type='network',
                                      resource_base=NETWORK + 'v2.0/')

    def test_list(self):
        next_url = SUBNETS + '?limit=1&marker=subnet-1'
        self.set_responses(
            StubResponse(200, {
                'subnets': [subnet_dict('subnet-1')],
                'subnets_links': [{'rel': 'next', 'href': next_url}]}),
            StubResponse(200, {'subnets': [subnet_dict('subnet-2')]}))
        pager = subnets.list_subnets(self.client, subnets.ListOpts(limit=1))
        found = pager.all_items()
        self.assertEqual(['subnet-1', 'subnet-2'], [s.id for s in found])
        self.assertIsInstance(found[0], subnets.Subnet)
        self.assertRequests([
            ('GET', SUBNETS + '?limit=1', None, {'X-Auth-Token': 'token'}),
            ('GET', next_url),
        ])

    def test_list_without_opts(self):
        self.set_responses(StubResponse(200, {'subnets': []}))
        self.assertEqual([], subnets.list_subnets(self.client).all_items())
        self.assertRequests([('GET', SUBNETS)])

    def test_get(self):
        self.set_responses(StubResponse(200, {'subnet': subnet_dict()}))
        subnet = subnets.get(self.client, 'subnet-1')
        self.assertRequests([('GET', SUBNETS + '/subnet-1')])
        self.assertEqual('subnet-1', subnet.id)
        self.assertEqual('net-1', subnet.network_id)
        self.assertEqual(4, subnet.ip_version)
        self.assertEqual('10.0.0.1', subnet.gateway_ip)
        self.assertEqual([subnets.AllocationPool('10.0.0.2', '10.0.0.254')],
                         subnet.allocation_pools)
        self.assertEqual(2, subnet.revision_number)
        self.assertEqual(['blue'], subnet.tags)
        self.assertEqual(subnet_dict(), subnet.raw)

    def test_get_honours_charset(self):
        body = json.dumps({'subnet': subnet_dict(name='r\u00e9seau')},
                          ensure_ascii=False).encode('latin-1')
        self.set_responses(StubResponse(200, body, {
            'Content-Type': 'application/json; charset=latin-1'}))
        subnet = subnets.get(self.client, 'subnet-1')
        self.assertEqual('r\u00e9seau', subnet.name)

    def test_get_not_found(self):
        self.set_responses(StubResponse(404, {'NeutronError': {
            'type': 'SubnetNotFound', 'message': 'Subnet x not found'}}))
        with self.assertRaises(ClientException) as ctx:
            subnets.get(self.client, 'x')
        self.assertEqual(404, ctx.exception.http_status)

    def test_create(self):
        self.set_responses(StubResponse(201, {'subnet': subnet_dict(
            gateway_ip=None)}))
        opts = subnets.CreateOpts('net-1', cidr='10.0.0.0/24', ip_version=4,
                                  gateway_ip='')
        subnet = subnets.create(self.client, opts)
        self.assertRequests([
            ('POST', SUBNETS, {'subnet': {'network_id': 'net-1',
                                          'cidr': '10.0.0.0/24',
                                          'ip_version': 4,
                                          'gateway_ip': None}},
             {'Content-Type': 'application/json'}),
        ])
        self.assertIsNone(subnet.gateway_ip)

    def test_create_unexpected_status(self):
        self.set_responses(StubResponse(200, {'subnet': subnet_dict()}))
        self.assertRaises(ClientException, subnets.create, self.client,
                          subnets.CreateOpts('net-1'))

    def test_update(self):
        self.set_responses(StubResponse(200, {'subnet': subnet_dict(
            name='renamed', revision_number=3)}))
        opts = subnets.UpdateOpts(revision_number=2, name='renamed')
        subnet = subnets.update(self.client, 'subnet-1', opts)
        self.assertRequests([
            ('PUT', SUBNETS + '/subnet-1', {'subnet': {'name': 'renamed'}},
             {'If-Match': 'revision_number=2'}),
        ])
        self.assertEqual('renamed', subnet.name)
        self.assertEqual(3, subnet.revision_number)

    def test_update_without_revision(self):
        self.set_responses(StubResponse(200, {'subnet': subnet_dict()}))
        subnets.update(self.client, 'subnet-1',
                       subnets.UpdateOpts(enable_dhcp=False))
        self.assertNotIn('If-Match', self.request_log[0]['headers'])
        self.assertEqual({'subnet': {'enable_dhcp': False}},
                         self.request_log[0]['json'])

    def test_update_revision_mismatch(self):
        self.set_responses(412)
        with self.assertRaises(ClientException) as ctx:
            subnets.update(self.client, 'subnet-1',
                           subnets.UpdateOpts(revision_number=1, name='x'))
        self.assertEqual(412, ctx.exception.http_status)

    def test_delete(self):
        self.set_responses(204)
        self.assertIsNone(subnets.delete(self.client, 'subnet-1'))
        self.assertRequests([('DELETE', SUBNETS + '/subnet-1')])

    def test_delete_in_use(self):
        self.set_responses(409)
        with self.assertRaises(ClientException) as ctx:
            subnets.delete(self.client, 'subnet-1')
        self.assertEqual(409, ctx.exception.http_status)
