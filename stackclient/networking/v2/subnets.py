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
Networking v2 subnets.

All functions take a network :class:`~stackclient.client.ServiceClient`
as built by :func:`stackclient.auth.new_network_v2`, whose resource base
already ends with ``v2.0/``.
"""

from stackclient.pagination import LinkedPage, Pager
from stackclient.utils import build_query_string, build_request_body, \
    parse_api_response

# Sentinel for update fields that are not being changed, so that None can
# still be sent where the API accepts null.
UNSET = object()


class ListOpts:
    """
    Filters, sorting and paging for :func:`list_subnets`.

    Unset (None) filters are left out of the query. ``sort_dir`` is ``asc``
    or ``desc``; ``limit`` and ``marker`` page through the results.
    """

    _query_fields = (
        ('name', 'name'),
        ('description', 'description'),
        ('dns_publish_fixed_ip', 'dns_publish_fixed_ip'),
        ('enable_dhcp', 'enable_dhcp'),
        ('network_id', 'network_id'),
        ('tenant_id', 'tenant_id'),
        ('project_id', 'project_id'),
        ('ip_version', 'ip_version'),
        ('gateway_ip', 'gateway_ip'),
        ('cidr', 'cidr'),
        ('ipv6_address_mode', 'ipv6_address_mode'),
        ('ipv6_ra_mode', 'ipv6_ra_mode'),
        ('id', 'id'),
        ('subnetpool_id', 'subnetpool_id'),
        ('limit', 'limit'),
        ('marker', 'marker'),
        ('sort_key', 'sort_key'),
        ('sort_dir', 'sort_dir'),
        ('tags', 'tags'),
        ('tags_any', 'tags-any'),
        ('not_tags', 'not-tags'),
        ('not_tags_any', 'not-tags-any'),
        ('revision_number', 'revision_number'),
        ('segment_id', 'segment_id'),
    )

    def __init__(self, **kwargs):
        known = set(attr for attr, _ in self._query_fields)
        unknown = set(kwargs) - known
        if unknown:
            raise TypeError('Unknown subnet list filter(s): %s'
                            % ', '.join(sorted(unknown)))
        for attr in known:
            setattr(self, attr, kwargs.get(attr))

    def to_query_string(self):
        return build_query_string(
            [(param, getattr(self, attr))
             for attr, param in self._query_fields])


class AllocationPool:
    """A range of addresses handed out by DHCP."""

    def __init__(self, start, end):
        self.start = start
        self.end = end

    def to_dict(self):
        return {'start': self.start, 'end': self.end}

    @classmethod
    def from_dict(cls, data):
        return cls(data.get('start'), data.get('end'))

    def __eq__(self, other):
        return isinstance(other, AllocationPool) and \
            (self.start, self.end) == (other.start, other.end)

    def __repr__(self):
        return 'AllocationPool(%r, %r)' % (self.start, self.end)


class HostRoute:
    """A static route pushed to hosts by DHCP."""

    def __init__(self, destination, nexthop):
        self.destination = destination
        self.nexthop = nexthop

    def to_dict(self):
        return {'destination': self.destination, 'nexthop': self.nexthop}

    @classmethod
    def from_dict(cls, data):
        return cls(data.get('destination'), data.get('nexthop'))

    def __eq__(self, other):
        return isinstance(other, HostRoute) and \
            (self.destination, self.nexthop) == \
            (other.destination, other.nexthop)

    def __repr__(self):
        return 'HostRoute(%r, %r)' % (self.destination, self.nexthop)


def _dicts(items):
    if items is None:
        return None
    return [i.to_dict() if hasattr(i, 'to_dict') else dict(i)
            for i in items]


def _gateway(fields):
    # An empty gateway_ip means "no gateway", which the API spells null.
    if fields.get('gateway_ip') == '':
        fields['gateway_ip'] = None
        return True
    return False


class CreateOpts:
    """
    Attributes of a new subnet. ``network_id`` is required.

    ``gateway_ip`` left as None lets the server pick a default gateway;
    ``''`` creates the subnet without a gateway.
    """

    def __init__(self, network_id, cidr=None, name=None, description=None,
                 tenant_id=None, project_id=None, allocation_pools=None,
                 gateway_ip=None, ip_version=None, enable_dhcp=None,
                 dns_nameservers=None, dns_publish_fixed_ip=None,
                 service_types=None, host_routes=None,
                 ipv6_address_mode=None, ipv6_ra_mode=None,
                 subnetpool_id=None, prefixlen=None, segment_id=None):
        if not network_id:
            raise ValueError('network_id is required to create a subnet')
        self.network_id = network_id
        self.cidr = cidr
        self.name = name
        self.description = description
        self.tenant_id = tenant_id
        self.project_id = project_id
        self.allocation_pools = allocation_pools
        self.gateway_ip = gateway_ip
        self.ip_version = ip_version
        self.enable_dhcp = enable_dhcp
        self.dns_nameservers = dns_nameservers
        self.dns_publish_fixed_ip = dns_publish_fixed_ip
        self.service_types = service_types
        self.host_routes = host_routes
        self.ipv6_address_mode = ipv6_address_mode
        self.ipv6_ra_mode = ipv6_ra_mode
        self.subnetpool_id = subnetpool_id
        self.prefixlen = prefixlen
        self.segment_id = segment_id

    def to_request_body(self):
        fields = dict(vars(self))
        fields['allocation_pools'] = _dicts(self.allocation_pools) or None
        fields['host_routes'] = _dicts(self.host_routes) or None
        fields['dns_nameservers'] = self.dns_nameservers or None
        fields['service_types'] = self.service_types or None
        for key in ('cidr', 'name', 'description', 'tenant_id',
                    'project_id', 'ipv6_address_mode', 'ipv6_ra_mode',
                    'subnetpool_id', 'segment_id'):
            if fields[key] == '':
                fields[key] = None
        no_gateway = _gateway(fields)
        body = build_request_body(fields, 'subnet')
        if no_gateway:
            body['subnet']['gateway_ip'] = None
        return body


class UpdateOpts:
    """
    Changes to an existing subnet; only the fields given are sent.

    ``gateway_ip=''`` removes the gateway. Lists replace the current value,
    so an empty list clears it. ``revision_number`` makes the update
    conditional: it fails with ``412 Precondition Failed`` if the subnet
    was modified in the meantime.
    """

    _body_fields = ('name', 'description', 'allocation_pools',
                    'gateway_ip', 'dns_nameservers', 'dns_publish_fixed_ip',
                    'service_types', 'host_routes', 'enable_dhcp',
                    'segment_id')

    def __init__(self, revision_number=None, **kwargs):
        unknown = set(kwargs) - set(self._body_fields)
        if unknown:
            raise TypeError('Unknown subnet update field(s): %s'
                            % ', '.join(sorted(unknown)))
        for field in self._body_fields:
            setattr(self, field, kwargs.get(field, UNSET))
        self.revision_number = revision_number

    def to_request_body(self):
        fields = {}
        for field in self._body_fields:
            value = getattr(self, field)
            if value is UNSET or value is None:
                continue
            if field in ('allocation_pools', 'host_routes'):
                value = _dicts(value)
            fields[field] = value
        no_gateway = _gateway(fields)
        body = build_request_body(fields, 'subnet')
        if no_gateway:
            body['subnet']['gateway_ip'] = None
        return body

    def to_headers(self):
        if self.revision_number is None:
            return {}
        return {'If-Match': 'revision_number=%s' % self.revision_number}


class Subnet:
    """A subnet as returned by the networking API."""

    def __init__(self, data):
        self.raw = data
        self.id = data.get('id')
        self.network_id = data.get('network_id')
        self.name = data.get('name')
        self.description = data.get('description')
        self.ip_version = data.get('ip_version')
        self.cidr = data.get('cidr')
        self.gateway_ip = data.get('gateway_ip')
        self.dns_nameservers = data.get('dns_nameservers') or []
        self.dns_publish_fixed_ip = data.get('dns_publish_fixed_ip')
        self.service_types = data.get('service_types') or []
        self.allocation_pools = [AllocationPool.from_dict(p) for p in
                                 data.get('allocation_pools') or []]
        self.host_routes = [HostRoute.from_dict(r) for r in
                            data.get('host_routes') or []]
        self.enable_dhcp = data.get('enable_dhcp')
        self.tenant_id = data.get('tenant_id')
        self.project_id = data.get('project_id')
        self.ipv6_address_mode = data.get('ipv6_address_mode')
        self.ipv6_ra_mode = data.get('ipv6_ra_mode')
        self.subnetpool_id = data.get('subnetpool_id')
        self.tags = data.get('tags') or []
        self.revision_number = data.get('revision_number')
        self.segment_id = data.get('segment_id')

    def __repr__(self):
        return 'Subnet(id=%r, name=%r, cidr=%r)' % (self.id, self.name,
                                                     self.cidr)


class SubnetPage(LinkedPage):
    resource_key = 'subnets'

    def extract(self):
        return [Subnet(s) for s in self.raw_items()]


def _extract(resp):
    return Subnet(parse_api_response(resp.headers, resp.content)['subnet'])


def list_subnets(client, opts=None, response_dict=None):
    """
    List subnets visible to the caller.

    :param client: network service client
    :param opts: optional :class:`ListOpts`
    :param response_dict: optional list collecting one response dict per
                          page fetched
    :returns: a :class:`~stackclient.pagination.Pager` yielding
              :class:`Subnet` objects
    """
    url = client.service_url('subnets')
    if opts is not None:
        url += opts.to_query_string()
    return Pager(client, url, SubnetPage, response_dict=response_dict)


def get(client, subnet_id, response_dict=None):
    """
    Get a subnet.

    :returns: a :class:`Subnet`
    :raises ClientException: HTTP GET request failed
    """
    resp = client.get(client.service_url('subnets', subnet_id),
                      response_dict=response_dict)
    return _extract(resp)


def create(client, opts, response_dict=None):
    """
    Create a subnet.

    :param opts: a :class:`CreateOpts`
    :returns: the new :class:`Subnet`
    :raises ClientException: HTTP POST request failed
    """
    resp = client.post(client.service_url('subnets'),
                       json=opts.to_request_body(),
                       response_dict=response_dict)
    return _extract(resp)


def update(client, subnet_id, opts, response_dict=None):
    """
    Update a subnet.

    :param opts: an :class:`UpdateOpts`
    :returns: the updated :class:`Subnet`
    :raises ClientException: HTTP PUT request failed, including
                             ``412`` on a revision number mismatch
    """
    resp = client.put(client.service_url('subnets', subnet_id),
                      json=opts.to_request_body(),
                      more_headers=opts.to_headers(), ok_codes=(200, 201),
                      response_dict=response_dict)
    return _extract(resp)


def delete(client, subnet_id, response_dict=None):
    """
    Delete a subnet.

    :raises ClientException: HTTP DELETE request failed
    """
    client.delete(client.service_url('subnets', subnet_id),
                  response_dict=response_dict)
