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
Service catalogs returned by the identity service, and endpoint lookup.

A v3 token carries its catalog as::

   "catalog": [{
       "type": "network",
       "name": "neutron",
       "id": "...",
       "endpoints": [{
           "interface": "public",
           "region": "RegionOne",
           "region_id": "RegionOne",
           "url": "http://neutron.example.com:9696"
       }, ...]
   }, ...]

while a v2 access document lists one endpoint per region, with a URL per
interface (``publicURL``, ``internalURL``, ``adminURL``).

Lookups never guess: a query matching no endpoint raises
:class:`EndpointNotFound`, and a query matching more than one distinct URL
raises :class:`AmbiguousEndpoint`, so the answer does not depend on the
order of the catalog.
"""

from urllib.parse import urlparse

from keystoneauth1 import discover

from stackclient.client import AVAILABILITIES, ADMIN, INTERNAL, PUBLIC
from stackclient.exceptions import AmbiguousEndpoint, EndpointNotFound
from stackclient.utils import normalize_url


class Endpoint:
    def __init__(self, url, interface=None, region=None, region_id=None,
                 id=None):
        self.url = url
        self.interface = interface
        self.region = region
        self.region_id = region_id
        self.id = id

    @classmethod
    def from_dict(cls, data):
        return cls(data.get('url'), interface=data.get('interface'),
                   region=data.get('region'),
                   region_id=data.get('region_id'), id=data.get('id'))

    def __repr__(self):
        return 'Endpoint(%r, interface=%r, region=%r)' % (
            self.url, self.interface, self.region)


class V2Endpoint:
    def __init__(self, region=None, public_url=None, internal_url=None,
                 admin_url=None, tenant_id=None, version_id=None):
        self.region = region
        self.public_url = public_url
        self.internal_url = internal_url
        self.admin_url = admin_url
        self.tenant_id = tenant_id
        self.version_id = version_id

    @classmethod
    def from_dict(cls, data):
        return cls(region=data.get('region'),
                   public_url=data.get('publicURL'),
                   internal_url=data.get('internalURL'),
                   admin_url=data.get('adminURL'),
                   tenant_id=data.get('tenantId'),
                   version_id=data.get('versionId'))

    def url_for(self, availability):
        return {
            PUBLIC: self.public_url,
            INTERNAL: self.internal_url,
            ADMIN: self.admin_url,
        }.get(availability)


class CatalogEntry:
    def __init__(self, type, name=None, id=None, endpoints=None):
        self.type = type
        self.name = name
        self.id = id
        self.endpoints = list(endpoints or [])

    def __repr__(self):
        return 'CatalogEntry(type=%r, name=%r, endpoints=%d)' % (
            self.type, self.name, len(self.endpoints))


class ServiceCatalogV3:
    def __init__(self, entries=None):
        self.entries = list(entries or [])

    @classmethod
    def from_list(cls, catalog):
        return cls([
            CatalogEntry(entry.get('type'), name=entry.get('name'),
                         id=entry.get('id'),
                         endpoints=[Endpoint.from_dict(e)
                                    for e in entry.get('endpoints', [])])
            for entry in catalog or []])

    def url_for(self, opts):
        return v3_endpoint_url(self, opts)


class ServiceCatalogV2:
    def __init__(self, entries=None):
        self.entries = list(entries or [])

    @classmethod
    def from_list(cls, catalog):
        return cls([
            CatalogEntry(entry.get('type'), name=entry.get('name'),
                         endpoints=[V2Endpoint.from_dict(e)
                                    for e in entry.get('endpoints', [])])
            for entry in catalog or []])

    def url_for(self, opts):
        return v2_endpoint_url(self, opts)


def _url_major_version(url):
    """Major version found in the last ``v<N>`` path segment, if any."""
    for part in reversed(urlparse(url).path.split('/')):
        if not part.startswith('v'):
            continue
        try:
            return discover.normalize_version_number(part)[0]
        except TypeError:
            continue
    return None


def _type_matches(entry, opts):
    if entry.type != opts.type and entry.type not in opts.aliases:
        return False
    return not opts.name or entry.name == opts.name


def _version_matches(url, opts):
    if not opts.version or not url:
        return True
    major = _url_major_version(url)
    return major is None or major == opts.version


def _not_found(opts):
    msg = '%s endpoint for %s service' % (opts.availability, opts.type)
    if opts.name:
        msg += ' named %s' % opts.name
    if opts.region:
        msg += ' in %s region' % opts.region
    return EndpointNotFound(msg + ' not found')


def _select(urls, opts):
    distinct = sorted(set(urls))
    if len(distinct) > 1:
        raise AmbiguousEndpoint(
            'Discovered %d matching endpoints for %s service: %s' % (
                len(distinct), opts.type, ', '.join(distinct)),
            urls=distinct)
    if not distinct:
        raise _not_found(opts)
    return normalize_url(distinct[0])


def _check_availability(opts):
    if opts.availability not in AVAILABILITIES:
        raise EndpointNotFound(
            'Unexpected availability in endpoint query: %s'
            % opts.availability)


def v3_endpoint_url(catalog, opts):
    """
    Find the URL of the endpoint matching ``opts`` in a v3 catalog.

    :param catalog: a :class:`ServiceCatalogV3`
    :param opts: an :class:`~stackclient.client.EndpointOpts` with defaults
                 applied
    :returns: the endpoint URL ending with a slash
    :raises EndpointNotFound: no endpoint matched
    :raises AmbiguousEndpoint: several different endpoints matched
    """
    _check_availability(opts)
    urls = []
    for entry in catalog.entries:
        if not _type_matches(entry, opts):
            continue
        for endpoint in entry.endpoints:
            if endpoint.interface != opts.availability:
                continue
            if opts.region and opts.region not in (endpoint.region,
                                                   endpoint.region_id):
                continue
            if not endpoint.url or not _version_matches(endpoint.url, opts):
                continue
            urls.append(endpoint.url)
    return _select(urls, opts)


def v2_endpoint_url(catalog, opts):
    """
    Find the URL of the endpoint matching ``opts`` in a v2 catalog.

    Same contract as :func:`v3_endpoint_url`; the interface picks which of
    the endpoint's URLs is returned.
    """
    _check_availability(opts)
    urls = []
    for entry in catalog.entries:
        if not _type_matches(entry, opts):
            continue
        for endpoint in entry.endpoints:
            if opts.region and endpoint.region != opts.region:
                continue
            url = endpoint.url_for(opts.availability)
            if not url or not _version_matches(url, opts):
                continue
            urls.append(url)
    return _select(urls, opts)


class CatalogEndpointLocator:
    """
    Endpoint locator installed on a provider after authentication.

    The catalog is read from the provider's current auth result on every
    lookup, so a catalog refreshed by reauthentication is used right away.
    """

    def __init__(self, provider):
        self.provider = provider

    def __call__(self, opts):
        auth_result = self.provider.auth_result
        catalog = getattr(auth_result, 'service_catalog', None)
        if catalog is None:
            raise EndpointNotFound('No service catalog available; '
                                   'authenticate first')
        return catalog.url_for(opts)
