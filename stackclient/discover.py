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
Identity API version negotiation.

An identity endpoint is either already versioned
(``https://keystone.example.com:5000/v3``), in which case it is used as-is,
or versionless (``https://keystone.example.com:5000/``), in which case the
discovery document served at its root is fetched::

   {"versions": {"values": [
       {"id": "v3.14", "status": "stable",
        "links": [{"rel": "self", "href": "https://.../v3/"}]},
       {"id": "v2.0", "status": "deprecated",
        "links": [{"rel": "self", "href": "https://.../v2.0/"}]}
   ]}}

and the best version this library understands is picked from it.
"""

import logging

from keystoneauth1 import discover

from stackclient.exceptions import VersionNegotiationError
from stackclient.utils import normalize_url, parse_api_response

logger = logging.getLogger(__name__)

GOOD_STATUSES = (discover.Status.CURRENT, discover.Status.SUPPORTED)


class Version:
    """
    An API version this library can speak.

    :param id: version identifier, e.g. ``v2.0`` or ``v3``
    :param priority: higher wins when several versions are usable
    :param suffix: path suffix identifying an already-versioned endpoint
    """

    def __init__(self, id, priority, suffix):
        self.id = id
        self.priority = priority
        self.suffix = suffix
        self.major = discover.normalize_version_number(id)[0]

    def matches(self, version_id):
        try:
            return discover.normalize_version_number(
                version_id)[0] == self.major
        except TypeError:
            return False

    def __repr__(self):
        return 'Version(%r, priority=%r)' % (self.id, self.priority)


def _version_values(body):
    versions = (body or {}).get('versions')
    if isinstance(versions, dict):
        versions = versions.get('values')
    if not isinstance(versions, list):
        return []
    return versions


def _self_link(value):
    href = ''
    for link in value.get('links') or []:
        if link.get('rel') == 'self' and link.get('href'):
            href = normalize_url(link['href'])
    return href


def choose_version(provider, recognized):
    """
    Pick the identity version and endpoint to authenticate against.

    :param provider: the :class:`~stackclient.client.ProviderClient`; its
                     ``identity_endpoint`` and ``identity_base`` are used
    :param recognized: list of :class:`Version` this library supports
    :returns: a tuple ``(version, endpoint)``
    :raises VersionNegotiationError: no recognized version is offered, or
                                     the chosen one has no endpoint
    :raises ClientException: the discovery document could not be fetched
    """
    identity_endpoint = normalize_url(provider.identity_endpoint)

    # A versioned endpoint needs no discovery round trip.
    for version in recognized:
        if identity_endpoint.endswith(version.suffix):
            logger.debug('Using versioned identity endpoint %s',
                         identity_endpoint)
            return version, identity_endpoint

    resp = provider.request('GET', provider.identity_base,
                            ok_codes=(200, 300))
    try:
        body = parse_api_response(resp.headers, resp.content)
    except ValueError:
        raise VersionNegotiationError(
            'Invalid version discovery document from %s'
            % provider.identity_base)

    highest = None
    endpoint = ''
    for value in _version_values(body):
        value_id = value.get('id', '')
        href = _self_link(value)
        for version in recognized:
            if not version.matches(value_id):
                continue
            # Prefer a version that exactly matches the provided endpoint.
            if href and href == identity_endpoint:
                return version, href
            status = discover.Status.normalize(value.get('status', ''))
            if status in GOOD_STATUSES:
                if highest is None or version.priority > highest.priority:
                    highest = version
                    endpoint = href

    if highest is None:
        raise VersionNegotiationError(
            'No supported version available from endpoint %s'
            % provider.identity_base)
    if not endpoint:
        raise VersionNegotiationError(
            'Endpoint missing in version %s response from %s'
            % (highest.id, provider.identity_base))
    logger.debug('Negotiated identity %s at %s', highest.id, endpoint)
    return highest, endpoint
