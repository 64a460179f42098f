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
Authentication plugin for keystoneauth backed by a provider client.

This lets a ``keystoneauth1.session.Session`` (and the clients built on
one) reuse the token, catalog and reauthentication of an already
authenticated :class:`~stackclient.client.ProviderClient`::

   provider = auth.authenticated_client(options)
   sess = session.Session(auth=ProviderAuthPlugin(provider))
   sess.get('/v2.0/subnets', endpoint_filter={'service_type': 'network'})
"""

import logging

from keystoneauth1 import discover
from keystoneauth1 import exceptions
from keystoneauth1 import plugin

from stackclient.client import EndpointOpts
from stackclient import exceptions as stack_exceptions

logger = logging.getLogger(__name__)


def _interface(interface):
    # keystoneauth accepts both "public" and the v2 style "publicURL".
    if not interface:
        return None
    if isinstance(interface, (list, tuple)):
        interface = interface[0]
    if interface.endswith('URL'):
        interface = interface[:-3]
    return interface


class ProviderAuthPlugin(plugin.BaseAuthPlugin):
    """A plugin that takes its token and endpoints from a provider client.

    :param provider: an authenticated
                     :class:`~stackclient.client.ProviderClient`
    """

    def __init__(self, provider):
        super(ProviderAuthPlugin, self).__init__()
        self.provider = provider

    def get_token(self, session, **kwargs):
        return self.provider.token

    def get_endpoint(self, session, service_type=None, interface=None,
                     region_name=None, service_name=None, version=None,
                     **kwargs):
        """Return the identity endpoint or a catalog endpoint.

        :raises keystoneauth1.exceptions.EndpointNotFound: no single
            endpoint in the catalog matches
        """
        if interface is plugin.AUTH_INTERFACE:
            return self.provider.identity_endpoint
        if not service_type:
            return None

        opts = EndpointOpts(name=service_name, region=region_name,
                            availability=_interface(interface))
        if version is not None:
            try:
                opts.version = discover.normalize_version_number(version)[0]
            except TypeError:
                logger.debug('Ignoring unparsable version %r', version)
        opts.apply_defaults(service_type)
        if self.provider.endpoint_locator is None:
            raise exceptions.EndpointNotFound(
                'No catalog available for %s' % service_type)
        try:
            return self.provider.endpoint_locator(opts)
        except stack_exceptions.EndpointNotFound as err:
            raise exceptions.EndpointNotFound(str(err))

    def invalidate(self):
        """Get a new token if the provider is able to.

        :returns: True when a new token was installed and the request
                  should be retried
        """
        if not self.provider.can_reauthenticate():
            return False
        self.provider.reauthenticate(self.provider.token)
        return True

    def get_user_id(self, session, **kwargs):
        return getattr(self.provider.auth_result, 'user_id', None)

    def get_project_id(self, session, **kwargs):
        return getattr(self.provider.auth_result, 'project_id', None)
