# -*- encoding: utf-8 -*-
# Copyright (c) 2012 Rackspace
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
OpenStack Python client binding: identity authentication, service catalog
lookup and networking subnets.
"""
from stackclient.auth import AuthOptions, AuthScope, \
    auth_options_from_env, authenticate, authenticated_client, new_client
from stackclient.client import EndpointOpts, HTTPConnection, \
    ProviderClient, ServiceClient
from stackclient.exceptions import ClientException
from stackclient import version

__version__ = version.version_string
