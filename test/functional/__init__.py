# Copyright (c) 2014 Christian Schwede <christian.schwede@enovance.com>
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

import configparser
import os

TEST_CONFIG = None


def _load_config(force_reload=False):
    global TEST_CONFIG
    if not force_reload and TEST_CONFIG is not None:
        return TEST_CONFIG

    config_file = os.environ.get('STACKCLIENT_TEST_CONFIG_FILE',
                                 '/etc/stackclient/test.conf')
    parser = configparser.ConfigParser({'region': '', 'insecure': 'false'})
    parser.read(config_file)
    conf = {}
    if parser.has_section('func_test'):
        conf['auth_url'] = parser.get('func_test', 'auth_url')
        conf['username'] = parser.get('func_test', 'username')
        conf['password'] = parser.get('func_test', 'password')
        conf['project_name'] = parser.get('func_test', 'project_name')
        conf['insecure'] = parser.getboolean('func_test', 'insecure')
        conf['region'] = parser.get('func_test', 'region') or None

        try:
            conf['cacert'] = parser.get('func_test', 'cacert')
        except configparser.NoOptionError:
            conf['cacert'] = None

        for option in ('user_domain_name', 'project_domain_name'):
            try:
                conf[option] = parser.get('func_test', option)
            except configparser.NoOptionError:
                conf[option] = 'Default'

        # Subnet tests need a network they are allowed to create subnets on
        try:
            conf['network_id'] = parser.get('func_test', 'network_id')
        except configparser.NoOptionError:
            conf['network_id'] = None

        TEST_CONFIG = conf


try:
    _load_config()
except configparser.NoOptionError:
    TEST_CONFIG = None  # sentinel used in test setup
