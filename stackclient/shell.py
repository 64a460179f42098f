#!/usr/bin/python -u
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

import argparse
import getpass
import json
import logging
import signal
import warnings

from os import environ, _exit as os_exit
from shlex import quote as sh_quote
from sys import argv as sys_argv, exit, stderr

import urllib3
from requests.exceptions import RequestException

from stackclient import auth
from stackclient import __version__ as client_version
from stackclient.catalog import ServiceCatalogV2
from stackclient.client import EndpointOpts, \
    logger_settings as client_logger_settings
from stackclient.exceptions import ClientException
from stackclient.networking.v2 import subnets
from stackclient.output import OutputManager
from stackclient.utils import config_true_value, parse_timeout

BASENAME = 'stack'
commands = ('auth', 'catalog', 'endpoint', 'subnet-list', 'subnet-show',
            'subnet-create', 'subnet-update', 'subnet-delete')


def immediate_exit(signum, frame):
    stderr.write(" Aborted\n")
    os_exit(2)


def _command_name(command):
    return command.replace('-', '_')


def get_provider(options):
    """Build and authenticate a provider client from the parsed options."""
    auth_options = options_to_auth(options)
    provider = auth.new_client(
        auth_options.identity_endpoint,
        insecure=options['insecure'],
        cacert=options['os_cacert'],
        cert=options['os_cert'],
        cert_key=options['os_key'],
        timeout=options['timeout'])
    version = options['auth_version']
    if version in ('2', '2.0'):
        auth.authenticate_v2(provider, auth_options)
    elif version == '3':
        auth.authenticate_v3(provider, auth_options)
    else:
        auth.authenticate(provider, auth_options)
    return provider


def options_to_auth(options):
    scope = None
    if options['os_system_scope'] == 'all':
        scope = auth.AuthScope(system=True)
    elif options['os_project_name'] and (
            options['os_project_domain_id'] or
            options['os_project_domain_name']):
        scope = auth.AuthScope(
            project_name=options['os_project_name'],
            domain_id=options['os_project_domain_id'],
            domain_name=options['os_project_domain_name'])
    token = options['os_auth_token']
    return auth.AuthOptions(
        identity_endpoint=options['os_auth_url'],
        username=options['os_username'],
        user_id=options['os_user_id'],
        password=options['os_password'],
        domain_id=options['os_user_domain_id'],
        domain_name=options['os_user_domain_name'],
        tenant_id=options['os_project_id'] or options['os_tenant_id'],
        tenant_name=options['os_project_name'] or options['os_tenant_name'],
        token_id=token,
        scope=scope,
        allow_reauth=not token,
        application_credential_id=options['os_application_credential_id'],
        application_credential_name=options[
            'os_application_credential_name'],
        application_credential_secret=options[
            'os_application_credential_secret'])


def endpoint_opts(options):
    return EndpointOpts(region=options['os_region_name'],
                        availability=options['os_interface'])


def get_network_client(options):
    return auth.new_network_v2(get_provider(options), endpoint_opts(options))


st_auth_options = ''

st_auth_help = '''
Authenticate and display the token as environment variables.

Optional arguments:
  -v, --verbose         Also show who the token was issued to and when it
                        expires.
'''.strip('\n')


def st_auth(parser, args, output_manager, return_parser=False):
    if return_parser:
        return parser

    (options, args) = parse_args(parser, args)
    provider = get_provider(options)
    token, result = provider.get_auth_state()
    output_manager.print_msg('export OS_AUTH_TOKEN=%s', sh_quote(token))
    if options['verbose'] > 1 and result is not None:
        output_manager.print_items([
            ('User', result.user_id),
            ('Project', result.project_id),
            ('Expires', result.expires_at),
        ], skip_missing=True)


st_catalog_options = ''

st_catalog_help = '''
List the service catalog the token was issued with.
'''.strip('\n')


def _catalog_rows(catalog):
    if isinstance(catalog, ServiceCatalogV2):
        for entry in catalog.entries:
            for endpoint in entry.endpoints:
                for interface in ('public', 'internal', 'admin'):
                    url = endpoint.url_for(interface)
                    if url:
                        yield (entry.type, entry.name, interface,
                               endpoint.region, url)
    else:
        for entry in catalog.entries:
            for endpoint in entry.endpoints:
                yield (entry.type, entry.name, endpoint.interface,
                       endpoint.region or endpoint.region_id, endpoint.url)


def st_catalog(parser, args, output_manager, return_parser=False):
    if return_parser:
        return parser

    (options, args) = parse_args(parser, args)
    provider = get_provider(options)
    catalog = getattr(provider.auth_result, 'service_catalog', None)
    if catalog is None:
        output_manager.error('No service catalog was returned')
        return
    for row in sorted(_catalog_rows(catalog),
                      key=lambda r: tuple(v or '' for v in r)):
        output_manager.print_msg(' '.join(v or '-' for v in row))


st_endpoint_options = '''[--service-name <name>] [--api-version <major>]
                    <service-type>
'''

st_endpoint_help = '''
Resolve the endpoint of a service from the catalog.

Positional arguments:
  <service-type>        Service type, e.g. network or compute.

Optional arguments:
  --service-name <name> Only match services with this name.
  --api-version <major> Only match endpoints of this major API version.
'''.strip('\n')


def st_endpoint(parser, args, output_manager, return_parser=False):
    parser.add_argument('--service-name', dest='service_name',
                        help='Only match services with this name.')
    parser.add_argument('--api-version', dest='service_version', type=int,
                        help='Only match endpoints of this major API '
                        'version.')

    if return_parser:
        return parser

    (options, args) = parse_args(parser, args)
    args = args[1:]
    if len(args) != 1:
        output_manager.error('Usage: %s endpoint %s\n%s', BASENAME,
                             st_endpoint_options, st_endpoint_help)
        return

    provider = get_provider(options)
    opts = endpoint_opts(options)
    opts.name = options['service_name']
    opts.version = options['service_version']
    opts.apply_defaults(args[0])
    output_manager.print_msg(provider.endpoint_locator(opts))


st_subnet_list_options = '''[--network-id <id>] [--name <name>]
                    [--cidr <cidr>] [--ip-version <4|6>]
                    [--limit <n>] [--marker <id>]
                    [--sort-key <key>] [--sort-dir <asc|desc>]
                    [--json]
'''

st_subnet_list_help = '''
List subnets.

Optional arguments:
  --network-id <id>     Only list subnets of this network.
  --name <name>         Only list subnets with this name.
  --cidr <cidr>         Only list subnets with this CIDR.
  --ip-version <4|6>    Only list subnets of this IP version.
  --limit <n>           Page size used when talking to the server.
  --marker <id>         Start listing after this subnet.
  --sort-key <key>      Sort by this attribute.
  --sort-dir <asc|desc> Sort direction.
  --json                Print the raw subnets as JSON.
'''.strip('\n')


def st_subnet_list(parser, args, output_manager, return_parser=False):
    parser.add_argument('--network-id', dest='network_id')
    parser.add_argument('--name', dest='name')
    parser.add_argument('--cidr', dest='cidr')
    parser.add_argument('--ip-version', dest='ip_version', type=int,
                        choices=(4, 6))
    parser.add_argument('--limit', dest='limit', type=int)
    parser.add_argument('--marker', dest='marker')
    parser.add_argument('--sort-key', dest='sort_key')
    parser.add_argument('--sort-dir', dest='sort_dir',
                        choices=('asc', 'desc'))
    parser.add_argument('--json', action='store_true', dest='json',
                        default=False, help='Print the raw subnets as JSON.')

    if return_parser:
        return parser

    (options, args) = parse_args(parser, args)
    list_opts = subnets.ListOpts(
        network_id=options['network_id'], name=options['name'],
        cidr=options['cidr'], ip_version=options['ip_version'],
        limit=options['limit'], marker=options['marker'],
        sort_key=options['sort_key'], sort_dir=options['sort_dir'])
    client = get_network_client(options)
    items = subnets.list_subnets(client, list_opts).all_items()
    if options['json']:
        output_manager.print_msg(json.dumps(
            [s.raw for s in items], indent=2, sort_keys=True))
        return
    for subnet in items:
        output_manager.print_msg('%s %s %s', subnet.id, subnet.cidr,
                                 subnet.name or '-')


def print_subnet(subnet, output_manager, as_json=False):
    if as_json:
        output_manager.print_msg(json.dumps(subnet.raw, indent=2,
                                            sort_keys=True))
        return
    output_manager.print_items([
        ('ID', subnet.id),
        ('Name', subnet.name),
        ('Network', subnet.network_id),
        ('CIDR', subnet.cidr),
        ('IP Version', subnet.ip_version),
        ('Gateway', subnet.gateway_ip or 'none'),
        ('DHCP', 'yes' if subnet.enable_dhcp else 'no'),
        ('Pools', ', '.join('%s-%s' % (p.start, p.end)
                            for p in subnet.allocation_pools)),
        ('DNS', ', '.join(subnet.dns_nameservers)),
        ('Routes', ', '.join('%s via %s' % (r.destination, r.nexthop)
                             for r in subnet.host_routes)),
        ('Project', subnet.project_id or subnet.tenant_id),
        ('Revision', subnet.revision_number),
    ], skip_missing=True)


st_subnet_show_options = '''[--json] <subnet-id>'''

st_subnet_show_help = '''
Show a subnet.

Positional arguments:
  <subnet-id>           ID of the subnet.

Optional arguments:
  --json                Print the raw subnet as JSON.
'''.strip('\n')


def st_subnet_show(parser, args, output_manager, return_parser=False):
    parser.add_argument('--json', action='store_true', dest='json',
                        default=False, help='Print the raw subnet as JSON.')

    if return_parser:
        return parser

    (options, args) = parse_args(parser, args)
    args = args[1:]
    if len(args) != 1:
        output_manager.error('Usage: %s subnet-show %s\n%s', BASENAME,
                             st_subnet_show_options, st_subnet_show_help)
        return
    client = get_network_client(options)
    print_subnet(subnets.get(client, args[0]), output_manager,
                 options['json'])


def _key_value_type(keys, factory):
    def parse(value):
        fields = {}
        for part in value.split(','):
            key, sep, val = part.partition('=')
            if not sep or key not in keys:
                break
            fields[key] = val
        else:
            if set(fields) == set(keys):
                return factory(*[fields[k] for k in keys])
        raise argparse.ArgumentTypeError(
            'expected %s' % ','.join('%s=<value>' % k for k in keys))
    return parse


def add_subnet_attribute_args(parser):
    parser.add_argument('--name', dest='name')
    parser.add_argument('--description', dest='description')
    parser.add_argument('--gateway-ip', dest='gateway_ip')
    parser.add_argument('--no-gateway', action='store_const',
                        dest='gateway_ip', const='',
                        help='Do not configure a gateway.')
    parser.add_argument('--enable-dhcp', action='store_const',
                        dest='enable_dhcp', const=True, default=None)
    parser.add_argument('--disable-dhcp', action='store_const',
                        dest='enable_dhcp', const=False)
    parser.add_argument('--dns-nameserver', action='append',
                        dest='dns_nameservers')
    parser.add_argument(
        '--allocation-pool', action='append', dest='allocation_pools',
        type=_key_value_type(('start', 'end'), subnets.AllocationPool))
    parser.add_argument(
        '--host-route', action='append', dest='host_routes',
        type=_key_value_type(('destination', 'nexthop'),
                             subnets.HostRoute))
    parser.add_argument('--json', action='store_true', dest='json',
                        default=False, help='Print the raw subnet as JSON.')


st_subnet_create_options = '''--network-id <id> [--cidr <cidr>]
                    [--ip-version <4|6>] [--name <name>]
                    [--description <text>]
                    [--gateway-ip <ip> | --no-gateway]
                    [--enable-dhcp | --disable-dhcp]
                    [--dns-nameserver <ip>]
                    [--allocation-pool start=<ip>,end=<ip>]
                    [--host-route destination=<cidr>,nexthop=<ip>]
                    [--subnetpool-id <id>] [--prefixlen <n>]
                    [--json]
'''

st_subnet_create_help = '''
Create a subnet.

Optional arguments:
  --network-id <id>     Network the subnet belongs to (required).
  --cidr <cidr>         Address range of the subnet.
  --ip-version <4|6>    IP version; 4 by default.
  --gateway-ip <ip>     Gateway address; picked by the server if omitted.
  --no-gateway          Create the subnet without a gateway.
  --dns-nameserver <ip> DNS server handed out by DHCP. Repeatable.
  --allocation-pool start=<ip>,end=<ip>
                        Addresses handed out by DHCP. Repeatable.
  --host-route destination=<cidr>,nexthop=<ip>
                        Static route handed out by DHCP. Repeatable.
  --subnetpool-id <id>  Allocate the CIDR from this subnet pool.
  --prefixlen <n>       Prefix length to allocate from the subnet pool.
  --json                Print the raw subnet as JSON.
'''.strip('\n')


def st_subnet_create(parser, args, output_manager, return_parser=False):
    parser.add_argument('--network-id', dest='network_id')
    parser.add_argument('--cidr', dest='cidr')
    parser.add_argument('--ip-version', dest='ip_version', type=int,
                        choices=(4, 6), default=4)
    parser.add_argument('--subnetpool-id', dest='subnetpool_id')
    parser.add_argument('--prefixlen', dest='prefixlen', type=int)
    add_subnet_attribute_args(parser)

    if return_parser:
        return parser

    (options, args) = parse_args(parser, args)
    if not options['network_id']:
        output_manager.error('Usage: %s subnet-create %s\n%s', BASENAME,
                             st_subnet_create_options, st_subnet_create_help)
        return
    create_opts = subnets.CreateOpts(
        options['network_id'], cidr=options['cidr'],
        ip_version=options['ip_version'], name=options['name'],
        description=options['description'],
        gateway_ip=options['gateway_ip'],
        enable_dhcp=options['enable_dhcp'],
        dns_nameservers=options['dns_nameservers'],
        allocation_pools=options['allocation_pools'],
        host_routes=options['host_routes'],
        subnetpool_id=options['subnetpool_id'],
        prefixlen=options['prefixlen'])
    client = get_network_client(options)
    print_subnet(subnets.create(client, create_opts), output_manager,
                 options['json'])


st_subnet_update_options = '''[--name <name>] [--description <text>]
                    [--gateway-ip <ip> | --no-gateway]
                    [--enable-dhcp | --disable-dhcp]
                    [--dns-nameserver <ip>]
                    [--allocation-pool start=<ip>,end=<ip>]
                    [--host-route destination=<cidr>,nexthop=<ip>]
                    [--revision-number <n>] [--json]
                    <subnet-id>
'''

st_subnet_update_help = '''
Update a subnet.

Positional arguments:
  <subnet-id>           ID of the subnet.

Optional arguments:
  --revision-number <n> Only update the subnet if it is still at this
                        revision.
  --json                Print the raw subnet as JSON.

Repeatable options replace the current list of values.
'''.strip('\n')


def st_subnet_update(parser, args, output_manager, return_parser=False):
    parser.add_argument('--revision-number', dest='revision_number',
                        type=int)
    add_subnet_attribute_args(parser)

    if return_parser:
        return parser

    (options, args) = parse_args(parser, args)
    args = args[1:]
    if len(args) != 1:
        output_manager.error('Usage: %s subnet-update %s\n%s', BASENAME,
                             st_subnet_update_options, st_subnet_update_help)
        return
    fields = dict((k, options[k]) for k in (
        'name', 'description', 'gateway_ip', 'enable_dhcp',
        'dns_nameservers', 'allocation_pools', 'host_routes')
        if options[k] is not None)
    update_opts = subnets.UpdateOpts(
        revision_number=options['revision_number'], **fields)
    client = get_network_client(options)
    print_subnet(subnets.update(client, args[0], update_opts),
                 output_manager, options['json'])


st_subnet_delete_options = '''<subnet-id> [<subnet-id>] [...]'''

st_subnet_delete_help = '''
Delete subnets.

Positional arguments:
  <subnet-id>           ID of a subnet to delete. Repeatable.
'''.strip('\n')


def st_subnet_delete(parser, args, output_manager, return_parser=False):
    if return_parser:
        return parser

    (options, args) = parse_args(parser, args)
    args = args[1:]
    if not args:
        output_manager.error('Usage: %s subnet-delete %s\n%s', BASENAME,
                             st_subnet_delete_options, st_subnet_delete_help)
        return
    client = get_network_client(options)
    for subnet_id in args:
        try:
            subnets.delete(client, subnet_id)
        except ClientException as err:
            output_manager.error('Error deleting subnet %s: %s',
                                 subnet_id, err)
        else:
            output_manager.print_msg('Deleted subnet %s', subnet_id)


class HelpFormatter(argparse.HelpFormatter):
    def _format_action_invocation(self, action):
        if not action.option_strings:
            default = self._get_default_metavar_for_positional(action)
            metavar, = self._metavar_formatter(action, default)(1)
            return metavar

        else:
            parts = []

            # if the Optional doesn't take a value, format is:
            #    -s, --long
            if action.nargs == 0:
                parts.extend(action.option_strings)

            # if the Optional takes a value, format is:
            #    -s=ARGS, --long=ARGS
            else:
                default = self._get_default_metavar_for_optional(action)
                args_string = self._format_args(action, default)
                for option_string in action.option_strings:
                    parts.append('%s=%s' % (option_string, args_string))

            return ', '.join(parts)


def prompt_for_password():
    """
    Prompt the user for a password.

    :raise SystemExit: if a password cannot be entered without it being echoed
        to the terminal.
    :return: the entered password.
    """
    with warnings.catch_warnings():
        warnings.filterwarnings('error', category=getpass.GetPassWarning,
                                append=True)
        try:
            # temporarily set signal handling back to default to avoid user
            # Ctrl-c leaving terminal in weird state
            signal.signal(signal.SIGINT, signal.SIG_DFL)
            return getpass.getpass()
        except EOFError:
            return None
        except getpass.GetPassWarning:
            exit('Input stream incompatible with --prompt option')
        finally:
            signal.signal(signal.SIGINT, immediate_exit)


def parse_args(parser, args, enforce_requires=True):
    options, args = parser.parse_known_args(args or ['-h'])
    options = vars(options)
    if enforce_requires and (options.get('debug') or options.get('info')):
        logging.getLogger("stackclient")
        if options.get('debug'):
            logging.basicConfig(level=logging.DEBUG)
            client_logger_settings['redact_sensitive_headers'] = False
        elif options.get('info'):
            logging.basicConfig(level=logging.INFO)

    if args and options.get('help'):
        _help = globals().get('st_%s_help' % _command_name(args[0]))
        _options = globals().get(
            'st_%s_options' % _command_name(args[0]), "\n")
        if _help:
            print("Usage: %s %s %s\n%s" % (BASENAME, args[0], _options, _help))
        else:
            print("no such command: %s" % args[0])
        exit()

    if enforce_requires and options['prompt']:
        options['os_password'] = prompt_for_password()

    if enforce_requires:
        if not options['os_auth_url']:
            exit('Authentication requires OS_AUTH_URL to be set or '
                 'overridden with --os-auth-url')
        if options['os_auth_token']:
            return options, args
        if options['os_application_credential_id'] or \
                options['os_application_credential_name']:
            if not options['os_application_credential_secret']:
                exit('Application credentials require '
                     'OS_APPLICATION_CREDENTIAL_SECRET to be set or '
                     'overridden with --os-application-credential-secret')
            return options, args
        if not (options['os_username'] or options['os_user_id']):
            exit('Authentication requires either OS_USERNAME or '
                 'OS_USER_ID to be set or overridden with '
                 '--os-username or --os-user-id respectively.')
        if not options['os_password']:
            exit('Authentication requires OS_PASSWORD to be set or '
                 'overridden with --os-password')
    return options, args


def add_default_args(parser):
    default_auth_version = None
    for k in ('OS_AUTH_VERSION', 'OS_IDENTITY_API_VERSION'):
        if environ.get(k):
            default_auth_version = environ[k]
            break

    parser.add_argument('-v', '--verbose', action='count', dest='verbose',
                        default=1, help='Print more info.')
    parser.add_argument('--debug', action='store_true', dest='debug',
                        default=False, help='Show the curl commands and '
                        'results of all http queries regardless of result '
                        'status.')
    parser.add_argument('--info', action='store_true', dest='info',
                        default=False, help='Show the curl commands and '
                        'results of all http queries which return an error.')
    parser.add_argument('-q', '--quiet', action='store_const', dest='verbose',
                        const=0, default=1, help='Suppress status output.')
    parser.add_argument('-V', '--auth-version', '--os-identity-api-version',
                        dest='auth_version',
                        default=default_auth_version,
                        type=str,
                        help='Identity API version to authenticate with, '
                             '2.0 or 3. Negotiated with the server when '
                             'unset. Defaults to env[OS_AUTH_VERSION] or '
                             'env[OS_IDENTITY_API_VERSION].')
    parser.add_argument('-T', '--timeout', type=parse_timeout, dest='timeout',
                        default=None,
                        help='Timeout in seconds to wait for response.')
    default_val = config_true_value(environ.get('STACKCLIENT_INSECURE'))
    parser.add_argument('--insecure',
                        action="store_true", dest="insecure",
                        default=default_val,
                        help='Allow stackclient to access servers without '
                             'having to verify the SSL certificate. '
                             'Defaults to env[STACKCLIENT_INSECURE] '
                             '(set to \'true\' to enable).')
    parser.add_argument('--prompt',
                        action='store_true', dest='prompt',
                        default=False,
                        help='Prompt user to enter a password which overrides '
                             'any password supplied via --os-password '
                             'or environment variables.')

    os_grp = parser.add_argument_group("OpenStack authentication options")
    for name, metavar, help_text in (
            ('username', '<auth-user-name>', 'OpenStack username.'),
            ('user-id', '<auth-user-id>', 'OpenStack user ID.'),
            ('user-domain-id', '<auth-user-domain-id>',
             'OpenStack user domain ID.'),
            ('user-domain-name', '<auth-user-domain-name>',
             'OpenStack user domain name.'),
            ('password', '<auth-password>', 'OpenStack password.'),
            ('tenant-id', '<auth-tenant-id>', 'OpenStack tenant ID.'),
            ('tenant-name', '<auth-tenant-name>', 'OpenStack tenant name.'),
            ('project-id', '<auth-project-id>', 'OpenStack project ID.'),
            ('project-name', '<auth-project-name>',
             'OpenStack project name.'),
            ('project-domain-id', '<auth-project-domain-id>',
             'OpenStack project domain ID.'),
            ('project-domain-name', '<auth-project-domain-name>',
             'OpenStack project domain name.'),
            ('system-scope', '<system-scope>',
             'Request a system scoped token; only "all" is supported.'),
            ('auth-url', '<auth-url>', 'OpenStack auth URL.'),
            ('application-credential-id',
             '<auth-application-credential-id>',
             'OpenStack application credential id.'),
            ('application-credential-name',
             '<auth-application-credential-name>',
             'OpenStack application credential name.'),
            ('application-credential-secret',
             '<auth-application-credential-secret>',
             'OpenStack application credential secret.'),
            ('auth-token', '<auth-token>',
             'OpenStack token. Passed through without being rescoped '
             'unless a project is given as well.'),
            ('region-name', '<region-name>', 'OpenStack region name.'),
            ('interface', '<interface>',
             'Endpoint interface: public (default), internal or admin.'),
            ('cacert', '<ca-certificate>',
             'Specify a CA bundle file to use in verifying a TLS (https) '
             'server certificate.'),
            ('cert', '<client-certificate-file>',
             'Specify a client certificate file (for client auth).'),
            ('key', '<client-certificate-key-file>',
             'Specify a client certificate key file (for client auth).')):
        env_name = 'OS_%s' % name.upper().replace('-', '_')
        dest = 'os_%s' % name.replace('-', '_')
        os_grp.add_argument('--os-%s' % name, metavar=metavar, dest=dest,
                            default=environ.get(env_name),
                            help='%s Defaults to env[%s].'
                            % (help_text, env_name))
        os_grp.add_argument('--os_%s' % name.replace('-', '_'), dest=dest,
                            help=argparse.SUPPRESS)


def main(arguments=None):
    argv = sys_argv if arguments is None else arguments

    parser = argparse.ArgumentParser(
        add_help=False, formatter_class=HelpFormatter, usage='''
%(prog)s [--version] [--help] [--verbose] [--debug] [--info] [--quiet]
             [--auth-version <auth_version> |
                 --os-identity-api-version <auth_version> ]
             [--timeout <seconds>] [--insecure] [--prompt]
             [--os-username <auth-user-name>]
             [--os-password <auth-password>]
             [--os-user-id <auth-user-id>]
             [--os-user-domain-id <auth-user-domain-id>]
             [--os-user-domain-name <auth-user-domain-name>]
             [--os-tenant-id <auth-tenant-id>]
             [--os-tenant-name <auth-tenant-name>]
             [--os-project-id <auth-project-id>]
             [--os-project-name <auth-project-name>]
             [--os-project-domain-id <auth-project-domain-id>]
             [--os-project-domain-name <auth-project-domain-name>]
             [--os-system-scope <system-scope>]
             [--os-auth-url <auth-url>]
             [--os-auth-token <auth-token>]
             [--os-application-credential-id
                   <auth-application-credential-id>]
             [--os-application-credential-name
                   <auth-application-credential-name>]
             [--os-application-credential-secret
                   <auth-application-credential-secret>]
             [--os-region-name <region-name>]
             [--os-interface <interface>]
             [--os-cacert <ca-certificate>]
             [--os-cert <client-certificate-file>]
             [--os-key <client-certificate-key-file>]
             <subcommand> [--help] [<subcommand options>]

Command-line interface to OpenStack identity and networking.

Positional arguments:
  <subcommand>
    auth                 Display the token as environment variables.
    catalog              List the service catalog.
    endpoint             Resolve the endpoint of a service.
    subnet-list          List subnets.
    subnet-show          Show a subnet.
    subnet-create        Create a subnet.
    subnet-update        Update a subnet.
    subnet-delete        Delete subnets.

Examples:
  %(prog)s subnet-list --help

  %(prog)s --os-auth-url https://api.example.com:5000/ \\
      --os-project-name project1 --os-project-domain-name domain1 \\
      --os-username user --os-user-domain-name domain1 \\
      --os-password password subnet-list --network-id <network-id>

  %(prog)s --os-auth-url https://api.example.com:5000/v2.0 \\
      --os-tenant-name tenant --os-username user \\
      --os-password password catalog

  %(prog)s --os-auth-url https://api.example.com:5000/v3 \\
      --os-auth-token 6ee5eb33efad4e45ab46806eac010566 \\
      endpoint network
'''.strip('\n'))

    version = client_version
    parser.add_argument('--version', action='version',
                        version='python-stackclient %s' % version)
    parser.add_argument('-h', '--help', action='store_true')

    add_default_args(parser)

    options, args = parse_args(parser, argv[1:], enforce_requires=False)

    if options['help']:
        parser.print_help()
        exit()

    if not args or args[0] not in commands:
        parser.print_usage()
        if args:
            exit('no such command: %s' % args[0])
        exit()

    signal.signal(signal.SIGINT, immediate_exit)

    with OutputManager() as output:
        command = _command_name(args[0])
        parser.usage = globals()['st_%s_help' % command]
        if options['insecure']:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
        try:
            globals()['st_%s' % command](parser, argv[1:], output)
        except ClientException as err:
            output.error(str(err))
        except RequestException as err:
            output.error(str(err))

    if output.get_error_count() > 0:
        exit(1)


if __name__ == '__main__':
    main()
