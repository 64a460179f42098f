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
"""Miscellaneous utility functions for use with OpenStack APIs."""
import json
import re

from urllib.parse import urlencode, urlparse, urlunparse

TRUE_VALUES = set(('true', '1', 'yes', 'on', 't', 'y'))

# Matches the first version-looking path segment, e.g. "v2.0/" or "v3".
VERSION_SEGMENT = re.compile(r'v[0-9.]+/?')


def config_true_value(value):
    """
    Returns True if the value is either True or a string in TRUE_VALUES.
    Returns False otherwise.
    """
    return value is True or \
        (isinstance(value, str) and value.lower() in TRUE_VALUES)


def normalize_url(url):
    """Make sure a URL ends with a slash so relative paths join onto it."""
    if not url.endswith('/'):
        return url + '/'
    return url


def base_endpoint(endpoint):
    """
    Strip the version (and anything after it) from an endpoint URL.

    ``http://example.com:5000/identity/v3/auth`` becomes
    ``http://example.com:5000/identity/``. Query and fragment are dropped.

    :param endpoint: an absolute URL
    :returns: the versionless base of the URL
    :raises ValueError: the URL has no scheme or host
    """
    parsed = urlparse(endpoint)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError('Invalid endpoint URL %r' % endpoint)
    path = parsed.path
    match = VERSION_SEGMENT.search(path)
    if match:
        path = path[:match.start()]
    return urlunparse((parsed.scheme, parsed.netloc, path, '', '', ''))


def _query_value(value):
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def build_query_string(params):
    """
    Build a ``?key=value`` query string from an iterable of pairs or a dict.

    Pairs keep their order. ``None`` and empty strings are skipped so unset
    filters never reach the server; lists are repeated once per element.

    :returns: the query string including the leading ``?``, or ``''``
    """
    if isinstance(params, dict):
        params = params.items()
    query = []
    for key, value in params:
        if value is None or value == '':
            continue
        if isinstance(value, (list, tuple)):
            query.extend((key, _query_value(v)) for v in value)
        else:
            query.append((key, _query_value(value)))
    if not query:
        return ''
    return '?' + urlencode(query)


def build_request_body(fields, parent=None):
    """Drop unset (``None``) fields and optionally wrap them in ``parent``."""
    body = dict((k, v) for k, v in fields.items() if v is not None)
    if parent:
        return {parent: body}
    return body


def parse_api_response(headers, body):
    if not body:
        return None
    charset = 'utf-8'
    content_type = headers.get('content-type', '')
    if '; charset=' in content_type:
        charset = content_type.split('; charset=', 1)[1].split(';', 1)[0]

    if isinstance(body, bytes):
        body = body.decode(charset)
    return json.loads(body)


def parse_timeout(value):
    """
    Parse a timeout such as ``30``, ``1.5s``, ``2m`` or ``1h`` into seconds.

    :raises ValueError: the value is not a number with an optional
                        ``s``, ``m``, ``h`` or ``d`` suffix
    """
    multipliers = {'s': 1, 'm': 60, 'h': 60 * 60, 'd': 24 * 60 * 60}
    value = value.strip()
    multiplier = 1
    if value and value[-1].lower() in multipliers:
        multiplier = multipliers[value[-1].lower()]
        value = value[:-1]
    return float(value) * multiplier
