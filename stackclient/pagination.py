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
Paging through list responses.

Networking list responses carry the next page as a link next to the
results::

   {"subnets": [...],
    "subnets_links": [{"rel": "next",
                       "href": "https://.../v2.0/subnets?marker=..."}]}

:class:`Pager` fetches one page at a time and follows those links until a
page is empty or has no ``next`` link.
"""

import logging

from stackclient.utils import parse_api_response

logger = logging.getLogger(__name__)


class LinkedPage:
    """
    One page of a list response whose next page is linked from the body.

    Subclasses set ``resource_key`` (e.g. ``subnets``) and may override
    :meth:`extract` to turn the raw dicts into objects.
    """

    resource_key = None

    def __init__(self, url, body, headers=None):
        self.url = url
        self.body = body or {}
        self.headers = headers or {}

    @property
    def links_key(self):
        return '%s_links' % self.resource_key

    def raw_items(self):
        return self.body.get(self.resource_key) or []

    def extract(self):
        return list(self.raw_items())

    def is_empty(self):
        return not self.raw_items()

    def next_page_url(self):
        for link in self.body.get(self.links_key) or []:
            if link.get('rel') == 'next':
                return link.get('href')
        return None


class Pager:
    """
    Iterate the pages of a list request.

    :param client: the :class:`~stackclient.client.ServiceClient` to use
    :param url: URL of the first page, query string included
    :param page_factory: called as ``page_factory(url, body, headers)`` to
                         wrap each response, typically a
                         :class:`LinkedPage` subclass
    :param response_dict: optional list; the response of every page fetched
                          is appended to it as a dict
    """

    def __init__(self, client, url, page_factory, response_dict=None):
        self.client = client
        self.url = url
        self.page_factory = page_factory
        self.response_dict = response_dict

    def _fetch(self, url):
        rd = {} if self.response_dict is not None else None
        resp = self.client.get(url, ok_codes=(200, 203), response_dict=rd)
        if rd is not None:
            self.response_dict.append(rd)
        body = parse_api_response(resp.headers, resp.content) or {}
        return self.page_factory(url, body, resp.headers)

    def iter_pages(self):
        url = self.url
        seen = set()
        while url:
            page = self._fetch(url)
            if page.is_empty():
                return
            yield page
            seen.add(url)
            url = page.next_page_url()
            if url in seen:
                logger.warning('Pagination loop detected at %s', url)
                return

    def __iter__(self):
        for page in self.iter_pages():
            for item in page.extract():
                yield item

    def all_items(self):
        return list(self)
