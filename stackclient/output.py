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

import sys

from concurrent.futures import ThreadPoolExecutor


class OutputManager:
    """
    Serializes what the ``stack`` command prints.

    Used as a context manager. Messages go through one single-threaded pool
    per stream, so lines printed while a provider reauthenticates in another
    thread come out whole and in order; leaving the context waits for both
    pools to drain.

    :param print_stream: where :meth:`print_msg` writes; ``sys.stdout`` by
                         default
    :param error_stream: where :meth:`error` writes; ``sys.stderr`` by
                         default
    """
    DEFAULT_OFFSET = 14

    def __init__(self, print_stream=None, error_stream=None):
        self.streams = {
            'out': (print_stream or sys.stdout,
                    ThreadPoolExecutor(max_workers=1)),
            'err': (error_stream or sys.stderr,
                    ThreadPoolExecutor(max_workers=1)),
        }
        self.error_count = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        for name in ('err', 'out'):
            self.streams[name][1].shutdown(wait=True)

    def _submit(self, name, msg, fmt_args):
        stream, pool = self.streams[name]
        if fmt_args:
            msg = msg % fmt_args
        pool.submit(print, msg, file=stream)

    def print_msg(self, msg, *fmt_args):
        self._submit('out', msg, fmt_args)

    def print_items(self, items, offset=DEFAULT_OFFSET, skip_missing=False):
        """Print ``(label, value)`` pairs with the labels right-aligned."""
        for label, value in items:
            if skip_missing and not value:
                continue
            self.print_msg(('%*s: %s' % (offset, label, value)).rstrip())

    def error(self, msg, *fmt_args):
        self.error_count += 1
        self._submit('err', msg, fmt_args)

    def get_error_count(self):
        return self.error_count
