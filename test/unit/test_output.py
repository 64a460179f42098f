# Copyright (c) 2010-2013 OpenStack, LLC.
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

import io
import sys
import threading
import unittest

from stackclient import output


class TestOutputManager(unittest.TestCase):

    def test_default_streams(self):
        with output.OutputManager() as manager:
            self.assertIs(sys.stdout, manager.streams['out'][0])
            self.assertIs(sys.stderr, manager.streams['err'][0])

    def test_printers(self):
        out_stream = io.StringIO()
        err_stream = io.StringIO()

        with output.OutputManager(print_stream=out_stream,
                                  error_stream=err_stream) as manager:
            manager.print_msg('one-argument')
            manager.print_msg('one %s, %d fish', 'fish', 88)
            manager.error('I have %d problems, but a %s is not one',
                          99, 'تت')
            manager.error('100%')
            manager.print_items([
                ('ID', 'subnet-1'),
                ('Name', ''),
                ('Gateway', None),
            ], skip_missing=True)
            manager.print_items([('Name', '')], offset=6)

        self.assertEqual('one-argument\n'
                         'one fish, 88 fish\n'
                         '            ID: subnet-1\n'
                         '  Name:\n', out_stream.getvalue())
        self.assertEqual('I have 99 problems, but a تت is not one\n'
                         '100%\n', err_stream.getvalue())
        self.assertEqual(2, manager.get_error_count())

    def test_threads_do_not_interleave(self):
        out_stream = io.StringIO()

        def worker(manager, n):
            for i in range(20):
                manager.print_msg('worker %d line %d', n, i)

        with output.OutputManager(print_stream=out_stream) as manager:
            threads = [threading.Thread(target=worker, args=(manager, n))
                       for n in range(4)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

        lines = out_stream.getvalue().splitlines()
        self.assertEqual(80, len(lines))
        for n in range(4):
            mine = [line for line in lines
                    if line.startswith('worker %d ' % n)]
            self.assertEqual(['worker %d line %d' % (n, i)
                              for i in range(20)], mine)
