#!/usr/bin/env python
# Copyright 2024 The detci Developers. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import io
import sys
import unittest
from detci.lib import logger

class KnownValues(unittest.TestCase):
    def test_verbose_levels(self):
        buf = io.StringIO()
        log = logger.Logger(buf, logger.NOTE)
        log.note('note %d', 1)
        log.info('info %d', 2)
        log.debug('debug %d', 3)
        self.assertEqual(buf.getvalue(), 'note 1\n')

        log.verbose = logger.DEBUG
        log.info('info %d', 2)
        log.debug('debug %d', 3)
        log.debug1('debug1 %d', 4)
        self.assertEqual(buf.getvalue(), 'note 1\ninfo 2\ndebug 3\n')

    def test_quiet(self):
        buf = io.StringIO()
        log = logger.Logger(buf, logger.QUIET)
        log.log('hidden')
        log.note('hidden')
        self.assertEqual(buf.getvalue(), '')

    def test_warn(self):
        buf = io.StringIO()
        log = logger.Logger(buf, logger.WARN)
        log.warn('odd %s', 'thing')
        self.assertIn('WARN: odd thing', buf.getvalue())

    def test_timer(self):
        buf = io.StringIO()
        log = logger.Logger(buf, logger.DEBUG)
        t0 = (logger.process_clock(), logger.perf_counter())
        t1 = log.timer('step', *t0)
        self.assertEqual(len(t1), 2)
        self.assertIn('CPU time for step', buf.getvalue())
        self.assertIn('wall time', buf.getvalue())

        buf = io.StringIO()
        log = logger.Logger(buf, logger.INFO)
        t1 = log.timer_debug1('step', t0[0])
        self.assertEqual(buf.getvalue(), '')
        self.assertTrue(t1 >= t0[0])

    def test_new_logger(self):
        class Rec:
            stdout = io.StringIO()
            verbose = logger.INFO
        rec = Rec()
        log = logger.new_logger(rec)
        self.assertIs(log.stdout, rec.stdout)
        self.assertEqual(log.verbose, logger.INFO)

        log1 = logger.new_logger(rec, log)
        self.assertIs(log1, log)

        log2 = logger.new_logger(rec, logger.DEBUG1)
        self.assertIs(log2.stdout, rec.stdout)
        self.assertEqual(log2.verbose, logger.DEBUG1)

        log3 = logger.new_logger(None, None)
        self.assertIs(log3.stdout, sys.stdout)


if __name__ == "__main__":
    print("Full Tests for logger")
    unittest.main()
