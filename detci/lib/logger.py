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
#

'''
Logging of the CI programs

Output goes to the ``stdout`` attribute of the calculation object and is
filtered by its integer ``verbose`` attribute:

======= ======
Level   number
------- ------
DEBUG4  9
DEBUG3  8
DEBUG2  7
DEBUG1  6
DEBUG   5
INFO    4
NOTE    3
WARN    2
ERROR   1
QUIET   0
======= ======

A message is printed if verbose >= the level of the message.  Errors and
warnings are also copied to stderr.

>>> import sys
>>> from detci.lib import logger
>>> log = logger.Logger(sys.stdout, logger.INFO)
>>> log.info('Number of determinants %d', 36)
Number of determinants 36
>>> log.debug('not printed')

:meth:`Logger.timer` reports the CPU (and wall) time spent since a reference
point.  It prints at :data:`TIMER_LEVEL` and above and returns the new
reference point:

>>> t0 = logger.process_clock(), logger.perf_counter()
>>> t0 = log.timer('sparse Hamiltonian', *t0)
'''

import sys
import time

from detci.lib import parameters as param
from detci import __config__

process_clock = time.process_time
perf_counter = time.perf_counter

QUIET  = param.VERBOSE_QUIET
ERROR  = ERR = param.VERBOSE_ERR
WARN   = WARNING = param.VERBOSE_WARN
NOTE   = NOTICE = param.VERBOSE_NOTICE
INFO   = param.VERBOSE_INFO
DEBUG  = param.VERBOSE_DEBUG
DEBUG1 = DEBUG + 1
DEBUG2 = DEBUG + 2
DEBUG3 = DEBUG + 3
DEBUG4 = DEBUG + 4

TIMER_LEVEL = getattr(__config__, 'TIMER_LEVEL', DEBUG)

def flush(rec, msg, *args):
    if args:
        msg = msg % args
    rec.stdout.write(msg + '\n')
    rec.stdout.flush()

def _printer(level, name):
    def printer(rec, msg, *args):
        if rec.verbose >= level:
            flush(rec, msg, *args)
    printer.__name__ = name
    printer.__doc__ = 'Print the message if verbose >= %s' % name.upper()
    return printer

log    = _printer(QUIET + 1, 'log')
note   = _printer(NOTE, 'note')
info   = _printer(INFO, 'info')
debug  = _printer(DEBUG, 'debug')
debug1 = _printer(DEBUG1, 'debug1')
debug2 = _printer(DEBUG2, 'debug2')

def error(rec, msg, *args):
    text = msg % args if args else msg
    if rec.verbose >= ERROR:
        flush(rec, '\nERROR: ' + text + '\n')
    sys.stderr.write('ERROR: ' + text + '\n')

def warn(rec, msg, *args):
    if rec.verbose >= WARN:
        text = msg % args if args else msg
        flush(rec, '\nWARN: ' + text + '\n')
        if rec.stdout is not sys.stdout:
            sys.stderr.write('WARN: ' + text + '\n')

def timer(rec, msg, cpu0=None, wall0=None):
    '''Print the time spent since cpu0 (and wall0).  Without cpu0 the
    reference point of the last call is used.

    Returns:
        The new reference point, cpu time or (cpu time, wall time)
    '''
    if cpu0 is None:
        cpu0 = rec._t0
    rec._t0 = process_clock()
    if wall0:
        rec._w0 = perf_counter()
        if rec.verbose >= TIMER_LEVEL:
            flush(rec, '    CPU time for %s %9.2f sec, wall time %9.2f sec',
                  msg, rec._t0 - cpu0, rec._w0 - wall0)
        return rec._t0, rec._w0
    if rec.verbose >= TIMER_LEVEL:
        flush(rec, '    CPU time for %s %9.2f sec', msg, rec._t0 - cpu0)
    return rec._t0

def timer_debug1(rec, msg, cpu0=None, wall0=None):
    '''Same as :func:`timer` but prints at DEBUG1 and above'''
    if rec.verbose >= DEBUG1:
        return timer(rec, msg, cpu0, wall0)
    rec._t0 = process_clock()
    if wall0:
        rec._w0 = perf_counter()
        return rec._t0, rec._w0
    return rec._t0


class Logger:
    '''
    Attributes:
        stdout : file object
            Where the messages are written.
        verbose : int
            Print level, see the module documentation.
    '''
    def __init__(self, stdout=sys.stdout, verbose=NOTE):
        self.stdout = stdout
        self.verbose = verbose
        self._t0 = process_clock()
        self._w0 = perf_counter()

    log = log
    error = error
    warn = warn
    note = note
    info = info
    debug = debug
    debug1 = debug1
    debug2 = debug2
    timer = timer
    timer_debug1 = timer_debug1

def new_logger(rec=None, verbose=None):
    '''Logger for the object rec.

    Args:
        rec : an object with the attributes stdout and verbose, or None

        verbose : Logger, int or None
            A Logger is returned as it is.  An integer overrides rec.verbose.
            None takes rec.verbose, or the global default
            ``__config__.VERBOSE`` if rec is None as well.
    '''
    if isinstance(verbose, Logger):
        return verbose
    stdout = getattr(rec, 'stdout', None) or sys.stdout
    if verbose is None:
        if rec is None:
            verbose = getattr(__config__, 'VERBOSE', NOTE)
        else:
            verbose = rec.verbose
    return Logger(stdout, verbose)
