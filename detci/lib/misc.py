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
Helper functions and the base class of the calculation objects
'''

import os
import sys
import copy
import math
import warnings
import numpy

from detci.lib import parameters as param
from detci import __config__

comb = math.comb

def current_memory():
    '''Resident and virtual memory of this process in MB.  (0, 0) if the
    information is not available.'''
    if not sys.platform.startswith('linux'):
        return 0, 0
    pagesize = os.sysconf('SC_PAGE_SIZE')
    with open('/proc/%d/statm' % os.getpid()) as f:
        vms, rss = [int(x) * pagesize for x in f.readline().split()[:2]]
    return rss/1e6, vms/1e6

def num_threads(n=None):
    '''Number of worker threads for the parallel parts of the program.

    The value is taken from (in order) the argument n, the global parameter
    NUM_THREADS, the environment variables DETCI_NUM_THREADS and
    OMP_NUM_THREADS, and the number of CPUs.

    Examples:

    >>> from detci import lib
    >>> lib.num_threads(4)
    4
    '''
    if n is None:
        n = param.NUM_THREADS
    if n is None:
        n = os.environ.get('DETCI_NUM_THREADS', os.environ.get('OMP_NUM_THREADS'))
    if n is None:
        n = os.cpu_count() or 1
    n = int(n)
    if n < 1:
        warnings.warn('Number of threads %d is not positive. 1 thread is used.' % n)
        n = 1
    return n

def prange_split(n_total, n_sections):
    '''Boundaries (p0, p1) of n_sections contiguous blocks of range(n_total).
    The first n_total % n_sections blocks are one element larger, as in
    numpy.array_split.

    Examples:

    >>> list(lib.prange_split(10, 3))
    [(0, 4), (4, 7), (7, 10)]
    '''
    size, extras = divmod(n_total, n_sections)
    sizes = [size+1] * extras + [size] * (n_sections-extras)
    bounds = numpy.cumsum([0] + sizes)
    return zip(bounds[:-1], bounds[1:])


SANITY_CHECK = getattr(__config__, 'SANITY_CHECK', True)
class StreamObject:
    '''Base class of the method objects.

    ``.set(**kwargs)`` updates the attributes and returns the object, so that
    ``CASCI(frozen=1).set(cutoff=1e-10)`` reads as one expression.
    ``.run(*args, **kwargs)`` sets the keyword arguments as attributes,
    passes args to ``.kernel`` and returns the object::

        mc = CASCI(frozen=1).run(h, eri, 10, nroots=2)
        print(mc.e_tot)

    ``.apply(fn, *args)`` returns ``fn(self, *args)``.
    '''

    verbose = 0
    stdout = sys.stdout
    # Attributes known to the class.  Other public attributes set on an
    # object are reported by check_sanity (misspelled input options).
    _keys = {'verbose', 'stdout', 'max_memory'}

    def kernel(self, *args, **kwargs):
        '''Main driver of the method'''
        pass

    def run(self, *args, **kwargs):
        self.set(**kwargs)
        self.kernel(*args)
        return self

    def set(self, *args, **kwargs):
        if args:
            warnings.warn('method set() only supports keyword arguments.\n'
                          'Arguments %s are ignored.' % (args,))
        for key, val in kwargs.items():
            setattr(self, key, val)
        return self
    __call__ = set

    def apply(self, fn, *args, **kwargs):
        return fn(self, *args, **kwargs)

    def check_sanity(self):
        '''Report unknown attributes (not starting with "_") and attributes
        that shadow a method of the class.'''
        if SANITY_CHECK and self.verbose > 0:
            keys = set()
            for cls in type(self).__mro__:
                keys.update(getattr(cls, '_keys', ()))
            check_sanity(self, keys, self.stdout)
        return self

    def copy(self):
        '''Shallow copy'''
        return copy.copy(self)


_reported = set()
def check_sanity(obj, keysref, stdout=sys.stdout):
    '''Report the public attributes of obj that are not in keysref.  Each
    message is written once per process, to stderr and to stdout.'''
    unknown = set(k for k in obj.__dict__ if not k.startswith('_'))
    unknown.difference_update(keysref)
    if not unknown:
        return obj
    class_attr = set(dir(type(obj)))
    shadowing = unknown & class_attr
    messages = []
    if shadowing:
        messages.append('Overwritten attributes  %s  of %s\n' %
                        (' '.join(sorted(shadowing)), type(obj)))
    if unknown - class_attr:
        messages.append('%s does not have attributes  %s\n' %
                        (type(obj), ' '.join(sorted(unknown - class_attr))))
    for msg in messages:
        if msg in _reported:
            continue
        _reported.add(msg)
        sys.stderr.write(msg)
        if stdout is not sys.stdout:
            stdout.write(msg)
    return obj
