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
detci environment variables are defined in this module.


Maximum memory
--------------

The variable :data:`MAX_MEMORY` defines the maximum memory that detci can
use in the calculation.  Its unit is MB.  The default value is 4000 MB.  It can
be overwritten by the environment variable ``DETCI_MAX_MEMORY``.
``MAX_MEMORY`` can also be set in the global configuration file
``.detci_conf.py``.

Threads
-------

:data:`NUM_THREADS` is the number of worker threads used to assemble the
sparse Hamiltonian.  ``None`` means to query the environment variables
``DETCI_NUM_THREADS`` and ``OMP_NUM_THREADS`` at run time.
'''

from detci import __config__

MAX_MEMORY = getattr(__config__, 'MAX_MEMORY', 4000)  # MB
TMPDIR = getattr(__config__, 'TMPDIR', '.')
NUM_THREADS = getattr(__config__, 'NUM_THREADS', None)
OUTPUT_DIGITS = getattr(__config__, 'OUTPUT_DIGITS', 5)

VERBOSE_DEBUG  = 5
VERBOSE_INFO   = 4
VERBOSE_NOTICE = 3
VERBOSE_WARN   = 2
VERBOSE_ERR    = 1
VERBOSE_QUIET  = 0
VERBOSE_CRIT   = -1
VERBOSE_ALERT  = -2
VERBOSE_PANIC  = -3
