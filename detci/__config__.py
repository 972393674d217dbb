'''
Global defaults of detci.

The values below can be overridden by a configuration file, the first found
of $DETCI_CONFIG_FILE, ./.detci_conf.py and ~/.detci_conf.py.  The file is
executed as Python code in this namespace.  Besides the names defined here it
may set the default of any method attribute, with the key
<module path>_<class>_<attribute>, e.g.

    ci_casci_CASCI_conv_tol = 1e-9
    ci_hamiltonian_cutoff = 1e-10
'''

import os
import tempfile

DEBUG = False

MAX_MEMORY = int(os.environ.get('DETCI_MAX_MEMORY', 4000)) # MB
TMPDIR = os.environ.get('DETCI_TMPDIR', tempfile.gettempdir())
NUM_THREADS = None  # None: DETCI_NUM_THREADS, OMP_NUM_THREADS or all CPUs

VERBOSE = 3  # logger.NOTE

_candidates = (os.environ.get('DETCI_CONFIG_FILE'),
               os.path.join(os.path.abspath('.'), '.detci_conf.py'),
               os.path.join(os.environ.get('HOME', '.'), '.detci_conf.py'))
conf_file = next((f for f in _candidates if f and os.path.isfile(f)), None)
if conf_file is not None:
    with open(conf_file, 'r') as f:
        exec(f.read())
    del f
del (os, tempfile, _candidates)
