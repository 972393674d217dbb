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
CASCI/FCI over Slater determinants with a sparse Hamiltonian

The closed-shell active space is defined by the number of frozen (doubly
occupied, uncorrelated) orbitals and the number of active orbitals.  All
determinants of the active electrons in the active orbitals are enumerated,
the Hamiltonian is assembled as a sparse matrix and its lowest eigenpairs are
computed.

Simple usage::

    >>> from detci import ci
    >>> mc = ci.CASCI(frozen=1, active=5)
    >>> e_tot, civec = mc.kernel(h, eri, nelectron=10, enuc=9.19)
    >>> mc.analyze()
'''

import sys
from collections import namedtuple
import numpy
from detci import lib
from detci.lib import logger
from detci.lib import linalg_helper
from detci.lib.linalg_helper import EigensolverNonConvergence
from detci.ci import detspace
from detci.ci import hamiltonian
from detci.ci import addons
from detci.ci.detspace import InvalidActiveSpace, OddElectronCount
from detci import __config__

CASCIConfig = namedtuple('CASCIConfig', ['frozen', 'active', 'nelectron',
                                         'nroots', 'cutoff', 'conv_tol',
                                         'act_elec'])

ActiveSpaceCheck = namedtuple('ActiveSpaceCheck', ['ok', 'config', 'error'])

CIResult = namedtuple('CIResult', ['e_tot', 'e_ci', 'ci', 'dets', 'converged',
                                   'leading'])


def check_active_space(nelectron, nmo, frozen=0, active=None, nroots=1,
                       cutoff=hamiltonian.CUTOFF, conv_tol=1e-10):
    '''Validate the active space before anything is enumerated.

    Args:
        nelectron : int
            Total number of electrons.
        nmo : int
            Number of orbitals of the integrals.
        frozen : int
            Number of frozen (doubly occupied) orbitals.
        active : int or None
            Number of active orbitals.  None means all orbitals above the
            frozen core.

    Returns:
        :class:`ActiveSpaceCheck`.  On success ``ok`` is True and ``config``
        holds the :class:`CASCIConfig`; otherwise ``error`` holds the
        exception (not raised) describing the problem.
    '''
    if active is None:
        active = nmo - frozen
    act_elec = nelectron - 2 * frozen

    if nroots < 1:
        err = ValueError('Number of roots (%d) must be at least 1' % nroots)
    elif frozen < 0 or act_elec < 0:
        err = InvalidActiveSpace('Invalid number of frozen orbitals (%d) for '
                                 '%d electrons.' % (frozen, nelectron))
    elif act_elec % 2:
        err = OddElectronCount('Number of active electrons (%d) is odd. Only '
                               'closed-shell active spaces are supported.'
                               % act_elec)
    elif active <= act_elec // 2:
        err = InvalidActiveSpace('Number of active orbitals (%d) too small for '
                                 '%d active electrons' % (active, act_elec))
    elif active + frozen > nmo:
        err = InvalidActiveSpace('Number of active (%d) and frozen orbitals (%d) '
                                 'greater than number of orbitals (%d)'
                                 % (active, frozen, nmo))
    else:
        conf = CASCIConfig(frozen, active, nelectron, nroots, cutoff, conv_tol,
                           act_elec)
        return ActiveSpaceCheck(True, conf, None)
    return ActiveSpaceCheck(False, None, err)


def get_init_guess(ndets, nroots, hdiag):
    '''Unit vectors on the determinants with the lowest diagonal elements'''
    addrs = numpy.argsort(hdiag, kind='stable')[:nroots]
    ci0 = []
    for addr in addrs:
        x = numpy.zeros(ndets)
        x[addr] = 1
        ci0.append(x)

    # Add noise to break the alpha-beta exchange symmetry so that states of
    # both spin parities can be reached.
    if ndets > 1:
        ci0[0][0 ] += 1e-5
        ci0[0][-1] -= 1e-5
    return ci0


def kernel(h, eri, nelectron, frozen=0, active=None, nroots=1, enuc=0.,
           verbose=None, **kwargs):
    '''CASCI energy of nelectron electrons.  See :class:`CASCI` for the
    keyword arguments.

    Returns:
        e_tot, ci
    '''
    mc = CASCI(frozen, active)
    if verbose is not None:
        mc.verbose = verbose
    mc.nroots = nroots
    unknown = set(kwargs).difference(mc._keys)
    if unknown:
        raise TypeError('Unknown keyword arguments %s' % ' '.join(unknown))
    mc.__dict__.update(kwargs)
    return mc.kernel(h, eri, nelectron, enuc)


class CASCI(lib.StreamObject):
    '''CASCI/FCI in the determinant basis with a sparse Hamiltonian

    Attributes:
        frozen : int
            Number of frozen (doubly occupied) orbitals.  Default is 0.
        active : int
            Number of active orbitals.  Default (None) is all orbitals above
            the frozen core, i.e. FCI with frozen core.
        nelectron : int
            Total number of electrons, including the frozen ones.
        nroots : int
            Number of states to solve.  Default is 1, the ground state.
        cutoff : float
            Matrix elements with |H_ij| <= cutoff are dropped.  Default is 1e-12.
        conv_tol : float
            Convergence tolerance of the eigenvalues.  Default is 1e-10.
        max_cycle : int
            Max number of iterations of the iterative eigensolver.
        max_space : int
            Max size of the Davidson subspace.
        eigensolver : str
            'arpack' (default), 'davidson' or 'dense'.
        pspace_size : int
            Determinant spaces up to this size are diagonalized with a dense
            eigensolver.  Default is 400.
        level_shift : float
            Level shift of the Davidson preconditioner.
        threads : int
            Number of threads to assemble the Hamiltonian.  Default is
            :func:`lib.num_threads`.
        partition : str or function
            Distribution of the Hamiltonian rows over the threads, 'strided'
            (default) or 'chunked' or a function(ndets, nworkers).
        ncore_print : int
            Number of leading determinants printed by :meth:`analyze`.
        chkfile : str
            If given, the results are saved in this HDF5 file.

    Saved results

        e_tot : float or array
            Total energy (eigenvalue + nuclear repulsion).
        e_ci : float or array
            Electronic eigenvalue(s).
        ci : 1D array or a list of 1D arrays
            CI vector(s) aligned with :attr:`dets`.
        dets : list of Determinant
            The determinant list, sorted by excitation level.
        hamiltonian : SparseHamiltonian
        converged : bool

    Examples:

    >>> mc = CASCI(frozen=0, active=2)
    >>> mc.kernel(h, eri, nelectron=2)
    '''

    nroots = getattr(__config__, 'ci_casci_CASCI_nroots', 1)
    cutoff = getattr(__config__, 'ci_casci_CASCI_cutoff', hamiltonian.CUTOFF)
    conv_tol = getattr(__config__, 'ci_casci_CASCI_conv_tol', 1e-10)
    max_cycle = getattr(__config__, 'ci_casci_CASCI_max_cycle', 100)
    max_space = getattr(__config__, 'ci_casci_CASCI_max_space', 12)
    eigensolver = getattr(__config__, 'ci_casci_CASCI_eigensolver', 'arpack')
    pspace_size = getattr(__config__, 'ci_casci_CASCI_pspace_size', 400)
    level_shift = getattr(__config__, 'ci_casci_CASCI_level_shift', 1e-3)
    threads = getattr(__config__, 'ci_casci_CASCI_threads', None)
    partition = getattr(__config__, 'ci_casci_CASCI_partition', 'strided')
    ncore_print = getattr(__config__, 'ci_casci_CASCI_ncore_print', 10)

    _keys = {
        'frozen', 'active', 'nelectron', 'nroots', 'cutoff', 'conv_tol',
        'max_cycle', 'max_space', 'eigensolver', 'pspace_size', 'level_shift',
        'threads', 'partition', 'ncore_print', 'chkfile', 'nmo', 'e_tot',
        'e_ci', 'ci', 'dets', 'hamiltonian', 'converged',
    }

    def __init__(self, frozen=0, active=None, nelectron=None):
        self.stdout = sys.stdout
        self.verbose = getattr(__config__, 'VERBOSE', logger.NOTE)
        self.max_memory = lib.param.MAX_MEMORY
        self.frozen = frozen
        self.active = active
        self.nelectron = nelectron
        self.chkfile = None

##################################################
# don't modify the following attributes, they are not input options
        self.nmo = None
        self.e_tot = None
        self.e_ci = None
        self.ci = None
        self.dets = None
        self.hamiltonian = None
        self.converged = False

    @property
    def ncore(self):
        return self.frozen

    @property
    def norb(self):
        '''Number of frozen+active orbitals, i.e. the width of the strings'''
        if self.active is None:
            return self.nmo
        return self.frozen + self.active

    def dump_flags(self, verbose=None):
        log = logger.new_logger(self, verbose)
        log.info('')
        log.info('******** %s ********', self.__class__)
        log.info('frozen = %d  active = %s  nelectron = %s',
                 self.frozen, self.active, self.nelectron)
        log.info('nroots = %d', self.nroots)
        log.info('eigensolver = %s  pspace_size = %d', self.eigensolver,
                 self.pspace_size)
        log.info('conv_tol = %g  max_cycle = %d', self.conv_tol, self.max_cycle)
        log.info('cutoff = %g', self.cutoff)
        log.info('threads = %d  partition = %s', lib.num_threads(self.threads),
                 self.partition)
        log.info('chkfile = %s', self.chkfile)
        log.info('max_memory %d MB (current use %d MB)',
                 self.max_memory, lib.current_memory()[0])
        return self

    def check_active_space(self, nmo=None, nelectron=None):
        '''Validate frozen/active/nelectron.  See :func:`check_active_space`'''
        if nmo is None:
            nmo = self.nmo
        if nelectron is None:
            nelectron = self.nelectron
        return check_active_space(nelectron, nmo, self.frozen, self.active,
                                  self.nroots, self.cutoff, self.conv_tol)

    def config(self, nmo=None):
        '''The validated :class:`CASCIConfig` of this object'''
        chk = self.check_active_space(nmo)
        if not chk.ok:
            raise chk.error
        return chk.config

    def gen_determinants(self, conf=None):
        if conf is None:
            conf = self.config()
        return detspace.gen_determinants(conf.act_elec, conf.active, conf.frozen)

    def build_hamiltonian(self, dets, h, eri, verbose=None):
        return hamiltonian.build(dets, h, eri, self.cutoff, self.threads,
                                 self.partition, verbose)

    def eig(self, hop, nroots=None, verbose=None):
        '''Lowest eigenpairs of the sparse Hamiltonian

        Returns:
            e, c.  Eigenvalues in ascending order, eigenvectors in columns.
        '''
        if nroots is None:
            nroots = self.nroots
        log = logger.new_logger(self, verbose)
        ndets = hop.size
        if nroots < 1:
            raise ValueError('Number of roots (%d) must be at least 1' % nroots)
        if nroots > ndets:
            raise ValueError('nroots (%d) larger than the number of '
                             'determinants (%d)' % (nroots, ndets))

        method = self.eigensolver.lower()
        if method == 'dense' or ndets <= self.pspace_size or nroots >= ndets:
            log.debug('Dense diagonalization of %d determinants', ndets)
            return linalg_helper.dense_eigh(hop.to_dense(), nroots)

        hdiag = hop.diagonal()
        ci0 = get_init_guess(ndets, nroots, hdiag)
        if method == 'arpack':
            e, c = linalg_helper.arpack(hop.matvec, ndets, nroots,
                                        tol=self.conv_tol,
                                        max_cycle=self.max_cycle,
                                        x0=ci0[0], verbose=log)
        elif method == 'davidson':
            precond = linalg_helper.make_diag_precond(hdiag, self.level_shift)
            e, c = linalg_helper.davidson(hop.matvec, ci0, precond,
                                          tol=self.conv_tol,
                                          max_cycle=self.max_cycle,
                                          max_space=self.max_space,
                                          nroots=nroots, verbose=log)
        else:
            raise ValueError('Unknown eigensolver %s' % self.eigensolver)
        return e, c

    def kernel(self, h, eri, nelectron=None, enuc=0.):
        '''CASCI energy

        Args:
            h : 2D array
                One-electron integrals (T+V) in the orthonormal orbital basis.
            eri : ndarray
                Two-electron integrals (pq|rs), 4-index or 4-fold/8-fold
                packed.

        Kwargs:
            nelectron : int
                Total number of electrons.  Default is :attr:`nelectron`.
            enuc : float
                Nuclear repulsion energy added to the eigenvalues.

        Returns:
            e_tot, ci
        '''
        self.converged = False
        self.e_tot = self.e_ci = self.ci = None
        self.dets = self.hamiltonian = None
        if nelectron is not None:
            self.nelectron = nelectron
        if self.nelectron is None:
            raise InvalidActiveSpace('Number of electrons is not given')
        h = numpy.asarray(h, dtype=numpy.double)
        self.nmo = nmo = h.shape[0]
        self.check_sanity()
        self.dump_flags()
        log = logger.new_logger(self)
        t0 = (logger.process_clock(), logger.perf_counter())

        chk = self.check_active_space(nmo)
        if not chk.ok:
            raise chk.error
        conf = chk.config
        norb = conf.frozen + conf.active
        log.note('Frozen Orbitals: %3d', conf.frozen)
        log.note('Active Electrons: %3d', conf.act_elec)
        log.note('Active Orbitals: %3d', conf.active)

        h = h[:norb,:norb]
        eri = lib.restore_eri(eri, nmo)[:norb,:norb,:norb,:norb]

        dets = self.gen_determinants(conf)
        log.note('Number of Determinants: %10d', len(dets))
        t1 = log.timer_debug1('determinant space', *t0)

        hop = self.build_hamiltonian(dets, h, eri, log)
        t1 = log.timer_debug1('Hamiltonian', *t1)

        try:
            e, c = self.eig(hop, conf.nroots, log)
        except EigensolverNonConvergence as err:
            log.error('%s', err)
            raise
        self.converged = True
        self.dets = dets
        self.hamiltonian = hop
        log.timer_debug1('eigensolver', *t1)

        if conf.nroots == 1:
            self.e_ci = e[0]
            self.ci = c[:,0]
        else:
            self.e_ci = e
            self.ci = [c[:,k] for k in range(conf.nroots)]
        self.e_tot = self.e_ci + enuc

        self._finalize()
        if self.chkfile:
            self.dump_chk()
        log.timer('CASCI', *t0)
        return self.e_tot, self.ci

    def _finalize(self):
        log = logger.new_logger(self)
        if self.nroots == 1:
            log.note('Final FCI Energy: %15.10f', self.e_tot)
        else:
            for i, e in enumerate(self.e_tot):
                log.note('Final FCI Energy state %d: %15.10f', i, e)
        if self.ncore_print > 0 and log.verbose >= logger.NOTE:
            self.analyze(verbose=log)
        return self

    def _civec(self, state=0):
        if self.ci is None:
            raise RuntimeError('CI vector is not available. Call kernel first')
        if isinstance(self.ci, numpy.ndarray) and self.ci.ndim == 1:
            if state != 0:
                raise IndexError('Only one state was solved')
            return self.ci
        return self.ci[state]

    def large_ci(self, n=None, state=0, tol=None):
        '''Leading determinants of a state, sorted by |coefficient|.

        Returns:
            list of (coefficient, alpha bit string, beta bit string, index).
            The strings are shown orbital 0 first over the frozen+active
            orbitals.
        '''
        return addons.large_ci(self._civec(state), self.dets, self.norb, n, tol)

    def analyze(self, ncore_print=None, state=0, verbose=None):
        '''Print the leading determinants of a state'''
        if ncore_print is None:
            ncore_print = self.ncore_print
        log = logger.new_logger(self, verbose)
        leading = self.large_ci(ncore_print, state)
        log.note('\n ** Most important determinants **')
        log.note('    Coefficient      %-*s  %-*s', self.norb, 'α-String',
                 self.norb, 'β-String')
        for c, a, b, _ in leading:
            log.note('   %12.8f      %s  %s', c, a, b)
        return leading

    def dump_chk(self, chkfile=None, key='casci'):
        '''Save energies, CI vectors, determinants and the statistics of the
        Hamiltonian in the HDF5 file'''
        if chkfile is None:
            chkfile = self.chkfile
        hop = self.hamiltonian
        ci = self.ci
        if not isinstance(ci, numpy.ndarray):
            ci = numpy.asarray(ci)
        data = {
            'e_tot': self.e_tot,
            'e_ci': self.e_ci,
            'ci': ci,
            'strings': detspace.pack_strings(self.dets, self.norb),
            'frozen': self.frozen,
            'active': self.norb - self.frozen,
            'nelectron': self.nelectron,
            'nnz': hop.nnz,
            'density': hop.density,
            'cutoff': hop.cutoff,
        }
        lib.chkfile.dump(chkfile, key, data)
        return self

    def result(self):
        '''The results of the last kernel call as a :class:`CIResult`'''
        if not self.converged or self.ci is None:
            raise RuntimeError('No converged result is available. '
                               'Call kernel first')
        return CIResult(self.e_tot, self.e_ci, self.ci, self.dets,
                        self.converged, self.large_ci(self.ncore_print))

