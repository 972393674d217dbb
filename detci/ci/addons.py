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
Helper functions for CI vectors and the interface to mean-field programs
'''

from collections import namedtuple
from functools import reduce
import numpy
from detci import lib
from detci.ci.determinant import to_bitstring
from detci import __config__

LARGE_CI_NUM = getattr(__config__, 'ci_addons_large_ci_num', 10)

LeadingDeterminant = namedtuple('LeadingDeterminant',
                                ['coefficient', 'alpha', 'beta', 'index'])

def large_ci(ci, dets, norb, n=LARGE_CI_NUM, tol=None):
    '''The determinants with the largest CI coefficients

    Args:
        ci : 1D array
            CI vector aligned with dets
        dets : list of Determinant
        norb : int
            Number of orbitals (frozen+active) to show in the bit strings

    Kwargs:
        n : int
            Number of determinants to return.  None to return all.
        tol : float
            Only return the determinants with |c| > tol

    Returns:
        list of :class:`LeadingDeterminant`, sorted by |c| in descending
        order.  The alpha and beta strings are shown orbital 0 first.
    '''
    ci = numpy.asarray(ci).ravel()
    assert ci.size == len(dets)
    idx = numpy.argsort(-abs(ci), kind='stable')
    if tol is not None:
        idx = idx[abs(ci[idx]) > tol]
    if n is not None:
        idx = idx[:n]
    return [LeadingDeterminant(ci[i], to_bitstring(dets[i].alpha, norb),
                               to_bitstring(dets[i].beta, norb), int(i))
            for i in idx]

def integrals_from_scf(mf, norb=None):
    '''Hamiltonian in the MO basis of a converged PySCF RHF object.

    Args:
        mf : pyscf.scf.hf.RHF
        norb : int
            Number of the lowest MOs to include.  Default is all MOs.

    Returns:
        h, eri, enuc, nelectron.  h is the core Hamiltonian T+V, eri the 2e
        integrals (pq|rs) as a 4-index array, enuc the nuclear repulsion.
    '''
    from pyscf import ao2mo
    mo = mf.mo_coeff
    if norb is None:
        norb = mo.shape[1]
    mo = mo[:,:norb]
    h = reduce(numpy.dot, (mo.T, mf.get_hcore(), mo))
    if getattr(mf, '_eri', None) is not None:
        eri = ao2mo.full(mf._eri, mo)
    else:
        eri = ao2mo.full(mf.mol, mo)
    eri = lib.restore_eri(eri, norb)
    return h, eri, mf.energy_nuc(), mf.mol.nelectron
