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

r'''
Slater-Condon rules for the matrix elements of the non-relativistic
electronic Hamiltonian between two Slater determinants

    H = \sum_{pq} h_{pq} p^+ q + 1/2 \sum_{pqrs} (pq|rs) p^+ r^+ s q

The integrals are real, h is symmetric and (pq|rs) is in chemist's notation
with 8-fold permutation symmetry.  The determinants carry the frozen-core
orbitals explicitly so h and eri are indexed over frozen+active orbitals.

Sign convention: for a single excitation |D2> = s a^+ i |D1>,
s = (-1)^(number of electrons of D1 between i and a), see
:func:`detci.ci.determinant.cre_des_sign`.
'''

import numpy
from detci.ci.determinant import (str_diff, cre_des_sign, popcount,
                                  alpha_excitation_level, beta_excitation_level)

def hd0(occa, occb, h, eri):
    '''Diagonal element <D|H|D> for the determinant with alpha occupied
    orbitals occa and beta occupied orbitals occb.'''
    occa = numpy.asarray(occa)
    occb = numpy.asarray(occb)
    e1 = h[occa,occa].sum() + h[occb,occb].sum()
    # (ii|jj) and (ij|ji) blocks
    jaa = eri[occa[:,None],occa[:,None],occa,occa]
    kaa = eri[occa[:,None],occa,occa,occa[:,None]]
    jbb = eri[occb[:,None],occb[:,None],occb,occb]
    kbb = eri[occb[:,None],occb,occb,occb[:,None]]
    jab = eri[occa[:,None],occa[:,None],occb,occb]
    e2 = .5 * (jaa.sum() - kaa.sum() + jbb.sum() - kbb.sum()) + jab.sum()
    return e1 + e2

def hd1(occa, occb, det1, det2, h, eri, aexc):
    '''Single excitation element <D1|H|D2>.

    Args:
        occa, occb : occupied orbitals of det1
        aexc : int
            alpha excitation level. 1 means the excitation is in the alpha
            string, 0 in the beta string.
    '''
    if aexc == 1:
        string1, string2 = det1.alpha, det2.alpha
        occ_same, occ_other = occa, occb
    else:
        string1, string2 = det1.beta, det2.beta
        occ_same, occ_other = occb, occa
    (i,), (a,) = str_diff(string1, string2)
    occ_same = numpy.asarray(occ_same)
    occ_other = numpy.asarray(occ_other)
    fai = (h[a,i]
           + eri[a,i,occ_same,occ_same].sum()
           - eri[a,occ_same,occ_same,i].sum()
           + eri[a,i,occ_other,occ_other].sum())
    return cre_des_sign(a, i, string1) * fai

def hd2(det1, det2, eri, aexc):
    '''Double excitation element <D1|H|D2>.  Zero unless the two determinants
    differ by exactly two electrons.

    Args:
        aexc : int
            alpha excitation level: 2 (alpha,alpha), 1 (alpha,beta) or 0
            (beta,beta).
    '''
    if aexc == 1:
        if popcount(det1.beta ^ det2.beta) != 2:
            return 0.
        (i,), (a,) = str_diff(det1.alpha, det2.alpha)
        (j,), (b,) = str_diff(det1.beta, det2.beta)
        sign = cre_des_sign(a, i, det1.alpha) * cre_des_sign(b, j, det1.beta)
        return sign * eri[a,i,b,j]

    if aexc == 2:
        string1, string2 = det1.alpha, det2.alpha
        if det1.beta != det2.beta:
            return 0.
    else:
        string1, string2 = det1.beta, det2.beta
        if det1.alpha != det2.alpha:
            return 0.
    holes, particles = str_diff(string1, string2)
    if len(holes) != 2:
        return 0.
    i, j = holes
    a, b = particles
    # a^+ i, then b^+ j on the intermediate string
    sign = cre_des_sign(a, i, string1)
    sign *= cre_des_sign(b, j, string1 ^ (1 << int(i)) ^ (1 << int(a)))
    return sign * (eri[a,i,b,j] - eri[a,j,b,i])

def matrix_element(det1, det2, h, eri, occa=None, occb=None):
    '''<D1|H|D2> for any pair of determinants.'''
    aexc = alpha_excitation_level(det1, det2)
    bexc = beta_excitation_level(det1, det2)
    el = aexc + bexc
    if el > 2:
        return 0.
    if occa is None:
        occa = det1.occ('a')
    if occb is None:
        occb = det1.occ('b')
    if el == 2:
        return hd2(det1, det2, eri, aexc)
    elif el == 1:
        return hd1(occa, occb, det1, det2, h, eri, aexc)
    else:
        return hd0(occa, occb, h, eri)
