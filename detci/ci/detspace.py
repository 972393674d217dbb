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
Determinant space of a closed-shell active space

The alpha and beta strings are built from the same set of occupation
patterns: nfrozen doubly occupied core orbitals (the lowest bits) followed by
all distributions of nelec/2 electrons over the active orbitals.  The
determinant space is the product of the alpha and the beta strings.
'''

import itertools
import numpy
from detci import lib
from detci.ci.determinant import Determinant, popcount

WORD_MASK = (1 << 64) - 1


class InvalidActiveSpace(ValueError):
    pass

class OddElectronCount(InvalidActiveSpace):
    pass


def make_strings(orb_list, nelec):
    '''Generate string from the given orbital list.

    Returns:
        list of int.  One element represents one string in binary format.
        Every pattern with nelec bits set among orb_list appears exactly once.
        The first string occupies the lowest orbitals.

    Examples:

    >>> [bin(x) for x in make_strings((0,1,2,3),2)]
    ['0b11', '0b101', '0b110', '0b1001', '0b1010', '0b1100']
    '''
    orb_list = list(orb_list)
    assert (nelec >= 0)
    if nelec == 0:
        return [0]
    elif nelec > len(orb_list):
        return []
    def gen_str_iter(orb_list, nelec):
        if nelec == 1:
            res = [(1 << i) for i in orb_list]
        elif nelec >= len(orb_list):
            n = 0
            for i in orb_list:
                n = n | (1 << i)
            res = [n]
        else:
            restorb = orb_list[:-1]
            thisorb = 1 << orb_list[-1]
            res = gen_str_iter(restorb, nelec)
            for n in gen_str_iter(restorb, nelec-1):
                res.append(n | thisorb)
        return res
    strings = gen_str_iter(orb_list, nelec)
    assert (len(strings) == num_strings(len(orb_list), nelec))
    return strings

num_strings = lib.comb

def num_determinants(nelec, norb):
    '''Size of the determinant space of nelec electrons (closed shell) in
    norb active orbitals'''
    return num_strings(norb, nelec//2) ** 2

def gen_determinants(nelec, norb, nfrozen=0):
    '''All determinants of nelec active electrons in norb active orbitals
    above nfrozen frozen-core orbitals.

    The list is sorted by the excitation level with respect to its first
    element (the aufbau determinant).

    Args:
        nelec : int
            Number of active electrons.  Must be even.
        norb : int
            Number of active orbitals.
        nfrozen : int
            Number of frozen (always doubly occupied) orbitals.

    Returns:
        list of :class:`Determinant`
    '''
    if nelec % 2:
        raise OddElectronCount('Number of active electrons (%d) is odd. '
                               'Only closed-shell active spaces are supported'
                               % nelec)
    if nelec < 0 or nfrozen < 0:
        raise InvalidActiveSpace('Negative number of electrons (%d) or frozen '
                                 'orbitals (%d)' % (nelec, nfrozen))
    nelec_a = nelec // 2
    core = (1 << nfrozen) - 1
    strs = [core | s for s in make_strings(range(nfrozen, nfrozen+norb), nelec_a)]

    dets = [Determinant(a, b) for a, b in itertools.product(strs, strs)]
    if dets:
        ref = dets[0]
        dets.sort(key=lambda d: popcount(ref.alpha ^ d.alpha) +
                                popcount(ref.beta ^ d.beta))
    return dets

def pack_strings(dets, norb):
    '''Pack the strings into an uint64 array of shape (ndets,2,nset), one
    64-bit word for every 64 orbitals.'''
    nset = max(1, (norb+63) // 64)
    strs = numpy.empty((len(dets),2,nset), dtype=numpy.uint64)
    for k in range(nset):
        shift = 64 * k
        strs[:,0,k] = [(d.alpha >> shift) & WORD_MASK for d in dets]
        strs[:,1,k] = [(d.beta >> shift) & WORD_MASK for d in dets]
    return strs

def excitation_levels(strs, i, start=0):
    '''Alpha and beta excitation levels between determinant i and the
    determinants start, start+1, ... of the packed strings.'''
    diff = strs[start:] ^ strs[i]
    nd = lib.popcount(diff).sum(axis=2)
    return nd[:,0] // 2, nd[:,1] // 2
