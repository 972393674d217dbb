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
Slater determinants as pairs of occupation bit strings.

The binary format takes the convention that one bit stands for one spatial
orbital, bit-1 means occupied and bit-0 means unoccupied.  The lowest
(right-most) bit corresponds to orbital 0.  Frozen-core orbitals are the
lowest bits and are set in every determinant.

>>> d = Determinant(0b0111, 0b1011)
>>> d.occ('a')
array([0, 1, 2], dtype=int32)
>>> excitation_level(d, Determinant(0b0111, 0b0111))
(0, 1)
'''

from collections import namedtuple
import numpy

def popcount(string):
    '''Number of occupied orbitals in a string'''
    return bin(string).count('1')

def _bits(string):
    occ = []
    i = 0
    while string:
        if string & 1:
            occ.append(i)
        string >>= 1
        i += 1
    return occ

def str2orblst(string):
    '''Ascending array of the occupied orbitals of a string'''
    return numpy.asarray(_bits(string), dtype=numpy.int32)

def orblst2str(lst):
    string = 0
    for i in lst:
        string |= 1 << int(i)
    return string

def str_diff(string0, string1):
    '''Orbitals occupied in string0 but not in string1 (holes) and orbitals
    occupied in string1 but not in string0 (particles), in ascending order.'''
    df = string0 ^ string1
    return _bits(df & string0), _bits(df & string1)

# Determine the sign of  p^+ q |string0>
def cre_des_sign(p, q, string0):
    if p == q:
        return 1
    else:
        if (string0 & (1 << p)) or (not (string0 & (1 << q))):
            return 0
        elif p > q:
            mask = (1 << p) - (1 << (q+1))
        else:
            mask = (1 << q) - (1 << (p+1))
        return (-1) ** popcount(string0 & mask)

def to_bitstring(string, norb):
    '''Occupation pattern as text, orbital 0 first

    >>> to_bitstring(0b0011, 4)
    '1100'
    '''
    return bin(string)[2:].zfill(norb)[::-1][:norb]


class Determinant(namedtuple('Determinant', ['alpha', 'beta'])):
    '''Immutable Slater determinant (alpha string, beta string).

    Equality and ordering are those of the tuple of the two integers, i.e.
    bit-wise.
    '''
    __slots__ = ()

    def occ(self, spin):
        '''Occupied orbital indices of one spin channel ('a' or 'b')'''
        if spin in ('a', 'alpha', 0):
            return str2orblst(self.alpha)
        elif spin in ('b', 'beta', 1):
            return str2orblst(self.beta)
        else:
            raise ValueError('Unknown spin channel %s' % spin)

    @property
    def nelec(self):
        return popcount(self.alpha), popcount(self.beta)

    def to_bitstrings(self, norb):
        return to_bitstring(self.alpha, norb), to_bitstring(self.beta, norb)

    def __repr__(self):
        return 'Determinant(alpha=%s, beta=%s)' % (bin(self.alpha), bin(self.beta))


def occupied_indices(det, channel):
    '''Ascending occupied orbital indices of one channel of a determinant'''
    return det.occ(channel)

def alpha_excitation_level(det1, det2):
    return popcount(det1.alpha ^ det2.alpha) // 2

def beta_excitation_level(det1, det2):
    return popcount(det1.beta ^ det2.beta) // 2

def excitation_level(det1, det2):
    '''Number of occupied orbitals which differ between two determinants, per
    spin channel.

    Returns:
        (alpha excitation level, beta excitation level)
    '''
    return alpha_excitation_level(det1, det2), beta_excitation_level(det1, det2)
