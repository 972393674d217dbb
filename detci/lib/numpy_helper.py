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
Extension to numpy module
'''

import numpy

_M1 = numpy.uint64(0x5555555555555555)
_M2 = numpy.uint64(0x3333333333333333)
_M4 = numpy.uint64(0x0f0f0f0f0f0f0f0f)
_H01 = numpy.uint64(0x0101010101010101)

def popcount(x):
    '''Number of set bits of each element of an uint64 array.

    Examples:

    >>> popcount(numpy.array([0b1011, 0, 2**63], dtype=numpy.uint64))
    array([3, 0, 1])
    '''
    x = numpy.asarray(x, dtype=numpy.uint64)
    x = x - ((x >> numpy.uint64(1)) & _M1)
    x = (x & _M2) + ((x >> numpy.uint64(2)) & _M2)
    x = (x + (x >> numpy.uint64(4))) & _M4
    return ((x * _H01) >> numpy.uint64(56)).astype(numpy.int64)

def pack_tril(mat):
    '''flatten the lower triangular part of a matrix.
    Given mat, it returns mat[...,numpy.tril_indices(mat.shape[0])]

    Examples:

    >>> pack_tril(numpy.arange(9).reshape(3,3))
    [0 3 4 6 7 8]
    '''
    mat = numpy.asarray(mat)
    idx, idy = numpy.tril_indices(mat.shape[-1])
    return mat[...,idx,idy]

def unpack_tril(tril):
    '''Reversed operation of pack_tril.  The upper triangular part is
    filled with the transposed lower triangular part.

    Examples:

    >>> unpack_tril(numpy.arange(6.))
    [[ 0. 1. 3.]
     [ 1. 2. 4.]
     [ 3. 4. 5.]]
    '''
    tril = numpy.asarray(tril)
    npair = tril.shape[-1]
    nd = int(numpy.sqrt(npair*2))
    if nd*(nd+1)//2 != npair:
        raise ValueError('Size %d is not a triangular number' % npair)
    idx, idy = numpy.tril_indices(nd)
    mat = numpy.empty(tril.shape[:-1]+(nd,nd), dtype=tril.dtype)
    mat[...,idx,idy] = tril
    mat[...,idy,idx] = tril
    return mat

def restore_eri(eri, norb):
    r'''Restore the 2e integrals (in Chemist's notation) to the 4-index array
    (pq|rs) without permutation symmetry.

    The input symmetry is determined by the size of eri:

        | norb**4                  : no symmetry, returned as (norb,)*4
        | npair**2                 : 4-fold symmetry (npair,npair)
        | npair*(npair+1)/2        : 8-fold symmetry

    where npair = norb*(norb+1)/2.
    '''
    eri = numpy.asarray(eri)
    npair = norb*(norb+1)//2
    if eri.size == norb**4:
        return eri.reshape((norb,)*4)
    elif eri.size == npair**2:
        eri = eri.reshape(npair,npair)
    elif eri.size == npair*(npair+1)//2:
        eri = unpack_tril(eri.ravel())
    else:
        raise ValueError('eri.size %d does not match norb %d' % (eri.size, norb))
    # [pq,r,s] -> [r,s,p,q]
    eri = unpack_tril(unpack_tril(eri).transpose(1,2,0))
    return numpy.ascontiguousarray(eri.transpose(2,3,0,1))
