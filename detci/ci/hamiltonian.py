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
Sparse CI Hamiltonian

The upper triangle (i <= j) of the Hamiltonian in the determinant basis is
assembled by a pool of worker threads.  The row indices are distributed over
the workers by a partition function; every worker accumulates the triplets
(i, j, H_ij) of its rows in a private :class:`TripletBuffer`.  The buffers are
concatenated once all workers have finished.

Only pairs with excitation level <= 2 are evaluated.  The excitation levels
of row i against all columns j >= i are computed at once from the packed
strings (XOR + popcount) before any matrix element is evaluated.
'''

from concurrent.futures import ThreadPoolExecutor
import numpy
import scipy.sparse
import scipy.sparse.linalg
from detci import lib
from detci.lib import logger
from detci.ci import detspace
from detci.ci.slater_condon import hd0, hd1, hd2
from detci import __config__

CUTOFF = getattr(__config__, 'ci_hamiltonian_cutoff', 1e-12)


class TripletBuffer:
    '''Row indices, column indices and values produced by one worker'''
    __slots__ = ('rows', 'cols', 'vals')

    def __init__(self):
        self.rows = []
        self.cols = []
        self.vals = []

    def append(self, i, j, v):
        self.rows.append(i)
        self.cols.append(j)
        self.vals.append(v)

    def __len__(self):
        return len(self.vals)

    def to_arrays(self):
        return (numpy.asarray(self.rows, dtype=numpy.int64),
                numpy.asarray(self.cols, dtype=numpy.int64),
                numpy.asarray(self.vals, dtype=numpy.double))


def partition_chunked(ndets, nworkers):
    '''Contiguous blocks of rows.'''
    return [numpy.arange(p0, p1) for p0, p1 in lib.prange_split(ndets, nworkers)]

def partition_strided(ndets, nworkers):
    '''Rows dealt round robin.  The rows near the top of the upper triangle
    are the most expensive ones; dealing them out balances the workers.'''
    return [numpy.arange(k, ndets, nworkers) for k in range(nworkers)]

PARTITIONS = {
    'chunked': partition_chunked,
    'strided': partition_strided,
}


def scan_rows(rows, dets, strs, h, eri, cutoff, buf=None):
    '''Evaluate the elements H_ij, j >= i, for the given rows i and keep the
    ones with |H_ij| > cutoff.

    Args:
        rows : array of int
            Row indices handled by this worker.
        dets : list of Determinant
        strs : ndarray
            Packed strings of dets, see :func:`detspace.pack_strings`.
        h : 2D array
        eri : 4D array

    Returns:
        :class:`TripletBuffer`
    '''
    if buf is None:
        buf = TripletBuffer()
    for i in rows:
        i = int(i)
        det1 = dets[i]
        occa = det1.occ('a')
        occb = det1.occ('b')
        aexc, bexc = detspace.excitation_levels(strs, i, i)
        el = aexc + bexc
        for k in numpy.where(el <= 2)[0]:
            j = i + int(k)
            det2 = dets[j]
            if el[k] == 2:
                elem = hd2(det1, det2, eri, aexc[k])
            elif el[k] == 1:
                elem = hd1(occa, occb, det1, det2, h, eri, aexc[k])
            else:
                elem = hd0(occa, occb, h, eri)
            if abs(elem) > cutoff:
                buf.append(i, j, elem)
    return buf


class SparseHamiltonian:
    '''Symmetric CI Hamiltonian stored as its upper triangle in CSR format.

    Attributes:
        upper : scipy.sparse.csr_matrix
            H_ij for i <= j, sorted indices.
        cutoff : float
            Elements with |H_ij| <= cutoff were dropped.
    '''
    def __init__(self, upper, cutoff=0):
        self.upper = upper
        self.cutoff = cutoff
        self._diag = upper.diagonal()

    @property
    def shape(self):
        return self.upper.shape

    @property
    def size(self):
        return self.upper.shape[0]

    @property
    def nnz(self):
        '''Number of elements stored in the upper triangle'''
        return self.upper.nnz

    @property
    def density(self):
        '''Fraction of nonzero elements in the full matrix'''
        n = self.size
        if n == 0:
            return 0.
        nnz_full = 2 * self.upper.nnz - numpy.count_nonzero(self._diag)
        return nnz_full / float(n*n)

    @property
    def nbytes(self):
        m = self.upper
        return m.data.nbytes + m.indices.nbytes + m.indptr.nbytes

    def diagonal(self):
        return self._diag.copy()

    def matvec(self, x):
        '''H x.  x can be a vector or a (ndets,k) array'''
        x = numpy.asarray(x)
        hx = self.upper.dot(x) + self.upper.T.dot(x)
        if x.ndim == 1:
            hx -= self._diag * x
        else:
            hx -= self._diag[:,None] * x
        return hx
    __call__ = matvec

    def triplets(self):
        '''Stored (rows, cols, vals) in row major order'''
        coo = self.upper.tocoo()
        return coo.row, coo.col, coo.data

    def full(self):
        '''The symmetric matrix with both triangles stored'''
        mat = (self.upper + self.upper.T
               - scipy.sparse.diags(self._diag, format='csr')).tocsr()
        mat.sort_indices()
        return mat

    def to_dense(self):
        return self.full().toarray()

    def aslinearoperator(self):
        return scipy.sparse.linalg.LinearOperator(self.shape, matvec=self.matvec,
                                                  dtype=numpy.double)


def build(dets, h, eri, cutoff=CUTOFF, nthreads=None, partition=None,
          verbose=None):
    '''Assemble the sparse Hamiltonian of the determinant list dets.

    Args:
        dets : list of Determinant
        h : 2D array
            One-electron integrals over frozen+active orbitals.
        eri : ndarray
            Two-electron integrals (chemist's notation) over the same
            orbitals, 4-index or 4-fold/8-fold packed.

    Kwargs:
        cutoff : float
            Elements with absolute value not larger than cutoff are dropped.
        nthreads : int
            Number of worker threads.  Default is :func:`lib.num_threads`.
        partition : str or function(ndets, nworkers) => list of index arrays
            How the rows are distributed over the workers.  'strided'
            (default) or 'chunked'.  Each row must appear in exactly one
            index array.
        verbose : int or Logger

    Returns:
        :class:`SparseHamiltonian`
    '''
    log = logger.new_logger(None, verbose)
    t0 = (logger.process_clock(), logger.perf_counter())
    h = numpy.asarray(h, dtype=numpy.double)
    norb = h.shape[0]
    eri = lib.restore_eri(eri, norb)
    ndets = len(dets)
    strs = detspace.pack_strings(dets, norb)

    nthreads = lib.num_threads(nthreads)
    if partition is None:
        partition = partition_strided
    elif isinstance(partition, str):
        partition = PARTITIONS[partition]
    tasks = [numpy.asarray(rows, dtype=numpy.int64)
             for rows in partition(ndets, nthreads)]
    tasks = [rows for rows in tasks if rows.size > 0]
    if ndets > 0:
        if tasks:
            count = numpy.bincount(numpy.hstack(tasks), minlength=ndets)
        else:
            count = numpy.zeros(ndets, dtype=int)
        if count.size != ndets or numpy.any(count != 1):
            raise ValueError('Partition %s does not assign every row to '
                             'exactly one worker' % partition)
    log.debug('Sparse Hamiltonian: %d rows in %d tasks, %d threads',
              ndets, len(tasks), nthreads)

    if nthreads == 1 or len(tasks) <= 1:
        bufs = [scan_rows(rows, dets, strs, h, eri, cutoff) for rows in tasks]
    else:
        with ThreadPoolExecutor(max_workers=nthreads) as executor:
            futures = [executor.submit(scan_rows, rows, dets, strs, h, eri, cutoff)
                       for rows in tasks]
            bufs = [f.result() for f in futures]

    if bufs:
        rows, cols, vals = (numpy.hstack(x) for x in
                            zip(*[buf.to_arrays() for buf in bufs]))
    else:
        rows = cols = numpy.zeros(0, dtype=numpy.int64)
        vals = numpy.zeros(0)
    upper = scipy.sparse.coo_matrix((vals, (rows, cols)),
                                    shape=(ndets, ndets)).tocsr()
    upper.sort_indices()
    hop = SparseHamiltonian(upper, cutoff)

    log.info('Matrix elements stored %d  (|H_ij| > cutoff %g)', hop.nnz, cutoff)
    log.info('Hamiltonian density %.6g', hop.density)
    log.info('Hamiltonian Matrix size: %10.3f Mb', hop.nbytes/1e6)
    log.timer('sparse Hamiltonian', *t0)
    return hop
