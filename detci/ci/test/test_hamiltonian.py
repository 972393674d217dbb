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

import io
import unittest
import numpy
from detci import lib
from detci.lib import logger
from detci.ci import detspace
from detci.ci import hamiltonian
from detci.ci import slater_condon
from detci.ci.determinant import excitation_level

def setUpModule():
    global h, eri, dets, hop
    numpy.random.seed(7)
    norb = 6
    h = numpy.random.random((norb,norb)) - .5
    h = h + h.T + numpy.diag(numpy.arange(norb) * 1.5)
    npair = norb*(norb+1)//2
    eri = numpy.random.random(npair*(npair+1)//2) * .2
    eri = lib.restore_eri(eri, norb)
    dets = detspace.gen_determinants(4, 5, 1)
    hop = hamiltonian.build(dets, h, eri, nthreads=1, verbose=0)

def tearDownModule():
    global h, eri, dets, hop
    del h, eri, dets, hop

class KnownValues(unittest.TestCase):
    def test_against_matrix_elements(self):
        ref = numpy.array([[slater_condon.matrix_element(d1, d2, h, eri)
                            for d2 in dets] for d1 in dets])
        self.assertTrue(numpy.allclose(hop.to_dense(), ref, atol=1e-12))

    def test_symmetric(self):
        full = hop.full()
        self.assertEqual(abs(full - full.T).max(), 0)
        self.assertEqual(hop.shape, (len(dets), len(dets)))

    def test_upper_triangle(self):
        rows, cols, vals = hop.triplets()
        self.assertTrue(numpy.all(rows <= cols))
        self.assertTrue(numpy.all(abs(vals) > hop.cutoff))
        for i, j in zip(rows, cols):
            self.assertTrue(sum(excitation_level(dets[i], dets[j])) <= 2)

    def test_cutoff(self):
        hop1 = hamiltonian.build(dets, h, eri, cutoff=1e-2, nthreads=1, verbose=0)
        rows, cols, vals = hop1.triplets()
        self.assertTrue(numpy.all(abs(vals) > 1e-2))
        self.assertTrue(hop1.nnz < hop.nnz)
        dense = hop.to_dense()
        mask = abs(dense) > 1e-2
        self.assertTrue(numpy.allclose(hop1.to_dense(), dense * mask))

    def test_threads_and_partitions(self):
        ref = hop.upper
        def reversed_chunks(ndets, nworkers):
            return hamiltonian.partition_chunked(ndets, nworkers)[::-1]
        for nthreads, partition in ((1, 'chunked'), (3, 'strided'), (4, 'chunked'),
                                    (2, reversed_chunks), (7, None)):
            hop1 = hamiltonian.build(dets, h, eri, nthreads=nthreads,
                                     partition=partition, verbose=0)
            self.assertTrue(numpy.array_equal(hop1.upper.indptr, ref.indptr))
            self.assertTrue(numpy.array_equal(hop1.upper.indices, ref.indices))
            self.assertTrue(numpy.array_equal(hop1.upper.data, ref.data))

    def test_idempotent(self):
        hop1 = hamiltonian.build(dets, h, eri, nthreads=2, verbose=0)
        hop2 = hamiltonian.build(dets, h, eri, nthreads=2, verbose=0)
        self.assertTrue(numpy.array_equal(hop1.upper.data, hop2.upper.data))
        self.assertTrue(numpy.array_equal(hop1.upper.indices, hop2.upper.indices))

    def test_bad_partition(self):
        missing = lambda ndets, nworkers: [numpy.arange(ndets-1)]
        self.assertRaises(ValueError, hamiltonian.build, dets, h, eri,
                          nthreads=2, partition=missing, verbose=0)
        twice = lambda ndets, nworkers: [numpy.arange(ndets), numpy.arange(2)]
        self.assertRaises(ValueError, hamiltonian.build, dets, h, eri,
                          nthreads=2, partition=twice, verbose=0)
        self.assertRaises(KeyError, hamiltonian.build, dets, h, eri,
                          partition='diagonal', verbose=0)

    def test_partitions(self):
        for part in hamiltonian.PARTITIONS.values():
            tasks = part(10, 4)
            self.assertEqual(len(tasks), 4)
            self.assertEqual(sorted(numpy.hstack(tasks).tolist()), list(range(10)))
        tasks = hamiltonian.partition_strided(10, 3)
        self.assertEqual(tasks[1].tolist(), [1, 4, 7])
        tasks = hamiltonian.partition_chunked(10, 3)
        self.assertEqual(tasks[1].tolist(), [4, 5, 6])

    def test_matvec(self):
        dense = hop.to_dense()
        numpy.random.seed(1)
        x = numpy.random.random(len(dets))
        self.assertTrue(numpy.allclose(hop.matvec(x), dense.dot(x)))
        xs = numpy.random.random((len(dets), 3))
        self.assertTrue(numpy.allclose(hop(xs), dense.dot(xs)))
        op = hop.aslinearoperator()
        self.assertTrue(numpy.allclose(op.matvec(x), dense.dot(x)))

    def test_statistics(self):
        dense = hop.to_dense()
        self.assertTrue(numpy.array_equal(hop.diagonal(), dense.diagonal()))
        nnz = numpy.count_nonzero(dense)
        self.assertAlmostEqual(hop.density, nnz / float(dense.size), 12)
        self.assertTrue(hop.nbytes > 0)
        self.assertEqual(hop.size, len(dets))

    def test_packed_eri(self):
        eri4 = lib.pack_tril(lib.pack_tril(eri).transpose(2,0,1))
        self.assertEqual(eri4.shape, (21, 21))
        hop1 = hamiltonian.build(dets, h, eri4, nthreads=1, verbose=0)
        self.assertTrue(numpy.allclose(hop1.upper.data, hop.upper.data))

    def test_log(self):
        buf = io.StringIO()
        log = logger.Logger(buf, logger.INFO)
        hamiltonian.build(dets[:10], h, eri, nthreads=1, verbose=log)
        self.assertIn('Hamiltonian Matrix size', buf.getvalue())
        self.assertIn('density', buf.getvalue())

    def test_single_determinant(self):
        hop1 = hamiltonian.build(dets[:1], h, eri, nthreads=3, verbose=0)
        self.assertEqual(hop1.shape, (1, 1))
        self.assertAlmostEqual(hop1.to_dense()[0,0], hop.to_dense()[0,0], 14)


if __name__ == "__main__":
    print("Full Tests for sparse Hamiltonian")
    unittest.main()
