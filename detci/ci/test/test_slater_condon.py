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

import unittest
import itertools
import numpy
from detci import lib
from detci.ci import detspace
from detci.ci import slater_condon
from detci.ci.determinant import Determinant

def random_integrals(norb, seed):
    numpy.random.seed(seed)
    h = numpy.random.random((norb,norb)) - .5
    h = h + h.T + numpy.diag(numpy.arange(norb) * 2.)
    npair = norb*(norb+1)//2
    eri = numpy.random.random(npair*(npair+1)//2) * .2
    return h, lib.restore_eri(eri, norb)

def _apply_ops(ops, string):
    '''Apply a product of second-quantized operators (rightmost first) on
    an occupation string.  Spin orbital k carries a sign of
    (-1)^(number of occupied spin orbitals below k).'''
    sign = 1
    for k, dagger in reversed(ops):
        occupied = (string >> k) & 1
        if occupied == dagger:
            return 0, 0
        if bin(string & ((1 << k) - 1)).count('1') % 2:
            sign = -sign
        string ^= 1 << k
    return sign, string

def fock_space_matrix(dets, h, eri):
    '''<D_i|H|D_j> from the second-quantized Hamiltonian with alpha spin
    orbitals 0..norb-1 followed by beta spin orbitals norb..2norb-1'''
    norb = h.shape[0]
    keys = {d.alpha | (d.beta << norb): i for i, d in enumerate(dets)}
    mat = numpy.zeros((len(dets), len(dets)))
    for j, d in enumerate(dets):
        ket = d.alpha | (d.beta << norb)
        for p, q in itertools.product(range(norb), repeat=2):
            for off in (0, norb):
                sign, s = _apply_ops([(p+off, 1), (q+off, 0)], ket)
                if sign and s in keys:
                    mat[keys[s],j] += sign * h[p,q]
        for p, q, r, s_ in itertools.product(range(norb), repeat=4):
            v = eri[p,q,r,s_]
            for o1, o2 in itertools.product((0, norb), repeat=2):
                ops = [(p+o1, 1), (r+o2, 1), (s_+o2, 0), (q+o1, 0)]
                sign, s = _apply_ops(ops, ket)
                if sign and s in keys:
                    mat[keys[s],j] += .5 * sign * v
    return mat

class KnownValues(unittest.TestCase):
    def test_hd0_closed_shell(self):
        h, eri = random_integrals(4, 1)
        occ = numpy.array([0, 1])
        ref = (2 * (h[0,0] + h[1,1]) + eri[0,0,0,0] + eri[1,1,1,1]
               + 4 * eri[0,0,1,1] - 2 * eri[0,1,1,0])
        self.assertAlmostEqual(slater_condon.hd0(occ, occ, h, eri), ref, 12)

    def test_hd1_sign(self):
        h = numpy.zeros((3,3))
        h[2,0] = h[0,2] = .5
        eri = numpy.zeros((3,3,3,3))
        d1 = Determinant(0b011, 0b001)
        d2 = Determinant(0b110, 0b001)
        # a^+_2 a_0 passes over the electron in orbital 1
        v = slater_condon.hd1(d1.occ('a'), d1.occ('b'), d1, d2, h, eri, 1)
        self.assertAlmostEqual(v, -.5, 14)
        d3 = Determinant(0b011, 0b100)
        v = slater_condon.hd1(d1.occ('a'), d1.occ('b'), d1, d3, h, eri, 0)
        self.assertAlmostEqual(v, .5, 14)

    def test_hd2_non_double(self):
        h, eri = random_integrals(4, 2)
        d1 = Determinant(0b0011, 0b0011)
        # one alpha and two beta electrons differ
        self.assertEqual(slater_condon.hd2(d1, Determinant(0b0101, 0b1100), eri, 1), 0.)
        # alpha-alpha label with beta strings that differ
        self.assertEqual(slater_condon.hd2(d1, Determinant(0b1100, 0b0101), eri, 2), 0.)
        self.assertEqual(slater_condon.matrix_element(
            d1, Determinant(0b1100, 0b1100), h, eri), 0.)

    def test_against_second_quantization(self):
        h, eri = random_integrals(4, 3)
        dets = detspace.gen_determinants(4, 4)
        ref = fock_space_matrix(dets, h, eri)
        mat = numpy.array([[slater_condon.matrix_element(d1, d2, h, eri)
                            for d2 in dets] for d1 in dets])
        self.assertTrue(numpy.allclose(mat, ref, atol=1e-12))

    def test_against_second_quantization_frozen(self):
        h, eri = random_integrals(5, 4)
        dets = detspace.gen_determinants(2, 4, 1)
        ref = fock_space_matrix(dets, h, eri)
        mat = numpy.array([[slater_condon.matrix_element(d1, d2, h, eri)
                            for d2 in dets] for d1 in dets])
        self.assertTrue(numpy.allclose(mat, ref, atol=1e-12))

    def test_hermiticity(self):
        h, eri = random_integrals(5, 5)
        dets = detspace.gen_determinants(6, 5)
        numpy.random.seed(9)
        for i, j in numpy.random.randint(0, len(dets), (60, 2)):
            d1, d2 = dets[i], dets[j]
            self.assertAlmostEqual(slater_condon.matrix_element(d1, d2, h, eri),
                                   slater_condon.matrix_element(d2, d1, h, eri), 12)

    def test_two_electron_toy(self):
        e0, e1, j0, j1, j01, k = -1.25, -.5, .67, .70, .66, .18
        h = numpy.diag([e0, e1])
        eri = numpy.zeros((2,2,2,2))
        eri[0,0,0,0] = j0
        eri[1,1,1,1] = j1
        eri[0,0,1,1] = eri[1,1,0,0] = j01
        eri[0,1,0,1] = eri[1,0,1,0] = eri[0,1,1,0] = eri[1,0,0,1] = k
        d00 = Determinant(0b01, 0b01)
        d11 = Determinant(0b10, 0b10)
        d01 = Determinant(0b01, 0b10)
        d10 = Determinant(0b10, 0b01)
        me = lambda x, y: slater_condon.matrix_element(x, y, h, eri)
        self.assertAlmostEqual(me(d00, d00), 2*e0 + j0, 14)
        self.assertAlmostEqual(me(d11, d11), 2*e1 + j1, 14)
        self.assertAlmostEqual(me(d01, d01), e0 + e1 + j01, 14)
        self.assertAlmostEqual(abs(me(d00, d11)), k, 14)
        self.assertAlmostEqual(abs(me(d01, d10)), k, 14)
        self.assertAlmostEqual(me(d00, d01), 0, 14)


if __name__ == "__main__":
    print("Full Tests for Slater-Condon rules")
    unittest.main()
