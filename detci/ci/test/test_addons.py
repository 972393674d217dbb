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
import numpy
from pyscf import gto, scf, mcscf, fci
from detci import lib
from detci import ci
from detci.ci import addons
from detci.ci import detspace
from detci.ci import hamiltonian
from detci.ci.determinant import Determinant

def setUpModule():
    global mol, mf
    mol = gto.M(atom='O 0 0 0; H 0 -0.757 0.587; H 0 0.757 0.587',
                basis='sto-3g', verbose=0)
    mf = scf.RHF(mol).run()

def tearDownModule():
    global mol, mf
    del mol, mf

class KnownValues(unittest.TestCase):
    def test_large_ci(self):
        dets = [Determinant(0b011, 0b011), Determinant(0b101, 0b011),
                Determinant(0b011, 0b110), Determinant(0b110, 0b110)]
        civec = numpy.array([.1, -.8, .5, -.3])
        res = addons.large_ci(civec, dets, 3)
        self.assertEqual([x.index for x in res], [1, 2, 3, 0])
        self.assertEqual(res[0].alpha, '101')
        self.assertEqual(res[0].beta, '110')
        self.assertAlmostEqual(res[0].coefficient, -.8, 14)
        self.assertEqual(len(addons.large_ci(civec, dets, 3, n=2)), 2)
        self.assertEqual(len(addons.large_ci(civec, dets, 3, n=None, tol=.2)), 3)
        self.assertEqual(civec.tolist(), [.1, -.8, .5, -.3])

    def test_large_ci_ties(self):
        dets = [Determinant(1, 1), Determinant(2, 2), Determinant(1, 2)]
        res = addons.large_ci([.5, -.5, .5], dets, 2)
        self.assertEqual([x.index for x in res], [0, 1, 2])

    def test_integrals_from_scf(self):
        h, eri, enuc, nelec = addons.integrals_from_scf(mf)
        self.assertEqual(h.shape, (7, 7))
        self.assertEqual(eri.shape, (7, 7, 7, 7))
        self.assertEqual(nelec, 10)
        self.assertAlmostEqual(enuc, mol.energy_nuc(), 12)
        h1, eri1 = addons.integrals_from_scf(mf, norb=5)[:2]
        self.assertEqual(h1.shape, (5, 5))
        self.assertTrue(numpy.allclose(eri1, eri[:5,:5,:5,:5]))

    def test_hf_energy(self):
        h, eri, enuc, nelec = addons.integrals_from_scf(mf)
        dets = detspace.gen_determinants(nelec, 7)
        hop = hamiltonian.build(dets[:1], h, eri, verbose=0)
        self.assertAlmostEqual(hop.diagonal()[0] + enuc, mf.e_tot, 8)

    def test_casci_h2o(self):
        h, eri, enuc, nelec = addons.integrals_from_scf(mf)
        mc = ci.CASCI(frozen=1, active=5).set(verbose=0)
        e_tot = mc.kernel(h, eri, nelec, enuc)[0]
        self.assertEqual(len(mc.dets), 25)
        e_ref = mcscf.CASCI(mf, 5, 8).run().e_tot
        self.assertAlmostEqual(e_tot, e_ref, 8)
        self.assertTrue(e_tot < mf.e_tot)

    def test_fci_h2o(self):
        h, eri, enuc, nelec = addons.integrals_from_scf(mf)
        mc = ci.CASCI().set(verbose=0)
        e_tot, civec = mc.kernel(h, eri, nelec, enuc)
        self.assertEqual(len(mc.dets), 441)
        e_ref, c_ref = fci.direct_spin1.kernel(h, eri, 7, nelec, ecore=enuc)
        self.assertAlmostEqual(e_tot, e_ref, 7)
        self.assertTrue(numpy.allclose(numpy.sort(abs(civec)),
                                       numpy.sort(abs(c_ref.ravel())), atol=1e-4))

        mc.eigensolver = 'davidson'
        self.assertAlmostEqual(mc.kernel(h, eri, nelec, enuc)[0], e_ref, 7)

    def test_hamiltonian_vs_pspace(self):
        numpy.random.seed(5)
        norb = 5
        h = numpy.random.random((norb,norb)) - .5
        h = h + h.T
        npair = norb*(norb+1)//2
        eri = lib.restore_eri(numpy.random.random(npair*(npair+1)//2), norb)
        dets = detspace.gen_determinants(4, norb)
        hop = hamiltonian.build(dets, h, eri, cutoff=0, verbose=0)
        addr0, h0 = fci.direct_spin1.pspace(h, eri, norb, (2,2), np=400)
        self.assertEqual(h0.shape, (100, 100))
        self.assertTrue(numpy.array_equal(addr0, numpy.arange(100)))
        nb = fci.cistring.num_strings(norb, 2)
        addr = [fci.cistring.str2addr(norb, 2, d.alpha) * nb +
                fci.cistring.str2addr(norb, 2, d.beta) for d in dets]
        ref = h0[numpy.ix_(addr, addr)]
        self.assertTrue(numpy.allclose(hop.to_dense(), ref, atol=1e-10))


if __name__ == "__main__":
    print("Full Tests for the PySCF interface")
    unittest.main()
