#!/usr/bin/env python

'''
CASCI and frozen-core FCI of water from the integrals of a PySCF RHF
calculation
'''

import pyscf
from detci import ci

mol = pyscf.M(
    atom = 'O 0 0 0; H 0 -0.757 0.587; H 0 0.757 0.587',  # in Angstrom
    basis = 'sto-3g',
)
myhf = mol.RHF().run()

h, eri, enuc, nelec = ci.integrals_from_scf(myhf)

#
# 1 frozen orbital (O 1s), 5 active orbitals, 8 active electrons
#
mc = ci.CASCI(frozen=1, active=5)
e_tot = mc.kernel(h, eri, nelec, enuc)[0]
print('E(CASCI) = %.12f' % e_tot)

#
# All orbitals above the frozen core are active
#
mc = ci.CASCI(frozen=1).run(h, eri, nelec, enuc, threads=2)
print('E(FCI, frozen core) = %.12f' % mc.e_tot)
for c, alpha, beta, idx in mc.large_ci(5):
    print('  %12.8f  %s  %s' % (c, alpha, beta))
