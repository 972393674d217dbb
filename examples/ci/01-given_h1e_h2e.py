#!/usr/bin/env python

'''
CASCI for a given Hamiltonian.  The integrals are given in an orthonormal
basis, the 2e integrals in chemist's notation (pq|rs).
'''

import numpy
from detci import ci
from detci import lib

norb = 6
numpy.random.seed(1)
h1 = numpy.random.random((norb,norb)) - .5
h1 = h1 + h1.T + numpy.diag(numpy.arange(norb))
npair = norb*(norb+1)//2
h2 = numpy.random.random(npair*(npair+1)//2) * .1   # 8-fold symmetry

e, civec = ci.casci.kernel(h1, h2, 6, nroots=3, verbose=4)
print('E = %s' % e)

#
# Solve the same problem with the Davidson solver, save the results in
# a chkfile
#
mc = ci.CASCI().set(nroots=3, eigensolver='davidson', pspace_size=0,
                    chkfile='h6.chk')
mc.kernel(h1, h2, 6)
print(lib.chkfile.load('h6.chk', 'casci/e_tot'))
