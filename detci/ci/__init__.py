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
Configuration interaction in the determinant basis

Simple usage::

    >>> from detci import ci
    >>> mc = ci.CASCI(frozen=1, active=5)
    >>> e_tot, civec = mc.kernel(h, eri, nelectron=10, enuc=enuc)
    >>> mc.large_ci(5)

:func:`ci.CASCI` returns an instance of :class:`casci.CASCI`.  The
integrals of a converged PySCF RHF calculation can be obtained with
:func:`addons.integrals_from_scf`.
'''

from detci.ci import determinant
from detci.ci import slater_condon
from detci.ci import detspace
from detci.ci import hamiltonian
from detci.ci import casci
from detci.ci import addons
from detci.ci.determinant import Determinant
from detci.ci.casci import (CASCI, CASCIConfig, CIResult, ActiveSpaceCheck,
                            check_active_space, kernel,
                            InvalidActiveSpace, OddElectronCount,
                            EigensolverNonConvergence)
from detci.ci.addons import large_ci, integrals_from_scf

FCI = CASCI
