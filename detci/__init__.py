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

'''
*************************************************
detci  CASCI/FCI with a sparse determinant Hamiltonian
*************************************************

    >>> import detci
    >>> mc = detci.CASCI(frozen=0, active=2)
    >>> e_tot, civec = mc.kernel(h, eri, nelectron=2, enuc=0.7)

The integrals h (T+V) and eri (chemist's notation) are given in an
orthonormal orbital basis.
'''

__version__ = '0.1.0'

from detci import __config__
from detci import lib
from detci import ci
from detci.ci import CASCI, FCI
