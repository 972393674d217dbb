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

from detci.lib import parameters
from detci.lib import parameters as param
from detci.lib import logger
from detci.lib import misc
from detci.lib.misc import *
from detci.lib import numpy_helper
from detci.lib.numpy_helper import *
from detci.lib import linalg_helper
from detci.lib.linalg_helper import (LinearDependenceError,
                                     EigensolverNonConvergence)
from detci.lib import chkfile
