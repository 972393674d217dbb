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
HDF5 storage of calculation results.

A dict is stored as an HDF5 group with one member per key, a list or tuple
as a group with the suffix ``__from_list__`` whose members are numbered
``000000``, ``000001``, ...  Arrays and scalars are stored as datasets.

>>> from detci import lib
>>> lib.chkfile.dump('h2.chk', 'casci', {'e_tot': -1.137, 'nroots': 1})
>>> lib.chkfile.load('h2.chk', 'casci/e_tot')
-1.137
'''

import h5py

LIST_SUFFIX = '__from_list__'

def _read(node):
    if not isinstance(node, h5py.Group):
        return node[()]
    if node.name.endswith(LIST_SUFFIX):
        return [_read(node[k]) for k in sorted(node)]
    return {k[:-len(LIST_SUFFIX)] if k.endswith(LIST_SUFFIX) else k: _read(node[k])
            for k in node}

def _write(parent, key, value):
    if isinstance(value, dict):
        group = parent.create_group(key)
        for k, v in value.items():
            _write(group, k, v)
    elif isinstance(value, (tuple, list, range)):
        group = parent.create_group(key + LIST_SUFFIX)
        for i, v in enumerate(value):
            _write(group, '%06d' % i, v)
    else:
        parent[key] = value

def load(chkfile, key):
    '''Read a dataset or a group (as a dict or a list) from the chkfile.

    Args:
        chkfile : str
            HDF5 file name.
        key : str
            Path of the dataset or the group, e.g. 'casci/e_tot'.

    Returns:
        The stored value, or None if key does not exist.
    '''
    with h5py.File(chkfile, 'r') as fh5:
        if key in fh5:
            return _read(fh5[key])
        elif key + LIST_SUFFIX in fh5:
            return _read(fh5[key + LIST_SUFFIX])
        return None

def dump(chkfile, key, value):
    '''Write value under key.  An existing entry of the same key is replaced,
    the rest of the file is kept.  dicts and lists are written recursively.'''
    mode = 'r+' if h5py.is_hdf5(chkfile) else 'w'
    with h5py.File(chkfile, mode) as fh5:
        for old in (key, key + LIST_SUFFIX):
            if old in fh5:
                del fh5[old]
        _write(fh5, key, value)
save = dump
