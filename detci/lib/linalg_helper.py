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
Extension to scipy.linalg module: eigensolvers for the lowest eigenpairs of
large real symmetric matrices that are only available as matrix-vector
products.
'''

import numpy
import scipy.linalg
import scipy.sparse.linalg
from detci.lib import logger
from detci import __config__

DAVIDSON_LINDEP = getattr(__config__, 'lib_linalg_helper_davidson_lindep', 1e-14)


class LinearDependenceError(RuntimeError):
    pass

class EigensolverNonConvergence(RuntimeError):
    '''The iterative eigensolver did not reach the requested tolerance.

    Attributes:
        niter : int
            Number of iterations (or matrix-vector products for ARPACK) that
            were attempted.
        residual : float
            Largest residual norm |Ax - ex| of the approximate eigenpairs at
            termination.  NaN if no approximate eigenpair is available.
        nconverged : int
            Number of eigenpairs which converged.
    '''
    def __init__(self, msg, niter=None, residual=numpy.nan, nconverged=0):
        RuntimeError.__init__(self, msg)
        self.niter = niter
        self.residual = residual
        self.nconverged = nconverged


def dense_eigh(a, nroots=1):
    '''Full diagonalization of a (small) dense symmetric matrix.

    Returns:
        e : 1D array of the lowest nroots eigenvalues
        c : 2D array, eigenvectors in the columns
    '''
    e, c = scipy.linalg.eigh(a)
    return e[:nroots], c[:,:nroots]


def arpack(aop, size, nroots=1, tol=1e-10, max_cycle=None, x0=None,
           verbose=logger.WARN):
    '''Implicitly restarted Lanczos method (ARPACK) for the lowest eigenpairs.

    The smallest algebraic eigenvalues (``which='SA'``) are targeted so that
    the first returned state is the ground state.

    Args:
        aop : function(x) => array_like_x
            Matrix vector multiplication.
        size : int
            Dimension of the matrix.

    Kwargs:
        nroots : int
            Number of eigenpairs.  Must be smaller than size.
        tol : float
            Relative accuracy of the eigenvalues.
        max_cycle : int
            Maximum number of Arnoldi update iterations.  Default (None) lets
            ARPACK choose 10*size.
        x0 : 1D array
            Starting vector.

    Returns:
        e, c.  Eigenvalues in ascending order and eigenvectors in columns.
    '''
    if isinstance(verbose, logger.Logger):
        log = verbose
    else:
        log = logger.Logger(verbose=verbose)

    if nroots >= size:
        raise ValueError('ARPACK requires nroots (%d) < matrix size (%d)' %
                         (nroots, size))
    nmv = [0]
    def matvec(x):
        nmv[0] += 1
        return aop(x)
    op = scipy.sparse.linalg.LinearOperator((size,size), matvec=matvec,
                                            dtype=numpy.double)
    try:
        e, c = scipy.sparse.linalg.eigsh(op, k=nroots, which='SA', tol=tol,
                                         maxiter=max_cycle, v0=x0)
    except scipy.sparse.linalg.ArpackNoConvergence as err:
        nconv = len(err.eigenvalues)
        if nconv > 0:
            residual = max(numpy.linalg.norm(aop(v) - w*v)
                           for w, v in zip(err.eigenvalues, err.eigenvectors.T))
        else:
            residual = numpy.nan
        raise EigensolverNonConvergence(
            'ARPACK did not converge: %d of %d eigenpairs converged after %d '
            'matrix-vector products' % (nconv, nroots, nmv[0]),
            niter=nmv[0], residual=residual, nconverged=nconv) from err

    idx = numpy.argsort(e)
    e = e[idx]
    c = c[:,idx]
    log.debug('ARPACK converged in %d matrix-vector products  e= %s',
              nmv[0], e)
    return e, c


def make_diag_precond(diag, level_shift=0):
    '''Generate the preconditioner function with the diagonal function.'''
    # For diagonal matrix A, precond (Ax-x*e)/(diag(A)-e) is not able to
    # generate linearly independent basis. Use level_shift to break the
    # correlation between Ax-x*e and diag(A)-e.
    def precond(dx, e, *args):
        diagd = diag - (e - level_shift)
        diagd[abs(diagd)<1e-8] = 1e-8
        return dx/diagd
    return precond


def davidson(aop, x0, precond, tol=1e-12, max_cycle=50, max_space=12,
             lindep=DAVIDSON_LINDEP, nroots=1, tol_residual=None,
             verbose=logger.WARN):
    r'''Davidson diagonalization method to solve  a c = e c.  Ref
    [1] E.R. Davidson, J. Comput. Phys. 17 (1), 87-94 (1975).

    Args:
        aop : function(x) => array_like_x
            Matrix vector multiplication :math:`y_{i} = \sum_{j}a_{ij}*x_{j}`.
        x0 : 1D array or a list of 1D arrays
            Initial guess.
        precond : diagonal elements of the matrix or  function(dx, e, x0) => array_like_dx
            Preconditioner to generate new trial vector.

    Kwargs:
        tol : float
            Convergence tolerance of the eigenvalues.
        max_cycle : int
            max number of iterations.
        max_space : int
            space size to hold trial vectors.  The subspace is collapsed to
            the current eigenvectors when it is exceeded.
        lindep : float
            Linear dependency threshold of the trial vectors.
        nroots : int
            Number of eigenvalues to be computed.
        tol_residual : float
            Convergence tolerance of the residual norm.  Default is sqrt(tol).

    Returns:
        e, c.  The lowest nroots eigenvalues and the eigenvectors in columns.

    Raises:
        EigensolverNonConvergence if the residuals do not converge within
        max_cycle iterations.
    '''
    if isinstance(verbose, logger.Logger):
        log = verbose
    else:
        log = logger.Logger(verbose=verbose)

    if tol_residual is None:
        toloose = numpy.sqrt(tol)
    else:
        toloose = tol_residual
    log.debug1('tol %g  toloose %g', tol, toloose)

    if not callable(precond):
        precond = make_diag_precond(precond)

    if isinstance(x0, numpy.ndarray) and x0.ndim == 1:
        x0 = [x0]
    max_space = max_space + (nroots-1) * 4

    xt = _orthonormalize(x0, [], lindep)
    if len(xt) == 0:
        raise LinearDependenceError('Initial guess is empty or zero')

    xs = []
    ax = []
    e = None
    conv = numpy.zeros(nroots, dtype=bool)
    dx_norm = numpy.full(nroots, numpy.nan)
    for icyc in range(max_cycle):
        axt = [aop(x) for x in xt]
        xs.extend(xt)
        ax.extend(axt)
        space = len(xs)

        heff = numpy.dot(numpy.asarray(xs), numpy.asarray(ax).T)
        heff = (heff + heff.T) * .5
        w, v = scipy.linalg.eigh(heff)
        elast = e
        e = w[:nroots]
        v = v[:,:nroots]
        if elast is None or elast.size != e.size:
            de = e
        else:
            de = e - elast

        x0 = numpy.dot(v.T, numpy.asarray(xs))
        ax0 = numpy.dot(v.T, numpy.asarray(ax))

        dx_norm = numpy.zeros(e.size)
        xt = []
        for k, ek in enumerate(e):
            dx = ax0[k] - ek * x0[k]
            dx_norm[k] = numpy.linalg.norm(dx)
            conv[k] = abs(de[k]) < tol and dx_norm[k] < toloose
            if not conv[k] and dx_norm[k]**2 > lindep:
                xt.append(precond(dx, ek, x0[k]))
        log.debug('davidson %d %d  |r|= %4.3g  e= %s  max|de|= %4.3g',
                  icyc, space, max(dx_norm), e, max(abs(de)))
        if all(conv[:e.size]) and e.size == nroots:
            break

        if space + len(xt) > max_space:
            xs = list(x0)
            ax = list(ax0)
            log.debug1('Collapse subspace to %d vectors', len(xs))

        xt = _orthonormalize(xt, xs, lindep)
        if len(xt) == 0:
            log.debug('Linear dependency in trial subspace. |r| for each state %s',
                      dx_norm)
            conv[:e.size][dx_norm < toloose] = True
            break
    else:
        icyc = max_cycle - 1

    if not all(conv) or e.size < nroots:
        raise EigensolverNonConvergence(
            'Davidson did not converge in %d iterations  |r|= %s' %
            (icyc+1, dx_norm), niter=icyc+1, residual=max(dx_norm),
            nconverged=int(conv.sum()))
    return e, x0.T

def _orthonormalize(xt, basis, lindep):
    '''Gram-Schmidt orthonormalization of the vectors xt against basis and
    against each other.  Vectors with squared norm below lindep are dropped.'''
    qs = []
    for x in xt:
        x = numpy.array(x, dtype=numpy.double)
        # two passes to keep the orthogonality in finite precision
        for i in range(2):
            for q in basis:
                x -= numpy.dot(q, x) * q
            for q in qs:
                x -= numpy.dot(q, x) * q
        norm = numpy.linalg.norm(x)
        if norm**2 > lindep:
            qs.append(x / norm)
    return qs
