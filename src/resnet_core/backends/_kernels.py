# src/resnet_core/backends/_kernels.py
"""
Numba kernels of the data-parallel backend.

Each kernel launches one logical worker per output cell through `prange`. Workers of a
kernel call read the previous full array and write exactly one cell, so they have no
ordering dependency on each other. Accumulation happens in the dtype of the inputs.
"""
import numpy as np
from numba import njit, prange


@njit(cache=True, parallel=True)
def matmat_kernel(A, B):
    n_rows = A.shape[0]
    n_inner = A.shape[1]
    n_cols = B.shape[1]
    out = np.zeros((n_rows, n_cols), dtype=A.dtype)

    for cell in prange(n_rows * n_cols):
        i = cell // n_cols
        j = cell % n_cols
        for k in range(n_inner):
            out[i, j] += A[i, k] * B[k, j]

    return out


@njit(cache=True, parallel=True)
def matvec_kernel(A, x):
    n_rows = A.shape[0]
    n_inner = A.shape[1]
    out = np.zeros(n_rows, dtype=A.dtype)

    for i in prange(n_rows):
        for k in range(n_inner):
            out[i] += A[i, k] * x[k]

    return out


@njit(cache=True, parallel=True)
def gauss_jordan_step_kernel(augmented, k):
    """
    One Gauss-Jordan elimination step on pivot row `k`, which must already hold a
    non-zero pivot in column `k`. Returns the next augmented array.
    """
    n_rows = augmented.shape[0]
    n_cols = augmented.shape[1]
    out = np.empty_like(augmented)
    pivot = augmented[k, k]

    for cell in prange(n_rows * n_cols):
        i = cell // n_cols
        j = cell % n_cols
        if i == k:
            out[i, j] = augmented[k, j] / pivot
        else:
            out[i, j] = augmented[i, j] - augmented[i, k] * (augmented[k, j] / pivot)

    return out
