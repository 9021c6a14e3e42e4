import numpy as np
import pytest

import dotkernel
from dotkernel.kernels import dot_dispatch
from dotkernel.kernels.dot_dispatch import (
    DotKernelError,
    OutOfBoundsError,
    OutOfRangeError,
    dot,
    dot_product,
    select_kernel,
    small_dot,
)
from dotkernel.kernels.dot_numba import dot_f32, dot_f64, small_dot_f32, small_dot_f64, verify_correctness


@pytest.fixture
def descending():
    return np.arange(1, 9, dtype=np.float64), np.arange(8, 0, -1, dtype=np.float64)


def test_package_exports():
    assert dotkernel.MAX_SMALL_LENGTH == 8
    assert dotkernel.dot_product is dot_product
    assert isinstance(dotkernel.__version__, str)


def test_select_kernel():
    assert select_kernel(np.float64) is dot_f64
    assert select_kernel("float32") is dot_f32
    assert select_kernel(np.float64, small=True) is small_dot_f64
    assert select_kernel(np.float32, small=True) is small_dot_f32
    with pytest.raises(TypeError):
        select_kernel(np.int64)


def test_entry_points_on_descending_scenario(descending):
    a, b = descending
    assert small_dot(a, b) == 120.0
    assert small_dot(a, b, 8) == 120.0
    assert dot(a, b) == 120.0
    assert dot_product(a, b) == 120.0


def test_offset_scenario(descending):
    a = np.concatenate([[9.0, 9.0], descending[0]])
    b = np.concatenate([[-4.0, 2.5], descending[1]])
    assert dot(a, b, 2, 2) == 120.0
    assert dot(a, b, offset_a=2, offset_b=2, length=8) == 120.0
    assert dot_product(a, b, 2, 2, 8) == 120.0


def test_default_length_uses_shorter_remaining_buffer():
    a = np.ones(20)
    b = np.ones(12)
    assert dot(a, b, offset_a=5) == 12.0
    assert dot(a, b, offset_b=4) == 8.0
    assert dot(a, b, offset_a=18, offset_b=0) == 2.0


def test_small_dot_out_of_range():
    a = np.ones(9)
    with pytest.raises(OutOfRangeError):
        small_dot(a, a)
    with pytest.raises(OutOfRangeError):
        small_dot(a, a, 9)
    # Still usable through the general kernel
    assert dot(a, a) == 9.0


@pytest.mark.parametrize("call", [
    lambda a, b: small_dot(a, b, -1),
    lambda a, b: small_dot(a, b[:3], 4),
    lambda a, b: dot(a, b, length=-1),
    lambda a, b: dot(a, b, offset_a=-1),
    lambda a, b: dot(a, b, offset_a=3, length=6),
    lambda a, b: dot(a, b, offset_b=1, length=8),
    lambda a, b: dot_product(a, b, length=9),
    lambda a, b: dot_product(a, b, 0, 9),
])
def test_out_of_bounds(descending, call):
    a, b = descending
    with pytest.raises(OutOfBoundsError):
        call(a, b)


@pytest.mark.parametrize("call", [
    lambda a, b: small_dot(a, b, 3.7),
    lambda a, b: small_dot(a, b, np.float64(3.0)),
    lambda a, b: dot(a, b, length=2.5),
    lambda a, b: dot(a, b, offset_a=1.0),
    lambda a, b: dot(a, b, offset_b="1"),
    lambda a, b: dot_product(a, b, 0.0, 0, 4),
])
def test_non_integer_length_or_offset(descending, call):
    a, b = descending
    with pytest.raises(TypeError):
        call(a, b)


def test_numpy_integer_length_and_offsets(descending):
    a, b = descending
    assert small_dot(a, b, np.int64(8)) == 120.0
    assert dot(a, b, np.int32(0), np.int64(0), np.int64(8)) == 120.0


def test_error_hierarchy():
    assert issubclass(OutOfBoundsError, IndexError)
    assert issubclass(OutOfRangeError, ValueError)
    assert issubclass(OutOfBoundsError, DotKernelError)
    assert issubclass(OutOfRangeError, DotKernelError)


@pytest.mark.parametrize("a,b", [
    ([1.0, 2.0], [3.0, 4.0]),
    (np.ones(4, dtype=np.float64), np.ones(4, dtype=np.float32)),
    (np.ones(4, dtype=np.int64), np.ones(4, dtype=np.int64)),
    (np.ones((2, 2)), np.ones((2, 2))),
])
def test_rejects_bad_buffers(a, b):
    with pytest.raises(TypeError):
        dot(a, b)
    with pytest.raises(TypeError):
        dot_product(a, b)
    with pytest.raises(TypeError):
        small_dot(a, b)


@pytest.mark.parametrize("dtype", [np.float64, np.float32])
def test_zero_length(dtype):
    a = np.empty(0, dtype=dtype)
    assert small_dot(a, a) == 0.0
    assert dot(a, a) == 0.0
    assert dot_product(a, a) == 0.0
    b = np.ones(4, dtype=dtype)
    assert dot(b, b, offset_a=4, offset_b=4) == 0.0


class _Recorder:
    def __init__(self, fn):
        self.fn = fn
        self.calls = 0

    def __call__(self, *args):
        self.calls += 1
        return self.fn(*args)


@pytest.mark.parametrize("length,offset,expect_small", [
    (0, 0, True),
    (5, 0, True),
    (8, 0, True),
    (9, 0, False),
    (4, 1, False),
    (100, 0, False),
])
def test_dot_product_routing(monkeypatch, length, offset, expect_small):
    small = _Recorder(small_dot_f64)
    general = _Recorder(dot_f64)
    monkeypatch.setitem(dot_dispatch._SMALL_KERNELS, np.dtype(np.float64), small)
    monkeypatch.setitem(dot_dispatch._GENERAL_KERNELS, np.dtype(np.float64), general)

    rng = np.random.default_rng(length)
    a = rng.standard_normal(length + offset)
    b = rng.standard_normal(length + offset)
    result = dot_product(a, b, offset, offset, length)

    assert (small.calls, general.calls) == ((1, 0) if expect_small else (0, 1))
    assert verify_correctness(result, a, b, offset, offset, length)


@pytest.mark.parametrize("dtype", [np.float64, np.float32])
@pytest.mark.parametrize("n", range(0, 40))
def test_dot_product_consistent_across_kernels(dtype, n):
    rng = np.random.default_rng(n)
    a = rng.standard_normal(n).astype(dtype)
    b = rng.standard_normal(n).astype(dtype)
    assert verify_correctness(dot_product(a, b), a, b)
    assert verify_correctness(dot(a, b), a, b)
