"""Unit tests for the cost-parameter guard."""

import pytest

from scryptguard.core.exceptions import ErrorKind, ScryptError
from scryptguard.core.guard import (
    DECRYPT_DEFAULTS,
    ENCRYPT_DEFAULTS,
    CostParameters,
    ResourceBudget,
    validate_budget,
    validate_derivation_params,
)


# ==============================================================================
# Tests: derivation parameters
# ==============================================================================

def test_defaults_are_accepted():
    params = validate_derivation_params(1 << 14, 8, 1)
    assert params == CostParameters(N=16384, r=8, p=1)
    assert params.memory_bytes == 128 * 16384 * 8


@pytest.mark.parametrize("n", [0, 1, -16])
def test_rejects_n_not_greater_than_one(n):
    with pytest.raises(ScryptError) as excinfo:
        validate_derivation_params(n, 8, 1)
    assert excinfo.value.kind is ErrorKind.INVALID_PARAMS
    assert "greater than 1" in str(excinfo.value)


@pytest.mark.parametrize("n", [3, 6, 1000, (1 << 20) + 1])
def test_rejects_n_not_power_of_two(n):
    with pytest.raises(ScryptError) as excinfo:
        validate_derivation_params(n, 1, 1)
    assert excinfo.value.kind is ErrorKind.INVALID_PARAMS
    assert "power of two" in str(excinfo.value)


def test_rejects_rp_at_limit():
    """r*p == 2**30 is already too large."""
    with pytest.raises(ScryptError) as excinfo:
        validate_derivation_params(16, 1 << 15, 1 << 15)
    assert excinfo.value.kind is ErrorKind.INVALID_PARAMS
    assert "r*p" in str(excinfo.value)


def test_rejects_rp_that_would_wrap_in_32_bits():
    """2**20 * 2**20 wraps to 0 in uint32 arithmetic but must still fail."""
    with pytest.raises(ScryptError) as excinfo:
        validate_derivation_params(16, 1 << 20, 1 << 20)
    assert excinfo.value.kind is ErrorKind.INVALID_PARAMS


def test_accepts_rp_just_below_limit():
    params = validate_derivation_params(2, 1, (1 << 30) - 1)
    assert params.p == (1 << 30) - 1


@pytest.mark.parametrize("r, p", [(0, 1), (1, 0), (1 << 32, 1)])
def test_rejects_r_p_out_of_range(r, p):
    with pytest.raises(ScryptError) as excinfo:
        validate_derivation_params(16, r, p)
    assert excinfo.value.kind is ErrorKind.INVALID_PARAMS


def test_rejects_n_beyond_64_bits():
    with pytest.raises(ScryptError) as excinfo:
        validate_derivation_params(1 << 64, 1, 1)
    assert "64 bits" in str(excinfo.value)


@pytest.mark.parametrize("bad", [16.0, "16", None, True])
def test_non_integer_parameters_raise_type_error(bad):
    with pytest.raises(TypeError):
        validate_derivation_params(bad, 8, 1)


def test_message_keeps_fixed_prefix():
    with pytest.raises(ScryptError) as excinfo:
        validate_derivation_params(3, 1, 1)
    assert str(excinfo.value).startswith(ErrorKind.INVALID_PARAMS.message)


# ==============================================================================
# Tests: resource budgets
# ==============================================================================

def test_direction_defaults():
    assert ENCRYPT_DEFAULTS == ResourceBudget(maxtime=5.0, maxmem=0, maxmemfrac=0.125)
    assert DECRYPT_DEFAULTS == ResourceBudget(maxtime=300.0, maxmem=0, maxmemfrac=0.5)


def test_budget_is_coerced_not_range_checked():
    budget = validate_budget(1, 0, 2)
    assert budget == ResourceBudget(maxtime=1.0, maxmem=0, maxmemfrac=2.0)
    assert isinstance(budget.maxtime, float)


def test_zero_maxmem_is_kept_as_zero():
    assert validate_budget(5.0, 0, 0.5).maxmem == 0


def test_negative_maxmem_overflows():
    with pytest.raises(OverflowError):
        validate_budget(5.0, -1, 0.5)


@pytest.mark.parametrize(
    "maxtime, maxmem, maxmemfrac",
    [("5", 0, 0.5), (5.0, 1.5, 0.5), (5.0, 0, None)],
)
def test_budget_type_errors(maxtime, maxmem, maxmemfrac):
    with pytest.raises(TypeError):
        validate_budget(maxtime, maxmem, maxmemfrac)


@pytest.mark.parametrize("field", ["maxtime", "maxmemfrac"])
def test_nan_budget_is_rejected(field):
    """NaN would break the memory/time arithmetic, so it never gets past the guard."""
    budget = {"maxtime": 5.0, "maxmem": 0, "maxmemfrac": 0.5}
    budget[field] = float("nan")
    with pytest.raises(ScryptError) as excinfo:
        validate_budget(**budget)
    assert excinfo.value.kind is ErrorKind.INVALID_PARAMS
    assert field in str(excinfo.value)


def test_infinite_budget_passes_through():
    budget = validate_budget(float("inf"), 0, float("inf"))
    assert budget.maxtime == float("inf")


@pytest.mark.parametrize("r, p", [(0, 8), (8, 0)])
def test_zero_factor_rejected_before_kdf(r, p):
    """r*p == 0 is under the 2**30 bound but still refused."""
    with pytest.raises(ScryptError) as excinfo:
        validate_derivation_params(16, r, p)
    assert excinfo.value.kind is ErrorKind.INVALID_PARAMS
    assert "between 1 and" in str(excinfo.value)
