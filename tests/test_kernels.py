import logging
import math

import numpy as np
import pytest
import scipy.stats as sp
from scipy.integrate import quad, dblquad

from kdecore import (
    BandwidthError, DomainError, Interval, Matrix2, Sample, SingularMatrixError,
    StandardNormal, STANDARD_NORMAL, Uniform, UniformQueryError, Vector2,
    bivariate_gaussian_density, density, density_many, gaussian_density,
    gaussian_mixed_density, gaussian_mixed_mixed_density,
)


# (x, y, kernel value against (0, 0) with bandwidth [[2.0, 0.3], [0.3, 0.5]])
BIVARIATE_KERNEL_DATA = [
    (-0.05015484986718377, 4.631375826882106, 8.953059406467044e-12),
    (1.2847681232524142, 0.3286109201987051, 0.10821090618543903),
    (0.27153515732684674, -2.315645640123003, 0.0003667569844314917),
    (-0.27239977872185506, -3.250060892514204, 1.9911021543184804e-06),
    (-4.303898993114087, 1.6030807546462125, 6.279636452680284e-06),
    (-0.06626695931503779, -4.131631437662127, 1.300749775055857e-09),
    (1.3865878347895464, 0.22669870948548798, 0.10313021247790838),
    (3.5327025938459204, 2.5624858616925934, 7.863447318780707e-05),
    (-1.2145669102041778, -4.150551578012804, 3.51953904534754e-09),
    (0.04283185697010605, -4.575316215934372, 1.597977195830182e-11),
]


# ---------------------------------------------------------------------------
# 1-D Gaussian kernel
# ---------------------------------------------------------------------------

def test_gaussian_density_formula():
    x, xi, h = 0.7, -0.2, 0.4
    expected = math.exp(-((x - xi) ** 2) / (2 * h * h)) / (math.sqrt(2 * math.pi) * h)
    assert gaussian_density(x, xi, h) == pytest.approx(expected, rel=1e-15)
    np.testing.assert_allclose(gaussian_density(x, xi, h), sp.norm.pdf(x, loc=xi, scale=h), rtol=1e-13)


def test_gaussian_density_unit_bandwidth_is_standard_normal(kernel):
    for x in (-1.5, 0.0, 1.2847681232524142):
        assert gaussian_density(x, 0.0, 1.0) == pytest.approx(kernel.pdf(x), rel=1e-15)


@pytest.mark.parametrize("h", [0.05, 0.3, 1.0, 4.0])
def test_gaussian_density_symmetric(rng, h):
    for x, xi in rng.normal(scale=3.0, size=(20, 2)):
        assert gaussian_density(x, xi, h) == gaussian_density(xi, x, h)


@pytest.mark.parametrize("h", [0.1, 1.0, 3.5])
def test_gaussian_density_integrates_to_one(h):
    total, _ = quad(lambda x: gaussian_density(x, 0.0, h), -50.0 * h, 50.0 * h, points=[0.0])
    assert total == pytest.approx(1.0, abs=1e-8)


def test_gaussian_density_positive(rng):
    for x, xi in rng.normal(scale=2.0, size=(50, 2)):
        assert gaussian_density(x, xi, 0.5) > 0.0


def test_gaussian_density_concentrates_as_bandwidth_shrinks():
    assert gaussian_density(0.0, 0.0, 1e-3) > gaussian_density(0.0, 0.0, 1e-1)
    assert gaussian_density(1.0, 0.0, 1e-3) == 0.0


@pytest.mark.parametrize("h", [0.0, -0.5, np.nan])
def test_gaussian_density_rejects_bad_bandwidth(h):
    with pytest.raises(BandwidthError):
        gaussian_density(0.0, 0.0, h)


def test_gaussian_density_propagates_ieee_values():
    assert math.isnan(gaussian_density(np.nan, 0.0, 1.0))
    assert gaussian_density(np.inf, 0.0, 1.0) == 0.0


def test_gaussian_density_rejects_mixed_points():
    with pytest.raises(TypeError):
        gaussian_density(Sample(0.0), 0.0, 1.0)


# ---------------------------------------------------------------------------
# Scalar query, mixed reference
# ---------------------------------------------------------------------------

def test_mixed_reference_sample_matches_scalar():
    for x, xi, h in [(0.3, 1.1, 0.7), (-2.0, 0.0, 1.0), (5.0, 4.9, 0.01)]:
        assert gaussian_mixed_density(x, Sample(xi), h) == gaussian_density(x, xi, h)


def test_mixed_reference_uniform(interval):
    h = 0.5
    assert gaussian_mixed_density(0.3, Uniform(interval), h) == 1.0 / (interval.width() * h)
    # independent of query position
    assert gaussian_mixed_density(100.0, Uniform(interval), h) == 0.5


def test_mixed_reference_rejects_plain_scalar_reference():
    with pytest.raises(TypeError):
        gaussian_mixed_density(0.0, 1.0, 1.0)


# ---------------------------------------------------------------------------
# Mixed query, mixed reference
# ---------------------------------------------------------------------------

def test_mixed_mixed_samples_bit_for_bit(rng):
    for x, xi in rng.normal(size=(20, 2)):
        h = 0.8
        assert gaussian_mixed_mixed_density(Sample(x), Sample(xi), h) == gaussian_density(x, xi, h)


def test_mixed_mixed_uniform_reference(interval):
    h = 0.25
    assert gaussian_mixed_mixed_density(Sample(7.0), Uniform(interval), h) == 1.0 / (interval.width() * h)


@pytest.mark.parametrize("reference", [Sample(0.0), Uniform(Interval(0.0, 1.0))])
def test_mixed_mixed_uniform_query_fails(reference):
    with pytest.raises(UniformQueryError):
        gaussian_mixed_mixed_density(Uniform(Interval(0.0, 1.0)), reference, 1.0)


def test_mixed_mixed_rejects_bad_bandwidth():
    with pytest.raises(BandwidthError):
        gaussian_mixed_mixed_density(Sample(0.0), Sample(0.0), 0.0)


# ---------------------------------------------------------------------------
# Bivariate kernel
# ---------------------------------------------------------------------------

def test_bivariate_reference_values(bandwidth_matrix):
    for x, y, expected in BIVARIATE_KERNEL_DATA:
        value = bivariate_gaussian_density((x, y), (0.0, 0.0), bandwidth_matrix)
        assert value == expected


def test_bivariate_concrete_scenario(kernel, bandwidth_matrix):
    value = kernel.density(Vector2(1.2847681232524142, 0.3286109201987051), Vector2(0.0, 0.0), bandwidth_matrix)
    assert value == 0.10821090618543903


def test_bivariate_matches_scipy(rng, spd_matrix):
    mvn_cov = spd_matrix.to_array()
    for _ in range(10):
        x, xi = rng.normal(size=2), rng.normal(size=2)
        expected = sp.multivariate_normal(mean=xi, cov=mvn_cov).pdf(x)
        np.testing.assert_allclose(bivariate_gaussian_density(x, xi, spd_matrix), expected, rtol=1e-10)


def test_bivariate_symmetric_and_positive(rng, bandwidth_matrix):
    for x, xi in rng.normal(size=(20, 2, 2)):
        forward = bivariate_gaussian_density(x, xi, bandwidth_matrix)
        assert forward > 0.0
        assert forward == pytest.approx(bivariate_gaussian_density(xi, x, bandwidth_matrix), rel=1e-14)


def test_bivariate_integrates_to_one(bandwidth_matrix):
    total, _ = dblquad(
        lambda y, x: bivariate_gaussian_density((x, y), (0.0, 0.0), bandwidth_matrix),
        -15.0, 15.0, -15.0, 15.0,
    )
    assert total == pytest.approx(1.0, abs=1e-6)


def test_bivariate_accepts_array_bandwidth(bandwidth_matrix):
    x = (0.4, -0.2)
    assert bivariate_gaussian_density(x, (0.0, 0.0), [[2.0, 0.3], [0.3, 0.5]]) == \
        bivariate_gaussian_density(x, (0.0, 0.0), bandwidth_matrix)


def test_bivariate_singular_bandwidth_fails():
    h = Matrix2((1.0, 1.0), (1.0, 1.0))
    with pytest.raises(DomainError):
        bivariate_gaussian_density((0.5, 0.5), (0.0, 0.0), h)
    with pytest.raises(BandwidthError):
        density(STANDARD_NORMAL, (0.5, 0.5), (0.0, 0.0), h)


def test_bivariate_negative_determinant_fails():
    with pytest.raises(BandwidthError):
        bivariate_gaussian_density((0.5, 0.5), (0.0, 0.0), Matrix2((1.0, 2.0), (2.0, 1.0)))


def test_bivariate_determinant_positive_but_not_invertible_numerically():
    # det == 2**-52, one ulp above zero relative to the diagonal product
    h = Matrix2((1.0, 1.0), (1.0, np.nextafter(1.0, 2.0)))
    assert h.det() > 0.0
    assert h.is_singular()
    with pytest.raises(SingularMatrixError):
        bivariate_gaussian_density((0.0, 0.0), (0.0, 0.0), h)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def test_density_dispatch_scalar(kernel):
    assert density(kernel, 0.3, 1.1, 0.7) == gaussian_density(0.3, 1.1, 0.7)
    assert kernel.density(0.3, 1.1, 0.7) == gaussian_density(0.3, 1.1, 0.7)


def test_density_dispatch_mixed(kernel, interval):
    h = 0.7
    assert density(kernel, 0.3, Sample(1.1), h) == gaussian_density(0.3, 1.1, h)
    assert density(kernel, 0.3, Uniform(interval), h) == 1.0 / (interval.width() * h)
    assert density(kernel, Sample(0.3), Sample(1.1), h) == gaussian_density(0.3, 1.1, h)
    assert density(kernel, Sample(0.3), Uniform(interval), h) == 1.0 / (interval.width() * h)
    # mixed query against a plain reference
    assert density(kernel, Sample(0.3), 1.1, h) == gaussian_density(0.3, 1.1, h)


@pytest.mark.parametrize("reference", [0.0, Sample(0.0), Uniform(Interval(0.0, 1.0))])
def test_density_uniform_query_fails(kernel, reference):
    with pytest.raises(UniformQueryError):
        density(kernel, Uniform(Interval(0.0, 1.0)), reference, 1.0)


def test_density_dispatch_vector(kernel, bandwidth_matrix):
    x, xi = (0.4, -0.2), (0.1, 0.1)
    assert density(kernel, x, xi, bandwidth_matrix) == bivariate_gaussian_density(x, xi, bandwidth_matrix)
    assert density(kernel, np.array(x), Vector2(*xi), bandwidth_matrix) == \
        bivariate_gaussian_density(x, xi, bandwidth_matrix)


def test_density_family_mismatch(kernel, bandwidth_matrix):
    with pytest.raises(TypeError):
        density(kernel, 0.0, (0.0, 0.0), 1.0)
    with pytest.raises(TypeError):
        density(kernel, (0.0, 0.0), Sample(0.0), bandwidth_matrix)


def test_density_bandwidth_kind_mismatch(kernel, bandwidth_matrix):
    with pytest.raises(TypeError):
        density(kernel, (0.0, 0.0), (1.0, 1.0), 1.0)
    with pytest.raises(TypeError):
        density(kernel, 0.0, 1.0, bandwidth_matrix)


def test_density_rejects_unknown_kernel():
    with pytest.raises(TypeError):
        density(object(), 0.0, 0.0, 1.0)


def test_density_is_pure(kernel, bandwidth_matrix):
    args = ((0.4, -0.2), (0.1, 0.1), bandwidth_matrix)
    assert density(kernel, *args) == density(kernel, *args)
    assert bandwidth_matrix == Matrix2((2.0, 0.3), (0.3, 0.5))


# ---------------------------------------------------------------------------
# density_many
# ---------------------------------------------------------------------------

def test_density_many_scalar_matches_pairwise(kernel, rng):
    refs = rng.normal(size=25)
    out = density_many(kernel, 0.3, refs, 0.6)
    assert out.shape == (25,)
    np.testing.assert_allclose(out, [density(kernel, 0.3, r, 0.6) for r in refs], rtol=1e-14)


def test_density_many_vector_matches_pairwise(kernel, rng, bandwidth_matrix):
    refs = rng.normal(size=(25, 2))
    x = (0.2, -0.4)
    out = density_many(kernel, x, refs, bandwidth_matrix)
    assert out.shape == (25,)
    np.testing.assert_allclose(
        out, [density(kernel, x, r, bandwidth_matrix) for r in refs], rtol=1e-12
    )
    as_list = density_many(kernel, x, [Vector2(*r) for r in refs], bandwidth_matrix)
    np.testing.assert_allclose(as_list, out, rtol=1e-15)


def test_density_many_mixed(kernel, interval):
    refs = [Sample(0.0), Uniform(interval), 1.5]
    out = density_many(kernel, Sample(0.5), refs, 0.5)
    expected = [density(kernel, Sample(0.5), r, 0.5) for r in refs]
    np.testing.assert_array_equal(out, expected)
    assert out[1] == 0.5

    with pytest.raises(UniformQueryError):
        density_many(kernel, Uniform(interval), refs, 0.5)


def test_density_many_scalar_query_mixed_refs(kernel, interval):
    refs = [Sample(0.0), Uniform(interval)]
    out = density_many(kernel, 0.2, refs, 1.0)
    np.testing.assert_array_equal(out, [gaussian_density(0.2, 0.0, 1.0), 0.25])


def test_density_many_vector_rejects_scalar_references(kernel, bandwidth_matrix):
    with pytest.raises(TypeError):
        density_many(kernel, (0.0, 0.0), [1.0, 2.0], bandwidth_matrix)
    with pytest.raises(TypeError):
        density_many(kernel, (0.0, 0.0), [(1.0, 2.0), Sample(0.0)], bandwidth_matrix)
    with pytest.raises(ValueError):
        density_many(kernel, (0.0, 0.0), np.array([1.0, 2.0]), bandwidth_matrix)

    refs = [(1.0, 2.0), Vector2(0.5, -0.5)]
    out = density_many(kernel, (0.0, 0.0), refs, bandwidth_matrix)
    assert len(out) == len(refs)


def test_density_many_empty_and_validation(kernel, bandwidth_matrix):
    assert density_many(kernel, 0.0, [], 1.0).shape == (0,)
    with pytest.raises(BandwidthError):
        density_many(kernel, 0.0, [1.0, 2.0], -1.0)
    with pytest.raises(BandwidthError):
        density_many(kernel, (0.0, 0.0), [], Matrix2((1.0, 1.0), (1.0, 1.0)))
    with pytest.raises(TypeError):
        density_many(kernel, 0.0, [Sample(0.0), (1.0, 2.0)], 1.0)
    with pytest.raises(TypeError):
        density_many(StandardNormal, 0.0, [0.0], 1.0)


def test_uniform_query_is_logged(kernel, interval, caplog):
    with caplog.at_level(logging.DEBUG, logger="kdecore.kernels"):
        with pytest.raises(UniformQueryError):
            density(kernel, Uniform(interval), Sample(0.0), 1.0)
    assert "Uniform query" in caplog.text


def test_boolean_points_and_bandwidths_rejected(kernel):
    with pytest.raises(TypeError):
        gaussian_density(True, 0.0, 1.0)
    with pytest.raises(TypeError):
        gaussian_density(0.0, 0.0, True)
    with pytest.raises(TypeError):
        density(kernel, True, 0.0, 1.0)
