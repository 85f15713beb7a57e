# tests/test_iterative_inverter.py
import warnings

import numpy as np
import pytest

from resnet_core import InvalidParameterError, MatrixBuilder, NumericDivergenceWarning, SingularMatrixError
from resnet_core.backends import IterativeBackend, IterativeInverter, ParallelBackend, gershgorin_bound


class TestRichardson:

    def test_converges_on_well_conditioned_matrix(self, well_conditioned_matrix):
        report = IterativeInverter().iterate(well_conditioned_matrix)

        assert report.converged
        assert report.residual <= 1e-9
        assert report.iterations == len(report.residual_history) - 1
        np.testing.assert_allclose(report.inverse, np.linalg.inv(well_conditioned_matrix), atol=1e-8)

    def test_residual_decreases(self, well_conditioned_matrix):
        history = IterativeInverter().iterate(well_conditioned_matrix).residual_history
        assert history[-1] < history[0]
        assert all(later <= earlier for earlier, later in zip(history, history[1:]))

    def test_kcl_matrix(self, three_node_chain):
        system = MatrixBuilder(three_node_chain.circuit, three_node_chain.boundary).build()
        inverse = IterativeInverter().invert(system.matrix)
        np.testing.assert_allclose(inverse @ system.rhs, three_node_chain.expected_voltages, atol=1e-8)

    def test_zero_budget_returns_initial_guess(self, well_conditioned_matrix):
        report = IterativeInverter(max_iterations=0).iterate(well_conditioned_matrix)
        assert report.iterations == 0
        assert not report.converged
        np.testing.assert_array_equal(report.inverse, np.eye(4))


class TestNewtonSchulz:

    def test_converges_on_non_symmetric_matrix(self):
        matrix = np.array([
            [4.0, 1.0, 0.0],
            [2.0, 5.0, 1.0],
            [0.0, 3.0, 6.0],
        ])
        report = IterativeInverter(method="newton_schulz").iterate(matrix)
        assert report.converged
        np.testing.assert_allclose(report.inverse, np.linalg.inv(matrix), atol=1e-9)

    def test_converges_on_eleven_node_chain(self, eleven_node_chain):
        system = MatrixBuilder(eleven_node_chain.circuit, eleven_node_chain.boundary).build()
        report = IterativeInverter(method="newton_schulz").iterate(system.matrix)
        assert report.converged
        np.testing.assert_allclose(report.inverse @ system.rhs, eleven_node_chain.expected_voltages, atol=1e-8)

    def test_fewer_iterations_than_richardson(self, well_conditioned_matrix):
        richardson = IterativeInverter(method="richardson").iterate(well_conditioned_matrix)
        newton = IterativeInverter(method="newton_schulz").iterate(well_conditioned_matrix)
        assert newton.iterations < richardson.iterations


class TestNonConvergence:

    def test_invert_warns_and_returns_last_iterate(self, eleven_node_chain):
        system = MatrixBuilder(eleven_node_chain.circuit, eleven_node_chain.boundary).build()
        with pytest.warns(NumericDivergenceWarning, match="did not converge"):
            inverse = IterativeInverter(max_iterations=5).invert(system.matrix)
        assert inverse.shape == (11, 11)

    def test_converged_inversion_does_not_warn(self, well_conditioned_matrix):
        with warnings.catch_warnings():
            warnings.simplefilter("error", NumericDivergenceWarning)
            IterativeInverter().invert(well_conditioned_matrix)

    def test_backend_raises_singular(self, eleven_node_chain):
        system = MatrixBuilder(eleven_node_chain.circuit, eleven_node_chain.boundary).build()
        backend = IterativeBackend(IterativeInverter(max_iterations=5))
        with pytest.raises(SingularMatrixError, match="did not converge") as exc_info:
            backend.invert(system.matrix)
        assert exc_info.value.backend == "iterative"

    def test_backend_raises_on_singular_matrix(self):
        matrix = np.diag([1.0, 1.0, 0.0])
        with pytest.raises(SingularMatrixError):
            IterativeBackend().invert(matrix)


class TestConvergenceRegion:

    def test_gershgorin_bound_is_largest_absolute_row_sum(self):
        matrix = np.array([[2.0, -1.0], [-3.0, 1.0]])
        assert gershgorin_bound(matrix) == pytest.approx(4.0)

    def test_convergence_limit_follows_damping(self):
        assert IterativeInverter().convergence_limit == pytest.approx(4.0)
        assert IterativeInverter(damping=0.1).convergence_limit == pytest.approx(20.0)

    def test_low_resistance_chain_reports_convergence_region(self, low_resistance_chain):
        system = MatrixBuilder(low_resistance_chain.circuit, low_resistance_chain.boundary).build()
        with pytest.raises(SingularMatrixError, match="outside the convergence region") as exc_info:
            IterativeBackend().invert(system.matrix)

        report = exc_info.value.get_diagnostic_report()
        assert "newton_schulz" in report
        assert "no connections" not in report

    def test_newton_schulz_solves_low_resistance_chain(self, low_resistance_chain):
        system = MatrixBuilder(low_resistance_chain.circuit, low_resistance_chain.boundary).build()
        backend = IterativeBackend(IterativeInverter(method="newton_schulz"))
        x = backend.solve(system.matrix, system.rhs)
        np.testing.assert_allclose(x, low_resistance_chain.expected_voltages, atol=1e-8)

    def test_budget_exhaustion_inside_region_suggests_more_iterations(self, well_conditioned_matrix):
        backend = IterativeBackend(IterativeInverter(method="newton_schulz", max_iterations=1))
        with pytest.raises(SingularMatrixError, match="did not converge") as exc_info:
            backend.invert(well_conditioned_matrix)
        assert "inverter_max_iterations" in exc_info.value.get_diagnostic_report()

    def test_elimination_singularity_keeps_isolated_node_advice(self):
        with pytest.raises(SingularMatrixError) as exc_info:
            IterativeBackend().invert(np.diag([1.0, 1.0, 0.0]))
        assert "no connections" in exc_info.value.get_diagnostic_report()


class TestConfiguration:

    @pytest.mark.parametrize("kwargs, parameter", [
        ({"method": "jacobi"}, "method"),
        ({"max_iterations": -1}, "max_iterations"),
        ({"max_iterations": 2.5}, "max_iterations"),
        ({"tolerance": -1e-3}, "tolerance"),
        ({"damping": 0.0}, "damping"),
        ({"damping": 2.0}, "damping"),
    ])
    def test_rejects_bad_arguments(self, kwargs, parameter):
        with pytest.raises(InvalidParameterError) as exc_info:
            IterativeInverter(**kwargs)
        assert exc_info.value.parameter == parameter

    def test_uses_given_multiplication_backend(self, well_conditioned_matrix):
        inverter = IterativeInverter(backend=ParallelBackend(dtype=np.float64))
        backend = IterativeBackend(inverter)
        assert backend.dtype == np.float64
        inverse = backend.invert(well_conditioned_matrix)
        np.testing.assert_allclose(inverse, np.linalg.inv(well_conditioned_matrix), atol=1e-8)
