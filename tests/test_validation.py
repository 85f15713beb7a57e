# tests/test_validation.py
import math

import numpy as np
import pytest

from resnet_core import BoundaryCondition, Circuit, Solution, solve_direct, solve_relaxation
from resnet_core.data_structures import ConnectionResult, NodeResult
from resnet_core.validation import (
    CircuitValidator,
    IssueCode,
    SolutionValidationError,
    SolutionValidator,
    ValidationIssueLevel,
    compare_matrices,
    compare_solutions,
)


def make_solution(voltages, currents, boundary=None):
    results = tuple(
        NodeResult(voltage=v, connections=tuple(ConnectionResult(to, i) for to, i in node_currents))
        for v, node_currents in zip(voltages, currents)
    )
    return Solution(voltages=np.asarray(voltages, dtype=float), results=results,
                    boundary=boundary, method="direct")


class TestCircuitValidator:

    def test_symmetric_circuit_has_no_issues(self, parallel_branches):
        assert CircuitValidator(parallel_branches.circuit, parallel_branches.boundary).validate() == []

    def test_mismatched_resistance(self):
        circuit = Circuit.from_adjacency([[(1, 1.0)], [(0, 2.0)]])
        issues = CircuitValidator(circuit).validate()

        assert len(issues) == 2
        assert {issue.code for issue in issues} == {IssueCode.TOPO_ASYMMETRIC.code}
        assert all(issue.level == ValidationIssueLevel.WARNING for issue in issues)
        assert {issue.node for issue in issues} == {0, 1}

    def test_missing_reverse_entry(self):
        circuit = Circuit.from_adjacency([[(1, 1.0), (2, 1.0)], [(0, 1.0)], [(1, 1.0)]])
        issues = CircuitValidator(circuit).validate()
        codes = [(issue.code, issue.node) for issue in issues]
        assert ("TOPO_ASYMMETRIC", 0) in codes
        assert ("TOPO_ASYMMETRIC", 2) in codes

    def test_parallel_resistors_count_per_entry(self):
        circuit = Circuit.from_adjacency([[(1, 1.0), (1, 1.0)], [(0, 1.0)]])
        issues = CircuitValidator(circuit).validate()
        assert [issue.node for issue in issues] == [0, 1]

    def test_isolated_interior_node(self):
        circuit = Circuit.from_adjacency([[(1, 1.0)], [(0, 1.0)], []])
        issues = CircuitValidator(circuit, BoundaryCondition(0, 1, 1.0)).validate()
        assert [(i.code, i.node) for i in issues] == [("TOPO_ISOLATED", 2)]

    def test_isolated_boundary_node_is_not_reported(self):
        circuit = Circuit.from_adjacency([[(1, 1.0)], [(0, 1.0)], []])
        assert CircuitValidator(circuit, BoundaryCondition(2, 0, 1.0)).validate() == []

    def test_self_loop_is_info(self):
        circuit = Circuit.from_adjacency([[(0, 5.0), (1, 1.0)], [(0, 1.0)]])
        issues = CircuitValidator(circuit).validate()
        assert len(issues) == 1
        assert issues[0].level == ValidationIssueLevel.INFO
        assert "5.0 ohm connection to itself" in issues[0].message

    def test_requires_circuit(self):
        with pytest.raises(TypeError):
            CircuitValidator([[(1, 1.0)], [(0, 1.0)]])

    def test_issues_logged_by_solver(self, caplog):
        circuit = Circuit.from_adjacency([[(1, 1.0)], [(0, 2.0), (2, 1.0)], [(1, 1.0)]])
        solve_direct(circuit, 2, 0, 1.0)
        assert "TOPO_ASYMMETRIC" in caplog.text


class TestSolutionValidator:

    def test_kcl_violation_at_interior_node(self):
        solution = make_solution(
            [1.0, 0.4, 0.0],
            [[(1, 0.6)], [(0, -0.6), (2, 0.4)], [(1, -0.4)]],
            boundary=BoundaryCondition(2, 0, 1.0),
        )
        issues = SolutionValidator(solution).validate()
        kcl = [i for i in issues if i.code == "LAW_KCL"]
        assert [i.node for i in kcl] == [1]
        assert kcl[0].details["current_sum"] == pytest.approx(-0.2)

    def test_boundary_nodes_are_skipped(self):
        solution = make_solution(
            [1.0, 0.5, 0.0],
            [[(1, 0.5)], [(0, -0.5), (2, 0.5)], [(1, -0.5)]],
            boundary=BoundaryCondition(2, 0, 1.0),
        )
        assert SolutionValidator(solution).validate() == []

    def test_without_boundary_every_node_is_checked(self):
        results = make_solution(
            [1.0, 0.5, 0.0],
            [[(1, 0.5)], [(0, -0.5), (2, 0.5)], [(1, -0.5)]],
        ).results
        issues = SolutionValidator(results).validate()
        assert {i.node for i in issues if i.code == "LAW_KCL"} == {0, 2}

    def test_nan_values(self):
        solution = make_solution(
            [1.0, math.nan, 0.0],
            [[(1, math.nan)], [(0, math.nan), (2, math.nan)], [(1, math.nan)]],
            boundary=BoundaryCondition(2, 0, 1.0),
        )
        issues = SolutionValidator(solution).validate()
        codes = [(i.code, i.node) for i in issues]
        assert ("NUM_NAN_VOLTAGE", 1) in codes
        assert codes.count(("NUM_NAN_CURRENT", 1)) == 2
        assert all(i.level == ValidationIssueLevel.ERROR for i in issues if i.code.startswith("NUM_"))

    def test_voltage_consistency_is_a_warning(self):
        # Unequal resistors: currents balance, voltage deltas do not.
        circuit = Circuit.from_resistors(3, [(0, 1, 1.0), (1, 2, 3.0)])
        solution = solve_direct(circuit, 2, 0, 4.0)
        issues = SolutionValidator(solution).validate()

        assert [i.code for i in issues] == ["LAW_VOLTAGE_CONSISTENCY"]
        assert issues[0].level == ValidationIssueLevel.WARNING
        SolutionValidator(solution).assert_valid()

    def test_assert_valid_raises_with_report(self):
        solution = make_solution(
            [1.0, 0.4, 0.0],
            [[(1, 0.6)], [(0, -0.6), (2, 0.4)], [(1, -0.4)]],
            boundary=BoundaryCondition(2, 0, 1.0),
        )
        with pytest.raises(SolutionValidationError) as exc_info:
            SolutionValidator(solution).assert_valid()

        error = exc_info.value
        assert [i.code for i in error.issues] == ["LAW_KCL"]
        report = error.get_diagnostic_report()
        assert "Solution Validation Error" in report
        assert "Node:           1" in report

    def test_loose_tolerance_accepts_short_relaxation(self, three_node_chain):
        solution = solve_relaxation(*three_node_chain.args, iterations=20, learning_rate=0.1)
        assert SolutionValidator(solution).validate() != []
        assert SolutionValidator(solution, tolerance=1e-3, voltage_tolerance=1e-3).validate() == []


class TestComparison:

    def test_identical_solutions(self, parallel_branches):
        solution = solve_direct(*parallel_branches.args)
        report = compare_solutions(solution, solution)
        assert report.voltage_error == 0.0
        assert report.max_current_error == 0.0

    def test_errors_are_averaged_over_nodes(self):
        truth = make_solution([1.0, 0.0], [[(1, 1.0)], [(0, -1.0)]])
        result = make_solution([0.8, 0.0], [[(1, 0.6)], [(0, -1.0)]])
        report = compare_solutions(truth, result)

        assert report.voltage_error == pytest.approx(0.1)
        assert report.current_error == pytest.approx(0.2)
        assert report.max_voltage_error == pytest.approx(0.2)
        assert report.max_current_error == pytest.approx(0.4)

    def test_relaxation_against_direct(self, five_node_chain):
        direct = solve_direct(*five_node_chain.args)
        relaxed = solve_relaxation(*five_node_chain.args, iterations=2000, learning_rate=0.1)
        report = compare_solutions(direct, relaxed)
        assert report.max_voltage_error < 1e-3
        assert report.max_current_error < 1e-3

    def test_mismatched_node_counts(self):
        truth = make_solution([1.0, 0.0], [[(1, 1.0)], [(0, -1.0)]])
        with pytest.raises(ValueError, match="2 and 1 nodes"):
            compare_solutions(truth, truth.results[:1])

    def test_compare_matrices(self):
        a = np.eye(2)
        b = np.array([[1.0, 0.4], [0.0, 0.6]])
        assert compare_matrices(a, b) == pytest.approx(0.2)
        with pytest.raises(ValueError):
            compare_matrices(a, np.eye(3))
