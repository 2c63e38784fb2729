import itertools
import time

import pytest
import torch

from potts_ssvm.graph.potts import potts_energy
from potts_ssvm.graph.schema import GraphSample
from potts_ssvm.ssvm.dims import resolve_dims
from potts_ssvm.ssvm.features import joint_feature_vector
from potts_ssvm.ssvm.graph_labeling import GraphLabelingProblem
from potts_ssvm.ssvm.oracle import (
    build_potts_graph,
    hamming_loss,
    loss_augment,
    separation_oracle,
    split_weights,
)


def _two_node():
    return GraphSample(
        node_x=torch.tensor([[1.0, 0.0], [0.0, 1.0]]),
        edge_index=[(0, 1)],
        edge_z=[torch.tensor([2.0])],
    )


def test_two_node_scenario_pins_tie_breaking():
    sample, truth = _two_node(), [1, 0]
    problem = GraphLabelingProblem([sample], [truth], num_threads=1)
    assert problem.get_num_edge_weights() == 1
    assert problem.get_num_dimensions() == 3
    w = torch.tensor([0.0, 1.0, -1.0], dtype=torch.float64)

    w_edge, w_node = split_weights(w, problem.dims)
    g = loss_augment(build_potts_graph(sample, w_edge, w_node), truth)
    assert g.node_scores == [0.0, 0.0]
    assert g.edge_weights == [0.0]
    # every labeling has energy 0, so all four are optimal
    assert {potts_energy(g, y) for y in itertools.product([0, 1], repeat=2)} == {0.0}

    loss, psi = problem.separation_oracle(0, w)
    # ties resolve to "off": predicted labeling is [0, 0]
    assert loss == 1.0
    assert torch.equal(psi, torch.zeros(3, dtype=torch.float64))


def test_truth_psi_equals_oracle_psi_when_prediction_is_correct():
    problem = GraphLabelingProblem([_two_node()], [[1, 0]])
    w = torch.tensor([0.0, 5.0, -5.0], dtype=torch.float64)
    loss, psi = problem.separation_oracle(0, w)
    assert loss == 0.0
    truth = problem.get_truth_joint_feature_vector(0)
    assert torch.allclose(psi, truth)
    assert torch.allclose(truth, torch.tensor([-2.0, 1.0, 0.0], dtype=torch.float64))


def test_hamming_loss():
    assert hamming_loss([1, 0, 1, 1], [1, 1, 0, 1]) == 2.0
    assert hamming_loss([0, 0], [0, 0]) == 0.0
    assert hamming_loss([3, 0], [True, False]) == 0.0


def _random_sample(n, seed):
    g = torch.Generator().manual_seed(seed)
    node_x = torch.randn((n, 3), generator=g, dtype=torch.float64)
    # (0, 1) is always present so edge_dims resolves to 2
    edges = [(i, j) for i in range(n) for j in range(i + 1, n) if float(torch.rand((1,), generator=g)) < 0.5 or (i, j) == (0, 1)]
    edge_z = [torch.rand((2,), generator=g, dtype=torch.float64) for _ in edges]
    truth = (torch.rand((n,), generator=g) < 0.5).long().tolist()
    w = torch.cat([torch.rand((2,), generator=g, dtype=torch.float64) * 2, torch.randn((3,), generator=g, dtype=torch.float64)])
    return GraphSample(node_x=node_x, edge_index=edges, edge_z=edge_z), truth, w


def test_oracle_finds_loss_augmented_argmax():
    for seed in range(15):
        sample, truth, w = _random_sample(2 + seed % 5, seed)
        dims = resolve_dims([sample])
        loss, psi, labeling = separation_oracle(sample, truth, w, dims)
        assert loss == hamming_loss(labeling, truth)
        best = max(
            float(torch.dot(w, joint_feature_vector(sample, y, dims))) + hamming_loss(y, truth)
            for y in itertools.product([0, 1], repeat=sample.num_nodes)
        )
        assert float(torch.dot(w, psi)) + loss == pytest.approx(best, abs=1e-9)


def test_sparse_oracle_matches_dense_oracle():
    for seed in range(5):
        sample, truth, w = _random_sample(5, 100 + seed)
        sparse = GraphSample(
            node_x=[{k: v for k, v in enumerate(x.tolist())} for x in sample.node_x],
            edge_index=sample.edges,
            edge_z=[{k: v for k, v in enumerate(z.tolist())} for z in sample.edge_z],
        )
        dense_problem = GraphLabelingProblem([sample], [truth])
        sparse_problem = GraphLabelingProblem([sparse], [truth])
        assert sparse_problem.is_sparse and not dense_problem.is_sparse
        assert sparse_problem.dims == dense_problem.dims

        loss_d, psi_d = dense_problem.separation_oracle(0, w)
        loss_s, psi_s = sparse_problem.separation_oracle(0, w)
        assert loss_d == loss_s
        flat = torch.zeros(5, dtype=torch.float64)
        for k, v in psi_s:
            flat[k] += v
        assert torch.allclose(psi_d, flat)


def test_sparse_scoring_cost_follows_stored_entries():
    D = 2_000_000
    N = 400
    w_node = torch.arange(D, dtype=torch.float64) * 1e-6
    w_edge = torch.tensor([0.5, 2.0], dtype=torch.float64)
    sample = GraphSample(
        node_x=[{(7919 * i) % D: 2.0} for i in range(N)],
        edge_index=[(i, i + 1) for i in range(N - 1)],
        edge_z=[[(1, 1.0), (5, 3.0)] for _ in range(N - 1)],
    )
    t0 = time.perf_counter()
    g = build_potts_graph(sample, w_edge, w_node)
    dt = time.perf_counter() - t0
    assert dt < 1.0
    assert g.node_scores[3] == pytest.approx(2.0 * (7919 * 3) * 1e-6)
    # index 5 lies outside the edge block and is ignored
    assert g.edge_weights == [pytest.approx(2.0)] * (N - 1)
