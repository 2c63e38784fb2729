import pytest
import torch

from potts_ssvm.data.synthetic import make_synthetic_problem
from potts_ssvm.graph.potts import PottsSolverError
from potts_ssvm.graph.schema import GraphSample
from potts_ssvm.ssvm.graph_labeling import GraphLabelingProblem, InvalidGraphLabelingProblem


def test_invalid_inputs_abort_construction():
    s = GraphSample(node_x=torch.ones((2, 1)), edge_index=[(0, 1)], edge_z=[torch.tensor([-1.0])])
    with pytest.raises(InvalidGraphLabelingProblem):
        GraphLabelingProblem([s], [[0, 1]])
    with pytest.raises(ValueError):
        GraphLabelingProblem([], [])


def test_problem_keeps_references():
    samples, labels, _ = make_synthetic_problem(num_samples=3, seed=1)
    problem = GraphLabelingProblem(samples, labels)
    assert problem.samples is samples
    assert problem.labels is labels
    assert problem.get_num_samples() == 3
    assert problem.get_num_dimensions() == problem.edge_dims + problem.node_dims == 2 + 4


def test_wrong_weight_length_is_rejected():
    samples, labels, _ = make_synthetic_problem(num_samples=2, seed=2)
    problem = GraphLabelingProblem(samples, labels)
    with pytest.raises(ValueError):
        problem.separation_oracle(0, torch.zeros(problem.get_num_dimensions() + 1))


def test_threaded_risk_matches_serial():
    samples, labels, true_w = make_synthetic_problem(num_samples=8, seed=3)
    w = true_w * 0.5
    serial = GraphLabelingProblem(samples, labels, num_threads=1)
    threaded = GraphLabelingProblem(samples, labels, num_threads=4)
    r1, g1 = serial.risk_and_subgradient(w)
    r4, g4 = threaded.risk_and_subgradient(w)
    assert r1 == pytest.approx(r4)
    assert torch.allclose(g1, g4)
    assert r1 >= -1e-9


def test_risk_at_zero_weights_is_mean_node_count():
    samples, labels, _ = make_synthetic_problem(num_samples=5, seed=4)
    problem = GraphLabelingProblem(samples, labels)
    risk, _ = problem.risk_and_subgradient(torch.zeros(problem.get_num_dimensions()))
    # with w = 0 the loss-augmented prediction flips every node
    assert risk == pytest.approx(sum(s.num_nodes for s in samples) / len(samples))


def test_sparse_problem_risk_matches_dense():
    dense, labels, true_w = make_synthetic_problem(num_samples=6, seed=5)
    sparse, labels_s, _ = make_synthetic_problem(num_samples=6, seed=5, sparse=True)
    assert labels == labels_s
    pd = GraphLabelingProblem(dense, labels)
    ps = GraphLabelingProblem(sparse, labels_s)
    assert ps.is_sparse
    assert pd.get_num_dimensions() == ps.get_num_dimensions()
    rd, gd = pd.risk_and_subgradient(true_w)
    rs, gs = ps.risk_and_subgradient(true_w)
    assert rd == pytest.approx(rs)
    assert torch.allclose(gd, gs)


def test_negative_edge_weights_fail_in_the_oracle():
    samples, labels, true_w = make_synthetic_problem(num_samples=4, seed=6)
    problem = GraphLabelingProblem(samples, labels, num_threads=2)
    w = true_w.clone()
    w[: problem.edge_dims] = -1.0
    with pytest.raises(PottsSolverError):
        problem.risk_and_subgradient(w)


def test_num_threads_must_be_positive():
    samples, labels, _ = make_synthetic_problem(num_samples=2, seed=7)
    with pytest.raises(ValueError):
        GraphLabelingProblem(samples, labels, num_threads=0)
