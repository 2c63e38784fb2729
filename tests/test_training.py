import networkx as nx
import pytest
import torch

from potts_ssvm.data.dataset import GraphLabelingDataset
from potts_ssvm.data.io import BUNDLE_FORMAT, load_bundle, pack_samples, save_bundle
from potts_ssvm.data.splits import split_samples
from potts_ssvm.data.synthetic import make_synthetic_problem
from potts_ssvm.graph.schema import from_networkx
from potts_ssvm.models import GraphLabeler
from potts_ssvm.ssvm import GraphLabelingProblem
from potts_ssvm.train import Trainer, hamming_accuracy, load_ckpt, save_ckpt, test_graph_labeling_function
from potts_ssvm.train.trainer import _build_step_sizes


def test_hidden_labeler_reproduces_its_labels():
    samples, labels, true_w = make_synthetic_problem(num_samples=6, seed=11)
    labeler = GraphLabeler(true_w, edge_dims=2)
    assert labeler.predict(samples) == labels
    assert test_graph_labeling_function(labeler, samples, labels) == (1.0, 1.0)


def test_labeler_rejects_negative_edge_weights():
    with pytest.raises(ValueError):
        GraphLabeler(torch.tensor([-1.0, 0.5, 0.5]), edge_dims=1)


def test_trainer_decreases_objective_and_keeps_edge_weights_non_negative():
    samples, labels, _ = make_synthetic_problem(num_samples=8, seed=12)
    problem = GraphLabelingProblem(samples, labels, num_threads=2)
    trainer = Trainer(problem, C=1.0, lr=0.01, log_every=2)
    w = trainer.fit(epochs=6)

    assert len(trainer.history) == 6
    assert w.shape == (problem.get_num_dimensions(),)
    assert (w[: problem.edge_dims] >= 0).all()
    assert (trainer.w.detach()[: problem.edge_dims] >= 0).all()
    assert trainer.best_objective < trainer.history[0]["objective"]


def test_step_size_schemes():
    assert torch.allclose(_build_step_sizes(3, {"scheme": "constant"}), torch.ones(3, dtype=torch.float64))
    assert torch.allclose(_build_step_sizes(2, {"scheme": "inv"}), torch.tensor([1.0, 0.5], dtype=torch.float64))
    assert _build_step_sizes(0).numel() == 0
    with pytest.raises(ValueError):
        _build_step_sizes(3, {"scheme": "bogus"})


def test_checkpoint_round_trip(tmp_path):
    samples, labels, true_w = make_synthetic_problem(num_samples=3, seed=13)
    path = tmp_path / "last.pt"
    save_ckpt(str(path), weights=true_w, edge_dims=2, node_dims=4, epoch=1)
    payload = load_ckpt(str(path))
    assert payload["edge_dims"] == 2 and payload["node_dims"] == 4 and payload["epoch"] == 1
    labeler = GraphLabeler.from_checkpoint(str(path))
    assert labeler.predict(samples) == labels


def test_bundle_round_trip_and_splits(tmp_path):
    samples, labels, _ = make_synthetic_problem(num_samples=10, seed=14, sparse=True)
    path = tmp_path / "data.pt"
    save_bundle(str(path), pack_samples(samples, labels, note="unit"))

    ds = GraphLabelingDataset(str(path))
    assert len(ds) == 10
    assert ds.labels == labels
    assert ds.meta["note"] == "unit"
    sample, lab = ds[0]
    assert sample.edges == samples[0].edges
    assert lab == labels[0]

    parts = split_samples(10, ratios=(0.6, 0.2, 0.2), seed=1)
    assert sorted(parts["train"] + parts["val"] + parts["test"]) == list(range(10))
    assert len(GraphLabelingDataset(str(path), split="train", ratios=(0.6, 0.2, 0.2), seed=1)) == len(parts["train"])


def test_from_networkx():
    G = nx.Graph()
    G.add_node("a", x=torch.tensor([1.0, 0.0]))
    G.add_node("b", x=torch.tensor([0.0, 1.0]))
    G.add_node("c", x=torch.tensor([1.0, 1.0]))
    G.add_edge("a", "b", z=torch.tensor([1.0]))
    G.add_edge("b", "c", z=torch.tensor([0.5]))
    s = from_networkx(G)
    assert s.num_nodes == 3 and s.num_edges == 2
    assert s.meta["node_keys"] == ["a", "b", "c"]
    assert sorted(j for j, _ in s.neighbors(1)) == [0, 2]
    assert GraphLabelingProblem([s], [[1, 0, 0]]).get_num_dimensions() == 3


def test_hamming_accuracy():
    assert hamming_accuracy([1, 0, 1, 0], [1, 1, 1, 0]) == 0.75
    assert hamming_accuracy([], []) == 1.0


def test_bundle_creates_directories_and_rejects_foreign_payloads(tmp_path):
    samples, labels, _ = make_synthetic_problem(num_samples=3, seed=5)
    path = tmp_path / "nested" / "dir" / "data.pt"
    save_bundle(str(path), pack_samples(samples, labels))
    payload = load_bundle(str(path))
    assert payload["format"] == BUNDLE_FORMAT
    assert len(payload["samples"]) == 3

    bad = tmp_path / "bad.pt"
    torch.save({"samples": [], "labels": [], "format": "other/9"}, str(bad))
    with pytest.raises(ValueError):
        load_bundle(str(bad))
