from __future__ import annotations

import pytest

from galaxy.errors import GalaxyError
from galaxy.random_source import RecordingRandomSource, SequenceRandomSource, SystemRandomSource


def test_system_source_range():
    rng = SystemRandomSource()
    values = [rng.uniform() for _ in range(1000)]
    assert all(0.0 <= v < 1.0 for v in values)


def test_seeded_sources_agree():
    a = SystemRandomSource(123)
    b = SystemRandomSource(123)
    assert [a.uniform() for _ in range(20)] == [b.uniform() for _ in range(20)]


def test_sequence_replays_then_exhausts():
    rng = SequenceRandomSource([0.1, 0.2])
    assert rng.uniform() == 0.1
    assert rng.uniform() == 0.2
    with pytest.raises(GalaxyError):
        rng.uniform()


def test_sequence_cycles():
    rng = SequenceRandomSource([0.3], cycle=True)
    assert [rng.uniform() for _ in range(3)] == [0.3, 0.3, 0.3]
    assert rng.draws == 1


@pytest.mark.parametrize("values", [[], [1.0], [-0.1]])
def test_sequence_rejects_bad_values(values):
    with pytest.raises(GalaxyError):
        SequenceRandomSource(values)


def test_recording_replay():
    recorder = RecordingRandomSource(SystemRandomSource(4))
    drawn = [recorder.uniform() for _ in range(5)]
    replay = recorder.replay()
    assert [replay.uniform() for _ in range(5)] == drawn
