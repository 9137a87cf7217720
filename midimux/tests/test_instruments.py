import pytest

from midimux.config import ConfigError
from midimux.errors import InvalidChannel
from midimux.instruments import INSTRUMENT_TABLE, InstrumentRemapper
from midimux.sequence import Sequence, control_change, note_on


def _make_sequence():
    return Sequence([
        [(0, note_on(0, 60, 100)), (96, note_on(0, 60, 0))],
        [(0, control_change(1, 7, 100))],
        [(0, note_on(15, 60, 100))],
    ])


def test_remap():
    sequence = _make_sequence()
    InstrumentRemapper().remap(sequence, [0, None, 15])

    event = sequence.tracks[0][-1]
    assert event.tick == 10
    assert event.message.type == 'program_change'
    assert (event.message.channel, event.message.program) == (0, 41)

    assert len(sequence.tracks[1]) == 1

    event = sequence.tracks[2][-1]
    assert (event.message.channel, event.message.program) == (15, INSTRUMENT_TABLE[15])


def test_remap_custom_programs():
    sequence = _make_sequence()
    InstrumentRemapper(programs=range(16), tick=0).remap(sequence, [0, None, 15])
    assert [(e.tick, e.message.program) for e in sequence.tracks[2][1:]] == [(0, 15)]


@pytest.mark.parametrize('channel', [16, -1, 99])
def test_invalid_channel(channel):
    sequence = _make_sequence()
    with pytest.raises(InvalidChannel) as excinfo:
        InstrumentRemapper().remap(sequence, [0, None, channel])
    assert excinfo.value.track_index == 2
    assert excinfo.value.channel == channel
    assert len(sequence.tracks[2]) == 1


def test_invalid_program_skipped():
    programs = list(INSTRUMENT_TABLE)
    programs[0] = 128
    sequence = _make_sequence()
    InstrumentRemapper(programs=programs).remap(sequence, [0, None, 15])
    assert len(sequence.tracks[0]) == 2
    assert len(sequence.tracks[2]) == 2


@pytest.mark.parametrize('kwargs', [{'programs': [1, 2, 3]}, {'tick': -10}])
def test_invalid_arguments(kwargs):
    with pytest.raises(ConfigError):
        InstrumentRemapper(**kwargs)
