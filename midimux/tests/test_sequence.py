import pytest

from midimux.errors import InvalidMessageConstruction
from midimux.sequence import (Sequence, Track, control_change, is_note_on, note_on,
                              program_change)


@pytest.mark.parametrize(
    'factory, args',
    [(note_on, (16, 60, 100)),
     (note_on, (0, 128, 100)),
     (note_on, (-1, 60, 100)),
     (control_change, (0, 7, 128)),
     (control_change, (0, 200, 64)),
     (program_change, (0, 128)),
     (program_change, (0, 41, 128))])
def test_invalid_messages(factory, args):
    with pytest.raises(InvalidMessageConstruction):
        factory(*args)


def test_program_change_value_not_encoded():
    message = program_change(3, 41, value=100)
    assert message.type == 'program_change'
    assert (message.channel, message.program) == (3, 41)


def test_is_note_on():
    assert is_note_on(note_on(0, 60, 100))
    assert is_note_on(note_on(0, 60, 0))
    assert not is_note_on(control_change(0, 7, 100))


def test_sort_keeps_order_of_equal_ticks():
    track = Track()
    track.append(100, note_on(0, 60, 100))
    track.append(0, note_on(0, 62, 100))
    track.append(100, note_on(0, 64, 100))
    track.append(50, control_change(0, 7, 30))
    track.append(100, control_change(0, 7, 127))

    track.sort()

    assert [e.tick for e in track] == [0, 50, 100, 100, 100]
    assert [getattr(e.message, 'note', None) for e in track][2:4] == [60, 64]
    assert track[4].message.type == 'control_change'


def test_negative_tick():
    with pytest.raises(ValueError):
        Track().append(-1, note_on(0, 60, 100))


def test_tick_length():
    sequence = Sequence([
        [(0, note_on(0, 60, 100)), (480, note_on(0, 60, 0))],
        [(10, note_on(1, 60, 100)), (960, note_on(1, 60, 0))],
        [],
    ])
    assert sequence.tick_length == 960
    assert sequence.tracks[2].tick_length == 0
    assert Sequence().tick_length == 0
    assert sequence.channels() == [0, 1]
