"""Reading MIDI files into sequences and converting sequences back for playback."""

import mido

from midimux.errors import ParseError
from midimux.sequence import Sequence, Track


def read_sequence(path):
    """Read a Standard MIDI File.

    Delta times are converted to absolute ticks. Every track of the file becomes a `Track` of the
    result, with the events in the order in which they are stored in the file.

    Raises:
        ParseError: If the file cannot be read or is not a valid MIDI file.
    """
    try:
        midi = mido.MidiFile(path)
    except (OSError, EOFError, ValueError, KeyError, IndexError, TypeError) as e:
        raise ParseError(path, e) from e

    tracks = []
    for midi_track in midi.tracks:
        track = Track()
        tick = 0
        for message in midi_track:
            tick += message.time
            track.append(tick, message.copy(time=0))
        tracks.append(track)

    return Sequence(tracks, resolution=midi.ticks_per_beat, name=str(path))


def to_midi_file(sequence):
    """Convert a `Sequence` to a `mido.MidiFile`.

    The events of each track are sorted by tick. End-of-track markers are dropped, since the tracks
    may have been extended; mido adds them back when the file is saved.
    """
    midi = mido.MidiFile(type=1, ticks_per_beat=sequence.resolution)
    for track in sequence.tracks:
        midi_track = mido.MidiTrack()
        last_tick = 0
        for event in sorted(track, key=lambda e: e.tick):
            if event.message.is_meta and event.message.type == 'end_of_track':
                continue
            midi_track.append(event.message.copy(time=event.tick - last_tick))
            last_tick = event.tick
        midi.tracks.append(midi_track)
    return midi
