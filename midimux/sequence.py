"""In-memory representation of MIDI sequences.

Events carry absolute ticks. Messages are `mido` messages; only channel messages of the types
produced here are ever inspected, everything else (including meta messages) is passed through.
"""

import collections

import mido

from midimux.errors import InvalidMessageConstruction


PPB = 96  # ticks per beat of generated sequences
NUM_CHANNELS = 16

Event = collections.namedtuple('Event', ['tick', 'message'])


def _make_message(msg_type, **fields):
    try:
        return mido.Message(msg_type, **fields)
    except (ValueError, TypeError) as e:
        raise InvalidMessageConstruction('Cannot create {} message with {}: {}'.format(
            msg_type, fields, e)) from None


def note_on(channel, note, velocity):
    return _make_message('note_on', channel=channel, note=note, velocity=velocity)


def program_change(channel, program, value=100):
    """Create a program change message.

    `value` is checked like any other data byte, but a program change carries only the program
    number, so it is not part of the resulting message.
    """
    if not isinstance(value, int) or not 0 <= value <= 127:
        raise InvalidMessageConstruction(f'Program change value out of range: {value!r}')
    return _make_message('program_change', channel=channel, program=program)


def control_change(channel, controller, value):
    return _make_message('control_change', channel=channel, control=controller, value=value)


def is_note_on(message):
    return not message.is_meta and message.type == 'note_on'


class Track:
    """A mutable list of events.

    Events are kept in insertion order until `sort` is called.
    """

    def __init__(self, events=()):
        self._events = [Event(*e) for e in events]

    def append(self, tick, message):
        if tick < 0:
            raise ValueError(f'Negative tick: {tick}')
        self._events.append(Event(int(tick), message))

    def sort(self):
        """Sort the events by tick. Events with equal ticks keep their relative order."""
        self._events.sort(key=lambda e: e.tick)

    def note_ons(self):
        for event in self._events:
            if is_note_on(event.message):
                yield event

    @property
    def tick_length(self):
        return max((e.tick for e in self._events), default=0)

    def __iter__(self):
        return iter(self._events)

    def __len__(self):
        return len(self._events)

    def __getitem__(self, index):
        return self._events[index]

    def __repr__(self):
        return f'Track({self._events!r})'


class Sequence:

    def __init__(self, tracks=(), resolution=PPB, name='<sequence>'):
        self.tracks = [t if isinstance(t, Track) else Track(t) for t in tracks]
        self.resolution = resolution
        self.name = name

    @property
    def tick_length(self):
        """The tick of the last event across all tracks."""
        return max((t.tick_length for t in self.tracks), default=0)

    def sort(self):
        for track in self.tracks:
            track.sort()

    def channels(self):
        """Return the sorted list of channels used by channel messages in the sequence."""
        return sorted({e.message.channel for t in self.tracks for e in t
                       if not e.message.is_meta and hasattr(e.message, 'channel')})

    def __repr__(self):
        return 'Sequence(name={!r}, tracks={}, resolution={})'.format(
            self.name, len(self.tracks), self.resolution)
