class MidiMuxError(Exception):
    pass


class ParseError(MidiMuxError):
    """A MIDI file could not be read."""

    def __init__(self, path, reason):
        super().__init__(f'Failed to read MIDI file {path!r}: {reason}')
        self.path = path
        self.reason = reason


class InvalidChannel(MidiMuxError):

    def __init__(self, track_index, channel):
        super().__init__(f'Invalid channel {channel!r} in track {track_index}')
        self.track_index = track_index
        self.channel = channel


class DegenerateSequence(MidiMuxError):
    """A sequence has zero length and cannot be used to rescale time."""

    def __init__(self, name):
        super().__init__(f'Sequence {name} has zero tick length')
        self.name = name


class DegenerateTrackPitchRange(MidiMuxError):
    """A mux track contains no notes, so there is no pitch range to map."""

    def __init__(self, track_index):
        super().__init__(f'Track {track_index} contains no NoteOn messages')
        self.track_index = track_index


class InvalidMessageConstruction(MidiMuxError):
    pass
