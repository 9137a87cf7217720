from midimux import logger
from midimux.config import ConfigError, configurable
from midimux.errors import InvalidChannel, InvalidMessageConstruction
from midimux.sequence import NUM_CHANNELS, program_change


# Program number for each MIDI channel.
INSTRUMENT_TABLE = (
    41,  # Violin
    10,  # Glockenspiel
    57,  # Trumpet
    20,  # Church Organ
    12,  # Vibraphone
    23,  # Harmonica
    60,  # Muted Trumpet
    45,  # Tremolo Strings
    1,  # Acoustic Grand Piano
    92,  # Choir
    53,  # Choir Aahs
    54,  # Voice Oohs
    47,  # Orchestral Harp
    46,  # Pizzicato Strings
    7,  # Harpsichord
    76,  # Pan Flute
)


@configurable()
class InstrumentRemapper:
    """Assigns a fixed instrument to each channel by adding program changes to the tracks."""

    def __init__(self, programs=INSTRUMENT_TABLE, tick=10, value=100):
        programs = tuple(programs)
        if tick < 0:
            raise ConfigError(f'Negative tick: {tick}')
        if len(programs) != NUM_CHANNELS:
            raise ConfigError(f'Expected {NUM_CHANNELS} programs, got {len(programs)}')
        self.programs = programs
        self.tick = tick
        self.value = value

    def remap(self, sequence, channel_map):
        """Add a program change to every track of `sequence` that has a channel.

        Tracks whose channel is `None` are left untouched.

        Raises:
            InvalidChannel: If a channel in `channel_map` is not a valid MIDI channel.
        """
        for i, (track, channel) in enumerate(zip(sequence.tracks, channel_map)):
            if channel is None:
                continue
            if not isinstance(channel, int) or not 0 <= channel < NUM_CHANNELS:
                raise InvalidChannel(i, channel)

            program = self.programs[channel]
            try:
                message = program_change(channel, program, self.value)
            except InvalidMessageConstruction as e:
                logger.warning('Track {}: skipping program change: {}'.format(i, e))
                continue
            track.append(self.tick, message)
            logger.debug('Track {}: channel {} -> program {}'.format(i, channel, program))
