"""Multiplexing of two MIDI sequences.

The pitch contour of each track of the mux sequence is turned into a volume curve, which is
stretched to the length of the song sequence and applied to the corresponding song track as
channel volume (controller 7) messages. Tracks are matched by their position.
"""

import numpy as np

from midimux import logger
from midimux.channels import detect_channels
from midimux.config import ConfigError, configurable
from midimux.errors import (DegenerateSequence, DegenerateTrackPitchRange,
                            InvalidMessageConstruction)
from midimux.instruments import InstrumentRemapper
from midimux.sequence import control_change


VOLUME_CONTROLLER = 7


def pitch_range(track, track_index=None):
    """Return the lowest and the highest pitch of the NoteOn messages in a track.

    Raises:
        DegenerateTrackPitchRange: If the track has no NoteOn messages.
    """
    pitches = [event.message.note for event in track.note_ons()]
    if not pitches:
        raise DegenerateTrackPitchRange(track_index)
    return min(pitches), max(pitches)


def velocity_curve(pitches, min_pitch, max_pitch, min_velocity=30, max_velocity=127,
                   degenerate_velocity=None):
    """Map pitches linearly to velocities.

    `min_pitch` is mapped to `min_velocity` and `max_pitch` to `max_velocity`; values in between
    are rounded to the nearest integer (halves are rounded up).

    Args:
        pitches: A sequence of pitches.
        min_pitch: The lowest pitch of the track.
        max_pitch: The highest pitch of the track.
        min_velocity: The velocity for `min_pitch`.
        max_velocity: The velocity for `max_pitch`.
        degenerate_velocity: The velocity for all pitches if `min_pitch == max_pitch`. Defaults to
            `min_velocity`.
    Returns:
        A numpy array of integer velocities.
    """
    pitches = np.asarray(pitches, dtype=np.int64)
    if max_pitch == min_pitch:
        if degenerate_velocity is None:
            degenerate_velocity = min_velocity
        return np.full(pitches.shape, degenerate_velocity, dtype=np.int64)

    scaled = (pitches - min_pitch) * (max_velocity - min_velocity) / (max_pitch - min_pitch)
    return np.floor(scaled + 0.5).astype(np.int64) + min_velocity


def scale_ticks(ticks, target_length, source_length):
    """Stretch ticks from a timeline of length `source_length` to one of length `target_length`.

    The result is rounded down. The products are computed with Python ints, so they cannot
    overflow.

    Returns:
        A numpy array of Python ints (object dtype).
    Raises:
        ValueError: If `source_length` is zero.
    """
    if source_length == 0:
        raise ValueError('Source length is zero')
    return np.array([int(t) * int(target_length) // int(source_length) for t in ticks],
                    dtype=object)


@configurable()
class MuxEngine:
    """Sets the volume of song tracks from the notes of mux tracks."""

    def __init__(self, min_velocity=30, max_velocity=127, controller=VOLUME_CONTROLLER,
                 degenerate_velocity=None):
        if max_velocity < min_velocity:
            raise ConfigError(f'max_velocity ({max_velocity}) is less than min_velocity '
                              f'({min_velocity})')
        self.min_velocity = min_velocity
        self.max_velocity = max_velocity
        self.controller = controller
        self.degenerate_velocity = degenerate_velocity

    def mux(self, song, mux, song_channels):
        """Add volume messages derived from `mux` to the tracks of `song`.

        The mux sequence is not modified. Track `i` of the song is only modified using track `i`
        of the mux sequence; extra tracks in either sequence are ignored. Song tracks without a
        channel and mux tracks without notes are skipped.

        The new events are appended to the song tracks, so the tracks need to be sorted
        afterwards.

        Args:
            song: The song `Sequence`, modified in place.
            mux: The mux `Sequence`.
            song_channels: The channel map of `song`, as returned by `detect_channels`.
        Returns:
            A dict mapping indices of the processed tracks to the number of events added.
        Raises:
            DegenerateSequence: If the mux sequence has zero length.
        """
        song_length = song.tick_length
        mux_length = mux.tick_length
        if mux_length == 0:
            raise DegenerateSequence(mux.name)

        counts = {}
        for i, (song_track, mux_track) in enumerate(zip(song.tracks, mux.tracks)):
            channel = song_channels[i] if i < len(song_channels) else None
            if channel is None:
                logger.debug('Track {}: no channel in song, skipping'.format(i))
                continue

            try:
                counts[i] = self._mux_track(song_track, mux_track, channel, song_length,
                                            mux_length, track_index=i)
            except DegenerateTrackPitchRange as e:
                logger.warning('{}; skipping'.format(e))

        logger.info('Added {} volume events to {} track(s), song length {}, mux length {}'
                    .format(sum(counts.values()), len(counts), song_length, mux_length))
        return counts

    def _mux_track(self, song_track, mux_track, channel, song_length, mux_length, track_index):
        min_pitch, max_pitch = pitch_range(mux_track, track_index)
        if min_pitch == max_pitch:
            logger.debug('Track {}: single pitch {}, using constant volume'.format(
                track_index, min_pitch))

        note_ons = list(mux_track.note_ons())
        velocities = velocity_curve([e.message.note for e in note_ons], min_pitch, max_pitch,
                                    min_velocity=self.min_velocity,
                                    max_velocity=self.max_velocity,
                                    degenerate_velocity=self.degenerate_velocity)
        ticks = scale_ticks([e.tick for e in note_ons], song_length, mux_length)

        count = 0
        for tick, velocity in zip(ticks, velocities):
            try:
                message = control_change(channel, self.controller, int(velocity))
            except InvalidMessageConstruction as e:
                logger.warning('Track {}: skipping event at tick {}: {}'.format(
                    track_index, tick, e))
                continue
            song_track.append(int(tick), message)
            count += 1

        logger.debug('Track {}: pitch range {}-{}, added {} volume events on channel {}'.format(
            track_index, min_pitch, max_pitch, count, channel))
        return count


@configurable(['remapper', 'engine'])
def multiplex(cfg, song, mux):
    """Multiplex two sequences.

    Assigns instruments to the song tracks according to their channels, sets their volume from
    the notes of the mux tracks and sorts the result. The song is modified in place.

    Returns:
        The song `Sequence`.
    """
    if mux.tick_length == 0:
        raise DegenerateSequence(mux.name)

    song_channels = detect_channels(song)
    detect_channels(mux)

    remapper = cfg['remapper'].configure(InstrumentRemapper)
    remapper.remap(song, song_channels)

    engine = cfg['engine'].configure(MuxEngine)
    engine.mux(song, mux, song_channels)

    song.sort()
    return song
