"""Playback of sequences on a MIDI output port."""

import threading

import mido

from midimux import logger
from midimux.io.midi_io import to_midi_file
from midimux.sequence import control_change


ALL_NOTES_OFF = 123


class Player:
    """Plays a sequence on a background thread.

    Args:
        port: An open output port (anything with a `send` method). If not given, a port is opened
            with `mido.open_output` when playback starts and closed when it ends.
        port_name: The name of the port to open; the default output port if `None`.
    """

    def __init__(self, port=None, port_name=None):
        self._port = port
        self._port_name = port_name
        self._owns_port = port is None
        self._stop_event = threading.Event()
        self._thread = None

    def play(self, sequence):
        """Start playing the sequence and return immediately.

        Raises:
            RuntimeError: If the player is already playing.
            OSError: If the output port cannot be opened.
        """
        if self.is_playing():
            raise RuntimeError('Already playing')

        midi = to_midi_file(sequence)
        channels = sequence.channels()
        if self._owns_port:
            self._port = mido.open_output(self._port_name)
            logger.info('Opened output port {!r}'.format(self._port.name))

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, args=(midi, channels),
                                        name='midimux-player')
        self._thread.start()
        logger.info('Playing {} ({:.1f} s)'.format(sequence.name, midi.length))
        return self._thread

    def is_playing(self):
        return self._thread is not None and self._thread.is_alive()

    def join(self, timeout=None):
        if self._thread is not None:
            self._thread.join(timeout)

    def stop(self, timeout=None):
        """Cancel playback and wait for the player to silence the port."""
        self._stop_event.set()
        self.join(timeout)

    def _run(self, midi, channels):
        try:
            # Iterating over a MidiFile gives delta times in seconds.
            for message in midi:
                if self._stop_event.wait(message.time):
                    logger.debug('Playback stopped')
                    break
                if not message.is_meta:
                    self._port.send(message)
        finally:
            self._all_notes_off(channels)
            if self._owns_port:
                self._port.close()

    def _all_notes_off(self, channels):
        for channel in channels:
            self._port.send(control_change(channel, ALL_NOTES_OFF, 0))
