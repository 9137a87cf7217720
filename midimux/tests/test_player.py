# pylint: disable=attribute-defined-outside-init

import threading

import mido
import pytest

from midimux.player import ALL_NOTES_OFF, Player
from midimux.sequence import Sequence, control_change, note_on, program_change


class FakePort:

    def __init__(self, block_on=None):
        self.messages = []
        self.closed = False
        self._block_on = block_on
        self.blocked = threading.Event()

    def send(self, message):
        self.messages.append(message)
        if self._block_on is not None and message.type == self._block_on:
            self.blocked.set()

    def close(self):
        self.closed = True


class TestPlayer:

    def setup_method(self):
        self.sequence = Sequence([
            [(0, mido.MetaMessage('set_tempo', tempo=500000))],
            [(0, note_on(0, 60, 100)), (0, program_change(0, 41)), (0, note_on(0, 60, 0))],
            [(0, note_on(5, 64, 100)), (0, control_change(5, 7, 30))],
        ], name='song.mid')

    def test_play(self):
        port = FakePort()
        player = Player(port=port)
        thread = player.play(self.sequence)
        player.join(timeout=5)

        assert not thread.is_alive()
        assert not player.is_playing()
        assert not port.closed
        assert [m.type for m in port.messages[:5]] == [
            'note_on', 'program_change', 'note_on', 'note_on', 'control_change']
        assert all(not m.is_meta for m in port.messages)

        all_notes_off = port.messages[5:]
        assert [(m.channel, m.control, m.value) for m in all_notes_off] == [
            (0, ALL_NOTES_OFF, 0), (5, ALL_NOTES_OFF, 0)]

    def test_stop(self):
        sequence = Sequence([
            [(0, note_on(2, 60, 100)), (96 * 600, note_on(2, 60, 0))],
        ])
        port = FakePort(block_on='note_on')
        player = Player(port=port)
        player.play(sequence)
        assert port.blocked.wait(timeout=5)
        assert player.is_playing()

        player.stop(timeout=5)

        assert not player.is_playing()
        assert [m.type for m in port.messages] == ['note_on', 'control_change']
        assert port.messages[-1].control == ALL_NOTES_OFF

    def test_play_twice(self):
        sequence = Sequence([[(0, note_on(2, 60, 100)), (96 * 600, note_on(2, 60, 0))]])
        player = Player(port=FakePort())
        player.play(sequence)
        try:
            with pytest.raises(RuntimeError):
                player.play(sequence)
        finally:
            player.stop(timeout=5)

    def test_open_port(self, monkeypatch):
        port = FakePort()
        port.name = 'Fake Port'
        opened = []

        def open_output(name=None):
            opened.append(name)
            return port

        monkeypatch.setattr(mido, 'open_output', open_output)
        player = Player(port_name='Fake Port')
        player.play(self.sequence)
        player.join(timeout=5)

        assert opened == ['Fake Port']
        assert port.closed
