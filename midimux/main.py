"""Multiplex two MIDI files and play the result.

The note values of each track of MUXFILE are scaled and applied as volume to the corresponding
track of SONGFILE. MUXFILE is first stretched to the duration of SONGFILE.
"""

import argparse
import logging
import sys

import coloredlogs

from midimux import logger
from midimux.config import ConfigError, load_config
from midimux.errors import MidiMuxError, ParseError
from midimux.io.midi_io import read_sequence
from midimux.mux import multiplex
from midimux.player import Player


def setup_argparser(parser):
    parser.add_argument('song_file', metavar='SONGFILE')
    parser.add_argument('mux_file', metavar='MUXFILE')
    parser.add_argument('--config', type=str, default=None,
                        help='path to the YAML configuration file')
    parser.add_argument('--port', type=str, default=None,
                        help='MIDI output port (the default port if not given)')
    parser.add_argument('--no-play', action='store_true',
                        help='only multiplex the files, do not play the result')
    parser.add_argument('--color', action='store_true', default=None,
                        help='force colored logs')
    parser.add_argument('-v', '--verbose', action='store_true', help='log debug messages')


def run(args):
    cfg = load_config(args.config, keys=('remapper', 'engine'))
    song = read_sequence(args.song_file)
    mux = read_sequence(args.mux_file)
    logger.info('Song: {}, mux: {}'.format(song, mux))

    song = cfg.configure(multiplex, song=song, mux=mux)

    if args.no_play:
        logger.info('Multiplexed {} track(s), {} ticks'.format(len(song.tracks), song.tick_length))
        return

    player = Player(port_name=args.port)
    player.play(song)
    try:
        player.join()
    except KeyboardInterrupt:
        logger.info('Interrupted, stopping playback')
        player.stop()


def main():
    parser = argparse.ArgumentParser(prog='midimux', description=__doc__)
    setup_argparser(parser)
    args = parser.parse_args()

    coloredlogs.install(level='DEBUG' if args.verbose else 'INFO', logger=logging.getLogger(),
                        isatty=args.color)
    logging.captureWarnings(True)

    try:
        run(args)
    except ParseError as e:
        logger.error(str(e))
        sys.exit(1)
    except (ConfigError, MidiMuxError) as e:
        logger.error('{}: {}'.format(type(e).__name__, e))
        sys.exit(1)
    except (OSError, ImportError) as e:
        # mido raises ImportError when no MIDI backend is installed
        logger.error('Cannot open MIDI output: {}'.format(e))
        sys.exit(1)


if __name__ == '__main__':
    main()
