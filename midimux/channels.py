from midimux import logger


def detect_channels(sequence):
    """Find the MIDI channel of each track in a sequence.

    Every track is assumed to use a single channel, so the channel of the first NoteOn message in
    the track is taken to be the channel of the whole track.

    Args:
        sequence: A `Sequence`.
    Returns:
        A list with one item per track, containing the channel number or `None` if the track has
        no NoteOn messages.
    """
    channel_map = []
    for track in sequence.tracks:
        channel = None
        for event in track.note_ons():
            channel = event.message.channel
            break
        channel_map.append(channel)

    logger.debug('Channels of {}: {}'.format(sequence.name, channel_map))
    return channel_map
