class MprisError(RuntimeError):
    """Base class for failures talking to a media player over D-Bus."""


class NoPlayersFound(MprisError):
    pass


class PlayerUnavailable(MprisError):
    pass
