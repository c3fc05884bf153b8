from enum import StrEnum


class FramingMode(StrEnum):
    """
    Selects how the session handler cuts the inbound byte stream into units.
    """
    line = "line"
    """
    Accumulate bytes until a line-feed; one unit per line, CRLF tolerated.
    """

    raw = "raw"
    """
    Debug mode: every receive call is one unit, logged as an escaped dump.
    """
