"""
Exception types raised by the KL130 client.

Every error is scoped to a single exchange; the socket is already closed when
one of these reaches the caller.
"""


class KL130Error(Exception):
    """Base class for all errors raised by the kl130 package."""


class MalformedPayloadError(KL130Error):
    """A datagram did not decrypt to valid JSON (truncated, corrupt or foreign)."""


class ReplyTimeoutError(KL130Error):
    """No reply datagram arrived within the listen window."""


class TransmissionError(KL130Error):
    """The underlying socket could not bind, send or receive."""


class UnrecognizedCommandError(KL130Error):
    """The dispatcher was given a command label it does not know."""

    def __init__(self, command):
        super().__init__(f"Unrecognized command '{command}'")
        self.command = command


class InvalidColorError(KL130Error):
    """A colour argument could not be read as three red/green/blue integers."""
