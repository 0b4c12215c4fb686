"""
Request generations - discard responses that arrive after the learner moved on.

Each server call takes a token from a channel before it starts. Anything that
supersedes the call advances the channel, so when the response arrives the
caller can tell whether it still applies.
"""

from dataclasses import dataclass


VIEW = "view"              # what is on screen
ENROLLMENT = "enrollment"  # who owns the local enrollment


@dataclass(frozen=True)
class RequestToken:
    channel: str
    generation: int


class RequestGenerations:
    """Per-channel generation counters."""

    def __init__(self):
        self._generations: dict[str, int] = {}

    def advance(self, channel: str) -> RequestToken:
        """Invalidate outstanding tokens on `channel` and return a fresh one."""
        generation = self._generations.get(channel, 0) + 1
        self._generations[channel] = generation
        return RequestToken(channel, generation)

    def current(self, channel: str) -> RequestToken:
        """Token for the current generation, without invalidating anything."""
        return RequestToken(channel, self._generations.get(channel, 0))

    def is_current(self, token: RequestToken) -> bool:
        return self._generations.get(token.channel, 0) == token.generation
