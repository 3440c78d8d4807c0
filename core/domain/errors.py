class SignalRelayError(Exception):
    """
    Base error for the relay pipeline.
    `reason` is safe to return to the webhook caller.
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class InvalidPayloadError(SignalRelayError):
    """Webhook body is missing required fields or carries unusable values (HTTP 400)."""


class DeliveryError(SignalRelayError):
    """The channel gateway could not deliver a message (HTTP 500)."""
