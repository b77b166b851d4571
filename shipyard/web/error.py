class NotFoundError(Exception):
    """Endpoint not found"""
    pass


class AuthenticationError(Exception):
    """Error when the webhook rejects our credentials."""
    pass


class WebhookError(Exception):
    """Webhook answered with an unexpected status."""
    pass
