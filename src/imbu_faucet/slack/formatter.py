"""Message formatter for Slack responses."""

from imbu_faucet.faucet.service import FaucetResult


class MessageFormatter:
    """Wraps plain reply texts into Slack messages.

    Every message carries the plain ``text`` (used by notifications and
    clients without Block Kit) and one mrkdwn section with the same content.
    """

    def format_text(self, text: str) -> dict:
        """Format a plain reply.

        Parameters
        ----------
        text : str
            Reply text.

        Returns
        -------
        dict
            Slack message payload.
        """
        return {
            "text": text,
            "blocks": [
                {
                    "type": "section",
                    "text": {"type": "mrkdwn", "text": text},
                }
            ],
        }

    def format_result(self, result: FaucetResult) -> dict | None:
        """Format a command result, or None if nothing should be sent."""
        if result.message is None:
            return None
        return self.format_text(result.message)

    def format_error(self, message: str) -> dict:
        return self.format_text(f":x: {message}")
