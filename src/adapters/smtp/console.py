"""
Console mailer adapter - Implements Notifier protocol.

This module provides a console-based implementation of the domain's
notifier port, logging templated messages instead of delivering them.
"""

import logging
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)


class ConsoleMailer:
    """
    Implements Notifier protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - an SMTP adapter replaces it in production.
    """

    def send_from_template(
        self, recipient: str, template: str, context: Mapping[str, Any]
    ) -> None:
        """
        Log the message at INFO level (simulates email delivery).

        Only the context keys are logged, except for a ``token`` value,
        which is printed so recovery can be exercised locally.

        Args:
            recipient: Recipient address, optionally with display name
            template: Template name
            context: Template variables
        """
        logger.info(
            "[MAIL] To: %s Template: %s Context: %s",
            recipient,
            template,
            ", ".join(sorted(context)),
        )
        if "token" in context:
            logger.info("[MAIL] Token: %s", context["token"])
