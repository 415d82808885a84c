"""Template rendering for email notifications using Jinja2.

This module wraps Jinja2 template rendering with caching and strict
undefined checking to catch template errors early.
"""

from typing import Dict

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError, select_autoescape

from careerscan.logging import get_logger

from .models import NotificationTemplateError

logger = get_logger(__name__, component="notification")

TEMPLATE_KINDS = ("report", "error")


class TemplateRenderer:
    """Renders email templates using Jinja2.

    Each kind of email ("report", "error") has three templates in the
    careerscan.notifications.email_templates package:
    ``<kind>_subject.j2``, ``<kind>_body.html.j2`` and ``<kind>_body.txt.j2``.

    Templates are cached for reuse across multiple invocations.
    """

    def __init__(self, template_dir: str = "email_templates"):
        """Initialize template renderer with Jinja2 environment.

        Args:
            template_dir: Directory name within careerscan.notifications package
        """
        self.env = Environment(
            loader=PackageLoader("careerscan.notifications", template_dir),
            autoescape=select_autoescape(enabled_extensions=("html.j2",), default_for_string=True),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

        logger.debug(f"Initialized TemplateRenderer with templates from {template_dir}")

    def render(self, context: Dict, kind: str = "report") -> Dict[str, str]:
        """Render all templates of one email kind with the provided context.

        Args:
            context: Dictionary of template variables
            kind: "report" or "error"

        Returns:
            Dictionary containing:
            - subject: Rendered subject line (single line, no newlines)
            - html_body: Rendered HTML body
            - text_body: Rendered plain text body

        Raises:
            NotificationTemplateError: If the kind is unknown or rendering fails
        """
        if kind not in TEMPLATE_KINDS:
            raise NotificationTemplateError(
                f"Unknown template kind: {kind}. Expected one of: {', '.join(TEMPLATE_KINDS)}"
            )

        try:
            subject_template = self.env.get_template(f"{kind}_subject.j2")
            html_template = self.env.get_template(f"{kind}_body.html.j2")
            text_template = self.env.get_template(f"{kind}_body.txt.j2")

            subject = " ".join(subject_template.render(context).split())
            html_body = html_template.render(context)
            text_body = text_template.render(context)

        except TemplateError as e:
            error_msg = f"Template rendering failed: {e}"
            logger.error(
                error_msg,
                exc_info=True,
                extra={"event": "notification.template.failed", "kind": kind},
            )
            raise NotificationTemplateError(error_msg) from e

        logger.debug(f"Rendered {kind} templates")

        return {
            "subject": subject,
            "html_body": html_body,
            "text_body": text_body,
        }
