"""
Prompt builder for the reply classifier.

Responsible for:
- Loading and rendering the Jinja2 templates (system + user prompts)
- Choosing the body to send (text body, or stripped HTML)
"""

from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader
import structlog

from reply_qualification.llm.text_utils import normalize_body
from reply_qualification.models.enums import Classification
from reply_qualification.models.input_models import EmailContent


logger = structlog.get_logger(__name__)


DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "prompts"

NO_SUBJECT_PLACEHOLDER = "(no subject)"

CLASSIFICATION_DESCRIPTIONS: dict[Classification, str] = {
    Classification.WILLING_TO_MEET: "The person explicitly wants to schedule a meeting or call",
    Classification.INTERESTED: "Positive response, open to discussion, but no meeting request yet",
    Classification.NEEDS_MORE_INFO: "Curious but needs clarification before deciding",
    Classification.NOT_INTERESTED: "Polite decline or rejection",
    Classification.OUT_OF_OFFICE: "Auto-reply, vacation, or temporary unavailability",
    Classification.UNSUBSCRIBE: "Wants to be removed from communications",
    Classification.BOUNCE: "Email delivery failure notification",
    Classification.OTHER: "Doesn't fit any category",
}

SUGGESTED_ACTIONS = [
    "forward_to_client",
    "auto_reply",
    "schedule_followup",
    "remove_from_list",
    "ignore",
]


class PromptBuilder:
    """
    Build the system and user prompts for one classification call.

    The system prompt is static and rendered once at construction.
    """

    def __init__(self, templates_dir: Optional[Path] = None):
        """
        Initialize prompt builder.

        Args:
            templates_dir: Directory containing system_prompt.txt and
                user_prompt_template.txt (defaults to the packaged prompts)
        """
        self.templates_dir = Path(templates_dir or DEFAULT_TEMPLATES_DIR)

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,  # We're generating prompts, not HTML
        )

        try:
            self.system_template = self.jinja_env.get_template("system_prompt.txt")
            self.user_template = self.jinja_env.get_template("user_prompt_template.txt")
        except Exception as e:
            logger.error("Failed to load prompt templates", error=str(e))
            raise

        self._system_prompt = self.system_template.render(
            classifications=[(c.value, CLASSIFICATION_DESCRIPTIONS[c]) for c in Classification],
            suggested_actions=SUGGESTED_ACTIONS,
        ).strip()

        logger.info("Loaded prompt templates", templates_dir=str(self.templates_dir))

    def build_system_prompt(self) -> str:
        return self._system_prompt

    def build_user_prompt(self, email: EmailContent) -> str:
        """
        Render the user turn.

        Format: "Subject: {subject}\\n\\nEmail body:\\n{body}" where a missing
        subject becomes "(no subject)" and the body is the text body or the
        stripped HTML body.
        """
        body = normalize_body(email.body_text, email.body_html)
        rendered = self.user_template.render(
            subject=email.subject or NO_SUBJECT_PLACEHOLDER,
            body=body,
        )

        logger.debug(
            "User prompt built",
            used_html=not email.body_text and bool(email.body_html),
            body_length=len(body),
            prompt_length=len(rendered),
        )
        return rendered
