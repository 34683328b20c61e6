"""Reminder message templates."""

import html
import re
from dataclasses import dataclass, field
from typing import Any


@dataclass
class MessageTemplate:
    """A text template with ``{name}`` placeholders."""

    name: str
    content: str
    escape_html: bool = False
    _variables: set[str] = field(default_factory=set, init=False, repr=False)

    def __post_init__(self):
        """Extract variables from template content."""
        self._variables = set(re.findall(r"\{(\w+)\}", self.content))

    @property
    def variables(self) -> set[str]:
        """Get the set of variables in this template."""
        return self._variables.copy()

    def render(self, **kwargs: Any) -> str:
        """Render the template with provided variables.

        Args:
            **kwargs: Variable values to substitute

        Returns:
            Rendered text

        Raises:
            ValueError: If required variables are missing
        """
        missing = self._variables - set(kwargs.keys())
        if missing:
            raise ValueError(f"Missing required variables: {missing}")

        def substitute(match: re.Match) -> str:
            text = str(kwargs[match.group(1)])
            return html.escape(text) if self.escape_html else text

        return re.sub(r"\{(\w+)\}", substitute, self.content)


REMINDER_SUBJECT = MessageTemplate(
    name="reminder_subject",
    content="作业未提交提醒 / Homework Submission Reminder",
)

REMINDER_TEXT = MessageTemplate(
    name="reminder_text",
    content=(
        "亲爱的{student_name}同学：\n"
        "系统检测到您尚未提交作业<{homework_name}>，请及时提交。\n"
        "\n"
        "Dear {student_name},\n"
        "Our records show that you have not yet submitted the homework "
        "<{homework_name}>. Please submit it as soon as possible.\n"
        "\n"
        "请勿回复这封邮件。/ Please do not reply to this email."
    ),
)

REMINDER_HTML = MessageTemplate(
    name="reminder_html",
    content=(
        "<p>亲爱的{student_name}同学：</p>\n"
        "<p>系统检测到您尚未提交作业<strong>{homework_name}</strong>，请及时提交。</p>\n"
        "<hr>\n"
        "<p>Dear {student_name},</p>\n"
        "<p>Our records show that you have not yet submitted the homework "
        "<strong>{homework_name}</strong>. Please submit it as soon as possible.</p>\n"
        "<p>请勿回复这封邮件。/ Please do not reply to this email.</p>"
    ),
    escape_html=True,
)


def render_reminder(student_name: str, homework_name: str) -> tuple[str, str, str]:
    """Render the reminder as ``(subject, text_body, html_body)``."""
    values = {"student_name": student_name, "homework_name": homework_name}
    return (
        REMINDER_SUBJECT.render(),
        REMINDER_TEXT.render(**values),
        REMINDER_HTML.render(**values),
    )
