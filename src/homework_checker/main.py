"""
Homework Check Pipeline

Orchestrates the workflow: load configuration, scan the submission
directory, report missing students, and optionally remind them by email.
"""

from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from .config.loader import DEFAULT_CONFIG_DIR, DEFAULT_ENVIRONMENT, ConfigError, ConfigLoader
from .config.models import AppConfig, Student
from .notify.sender import EmailSender, NotificationResult, SendError, notify_students
from .processing.submissions import ScanError, find_missing
from .utils.logging import DEFAULT_LOG_DIR, get_logger, setup_logging

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


@dataclass
class CheckOptions:
    """Options for a single check run."""

    environment: str = DEFAULT_ENVIRONMENT
    config_dir: Path = DEFAULT_CONFIG_DIR
    check_dir: Path | None = None
    strict: bool = False
    send: bool = False
    homework_name: str | None = None
    receive: bool = False
    log_dir: Path | None = DEFAULT_LOG_DIR

    def validate(self) -> None:
        """Check that sending and the homework name are given together.

        Raises:
            ValueError: If only one of them is present
        """
        if self.send and not self.homework_name:
            raise ValueError("Sending reminders requires a homework name (--name)")
        if self.homework_name and not self.send:
            raise ValueError("A homework name (--name) is only used together with --send")


class HomeworkCheck:
    """Runs one check of the submission directory against the roster."""

    def __init__(self, options: CheckOptions, console: Console | None = None):
        """Initialize the check.

        Args:
            options: Run options
            console: Console for user-facing output
        """
        options.validate()
        self.options = options
        self.console = console or Console()

    def run(self) -> int:
        """Run the check.

        Returns:
            Process exit code: 0 when the scan succeeded (even if some
            reminders failed), 1 on a fatal error
        """
        try:
            config = self.load_config()
        except ConfigError as e:
            self.console.print(f"[red]✗ Failed to load configuration:[/red] {escape(str(e))}")
            self.console.print(
                f"Make sure the configuration files exist in the "
                f"'{escape(str(self.options.config_dir))}' directory"
            )
            return EXIT_FAILURE

        setup_logging(
            level=config.logging.level,
            console_output=config.logging.console_output,
            log_dir=self.options.log_dir,
        )
        logger.info(
            f"Configuration loaded from {self.options.config_dir} "
            f"(environment: {self.options.environment})"
        )

        try:
            missing = find_missing(config.students, self.options.check_dir)
        except ScanError as e:
            logger.error(str(e))
            self.console.print(f"[red]✗ {escape(str(e))}[/red]")
            return EXIT_FAILURE

        if not missing:
            self.console.print("🎉 All students have submitted their homework")
            return EXIT_OK

        self.report_missing(missing)

        if self.options.send:
            try:
                self.send_reminders(config, missing)
            except SendError as e:
                logger.error(f"Cannot set up email sender: {e}")
                self.console.print(f"[red]✗ Cannot set up email sender:[/red] {escape(str(e))}")
                return EXIT_FAILURE

        self._receive()
        return EXIT_OK

    def load_config(self) -> AppConfig:
        return ConfigLoader(self.options.config_dir).load(
            self.options.environment,
            strict=self.options.strict,
        )

    def report_missing(self, missing: list[Student]) -> None:
        self.console.print("❌ Students who have not submitted:")
        for student in missing:
            self.console.print(student.name, markup=False)

    def send_reminders(self, config: AppConfig, missing: list[Student]) -> list[NotificationResult]:
        """Remind every missing student, reporting each outcome.

        Raises:
            SendError: If the sender itself cannot be constructed
        """
        sender = EmailSender(config.smtp.username, config.smtp)
        results = notify_students(sender, self.options.homework_name or "", missing)

        for result in results:
            if result.success:
                self.console.print(f"✅ Email sent to: {escape(result.student.email)}")
            else:
                self.console.print(
                    f"[yellow]⚠ Failed to send email to {escape(result.student.email)}:[/yellow] "
                    f"{escape(result.error_message or '')}"
                )

        logger.info("Email notification finished")
        return results

    def _receive(self) -> None:
        if self.options.receive:
            # TODO: download submissions over IMAP into imap_config.out_dir
            logger.warning("Receiving submissions by email is not implemented yet")
            self.console.print("[yellow]⚠ Receiving mail is not implemented yet[/yellow]")


def run_check(options: CheckOptions, console: Console | None = None) -> int:
    """Run a homework check and return the process exit code."""
    return HomeworkCheck(options, console).run()
