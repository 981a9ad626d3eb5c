"""Base mode handler with template method pattern."""
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any

from ..utils.display.display_utils import print_error


class ModeHandler(ABC):
    """Abstract base class for all command handlers.

    Subclasses list the options they cannot run without in
    ``REQUIRED_OPTIONS``; values fall back to the loaded configuration
    when the flag was not given.
    """

    REQUIRED_OPTIONS = ()

    def __init__(self, kmsctl_instance, args):
        """Initialize handler with the KmsCtl instance.

        Args:
            kmsctl_instance: Main KmsCtl CLI instance with config, output and clients
            args: Parsed argparse namespace
        """
        self.app = kmsctl_instance
        self.config = kmsctl_instance.config
        self.output = kmsctl_instance.output
        self.args = args

    def execute(self) -> int:
        """Execute the command workflow (Template Method).

        Errors raised by the workflow propagate to the CLI boundary.

        Returns:
            Exit code (0 for success, 1 for failure)
        """
        if not self.validate_prerequisites():
            return 1

        context = self.prepare_context()
        if context is None:
            return 1

        self.execute_workflow(context)
        return 0

    def option(self, name: str, default=None):
        """Resolve an option from the arguments, then the configuration."""
        value = getattr(self.args, name, None)
        if value is None or value == '':
            value = self.config.get(name, default)
        return value if value not in (None, '') else default

    def validate_prerequisites(self) -> bool:
        """Check every required option has a value.

        Returns:
            True if prerequisites are met, False otherwise
        """
        for name in self.REQUIRED_OPTIONS:
            if not self.option(name):
                print_error(f"the command option '{name.replace('_', '-')}' is required")
                return False
        return True

    def prepare_context(self) -> Optional[Dict[str, Any]]:
        """Gather the data the workflow needs.

        Returns:
            Context dictionary, or None if preparation failed
        """
        return {}

    @abstractmethod
    def execute_workflow(self, context: Dict[str, Any]) -> None:
        """Execute the command.

        Args:
            context: Prepared context dictionary
        """
        pass
