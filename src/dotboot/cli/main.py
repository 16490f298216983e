"""
Main CLI entrypoint for dotboot.

Usage:
    dotboot
    python -m dotboot

dotboot takes no arguments. It is configured through the environment:

    DOTBOOT_VERBOSE=1      stream command output and debug logging
    ZSH_CUSTOM=<dir>       Oh My Zsh custom directory (plugins go in <dir>/plugins)
    DOTBOOT_SOURCE_DIR=<d> directory holding bling/ and zsh/.zshrc (default: cwd)
    DOTBOOT_MANIFEST=<f>   alternative manifest file
    DOTBOOT_LOG_FILE=<f>   debug log file
"""

import logging
import platform
import sys
from typing import List, Mapping, Optional

from dotboot import __codename__, __version__
from dotboot.config import BootstrapConfig
from dotboot.engine.errors import ExitCode
from dotboot.engine.reporter import Reporter
from dotboot.engine.runner import ProvisioningRunner
from dotboot.executors.base import CommandExecutor
from dotboot.logging_utils import configure_logging
from dotboot.platform.detect import gather_facts

logger = logging.getLogger(__name__)


def get_version_string() -> str:
    """Generate a detailed version string."""
    python_version = platform.python_version()
    os_info = f"{platform.system()} {platform.release()}"
    return (
        f"dotboot {__version__} ({__codename__})\n"
        f"  python: {python_version}\n"
        f"  platform: {os_info}"
    )


def main(
    args: Optional[List[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    executor: Optional[CommandExecutor] = None,
    reporter: Optional[Reporter] = None,
) -> int:
    """Main entrypoint for dotboot."""
    if args is None:
        args = sys.argv[1:]
    if args:
        print(__doc__.strip(), file=sys.stderr)
        return int(ExitCode.CONFIG_ERROR)

    facts = gather_facts()
    config = BootstrapConfig.from_environment(environ, platform=facts.platform)
    log_path = configure_logging(config.log_file, verbose=config.verbose)

    logger.info(get_version_string().replace("\n", ";"))
    logger.info("Host: %s, user %s, root=%s", facts.describe(), config.user, config.is_root)
    logger.info("Log file: %s", log_path)
    if not facts.platform.known:
        logger.warning("Unrecognized host %s (%s)", facts.describe(), facts.system)

    runner = ProvisioningRunner(config, executor=executor, reporter=reporter)
    return runner.run()


if __name__ == "__main__":
    sys.exit(main())
