import argparse
import logging
import os
import signal
import sys
import threading
from typing import Callable, Optional, Sequence

from core.mover import ConfigurationError, MoverConfig, MoverLoop
from core.pointer import Pointer, PointerError, PyAutoGUIPointer
from core.service_manager import ServiceManager, ServiceState
from utils.config import ConfigManager
from utils.i18n import _, switch_language
from utils.logger import LoggerManager, get_logger, setup_exception_hook

APP_NAME = "mousemover"
APP_VERSION = "2.0.0"
APP_AUTHOR = "Prabhat Sharma <hi.prabhat@gmail.com>"

MOVER_SERVICE = 'mover'

# Get the absolute path to the directory of the current script (main.py)
SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_CONFIG_DIR = os.path.join(SCRIPT_DIR, 'config')

logger = get_logger(__name__)


def build_bootstrap_parser() -> argparse.ArgumentParser:
    """Parses only the flags needed before config.ini is read."""
    parser = argparse.ArgumentParser(add_help=False, allow_abbrev=False)
    parser.add_argument('--version', action='store_true')
    parser.add_argument('--config-dir', default=DEFAULT_CONFIG_DIR)
    return parser


def build_parser(config_manager: ConfigManager) -> argparse.ArgumentParser:
    """Builds the full CLI parser with defaults taken from config.ini."""
    defaults = config_manager.mover
    epilog = "\n".join([
        _('cli_examples_title'),
        f"  {APP_NAME:<28}# {_('cli_example_default')}",
        f"  {APP_NAME + ' --interval 60':<28}# {_('cli_example_interval')}",
        f"  {APP_NAME + ' --distance 5 -v':<28}# {_('cli_example_distance')}",
        "",
        _('cli_warning_title'),
        f"  {_('cli_warning_body')}",
    ])
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=_('app_description'),
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument('--interval',
                        type=int,
                        default=defaults['interval'],
                        help=_('cli_interval_help'))
    parser.add_argument('--distance',
                        type=int,
                        default=defaults['distance'],
                        help=_('cli_distance_help'))
    parser.add_argument('-v',
                        '--verbose',
                        action='store_true',
                        default=defaults['verbose'],
                        help=_('cli_verbose_help'))
    parser.add_argument('--version',
                        action='store_true',
                        help=_('cli_version_help'))
    parser.add_argument('--config-dir',
                        default=DEFAULT_CONFIG_DIR,
                        help=_('cli_config_dir_help'))
    return parser


def print_version():
    print(_('version_line').format(name=APP_NAME, version=APP_VERSION))
    print(_('banner_created_by').format(author=APP_AUTHOR))


def print_banner(config: MoverConfig):
    print(f"=== {APP_NAME} v{APP_VERSION} ===")
    print(_('banner_created_by').format(author=APP_AUTHOR))
    print(_('banner_configuration'))
    print(_('banner_interval').format(interval=config.interval))
    print(_('banner_distance').format(distance=config.distance))
    print(_('banner_verbose').format(verbose=str(config.verbose).lower()))
    print()
    print(_('banner_press_ctrl_c'))
    print("=======================")
    print()


def install_signal_handlers(interrupted: threading.Event) -> dict:
    """
    Routes SIGINT and SIGTERM to the given event.

    Returns:
        dict: The previous handlers, keyed by signal number.
    """

    def handler(signum, frame):
        logger.debug(_('app_signal_received').format(
            signal=signal.Signals(signum).name))
        interrupted.set()

    previous = {}
    for signum in (signal.SIGINT, signal.SIGTERM):
        previous[signum] = signal.signal(signum, handler)
    return previous


def restore_signal_handlers(previous: dict):
    for signum, handler in previous.items():
        signal.signal(signum, handler)


def run_app(config: MoverConfig,
            pointer: Pointer,
            interrupted: threading.Event,
            poll_interval: float = 0.5) -> int:
    """
    Runs the mover as a background service until `interrupted` is set.

    The main thread polls the event with a short timeout so that signal
    handlers get a chance to run on every platform.

    Returns:
        int: The process exit status.
    """
    cancel_event = threading.Event()
    mover = MoverLoop(config, pointer, cancel_event)
    service_manager = ServiceManager()
    service_manager.register_service(MOVER_SERVICE, mover)
    service_manager.start_service(MOVER_SERVICE)

    while not interrupted.wait(poll_interval):
        if service_manager.get_service_state(
                MOVER_SERVICE) == ServiceState.FAILED:
            return 1

    logger.info(_('app_shutting_down'))
    service_manager.stop_service(MOVER_SERVICE)
    mover.wait_done()
    if not config.verbose and mover.move_count:
        # Terminate the line of progress dots once no tick can add another.
        print()
    logger.info(_('app_shutdown_complete'))
    return 0


def main(argv: Optional[Sequence[str]] = None,
         pointer_factory: Callable[[], Pointer] = PyAutoGUIPointer) -> int:
    """Entry point for the mousemover application."""
    bootstrap_args, _remaining = build_bootstrap_parser().parse_known_args(
        argv)
    if bootstrap_args.version:
        print_version()
        return 0

    config_manager = ConfigManager(config_dir=bootstrap_args.config_dir)
    if config_manager.language != 'en':
        switch_language(config_manager.language)

    args = build_parser(config_manager).parse_args(argv)
    if args.version:
        print_version()
        return 0

    try:
        config = MoverConfig(interval=args.interval,
                             distance=args.distance,
                             verbose=args.verbose)
    except ConfigurationError as e:
        print(_('config_error').format(error=e), file=sys.stderr)
        return 1

    # --- Setup Logging and Exception Handling ---
    log_settings = config_manager.log_settings
    LoggerManager(log_dir=log_settings['log_dir'],
                  level=logging.DEBUG if config.verbose else logging.INFO,
                  file_enabled=log_settings['file_enabled'])
    setup_exception_hook()
    logger.debug(_('app_starting'))

    print_banner(config)

    try:
        pointer = pointer_factory()
    except PointerError as e:
        logger.critical(_('app_pointer_unavailable').format(error=e))
        return 1

    interrupted = threading.Event()
    previous_handlers = install_signal_handlers(interrupted)
    try:
        return run_app(config, pointer, interrupted)
    finally:
        restore_signal_handlers(previous_handlers)


if __name__ == "__main__":
    sys.exit(main())
