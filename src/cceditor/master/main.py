"""Main entry point for the CC editor.

Loads the configuration, opens the MIDI output, builds the control
bank and serves the web API on the main thread.
"""

import argparse
import sys
import signal
import logging
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

from ..errors import ConfigError
from ..files.layout_file import FIELD_ORDERS, LABEL_FIRST
from ..logic.bank import ControlBank
from ..outputs.midi_output import MidiOutput
from ..util.logging import setup_logging, get_logger
from .actions import Actions
from .state import EditorSession, PRESET_FILES
from .web_api import EditorWebAPI

logger = get_logger('main')

DEFAULT_CONFIG_PATH = "config/editor.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    'midi': {'output_port': None, 'channel': 1},
    'layout': {'file': None, 'field_order': LABEL_FIRST},
    'preset': {'directory': None},
    'web': {'host': '127.0.0.1', 'port': 5000},
    'logging': {'level': 'INFO', 'file': None},
}


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load the YAML configuration, filling in defaults.

    Args:
        config_path: Path to the configuration file; None for defaults

    Returns:
        Configuration dictionary with every section present

    Raises:
        ConfigError: If the file exists but is not valid YAML, or a known
            section is not a mapping
    """
    config = {section: dict(values) for section, values in DEFAULT_CONFIG.items()}
    if config_path is None:
        return config

    config_file = Path(config_path)
    if not config_file.exists():
        logger.warning(f"Configuration file not found, using defaults: {config_file}")
        return config

    logger.info(f"Loading configuration from: {config_file}")
    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            loaded = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load configuration: {e}")
        raise ConfigError(f"Failed to load configuration {config_file}: {e}") from e

    if not isinstance(loaded, dict):
        raise ConfigError(f"Configuration {config_file} must be a mapping")

    for section, values in loaded.items():
        if values is None:
            continue
        if section not in config:
            config[section] = values
        elif isinstance(values, dict):
            config[section].update(values)
        else:
            raise ConfigError(f"Section '{section}' in {config_file} must be a mapping")
    logger.info("Configuration loaded successfully")
    return config


class EditorController:
    """Main CC editor service."""

    def __init__(self, config: Optional[Dict[str, Any]] = None, midi_output: Optional[MidiOutput] = None):
        """Initialize the CC editor.

        Args:
            config: Configuration as returned by load_config()
            midi_output: MIDI output to use (a fresh MidiOutput if None)
        """
        self.config = config if config is not None else load_config(None)
        self.midi_output = midi_output if midi_output is not None else MidiOutput()

        directories = {}
        preset_dir = self.config['preset'].get('directory')
        if preset_dir:
            directories[PRESET_FILES] = preset_dir
        self.session = EditorSession(directories=directories)

        self.layout_field_order = self.config['layout'].get('field_order') or LABEL_FIRST
        if self.layout_field_order not in FIELD_ORDERS:
            raise ConfigError(f"layout.field_order must be one of {FIELD_ORDERS}, "
                              f"got {self.layout_field_order!r}")

        self.bank = ControlBank(self.session.channel, self.midi_output)
        self.actions = Actions(self)
        self.web_api = None
        self.running = False

    def _signal_handler(self, signum, frame):
        """Handle shutdown signals gracefully."""
        logger.info(f"Received signal {signum}, shutting down...")
        raise KeyboardInterrupt

    def setup(self):
        """Apply the configured channel, port and startup layout."""
        midi = self.config['midi']
        result = self.actions.select_channel(midi.get('channel', 1))
        if not result['success']:
            logger.warning(result['error'])

        ports = self.midi_output.list_ports()
        if self.midi_output.init_error:
            self.session.update_status(f"MIDI init error: {self.midi_output.init_error}")
        elif not ports:
            self.session.update_status("No MIDI output ports found.")
        else:
            output_port = midi.get('output_port')
            if output_port:
                result = self.actions.select_port(name=output_port)
            else:
                result = self.actions.select_port(index=0)
            if not result['success']:
                logger.warning(result['error'])

        layout_file = self.config['layout'].get('file')
        if layout_file:
            result = self.actions.load_layout(layout_file)
            if not result['success']:
                logger.warning(result['error'])

    def start(self):
        """Start the CC editor service (blocks until interrupted)."""
        logger.info("=== CC Editor Starting ===")
        self.running = True
        signal.signal(signal.SIGTERM, self._signal_handler)

        self.setup()

        web = self.config['web']
        self.web_api = EditorWebAPI(self, host=web.get('host', '127.0.0.1'), port=int(web.get('port', 5000)))

        logger.info("=== CC Editor Running ===")
        self.web_api.run()

    def stop(self):
        """Stop the CC editor service."""
        if not self.running:
            return

        logger.info("=== CC Editor Stopping ===")
        self.running = False
        self.midi_output.close()
        self.bank.clear()
        logger.info("=== CC Editor Stopped ===")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog='cceditor', description="MIDI CC editor")
    parser.add_argument('--config', default=DEFAULT_CONFIG_PATH,
                        help=f"configuration file (default: {DEFAULT_CONFIG_PATH})")
    parser.add_argument('--list-ports', action='store_true',
                        help="print the MIDI output ports and exit")
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        setup_logging()
        logger.error(str(e))
        sys.exit(1)

    log_config = config['logging']
    setup_logging(level=log_config.get('level', logging.INFO), log_file=log_config.get('file'))

    if args.list_ports:
        output = MidiOutput()
        ports = output.list_ports()
        if output.init_error:
            print(f"MIDI init error: {output.init_error}", file=sys.stderr)
            sys.exit(1)
        for index, name in enumerate(ports):
            print(f"{index:<4} {name}")
        return

    try:
        controller = EditorController(config)
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        controller.start()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
    finally:
        controller.stop()


if __name__ == "__main__":
    main()
