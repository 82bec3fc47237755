"""
Configuration and logging helpers shared by the command line front end.

Settings live in an INI file (``conf/tide_processor.conf``) and logging is
configured from ``conf/logging.conf``.  Both files are looked up relative to
the repository root unless a path is given explicitly.  Missing files or
sections fall back to the built-in defaults below so the library can be used
without any configuration on disk.
"""
from __future__ import annotations

import configparser
import logging
import logging.config
import os
from logging import Logger
from pathlib import Path

CONF_DIR = (Path(__file__).parent.parent.parent / 'conf').resolve()

DEFAULT_SETTINGS: dict[str, dict[str, str]] = {
    'parsing': {
        'date_format': 'yyyy/mm/dd hh:mm',
        'export_date_format': 'dd/mm/yyyy hh:mm:ss',
    },
    'interval': {
        'amount': '10',
        'unit': 'minutes',
    },
    'analysis': {
        'method': 'simplified',
        'rayleigh': '1.0',
        'time_basis': 'index',
        'latitude': '',
    },
}
"""Fallback values for every configuration section."""


class Utils:
    """Locate and read the processor configuration files."""

    def __init__(self, config_file: str | os.PathLike | None = None):
        self.config_file = Path(config_file) if config_file else None

    def get_config_file(self) -> Path:
        """Return the configuration file path (explicit, env or default)."""
        if self.config_file is not None:
            return self.config_file
        env_path = os.environ.get('TIDE_PROCESSOR_CONFIG')
        if env_path:
            return Path(env_path)
        return CONF_DIR / 'tide_processor.conf'

    def get_log_config_file(self) -> Path:
        return CONF_DIR / 'logging.conf'

    def read_config_section(
        self,
        section: str,
        logger: Logger | None = None,
    ) -> dict[str, str]:
        """
        Read one section of the configuration file.

        Parameters
        ----------
        section : str
            Section name, e.g. ``"analysis"``.
        logger : logging.Logger, optional
            Logger instance for diagnostic messages.

        Returns
        -------
        dict
            Section values layered over :data:`DEFAULT_SETTINGS`.

        Raises
        ------
        KeyError
            If *section* is neither in the file nor in the defaults.
        """
        _log = logger or logging.getLogger(__name__)

        settings = dict(DEFAULT_SETTINGS.get(section, {}))
        config_file = self.get_config_file()

        parser = configparser.ConfigParser()
        if config_file.is_file():
            parser.read(config_file)
        else:
            _log.debug('Config file %s not found; using defaults.', config_file)

        if parser.has_section(section):
            settings.update(parser[section])
        elif section not in DEFAULT_SETTINGS:
            raise KeyError(f"Unknown configuration section '{section}'.")

        return settings


def setup_logger(logger: Logger | None = None) -> Logger:
    """Initialize logging from ``conf/logging.conf`` if no logger is given."""
    if logger is not None:
        return logger

    log_config_file = Utils().get_log_config_file()
    if log_config_file.is_file():
        logging.config.fileConfig(
            log_config_file, disable_existing_loggers=False,
        )
    else:
        logging.basicConfig(level=logging.INFO)

    logger = logging.getLogger('tide_processor')
    logger.info('Using log config %s', log_config_file)
    return logger
