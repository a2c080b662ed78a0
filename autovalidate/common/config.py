# -*- coding: utf-8 -*-

"""Manages settings and config file.

Settings are loaded from a configuration file. If they don't exists, default
values are provided.
When an option is set, the config file is updated.

Before any use, the module must be initialized by calling ``load()``.
"""

import configparser
import logging
import os
import os.path

from . import path as autovalidate_path

_logger = logging.getLogger(__name__)


# Default config dict. Values not present in this dict are not valid.
# Each entry contains the type expected, and the default value.
_default_config = {
    'debug_mode': {'type': bool, 'default': False},
    'log_levels': {'type': dict, 'default': {}},
    'api_url': {'type': str,
                'default': 'https://api.api-ninjas.com/v1/city'},
    'api_key': {'type': str, 'default': None},
    'refresh_rate': {'type': float, 'default': 1.0},
    'request_timeout': {'type': float, 'default': 10.0}
}

# Entries who can be set by an environment variable, when absent from the
# config file.
_env_config = {
    'api_key': 'NINJAS_API_KEY'
}

# Actual config parser
_config_parser = configparser.ConfigParser(interpolation=None)
_config_parser.add_section('config')


def _get_config_file_path():
    return os.path.join(autovalidate_path.get_config_dir(),
                        'autovalidate.ini')


def load():
    """Find and load the config file.

    This function must be called before any use of the module.
    """
    config_file_path = _get_config_file_path()

    if not _config_parser.read(config_file_path):
        _logger.warning('Unable to load config file: %s', config_file_path)


def _get_default(key):
    env_name = _env_config.get(key)
    if env_name and os.environ.get(env_name):
        return os.environ[env_name]
    return _default_config[key]['default']


def get(key):
    """Find and return a configuration entry

    If the entry is not specified in the config file, a default value is
    returned.

    Args:
        key (string): the entry key.
    Returns:
        The corresponding value found.
    Raises:
        KeyError: if the config entry doesn't exists.
    """
    if key not in _default_config:
        raise KeyError(key)
    value_type = _default_config[key]['type']
    try:
        if value_type is bool:
            return _config_parser.getboolean('config', key)
        elif value_type is int:
            return _config_parser.getint('config', key)
        elif value_type is float:
            return _config_parser.getfloat('config', key)
        elif value_type is dict:
            # Dict entries are in the form 'key=value;key2=value2'
            dict_str = _config_parser.get('config', key)
            result = {}
            for pair in filter(None, dict_str.split(';')):
                try:
                    (k, v) = pair.split('=')
                    result[k.strip()] = v.strip()
                except ValueError:
                    _logger.warning('Unable to parse pair key=value: "%s"',
                                    pair)
            return result
        else:
            return _config_parser.get('config', key)
    except configparser.NoOptionError:
        return _get_default(key)
    except ValueError:
        _logger.warning('Invalid value for config entry "%s". Default value '
                        'will be used.', key)
        return _get_default(key)


def set(key, value):
    """Set a configuration entry.

    Args:
        key (string): the entry key.
        value: the new value to set. It will be converted to string. Dict
            values are serialized in the form 'key=value;key2=value2'.
    Raises:
        KeyError: if the config entry is not valid.
    """
    if key not in _default_config:
        raise KeyError(key)
    if isinstance(value, dict):
        value = ';'.join('%s=%s' % item for item in value.items())
    _config_parser.set('config', key, str(value))
    config_file_path = _get_config_file_path()
    try:
        with open(config_file_path, 'w') as config_file:
            _config_parser.write(config_file)
        _logger.debug('Config file modified.')
    except IOError:
        _logger.warning('Unable to write in the config file', exc_info=True)
