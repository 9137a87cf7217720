"""Configuration of the multiplexing pipeline.

The pipeline can be tuned with a YAML file such as:

```
remapper:
  tick: 0
  programs: [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0]
engine:
  min_velocity: 40
```

A function or class decorated with `@configurable` can be called normally, or created via
`Configuration.configure`, in which case the items of the configuration dict are passed to it as
keyword arguments (overriding the defaults given to `configure`). Items listed as subconfigs are
not passed; they are available through the `Configuration` object instead, which is passed as the
first argument `cfg` to a configurable function, or attached to a configurable class instance as
`self._cfg`:

```
@configurable(['engine'])
def run(cfg, song, mux):
    engine = cfg['engine'].configure(MuxEngine)
```
"""

import functools

import yaml

from midimux import logger


_MISSING_VALUE = object()
_NO_DEFAULT = object()


class Configuration:

    def __init__(self, value, name='<root>'):
        self._wrapped = value
        self.name = name
        self._child_configs = {}

    def get(self, key=None, default=_NO_DEFAULT):
        """Return the wrapped value, or one of its items if `key` is given.

        Raises:
            KeyError: If the value or the key is missing and no default was given.
            TypeError: If the wrapped value is not a dict.
        """
        if self._wrapped is _MISSING_VALUE:
            if default is _NO_DEFAULT:
                raise KeyError(f'Missing configuration value {self.name}')
            return default

        if key is None:
            return self._wrapped

        if not isinstance(self._wrapped, dict):
            raise TypeError(f'Attempted to get item {key!r} of configuration value {self.name} '
                            f'of type {type(self._wrapped)}')

        try:
            return self._wrapped[key]
        except KeyError:
            if default is _NO_DEFAULT:
                raise KeyError(f"Missing configuration value '{self._get_key_name(key)}'") from None
            return default

    def configure(self, constructor, **kwargs):
        """Call `constructor` with the keyword arguments from this configuration.

        `kwargs` are treated as defaults and can be overridden by the configuration. The
        constructor is called even if this configuration object corresponds to a missing key.

        Returns:
            The return value of `constructor`, or `None` if the configuration value is `None`.
        """
        config_val = self.get(default={})
        if config_val is None:
            return None
        if not isinstance(config_val, dict):
            raise ConfigError(f'Error while configuring {self.name}: dict expected, '
                              f'got {type(config_val).__name__}')

        try:
            if hasattr(constructor, '__midimux_subconfigs'):
                return _construct_configurable(constructor, kwargs, config_val, cfg=self)

            kwargs = {**kwargs, **config_val}
            _log_call(constructor, kwargs)
            return constructor(**kwargs)
        except TypeError as e:
            raise ConfigError('{} while configuring {} ({}): {}'.format(
                type(e).__name__, self.name, constructor.__name__, e)) from e

    def __getitem__(self, key):
        """Return a `Configuration` object for the given key.

        A missing key gives a `Configuration` wrapping a special missing value.
        """
        if key not in self._child_configs:
            self._child_configs[key] = Configuration(self.get(key, _MISSING_VALUE),
                                                     name=self._get_key_name(key))
        return self._child_configs[key]

    def __contains__(self, key):
        return isinstance(self._wrapped, dict) and key in self._wrapped

    def __bool__(self):
        return self._wrapped is not _MISSING_VALUE and bool(self._wrapped)

    def __repr__(self):
        return 'Configuration({}, name={!r})'.format(
            repr(self._wrapped) if self._wrapped is not _MISSING_VALUE else '<missing>',
            self.name)

    def _get_key_name(self, key):
        if self.name == '<root>':
            return str(key)
        return f'{self.name}.{key}'

    @classmethod
    def from_yaml(cls, stream):
        value = yaml.safe_load(stream)
        if value is None:
            value = {}
        if not isinstance(value, dict):
            raise ConfigError(f'Expected a mapping at the top level, got {type(value).__name__}')
        return cls(value)


def load_config(path=None, keys=None):
    """Load a YAML configuration file.

    Args:
        path: The path to the file, or `None`.
        keys: The allowed top-level keys. If `None`, any keys are allowed.
    Returns:
        A `Configuration` object; an empty one if `path` is `None`.
    Raises:
        ConfigError: If the file cannot be read, does not contain a mapping or contains a key
            not listed in `keys`.
    """
    if path is None:
        return Configuration({})
    try:
        with open(path) as f:
            cfg = Configuration.from_yaml(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f'Cannot load configuration file {path!r}: {e}') from e
    except ConfigError as e:
        raise ConfigError(f'{path}: {e}') from None

    if keys is not None:
        unknown = sorted(str(k) for k in cfg.get() if k not in keys)
        if unknown:
            raise ConfigError('{}: unknown configuration key(s) {}; expected {}'.format(
                path, ', '.join(unknown), ', '.join(keys)))
    return cfg


def configurable(subconfigs=()):
    """Return a decorator that makes a function or a class configurable.

    A configurable function receives a `Configuration` object as its first argument `cfg`. A
    configurable class can access its `Configuration` object via `self._cfg`.

    Args:
        subconfigs: Names of configuration items that are meant to be accessed through the
            `Configuration` object and therefore are not passed as keyword arguments.
    Returns:
        The decorator.
    """
    def decorator(x):
        setattr(x, '__midimux_subconfigs', tuple(subconfigs))

        if isinstance(x, type):
            init = x.__init__

            @functools.wraps(init)
            def init_wrapper(self, *args, **kwargs):
                if not hasattr(self, '_cfg'):
                    self._cfg = Configuration(_MISSING_VALUE, name='<missing>')
                init(self, *args, **kwargs)

            x.__init__ = init_wrapper
            return x

        @functools.wraps(x)
        def wrapper(*args, **kwargs):
            return x(Configuration(_MISSING_VALUE, name='<missing>'), *args, **kwargs)

        setattr(wrapper, '__midimux_subconfigs', tuple(subconfigs))
        setattr(wrapper, '__midimux_wrapped', x)
        return wrapper

    return decorator


def _construct_configurable(x, kwargs, config_dict, cfg):
    subconfigs = getattr(x, '__midimux_subconfigs')
    kwargs = dict(kwargs)
    kwargs.update({k: v for k, v in config_dict.items() if k not in subconfigs})

    _log_call(x, kwargs)

    if isinstance(x, type):
        obj = x.__new__(x)
        obj._cfg = cfg
        obj.__init__(**kwargs)
        return obj

    return getattr(x, '__midimux_wrapped')(cfg, **kwargs)


def _log_call(fn, kwargs):
    logger.debug('Calling {}({})'.format(
        fn.__name__, ', '.join(f'{k}={v!r}' for k, v in kwargs.items())))


class ConfigError(Exception):
    pass
