import tomllib
from pathlib import Path


DEFAULT_SETTINGS_FILE = 'classdup.toml'

# Settings key constants
SETTING_IGNORED = 'ignored'
SETTING_LOGGING_PATH = 'logging.path'
SETTING_CONCURRENCY = 'processor.concurrency'


class Settings:
    """Settings manager for check configuration.

    Provides a read-only key-value interface to settings loaded from a TOML file. This class is
    agnostic to the schema and usage of settings - it simply loads the TOML file and provides
    access to the raw data structure. Consumers are responsible for interpreting and validating
    the values.

    Example:
        settings = Settings.load(Path('classdup.toml'))
        ignored = settings.get(SETTING_IGNORED, [])
        concurrency = settings.get('processor.concurrency')
    """

    def __init__(self, data: dict | None = None, path: Path | None = None):
        self._settings = data or {}
        self._path = path

    @classmethod
    def load(cls, path: Path | None = None) -> 'Settings':
        """Load settings from a TOML file.

        Without an explicit path, ``classdup.toml`` in the working directory is used if present,
        and empty settings otherwise.

        Args:
            path: Settings file to load

        Raises:
            FileNotFoundError: An explicitly given settings file does not exist
            tomllib.TOMLDecodeError: The file is not valid TOML
        """
        if path is None:
            path = Path(DEFAULT_SETTINGS_FILE)
            if not path.is_file():
                return cls()

        with open(path, 'rb') as f:
            return cls(tomllib.load(f), path)

    @property
    def path(self) -> Path | None:
        """The file the settings were loaded from, if any."""
        return self._path

    def get(self, key: str, default=None):
        """Get a setting value by key with optional default.

        Supports both simple keys (e.g., 'ignored') and dot notation for accessing nested keys
        (e.g., 'logging.path' accesses settings['logging']['path']). Returns the default value if
        the key path does not exist or if any intermediate value is not a dictionary.

        Examples:
            >>> settings.get(SETTING_IGNORED, [])
            ['org.example:legacy']
            >>> settings.get('nonexistent.key', 'fallback')
            'fallback'
        """
        keys = key.split('.')
        value = self._settings

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value
