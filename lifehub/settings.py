"""Per-client application settings: which optional modules are enabled."""

import json
import logging

logger = logging.getLogger(__name__)

APP_SETTINGS_KEY = 'app_settings'

MODULES = ('tv_shows', 'finance')


def default_settings():
    return {'enabled_apps': {module: True for module in MODULES}}


class AppSettings:
    """
    Enabled/disabled flags for optional modules, persisted in a StateStore.

    Toggling a module is paired with a sign-out by the caller; see
    lifehub.preferences.routes.
    """

    def __init__(self, store):
        self._store = store
        self.data = self._load()

    def _load(self):
        settings = default_settings()
        raw = self._store.get(APP_SETTINGS_KEY)
        if not raw:
            return settings
        try:
            saved = json.loads(raw)
            enabled = saved['enabled_apps']
            for module in MODULES:
                if module in enabled:
                    settings['enabled_apps'][module] = bool(enabled[module])
        except (TypeError, ValueError, KeyError) as e:
            logger.warning(f"Failed to parse app settings: {e}")
        return settings

    def is_enabled(self, module):
        return self.data['enabled_apps'].get(module, False)

    def update(self, changes):
        """Merge top-level changes and persist them."""
        self.data = {**self.data, **changes}
        self._store.set(APP_SETTINGS_KEY, json.dumps(self.data))
        return self.data

    def toggle(self, module):
        """
        Flip a module's flag.

        Raises:
            KeyError: If module is not an optional module
        """
        if module not in MODULES:
            raise KeyError(module)
        enabled = dict(self.data['enabled_apps'])
        enabled[module] = not enabled[module]
        return self.update({'enabled_apps': enabled})

    def to_dict(self):
        return self.data
