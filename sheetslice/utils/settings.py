"""
Settings Manager
Persists project defaults and per-description importer settings
"""

import json
from typing import Optional

from PyQt6.QtCore import QSettings

from ..core.config import ProjectDefaults, SlicingConfig, migrate_config


class SettingsManager:
    """Manages importer settings; acts as the DefaultsProvider for migrations"""

    def __init__(self, settings: Optional[QSettings] = None):
        self.settings = settings if settings is not None else QSettings('SheetSlice', 'Settings')

    @classmethod
    def from_file(cls, path: str) -> "SettingsManager":
        """Settings stored in an INI file instead of the platform store"""
        return cls(QSettings(path, QSettings.Format.IniFormat))

    def project_defaults(self) -> ProjectDefaults:
        """Read the project defaults, falling back to the built-in ones"""
        builtin = ProjectDefaults()
        value = self.settings.value
        return ProjectDefaults(
            create_animations=value('animations/create', builtin.create_animations, type=bool),
            place_animations_in_subfolders=value(
                'animations/subfolders', builtin.place_animations_in_subfolders, type=bool),
            animation_subfolder_name_format=value(
                'animations/subfolder_format', builtin.animation_subfolder_name_format, type=str),
            slice_secondary_textures=value(
                'textures/slice_secondary', builtin.slice_secondary_textures, type=bool),
            slice_unidentified_textures=value(
                'textures/slice_unidentified', builtin.slice_unidentified_textures, type=bool),
            format_file_names=value('misc/format_file_names', builtin.format_file_names, type=bool),
            log_level=value('misc/log_level', builtin.log_level, type=str),
        )

    def set_project_defaults(self, defaults: ProjectDefaults):
        self.settings.setValue('animations/create', defaults.create_animations)
        self.settings.setValue('animations/subfolders', defaults.place_animations_in_subfolders)
        self.settings.setValue('animations/subfolder_format', defaults.animation_subfolder_name_format)
        self.settings.setValue('textures/slice_secondary', defaults.slice_secondary_textures)
        self.settings.setValue('textures/slice_unidentified', defaults.slice_unidentified_textures)
        self.settings.setValue('misc/format_file_names', defaults.format_file_names)
        self.settings.setValue('misc/log_level', defaults.log_level)
        self.settings.sync()

    def _importer_key(self, description_id: str) -> str:
        # QSettings treats slashes as groups; keep each description in one key
        return 'importers/' + description_id.replace('\\', '|').replace('/', '|')

    def load_importer_settings(self, description_id: str) -> Optional[dict]:
        """Stored settings for a description, or None"""
        blob = self.settings.value(self._importer_key(description_id), '', type=str) or ''
        if not blob:
            return None
        try:
            data = json.loads(blob)
        except json.JSONDecodeError:
            return None
        return data if isinstance(data, dict) else None

    def save_importer_settings(self, description_id: str, config: SlicingConfig):
        self.settings.setValue(self._importer_key(description_id), json.dumps(config.to_dict()))
        self.settings.sync()

    def config_for(self, description_id: str) -> SlicingConfig:
        """Effective settings for a description, migrating unversioned ones"""
        return migrate_config(self.load_importer_settings(description_id), self)
