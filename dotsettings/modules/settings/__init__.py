from dotsettings.modules.settings.cache_coordinator import SettingsCacheCoordinator
from dotsettings.modules.settings.codec import SettingType, decode, decode_strict, encode
from dotsettings.modules.settings.models import Setting
from dotsettings.modules.settings.paths import SEPARATOR, SettingPath
from dotsettings.modules.settings.projector import flatten, project
from dotsettings.modules.settings.repository import SettingRepository
from dotsettings.modules.settings.schemas import SettingRecord
from dotsettings.modules.settings.service import SettingsManager

__all__ = [
    'SEPARATOR',
    'Setting',
    'SettingPath',
    'SettingRecord',
    'SettingRepository',
    'SettingType',
    'SettingsCacheCoordinator',
    'SettingsManager',
    'decode',
    'decode_strict',
    'encode',
    'flatten',
    'project',
]
