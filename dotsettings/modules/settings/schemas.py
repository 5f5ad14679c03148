from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from dotsettings.modules.settings.paths import MAX_KEY_LENGTH


class SettingRecord(BaseModel):
    """Linha plana de configuracao, desacoplada da sessao do banco."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    key: str = Field(..., min_length=1, max_length=MAX_KEY_LENGTH)
    value: str = ''
    type: str = 'string'
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
