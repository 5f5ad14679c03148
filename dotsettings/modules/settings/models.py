from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from dotsettings.config import config
from dotsettings.modules.settings.paths import MAX_KEY_LENGTH
from dotsettings.shared.models import BaseModel


class Setting(BaseModel):
    """
    Modelo de configuracao plana.

    Cada linha guarda uma chave completa em notacao de ponto (ex: app.database.host),
    o valor serializado como texto e a tag de tipo usada para decodifica-lo.
    O nome da tabela vem de SETTINGS_TABLE_NAME e e fixado na importacao.
    Herda de BaseModel (inclui id, created_at, updated_at).
    """

    __tablename__ = config.settings_table_name

    key: Mapped[str] = mapped_column(
        String(MAX_KEY_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    value: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default='',
    )
    type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default='string',
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )

    def __repr__(self) -> str:
        return f'<Setting {self.key}={self.value!r} ({self.type})>'
