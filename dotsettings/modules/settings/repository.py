from sqlalchemy import delete, inspect, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dotsettings.modules.settings.models import Setting
from dotsettings.shared.exceptions import DuplicateSettingKeyException


class SettingRepository:
    """
    Repositorio de acesso a dados de configuracoes planas.

    Responsavel por operacoes de leitura e escrita na tabela de configuracoes.
    Nao contem logica de negocio, apenas acesso a dados.
    """

    def __init__(self, db: Session) -> None:
        """Inicializa o repositorio com a sessao do banco."""
        self._db = db

    def table_exists(self) -> bool:
        """Verifica se a tabela de configuracoes ja foi criada."""
        return inspect(self._db.get_bind()).has_table(Setting.__tablename__)

    def get_by_key(self, key: str) -> Setting | None:
        """
        Busca uma configuracao pela chave.

        Args:
            key: Chave unica da configuracao.

        Returns:
            Configuracao encontrada ou None.
        """
        stmt = select(Setting).where(Setting.key == key)
        return self._db.execute(stmt).scalar_one_or_none()

    def list_all(self) -> list[Setting]:
        """Retorna todas as configuracoes ordenadas pela chave."""
        stmt = select(Setting).order_by(Setting.key)
        return list(self._db.execute(stmt).scalars().all())

    def upsert(
        self,
        key: str,
        value: str,
        type: str,
        description: str | None = None,
    ) -> Setting:
        """
        Cria ou atualiza uma configuracao (upsert).

        Se a chave ja existe, atualiza valor e tipo; a descricao so e
        alterada quando informada. Caso contrario, cria um novo registro.

        Args:
            key: Chave unica da configuracao.
            value: Valor serializado.
            type: Tag de tipo do valor.
            description: Descricao opcional da configuracao.

        Returns:
            Configuracao criada ou atualizada.

        Raises:
            DuplicateSettingKeyException: Se outra escrita criou a mesma chave.
        """
        existing = self.get_by_key(key)

        if existing:
            existing.value = value
            existing.type = type
            if description is not None:
                existing.description = description
            setting = existing
        else:
            setting = Setting(
                key=key,
                value=value,
                type=type,
                description=description,
            )
            self._db.add(setting)

        try:
            self._db.commit()
        except IntegrityError as exc:
            self._db.rollback()
            raise DuplicateSettingKeyException(
                f'Chave de configuracao duplicada: {key}'
            ) from exc
        self._db.refresh(setting)
        return setting

    def delete_by_key(self, key: str) -> int:
        """
        Exclui permanentemente a configuracao com a chave exata.

        Returns:
            Numero de linhas excluidas (0 ou 1).
        """
        stmt = (
            delete(Setting)
            .where(Setting.key == key)
            .execution_options(synchronize_session=False)
        )
        result = self._db.execute(stmt)
        self._db.commit()
        return result.rowcount

    def delete_by_prefix(self, prefix: str) -> int:
        """
        Exclui todas as configuracoes cuja chave comeca com prefix.

        Curingas de LIKE (% e _) na chave sao tratados literalmente.

        Args:
            prefix: Prefixo das chaves, ja incluindo o separador (ex: "app.").

        Returns:
            Numero de linhas excluidas.
        """
        stmt = (
            delete(Setting)
            .where(Setting.key.startswith(prefix, autoescape=True))
            .execution_options(synchronize_session=False)
        )
        result = self._db.execute(stmt)
        self._db.commit()
        return result.rowcount
