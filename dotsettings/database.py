from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from dotsettings.config import config


def make_engine(database_url: str) -> Engine:
    """
    Cria a engine de conexao para a URL informada.

    Para SQLite em memoria usa StaticPool, de forma que todas as sessoes
    compartilhem a mesma conexao (e portanto o mesmo banco).
    """
    if database_url.startswith('sqlite'):
        return create_engine(
            database_url,
            poolclass=StaticPool,
            connect_args={'check_same_thread': False},
            echo=False,
        )
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        pool_recycle=1800,
        pool_timeout=30,
        echo=False,
    )


def make_session_factory(bind: Engine) -> sessionmaker[Session]:
    """Cria uma fabrica de sessoes ligada a engine."""
    return sessionmaker(
        bind=bind,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


# Engine padrao, a partir de DATABASE_URL
engine = make_engine(config.database_url)


class Base(DeclarativeBase):
    """Classe base declarativa para todos os modelos SQLAlchemy."""
    pass


def init_db(bind: Engine | None = None) -> None:
    """
    Cria as tabelas declaradas que ainda nao existem.

    Uso local e em testes; nao substitui ferramentas de migracao.
    """
    # Importa os modelos para registra-los no metadata
    from dotsettings.modules.settings import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)

