class SettingsException(Exception):
    """Excecao base para erros do armazenamento de configuracoes."""

    def __init__(self, message: str = 'Erro nas configuracoes') -> None:
        self.message = message
        super().__init__(self.message)


class InvalidSettingKeyException(SettingsException):
    """Excecao para chave de configuracao vazia ou invalida."""

    def __init__(self, message: str = 'Chave de configuracao invalida') -> None:
        super().__init__(message)


class StorageUnavailableException(SettingsException):
    """Excecao para falha de acesso ao banco de configuracoes."""

    def __init__(self, message: str = 'Armazenamento de configuracoes indisponivel') -> None:
        super().__init__(message)


class CacheUnavailableException(SettingsException):
    """Excecao para falha de acesso ao backend de cache."""

    def __init__(self, message: str = 'Cache de configuracoes indisponivel') -> None:
        super().__init__(message)


class DuplicateSettingKeyException(SettingsException):
    """Excecao para violacao da unicidade da chave (escrita fora do upsert)."""

    def __init__(self, message: str = 'Chave de configuracao duplicada') -> None:
        super().__init__(message)


class SettingDecodeException(SettingsException):
    """Excecao para valor estruturado corrompido no armazenamento."""

    def __init__(self, message: str = 'Valor de configuracao corrompido') -> None:
        super().__init__(message)
