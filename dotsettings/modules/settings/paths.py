from dataclasses import dataclass
from typing import Any

from dotsettings.shared.exceptions import InvalidSettingKeyException

SEPARATOR = '.'

# Tamanho da coluna key
MAX_KEY_LENGTH = 255


@dataclass(frozen=True)
class SettingPath:
    """
    Caminho em notacao de ponto, como sequencia ordenada de segmentos.

    Usado na leitura, escrita e remocao na arvore e na exclusao por prefixo
    no banco, para que todas concordem sobre os limites entre segmentos.
    """

    segments: tuple[str, ...]

    @classmethod
    def parse(cls, key: str) -> 'SettingPath':
        """
        Cria o caminho a partir de uma chave plana.

        Raises:
            InvalidSettingKeyException: Se a chave nao for uma string nao vazia
                de ate MAX_KEY_LENGTH caracteres.
        """
        if not isinstance(key, str) or key == '':
            raise InvalidSettingKeyException(f'Chave de configuracao invalida: {key!r}')
        if len(key) > MAX_KEY_LENGTH:
            raise InvalidSettingKeyException(
                f'Chave de configuracao maior que {MAX_KEY_LENGTH} caracteres: {key[:40]!r}...'
            )
        return cls(tuple(key.split(SEPARATOR)))

    @property
    def key(self) -> str:
        return SEPARATOR.join(self.segments)

    @property
    def descendant_prefix(self) -> str:
        """Prefixo compartilhado pelas chaves de todos os descendentes."""
        return self.key + SEPARATOR

    def is_prefix_of(self, other: 'SettingPath') -> bool:
        """True se other for um descendente estrito deste caminho."""
        return (
            len(other.segments) > len(self.segments)
            and other.segments[:len(self.segments)] == self.segments
        )

    def lookup(self, tree: dict, default: Any = None) -> Any:
        """Retorna o valor no caminho, ou default se algum segmento faltar."""
        node: Any = tree
        for segment in self.segments:
            if not isinstance(node, dict) or segment not in node:
                return default
            node = node[segment]
        return node

    def exists(self, tree: dict) -> bool:
        node: Any = tree
        for segment in self.segments:
            if not isinstance(node, dict) or segment not in node:
                return False
            node = node[segment]
        return True

    def assign(self, tree: dict, value: Any) -> None:
        """
        Grava value no caminho, criando os mapeamentos intermediarios.

        Um intermediario que nao seja mapeamento e substituido por um vazio.
        """
        node = tree
        for segment in self.segments[:-1]:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = {}
                node[segment] = child
            node = child
        node[self.segments[-1]] = value

    def remove(self, tree: dict) -> bool:
        """Remove a subarvore no caminho. Retorna False se nao existia."""
        node: Any = tree
        for segment in self.segments[:-1]:
            if not isinstance(node, dict) or segment not in node:
                return False
            node = node[segment]
        if not isinstance(node, dict) or self.segments[-1] not in node:
            return False
        del node[self.segments[-1]]
        return True

    def __str__(self) -> str:
        return self.key
