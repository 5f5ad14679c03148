"""
Projecao entre as linhas planas e a arvore aninhada de configuracoes.

Funcoes puras, sem acesso a banco ou cache.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from dotsettings.modules.settings.codec import decode
from dotsettings.modules.settings.paths import SEPARATOR, SettingPath
from dotsettings.modules.settings.schemas import SettingRecord


def project(records: Iterable[SettingRecord]) -> dict[str, Any]:
    """
    Monta a arvore aninhada a partir das linhas planas.

    As linhas sao processadas em ordem crescente de chave e a ultima gravacao
    vence. Como "a" < "a.<qualquer coisa>", quando existem as chaves "a" e
    "a.b" o mapeamento formado pela chave mais profunda substitui o escalar.

    Args:
        records: Linhas da tabela de configuracoes.

    Returns:
        Arvore de configuracoes.
    """
    tree: dict[str, Any] = {}
    for record in sorted(records, key=lambda r: r.key):
        SettingPath.parse(record.key).assign(tree, decode(record.value, record.type))
    return tree


def flatten(prefix: str, value: Any) -> list[tuple[str, Any]]:
    """
    Achata um valor aninhado em pares (chave com pontos, folha).

    Apenas mapeamentos nao vazios sao percorridos; listas, escalares e
    mapeamentos vazios sao folhas gravadas como uma unica linha. Um mapeamento
    vazio sem prefixo nao gera nenhum par.

    Args:
        prefix: Chave do no raiz ('' para usar as chaves do mapeamento como estao).
        value: Valor a ser achatado.

    Returns:
        Lista de pares na ordem de iteracao do mapeamento.
    """
    if not isinstance(value, Mapping) or (prefix and not value):
        return [(prefix, value)]

    leaves: list[tuple[str, Any]] = []
    for segment, child in value.items():
        key = f'{prefix}{SEPARATOR}{segment}' if prefix else str(segment)
        leaves.extend(flatten(key, child))
    return leaves
