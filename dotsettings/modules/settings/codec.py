"""
Conversao entre valores Python e o par (texto, tipo) gravado na tabela.

A coluna value so guarda texto; a coluna type diz como reconstruir o valor.
"""

import json
import logging
import re
from collections.abc import Mapping
from enum import Enum
from typing import Any

from dotsettings.shared.exceptions import SettingDecodeException

logger = logging.getLogger(__name__)

_INT_PREFIX_RE = re.compile(r'^\s*[+-]?\d+')
_FLOAT_PREFIX_RE = re.compile(r'^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?')


class SettingType(str, Enum):
    """Tags de tipo reconhecidas na coluna type."""

    STRING = 'string'
    BOOLEAN = 'boolean'
    INTEGER = 'integer'
    FLOAT = 'float'
    JSON = 'json'
    ARRAY = 'array'


def encode(value: Any) -> tuple[str, SettingType]:
    """
    Converte um valor Python no par (texto, tipo) para armazenamento.

    Ordem de precedencia: estruturado, bool, int, float e, por fim, string.
    bool e testado antes de int porque bool e subclasse de int.

    Args:
        value: Valor a ser armazenado.

    Returns:
        Tupla com o valor serializado e a tag de tipo.
    """
    if isinstance(value, Mapping):
        return json.dumps(dict(value), ensure_ascii=False, separators=(',', ':')), SettingType.JSON
    if isinstance(value, (list, tuple)):
        return json.dumps(value, ensure_ascii=False, separators=(',', ':')), SettingType.JSON
    if isinstance(value, bool):
        return ('1' if value else '0'), SettingType.BOOLEAN
    if isinstance(value, int):
        return str(value), SettingType.INTEGER
    if isinstance(value, float):
        return repr(value), SettingType.FLOAT
    if value is None:
        return '', SettingType.STRING
    return str(value), SettingType.STRING


def _parse_int(raw: str) -> int:
    match = _INT_PREFIX_RE.match(raw)
    return int(match.group(0)) if match else 0


def _parse_float(raw: str) -> float:
    stripped = raw.strip().lower()
    if stripped in ('inf', '+inf', '-inf', 'nan'):
        return float(stripped)
    match = _FLOAT_PREFIX_RE.match(raw)
    return float(match.group(0)) if match else 0.0


def _to_type(type_tag: str | SettingType | None) -> SettingType | None:
    if isinstance(type_tag, SettingType):
        return type_tag
    try:
        return SettingType(type_tag)
    except ValueError:
        return None


def decode_strict(raw: str | None, type_tag: str | SettingType | None) -> Any:
    """
    Reconstroi o valor Python a partir do texto e da tag de tipo.

    Tags desconhecidas devolvem o texto sem alteracao.

    Raises:
        SettingDecodeException: Se um valor json/array estiver corrompido.
    """
    raw = raw if raw is not None else ''
    setting_type = _to_type(type_tag)

    if setting_type is SettingType.BOOLEAN:
        return raw in ('1', 'true')
    if setting_type is SettingType.INTEGER:
        return _parse_int(raw)
    if setting_type is SettingType.FLOAT:
        return _parse_float(raw)
    if setting_type in (SettingType.JSON, SettingType.ARRAY):
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise SettingDecodeException(f'JSON invalido: {exc}') from exc
    return raw


def decode(raw: str | None, type_tag: str | SettingType | None) -> Any:
    """
    Versao tolerante de decode_strict.

    Um valor estruturado corrompido e devolvido como o texto armazenado,
    para que a leitura das configuracoes nunca falhe por causa de uma linha.
    """
    try:
        return decode_strict(raw, type_tag)
    except SettingDecodeException:
        logger.warning('Valor estruturado corrompido, usando texto bruto: %r', raw)
        return raw if raw is not None else ''
