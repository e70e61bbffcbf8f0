"""
Utilidades para manejo de importes monetarios.

Todos los importes del dominio son `Decimal`: los repartos proporcionales
acumulan muchas sumas y con `float` se pierden céntimos por el camino.

Dos variantes de conversión:
- `parse_money`: estricta, lanza ValueError ante texto no numérico.
- `parse_money_safe`: tolerante, devuelve Decimal("0"). Es la que usan los
  formularios de imputación: un importe manual ilegible cuenta como 0 y el
  descuadre resultante se avisa en la comprobación de cuadre.
"""

import re
from decimal import Decimal, InvalidOperation

TOLERANCIA_CUADRE = Decimal("0.02")
"""Diferencia máxima entre importe total y suma repartida para considerar
un reparto cuadrado."""

CERO = Decimal("0")

_COMA_DECIMAL = re.compile(r"[-+]?\d*,\d{1,2}")


def parse_money(text: str) -> Decimal:
    """Convierte un texto con formato monetario a Decimal.

    Formatos aceptados:
    - Sin símbolo: "1234.56", "1,234.56", "1.234,56"
    - Con símbolo: "1,234.56 €", "€1234.56", "$1,234.56"
    - Coma decimal: "120,50" (una sola coma seguida de 1 o 2 cifras)
    - Negativo: "-1,234.56"
    - Con espacios: " 1 234.56 "

    Con punto y coma a la vez, el separador decimal es el que va último.
    Con solo comas, una coma seguida de 3 cifras es de miles ("1,234").

    Raises:
        TypeError: Si no recibe un str.
        ValueError: Si el texto está vacío o no es un importe.

    Ejemplos:
        >>> parse_money("1,234.56 €")
        Decimal('1234.56')
        >>> parse_money("1.234,56 €")
        Decimal('1234.56')
        >>> parse_money("-120,50")
        Decimal('-120.50')
    """
    if not isinstance(text, str):
        raise TypeError(f"parse_money espera str, recibió {type(text).__name__}")
    if not text.strip():
        raise ValueError("El texto del importe está vacío")

    cleaned = text.strip()
    for symbol in ("€", "$", " ", " "):
        cleaned = cleaned.replace(symbol, "")
    cleaned = _normalizar_separadores(cleaned)

    if not cleaned or cleaned in ("-", "+", "."):
        raise ValueError(f"No se pudo extraer un importe de: '{text}'")

    try:
        result = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"No se pudo convertir a importe: '{text}' (limpio: '{cleaned}')")

    if not result.is_finite():
        raise ValueError(f"Importe no finito: '{text}'")

    return result


def _normalizar_separadores(cleaned: str) -> str:
    """Deja el texto con punto decimal y sin separadores de miles."""
    if "," in cleaned and "." in cleaned:
        if cleaned.rfind(",") > cleaned.rfind("."):
            return cleaned.replace(".", "").replace(",", ".")
        return cleaned.replace(",", "")
    if "," in cleaned:
        if _COMA_DECIMAL.fullmatch(cleaned):
            return cleaned.replace(",", ".")
        return cleaned.replace(",", "")
    if cleaned.count(".") > 1:
        return cleaned.replace(".", "")
    return cleaned


def parse_money_safe(value: object) -> Decimal:
    """Versión tolerante de parse_money: devuelve Decimal("0") ante errores.

    Acepta también números ya convertidos (int, float, Decimal), que es lo
    que llega cuando un reparto manual se rellena desde un movimiento
    guardado en lugar de desde el formulario.

    Ejemplos:
        >>> parse_money_safe("120.00")
        Decimal('120.00')
        >>> parse_money_safe("abc")
        Decimal('0')
        >>> parse_money_safe(None)
        Decimal('0')
        >>> parse_money_safe(80)
        Decimal('80')
    """
    if value is None or isinstance(value, bool):
        return CERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else CERO
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        # repr evita arrastrar la expansión binaria completa del float
        return parse_money_safe(repr(value))
    if not isinstance(value, str) or value.strip() in ("", "-", "N/A", "n/a"):
        return CERO

    try:
        return parse_money(value)
    except ValueError:
        return CERO


def is_balanced(total: Decimal, repartido: Decimal) -> bool:
    """Indica si la suma repartida coincide con el total dentro de la tolerancia.

    Ejemplos:
        >>> is_balanced(Decimal("200"), Decimal("199.99"))
        True
        >>> is_balanced(Decimal("200"), Decimal("199.98"))
        False
    """
    return abs(total - repartido) < TOLERANCIA_CUADRE


def format_money(amount: Decimal) -> str:
    """Formatea un Decimal al estilo español, para consola y bitácora.

    El formato de las celdas exportadas NO pasa por aquí: las tablas planas
    llevan Decimal y el formato lo decide el escritor.

    Ejemplos:
        >>> format_money(Decimal("1234567.891"))
        '1.234.567,89 €'
        >>> format_money(Decimal("-300"))
        '-300,00 €'
    """
    amount = amount.quantize(Decimal("0.01"))
    texto = f"{abs(amount):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    signo = "-" if amount < 0 else ""
    return f"{signo}{texto} €"
