"""
Tests para feria_control.domain.shared.money

Los formatos vienen de lo que teclea el operador en el formulario de
imputación y de lo que traen los datos importados de hojas de cálculo:
- "1,234.56"   → separador de miles con coma
- "1.234,56 €" → formato español, el mismo que imprime format_money
- "120,50"     → coma decimal tecleada a mano
- "-300"       → gasto en negativo
- 80, 12.5     → números ya convertidos desde JSON
"""

from decimal import Decimal

import pytest

from feria_control.domain.shared.money import (
    TOLERANCIA_CUADRE,
    format_money,
    is_balanced,
    parse_money,
    parse_money_safe,
)


class TestParseMoney:
    """Pruebas para parse_money (versión estricta, lanza excepciones)."""

    def test_monto_simple(self):
        assert parse_money("1234.56") == Decimal("1234.56")

    def test_monto_con_comas(self):
        assert parse_money("1,234,567.89") == Decimal("1234567.89")

    def test_con_simbolo_euro(self):
        assert parse_money("1,234.56 €") == Decimal("1234.56")

    def test_con_simbolo_dolar_delante(self):
        assert parse_money("$1,234.56") == Decimal("1234.56")

    def test_con_espacio_no_separable(self):
        assert parse_money("1 234.56") == Decimal("1234.56")

    def test_negativo(self):
        assert parse_money("-300") == Decimal("-300")

    def test_coma_decimal(self):
        assert parse_money("120,50") == Decimal("120.50")

    def test_formato_espanol(self):
        assert parse_money("1.234,56") == Decimal("1234.56")

    def test_coma_de_miles_con_punto_decimal(self):
        assert parse_money("1,234.56") == Decimal("1234.56")

    def test_coma_seguida_de_tres_cifras_es_de_miles(self):
        assert parse_money("1,234") == Decimal("1234")

    def test_varios_puntos_son_de_miles(self):
        assert parse_money("1.234.567") == Decimal("1234567")

    def test_lee_lo_que_imprime_format_money(self):
        importe = Decimal("-1234567.89")
        assert parse_money(format_money(importe)) == importe

    def test_con_espacios_alrededor(self):
        assert parse_money("  120.00  ") == Decimal("120.00")

    def test_precision_decimal_vs_float(self):
        """0.1 + 0.2 es exacto con Decimal."""
        assert parse_money("0.10") + parse_money("0.20") == Decimal("0.30")

    # --- Errores ---

    def test_texto_vacio_lanza_error(self):
        with pytest.raises(ValueError, match="vacío"):
            parse_money("   ")

    def test_solo_simbolo_lanza_error(self):
        with pytest.raises(ValueError):
            parse_money("€")

    def test_texto_no_numerico_lanza_error(self):
        with pytest.raises(ValueError, match="convertir"):
            parse_money("abc")

    def test_infinito_lanza_error(self):
        with pytest.raises(ValueError, match="finito"):
            parse_money("Infinity")

    def test_no_str_lanza_type_error(self):
        with pytest.raises(TypeError):
            parse_money(120)  # type: ignore[arg-type]


class TestParseMoneySafe:
    """Pruebas para parse_money_safe (versión tolerante)."""

    def test_texto_valido(self):
        assert parse_money_safe("120.00") == Decimal("120.00")

    def test_texto_ilegible_es_cero(self):
        assert parse_money_safe("doce euros") == Decimal("0")

    @pytest.mark.parametrize("valor", [None, "", "   ", "-", "N/A"])
    def test_vacios_son_cero(self, valor):
        assert parse_money_safe(valor) == Decimal("0")

    def test_coma_decimal_negativa(self):
        assert parse_money_safe("-120,50") == Decimal("-120.50")

    def test_entero(self):
        assert parse_money_safe(80) == Decimal("80")

    def test_float_sin_arrastre_binario(self):
        assert parse_money_safe(0.1) == Decimal("0.1")

    def test_decimal_pasa_tal_cual(self):
        assert parse_money_safe(Decimal("-12.5")) == Decimal("-12.5")

    def test_decimal_nan_es_cero(self):
        assert parse_money_safe(Decimal("NaN")) == Decimal("0")

    def test_booleano_es_cero(self):
        assert parse_money_safe(True) == Decimal("0")


class TestIsBalanced:
    def test_exacto(self):
        assert is_balanced(Decimal("200"), Decimal("200.00"))

    def test_dentro_de_tolerancia(self):
        assert is_balanced(Decimal("200"), Decimal("199.99"))

    def test_en_el_limite_no_cuadra(self):
        """La tolerancia es estricta: una diferencia de 0.02 ya descuadra."""
        assert not is_balanced(Decimal("200"), Decimal("200") - TOLERANCIA_CUADRE)

    def test_negativos(self):
        assert is_balanced(Decimal("-300"), Decimal("-299.995"))


class TestFormatMoney:
    def test_formato_espanol(self):
        assert format_money(Decimal("1234567.891")) == "1.234.567,89 €"

    def test_negativo(self):
        assert format_money(Decimal("-300")) == "-300,00 €"

    def test_cero(self):
        assert format_money(Decimal("0")) == "0,00 €"
