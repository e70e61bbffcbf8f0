"""
Tests para el constructor de informes.

Comparativa: presupuesto 1000 ejecutado al 80 % con 750 de coste real da
valor avance 800 y desviación +50 (ahorro).

Matriz de ejemplo (feria F, desde presupuesto):
    ACME    MONTAJE 1000,          venta 3000
    GLOBEX  MONTAJE 500, STAND 200, venta 1000
    TOTAL        1000   700   1700   100
    BENEFICIO    2000   300   2300   57.5
    % BENEFICIO  66.67  30    57.5
"""

from decimal import Decimal

import pytest

from conftest import hacer_cliente, hacer_gasto
from feria_control.domain.models import Dataset, Feria, FuenteMatriz, ModoInforme
from feria_control.domain.services import report_builder as rb
from feria_control.domain.services.ledger_aggregator import resolve_clients

DOS = Decimal("0.01")


def _redondear(fila):
    return [c.quantize(DOS) if isinstance(c, Decimal) else c for c in fila]


@pytest.fixture
def feria_ejemplo() -> Feria:
    return Feria(
        id="F",
        nombre="F",
        clientes=[
            hacer_cliente("ACME", {"MONTAJE": "1000"}, ingresos="3000"),
            hacer_cliente("GLOBEX", {"MONTAJE": "500", "STAND": "200"}, ingresos="1000"),
        ],
        movimientos=[hacer_gasto("EXP-1", "AZAFATAS", {"ACME": "-50"})],
    )


@pytest.fixture
def refs_ejemplo(feria_ejemplo):
    return resolve_clients(Dataset(ferias=[feria_ejemplo]), "F")


class TestClampExecutionPct:
    @pytest.mark.parametrize(
        "entrada, esperado",
        [("80", "80"), (500, "100"), ("-10", "0"), ("abc", "0"), ("", "0"), (12.5, "12.5")],
    )
    def test_limites(self, entrada, esperado):
        assert rb.clamp_execution_pct(entrada) == Decimal(esperado)


class TestBuildComparison:
    @pytest.fixture
    def refs(self):
        feria = Feria(
            id="F",
            nombre="F",
            clientes=[hacer_cliente("A", {"MONTAJE": "1000", "GRAFICA": "400"}, ingresos="2000")],
            movimientos=[hacer_gasto("EXP-1", "MONTAJE", {"A": "-750"})],
        )
        return resolve_clients(Dataset(ferias=[feria]))

    def test_valor_ganado_y_desviacion(self, refs):
        comparativa = rb.build_comparison(refs, {"montaje": "80"})
        montaje = next(f for f in comparativa.filas if f.categoria == "MONTAJE")
        assert montaje.pct_ejecucion == Decimal("80")
        assert montaje.valor_avance == Decimal("800")
        assert montaje.coste_real == Decimal("750")
        assert montaje.desviacion == Decimal("50")
        assert montaje.es_ahorro
        assert montaje.pct_gastado == Decimal("75")

    def test_sin_porcentaje_va_al_cien(self, refs):
        comparativa = rb.build_comparison(refs)
        grafica = next(f for f in comparativa.filas if f.categoria == "GRAFICA")
        assert grafica.pct_ejecucion == Decimal("100")
        assert grafica.valor_avance == Decimal("400")
        assert grafica.desviacion == Decimal("400")

    def test_porcentaje_fuera_de_rango_se_recorta(self, refs):
        comparativa = rb.build_comparison(refs, {"MONTAJE": "150"})
        assert comparativa.filas[0].pct_ejecucion == Decimal("100")

    def test_venta_no_entra(self, refs):
        comparativa = rb.build_comparison(refs)
        assert [f.categoria for f in comparativa.filas] == ["MONTAJE", "GRAFICA"]

    def test_totales(self, refs):
        comparativa = rb.build_comparison(refs, {"MONTAJE": "80"})
        assert comparativa.total_presupuesto == Decimal("1400")
        assert comparativa.total_valor_avance == Decimal("1200")
        assert comparativa.total_desviacion == Decimal("450")

    def test_tabla_con_fila_de_totales(self, refs):
        tabla = rb.comparison_to_table(rb.build_comparison(refs, {"MONTAJE": "80"}))
        assert tabla.nombre_hoja == "Comparativa"
        assert tabla.columnas == rb.COLUMNAS_COMPARATIVA
        assert tabla.filas[-1] == (
            "TOTALES",
            Decimal("1400"),
            "",
            Decimal("1200"),
            Decimal("750"),
            Decimal("450"),
        )


class TestMatrizPorFeria:
    def test_cabecera(self, refs_ejemplo):
        tabla = rb.matrix_to_table(rb.build_matrix(refs_ejemplo))
        assert tabla.columnas == ("Partida / Concepto", "ACME (F)", "GLOBEX (F)", "TOTAL", "%")

    def test_orden_de_filas(self, refs_ejemplo):
        tabla = rb.matrix_to_table(rb.build_matrix(refs_ejemplo))
        etiquetas = [fila[0] for fila in tabla.filas]
        assert etiquetas[:13] == ["VENTA", "CARPINTERIA", "MONTAJE", "MATERIAL", "TRANSPORTE",
                                  "GASTOS VIAJE", "MOB ALQ", "ELECTRICIDAD", "SSFF", "MOB COMPRA",
                                  "GRAFICA", "GASTOS GG", "OTROS"]
        assert etiquetas[13:] == ["STAND", "TOTAL", "BENEFICIO", "% BENEFICIO"]

    def test_partida_libre_a_cero_no_se_exporta(self, refs_ejemplo):
        tabla = rb.matrix_to_table(rb.build_matrix(refs_ejemplo))
        assert "AZAFATAS" not in [fila[0] for fila in tabla.filas]

    def test_fila_de_partida_con_total_y_peso(self, refs_ejemplo):
        tabla = rb.matrix_to_table(rb.build_matrix(refs_ejemplo))
        montaje = next(f for f in tabla.filas if f[0] == "MONTAJE")
        assert _redondear(montaje) == ["MONTAJE", Decimal("1000.00"), Decimal("500.00"),
                                       Decimal("1500.00"), Decimal("88.24")]

    def test_filas_finales(self, refs_ejemplo):
        tabla = rb.matrix_to_table(rb.build_matrix(refs_ejemplo))
        total, beneficio, pct = tabla.filas[-3:]
        assert _redondear(total) == ["TOTAL", Decimal("1000.00"), Decimal("700.00"),
                                     Decimal("1700.00"), Decimal("100.00")]
        assert _redondear(beneficio) == ["BENEFICIO", Decimal("2000.00"), Decimal("300.00"),
                                         Decimal("2300.00"), Decimal("57.50")]
        assert _redondear(pct) == ["% BENEFICIO", Decimal("66.67"), Decimal("30.00"),
                                   Decimal("57.50"), ""]

    def test_desde_movimientos_reales(self, refs_ejemplo):
        matriz = rb.build_matrix(refs_ejemplo, fuente=FuenteMatriz.REAL)
        tabla = rb.matrix_to_table(matriz)
        azafatas = next(f for f in tabla.filas if f[0] == "AZAFATAS")
        assert azafatas[1:4] == (Decimal("50"), Decimal("0"), Decimal("50"))
        total = tabla.filas[-3]
        assert total[1:5] == (Decimal("50"), Decimal("0"), Decimal("50"), Decimal("100"))

    def test_sin_gastos_peso_cero(self):
        feria = Feria(id="V", nombre="V", clientes=[hacer_cliente("A", ingresos="100")])
        tabla = rb.matrix_to_table(rb.build_matrix(resolve_clients(Dataset(ferias=[feria]))))
        assert tabla.filas[-3] == ("TOTAL", Decimal("0"), Decimal("0"), Decimal("0"))


class TestMatrizGlobal:
    def test_sin_columnas_de_total_ni_pct_beneficio(self, dataset):
        matriz = rb.build_matrix(resolve_clients(dataset), modo=ModoInforme.GLOBAL)
        tabla = rb.matrix_to_table(matriz)
        assert tabla.columnas == ("Partida / Concepto", "ACME (FITUR)", "GLOBEX (FITUR)", "ACME (IFEMA)")
        assert [f[0] for f in tabla.filas][-2:] == ["TOTAL", "BENEFICIO"]

    def test_mismo_cliente_en_dos_ferias(self, dataset):
        matriz = rb.build_matrix(resolve_clients(dataset), modo="GLOBAL", fuente="ACTUAL")
        montaje = next(f for f in matriz.filas if f.categoria == "MONTAJE")
        assert montaje.valor("FITUR-2025::ACME") == Decimal("200")
        assert montaje.valor("IFEMA-2025::ACME") == Decimal("700")
        assert matriz.ingresos["FITUR-2025::ACME"] == Decimal("2500")
        assert matriz.ingresos["IFEMA-2025::ACME"] == Decimal("0")


class TestOrdenacion:
    def test_por_total_descendente_empates_en_orden_de_partida(self, refs_ejemplo):
        matriz = rb.build_matrix(refs_ejemplo)
        filas = rb.sort_matrix_rows(matriz.filas, rb.COLUMNA_TOTAL, descendente=True)
        categorias = [f.categoria for f in filas]
        assert categorias[:3] == ["VENTA", "MONTAJE", "STAND"]
        # Los empates a cero conservan el orden estándar
        assert categorias[3:6] == ["CARPINTERIA", "MATERIAL", "TRANSPORTE"]

    def test_por_columna_de_cliente(self, refs_ejemplo):
        matriz = rb.build_matrix(refs_ejemplo)
        filas = rb.sort_matrix_rows(matriz.filas, "F::GLOBEX", descendente=True)
        assert [f.categoria for f in filas[:3]] == ["VENTA", "MONTAJE", "STAND"]

    def test_por_partida_descendente(self, refs_ejemplo):
        matriz = rb.build_matrix(refs_ejemplo)
        filas = rb.sort_matrix_rows(matriz.filas, descendente=True)
        assert filas[0].categoria == "STAND"
        assert filas[-1].categoria == "VENTA"

    def test_comparativa_por_desviacion(self, feria_fitur):
        refs = resolve_clients(Dataset(ferias=[feria_fitur]))
        filas = rb.sort_comparison_rows(rb.build_comparison(refs).filas, "desviacion")
        assert [f.categoria for f in filas] == ["CARPINTERIA", "STAND", "MONTAJE"]

    def test_comparativa_columna_desconocida(self, feria_fitur):
        refs = resolve_clients(Dataset(ferias=[feria_fitur]))
        with pytest.raises(ValueError, match="desconocida"):
            rb.sort_comparison_rows(rb.build_comparison(refs).filas, "proveedor")


class TestBackup:
    def test_todos_los_movimientos_de_todas_las_ferias(self, dataset):
        tabla = rb.expenses_backup_table(dataset)
        assert tabla.nombre_hoja == "Gastos Consolidado"
        assert tabla.columnas == rb.COLUMNAS_BACKUP
        assert len(tabla.filas) == 4
        assert tabla.filas[0] == (
            "FITUR", "", "Proveedor", "Factura EXP-1", "MONTAJE", "EXPENSE", Decimal("-300"), "PROPORTIONAL",
        )
        assert tabla.filas[-1][0] == "IFEMA"

    def test_dataset_vacio(self):
        assert rb.expenses_backup_table(Dataset()).filas == ()
