"""Tests para el servicio de ferias y presupuestos."""

from datetime import date
from decimal import Decimal

import pytest

from conftest import hacer_cliente
from feria_control.domain.exceptions import ClienteNoEncontradoError, FeriaNoEncontradaError
from feria_control.domain.models import EstadoFeria, PartidaGasto, Presupuesto
from feria_control.domain.services.fair_service import FairService, slugify


@pytest.fixture
def servicio(storage, recording_logger, reloj):
    return FairService(storage, recording_logger, now=reloj)


def test_slugify():
    assert slugify("  Fitur  Madrid ") == "FITUR-MADRID"


class TestListFairs:
    def test_activas_por_defecto(self, servicio):
        assert [f.id for f in servicio.list_fairs()] == ["FITUR-2025", "IFEMA-2025"]

    def test_archivadas_aparte(self, servicio):
        servicio.toggle_archive("IFEMA-2025")
        assert [f.id for f in servicio.list_fairs()] == ["FITUR-2025"]
        assert [f.id for f in servicio.list_fairs(archivadas=True)] == ["IFEMA-2025"]

    def test_sin_fecha_no_pasa_filtro_de_anio(self, servicio):
        assert servicio.list_fairs(anio=2025) == []

    def test_filtro_de_anio_y_mes(self, servicio):
        servicio.create_fair("Mobile World", hoy=date(2026, 2, 1))
        assert [f.id for f in servicio.list_fairs(anio=2026)] == ["MOBILE-WORLD-2026"]
        assert [f.id for f in servicio.list_fairs(anio=2026, mes=2)] == ["MOBILE-WORLD-2026"]
        assert servicio.list_fairs(mes=3) == []
        assert servicio.available_years() == [2026]


class TestCreateFair:
    def test_crea_feria_activa(self, servicio, storage, recording_logger):
        feria = servicio.create_fair("Mobile World", hoy=date(2026, 2, 1))

        assert feria.id == "MOBILE-WORLD-2026"
        assert feria.nombre == "Mobile World"
        assert feria.estado is EstadoFeria.ACTIVA
        assert feria.clientes == []
        assert storage.load().buscar_feria("MOBILE-WORLD-2026") is not None
        assert ("feria", "MOBILE-WORLD-2026", "creada") in recording_logger.eventos

    def test_anio_por_defecto_del_reloj(self, servicio):
        assert servicio.create_fair("Nueva").id == "NUEVA-2025"

    def test_clona_clientes_sin_movimientos(self, servicio):
        feria = servicio.create_fair("Fitur", fuente_id="FITUR-2025", hoy=date(2026, 1, 10))

        assert feria.id == "FITUR-2026"
        assert [c.nombre for c in feria.clientes] == ["ACME", "GLOBEX"]
        assert all(c.id.startswith(f"{c.nombre}-") for c in feria.clientes)
        assert feria.clientes[0].presupuesto.estimado_en("MONTAJE") == Decimal("1000")
        assert feria.movimientos == []

    def test_fuente_desconocida_se_ignora(self, servicio):
        assert servicio.create_fair("Otra", fuente_id="NOPE", hoy=date(2026, 1, 1)).clientes == []

    def test_existente_se_devuelve_sin_guardar(self, servicio, storage):
        feria = servicio.create_fair("Fitur", hoy=date(2025, 5, 5))
        assert feria.id == "FITUR-2025"
        assert len(feria.clientes) == 2
        assert storage.saves == 0

    def test_nombre_vacio_lanza_error(self, servicio):
        with pytest.raises(ValueError):
            servicio.create_fair("   ")


class TestArchivado:
    def test_archiva_y_reactiva(self, servicio, recording_logger):
        assert servicio.toggle_archive("FITUR-2025") is EstadoFeria.ARCHIVADA
        assert servicio.toggle_archive("FITUR-2025") is EstadoFeria.ACTIVA
        assert [e[2] for e in recording_logger.de_tipo("feria")] == ["archivada", "reactivada"]

    def test_feria_desconocida(self, servicio):
        with pytest.raises(FeriaNoEncontradaError):
            servicio.toggle_archive("NOPE")


class TestClientes:
    def test_reemplaza_clientes(self, servicio, storage):
        servicio.save_clients("FITUR-2025", [hacer_cliente("SOLO", {"SSFF": "10"})])
        assert [c.id for c in storage.load().buscar_feria("FITUR-2025").clientes] == ["SOLO"]

    def test_alta_en_feria_existente(self, servicio, storage):
        presupuesto = Presupuesto(gastos=[PartidaGasto("GRAFICA", "Vinilos", Decimal("90"))])
        cliente = servicio.add_client_budget("fitur", "Nuevo cliente", presupuesto)

        assert cliente.id == "NUEVO-CLIENTE"
        assert cliente.nombre == "NUEVO CLIENTE"
        assert cliente.estado == "Pending"
        feria = storage.load().buscar_feria("FITUR-2025")
        assert feria.buscar_cliente("NUEVO-CLIENTE").presupuesto == presupuesto

    def test_alta_crea_feria_en_planificacion(self, servicio, storage):
        servicio.add_client_budget("Expo Nueva", "Acme", Presupuesto(), fecha=date(2026, 6, 1))

        feria = storage.load().buscar_feria("EXPO-NUEVA")
        assert feria.nombre == "EXPO NUEVA"
        assert feria.estado is EstadoFeria.PLANIFICACION
        assert feria.fecha == date(2026, 6, 1)

    def test_borrar_cliente(self, servicio, storage):
        servicio.delete_client("FITUR-2025", "GLOBEX")
        feria = storage.load().buscar_feria("FITUR-2025")
        assert [c.id for c in feria.clientes] == ["ACME"]
        # Los movimientos no se tocan
        assert feria.buscar_movimiento("EXP-1").importe_para("GLOBEX") == Decimal("-100")

    def test_borrar_cliente_desconocido(self, servicio):
        with pytest.raises(ClienteNoEncontradoError):
            servicio.delete_client("FITUR-2025", "NADIE")
