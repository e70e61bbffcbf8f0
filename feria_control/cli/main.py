"""
Punto de entrada CLI: feria-control.

Uso:
    # Listar ferias activas de 2025
    feria-control ferias --anio 2025

    # Imputar una factura de montaje de 300 € a dos clientes (proporcional)
    feria-control imputar FITUR-2025 --partida MONTAJE --importe -300 --clientes ACME,GLOBEX

    # Reparto manual; si no cuadra, repetir con --confirmar
    feria-control imputar FITUR-2025 --partida GRAFICA --importe -200 \\
        --clientes ACME,GLOBEX --manual ACME=-120 GLOBEX=-80

    # Venta de 500 € a un cliente
    feria-control imputar FITUR-2025 --tipo venta --importe 500 --clientes ACME

    # Matriz de presupuesto de una feria, o global de todas las ferias
    feria-control informe --feria FITUR-2025
    feria-control informe --fuente real --orden TOTAL --desc

    # Comparativa con % de ejecución por partida
    feria-control comparativo FITUR-2025 --pct MONTAJE=80 CARPINTERIA=50

    # Copia de todos los movimientos de todas las ferias
    feria-control backup

Este módulo es el ÚNICO lugar donde se ensamblan los componentes:
- Crea las instancias concretas (JsonFileStorage, ExcelWriter, ConsoleLogger).
- Las inyecta en los servicios.
- Ejecuta el subcomando.

No contiene lógica de negocio, solo "fontanería" (wiring).
"""

import argparse
import sys
from dataclasses import dataclass, replace
from datetime import date, datetime
from pathlib import Path

from feria_control.adapters.output.loggers.console_logger import ConsoleLogger
from feria_control.adapters.output.writers.excel_writer import ExcelWriter
from feria_control.adapters.storage.json_file_storage import JsonFileStorage
from feria_control.domain.exceptions import FeriaControlError
from feria_control.domain.models.informe import FuenteMatriz, ModoInforme, TablaPlana
from feria_control.domain.models.movimiento_real import ModoReparto, TipoMovimiento
from feria_control.domain.services import ledger_aggregator, report_builder
from feria_control.domain.services.fair_service import FairService
from feria_control.domain.services.imputation_service import ImputationService, SolicitudImputacion
from feria_control.domain.shared.money import format_money
from feria_control.infrastructure.config import AppConfig, load_config
from feria_control.infrastructure.logging_setup import setup_logging

EXIT_ERROR = 1
EXIT_CONFIRMACION = 2

_TIPOS = {"gasto": TipoMovimiento.GASTO, "venta": TipoMovimiento.INGRESO}
_FUENTES = {"presupuesto": FuenteMatriz.PRESUPUESTO, "real": FuenteMatriz.REAL}


def main(argv: list[str] | None = None) -> None:
    """Punto de entrada principal del CLI."""
    args = _parse_args(argv)

    try:
        config = load_config(args.env_file)
    except ValueError as e:
        print(f"❌ Configuración no válida: {e}", file=sys.stderr)
        sys.exit(EXIT_ERROR)
    setup_logging(args.log_level or config.log_level)

    # --- Ensamblar componentes ---
    db_path = Path(args.db) if args.db else config.storage.db_path
    output_dir = Path(args.output_dir) if args.output_dir else config.output.output_dir

    storage = JsonFileStorage(db_path)
    logger = ConsoleLogger()
    contexto = _Contexto(
        config=config,
        storage=storage,
        logger=logger,
        writer=ExcelWriter(),
        fairs=FairService(storage, logger),
        imputacion=ImputationService(storage, logger),
        output_dir=output_dir,
    )

    try:
        codigo = args.handler(contexto, args)
    except FeriaControlError as e:
        logger.log_error(args.comando, e)
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(EXIT_ERROR)

    if codigo:
        sys.exit(codigo)


@dataclass
class _Contexto:
    """Componentes ya ensamblados que reciben los subcomandos."""

    config: AppConfig
    storage: JsonFileStorage
    logger: ConsoleLogger
    writer: ExcelWriter
    fairs: FairService
    imputacion: ImputationService
    output_dir: Path


# =================================================================
# Subcomandos
# =================================================================


def _cmd_ferias(ctx: _Contexto, args: argparse.Namespace) -> int:
    ferias = ctx.fairs.list_fairs(archivadas=args.archivadas, anio=args.anio, mes=args.mes)
    ctx.logger.log_dataset_loaded(len(ferias))

    if not ferias:
        print("No hay ferias que cumplan el filtro.")
        return 0

    for feria in ferias:
        fecha = feria.fecha.isoformat() if feria.fecha else "-"
        print(
            f"{feria.id:<30} {feria.nombre:<30} {feria.estado.value:<9} {fecha:<10} "
            f"{len(feria.clientes):>3} clientes  {len(feria.movimientos):>4} movimientos"
        )
    return 0


def _cmd_imputar(ctx: _Contexto, args: argparse.Namespace) -> int:
    solicitud = SolicitudImputacion(
        feria_id=args.feria,
        tipo=_TIPOS[args.tipo],
        categoria=args.partida or "",
        importe_total=args.importe,
        seleccionados=tuple(_split_csv(args.clientes)),
        modo=ModoReparto.MANUAL if args.manual else ModoReparto.PROPORCIONAL,
        valores_manuales=dict(args.manual or []),
        fecha=args.fecha,
        proveedor=args.proveedor or "",
        concepto=args.concepto or "",
        movimiento_id=args.id,
    )
    resultado = ctx.imputacion.save(solicitud, confirmado=args.confirmar)
    previa = resultado.previsualizacion

    print(f"Importe: {format_money(previa.importe)}")
    for cliente_id, importe in previa.reparto.reparto.items():
        print(f"  {cliente_id:<30} {format_money(importe):>16}")
    print(f"  {'Repartido':<30} {format_money(previa.reparto.total_repartido):>16}")

    for aviso in previa.describir_advertencias():
        print(f"⚠️  {aviso}")

    if not resultado.guardado:
        print("No se ha guardado. Repita el comando con --confirmar para guardarlo igualmente.")
        return EXIT_CONFIRMACION

    accion = "actualizado" if resultado.editado else "guardado"
    print(f"✅ Movimiento {resultado.movimiento.id} {accion}")
    return 0


def _cmd_informe(ctx: _Contexto, args: argparse.Namespace) -> int:
    dataset = ctx.storage.load()
    ctx.logger.log_dataset_loaded(len(dataset.ferias))

    clientes = ledger_aggregator.resolve_clients(
        dataset,
        feria_id=args.feria,
        seleccion=_split_csv(args.clientes) or None,
        incluir_archivados=args.archivados,
    )
    modo = ModoInforme.FERIA if args.feria else ModoInforme.GLOBAL
    matriz = report_builder.build_matrix(clientes, modo=modo, fuente=_FUENTES[args.fuente])
    matriz = replace(matriz, filas=tuple(report_builder.sort_matrix_rows(matriz.filas, args.orden, args.desc)))

    tabla = report_builder.matrix_to_table(matriz)
    _imprimir_tabla(tabla)

    nombre = f"Informe_{modo.value}_{args.feria or 'GLOBAL'}.xlsx"
    return _exportar(ctx, [tabla], nombre)


def _cmd_comparativo(ctx: _Contexto, args: argparse.Namespace) -> int:
    dataset = ctx.storage.load()
    ctx.logger.log_dataset_loaded(len(dataset.ferias))

    clientes = ledger_aggregator.resolve_clients(
        dataset,
        feria_id=args.feria,
        seleccion=[args.cliente] if args.cliente else None,
    )
    comparativa = report_builder.build_comparison(
        clientes,
        pcts_ejecucion=dict(args.pct or []),
        mostrar_estandar=args.estandar,
    )
    if args.orden:
        filas = report_builder.sort_comparison_rows(comparativa.filas, args.orden, args.desc)
        comparativa = replace(comparativa, filas=tuple(filas))

    tabla = report_builder.comparison_to_table(comparativa)
    _imprimir_tabla(tabla)

    if args.detalle:
        for linea in ledger_aggregator.detail_lines(args.detalle, clientes):
            mov = linea.movimiento
            fecha = mov.fecha.isoformat() if mov.fecha else "-"
            print(f"  {fecha:<10} {mov.proveedor or '-':<25} {mov.concepto:<30} {format_money(linea.importe_asignado):>16}")

    return _exportar(ctx, [tabla], f"Comparativa_{args.feria}.xlsx")


def _cmd_backup(ctx: _Contexto, args: argparse.Namespace) -> int:
    dataset = ctx.storage.load()
    ctx.logger.log_dataset_loaded(len(dataset.ferias))

    tabla = report_builder.expenses_backup_table(dataset)
    print(f"{len(tabla.filas)} movimientos en {len(dataset.ferias)} ferias")
    return _exportar(ctx, [tabla], f"Backup_Completo_{date.today().isoformat()}.xlsx")


# =================================================================
# Auxiliares
# =================================================================


def _exportar(ctx: _Contexto, tablas: list[TablaPlana], nombre: str) -> int:
    ruta = ctx.writer.write(tablas, ctx.output_dir / nombre)
    ctx.logger.log_export_complete(ruta, len(tablas))
    print(f"\n📁 Excel generado: {ruta}")
    return 0


def _imprimir_tabla(tabla: TablaPlana) -> None:
    anchos = [max(12, len(c)) for c in tabla.columnas]
    print("  ".join(c.ljust(a) for c, a in zip(tabla.columnas, anchos)))
    for fila in tabla.filas:
        celdas = [v if isinstance(v, str) else f"{v:,.2f}" for v in fila]
        print("  ".join(str(c).ljust(a) for c, a in zip(celdas, anchos)))


def _split_csv(texto: str | None) -> list[str]:
    """'A, B,,C' → ['A', 'B', 'C']."""
    if not texto:
        return []
    return [p.strip() for p in texto.split(",") if p.strip()]


def _parse_par(texto: str) -> tuple[str, str]:
    """'A=120' → ('A', '120')."""
    clave, separador, valor = texto.partition("=")
    if not separador or not clave.strip():
        raise argparse.ArgumentTypeError(f"Se esperaba CLAVE=VALOR, se recibió '{texto}'")
    return clave.strip(), valor.strip()


def _parse_fecha(texto: str) -> date:
    try:
        return datetime.strptime(texto, "%Y-%m-%d").date()
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Fecha no válida (AAAA-MM-DD): '{texto}'") from e


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parsea los argumentos de línea de comandos."""
    parser = argparse.ArgumentParser(
        prog="feria-control",
        description="Control de presupuestos y gastos reales de ferias",
        epilog="Ejemplo: feria-control informe --feria FITUR-2025",
    )
    parser.add_argument("--db", help="Archivo JSON del dataset (sobrescribe FERIAS_DB_PATH)")
    parser.add_argument(
        "-o",
        "--output-dir",
        dest="output_dir",
        help="Directorio de salida de los Excel (sobrescribe FERIAS_OUTPUT_DIR)",
    )
    parser.add_argument("--log-level", dest="log_level", help="Nivel de logging (sobrescribe FERIAS_LOG_LEVEL)")
    parser.add_argument("--env-file", dest="env_file", help="Archivo .env a cargar")

    sub = parser.add_subparsers(dest="comando", required=True)

    # --- ferias ---
    p = sub.add_parser("ferias", help="Lista las ferias")
    p.add_argument("--archivadas", action="store_true", help="Muestra solo las archivadas")
    p.add_argument("--anio", type=int)
    p.add_argument("--mes", type=int, choices=range(1, 13), metavar="1-12")
    p.set_defaults(handler=_cmd_ferias)

    # --- imputar ---
    p = sub.add_parser("imputar", help="Imputa un gasto o una venta real")
    p.add_argument("feria", help="Id de la feria")
    p.add_argument("--tipo", choices=sorted(_TIPOS), default="gasto")
    p.add_argument("--partida", help="Partida del gasto (las ventas van siempre a VENTA)")
    p.add_argument("--importe", required=True, help="Importe con signo; los gastos en negativo")
    p.add_argument("--clientes", required=True, help="Ids de clientes separados por comas")
    p.add_argument("--manual", nargs="+", type=_parse_par, metavar="CLIENTE=IMPORTE", help="Reparto manual")
    p.add_argument("--fecha", type=_parse_fecha, help="AAAA-MM-DD")
    p.add_argument("--proveedor")
    p.add_argument("--concepto")
    p.add_argument("--id", help="Id de un movimiento existente para editarlo")
    p.add_argument("--confirmar", action="store_true", help="Guarda aunque haya avisos")
    p.set_defaults(handler=_cmd_imputar)

    # --- informe ---
    p = sub.add_parser("informe", help="Matriz de partidas por cliente")
    p.add_argument("--feria", help="Id de la feria. Sin feria: comparativa global")
    p.add_argument("--clientes", help="Claves FERIA::CLIENTE (o ids con --feria) separadas por comas")
    p.add_argument("--fuente", choices=sorted(_FUENTES), default="presupuesto")
    p.add_argument("--orden", default=report_builder.COLUMNA_CATEGORIA, help="CATEGORIA, TOTAL o clave de cliente")
    p.add_argument("--desc", action="store_true", help="Orden descendente")
    p.add_argument("--archivados", action="store_true", help="Incluye clientes archivados")
    p.set_defaults(handler=_cmd_informe)

    # --- comparativo ---
    p = sub.add_parser("comparativo", help="Presupuesto frente a coste real por partida")
    p.add_argument("feria", help="Id de la feria")
    p.add_argument("--cliente", help="Limita a un cliente")
    p.add_argument("--pct", nargs="+", type=_parse_par, metavar="PARTIDA=PCT", help="%% de ejecución por partida")
    p.add_argument("--estandar", action="store_true", help="Muestra siempre las partidas estándar")
    p.add_argument(
        "--orden",
        choices=[report_builder.COLUMNA_CATEGORIA, *sorted(report_builder.CAMPOS_COMPARATIVA)],
        help="Columna de orden",
    )
    p.add_argument("--desc", action="store_true", help="Orden descendente")
    p.add_argument("--detalle", metavar="PARTIDA", help="Lista los movimientos de una partida")
    p.set_defaults(handler=_cmd_comparativo)

    # --- backup ---
    p = sub.add_parser("backup", help="Exporta todos los movimientos de todas las ferias")
    p.set_defaults(handler=_cmd_backup)

    return parser.parse_args(argv)


if __name__ == "__main__":
    main()
