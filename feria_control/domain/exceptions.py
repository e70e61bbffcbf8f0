"""
Excepciones de dominio del proyecto feria-control.

Las excepciones propias permiten que quien llama (CLI, capa web) distinga
entre "la feria no existe" y "no se pudo guardar el dataset" y reaccione
distinto en cada caso: un aviso al operador frente a un fallo que puede
hacerle perder trabajo sin guardar.

Jerarquía:
    FeriaControlError
    ├── PersistenciaError          → Falló la carga o el guardado del dataset
    ├── FeriaNoEncontradaError     → Se pidió mutar una feria que no existe
    ├── ClienteNoEncontradoError   → Se pidió mutar un cliente que no existe
    ├── ImputacionInvalidaError    → La imputación no es accionable
    └── ExportError                → Falló la generación de la exportación

Los cálculos (reparto, agregación, informes) NO lanzan excepciones ante
referencias obsoletas: un id desconocido simplemente aporta cero.
"""


class FeriaControlError(Exception):
    """Excepción base del proyecto. Todas las demás heredan de esta.

    Permite capturar cualquier error del proyecto con un solo
    `except FeriaControlError` en el punto de entrada.
    """


class PersistenciaError(FeriaControlError):
    """Se lanza cuando el colaborador de almacenamiento no puede leer o
    escribir el dataset.

    Esto puede pasar porque:
    - El archivo JSON está corrupto o tiene una estructura inesperada.
    - No hay permisos de escritura o el disco está lleno.
    - El backend remoto no responde.

    Nunca se silencia: el operador podría perder su trabajo sin guardar.
    """

    def __init__(self, operacion: str, causa: str):
        self.operacion = operacion
        self.causa = causa
        super().__init__(f"Fallo de persistencia ({operacion}): {causa}")


class FeriaNoEncontradaError(FeriaControlError):
    """Se lanza cuando un servicio intenta modificar una feria inexistente."""

    def __init__(self, feria_id: str):
        self.feria_id = feria_id
        super().__init__(f"Feria no encontrada: '{feria_id}'")


class ClienteNoEncontradoError(FeriaControlError):
    """Se lanza cuando se intenta modificar un cliente inexistente."""

    def __init__(self, feria_id: str, cliente_id: str):
        self.feria_id = feria_id
        self.cliente_id = cliente_id
        super().__init__(f"Cliente '{cliente_id}' no encontrado en la feria '{feria_id}'")


class ImputacionInvalidaError(FeriaControlError):
    """Se lanza cuando una imputación no se puede ejecutar.

    Ejemplos:
    - No hay ningún cliente seleccionado para repartir.
    - No se indicó importe.
    """

    def __init__(self, motivo: str):
        self.motivo = motivo
        super().__init__(f"Imputación no válida: {motivo}")


class ExportError(FeriaControlError):
    """Se lanza cuando falla la generación del archivo de exportación.

    Esto puede pasar porque:
    - No hay permisos de escritura en el directorio de salida.
    - No hay tablas que exportar.
    - El motor de Excel rechaza los datos.
    """

    def __init__(self, ruta_salida: str, causa: str):
        self.ruta_salida = ruta_salida
        self.causa = causa
        super().__init__(f"Error generando salida en '{ruta_salida}': {causa}")
