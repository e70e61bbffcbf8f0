"""
Utilidades compartidas del dominio.

Funciones sin dependencias externas, usadas por los modelos y los
servicios de reparto, agregación e informes.

Uso:
    from feria_control.domain.shared.money import parse_money, parse_money_safe
    from feria_control.domain.shared.categories import CATEGORIAS_ESTANDAR, normalize_category
"""
