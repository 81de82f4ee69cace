"""
Excepciones de dominio del sistema de ventas.

Las entidades lanzan estas excepciones; la capa de servicio las traduce
a HTTPException con el código de estado correspondiente.
"""


class DomainException(Exception):
    """Base para todos los errores de dominio"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BusinessRuleException(DomainException):
    """Se viola una regla de negocio (cantidades, descuentos)"""
