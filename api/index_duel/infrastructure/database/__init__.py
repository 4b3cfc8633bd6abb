"""
Configuracion de base de datos.

Importa todos los modelos para que se registren con Base
antes de crear las tablas.
"""
from index_duel.infrastructure.database.models import (
    CardModel,
    CardSetModel,
    CardImageModel,
    CardPriceModel
)
