"""
Backend Index Duel: espejo local del catalogo de cartas y sincronizacion movil.
"""

__version__ = "1.0.0"
