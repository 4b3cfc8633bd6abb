"""
Utilidades, constantes y excepciones compartidas por todas las capas.
"""
